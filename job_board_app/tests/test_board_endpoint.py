"""
Test the board endpoints and the SQL-backed job store.
"""
import asyncio

import pytest
from fastapi import status
from sqlalchemy.exc import OperationalError

from job_board_app.backend import schemas
from job_board_app.backend.services import job_tracker
from job_board_app.backend.services.job_store import SqlJobStore, StoreError


def create_job(client, headers, title, job_status="Wishlist"):
    response = client.post(
        "/api/jobs/",
        json={"job_title": title, "company_name": "Acme", "status": job_status},
        headers=headers
    )
    assert response.status_code == status.HTTP_201_CREATED
    return response.json()


def running_loop_in_thread():
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return False
    return True


class TestBoardEndpoints:

    def test_board_has_all_columns(self, test_client, auth_headers):
        create_job(test_client, auth_headers, "Backend Engineer", "Applied")

        response = test_client.get("/api/board", headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        columns = response.json()["columns"]
        assert list(columns) == ["Wishlist", "Applied", "Interviewing", "Offer", "Rejected"]
        assert [job["job_title"] for job in columns["Applied"]] == ["Backend Engineer"]
        assert columns["Offer"] == []

    def test_move_persists_status(self, test_client, auth_headers):
        job = create_job(test_client, auth_headers, "Backend Engineer", "Applied")

        response = test_client.post(
            "/api/board/move",
            json={"job_id": job["id"], "status": "Interviewing"},
            headers=auth_headers
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["job"]["status"] == "Interviewing"
        assert response.json()["notification"] is None
        assert test_client.get(f"/api/jobs/{job['id']}", headers=auth_headers).json()["status"] == "Interviewing"

    def test_move_to_offer_returns_celebration(self, test_client, auth_headers):
        job = create_job(test_client, auth_headers, "Backend Engineer", "Interviewing")

        response = test_client.post(
            "/api/board/move",
            json={"job_id": job["id"], "status": "Offer"},
            headers=auth_headers
        )

        assert response.json()["notification"]["kind"] == "celebration"

    def test_move_unknown_job(self, test_client, auth_headers, other_auth_headers):
        job = create_job(test_client, auth_headers, "Backend Engineer")

        response = test_client.post(
            "/api/board/move",
            json={"job_id": job["id"], "status": "Offer"},
            headers=other_auth_headers
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_move_rejects_unknown_status(self, test_client, auth_headers):
        job = create_job(test_client, auth_headers, "Backend Engineer")

        response = test_client.post(
            "/api/board/move",
            json={"job_id": job["id"], "status": "Ghosted"},
            headers=auth_headers
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_store_failure_rolls_back(self, test_client, auth_headers, monkeypatch):
        job = create_job(test_client, auth_headers, "Backend Engineer", "Applied")

        def failing_update(*args, **kwargs):
            raise OperationalError("UPDATE jobs", {}, Exception("database is locked"))

        monkeypatch.setattr(job_tracker, "update_job", failing_update)

        response = test_client.post(
            "/api/board/move",
            json={"job_id": job["id"], "status": "Rejected"},
            headers=auth_headers
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["job"]["status"] == "Applied"
        assert response.json()["notification"]["kind"] == "error"

    def test_unreadable_store_is_unavailable(self, test_client, auth_headers, monkeypatch):
        def failing_list(*args, **kwargs):
            raise OperationalError("SELECT jobs", {}, Exception("disk I/O error"))

        monkeypatch.setattr(job_tracker, "get_all_jobs_for_user", failing_list)

        response = test_client.get("/api/board", headers=auth_headers)

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert response.json()["detail"] == "Board service is currently unavailable"

    def test_store_work_runs_off_the_event_loop(self, test_client, auth_headers, monkeypatch):
        job = create_job(test_client, auth_headers, "Backend Engineer", "Applied")
        loop_threads = []

        def tracking(func):
            def wrapper(*args, **kwargs):
                loop_threads.append(running_loop_in_thread())
                return func(*args, **kwargs)
            return wrapper

        monkeypatch.setattr(job_tracker, "get_all_jobs_for_user", tracking(job_tracker.get_all_jobs_for_user))
        monkeypatch.setattr(job_tracker, "update_job", tracking(job_tracker.update_job))

        response = test_client.post(
            "/api/board/move",
            json={"job_id": job["id"], "status": "Interviewing"},
            headers=auth_headers
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["job"]["status"] == "Interviewing"
        assert loop_threads == [False, False]

    def test_board_requires_authentication(self, test_client):
        assert test_client.get("/api/board").status_code == status.HTTP_401_UNAUTHORIZED


class TestSqlJobStore:

    def test_insert_list_update_delete(self, test_db_session, test_user):
        store = SqlJobStore(test_db_session)

        async def scenario():
            created = await store.insert_job(test_user.id, schemas.JobCreate(job_title="SRE", company_name="Acme"))
            updated = await store.update_job(test_user.id, created.id, {"status": schemas.JobStatus.OFFER})
            listed = await store.list_jobs(test_user.id)
            await store.delete_job(test_user.id, created.id)
            remaining = await store.list_jobs(test_user.id)
            return created, updated, listed, remaining

        created, updated, listed, remaining = asyncio.run(scenario())

        assert created.owner_id == test_user.id
        assert updated.status == schemas.JobStatus.OFFER
        assert [job.id for job in listed] == [created.id]
        assert remaining == []

    def test_foreign_owner_cannot_write(self, test_db_session, test_user):
        store = SqlJobStore(test_db_session)
        created = asyncio.run(store.insert_job(test_user.id, schemas.JobCreate(job_title="SRE", company_name="Acme")))

        with pytest.raises(StoreError):
            asyncio.run(store.update_job(test_user.id + 1, created.id, {"status": "Offer"}))
        with pytest.raises(StoreError):
            asyncio.run(store.delete_job(test_user.id + 1, created.id))

        assert job_tracker.get_job_by_id(test_db_session, created.id, test_user.id).status == "Wishlist"
