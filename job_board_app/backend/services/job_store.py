"""
Record store used by the board reconciler.

The reconciler only depends on the four operations of ``JobStore`` and on
``StoreError`` as the failure signal; ``SqlJobStore`` backs them with the
owner-scoped CRUD functions in ``job_tracker``.
"""
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .. import schemas
from . import job_tracker

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """A remote list/insert/update/delete was rejected by the store."""


class JobStore(ABC):
    """Owner-scoped access to persisted job records."""

    @abstractmethod
    async def list_jobs(self, owner_id: int) -> List[schemas.Job]:
        """Return the owner's records, newest first."""

    @abstractmethod
    async def insert_job(self, owner_id: int, draft: schemas.JobCreate) -> schemas.Job:
        """Persist a draft and return the store-assigned record."""

    @abstractmethod
    async def update_job(self, owner_id: int, job_id: int, changes: Dict[str, Any]) -> schemas.Job:
        """Apply ``changes`` to the record matching both ``job_id`` and ``owner_id``."""

    @abstractmethod
    async def delete_job(self, owner_id: int, job_id: int) -> None:
        """Delete the record matching both ``job_id`` and ``owner_id``."""


class SqlJobStore(JobStore):
    """
    ``JobStore`` over a SQLAlchemy session.

    Session work is blocking, so every call runs in the threadpool and the
    event loop stays free while the database round-trip is in progress.
    """

    def __init__(self, db: Session):
        self.db = db

    async def list_jobs(self, owner_id: int) -> List[schemas.Job]:
        rows = await self._run("list", job_tracker.get_all_jobs_for_user, self.db, owner_id=owner_id)
        return [schemas.Job.model_validate(row) for row in rows]

    async def insert_job(self, owner_id: int, draft: schemas.JobCreate) -> schemas.Job:
        row = await self._run("insert", job_tracker.create_job_for_user, self.db, job=draft, owner_id=owner_id)
        return schemas.Job.model_validate(row)

    async def update_job(self, owner_id: int, job_id: int, changes: Dict[str, Any]) -> schemas.Job:
        job_update = schemas.JobUpdate(**changes)
        row = await self._run(
            "update", job_tracker.update_job,
            self.db, job_id=job_id, job_update=job_update, owner_id=owner_id
        )
        if row is None:
            raise StoreError(f"Job {job_id} not found")
        return schemas.Job.model_validate(row)

    async def delete_job(self, owner_id: int, job_id: int) -> None:
        deleted = await self._run("delete", job_tracker.delete_job, self.db, job_id=job_id, owner_id=owner_id)
        if deleted is None:
            raise StoreError(f"Job {job_id} not found")

    async def _run(self, operation: str, func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        try:
            return await run_in_threadpool(func, *args, **kwargs)
        except SQLAlchemyError as e:
            await run_in_threadpool(self.db.rollback)
            logger.error("Job store %s failed: %s", operation, str(e))
            raise StoreError(f"Could not {operation} job record") from e
