"""
Board state reconciler.

Owns the in-memory list of job records shown on the kanban board. Status
moves are applied locally before the store is asked to persist them, and
reverted if the store rejects the write.

Overlapping moves of the same record are not coordinated: each move captures
the status it replaced and a failing move restores exactly that value, while
the store keeps whichever write it observed last. Between a failed rollback
and the next refresh the board can therefore disagree with the store for
that one record.
"""
import logging
from collections import OrderedDict
from typing import Callable, Dict, List, Optional

from .. import schemas
from .job_store import JobStore, StoreError

logger = logging.getLogger(__name__)

ChangeListener = Callable[[List[schemas.Job]], None]
NotificationListener = Callable[[schemas.Notification], None]


class UnknownJobError(LookupError):
    """The job id is not part of the local board state."""


class BoardReconciler:
    def __init__(
        self,
        store: JobStore,
        owner_id: int,
        jobs: Optional[List[schemas.Job]] = None,
        on_change: Optional[ChangeListener] = None,
        on_notify: Optional[NotificationListener] = None,
    ):
        self.store = store
        self.owner_id = owner_id
        self._jobs: List[schemas.Job] = list(jobs or [])
        self._on_change = on_change
        self._on_notify = on_notify

    @property
    def jobs(self) -> List[schemas.Job]:
        return list(self._jobs)

    def get_job(self, job_id: int) -> schemas.Job:
        for job in self._jobs:
            if job.id == job_id:
                return job
        raise UnknownJobError(f"Job {job_id} is not on the board")

    async def refresh(self) -> Optional[schemas.Notification]:
        """Replace local state with the store's records."""
        try:
            jobs = await self.store.list_jobs(self.owner_id)
        except StoreError as e:
            logger.error("Failed to load jobs for owner %s: %s", self.owner_id, str(e))
            return self._notify("error", "Failed to load your jobs. Please try again.")
        self._set_jobs(jobs)
        return None

    async def apply_move(self, job_id: int, target_status: schemas.JobStatus) -> Optional[schemas.Notification]:
        """
        Move a job to another column.

        The local copy changes (and listeners fire) before the store is awaited.
        On a store failure the status this call replaced is restored.
        """
        target_status = schemas.JobStatus(target_status)
        job = self.get_job(job_id)
        previous_status = schemas.JobStatus(job.status)
        if previous_status == target_status:
            return None

        self._replace_status(job_id, target_status)
        logger.debug("Moved job %s from %s to %s locally", job_id, previous_status.value, target_status.value)

        try:
            await self.store.update_job(self.owner_id, job_id, {"status": target_status})
        except StoreError as e:
            logger.error("Failed to update job status for job %s: %s", job_id, str(e))
            self._replace_status(job_id, previous_status)
            return self._notify(
                "error",
                f"Could not move \"{job.job_title}\" to {target_status.value}. It was returned to {previous_status.value}.",
            )

        if target_status == schemas.JobStatus.OFFER:
            return self._notify("celebration", f"Congratulations on the offer for {job.job_title}!")
        return None

    async def add_record(self, draft: schemas.JobCreate) -> Optional[schemas.Notification]:
        try:
            created = await self.store.insert_job(self.owner_id, draft)
        except StoreError as e:
            logger.error("Failed to add job %s: %s", draft.job_title, str(e))
            return self._notify("error", f"Could not add \"{draft.job_title}\". Please try again.")
        self._set_jobs([created] + self._jobs)
        return self._notify("success", f"Added \"{created.job_title}\" at {created.company_name}.")

    async def delete_record(self, job_id: int) -> Optional[schemas.Notification]:
        job = self.get_job(job_id)
        try:
            await self.store.delete_job(self.owner_id, job_id)
        except StoreError as e:
            logger.error("Failed to delete job %s: %s", job_id, str(e))
            return self._notify("error", f"Could not delete \"{job.job_title}\". Please try again.")
        self._set_jobs([j for j in self._jobs if j.id != job_id])
        return None

    def partition_by_status(self) -> Dict[schemas.JobStatus, List[schemas.Job]]:
        return partition_by_status(self._jobs)

    def _replace_status(self, job_id: int, status: schemas.JobStatus) -> None:
        # A concurrent delete may have removed the record; nothing to restore then
        self._set_jobs([
            j.model_copy(update={"status": status}) if j.id == job_id else j
            for j in self._jobs
        ])

    def _set_jobs(self, jobs: List[schemas.Job]) -> None:
        self._jobs = list(jobs)
        if self._on_change is not None:
            self._on_change(self.jobs)

    def _notify(self, kind: str, message: str) -> schemas.Notification:
        notification = schemas.Notification(kind=kind, message=message)
        if self._on_notify is not None:
            self._on_notify(notification)
        return notification


def partition_by_status(jobs: List[schemas.Job]) -> Dict[schemas.JobStatus, List[schemas.Job]]:
    """Group jobs into the five board columns, keeping their relative order."""
    columns: Dict[schemas.JobStatus, List[schemas.Job]] = OrderedDict(
        (status, []) for status in schemas.BOARD_COLUMNS
    )
    for job in jobs:
        columns[schemas.JobStatus(job.status)].append(job)
    return columns
