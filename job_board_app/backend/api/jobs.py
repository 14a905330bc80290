import logging
from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from .. import schemas
from ..services import job_tracker as job_service
from ..models.db.database import get_db
from ..utils.api_helpers import check_resource_exists
from .auth import get_current_active_user

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/", response_model=schemas.Job, status_code=status.HTTP_201_CREATED)
def create_job(
    job: schemas.JobCreate,
    db: Session = Depends(get_db),
    current_user: schemas.User = Depends(get_current_active_user)
):
    """
    Create a new job record for the current user.
    """
    db_job = job_service.create_job_for_user(db=db, job=job, owner_id=current_user.id)
    logger.info("Created job %s for user %s", db_job.id, current_user.id)
    return db_job

@router.get("/", response_model=List[schemas.Job])
def read_jobs(
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    current_user: schemas.User = Depends(get_current_active_user)
):
    """
    Retrieve the current user's job records, newest first.
    """
    return job_service.get_jobs_for_user(db, owner_id=current_user.id, skip=skip, limit=limit)

@router.get("/{job_id}", response_model=schemas.Job)
def read_job(
    job_id: int,
    db: Session = Depends(get_db),
    current_user: schemas.User = Depends(get_current_active_user)
):
    db_job = job_service.get_job_by_id(db, job_id=job_id, owner_id=current_user.id)
    check_resource_exists(db_job, "Job")
    return db_job

@router.put("/{job_id}", response_model=schemas.Job)
def update_job(
    job_id: int,
    job: schemas.JobUpdate,
    db: Session = Depends(get_db),
    current_user: schemas.User = Depends(get_current_active_user)
):
    """
    Update a job record's details. Only the fields sent are changed.
    """
    db_job = job_service.update_job(db, job_id=job_id, job_update=job, owner_id=current_user.id)
    check_resource_exists(db_job, "Job")
    return db_job

@router.delete("/{job_id}", response_model=schemas.Job)
def delete_job(
    job_id: int,
    db: Session = Depends(get_db),
    current_user: schemas.User = Depends(get_current_active_user)
):
    deleted = job_service.delete_job(db, job_id=job_id, owner_id=current_user.id)
    check_resource_exists(deleted, "Job")
    logger.info("Deleted job %s for user %s", job_id, current_user.id)
    return deleted
