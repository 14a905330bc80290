from sqlalchemy.orm import Session
from ..models.db import job as job_model
from .. import schemas

def get_job_by_id(db: Session, job_id: int, owner_id: int):
    return db.query(job_model.Job).filter(
        job_model.Job.id == job_id,
        job_model.Job.owner_id == owner_id
    ).first()

def get_jobs_for_user(db: Session, owner_id: int, skip: int = 0, limit: int = 100):
    return db.query(job_model.Job).filter(
        job_model.Job.owner_id == owner_id
    ).order_by(
        job_model.Job.created_at.desc(), job_model.Job.id.desc()
    ).offset(skip).limit(limit).all()

def get_all_jobs_for_user(db: Session, owner_id: int):
    return db.query(job_model.Job).filter(
        job_model.Job.owner_id == owner_id
    ).order_by(
        job_model.Job.created_at.desc(), job_model.Job.id.desc()
    ).all()

def create_job_for_user(db: Session, job: schemas.JobCreate, owner_id: int):
    db_job = job_model.Job(**job.model_dump(mode="json"), owner_id=owner_id)
    db.add(db_job)
    db.commit()
    db.refresh(db_job)
    return db_job

def update_job(db: Session, job_id: int, job_update: schemas.JobUpdate, owner_id: int):
    db_job = get_job_by_id(db=db, job_id=job_id, owner_id=owner_id)
    if db_job:
        update_data = job_update.model_dump(mode="json", exclude_unset=True)
        for key, value in update_data.items():
            setattr(db_job, key, value)
        db.commit()
        db.refresh(db_job)
    return db_job

def delete_job(db: Session, job_id: int, owner_id: int):
    db_job = get_job_by_id(db=db, job_id=job_id, owner_id=owner_id)
    if db_job is None:
        return None
    # Snapshot before the row is gone; the instance expires on commit
    deleted = schemas.Job.model_validate(db_job)
    db.delete(db_job)
    db.commit()
    return deleted
