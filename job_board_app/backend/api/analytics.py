from datetime import datetime, timezone
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import schemas
from ..models.db.database import get_db
from ..services import analytics_service, job_tracker
from .auth import get_current_active_user

router = APIRouter()

@router.get("/summary", response_model=schemas.AnalyticsSummary)
def read_analytics_summary(
    db: Session = Depends(get_db),
    current_user: schemas.User = Depends(get_current_active_user)
):
    """
    Funnel, key metrics and monthly time series for the current user's jobs.
    """
    jobs = job_tracker.get_all_jobs_for_user(db, owner_id=current_user.id)
    # created_at is stored in UTC
    return analytics_service.analytics_summary(jobs, today=datetime.now(timezone.utc).date())
