from datetime import datetime
from enum import Enum
from pydantic import BaseModel, Field, field_validator
from typing import Optional, Dict, List, Literal

# Token Schemas
class Token(BaseModel):
    access_token: str
    token_type: str

class TokenData(BaseModel):
    email: Optional[str] = None

# User Schemas
class UserBase(BaseModel):
    email: str
    full_name: Optional[str] = None

class UserCreate(UserBase):
    password: str = Field(..., min_length=8)

class User(UserBase):
    id: int
    is_active: bool

    class Config:
        from_attributes = True

# Job Schemas
class JobStatus(str, Enum):
    WISHLIST = "Wishlist"
    APPLIED = "Applied"
    INTERVIEWING = "Interviewing"
    OFFER = "Offer"
    REJECTED = "Rejected"


# Board column order
BOARD_COLUMNS: List[JobStatus] = list(JobStatus)

OPTIONAL_JOB_FIELDS = ("date_applied", "expected_salary", "contact_name", "location", "job_type")


def _require_text(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("must not be empty")
    return value


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class JobBase(BaseModel):
    job_title: str
    company_name: str
    status: JobStatus = Field(JobStatus.WISHLIST, examples=["Applied"])
    date_applied: Optional[str] = None  # ISO date, e.g. 2026-01-15
    expected_salary: Optional[str] = None
    contact_name: Optional[str] = None
    location: Optional[str] = None
    job_type: Optional[str] = None
    has_resume: bool = False
    has_cover_letter: bool = False

class JobCreate(JobBase):
    """Draft of a job record; the store assigns id, owner and timestamps."""

    @field_validator("job_title", "company_name")
    @classmethod
    def check_required(cls, value):
        return _require_text(value)

    @field_validator(*OPTIONAL_JOB_FIELDS)
    @classmethod
    def normalize_optional(cls, value):
        return _blank_to_none(value)

class JobUpdate(BaseModel):
    job_title: Optional[str] = None
    company_name: Optional[str] = None
    status: Optional[JobStatus] = None
    date_applied: Optional[str] = None
    expected_salary: Optional[str] = None
    contact_name: Optional[str] = None
    location: Optional[str] = None
    job_type: Optional[str] = None
    has_resume: Optional[bool] = None
    has_cover_letter: Optional[bool] = None

    @field_validator("job_title", "company_name")
    @classmethod
    def check_required(cls, value):
        # Required columns can be changed but never cleared
        if value is None:
            raise ValueError("must not be empty")
        return _require_text(value)

    @field_validator(*OPTIONAL_JOB_FIELDS)
    @classmethod
    def normalize_optional(cls, value):
        return _blank_to_none(value)

class Job(JobBase):
    id: int
    owner_id: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

# Board Schemas
class Notification(BaseModel):
    kind: Literal["error", "success", "celebration"]
    message: str

class BoardMoveRequest(BaseModel):
    job_id: int
    status: JobStatus

class BoardMoveResult(BaseModel):
    job: Job
    notification: Optional[Notification] = None

class Board(BaseModel):
    columns: Dict[JobStatus, List[Job]]

# Extraction Schemas
class ExtractJobRequest(BaseModel):
    url: Optional[str] = None

class ExtractedFields(BaseModel):
    job_title: Optional[str] = None
    company_name: Optional[str] = None
    location: Optional[str] = None
    description: Optional[str] = None

    class Config:
        frozen = True

# Analytics Schemas
class FunnelStage(BaseModel):
    status: JobStatus
    count: int
    percentage: float

class ApplicationFunnel(BaseModel):
    total: int
    stages: List[FunnelStage]
    offer_rate: float

class KeyMetrics(BaseModel):
    total_applications: int
    interview_rate: float
    avg_response_time_days: int
    offers_received: int

class MonthlyCount(BaseModel):
    month: str
    applications: int

class TimeSeries(BaseModel):
    months: List[MonthlyCount]
    total: int
    avg_per_month: float
    this_month: int

class AnalyticsSummary(BaseModel):
    funnel: ApplicationFunnel
    metrics: KeyMetrics
    time_series: TimeSeries

# Company Insight Schemas
class CompanyInsights(BaseModel):
    company: str
    industry: str
    company_size: str
    glassdoor_rating: float
    recent_news_url: str
    contact_search_url: str
