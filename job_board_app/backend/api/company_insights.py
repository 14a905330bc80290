from typing import Optional
from fastapi import APIRouter

from .. import schemas
from ..services import company_insights_service
from ..utils.api_helpers import validate_non_empty_string

router = APIRouter()

@router.get("", response_model=schemas.CompanyInsights)
def read_company_insights(company: Optional[str] = None, contact: Optional[str] = None):
    company = validate_non_empty_string(company, "Company name")
    return company_insights_service.get_company_insights(company, contact_name=contact)
