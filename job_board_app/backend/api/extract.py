import logging
from fastapi import APIRouter, HTTPException, status

from .. import schemas
from ..services import job_extractor
from ..services.page_fetcher import PageFetchError, fetch_job_posting
from ..utils.api_helpers import validate_non_empty_string

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/extract-job", response_model=schemas.ExtractedFields, response_model_exclude_none=True)
def extract_job(request: schemas.ExtractJobRequest):
    """
    Fetch a job posting and guess its title, company, location and description.

    Fields that could not be found are left out of the response.
    """
    url = validate_non_empty_string(request.url, "URL")

    try:
        html = fetch_job_posting(url)
    except PageFetchError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Failed to fetch job posting")

    try:
        extracted = job_extractor.extract(html, url)
    except Exception as e:
        logger.error("Error extracting job data from %s: %s", url, str(e))
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to extract job data")

    logger.info(
        "Extracted %d fields from %s",
        len(extracted.model_dump(exclude_none=True)), url
    )
    return extracted
