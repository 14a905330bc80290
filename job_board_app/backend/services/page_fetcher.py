import requests
import logging
from ..config.settings import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()


class PageFetchError(Exception):
    """The job posting page could not be retrieved."""


def fetch_job_posting(url: str) -> str:
    """
    Downloads a job posting page and returns its markup.

    Raises:
        PageFetchError: On transport errors, timeouts and non-2xx responses
    """
    headers = {"User-Agent": settings.fetch_user_agent}
    try:
        response = requests.get(url, headers=headers, timeout=settings.fetch_timeout_seconds)
        response.raise_for_status()
    except requests.exceptions.RequestException as e:
        logger.warning("Fetching job posting %s failed: %s", url, str(e))
        raise PageFetchError(str(e)) from e
    return response.text
