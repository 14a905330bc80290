"""
Best-effort extraction of job posting fields from raw HTML.

Each field has an ordered list of regex rules, most structurally specific
first. The first rule whose capture survives cleaning wins. Rules bound to a
job board host are listed after the generic ones, so they only fill a gap.
Nothing here raises on odd markup: a field nobody matched is simply absent.
"""
import html as html_lib
import logging
import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple
from urllib.parse import urlparse

from .. import schemas
from ..config.settings import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

TRUNCATION_MARKER = "..."

_WHITESPACE_RE = re.compile(r"\s+")
_TAG_RE = re.compile(r"<[^>]+>")
_PARTIAL_TAG_RE = re.compile(r"<[^>]*$")


@dataclass(frozen=True)
class ExtractionRule:
    name: str
    pattern: "re.Pattern[str]"
    hosts: Tuple[str, ...] = ()

    def applies_to(self, host: str) -> bool:
        if not self.hosts:
            return True
        return any(host == h or host.endswith("." + h) for h in self.hosts)

    def capture(self, html: str) -> Optional[str]:
        match = self.pattern.search(html)
        if match is None:
            return None
        return match.group(1)


def _rule(name: str, pattern: str, hosts: Tuple[str, ...] = ()) -> ExtractionRule:
    return ExtractionRule(name=name, pattern=re.compile(pattern, re.IGNORECASE), hosts=hosts)


LINKEDIN = ("linkedin.com",)

TITLE_RULES: List[ExtractionRule] = [
    _rule("h1.job-title", r'<h1[^>]*class="[^"]*job-title[^"]*"[^>]*>([^<]+)</h1>'),
    _rule("h1", r"<h1[^>]*>([^<]+)</h1>"),
    _rule("og:title", r'<meta property="og:title" content="([^"]+)"'),
    _rule("title", r"<title[^>]*>([^<|]+)"),
    _rule("linkedin.topcard__title", r'<h1[^>]*class="[^"]*topcard__title[^"]*"[^>]*>([^<]+)</h1>', LINKEDIN),
]

COMPANY_RULES: List[ExtractionRule] = [
    _rule("span.company", r'<span[^>]*class="[^"]*company[^"]*"[^>]*>([^<]+)</span>'),
    _rule("a.company", r'<a[^>]*class="[^"]*company[^"]*"[^>]*>([^<]+)</a>'),
    _rule("og:site_name", r'<meta property="og:site_name" content="([^"]+)"'),
    _rule("linkedin.topcard__org-name-link", r'<a[^>]*class="[^"]*topcard__org-name-link[^"]*"[^>]*>([^<]+)</a>', LINKEDIN),
]

LOCATION_RULES: List[ExtractionRule] = [
    _rule("span.location", r'<span[^>]*class="[^"]*location[^"]*"[^>]*>([^<]+)</span>'),
    _rule("div.location", r'<div[^>]*class="[^"]*location[^"]*"[^>]*>([^<]+)</div>'),
]

DESCRIPTION_RULES: List[ExtractionRule] = [
    _rule(
        "div.description",
        r'<div[^>]*class="[^"]*description[^"]*"[^>]*>([\s\S]{0,%d})' % settings.description_scan_window,
    ),
    _rule("meta.description", r'<meta name="description" content="([^"]+)"'),
]


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()


def normalize_text(text: str) -> str:
    return collapse_whitespace(html_lib.unescape(text))


def clean_description(text: str, max_length: Optional[int] = None) -> str:
    """Strip markup from a description snippet and cap its length."""
    if max_length is None:
        max_length = settings.description_max_length
    # Entity-encoded markup has to be decoded before it can be stripped
    text = html_lib.unescape(text)
    text = _PARTIAL_TAG_RE.sub("", _TAG_RE.sub(" ", text))
    text = collapse_whitespace(text)
    if len(text) > max_length:
        return text[:max_length] + TRUNCATION_MARKER
    return text


def first_match(
    rules: List[ExtractionRule],
    html: str,
    host: str = "",
    clean: Callable[[str], str] = normalize_text,
) -> Optional[str]:
    """Return the cleaned capture of the first applicable rule that yields text."""
    for rule in rules:
        if not rule.applies_to(host):
            continue
        captured = rule.capture(html)
        if captured is None:
            continue
        value = clean(captured)
        if value:
            logger.debug("Field matched by rule %s", rule.name)
            return value
    return None


def url_host(url: Optional[str]) -> str:
    if not url:
        return ""
    try:
        return (urlparse(url.strip()).hostname or "").lower()
    except ValueError:
        return ""


def extract(html: Optional[str], url: Optional[str] = None) -> schemas.ExtractedFields:
    """
    Guess job posting fields from HTML.

    Args:
        html: Raw markup of the posting page
        url: URL the markup was fetched from, used for job-board specific rules

    Returns:
        ExtractedFields with every unmatched field left as None
    """
    if not html or not html.strip():
        return schemas.ExtractedFields()

    host = url_host(url)
    return schemas.ExtractedFields(
        job_title=first_match(TITLE_RULES, html, host),
        company_name=first_match(COMPANY_RULES, html, host),
        location=first_match(LOCATION_RULES, html, host),
        description=first_match(DESCRIPTION_RULES, html, host, clean=clean_description),
    )
