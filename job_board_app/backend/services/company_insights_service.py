"""
Company insights shown in the job detail view.

The data is canned: there is no provider integration yet, only search links
built from the company (and contact) name.
"""
from typing import Optional
from urllib.parse import quote

from .. import schemas

NEWS_SEARCH_URL = "https://www.google.com/search?q={query}+news&tbm=nws"
PEOPLE_SEARCH_URL = "https://www.linkedin.com/search/results/people/?keywords={query}"


def news_search_url(company: str) -> str:
    return NEWS_SEARCH_URL.format(query=quote(company, safe=""))


def contact_search_url(company: str, contact_name: Optional[str] = None) -> str:
    query = f"{contact_name} {company}" if contact_name else company
    return PEOPLE_SEARCH_URL.format(query=quote(query, safe=""))


def get_company_insights(company: str, contact_name: Optional[str] = None) -> schemas.CompanyInsights:
    company = company.strip()
    return schemas.CompanyInsights(
        company=company,
        industry="Technology & Software",
        company_size="1,000-5,000 employees",
        glassdoor_rating=4.2,
        recent_news_url=news_search_url(company),
        contact_search_url=contact_search_url(company, contact_name.strip() if contact_name else None),
    )
