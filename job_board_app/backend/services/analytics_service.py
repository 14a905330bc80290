"""
Dashboard analytics computed from a user's job records.

All functions are pure: they take the records (ORM rows or schemas) and
return schema objects, so they can be tested without a database.
"""
import logging
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .. import schemas

logger = logging.getLogger(__name__)

JobStatus = schemas.JobStatus

TIME_SERIES_MONTHS = 12


def _percent(part: int, whole: int) -> float:
    if whole <= 0:
        return 0.0
    return round(part / whole * 100, 1)


def _round_half_up(value: float) -> int:
    return int(value + 0.5)


def status_counts(jobs: Iterable) -> Dict[JobStatus, int]:
    counts = {status: 0 for status in schemas.BOARD_COLUMNS}
    for job in jobs:
        counts[JobStatus(job.status)] += 1
    return counts


def application_funnel(jobs: Sequence) -> schemas.ApplicationFunnel:
    counts = status_counts(jobs)
    total = len(jobs)
    stages = [
        schemas.FunnelStage(status=status, count=count, percentage=_percent(count, total))
        for status, count in counts.items()
    ]
    return schemas.ApplicationFunnel(
        total=total,
        stages=stages,
        offer_rate=_percent(counts[JobStatus.OFFER], counts[JobStatus.APPLIED]),
    )


def parse_date_applied(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.combine(date.fromisoformat(value.strip()[:10]), datetime.min.time())
    except ValueError:
        logger.debug("Ignoring unparseable date_applied: %s", value)
        return None


def key_metrics(jobs: Sequence) -> schemas.KeyMetrics:
    counts = status_counts(jobs)
    applied = counts[JobStatus.APPLIED] + counts[JobStatus.INTERVIEWING] + counts[JobStatus.OFFER]
    interviewing = counts[JobStatus.INTERVIEWING] + counts[JobStatus.OFFER]

    response_days: List[float] = []
    for job in jobs:
        applied_on = parse_date_applied(job.date_applied)
        if applied_on is None or job.created_at is None:
            continue
        created = job.created_at.replace(tzinfo=None)
        response_days.append(abs((applied_on - created).total_seconds()) / 86400)

    avg_response = _round_half_up(sum(response_days) / len(response_days)) if response_days else 0

    return schemas.KeyMetrics(
        total_applications=len(jobs),
        interview_rate=_percent(interviewing, applied),
        avg_response_time_days=avg_response,
        offers_received=counts[JobStatus.OFFER],
    )


def _next_month(year: int, month: int) -> Tuple[int, int]:
    if month == 12:
        return year + 1, 1
    return year, month + 1


def monthly_applications(jobs: Sequence, today: Optional[date] = None) -> schemas.TimeSeries:
    """
    Count jobs per creation month.

    Months between the first job and ``today`` with no jobs are reported as
    zero; only the most recent twelve months are returned.
    """
    today = today or date.today()
    per_month: Dict[Tuple[int, int], int] = {}
    for job in jobs:
        key = (job.created_at.year, job.created_at.month)
        per_month[key] = per_month.get(key, 0) + 1

    if not per_month:
        return schemas.TimeSeries(months=[], total=0, avg_per_month=0.0, this_month=0)

    current = min(per_month)
    last = max(max(per_month), (today.year, today.month))
    months: List[schemas.MonthlyCount] = []
    while current <= last:
        year, month = current
        months.append(schemas.MonthlyCount(
            month=date(year, month, 1).strftime("%b %Y"),
            applications=per_month.get(current, 0),
        ))
        current = _next_month(year, month)

    months = months[-TIME_SERIES_MONTHS:]
    total = sum(m.applications for m in months)
    return schemas.TimeSeries(
        months=months,
        total=total,
        avg_per_month=round(total / len(months), 1),
        this_month=months[-1].applications,
    )


def analytics_summary(jobs: Sequence, today: Optional[date] = None) -> schemas.AnalyticsSummary:
    return schemas.AnalyticsSummary(
        funnel=application_funnel(jobs),
        metrics=key_metrics(jobs),
        time_series=monthly_applications(jobs, today=today),
    )
