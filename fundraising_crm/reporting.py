"""Aggregations over funding-grant records for the dashboard and reports.

Every function here is a pure derivation over a sequence of grants: inputs are
never mutated and the same input always produces the same output, so callers
can recompute on every change or memoize on the collection contents.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, time
from enum import Enum
from typing import Iterable, Sequence

from .models import FundingGrant, coerce_amount
from .statuses import StatusSet


UNASSIGNED_PROJECT = "Unassigned"
MISSING_PERIOD = "N/A"
SECONDS_PER_DAY = 24 * 60 * 60


@dataclass(frozen=True)
class SummaryRow:
    label: str
    amount: float
    count: int


@dataclass(frozen=True)
class PipelineRow:
    prep_month: str
    deadline_month: str
    funders: tuple[str, ...]
    sort_key: date | None


@dataclass(frozen=True)
class ForecastRow:
    deadline_month: str
    amount: float
    sort_key: date | None


@dataclass(frozen=True)
class FundingOutlook:
    total_amount: float
    secured_amount: float
    open_amount: float
    annual_target: float
    target_progress_percent: float


class UrgencyTier(str, Enum):
    PAST = "past"
    URGENT = "urgent"
    UPCOMING = "upcoming"
    DISTANT = "distant"


URGENCY_COLORS = {
    UrgencyTier.PAST: "#475569",
    UrgencyTier.URGENT: "#f43f5e",
    UrgencyTier.UPCOMING: "#f59e0b",
    UrgencyTier.DISTANT: "#10b981",
}


def format_currency(amount: float, symbol: str = "£") -> str:
    if float(amount).is_integer():
        return f"{symbol}{amount:,.0f}"
    return f"{symbol}{amount:,.2f}"


def month_label(anchor: date) -> str:
    """Display label used for prep and deadline periods, e.g. ``Nov 2025``."""
    return anchor.strftime("%b %Y")


def month_start(anchor: date) -> date:
    return anchor.replace(day=1)


def shift_month(first_day_of_month: date, months_forward: int) -> date:
    year = first_day_of_month.year
    month = first_day_of_month.month + months_forward
    while month > 12:
        month -= 12
        year += 1
    while month <= 0:
        month += 12
        year -= 1
    return date(year, month, 1)


def _group_totals(grants: Iterable[FundingGrant], label_for) -> list[SummaryRow]:
    rollup: dict[str, dict[str, float]] = {}
    for grant in grants:
        entry = rollup.setdefault(label_for(grant), {"count": 0, "total": 0.0})
        entry["count"] += 1
        entry["total"] += coerce_amount(grant.amount)
    return [
        SummaryRow(label=label, amount=data["total"], count=int(data["count"]))
        for label, data in rollup.items()
    ]


def status_summary(grants: Iterable[FundingGrant]) -> list[SummaryRow]:
    """Amount and count per status, in order of first occurrence."""
    return _group_totals(grants, lambda grant: grant.status)


def project_summary(grants: Iterable[FundingGrant]) -> list[SummaryRow]:
    """Amount and count per project label, in order of first occurrence."""
    return _group_totals(grants, lambda grant: grant.project or UNASSIGNED_PROJECT)


def sort_by_status_order(rows: Sequence[SummaryRow], statuses: StatusSet) -> list[SummaryRow]:
    return sorted(rows, key=lambda row: statuses.rank(row.label))


def _earliest(current: date | None, candidate: date | None) -> date | None:
    if candidate is None:
        return current
    if current is None or candidate < current:
        return candidate
    return current


def _month_sort_key(deadline: date | None) -> date | None:
    return month_start(deadline) if deadline else None


def _chronological(row_key: date | None, position: int) -> tuple[int, date, int]:
    # Undated groups go last, keeping first-seen order among themselves.
    if row_key is None:
        return (1, date.max, position)
    return (0, row_key, position)


def deadline_pipeline(grants: Iterable[FundingGrant]) -> list[PipelineRow]:
    """Funders grouped by (prep month, deadline month), in chronological order.

    A group's sort key is the first day of the month of the earliest deadline
    date found among its grants.
    """
    funders_by_key: dict[tuple[str, str], list[str]] = {}
    earliest_by_key: dict[tuple[str, str], date | None] = {}
    for grant in grants:
        key = (grant.prep_month or MISSING_PERIOD, grant.deadline_month or MISSING_PERIOD)
        funders = funders_by_key.setdefault(key, [])
        if grant.funder not in funders:
            funders.append(grant.funder)
        earliest_by_key[key] = _earliest(earliest_by_key.get(key), grant.deadline_date)

    rows = [
        PipelineRow(
            prep_month=prep,
            deadline_month=deadline,
            funders=tuple(funders),
            sort_key=_month_sort_key(earliest_by_key[(prep, deadline)]),
        )
        for (prep, deadline), funders in funders_by_key.items()
    ]
    ordered = sorted(enumerate(rows), key=lambda item: _chronological(item[1].sort_key, item[0]))
    return [row for _, row in ordered]


def monthly_forecast(grants: Iterable[FundingGrant]) -> list[ForecastRow]:
    """Amount expected per deadline month label, in chronological order."""
    totals: dict[str, float] = {}
    earliest_by_label: dict[str, date | None] = {}
    for grant in grants:
        label = grant.deadline_month or MISSING_PERIOD
        totals[label] = totals.get(label, 0.0) + coerce_amount(grant.amount)
        earliest_by_label[label] = _earliest(earliest_by_label.get(label), grant.deadline_date)

    rows = [
        ForecastRow(
            deadline_month=label,
            amount=amount,
            sort_key=_month_sort_key(earliest_by_label[label]),
        )
        for label, amount in totals.items()
    ]
    ordered = sorted(enumerate(rows), key=lambda item: _chronological(item[1].sort_key, item[0]))
    return [row for _, row in ordered]


def grants_by_deadline(grants: Iterable[FundingGrant]) -> list[FundingGrant]:
    """Grants ordered soonest deadline first; undated grants last."""
    indexed = list(enumerate(grants))
    indexed.sort(key=lambda item: _chronological(item[1].deadline_date, item[0]))
    return [grant for _, grant in indexed]


def days_until(target: date | datetime, now: datetime) -> int:
    """Whole days from ``now`` to ``target``, rounded up.

    A bare date counts from midnight at the start of that day.
    """
    if isinstance(target, datetime):
        target_moment = target
    else:
        target_moment = datetime.combine(target, time.min, tzinfo=now.tzinfo)
    delta = (target_moment - now).total_seconds()
    return math.ceil(delta / SECONDS_PER_DAY)


def classify_urgency(target: date | datetime, now: datetime | None = None) -> UrgencyTier:
    remaining = days_until(target, now or datetime.now())
    if remaining < 0:
        return UrgencyTier.PAST
    if remaining <= 30:
        return UrgencyTier.URGENT
    if remaining <= 60:
        return UrgencyTier.UPCOMING
    return UrgencyTier.DISTANT


def upcoming_deadlines(
    grants: Iterable[FundingGrant],
    months: int = 3,
    today: date | None = None,
) -> list[FundingGrant]:
    """Grants whose deadline falls between today and the end of the next ``months`` months."""
    anchor = today or date.today()
    horizon = shift_month(month_start(anchor), months)
    return [
        grant
        for grant in grants_by_deadline(grants)
        if grant.deadline_date is not None and anchor <= grant.deadline_date < horizon
    ]


def funding_outlook(
    grants: Iterable[FundingGrant],
    statuses: StatusSet,
    annual_target: float = 0.0,
) -> FundingOutlook:
    total = 0.0
    secured = 0.0
    for grant in grants:
        amount = coerce_amount(grant.amount)
        total += amount
        if statuses.is_secured(grant.status):
            secured += amount

    progress = 0.0
    if annual_target > 0:
        progress = round((secured / annual_target) * 100, 1)

    return FundingOutlook(
        total_amount=total,
        secured_amount=secured,
        open_amount=total - secured,
        annual_target=annual_target,
        target_progress_percent=progress,
    )
