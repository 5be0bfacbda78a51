from __future__ import annotations

from datetime import date, datetime, timedelta

from fundraising_crm.models import FundingGrant
from fundraising_crm.reporting import (
    UNASSIGNED_PROJECT,
    UrgencyTier,
    classify_urgency,
    days_until,
    deadline_pipeline,
    format_currency,
    funding_outlook,
    grants_by_deadline,
    month_label,
    monthly_forecast,
    project_summary,
    sort_by_status_order,
    status_summary,
    upcoming_deadlines,
)
from fundraising_crm.statuses import SIMPLE_STATUSES


def _grant(grant_id: str, **fields) -> FundingGrant:  # type: ignore[no-untyped-def]
    fields.setdefault("funder", f"Funder {grant_id}")
    fields.setdefault("fund_name", f"Fund {grant_id}")
    return FundingGrant(id=grant_id, **fields)


def _scenario() -> list[FundingGrant]:
    return [
        _grant("a", status="Pending", amount=100, project="Youth"),
        _grant("b", status="Pending", amount=200, project=""),
        _grant("c", status="Approved", amount=50, project="Youth"),
        _grant("d", status="Pending", amount=300, project="ESOL"),
    ]


def test_status_summary_groups_amounts_and_counts_in_first_seen_order() -> None:
    rows = status_summary(_scenario())

    assert [(row.label, row.amount, row.count) for row in rows] == [
        ("Pending", 600.0, 3),
        ("Approved", 50.0, 1),
    ]


def test_summaries_preserve_totals() -> None:
    grants = _scenario() + [FundingGrant.from_dict({"id": "e", "smtStatus": "Rejected", "amount": "abc"})]

    for rows in (status_summary(grants), project_summary(grants)):
        assert sum(row.amount for row in rows) == 650.0
        assert sum(row.count for row in rows) == len(grants)


def test_project_summary_labels_empty_project_unassigned() -> None:
    rows = project_summary(_scenario())

    assert [(row.label, row.amount, row.count) for row in rows] == [
        ("Youth", 150.0, 2),
        (UNASSIGNED_PROJECT, 200.0, 1),
        ("ESOL", 300.0, 1),
    ]


def test_summaries_of_no_grants_are_empty() -> None:
    assert status_summary([]) == []
    assert project_summary([]) == []
    assert deadline_pipeline([]) == []


def test_sort_by_status_order_follows_configured_stages() -> None:
    rows = sort_by_status_order(status_summary(_scenario() + [_grant("x", status="Mystery")]), SIMPLE_STATUSES)

    assert [row.label for row in rows] == ["Pending", "Approved", "Mystery"]


def test_deadline_pipeline_sorts_groups_by_earliest_deadline() -> None:
    grants = [
        _grant("1", funder="Tudor Trust", prep_month="Jan 2026", deadline_month="Mar 2026", deadline="2026-03-20"),
        _grant("2", funder="Comic Relief", prep_month="Dec 2025", deadline_month="Feb 2026", deadline="2026-02-10"),
        _grant("3", funder="Rayne Foundation", prep_month="Jan 2026", deadline_month="Mar 2026", deadline="2026-01-05"),
        _grant("4", funder="Tudor Trust", prep_month="Jan 2026", deadline_month="Mar 2026", deadline="2026-03-28"),
        _grant("5", funder="Sobell Foundation"),
    ]

    rows = deadline_pipeline(grants)

    assert [(row.prep_month, row.deadline_month) for row in rows] == [
        ("Jan 2026", "Mar 2026"),
        ("Dec 2025", "Feb 2026"),
        ("N/A", "N/A"),
    ]
    assert rows[0].funders == ("Tudor Trust", "Rayne Foundation")
    assert rows[0].sort_key == date(2026, 1, 1)
    assert rows[1].sort_key == date(2026, 2, 1)
    assert rows[2].sort_key is None
    assert rows[2].funders == ("Sobell Foundation",)


def test_deadline_pipeline_is_chronological_without_duplicate_funders() -> None:
    grants = [
        _grant(str(index), funder=f"Funder {index % 4}", prep_month=f"P{index % 5}",
               deadline_month=f"D{index % 5}", deadline=f"2026-{(index * 5) % 12 + 1:02d}-15")
        for index in range(30)
    ]

    rows = deadline_pipeline(grants)
    keys = [row.sort_key for row in rows]

    assert keys == sorted(keys)
    for row in rows:
        assert len(row.funders) == len(set(row.funders))


def test_monthly_forecast_sums_by_deadline_month() -> None:
    grants = [
        _grant("1", deadline_month="Mar 2026", deadline="2026-03-10", amount=1000),
        _grant("2", deadline_month="Jan 2026", deadline="2026-01-10", amount=250),
        _grant("3", deadline_month="Mar 2026", deadline="2026-03-30", amount=500),
        _grant("4", amount=75),
    ]

    rows = monthly_forecast(grants)

    assert [(row.deadline_month, row.amount) for row in rows] == [
        ("Jan 2026", 250.0),
        ("Mar 2026", 1500.0),
        ("N/A", 75.0),
    ]


def test_grants_by_deadline_puts_undated_last() -> None:
    grants = [
        _grant("late", deadline="2026-05-01"),
        _grant("none"),
        _grant("bad", deadline="someday"),
        _grant("soon", deadline="2026-01-02"),
    ]

    assert [grant.id for grant in grants_by_deadline(grants)] == ["soon", "late", "none", "bad"]


def test_urgency_boundaries() -> None:
    now = datetime(2026, 1, 1, 12, 0)

    assert days_until(date(2026, 1, 31), now) == 30
    assert classify_urgency(date(2026, 1, 31), now) is UrgencyTier.URGENT
    assert classify_urgency(date(2026, 2, 1), now) is UrgencyTier.UPCOMING
    assert classify_urgency(date(2026, 3, 2), now) is UrgencyTier.UPCOMING
    assert classify_urgency(date(2026, 3, 3), now) is UrgencyTier.DISTANT
    assert classify_urgency(date(2025, 12, 31), now) is UrgencyTier.PAST


def test_partial_days_round_up() -> None:
    now = datetime(2026, 1, 1, 12, 0)

    assert days_until(now + timedelta(hours=2), now) == 1
    assert classify_urgency(now + timedelta(hours=2), now) is UrgencyTier.URGENT
    assert days_until(now - timedelta(hours=2), now) == 0
    assert classify_urgency(now - timedelta(hours=2), now) is UrgencyTier.URGENT
    assert classify_urgency(now - timedelta(days=1, hours=1), now) is UrgencyTier.PAST


def test_upcoming_deadlines_window() -> None:
    grants = [
        _grant("yesterday", deadline="2026-01-14"),
        _grant("today", deadline="2026-01-15"),
        _grant("march", deadline="2026-03-31"),
        _grant("april", deadline="2026-04-01"),
        _grant("undated"),
    ]

    due = upcoming_deadlines(grants, months=3, today=date(2026, 1, 15))

    assert [grant.id for grant in due] == ["today", "march"]


def test_funding_outlook_uses_secured_stages() -> None:
    outlook = funding_outlook(_scenario(), SIMPLE_STATUSES, annual_target=1000)

    assert outlook.total_amount == 650.0
    assert outlook.secured_amount == 50.0
    assert outlook.open_amount == 600.0
    assert outlook.target_progress_percent == 5.0
    assert funding_outlook([], SIMPLE_STATUSES).target_progress_percent == 0.0


def test_display_helpers() -> None:
    assert format_currency(1500) == "£1,500"
    assert format_currency(12.5, "$") == "$12.50"
    assert month_label(date(2025, 11, 3)) == "Nov 2025"
