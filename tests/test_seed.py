from __future__ import annotations

from fundraising_crm.seed import FUNDERS, PROJECTS, seed_grants, seed_philanthropic_sites, seed_tender_sites
from fundraising_crm.statuses import SIMPLE_STATUSES


def test_seed_grants_are_deterministic() -> None:
    first = seed_grants(created_at="2025-01-01T00:00:00.000Z")
    second = seed_grants(created_at="2025-01-01T00:00:00.000Z")

    assert first == second
    assert len(first) == 80
    assert len({grant.id for grant in first}) == 80


def test_seed_grant_shape() -> None:
    grants = seed_grants(SIMPLE_STATUSES)

    assert grants[0].funder == f"{FUNDERS[0]} 1"
    assert grants[0].prep_month == "Sep 2025"
    assert grants[0].deadline_month == "Nov 2025"
    assert grants[0].deadline == "2025-11-01"
    assert grants[0].amount == 10000.0
    assert grants[79].amount == 500.0
    assert {grant.status for grant in grants} <= set(SIMPLE_STATUSES.labels)
    assert {grant.project for grant in grants} <= set(PROJECTS)


def test_seed_sites() -> None:
    assert [site.id for site in seed_tender_sites()] == ["t1", "t2", "t3", "t4", "t5"]
    sites = seed_philanthropic_sites()
    assert len(sites) == 10
    assert sites[0].date_added == "2025-01-10T00:00:00"
