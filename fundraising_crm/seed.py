"""Demo records loaded on first run or when persisted state is unreadable."""

from __future__ import annotations

from datetime import date, datetime

from .models import FundingGrant, PhilanthropicSite, TenderSite, utc_timestamp
from .reporting import month_label, shift_month
from .statuses import EXTENDED_STATUSES, StatusSet


PROJECTS = [
    "Bigger picture and community champions",
    "Community Champions",
    "Corporate relationships",
    "CYP trauma",
    "ESOL and CYP",
    "ESOL project",
    "ESOL project or SYP trauma",
    "Autism",
    "Black Men Cancer Trauma project",
    "Community Voice",
    "Core funding",
    "Core funding or CYP/Refugee project",
    "CYP",
    "CYP or community champions",
    "CYP project",
    "Drug and alcohol & mental health",
    "ESOL",
    "ESOL refugee project",
    "Neighbourhoods",
]

FUNDERS = [
    "BBC Children in Need",
    "National Lottery",
    "Lloyds Bank Foundation",
    "Paul Hamlyn Foundation",
    "Esmee Fairbairn",
    "Comic Relief",
    "Tudor Trust",
    "Garfield Weston",
    "Henry Smith Charity",
    "Clothworkers Foundation",
    "Sobell Foundation",
    "Rayne Foundation",
]

PHILANTHROPIC_ORGANISATIONS = [
    ("Citi Foundation", "https://www.citigroup.com/global/foundation", "Focus on economic progress in underserved communities."),
    ("Charles Hayward Foundation", "http://www.charleshaywardfoundation.org.uk/", "Interested in Social & Environmental causes."),
    ("The Henry Smith Charity", "https://www.henrysmithcharity.org.uk/", "Large grants for social well-being."),
    ("Garfield Weston Foundation", "https://garfieldweston.org/", "Supports wide range of UK charities."),
    ("The Clothworkers Foundation", "https://www.clothworkersfoundation.org.uk/", "Capital grants for charities."),
    ("The Tudor Trust", "https://tudortrust.org.uk/", "Focus on community-led groups."),
    ("Esmee Fairbairn Foundation", "https://esmeefairbairn.org.uk/", "Environmental and social justice focus."),
    ("The Wolfson Foundation", "https://www.wolfson.org.uk/", "Focus on education and science."),
    ("Jerwood Foundation", "https://jerwood.org/", "Focus on arts and young artists."),
    ("The Baring Foundation", "https://baringfoundation.org.uk/", "Strengthening civil society."),
]

SEED_START = date(2025, 9, 1)


def _seed_amount(index: int) -> float:
    if index < 10:
        return 10000.0
    if index < 30:
        return 4000.0
    if index < 60:
        return 1500.0
    return 500.0


def seed_grants(
    statuses: StatusSet = EXTENDED_STATUSES,
    count: int = 80,
    created_at: str | None = None,
) -> list[FundingGrant]:
    stamp = created_at or utc_timestamp()
    labels = statuses.labels
    grants: list[FundingGrant] = []
    for index in range(count):
        month_offset = index % 18
        prep_date = shift_month(SEED_START, month_offset)
        deadline_date = shift_month(SEED_START, month_offset + 2)
        funder = FUNDERS[index % len(FUNDERS)]

        grants.append(
            FundingGrant(
                id=f"grant-{index}",
                funder=f"{funder} {index // len(FUNDERS) + 1}",
                fund_name=f"Grant Scheme {index + 1}",
                is_small_fund=index % 4 == 0,
                status=labels[(index * 7 + index // 3) % len(labels)],
                assigned_to="Sarah Jenkins" if index % 3 == 0 else "Mike Ross",
                project=PROJECTS[index % len(PROJECTS)],
                details="Assessment of regional growth and infrastructure.",
                amount=_seed_amount(index),
                deadline=deadline_date.isoformat(),
                prep_month=month_label(prep_date),
                deadline_month=month_label(deadline_date),
                delivery_dates="2026-2027",
                action="Verification Phase" if index % 2 == 0 else "Data Integrity Check",
                website="https://example.org",
                created_at=stamp,
            )
        )
    return grants


def seed_tender_sites() -> list[TenderSite]:
    return [
        TenderSite(id="t1", name="Find a Tender (UK Gov)", login="wandcare_admin"),
        TenderSite(id="t2", name="Contracts Finder", login="info@wandcare.org"),
        TenderSite(id="t3", name="ProContract / Due North", login="wca_bid_team"),
        TenderSite(id="t4", name="CompeteFor", login="wandcare_manager"),
        TenderSite(id="t5", name="Supplying the South West", login="finance_wca"),
    ]


def seed_philanthropic_sites() -> list[PhilanthropicSite]:
    return [
        PhilanthropicSite(
            id=f"phil-{index}",
            organisation=name,
            date_added=datetime(2025, 1, 10 + index).isoformat(),
            website=website,
            notes=notes,
        )
        for index, (name, website, notes) in enumerate(PHILANTHROPIC_ORGANISATIONS)
    ]
