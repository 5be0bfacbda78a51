"""Data and helpers for the fundraising CRM app."""

from .config import Settings, load_settings
from .export import export_workbook_bytes
from .models import FundingGrant, PhilanthropicSite, StrategyItem, TenderSite
from .narrative import generate_executive_report
from .reporting import (
    UrgencyTier,
    classify_urgency,
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
from .search import search_grants, search_philanthropic_sites
from .statuses import EXTENDED_STATUSES, SIMPLE_STATUSES, StatusSet
from .store import CRMStore, MemoryStorage, NotesDraft, SQLiteKeyValueStorage

__all__ = [
    "CRMStore",
    "classify_urgency",
    "deadline_pipeline",
    "export_workbook_bytes",
    "EXTENDED_STATUSES",
    "format_currency",
    "FundingGrant",
    "funding_outlook",
    "generate_executive_report",
    "grants_by_deadline",
    "load_settings",
    "MemoryStorage",
    "month_label",
    "monthly_forecast",
    "NotesDraft",
    "PhilanthropicSite",
    "project_summary",
    "search_grants",
    "search_philanthropic_sites",
    "sort_by_status_order",
    "Settings",
    "SIMPLE_STATUSES",
    "SQLiteKeyValueStorage",
    "status_summary",
    "StatusSet",
    "StrategyItem",
    "TenderSite",
    "upcoming_deadlines",
    "UrgencyTier",
]
