"""Multi-sheet Excel export with a formula-driven dashboard sheet."""

from __future__ import annotations

import logging
from io import BytesIO
from typing import Any, Sequence

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from .models import FundingGrant, PhilanthropicSite, StrategyItem, TenderSite
from .reporting import UNASSIGNED_PROJECT
from .statuses import StatusSet


logger = logging.getLogger(__name__)

FUNDING_SHEET = "Funding"
DASHBOARD_SHEET = "Dashboard"

FUNDING_COLUMNS = [
    ("ID", 38),
    ("Funder", 30),
    ("Fund Name", 30),
    ("Small Fund", 11),
    ("Status", 40),
    ("Assigned To", 18),
    ("Project", 34),
    ("Amount", 12),
    ("Deadline", 12),
    ("Prep Month", 12),
    ("Deadline Month", 15),
    ("Delivery Dates", 15),
    ("Action", 30),
    ("Website", 30),
    ("Details", 50),
    ("Created At", 26),
]
STATUS_COLUMN = get_column_letter(5)
PROJECT_COLUMN = get_column_letter(7)
AMOUNT_COLUMN = get_column_letter(8)

_HEADER_FONT = Font(bold=True, color="FFFFFF")
_HEADER_FILL = PatternFill(start_color="047857", end_color="047857", fill_type="solid")


def _write_header(sheet: Worksheet, columns: Sequence[tuple[str, int]]) -> None:
    for col_idx, (header, width) in enumerate(columns, 1):
        cell = sheet.cell(row=1, column=col_idx, value=header)
        cell.font = _HEADER_FONT
        cell.fill = _HEADER_FILL
        cell.alignment = Alignment(horizontal="center", vertical="center")
        sheet.column_dimensions[get_column_letter(col_idx)].width = width
    sheet.freeze_panes = "A2"


def _write_rows(sheet: Worksheet, rows: Sequence[Sequence[Any]]) -> None:
    for row_idx, values in enumerate(rows, 2):
        for col_idx, value in enumerate(values, 1):
            cell = sheet.cell(row=row_idx, column=col_idx, value=value)
            # User text must never be evaluated as a formula.
            if isinstance(value, str) and value.startswith("="):
                cell.data_type = "s"


def _funding_row(grant: FundingGrant) -> list[Any]:
    return [
        grant.id,
        grant.funder,
        grant.fund_name,
        "Yes" if grant.is_small_fund else "No",
        grant.status,
        grant.assigned_to,
        grant.project or UNASSIGNED_PROJECT,
        grant.amount,
        grant.deadline,
        grant.prep_month,
        grant.deadline_month,
        grant.delivery_dates,
        grant.action,
        grant.website,
        grant.details,
        grant.created_at,
    ]


def _exact_criterion(label: str) -> str:
    """Formula string literal that SUMIF/COUNTIF match literally against ``label``."""
    escaped = label.replace("~", "~~").replace("*", "~*").replace("?", "~?")
    return '"=' + escaped.replace('"', '""') + '"'


def _write_label(sheet: Worksheet, row: int, label: str) -> None:
    cell = sheet.cell(row=row, column=1, value=label)
    if label.startswith("="):
        cell.data_type = "s"


def _write_dashboard(
    sheet: Worksheet,
    grants: Sequence[FundingGrant],
    statuses: StatusSet,
) -> None:
    last_row = max(len(grants) + 1, 2)
    status_range = f"{FUNDING_SHEET}!${STATUS_COLUMN}$2:${STATUS_COLUMN}${last_row}"
    project_range = f"{FUNDING_SHEET}!${PROJECT_COLUMN}$2:${PROJECT_COLUMN}${last_row}"
    amount_range = f"{FUNDING_SHEET}!${AMOUNT_COLUMN}$2:${AMOUNT_COLUMN}${last_row}"

    status_labels = list(dict.fromkeys(statuses.labels + [grant.status for grant in grants]))
    project_labels = list(dict.fromkeys(grant.project or UNASSIGNED_PROJECT for grant in grants))

    _write_header(sheet, [("Status", 48), ("Amount", 14), ("Count", 10)])
    row = 2
    for label in status_labels:
        _write_label(sheet, row, label)
        criterion = _exact_criterion(label)
        sheet.cell(row=row, column=2, value=f"=SUMIF({status_range},{criterion},{amount_range})")
        sheet.cell(row=row, column=3, value=f"=COUNTIF({status_range},{criterion})")
        row += 1
    total_row = row
    sheet.cell(row=total_row, column=1, value="Total").font = Font(bold=True)
    sheet.cell(row=total_row, column=2, value=f"=SUM(B2:B{total_row - 1})")
    sheet.cell(row=total_row, column=3, value=f"=SUM(C2:C{total_row - 1})")

    row = total_row + 2
    for col_idx, header in enumerate(("Project", "Amount", "Count"), 1):
        cell = sheet.cell(row=row, column=col_idx, value=header)
        cell.font = _HEADER_FONT
        cell.fill = _HEADER_FILL
    row += 1
    for label in project_labels:
        _write_label(sheet, row, label)
        criterion = _exact_criterion(label)
        sheet.cell(row=row, column=2, value=f"=SUMIF({project_range},{criterion},{amount_range})")
        sheet.cell(row=row, column=3, value=f"=COUNTIF({project_range},{criterion})")
        row += 1


def build_workbook(
    grants: Sequence[FundingGrant],
    tender_sites: Sequence[TenderSite],
    philanthropic_sites: Sequence[PhilanthropicSite],
    strategy_items: Sequence[StrategyItem],
    notes: str,
    statuses: StatusSet,
) -> Workbook:
    wb = Workbook()

    funding = wb.active
    funding.title = FUNDING_SHEET
    _write_header(funding, FUNDING_COLUMNS)
    _write_rows(funding, [_funding_row(grant) for grant in grants])

    tenders = wb.create_sheet("Tenders")
    _write_header(tenders, [("Site Name", 36), ("Login", 30)])
    _write_rows(tenders, [[site.name, site.login] for site in tender_sites])

    philanthropy = wb.create_sheet("Philanthropy")
    _write_header(
        philanthropy,
        [("Date Added", 26), ("Organisation", 36), ("Website", 44), ("Notes", 60)],
    )
    _write_rows(
        philanthropy,
        [[site.date_added, site.organisation, site.website, site.notes] for site in philanthropic_sites],
    )

    strategy = wb.create_sheet("Strategy")
    _write_header(
        strategy,
        [("Fund / Initiative", 34), ("Details", 50), ("Comments", 40), ("Further Info", 40)],
    )
    _write_rows(
        strategy,
        [[item.fund, item.details, item.comments, item.further_info] for item in strategy_items],
    )

    notes_sheet = wb.create_sheet("Notes")
    _write_header(notes_sheet, [("Notes", 100)])
    _write_rows(notes_sheet, [[notes]])
    notes_cell = notes_sheet.cell(row=2, column=1)
    notes_cell.alignment = Alignment(wrap_text=True, vertical="top")

    _write_dashboard(wb.create_sheet(DASHBOARD_SHEET), grants, statuses)
    return wb


def export_workbook_bytes(
    grants: Sequence[FundingGrant],
    tender_sites: Sequence[TenderSite],
    philanthropic_sites: Sequence[PhilanthropicSite],
    strategy_items: Sequence[StrategyItem],
    notes: str,
    statuses: StatusSet,
) -> bytes:
    wb = build_workbook(grants, tender_sites, philanthropic_sites, strategy_items, notes, statuses)
    buffer = BytesIO()
    wb.save(buffer)
    logger.info(f"Exported workbook with {len(grants)} grants")
    return buffer.getvalue()
