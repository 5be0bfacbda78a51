from __future__ import annotations

from io import BytesIO

from openpyxl import load_workbook

from fundraising_crm.export import export_workbook_bytes
from fundraising_crm.models import FundingGrant, PhilanthropicSite, StrategyItem, TenderSite
from fundraising_crm.statuses import SIMPLE_STATUSES


def _export() -> bytes:
    grants = [
        FundingGrant(id="g1", funder="Tudor Trust", fund_name="Core", status="Pending", amount=100.0, project="Youth"),
        FundingGrant(id="g2", funder="=HYPERLINK(\"x\")", fund_name="Odd", status="Approved", amount=50.0),
    ]
    return export_workbook_bytes(
        grants,
        [TenderSite(id="t1", name="Contracts Finder", login="bids@example.org")],
        [PhilanthropicSite(id="p1", organisation="Wolfson Foundation")],
        [StrategyItem(id="s1", fund="Legacy giving")],
        "call back Tuesday",
        SIMPLE_STATUSES,
    )


def test_workbook_has_one_sheet_per_collection() -> None:
    workbook = load_workbook(BytesIO(_export()))

    assert workbook.sheetnames == ["Funding", "Tenders", "Philanthropy", "Strategy", "Notes", "Dashboard"]
    funding = workbook["Funding"]
    assert funding["B2"].value == "Tudor Trust"
    assert funding["G3"].value == "Unassigned"
    assert funding["H2"].value == 100
    assert workbook["Notes"]["A2"].value == "call back Tuesday"


def test_tender_sheet_has_no_password_column() -> None:
    tenders = load_workbook(BytesIO(_export()))["Tenders"]

    headers = [cell.value for cell in tenders[1]]
    assert headers == ["Site Name", "Login"]


def test_user_text_is_not_written_as_formula() -> None:
    funding = load_workbook(BytesIO(_export()))["Funding"]

    assert funding["B3"].value == "=HYPERLINK(\"x\")"
    assert funding["B3"].data_type != "f"


def test_dashboard_totals_are_live_formulas() -> None:
    dashboard = load_workbook(BytesIO(_export()))["Dashboard"]

    labels = [dashboard.cell(row=row, column=1).value for row in range(2, 6)]
    assert labels == SIMPLE_STATUSES.labels
    assert dashboard["B2"].value == '=SUMIF(Funding!$E$2:$E$3,"=Pending",Funding!$H$2:$H$3)'
    assert dashboard["C2"].value == '=COUNTIF(Funding!$E$2:$E$3,"=Pending")'
    assert dashboard["A6"].value == "Total"
    assert dashboard["B6"].value == "=SUM(B2:B5)"
    assert dashboard["A8"].value == "Project"
    assert dashboard["A9"].value == "Youth"
    assert dashboard["B10"].value.startswith('=SUMIF(Funding!$G$2:$G$3,"=Unassigned",')


def test_dashboard_criteria_match_labels_literally() -> None:
    grants = [
        FundingGrant(id="g1", funder="A", fund_name="A", status="Pending", amount=10.0, project="CYP*"),
        FundingGrant(id="g2", funder="B", fund_name="B", status="Pending", amount=20.0, project='Say "hi"?'),
        FundingGrant(id="g3", funder="C", fund_name="C", status="Pending", amount=30.0, project="=Core"),
    ]
    dashboard = load_workbook(BytesIO(export_workbook_bytes(grants, [], [], [], "", SIMPLE_STATUSES)))["Dashboard"]

    assert dashboard["A9"].value == "CYP*"
    assert dashboard["B9"].value == '=SUMIF(Funding!$G$2:$G$4,"=CYP~*",Funding!$H$2:$H$4)'
    assert dashboard["C10"].value == '=COUNTIF(Funding!$G$2:$G$4,"=Say ""hi""~?")'
    assert dashboard["A11"].value == "=Core"
    assert dashboard["A11"].data_type != "f"
    assert dashboard["C11"].value == '=COUNTIF(Funding!$G$2:$G$4,"==Core")'
