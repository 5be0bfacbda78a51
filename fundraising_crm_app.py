"""Streamlit app for a charity fundraising team's grants and prospects."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime

import pandas as pd
import streamlit as st

from fundraising_crm import (
    CRMStore,
    FundingGrant,
    NotesDraft,
    SQLiteKeyValueStorage,
    classify_urgency,
    deadline_pipeline,
    export_workbook_bytes,
    format_currency,
    funding_outlook,
    generate_executive_report,
    grants_by_deadline,
    load_settings,
    month_label,
    monthly_forecast,
    project_summary,
    search_grants,
    search_philanthropic_sites,
    sort_by_status_order,
    status_summary,
    upcoming_deadlines,
)
from fundraising_crm.reporting import URGENCY_COLORS
from fundraising_crm.seed import PROJECTS


SETTINGS = load_settings()
STATUSES = SETTINGS.statuses

SUMMARY_PREVIEW_ROWS = 3
PIPELINE_PREVIEW_ROWS = 5
NEW_GRANT = "__new__"

logging.basicConfig(
    level=getattr(logging, SETTINGS.log_level, logging.INFO),
    format="%(asctime)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@st.cache_resource
def _get_store() -> CRMStore:
    storage = SQLiteKeyValueStorage(SETTINGS.db_path)
    storage.init_db()
    logger.info(f"Opened CRM storage at {SETTINGS.db_path}")
    return CRMStore(storage, statuses=STATUSES)


@st.cache_data
def _status_rows(grants: tuple[FundingGrant, ...]):
    return status_summary(grants)


@st.cache_data
def _project_rows(grants: tuple[FundingGrant, ...]):
    return project_summary(grants)


@st.cache_data
def _pipeline_rows(grants: tuple[FundingGrant, ...]):
    return deadline_pipeline(grants)


@st.cache_data
def _forecast_rows(grants: tuple[FundingGrant, ...]):
    return monthly_forecast(grants)


def _money(amount: float) -> str:
    return format_currency(amount, SETTINGS.currency_symbol)


def _inject_styles() -> None:
    st.markdown(
        """
        <style>
          @import url('https://fonts.googleapis.com/css2?family=Space+Grotesk:wght@500;700&family=Public+Sans:wght@400;500;600;700&display=swap');

          :root {
            --cf-green-700: #047857;
            --cf-green-600: #059669;
            --cf-slate-900: #0f172a;
            --cf-slate-100: #f1f5f9;
            --cf-card: #ffffff;
            --cf-text: #1e293b;
            --cf-muted: #64748b;
          }

          .stApp {
            background: linear-gradient(170deg, var(--cf-slate-100) 0%, #f8fafc 60%, #ecfdf5 100%);
            color: var(--cf-text);
          }

          html, body, [class*="css"] {
            font-family: "Public Sans", "Trebuchet MS", sans-serif;
          }

          .crm-hero {
            background: linear-gradient(124deg, var(--cf-slate-900), var(--cf-green-700));
            border-radius: 18px;
            color: #ffffff;
            padding: 1.2rem 1.25rem;
            margin-bottom: 1rem;
          }

          .crm-hero h1,
          .crm-hero p {
            color: #ffffff !important;
            margin: 0;
          }

          .crm-hero h1 {
            font-family: "Space Grotesk", "Arial Black", sans-serif;
            font-size: clamp(1.45rem, 2.6vw, 2.2rem);
          }

          .crm-hero p {
            margin-top: 0.55rem;
            opacity: 0.9;
          }

          .metric-card {
            border-radius: 14px;
            border: 1px solid #e2e8f0;
            background: var(--cf-card);
            padding: 0.75rem 0.8rem;
            min-height: 108px;
          }

          .metric-label {
            margin: 0;
            color: var(--cf-muted);
            font-weight: 600;
            font-size: 0.84rem;
          }

          .metric-value {
            margin: 0.3rem 0 0;
            color: var(--cf-green-700);
            font-family: "Space Grotesk", "Arial Black", sans-serif;
            font-size: 1.45rem;
          }

          .metric-sub {
            margin: 0.4rem 0 0;
            color: var(--cf-muted);
            font-size: 0.82rem;
          }

          .section-note {
            color: var(--cf-muted);
            font-weight: 500;
            margin-top: -0.2rem;
            margin-bottom: 0.8rem;
          }

          .funder-pill {
            display: inline-block;
            background: #f1f5f9;
            border: 1px solid #e2e8f0;
            border-radius: 6px;
            padding: 0.1rem 0.45rem;
            margin: 0 0.3rem 0.3rem 0;
            font-size: 0.8rem;
          }
        </style>
        """,
        unsafe_allow_html=True,
    )


def _render_metric_card(title: str, value: str, subtitle: str) -> None:
    st.markdown(
        f"""
        <div class="metric-card">
          <p class="metric-label">{title}</p>
          <p class="metric-value">{value}</p>
          <p class="metric-sub">{subtitle}</p>
        </div>
        """,
        unsafe_allow_html=True,
    )


def _hero() -> None:
    st.markdown(
        """
        <div class="crm-hero">
          <h1>Charity Fundraising Workspace</h1>
          <p>
            Grant opportunities, deadlines, tender portals, philanthropic prospects,
            and strategy notes for the fundraising team.
          </p>
        </div>
        """,
        unsafe_allow_html=True,
    )


def _section(title: str, note: str) -> None:
    st.markdown(f"### {title}")
    st.markdown(f"<p class='section-note'>{note}</p>", unsafe_allow_html=True)


def _table_or_info(frame: pd.DataFrame, empty_message: str) -> None:
    if frame.empty:
        st.info(empty_message)
        return
    st.dataframe(frame, use_container_width=True, hide_index=True)


def _status_color_css(status: str) -> str:
    return f"color: {STATUSES.color_for(status)}; font-weight: 700"


def _expandable(rows: list, preview: int, key: str) -> list:
    if len(rows) <= preview:
        return rows
    expanded = st.toggle(f"Expand list ({len(rows)})", key=key)
    return rows if expanded else rows[:preview]


def render_dashboard(store: CRMStore) -> None:
    grants = tuple(store.list_grants())
    outlook = funding_outlook(grants, STATUSES, SETTINGS.annual_target)

    _section("Deputy Director's Dashboard", "Overview of fundraising activities and financial outlook.")

    metric_columns = st.columns(4)
    with metric_columns[0]:
        _render_metric_card("Annual Target", _money(outlook.annual_target), "Fundraising goal this year")
    with metric_columns[1]:
        _render_metric_card(
            "Secured",
            _money(outlook.secured_amount),
            f"{outlook.target_progress_percent}% of target",
        )
    with metric_columns[2]:
        _render_metric_card("Open Pipeline", _money(outlook.open_amount), "Not yet secured")
    with metric_columns[3]:
        _render_metric_card(
            "Due Soon",
            str(len(upcoming_deadlines(grants))),
            f"Deadlines in the next 3 months of {len(grants)} grants",
        )

    left, right = st.columns(2, gap="large")
    with left:
        st.markdown("#### Funding Status Overview")
        status_rows = _status_rows(grants)
        visible = _expandable(status_rows, SUMMARY_PREVIEW_ROWS, "dashboard-status-expand")
        status_df = pd.DataFrame(
            [
                {"Status": row.label, "Amount": _money(row.amount), "Count": row.count}
                for row in visible
            ]
        )
        if status_df.empty:
            st.info("No grants recorded yet.")
        else:
            st.dataframe(
                status_df.style.map(_status_color_css, subset=["Status"]),
                use_container_width=True,
                hide_index=True,
            )

    with right:
        st.markdown("#### Project Allocation")
        project_rows = _project_rows(grants)
        visible = _expandable(project_rows, SUMMARY_PREVIEW_ROWS, "dashboard-project-expand")
        project_df = pd.DataFrame(
            [
                {"Project": row.label, "Amount": _money(row.amount), "Count": row.count}
                for row in visible
            ]
        )
        _table_or_info(project_df, "No grants recorded yet.")

    st.markdown("#### Funding Deadlines Pipeline")
    pipeline = _pipeline_rows(grants)
    if not pipeline:
        st.info("No pipeline data available.")
        return

    for row in _expandable(pipeline, PIPELINE_PREVIEW_ROWS, "dashboard-pipeline-expand"):
        prep_col, deadline_col, funders_col = st.columns([1, 1, 4])
        with prep_col:
            st.markdown(f"**Prep:** {row.prep_month}")
        with deadline_col:
            st.markdown(f"**Deadline:** {row.deadline_month}")
        with funders_col:
            pills = "".join(f"<span class='funder-pill'>{funder}</span>" for funder in row.funders)
            st.markdown(pills, unsafe_allow_html=True)


def _grant_form(store: CRMStore, grant: FundingGrant, is_new: bool) -> None:
    with st.form(f"grant-form-{grant.id}", clear_on_submit=is_new):
        left, right = st.columns(2)
        with left:
            funder = st.text_input("Funder Name *", value=grant.funder)
            fund_name = st.text_input("Fund / Grant Name *", value=grant.fund_name)
            status_options = STATUSES.labels
            if grant.status and grant.status not in status_options:
                status_options = status_options + [grant.status]
            status = st.selectbox(
                "Status",
                status_options,
                index=status_options.index(grant.status) if grant.status in status_options else 0,
            )
            project_options = [""] + PROJECTS
            if grant.project and grant.project not in project_options:
                project_options.append(grant.project)
            project = st.selectbox(
                "Relevant Project",
                project_options,
                index=project_options.index(grant.project) if grant.project in project_options else 0,
                format_func=lambda value: value or "Unassigned",
            )
            amount = st.number_input(
                f"Amount ({SETTINGS.currency_symbol})",
                min_value=0.0,
                value=float(grant.amount),
                step=250.0,
            )
            is_small_fund = st.checkbox("Small fund", value=grant.is_small_fund)

        with right:
            assigned_to = st.text_input("Assigned To", value=grant.assigned_to)
            deadline = st.date_input(
                "Deadline Date (Exact)",
                value=grant.deadline_date or date.today(),
            )
            prep_month = st.text_input("Prep Month", value=grant.prep_month, placeholder="e.g. Nov 2025")
            deadline_month = st.text_input(
                "Deadline Month",
                value=grant.deadline_month,
                placeholder=f"e.g. {month_label(date.today())}",
            )
            delivery_dates = st.text_input("Delivery Dates", value=grant.delivery_dates)
            website = st.text_input("Website", value=grant.website)

        details = st.text_area("Details", value=grant.details, height=80)
        action = st.text_area("Action Item", value=grant.action, height=70, placeholder="Describe the next step...")

        save = st.form_submit_button("Save Grant", use_container_width=True)
        if save:
            saved = store.save_grant(
                replace(
                    grant,
                    funder=funder,
                    fund_name=fund_name,
                    status=status,
                    project=project,
                    amount=float(amount),
                    is_small_fund=is_small_fund,
                    assigned_to=assigned_to.strip(),
                    deadline=deadline.isoformat(),
                    prep_month=prep_month.strip() or month_label(deadline),
                    deadline_month=deadline_month.strip() or month_label(deadline),
                    delivery_dates=delivery_dates.strip(),
                    website=website.strip(),
                    details=details.strip(),
                    action=action.strip(),
                )
            )
            if saved is not None:
                st.session_state.pop("draft_grant", None)
                st.success("Grant saved.")
                st.rerun()


def render_funding_tab(store: CRMStore) -> None:
    _section("Possible Funding & Grants", "Add, edit, and review grant opportunities.")

    grants = store.list_grants()
    search_cols = st.columns([4, 1])
    with search_cols[0]:
        search_term = st.text_input(
            "Search",
            placeholder="Search funders, fund names, or projects...",
            key="funding-search",
        )
    with search_cols[1]:
        smart = st.checkbox("Smart search", value=False, key="funding-smart-search")

    filtered = search_grants(grants, search_term, smart_search=smart)
    st.caption(f"{len(filtered)} records")

    grants_df = pd.DataFrame(
        [
            {
                "Funder": grant.funder,
                "Fund": grant.fund_name,
                "Status": grant.status,
                "Project": grant.project or "Unassigned",
                "Amount": _money(grant.amount),
                "Prep Month": grant.prep_month or "-",
                "Deadline Month": grant.deadline_month or "-",
                "Action": grant.action or "-",
            }
            for grant in filtered
        ]
    )
    if grants_df.empty:
        st.info("No grants match the current search.")
    else:
        st.dataframe(
            grants_df.style.map(_status_color_css, subset=["Status"]),
            use_container_width=True,
            hide_index=True,
        )

    st.markdown("#### Add or Edit Grant")
    grant_map = {grant.id: grant for grant in grants}
    selected_id = st.selectbox(
        "Record",
        options=[NEW_GRANT] + list(grant_map.keys()),
        format_func=lambda item_id: (
            "Add new grant"
            if item_id == NEW_GRANT
            else f"{grant_map[item_id].funder} - {grant_map[item_id].fund_name}"
        ),
        key="funding-record",
    )

    if selected_id == NEW_GRANT:
        if "draft_grant" not in st.session_state:
            st.session_state.draft_grant = store.new_grant()
        _grant_form(store, st.session_state.draft_grant, is_new=True)
        return

    _grant_form(store, grant_map[selected_id], is_new=False)
    if st.button("Delete Grant", key="funding-delete"):
        store.delete_grant(selected_id)
        st.success("Grant deleted.")
        st.rerun()


def render_deadlines_tab(store: CRMStore) -> None:
    _section("Funding to Respond to Deadlines", "Every grant ordered by its exact deadline, soonest first.")

    now = datetime.now()
    rows = []
    for grant in grants_by_deadline(store.list_grants()):
        deadline = grant.deadline_date
        rows.append(
            {
                "Deadline": deadline.strftime("%d %b %Y") if deadline else "-",
                "Urgency": classify_urgency(deadline, now).value if deadline else "-",
                "Funder": grant.funder,
                "Fund": grant.fund_name,
                "Amount": _money(grant.amount),
                "Assigned": grant.assigned_to or "-",
                "Status": grant.status,
            }
        )

    frame = pd.DataFrame(rows)
    if frame.empty:
        st.info("No chronological data available.")
        return

    colors = {tier.value: color for tier, color in URGENCY_COLORS.items()}
    styled = frame.style.map(
        lambda tier: f"color: {colors[tier]}; font-weight: 700" if tier in colors else "",
        subset=["Urgency"],
    ).map(_status_color_css, subset=["Status"])
    st.dataframe(styled, use_container_width=True, hide_index=True)


def render_summary_tab(store: CRMStore) -> None:
    _section("Summary of Funding", "Forecast by deadline month, status distribution, and an AI executive summary.")

    grants = tuple(store.list_grants())
    left, right = st.columns(2, gap="large")

    with left:
        st.markdown("#### Forecast by Deadline Month")
        forecast = _forecast_rows(grants)
        if forecast:
            forecast_df = pd.DataFrame(
                [{"Month": row.deadline_month, "Amount": row.amount} for row in forecast]
            )
            st.bar_chart(forecast_df, x="Month", y="Amount", color="#059669")
        else:
            st.info("No grants recorded yet.")

    with right:
        st.markdown("#### Amount by Status")
        status_rows = _status_rows(grants)
        if status_rows:
            status_df = pd.DataFrame(
                [
                    {"Status": row.label, "Amount": row.amount}
                    for row in sort_by_status_order(status_rows, STATUSES)
                ]
            )
            st.bar_chart(status_df, x="Status", y="Amount", color="#3b82f6")
        else:
            st.info("No grants recorded yet.")

    st.markdown("#### Executive Report")
    if "executive_report" not in st.session_state:
        st.session_state.executive_report = ""

    if st.button("Generate Report", key="summary-generate"):
        with st.spinner("Generating executive summary..."):
            st.session_state.executive_report = generate_executive_report(
                grants,
                store.list_strategy_items(),
                api_key=SETTINGS.openai_api_key,
                model=SETTINGS.report_model,
            )

    if st.session_state.executive_report:
        st.markdown(st.session_state.executive_report)


def render_tenders_tab(store: CRMStore) -> None:
    _section("Tender Sites", "Procurement portals and the login used for each. Passwords are not stored here.")

    with st.form("tender-form", clear_on_submit=True):
        name_col, login_col = st.columns(2)
        with name_col:
            name = st.text_input("Site Name")
        with login_col:
            login = st.text_input("Login / Username")
        if st.form_submit_button("Add Site", use_container_width=True):
            if store.add_tender_site(name, login) is not None:
                st.rerun()

    sites = store.list_tender_sites()
    if not sites:
        st.info("No tender sites added yet.")
        return

    for site in sites:
        info_col, action_col = st.columns([5, 1])
        with info_col:
            st.markdown(f"**{site.name}**  \nLogin: {site.login}")
        with action_col:
            if st.button("Delete", key=f"tender-delete-{site.id}"):
                store.delete_tender_site(site.id)
                st.rerun()


def render_philanthropy_tab(store: CRMStore) -> None:
    _section("Philanthropic Sites", "Foundations and philanthropic prospects worth approaching.")

    with st.expander("Add Organisation"):
        with st.form("philanthropy-form", clear_on_submit=True):
            organisation = st.text_input("Organisation")
            website = st.text_input("Website")
            notes = st.text_area("Notes", height=80)
            if st.form_submit_button("Save", use_container_width=True):
                if store.add_philanthropic_site(organisation, website, notes) is not None:
                    st.rerun()

    search_term = st.text_input("Search organisations", key="philanthropy-search")
    sites = search_philanthropic_sites(store.list_philanthropic_sites(), search_term)
    sites_df = pd.DataFrame(
        [
            {
                "Date added": site.date_added[:10] or "-",
                "Organisation": site.organisation,
                "Website": site.website or "-",
                "Notes": site.notes or "-",
            }
            for site in sites
        ]
    )
    _table_or_info(sites_df, "No organisations match the current search.")

    if sites:
        site_map = {site.id: site for site in sites}
        delete_cols = st.columns([4, 1])
        with delete_cols[0]:
            selected = st.selectbox(
                "Remove organisation",
                options=list(site_map.keys()),
                format_func=lambda site_id: site_map[site_id].organisation,
                key="philanthropy-delete-choice",
            )
        with delete_cols[1]:
            st.markdown("<br>", unsafe_allow_html=True)
            if st.button("Delete", key="philanthropy-delete", use_container_width=True):
                store.delete_philanthropic_site(selected)
                st.rerun()


def render_strategy_tab(store: CRMStore) -> None:
    _section("Strategy Development", "Initiatives under consideration and the thinking behind them.")

    with st.form("strategy-form", clear_on_submit=True):
        fund = st.text_input("Fund / Initiative")
        details = st.text_area("Details", height=80)
        comments = st.text_area("Comments", height=70)
        further_info = st.text_input("Further info / link")
        if st.form_submit_button("Add Item", use_container_width=True):
            if store.add_strategy_item(fund, details, comments, further_info) is not None:
                st.rerun()

    items = store.list_strategy_items()
    if not items:
        st.info("No strategy items yet.")
        return

    for item in items:
        with st.container(border=True):
            text_col, action_col = st.columns([5, 1])
            with text_col:
                st.markdown(f"**{item.fund}**")
                if item.details:
                    st.write(item.details)
                if item.comments:
                    st.caption(item.comments)
                if item.further_info:
                    st.caption(f"Further info: {item.further_info}")
            with action_col:
                if st.button("Delete", key=f"strategy-delete-{item.id}"):
                    store.delete_strategy_item(item.id)
                    st.rerun()


def _notes_draft(store: CRMStore) -> NotesDraft:
    if "notes_draft" not in st.session_state:
        st.session_state.notes_draft = NotesDraft(
            store,
            quiet_period=SETTINGS.notes_debounce_seconds,
        )
    return st.session_state.notes_draft


@st.fragment(run_every="1s")
def _notes_autosave(store: CRMStore) -> None:
    draft = _notes_draft(store)
    draft.flush_if_quiet()
    label = "Saved" if draft.status == "saved" else "Saving..."
    st.caption(f"Sync: {label}")


def render_notes_tab(store: CRMStore) -> None:
    _section("Notes Dump", "Rough notes, ideas, phone logs, and strategy fragments. Saved automatically.")

    draft = _notes_draft(store)
    st.text_area(
        "Notes",
        value=draft.text,
        height=420,
        key="notes-text",
        label_visibility="collapsed",
        on_change=lambda: draft.edit(st.session_state["notes-text"]),
    )
    _notes_autosave(store)


def render_export_sidebar(store: CRMStore) -> None:
    with st.sidebar:
        st.markdown("### Export")
        st.caption("All collections plus a dashboard sheet with live formulas.")
        st.download_button(
            "Download Spreadsheet",
            data=export_workbook_bytes(
                store.list_grants(),
                store.list_tender_sites(),
                store.list_philanthropic_sites(),
                store.list_strategy_items(),
                store.read_notes(),
                STATUSES,
            ),
            file_name=f"fundraising_crm_{date.today().isoformat()}.xlsx",
            mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            use_container_width=True,
        )


def main() -> None:
    st.set_page_config(
        page_title="Charity Fundraising Workspace",
        page_icon=":moneybag:",
        layout="wide",
    )
    store = _get_store()
    _inject_styles()
    _hero()
    render_export_sidebar(store)

    tabs = st.tabs(
        [
            "Dashboard",
            "Possible Funding & Grants",
            "Deadlines",
            "Summary of Funding",
            "Tender Sites",
            "Philanthropic Sites",
            "Strategy Development",
            "Notes Dump",
        ]
    )

    with tabs[0]:
        render_dashboard(store)
    with tabs[1]:
        render_funding_tab(store)
    with tabs[2]:
        render_deadlines_tab(store)
    with tabs[3]:
        render_summary_tab(store)
    with tabs[4]:
        render_tenders_tab(store)
    with tabs[5]:
        render_philanthropy_tab(store)
    with tabs[6]:
        render_strategy_tab(store)
    with tabs[7]:
        render_notes_tab(store)


if __name__ == "__main__":
    main()
