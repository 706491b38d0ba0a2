"""
Lead Dashboard — View Assembly
================================

Wires the fetch → scope → aggregate cycle for one time-frame selection.
Each call works on a fresh snapshot of leads; nothing is cached between
selections.

Functions:
  load_window_leads()    - Resolve the window and fetch its leads
  build_kpi_dashboard()  - KPI bundles and cards for a lead snapshot
  build_lead_table()     - Filtered, sorted CRM rows for a lead snapshot
"""
from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Tuple

from models.lead_models import (
    KPIDashboardResponse,
    LeadListResponse,
    LeadTableRow,
    TimeFrame,
    WindowInfo,
)
from scripts.lib.crm_filters import filter_crm_leads, sort_leads, to_table_row
from scripts.lib.kpi_calculations import compute_calls_kpis, compute_lead_kpis
from scripts.lib.kpi_cards import build_call_cards, build_lead_cards
from scripts.lib.logger import setup_logger
from scripts.lib.supabase_client import fetch_leads
from scripts.lib.time_windows import QueryWindow, resolve_query_bounds

logger = setup_logger("lead_dashboard")


def load_window_leads(
    time_frame: TimeFrame,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
    client=None,
    now: Optional[datetime] = None,
) -> Tuple[QueryWindow, List[dict]]:
    """Resolve the created_at window for a selection and fetch its leads."""
    window = resolve_query_bounds(time_frame, date_from, date_to, now=now)
    leads = fetch_leads(window, client=client)
    return window, leads


def _window_info(time_frame: TimeFrame, window: QueryWindow) -> WindowInfo:
    return WindowInfo(time_frame=time_frame, start=window.start, end=window.end)


def build_kpi_dashboard(
    leads: List[dict],
    time_frame: TimeFrame,
    window: QueryWindow,
) -> KPIDashboardResponse:
    lead_kpis = compute_lead_kpis(leads)
    calls_kpis = compute_calls_kpis(leads)
    logger.debug(
        "KPIs for %s: %d leads, %d won, %d booked",
        time_frame.value, lead_kpis.total_leads, lead_kpis.leads_won, calls_kpis.calls_booked,
    )
    return KPIDashboardResponse(
        window=_window_info(time_frame, window),
        lead_kpis=lead_kpis,
        calls_kpis=calls_kpis,
        lead_cards=build_lead_cards(lead_kpis),
        call_cards=build_call_cards(calls_kpis),
    )


def build_lead_table(
    leads: List[dict],
    time_frame: TimeFrame,
    window: QueryWindow,
    search: Optional[str] = None,
    status: Optional[str] = None,
    stage: Optional[str] = None,
    contact_from: Optional[datetime] = None,
    contact_to: Optional[datetime] = None,
    sort_by: str = "created_at",
    descending: bool = True,
) -> LeadListResponse:
    """CRM table for a lead snapshot: 'Showing count of total leads'."""
    filtered = filter_crm_leads(
        leads,
        search=search,
        status=status,
        stage=stage,
        contact_from=contact_from,
        contact_to=contact_to,
    )
    rows = [LeadTableRow(**to_table_row(lead)) for lead in sort_leads(filtered, sort_by, descending)]
    return LeadListResponse(
        window=_window_info(time_frame, window),
        results=rows,
        count=len(rows),
        total=len(leads),
    )
