"""
Lead Dashboard — KPI Calculations
===================================

Pure functions turning a time-scoped collection of crm_leads rows into
the lead-funnel and call-funnel KPI bundles, plus the placeholder trend
series and the number formatters used by the KPI cards.

Functions:
  compute_lead_kpis()      - Totals, won/lost/in-progress, response and opt-out rates
  compute_calls_kpis()     - Proposed/booked/cancelled, show-up and booking rates
  count_completed_calls()  - Leads past their call (feeds the show-up rate)
  generate_trend_series()  - Zero-valued daily series for the card sparklines
  format_percentage()      - 25.0%
  format_count()           - 1,234

Unrecognised status or stage values are counted in total_leads and miss
every other predicate. Won, lost and in-progress are independent counts
and need not sum to total_leads.
"""
from __future__ import annotations

import math
from datetime import date, datetime, timedelta, timezone
from typing import Any, Iterable, List, Optional

from models.lead_models import CallsKPIs, ConvoStage, LeadKPIs, LeadStatus, TrendPoint

ACTIVE_STAGES = (
    ConvoStage.INITIAL_CONTACT.value,
    ConvoStage.RAPPORT_BUILDING.value,
    ConvoStage.QUALIFICATION.value,
    ConvoStage.CALL_PROPOSED.value,
    ConvoStage.CALL_BOOKED.value,
    ConvoStage.POST_CALL_FOLLOW_UP.value,
)

# Stages reached only after the booked call took place
COMPLETED_CALL_STAGES = (
    ConvoStage.POST_CALL_FOLLOW_UP.value,
    ConvoStage.CLOSED_WON.value,
    ConvoStage.CLOSED_LOST.value,
)

DEFAULT_TREND_POINTS = 7


def _safe_rate(numerator: int, denominator: int) -> float:
    """Percentage of numerator over denominator; 0 when the denominator is 0."""
    if denominator == 0:
        return 0.0
    return numerator / denominator * 100


def _stage(lead: dict) -> Optional[str]:
    return lead.get("conversation_stage")


def _count_stage(leads: List[dict], stage: ConvoStage) -> int:
    return sum(1 for lead in leads if _stage(lead) == stage.value)


def _count_status(leads: List[dict], status: LeadStatus) -> int:
    return sum(1 for lead in leads if lead.get("status") == status.value)


def compute_lead_kpis(leads: Iterable[dict]) -> LeadKPIs:
    """Calculate lead-funnel KPIs from leads already scoped to a time window."""
    leads = list(leads)
    total_leads = len(leads)

    # In progress: in_progress status OR an active stage, whichever holds
    leads_in_progress = sum(
        1 for lead in leads
        if lead.get("status") == LeadStatus.IN_PROGRESS.value
        or _stage(lead) in ACTIVE_STAGES
    )

    leads_responded = _count_status(leads, LeadStatus.RESPONDED)
    leads_opt_out = _count_status(leads, LeadStatus.OPT_OUT)

    return LeadKPIs(
        total_leads=total_leads,
        leads_won=_count_stage(leads, ConvoStage.CLOSED_WON),
        leads_lost=_count_stage(leads, ConvoStage.CLOSED_LOST),
        leads_in_progress=leads_in_progress,
        response_rate=_safe_rate(leads_responded, total_leads),
        opt_out_rate=_safe_rate(leads_opt_out, total_leads),
    )


def count_completed_calls(leads: Iterable[dict]) -> int:
    """Leads in Post-Call Follow-up, Closed/Won or Closed/Lost."""
    return sum(1 for lead in leads if _stage(lead) in COMPLETED_CALL_STAGES)


def compute_calls_kpis(leads: Iterable[dict]) -> CallsKPIs:
    """
    Calculate call-funnel KPIs from conversation stages.

    There is no cancellation flag on a lead, so calls_cancelled counts
    Ghosted leads as a proxy.
    """
    leads = list(leads)
    calls_proposed = _count_stage(leads, ConvoStage.CALL_PROPOSED)
    calls_booked = _count_stage(leads, ConvoStage.CALL_BOOKED)
    calls_completed = count_completed_calls(leads)

    return CallsKPIs(
        calls_proposed=calls_proposed,
        calls_booked=calls_booked,
        calls_cancelled=_count_stage(leads, ConvoStage.GHOSTED),
        call_show_up_rate=_safe_rate(calls_completed, calls_booked),
        booking_rate=_safe_rate(calls_booked, calls_proposed),
    )


def generate_trend_series(
    point_count: int = DEFAULT_TREND_POINTS,
    today: Optional[date] = None,
) -> List[TrendPoint]:
    """
    Daily sparkline points ending today (UTC), oldest first.

    Values are always zero until historical snapshots exist to back them.
    """
    if today is None:
        today = datetime.now(timezone.utc).date()
    elif isinstance(today, datetime):
        today = today.date()

    return [
        TrendPoint(date=today - timedelta(days=offset), value=0.0)
        for offset in range(point_count - 1, -1, -1)
    ]


def _finite_float(value: Any) -> float:
    """Coerce to float; non-numeric and non-finite values become 0."""
    try:
        v = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(v):
        return 0.0
    return v


def format_percentage(value: Any) -> str:
    """Format a percentage with one decimal place, e.g. 25.0%."""
    return f"{_finite_float(value):.1f}%"


def format_count(value: Any) -> str:
    """Format a number with thousands separators, e.g. 1,234."""
    v = _finite_float(value)
    if v == int(v):
        return f"{int(v):,}"
    return f"{v:,.1f}"
