"""
KPI card assembly for the dashboard summary view.
Pairs each metric with its title, formatted value, colour key and
placeholder sparkline.
"""
from __future__ import annotations

from typing import List

from models.lead_models import CallsKPIs, KPICard, LeadKPIs
from scripts.lib.kpi_calculations import format_count, format_percentage, generate_trend_series

# (title, field, colour, is_rate)
LEAD_CARD_LAYOUT = [
    ("Total Leads", "total_leads", "blue", False),
    ("Leads Won", "leads_won", "green", False),
    ("Leads Lost", "leads_lost", "red", False),
    ("In Progress", "leads_in_progress", "yellow", False),
    ("Response Rate", "response_rate", "purple", True),
    ("Opt-out Rate", "opt_out_rate", "orange", True),
]

CALL_CARD_LAYOUT = [
    ("Calls Proposed", "calls_proposed", "cyan", False),
    ("Calls Booked", "calls_booked", "teal", False),
    ("Calls Cancelled", "calls_cancelled", "pink", False),
    ("Show-up Rate", "call_show_up_rate", "indigo", True),
    ("Booking Rate", "booking_rate", "orange", True),
]


def _build_cards(kpis, layout) -> List[KPICard]:
    cards = []
    for title, field, color, is_rate in layout:
        raw = getattr(kpis, field)
        value = format_percentage(raw) if is_rate else format_count(raw)
        cards.append(KPICard(
            title=title,
            value=value,
            color=color,
            trend=generate_trend_series(),
        ))
    return cards


def build_lead_cards(kpis: LeadKPIs) -> List[KPICard]:
    """Six lead-funnel cards in dashboard order."""
    return _build_cards(kpis, LEAD_CARD_LAYOUT)


def build_call_cards(kpis: CallsKPIs) -> List[KPICard]:
    """Five call-funnel cards in dashboard order."""
    return _build_cards(kpis, CALL_CARD_LAYOUT)
