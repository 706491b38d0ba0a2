"""
Lead Dashboard — KPIs Router
==============================
KPI summary for the selected time frame, computed over a fresh fetch
of crm_leads.

Endpoints:
  GET /api/kpis          - Lead and call KPIs plus formatted cards
  GET /api/kpis/trend    - Placeholder sparkline series
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from models.lead_models import KPIDashboardResponse, TimeFrame, TrendPoint
from scripts.lib.errors import ConfigError, DataFetchError
from scripts.lib.kpi_calculations import generate_trend_series
from scripts.lib.lead_dashboard import build_kpi_dashboard, load_window_leads
from scripts.lib.logger import setup_logger
from scripts.lib.time_windows import parse_timestamp

logger = setup_logger("kpis_router")

router = APIRouter(prefix="/api/kpis", tags=["kpis"])


@router.get("", response_model=KPIDashboardResponse)
async def kpi_dashboard(
    time_frame: TimeFrame = Query(TimeFrame.ALL, description="1D, 1W, 1M, 6M, 1Y, ALL or CUSTOM"),
    date_from: Optional[datetime] = Query(None, description="CUSTOM range start (inclusive)"),
    date_to: Optional[datetime] = Query(None, description="CUSTOM range end (inclusive)"),
):
    """Lead-funnel and call-funnel KPIs for the selected window."""
    if (
        time_frame == TimeFrame.CUSTOM
        and date_from and date_to
        and parse_timestamp(date_to) < parse_timestamp(date_from)
    ):
        raise HTTPException(status_code=422, detail="date_to must not be before date_from")

    try:
        window, leads = load_window_leads(time_frame, date_from, date_to)
    except ConfigError as e:
        logger.error("KPI dashboard unavailable: %s", e)
        raise HTTPException(status_code=503, detail="Lead data source not configured")
    except DataFetchError as e:
        logger.error("KPI dashboard fetch failed: %s", e)
        raise HTTPException(
            status_code=502,
            detail="Failed to fetch leads. Please check your Supabase configuration.",
        )

    return build_kpi_dashboard(leads, time_frame, window)


@router.get("/trend", response_model=list[TrendPoint])
async def trend_series(
    points: int = Query(7, ge=1, le=90, description="Number of daily points"),
):
    """Daily sparkline series; values are zero placeholders."""
    return generate_trend_series(points)
