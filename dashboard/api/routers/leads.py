"""
Lead Dashboard — Leads Router
===============================
CRM table and lead detail endpoints.

Endpoints:
  GET /api/leads            - Leads for a time frame with CRM filters and sorting
  GET /api/leads/{id}       - Single lead with status and stage badges
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from models.lead_models import (
    Badge,
    LeadDetailResponse,
    LeadListResponse,
    LeadResponse,
    TimeFrame,
)
from scripts.lib.crm_filters import stage_badge, status_badge
from scripts.lib.errors import ConfigError, DataFetchError, SchemaValidationError
from scripts.lib.lead_dashboard import build_lead_table, load_window_leads
from scripts.lib.logger import setup_logger
from scripts.lib.supabase_client import fetch_lead
from scripts.lib.time_windows import parse_timestamp

logger = setup_logger("leads_router")

router = APIRouter(prefix="/api/leads", tags=["leads"])


@router.get("", response_model=LeadListResponse)
async def list_leads(
    time_frame: TimeFrame = Query(TimeFrame.ALL, description="Time frame for created_at"),
    date_from: Optional[datetime] = Query(None, description="CUSTOM range start"),
    date_to: Optional[datetime] = Query(None, description="CUSTOM range end"),
    search: Optional[str] = Query(None, description="Match on username or full name"),
    status: Optional[str] = Query(None, description="Filter by status (or 'all')"),
    stage: Optional[str] = Query(None, description="Filter by conversation stage (or 'all')"),
    contact_from: Optional[datetime] = Query(None, description="Earliest initial contact date"),
    contact_to: Optional[datetime] = Query(None, description="Latest initial contact date"),
    sort: str = Query("created_at", description="Sort field"),
    order: str = Query("desc", description="Sort order: asc or desc"),
):
    """List leads with CRM filtering and sorting."""
    if (
        time_frame == TimeFrame.CUSTOM
        and date_from and date_to
        and parse_timestamp(date_to) < parse_timestamp(date_from)
    ):
        raise HTTPException(status_code=422, detail="date_to must not be before date_from")

    try:
        window, leads = load_window_leads(time_frame, date_from, date_to)
        return build_lead_table(
            leads,
            time_frame,
            window,
            search=search,
            status=status,
            stage=stage,
            contact_from=contact_from,
            contact_to=contact_to,
            sort_by=sort,
            descending=order.lower() == "desc",
        )
    except SchemaValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except ConfigError as e:
        logger.error("List leads unavailable: %s", e)
        raise HTTPException(status_code=503, detail="Lead data source not configured")
    except DataFetchError as e:
        logger.error("List leads failed: %s", e)
        raise HTTPException(status_code=502, detail="Failed to fetch leads")


@router.get("/{lead_id}", response_model=LeadDetailResponse)
async def get_lead(lead_id: str):
    """Lead detail view."""
    try:
        lead = fetch_lead(lead_id)
    except ConfigError as e:
        logger.error("Get lead unavailable: %s", e)
        raise HTTPException(status_code=503, detail="Lead data source not configured")
    except DataFetchError as e:
        logger.error("Get lead failed: %s", e)
        raise HTTPException(status_code=502, detail="Failed to fetch lead")

    if not lead:
        raise HTTPException(status_code=404, detail="Lead not found")

    return LeadDetailResponse(
        lead=LeadResponse(**lead),
        status_badge=Badge(**status_badge(lead.get("status"))),
        stage_badge=Badge(**stage_badge(lead.get("conversation_stage"))),
    )
