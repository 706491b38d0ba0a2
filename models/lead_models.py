"""
Lead Dashboard — Pydantic Models
==================================

Enumerations for the crm_leads table plus the request/response
schemas for the KPI and CRM endpoints.
"""
from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# ─── Enumerations ───────────────────────────────────────────

class LeadStatus(str, Enum):
    """Outreach status as stored in the Supabase enum."""
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"
    RESPONDED = "responded"
    OPT_OUT = "opt_out"


class ConvoStage(str, Enum):
    """Conversation funnel stages, in funnel order."""
    INITIAL_CONTACT = "Initial Contact"
    RAPPORT_BUILDING = "Rapport Building"
    QUALIFICATION = "Qualification"
    CALL_PROPOSED = "Call Proposed"
    CALL_BOOKED = "Call Booked"
    POST_CALL_FOLLOW_UP = "Post-Call Follow-up"
    CLOSED_WON = "Closed/Won"
    CLOSED_LOST = "Closed/Lost"
    GHOSTED = "Ghosted"


class TimeFrame(str, Enum):
    """Dashboard time-frame selector."""
    ONE_DAY = "1D"
    ONE_WEEK = "1W"
    ONE_MONTH = "1M"
    SIX_MONTHS = "6M"
    ONE_YEAR = "1Y"
    ALL = "ALL"
    CUSTOM = "CUSTOM"


# ─── Lead Records ───────────────────────────────────────────

class LeadResponse(BaseModel):
    """A crm_leads row as returned by API.

    status and conversation_stage stay plain strings so rows carrying
    values outside the enums still serialise.
    """
    id: str
    ig_username: str
    full_name: Optional[str] = None
    email: Optional[str] = None
    status: str
    initial_contact_date: Optional[datetime] = None
    occupation: Optional[str] = None
    pain_point: Optional[str] = None
    age: Optional[int] = None
    goals: Optional[str] = None
    motivation: Optional[str] = None
    timeline: Optional[str] = None
    conversation_stage: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class Badge(BaseModel):
    label: str
    color: str


class LeadTableRow(BaseModel):
    """One row of the CRM table, display-ready."""
    id: str
    username: str
    full_name: str
    email: str
    status: Badge
    initial_contact_date: str
    occupation: str
    pain_point: str
    age: str
    conversation_stage: Badge
    goals: str
    motivation: str
    timeline: str


# ─── KPI Bundles ────────────────────────────────────────────

class LeadKPIs(BaseModel):
    """Lead-funnel KPIs. Rates are percentages in [0, 100]."""
    model_config = ConfigDict(frozen=True)

    total_leads: int = 0
    leads_won: int = 0
    leads_lost: int = 0
    leads_in_progress: int = 0
    response_rate: float = 0.0
    opt_out_rate: float = 0.0


class CallsKPIs(BaseModel):
    """Call-funnel KPIs. calls_cancelled counts Ghosted leads as a proxy."""
    model_config = ConfigDict(frozen=True)

    calls_proposed: int = 0
    calls_booked: int = 0
    calls_cancelled: int = 0
    call_show_up_rate: float = 0.0
    booking_rate: float = 0.0


class TrendPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    date: date
    value: float = 0.0


class KPICard(BaseModel):
    """A summary card: title, formatted value, colour key and sparkline."""
    title: str
    value: str
    color: str
    trend: list[TrendPoint] = Field(default_factory=list)


# ─── API Envelopes ──────────────────────────────────────────

class WindowInfo(BaseModel):
    time_frame: TimeFrame
    start: Optional[datetime] = None
    end: Optional[datetime] = None


class KPIDashboardResponse(BaseModel):
    window: WindowInfo
    lead_kpis: LeadKPIs
    calls_kpis: CallsKPIs
    lead_cards: list[KPICard]
    call_cards: list[KPICard]


class LeadListResponse(BaseModel):
    window: WindowInfo
    results: list[LeadTableRow]
    count: int
    total: int


class LeadDetailResponse(BaseModel):
    lead: LeadResponse
    status_badge: Badge
    stage_badge: Badge
