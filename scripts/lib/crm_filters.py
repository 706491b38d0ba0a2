"""
Lead Dashboard — CRM View
===========================

In-memory filtering, sorting and display helpers for the CRM lead table.
Filters run over the leads already fetched for the current time frame.

Functions:
  filter_crm_leads()  - Search, status, stage and initial-contact-date filters
  sort_leads()        - Stable sort on any lead column, missing values last
  status_badge()      - {label, color} for a lead status
  stage_badge()       - {label, color} for a conversation stage
  to_table_row()      - Display-ready table row
"""
from __future__ import annotations

import math
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple

from models.lead_models import ConvoStage, LeadStatus
from scripts.lib.errors import SchemaValidationError
from scripts.lib.time_windows import parse_timestamp

ALL = "all"
EMPTY = "-"

SORTABLE_FIELDS = {
    "ig_username", "full_name", "email", "status", "initial_contact_date",
    "occupation", "pain_point", "age", "goals", "motivation", "timeline",
    "conversation_stage", "created_at", "updated_at",
}

# ─── Badge Tables ───────────────────────────────────────────

STATUS_LABELS: Dict[str, str] = {
    LeadStatus.COMPLETED.value: "Completed",
    LeadStatus.IN_PROGRESS.value: "In Progress",
    LeadStatus.FAILED.value: "Failed",
    LeadStatus.RESPONDED.value: "Responded",
    LeadStatus.OPT_OUT.value: "Opt Out",
}

STATUS_COLORS: Dict[str, str] = {
    LeadStatus.COMPLETED.value: "green",
    LeadStatus.IN_PROGRESS.value: "yellow",
    LeadStatus.FAILED.value: "red",
    LeadStatus.RESPONDED.value: "blue",
    LeadStatus.OPT_OUT.value: "gray",
}
STATUS_FALLBACK_COLOR = STATUS_COLORS[LeadStatus.IN_PROGRESS.value]

STAGE_COLORS: Dict[str, str] = {
    ConvoStage.INITIAL_CONTACT.value: "purple",
    ConvoStage.RAPPORT_BUILDING.value: "indigo",
    ConvoStage.QUALIFICATION.value: "blue",
    ConvoStage.CALL_PROPOSED.value: "cyan",
    ConvoStage.CALL_BOOKED.value: "teal",
    ConvoStage.POST_CALL_FOLLOW_UP.value: "yellow",
    ConvoStage.CLOSED_WON.value: "green",
    ConvoStage.CLOSED_LOST.value: "red",
    ConvoStage.GHOSTED.value: "gray",
}
STAGE_FALLBACK_COLOR = "gray"


def status_badge(status: Optional[str]) -> Dict[str, str]:
    """Label and colour for a status; unknown values keep their raw text."""
    if status in STATUS_LABELS:
        return {"label": STATUS_LABELS[status], "color": STATUS_COLORS[status]}
    return {"label": str(status) if status else EMPTY, "color": STATUS_FALLBACK_COLOR}


def stage_badge(stage: Optional[str]) -> Dict[str, str]:
    """Label and colour for a conversation stage; no stage renders as '-'."""
    if not stage:
        return {"label": EMPTY, "color": STAGE_FALLBACK_COLOR}
    return {"label": str(stage), "color": STAGE_COLORS.get(stage, STAGE_FALLBACK_COLOR)}


# ─── Filtering ──────────────────────────────────────────────

def _matches_search(lead: dict, query: str) -> bool:
    username = (lead.get("ig_username") or "").lower()
    full_name = (lead.get("full_name") or "").lower()
    return query in username or query in full_name


def filter_crm_leads(
    leads: Iterable[dict],
    search: Optional[str] = None,
    status: Optional[str] = None,
    stage: Optional[str] = None,
    contact_from: Optional[datetime] = None,
    contact_to: Optional[datetime] = None,
) -> List[dict]:
    """
    Apply the CRM table filters.

    Args:
        leads: Leads for the current time frame.
        search: Case-insensitive match on username or full name.
        status: Exact status, or None / "all" for any.
        stage: Exact conversation stage, or None / "all" for any.
        contact_from: Earliest initial_contact_date. The date filter only
            runs when this is set, and leads without a contact date pass.
        contact_to: Latest initial_contact_date.

    Returns:
        Matching leads in their original order.
    """
    query = (search or "").strip().lower()
    contact_from = parse_timestamp(contact_from)
    contact_to = parse_timestamp(contact_to)

    results = []
    for lead in leads:
        if query and not _matches_search(lead, query):
            continue
        if status and status != ALL and lead.get("status") != status:
            continue
        if stage and stage != ALL and lead.get("conversation_stage") != stage:
            continue

        if contact_from is not None:
            contacted = parse_timestamp(lead.get("initial_contact_date"))
            if contacted is not None:
                if contacted < contact_from:
                    continue
                if contact_to is not None and contacted > contact_to:
                    continue

        results.append(lead)
    return results


# ─── Sorting ────────────────────────────────────────────────

DATE_FIELDS = {"initial_contact_date", "created_at", "updated_at"}


def _sort_value(lead: dict, sort_by: str) -> Optional[Tuple[int, Any]]:
    """
    Comparable (rank, value) key, or None when the lead has no value.

    Numbers and numeric strings rank before other text so a column holding
    both 40 and "21" still sorts.
    """
    value = lead.get(sort_by)
    if value is None or value == "":
        return None
    if sort_by in DATE_FIELDS:
        parsed = parse_timestamp(value)
        return (0, parsed) if parsed is not None else None
    if isinstance(value, bool):
        return (1, str(value).lower())
    if isinstance(value, (int, float)) and math.isfinite(value):
        return (0, float(value))
    text = str(value).strip()
    try:
        number = float(text)
    except ValueError:
        return (1, text.lower())
    return (0, number) if math.isfinite(number) else (1, text.lower())


def sort_leads(
    leads: Iterable[dict],
    sort_by: str = "created_at",
    descending: bool = True,
) -> List[dict]:
    """
    Sort leads by a column. Leads missing the value go last either way.

    Raises:
        SchemaValidationError: sort_by is not a lead column.
    """
    if sort_by not in SORTABLE_FIELDS:
        raise SchemaValidationError(f"Cannot sort by '{sort_by}'", field=sort_by)

    present, missing = [], []
    for lead in leads:
        key = _sort_value(lead, sort_by)
        if key is None:
            missing.append(lead)
        else:
            present.append((key, lead))
    present.sort(key=lambda pair: pair[0], reverse=descending)
    return [lead for _, lead in present] + missing


# ─── Display ────────────────────────────────────────────────

def _display(value: Any) -> str:
    if value is None or value == "":
        return EMPTY
    return str(value)


def to_table_row(lead: dict) -> Dict[str, Any]:
    """Display-ready CRM table row with '-' for empty cells."""
    contacted = parse_timestamp(lead.get("initial_contact_date"))
    return {
        "id": str(lead.get("id", "")),
        "username": f"@{lead.get('ig_username') or ''}",
        "full_name": _display(lead.get("full_name")),
        "email": _display(lead.get("email")),
        "status": status_badge(lead.get("status")),
        "initial_contact_date": contacted.date().isoformat() if contacted else EMPTY,
        "occupation": _display(lead.get("occupation")),
        "pain_point": _display(lead.get("pain_point")),
        "age": _display(lead.get("age")),
        "conversation_stage": stage_badge(lead.get("conversation_stage")),
        "goals": _display(lead.get("goals")),
        "motivation": _display(lead.get("motivation")),
        "timeline": _display(lead.get("timeline")),
    }
