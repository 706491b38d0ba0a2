"""Shared fixtures for the Lead Dashboard tests."""

import os

os.environ.setdefault("LOG_TO_FILE", "false")

import pytest


def _make_lead(**overrides) -> dict:
    """A crm_leads row with sensible defaults."""
    lead = {
        "id": "lead-1",
        "ig_username": "fit_jane",
        "full_name": "Jane Doe",
        "email": "jane@example.com",
        "status": "in_progress",
        "initial_contact_date": "2026-10-01T09:00:00+00:00",
        "occupation": "Nurse",
        "pain_point": "No time for the gym",
        "age": 34,
        "goals": "Lose 5kg",
        "motivation": "Wedding",
        "timeline": "3 months",
        "conversation_stage": None,
        "notes": None,
        "created_at": "2026-10-01T09:00:00+00:00",
        "updated_at": "2026-10-02T09:00:00+00:00",
    }
    lead.update(overrides)
    return lead


@pytest.fixture
def make_lead():
    return _make_lead


@pytest.fixture
def scenario_leads():
    """Four leads covering proposed, booked, won and ghosted."""
    return [
        _make_lead(id="a", conversation_stage="Call Proposed", status="in_progress"),
        _make_lead(id="b", conversation_stage="Call Booked", status="in_progress"),
        _make_lead(id="c", conversation_stage="Closed/Won", status="completed"),
        _make_lead(id="d", conversation_stage="Ghosted", status="opt_out"),
    ]
