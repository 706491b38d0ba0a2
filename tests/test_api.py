"""Tests for the dashboard API endpoints, with Supabase mocked out."""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from dashboard.api.main import app
from scripts.lib import supabase_client
from scripts.lib.errors import ConfigError, DataFetchError

FETCH_LEADS = "scripts.lib.lead_dashboard.fetch_leads"
FETCH_LEAD = "dashboard.api.routers.leads.fetch_lead"


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def malformed_supabase():
    """Credentials that are set but rejected by create_client."""
    with patch.object(supabase_client, "_client", None), \
            patch.object(supabase_client, "SUPABASE_URL", "my-project.supabase.co"), \
            patch.object(supabase_client, "SUPABASE_KEY", "not-a-jwt"), \
            patch("supabase.create_client", side_effect=Exception("Invalid URL")):
        yield


class TestHealth:
    def test_reports_supabase_availability(self, client):
        with patch("scripts.lib.supabase_client.get_client", return_value=object()):
            body = client.get("/api/health").json()
        assert body["status"] == "healthy"
        assert body["integrations"]["supabase"] is True

    def test_healthy_without_supabase(self, client):
        with patch("scripts.lib.supabase_client.get_client", side_effect=ConfigError("missing")):
            body = client.get("/api/health").json()
        assert body["status"] == "healthy"
        assert body["integrations"]["supabase"] is False


class TestKpiEndpoint:
    def test_scenario(self, client, scenario_leads):
        with patch(FETCH_LEADS, return_value=scenario_leads) as fetch:
            resp = client.get("/api/kpis", params={"time_frame": "1M"})
        assert resp.status_code == 200
        body = resp.json()
        assert body["window"]["time_frame"] == "1M"
        assert body["window"]["start"] is not None
        assert body["lead_kpis"]["total_leads"] == 4
        assert body["lead_kpis"]["opt_out_rate"] == 25.0
        assert body["calls_kpis"]["calls_cancelled"] == 1
        assert [c["title"] for c in body["lead_cards"]][0] == "Total Leads"
        assert len(body["lead_cards"]) == 6
        assert len(body["call_cards"]) == 5
        window = fetch.call_args.args[0]
        assert window.start_inclusive is False

    def test_defaults_to_all_time(self, client):
        with patch(FETCH_LEADS, return_value=[]) as fetch:
            body = client.get("/api/kpis").json()
        assert body["window"] == {"time_frame": "ALL", "start": None, "end": None}
        assert body["lead_kpis"]["total_leads"] == 0
        assert fetch.call_args.args[0].start is None

    def test_custom_range(self, client):
        with patch(FETCH_LEADS, return_value=[]) as fetch:
            resp = client.get("/api/kpis", params={
                "time_frame": "CUSTOM",
                "date_from": "2026-01-01T00:00:00Z",
                "date_to": "2026-01-31T23:59:59Z",
            })
        assert resp.status_code == 200
        window = fetch.call_args.args[0]
        assert window.start_inclusive is True
        assert window.end.day == 31

    def test_reversed_range_is_rejected(self, client):
        with patch(FETCH_LEADS) as fetch:
            resp = client.get("/api/kpis", params={
                "time_frame": "CUSTOM",
                "date_from": "2026-02-01T00:00:00",
                "date_to": "2026-01-01T00:00:00",
            })
        assert resp.status_code == 422
        fetch.assert_not_called()

    def test_range_is_ignored_outside_custom(self, client):
        with patch(FETCH_LEADS, return_value=[]) as fetch:
            resp = client.get("/api/kpis", params={
                "time_frame": "1M",
                "date_from": "2026-02-01T00:00:00",
                "date_to": "2026-01-01T00:00:00",
            })
        assert resp.status_code == 200
        window = fetch.call_args.args[0]
        assert window.end is None
        assert window.start_inclusive is False

    def test_unknown_time_frame_is_rejected(self, client):
        assert client.get("/api/kpis", params={"time_frame": "2W"}).status_code == 422

    def test_fetch_failure_is_502(self, client):
        with patch(FETCH_LEADS, side_effect=DataFetchError("boom", source="crm_leads")):
            resp = client.get("/api/kpis")
        assert resp.status_code == 502
        assert resp.json()["detail"] == "Failed to fetch leads. Please check your Supabase configuration."

    def test_missing_config_is_503(self, client):
        with patch(FETCH_LEADS, side_effect=ConfigError("no url", setting="SUPABASE_URL")):
            assert client.get("/api/kpis").status_code == 503

    def test_malformed_config_is_503(self, client, malformed_supabase):
        resp = client.get("/api/kpis", params={"time_frame": "1M"})
        assert resp.status_code == 503
        assert resp.json()["detail"] == "Lead data source not configured"


class TestTrendEndpoint:
    def test_default_seven_points(self, client):
        body = client.get("/api/kpis/trend").json()
        assert len(body) == 7
        assert all(p["value"] == 0 for p in body)
        assert body[0]["date"] < body[-1]["date"]

    def test_points_bounds(self, client):
        assert len(client.get("/api/kpis/trend", params={"points": 30}).json()) == 30
        assert client.get("/api/kpis/trend", params={"points": 0}).status_code == 422
        assert client.get("/api/kpis/trend", params={"points": 91}).status_code == 422


class TestLeadsEndpoint:
    def test_filters_and_counts(self, client, scenario_leads):
        with patch(FETCH_LEADS, return_value=scenario_leads):
            body = client.get("/api/leads", params={"stage": "Ghosted"}).json()
        assert body["total"] == 4
        assert body["count"] == 1
        row = body["results"][0]
        assert row["id"] == "d"
        assert row["status"] == {"label": "Opt Out", "color": "gray"}
        assert row["username"] == "@fit_jane"

    def test_sort_order(self, client, make_lead):
        leads = [
            make_lead(id="old", created_at="2026-09-01T00:00:00+00:00"),
            make_lead(id="new", created_at="2026-10-01T00:00:00+00:00"),
        ]
        with patch(FETCH_LEADS, return_value=leads):
            desc = client.get("/api/leads").json()
            asc = client.get("/api/leads", params={"order": "asc"}).json()
        assert [r["id"] for r in desc["results"]] == ["new", "old"]
        assert [r["id"] for r in asc["results"]] == ["old", "new"]

    def test_bad_sort_field_is_422(self, client, scenario_leads):
        with patch(FETCH_LEADS, return_value=scenario_leads):
            assert client.get("/api/leads", params={"sort": "nope"}).status_code == 422

    def test_fetch_failure_is_502(self, client):
        with patch(FETCH_LEADS, side_effect=DataFetchError("boom")):
            assert client.get("/api/leads").status_code == 502

    def test_malformed_config_is_503(self, client, malformed_supabase):
        assert client.get("/api/leads").status_code == 503

    def test_reversed_custom_range_is_422(self, client):
        with patch(FETCH_LEADS) as fetch:
            resp = client.get("/api/leads", params={
                "time_frame": "CUSTOM",
                "date_from": "2026-02-01T00:00:00",
                "date_to": "2026-01-01T00:00:00",
            })
        assert resp.status_code == 422
        fetch.assert_not_called()

    def test_range_is_ignored_outside_custom(self, client, scenario_leads):
        with patch(FETCH_LEADS, return_value=scenario_leads):
            resp = client.get("/api/leads", params={
                "time_frame": "ALL",
                "date_from": "2026-02-01T00:00:00",
                "date_to": "2026-01-01T00:00:00",
            })
        assert resp.status_code == 200
        assert resp.json()["total"] == 4

    def test_mixed_type_sort_column(self, client, make_lead):
        leads = [make_lead(id="a", age=40), make_lead(id="b", age="21"), make_lead(id="c", age=None)]
        with patch(FETCH_LEADS, return_value=leads):
            resp = client.get("/api/leads", params={"sort": "age", "order": "asc"})
        assert resp.status_code == 200
        assert [r["id"] for r in resp.json()["results"]] == ["b", "a", "c"]


class TestLeadDetailEndpoint:
    def test_found(self, client, make_lead):
        lead = make_lead(id="abc", conversation_stage="Call Booked")
        with patch(FETCH_LEAD, return_value=lead):
            resp = client.get("/api/leads/abc")
        assert resp.status_code == 200
        body = resp.json()
        assert body["lead"]["id"] == "abc"
        assert body["stage_badge"] == {"label": "Call Booked", "color": "teal"}
        assert body["status_badge"]["label"] == "In Progress"

    def test_not_found(self, client):
        with patch(FETCH_LEAD, return_value=None):
            assert client.get("/api/leads/missing").status_code == 404

    def test_unconfigured(self, client):
        with patch(FETCH_LEAD, side_effect=ConfigError("no key")):
            assert client.get("/api/leads/abc").status_code == 503

    def test_malformed_config_is_503(self, client, malformed_supabase):
        assert client.get("/api/leads/abc").status_code == 503


class TestRouterCoroutines:
    @pytest.mark.asyncio
    async def test_trend_series_direct_call(self):
        from dashboard.api.routers.kpis import trend_series
        points = await trend_series(points=3)
        assert len(points) == 3

    @pytest.mark.asyncio
    async def test_get_lead_missing_raises_404(self):
        from fastapi import HTTPException

        from dashboard.api.routers.leads import get_lead
        with patch(FETCH_LEAD, return_value=None):
            with pytest.raises(HTTPException) as exc:
                await get_lead("missing")
        assert exc.value.status_code == 404
