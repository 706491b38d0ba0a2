"""
Lead KPI Report
================
Prints the KPI dashboard for a time frame and optionally writes it as JSON.

Leads come from Supabase by default, or from a JSON export (a list of
crm_leads rows, or {"data": [...]}) with --input.

Usage:
    python scripts/lead_kpi_report.py                      # all-time KPIs
    python scripts/lead_kpi_report.py --time-frame 1M
    python scripts/lead_kpi_report.py --time-frame CUSTOM --from 2026-01-01T00:00:00 --to 2026-03-31T23:59:59
    python scripts/lead_kpi_report.py --input exports/crm_leads.json --output data/processed/lead_kpis.json
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

# ---------------------------------------------------------------------------
# Path setup
# ---------------------------------------------------------------------------
SCRIPT_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = SCRIPT_DIR.parent
sys.path.insert(0, str(PROJECT_ROOT))

load_dotenv(PROJECT_ROOT / ".env")

from models.lead_models import KPIDashboardResponse, TimeFrame
from scripts.lib.errors import LeadDashboardError, SchemaValidationError
from scripts.lib.lead_dashboard import build_kpi_dashboard, load_window_leads
from scripts.lib.logger import setup_logger
from scripts.lib.time_windows import apply_window, parse_timestamp, resolve_query_bounds
from scripts.lib.utils import atomic_write_json

logger = setup_logger("lead_kpi_report")


def _load_export(path: Path) -> List[dict]:
    """Read leads from a JSON export."""
    with open(path, "r", encoding="utf-8") as f:
        payload = json.load(f)
    if isinstance(payload, dict):
        payload = payload.get("data", [])
    if not isinstance(payload, list):
        raise SchemaValidationError(f"Expected a list of leads in {path}", field="data")
    return payload


def build_report(
    time_frame: TimeFrame,
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
    input_path: Optional[Path] = None,
) -> KPIDashboardResponse:
    """Fetch (or load) the leads for a time frame and aggregate them."""
    start = parse_timestamp(date_from)
    end = parse_timestamp(date_to)

    if input_path:
        window = resolve_query_bounds(time_frame, start, end)
        leads = apply_window(_load_export(input_path), window)
        logger.info("Loaded %d leads in window from %s", len(leads), input_path)
    else:
        window, leads = load_window_leads(time_frame, start, end)

    return build_kpi_dashboard(leads, time_frame, window)


def _log_report(report: KPIDashboardResponse) -> None:
    window = report.window
    logger.info("=== Lead KPIs (%s) ===", window.time_frame.value)
    logger.info("  Window: %s → %s", window.start or "beginning", window.end or "now")
    for card in report.lead_cards:
        logger.info("  %-16s %s", card.title, card.value)
    logger.info("--- Calls ---")
    for card in report.call_cards:
        logger.info("  %-16s %s", card.title, card.value)


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(description="Lead and call KPIs for a time frame")
    parser.add_argument(
        "--time-frame",
        choices=[tf.value for tf in TimeFrame],
        default=TimeFrame.ALL.value,
        help="Time frame to scope leads by created_at. Default: ALL",
    )
    parser.add_argument("--from", dest="date_from", help="CUSTOM range start (ISO-8601)")
    parser.add_argument("--to", dest="date_to", help="CUSTOM range end (ISO-8601)")
    parser.add_argument("--input", type=Path, help="Read leads from a JSON export instead of Supabase")
    parser.add_argument("--output", type=Path, help="Write the report JSON to this path")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = _parse_args(argv)

    try:
        report = build_report(
            TimeFrame(args.time_frame),
            date_from=args.date_from,
            date_to=args.date_to,
            input_path=args.input,
        )
    except (LeadDashboardError, OSError, json.JSONDecodeError) as e:
        logger.error("KPI report failed: %s", e)
        return 1

    _log_report(report)

    if args.output:
        if not atomic_write_json(report.model_dump(mode="json"), args.output):
            return 1
        logger.info("Report written to %s", args.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
