"""
Lead Dashboard — API Server Launcher
======================================

Run:
    python main.py                       # DASHBOARD_HOST / DASHBOARD_PORT from .env
    python main.py --port 9000 --reload
"""

from __future__ import annotations

import argparse
import os
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()

from scripts.lib.logger import setup_logger

logger = setup_logger("lead-dashboard")

APP_PATH = "dashboard.api.main:app"
DEFAULT_HOST = os.getenv("DASHBOARD_HOST", "0.0.0.0")
DEFAULT_PORT = int(os.getenv("DASHBOARD_PORT", "8001"))
DEFAULT_RELOAD = os.getenv("DEBUG", "false").lower() == "true"


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Serve the Lead Dashboard API")
    parser.add_argument("--host", default=DEFAULT_HOST, help=f"Bind address. Default: {DEFAULT_HOST}")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help=f"Port. Default: {DEFAULT_PORT}")
    parser.add_argument(
        "--reload",
        action=argparse.BooleanOptionalAction,
        default=DEFAULT_RELOAD,
        help="Auto-reload on code changes (default: DEBUG)",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    import uvicorn

    args = _parse_args(argv)
    supabase_configured = bool(os.getenv("SUPABASE_URL"))

    logger.info("Lead Dashboard API on http://%s:%d", args.host, args.port)
    logger.info("  KPIs: /api/kpis   CRM: /api/leads   Docs: /docs")
    logger.info("  Supabase URL set: %s | reload: %s", supabase_configured, args.reload)
    if not supabase_configured:
        logger.warning("SUPABASE_URL is not set; data endpoints will return 503")

    uvicorn.run(
        APP_PATH,
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )


if __name__ == "__main__":
    main()
