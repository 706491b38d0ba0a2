"""
Lead Dashboard — API Server
=============================

JSON API over the crm_leads table in Supabase. Every request fetches a
fresh snapshot for its time frame and aggregates it in memory.

Route groups:
  /api/health      - Health check
  /api/kpis/*      - Lead and call KPIs, KPI cards, trend series
  /api/leads/*     - CRM table and lead detail
"""

import logging
import os
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from dashboard.api.routers.kpis import router as kpis_router
from dashboard.api.routers.leads import router as leads_router

load_dotenv()

logger = logging.getLogger(__name__)

VERSION = "1.0.0"


# ─── Lifespan ─────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app):
    """Application startup and shutdown."""
    logger.info("Starting Lead Dashboard...")

    try:
        from scripts.lib.supabase_client import get_client
        get_client()
        logger.info("Supabase connected")
    except Exception as e:
        logger.warning("Supabase not available: %s", e)

    logger.info("Lead Dashboard ready")
    yield
    logger.info("Shutting down Lead Dashboard...")


# ─── App Setup ────────────────────────────────────────────────

cors_origins = os.getenv(
    "CORS_ORIGINS", "http://localhost:3000,http://localhost:8001"
).split(",")

app = FastAPI(
    title="Lead Dashboard",
    version=VERSION,
    description="Instagram lead analytics — KPIs and CRM view",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)

app.include_router(kpis_router)
app.include_router(leads_router)


# ─── Health ───────────────────────────────────────────────────

@app.get("/api/health", tags=["system"])
async def health():
    """Health check with data source status."""
    supabase_ok = False
    try:
        from scripts.lib.supabase_client import get_client
        get_client()
        supabase_ok = True
    except Exception as e:
        logger.debug("Health check: Supabase unavailable: %s", e)

    return {
        "status": "healthy",
        "service": "Lead Dashboard",
        "version": VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "integrations": {
            "supabase": supabase_ok,
        },
    }
