"""
Supabase Client Helper for the Lead Dashboard.
Provides the connection and the read-only crm_leads queries.

Usage:
    from scripts.lib.supabase_client import fetch_leads, fetch_lead
    from scripts.lib.time_windows import resolve_query_bounds

    leads = fetch_leads(resolve_query_bounds("1M"))
    lead = fetch_lead("7f1c...")

Both functions accept an injected client so callers and tests never
depend on the module-level singleton.
"""
import os
from pathlib import Path
from typing import Dict, List, Optional

from dotenv import load_dotenv

from scripts.lib.errors import ConfigError, DataFetchError
from scripts.lib.logger import setup_logger
from scripts.lib.time_windows import QueryWindow

logger = setup_logger(__name__)

# Load .env from project root
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
load_dotenv(PROJECT_ROOT / ".env")

SUPABASE_URL = os.environ.get("SUPABASE_URL", "")
SUPABASE_KEY = (
    os.environ.get("SUPABASE_SERVICE_ROLE_KEY", "")
    or os.environ.get("SUPABASE_KEY", "")
    or os.environ.get("SUPABASE_ANON_KEY", "")
)
LEADS_TABLE = os.environ.get("LEADS_TABLE", "crm_leads")

_client = None


def get_client():
    """Create and return a Supabase client (singleton)."""
    global _client
    if _client is not None:
        return _client

    if not SUPABASE_URL or not SUPABASE_KEY:
        raise ConfigError(
            "SUPABASE_URL and SUPABASE_ANON_KEY (or SUPABASE_SERVICE_ROLE_KEY) must be set in .env",
            setting="SUPABASE_URL",
        )

    from supabase import create_client
    try:
        _client = create_client(SUPABASE_URL, SUPABASE_KEY)
    except Exception as e:
        logger.error("Supabase client rejected configuration: %s", e)
        raise ConfigError(f"Invalid Supabase configuration: {e}", setting="SUPABASE_URL") from e
    logger.info("Supabase client connected to %s", SUPABASE_URL)
    return _client


def fetch_leads(window: Optional[QueryWindow] = None, client=None) -> List[Dict]:
    """
    Fetch every lead whose created_at falls inside the window.

    Args:
        window: created_at bounds; None fetches all leads.
        client: Supabase client (default: the module singleton).

    Returns:
        List of lead row dicts (possibly empty).

    Raises:
        ConfigError: No client injected and credentials are missing.
        DataFetchError: The query failed.
    """
    client = client or get_client()
    window = window or QueryWindow()

    try:
        query = client.table(LEADS_TABLE).select("*")

        if window.start is not None:
            start_iso = window.start.isoformat()
            if window.start_inclusive:
                query = query.gte("created_at", start_iso)
            else:
                query = query.gt("created_at", start_iso)
        if window.end is not None:
            query = query.lte("created_at", window.end.isoformat())

        result = query.execute()
    except Exception as e:
        logger.error("Supabase lead fetch failed on %s: %s", LEADS_TABLE, e)
        raise DataFetchError(f"Failed to fetch leads: {e}", source=LEADS_TABLE) from e

    leads = result.data or []
    logger.info(
        "Fetched %d leads (start=%s, end=%s)",
        len(leads), window.start, window.end,
    )
    return leads


def fetch_lead(lead_id: str, client=None) -> Optional[Dict]:
    """
    Fetch a single lead by id.

    Returns:
        The lead row dict, or None if no lead has that id.

    Raises:
        ConfigError: No client injected and credentials are missing.
        DataFetchError: The query failed.
    """
    client = client or get_client()

    try:
        result = (
            client.table(LEADS_TABLE)
            .select("*")
            .eq("id", lead_id)
            .limit(1)
            .execute()
        )
    except Exception as e:
        logger.error("Supabase lead lookup failed for %s: %s", lead_id, e)
        raise DataFetchError(f"Failed to fetch lead {lead_id}: {e}", source=LEADS_TABLE) from e

    if result.data:
        return result.data[0]
    return None
