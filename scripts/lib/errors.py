"""
Custom error classes for the Lead Dashboard.
Structured errors with codes, raised by the data-access layer and
translated to HTTP responses by the API routers.

Hierarchy:
    LeadDashboardError
    └── DataError
        ├── ConfigError
        ├── SchemaValidationError
        └── DataFetchError

The KPI engine raises none of these for unrecognised statuses, stages
or zero denominators; those are defined outcomes, not failures.
"""


class LeadDashboardError(Exception):
    """Base exception for all Lead Dashboard errors."""

    def __init__(self, message: str, code: str = "UNKNOWN", details: dict = None):
        self.code = code
        self.details = details or {}
        super().__init__(f"[{code}] {message}")


class DataError(LeadDashboardError):
    """Base class for data access and validation errors."""
    pass


class ConfigError(DataError):
    """Missing or invalid configuration (e.g. Supabase credentials)."""

    def __init__(self, message: str, setting: str = None):
        super().__init__(
            message, code="CONFIG_ERROR",
            details={"setting": setting},
        )


class SchemaValidationError(DataError):
    """Input doesn't match the expected lead schema."""

    def __init__(self, message: str, field: str = None):
        super().__init__(
            message, code="SCHEMA_INVALID", details={"field": field},
        )


class DataFetchError(DataError):
    """Failed to fetch lead records from the backend."""

    def __init__(self, message: str, source: str = None):
        super().__init__(
            message, code="DATA_FETCH_FAILED", details={"source": source},
        )
