"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables when it is instantiated.  The application
factory builds one instance at startup and stores it on the FastAPI
app; every component that needs backend credentials receives that
same object instead of reading the environment on its own.
"""

import os
from dataclasses import dataclass, field
from typing import FrozenSet, List, Tuple


def _env(name: str, default: str = "") -> str:
    return os.getenv(name, default)


def _env_bool(name: str, default: str = "false") -> bool:
    return _env(name, default).lower() in {"1", "true", "yes"}


def _split_csv(value: str) -> Tuple[str, ...]:
    return tuple(item.strip() for item in value.split(",") if item.strip())


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = field(default_factory=lambda: _env("PROJECT_NAME", "Market Admin API"))
    api_version: str = field(default_factory=lambda: _env("API_VERSION", "1.0.0"))
    debug: bool = field(default_factory=lambda: _env_bool("DEBUG"))
    log_level: str = field(default_factory=lambda: _env("LOG_LEVEL", "INFO"))
    log_file: str = field(default_factory=lambda: _env("LOG_FILE"))

    # Base URL of the hosted project, e.g. https://<ref>.supabase.co.  The
    # credential service lives under ``/auth/v1`` and the record store
    # under ``/rest/v1``.
    supabase_url: str = field(default_factory=lambda: _env("SUPABASE_URL"))

    # Service role key.  It bypasses row level security, so it must only
    # ever be used server side.
    service_role_key: str = field(default_factory=lambda: _env("SUPABASE_SERVICE_ROLE_KEY"))

    # Seconds to wait for any single backend call.
    backend_timeout: float = field(default_factory=lambda: float(_env("BACKEND_TIMEOUT", "15")))

    # Vendor ids that can never be deleted.  ``1`` is the default
    # administrative vendor created with the project.
    protected_vendor_ids: Tuple[str, ...] = field(
        default_factory=lambda: _split_csv(_env("PROTECTED_VENDOR_IDS", "1"))
    )

    vendors_table: str = field(default_factory=lambda: _env("VENDORS_TABLE", "vendors"))
    cors_origins: Tuple[str, ...] = field(default_factory=lambda: _split_csv(_env("CORS_ORIGINS", "*")))

    api_host: str = field(default_factory=lambda: _env("API_HOST", "0.0.0.0"))
    api_port: int = field(default_factory=lambda: int(_env("API_PORT", "8000")))

    @property
    def protected_ids(self) -> FrozenSet[str]:
        """Protected vendor ids normalised to strings."""
        return frozenset(str(vendor_id) for vendor_id in self.protected_vendor_ids)

    def validate(self) -> List[str]:
        """Return a list of configuration problems (empty when usable)."""
        problems: List[str] = []
        if not self.supabase_url:
            problems.append("SUPABASE_URL is not set")
        elif not self.supabase_url.startswith(("http://", "https://")):
            problems.append("SUPABASE_URL must start with http:// or https://")
        if not self.service_role_key:
            problems.append("SUPABASE_SERVICE_ROLE_KEY is not set")
        if self.backend_timeout <= 0:
            problems.append("BACKEND_TIMEOUT must be positive")
        return problems

    @property
    def is_configured(self) -> bool:
        return not self.validate()
