"""Environment-driven configuration for the EmailSpy API."""

from __future__ import annotations

import os
from dataclasses import dataclass

_TRUTHY = {"1", "true", "yes", "on"}

DEFAULT_WEBHOOK_PATH = "/webhook/emailspy-callback"
DEFAULT_LOCAL_BASE_URL = "http://localhost:5050"
ONE_WEEK_SECONDS = 60 * 60 * 24 * 7
DEFAULT_MAX_REQUEST_BYTES = 16 * 1024 * 1024


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in _TRUTHY


def _public_base_url() -> str:
    explicit = (os.getenv("PUBLIC_BASE_URL") or "").strip()
    if explicit:
        return explicit.rstrip("/")

    # Vercel exposes the production host without a scheme.
    vercel_host = (os.getenv("VERCEL_PROJECT_PRODUCTION_URL") or "").strip()
    if vercel_host:
        return f"https://{vercel_host}".rstrip("/")

    return DEFAULT_LOCAL_BASE_URL


@dataclass(frozen=True)
class Config:
    engine_base_url: str = ""
    engine_webhook_path: str = DEFAULT_WEBHOOK_PATH
    engine_timeout: float = 10.0
    public_base_url: str = DEFAULT_LOCAL_BASE_URL
    production: bool = False

    rate_limit_enabled: bool = False
    rate_limit: int = 3
    rate_limit_window_seconds: int = 300
    cleanup_interval_seconds: int = 3600
    background_sweep: bool = True
    session_max_age_seconds: int = ONE_WEEK_SECONDS

    result_ttl_seconds: int = 0
    result_grace_seconds: int = 0

    enable_mongodb: bool = False
    cors_origins: str = "*"
    max_request_bytes: int = DEFAULT_MAX_REQUEST_BYTES

    @property
    def engine_webhook_url(self) -> str:
        if not self.engine_base_url:
            return ""
        path = self.engine_webhook_path
        if not path.startswith("/"):
            path = f"/{path}"
        return f"{self.engine_base_url.rstrip('/')}{path}"


def load_config() -> Config:
    """Build a :class:`Config` from the process environment."""
    return Config(
        engine_base_url=(os.getenv("N8N_INSTANCE_URL") or "").strip().rstrip("/"),
        engine_webhook_path=os.getenv("ENGINE_WEBHOOK_PATH", DEFAULT_WEBHOOK_PATH).strip(),
        engine_timeout=float(os.getenv("ENGINE_TIMEOUT", "10")),
        public_base_url=_public_base_url(),
        production=os.getenv("APP_ENV", "development").strip().lower() == "production",
        rate_limit_enabled=_env_flag("ENABLE_RATE_LIMITING"),
        rate_limit=max(int(os.getenv("RATE_LIMIT", "3")), 1),
        rate_limit_window_seconds=max(int(os.getenv("RATE_LIMIT_WINDOW_SECONDS", "300")), 1),
        cleanup_interval_seconds=max(int(os.getenv("CLEANUP_INTERVAL_SECONDS", "3600")), 1),
        background_sweep=_env_flag("ENABLE_BACKGROUND_SWEEP", "true"),
        session_max_age_seconds=int(os.getenv("SESSION_MAX_AGE_SECONDS", str(ONE_WEEK_SECONDS))),
        result_ttl_seconds=max(int(os.getenv("RESULT_TTL_SECONDS", "0")), 0),
        result_grace_seconds=max(int(os.getenv("RESULT_GRACE_SECONDS", "0")), 0),
        enable_mongodb=_env_flag("ENABLE_MONGODB"),
        cors_origins=os.getenv("CORS_ORIGINS", "*").strip() or "*",
        max_request_bytes=max(int(os.getenv("MAX_REQUEST_BYTES", str(DEFAULT_MAX_REQUEST_BYTES))), 0),
    )
