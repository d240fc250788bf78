"""Tests for environment-driven configuration."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest


PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from emailspy.config import Config, load_config  # noqa: E402

_VARIABLES = (
    "N8N_INSTANCE_URL",
    "ENGINE_WEBHOOK_PATH",
    "PUBLIC_BASE_URL",
    "VERCEL_PROJECT_PRODUCTION_URL",
    "APP_ENV",
    "ENABLE_RATE_LIMITING",
    "RATE_LIMIT",
    "RATE_LIMIT_WINDOW_SECONDS",
    "ENABLE_MONGODB",
    "CLEANUP_INTERVAL_SECONDS",
    "SESSION_MAX_AGE_SECONDS",
    "RESULT_TTL_SECONDS",
    "MAX_REQUEST_BYTES",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch):
    for name in _VARIABLES:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    config = load_config()

    assert config.engine_webhook_url == ""
    assert config.public_base_url == "http://localhost:5050"
    assert config.production is False
    assert config.rate_limit_enabled is False
    assert config.rate_limit == 3
    assert config.rate_limit_window_seconds == 300
    assert config.cleanup_interval_seconds == 3600
    assert config.session_max_age_seconds == 604800
    assert config.result_ttl_seconds == 0
    assert config.enable_mongodb is False
    assert config.max_request_bytes == 16 * 1024 * 1024


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("N8N_INSTANCE_URL", "https://n8n.example.com/")
    monkeypatch.setenv("VERCEL_PROJECT_PRODUCTION_URL", "emailspy.vercel.app")
    monkeypatch.setenv("APP_ENV", "production")
    monkeypatch.setenv("ENABLE_RATE_LIMITING", "yes")
    monkeypatch.setenv("RATE_LIMIT", "5")

    config = load_config()

    assert config.engine_webhook_url == "https://n8n.example.com/webhook/emailspy-callback"
    assert config.public_base_url == "https://emailspy.vercel.app"
    assert config.production is True
    assert config.rate_limit_enabled is True
    assert config.rate_limit == 5


def test_public_base_url_takes_precedence(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("PUBLIC_BASE_URL", "http://localhost:3000/")
    monkeypatch.setenv("VERCEL_PROJECT_PRODUCTION_URL", "emailspy.vercel.app")

    assert load_config().public_base_url == "http://localhost:3000"


def test_webhook_path_without_leading_slash():
    config = Config(engine_base_url="https://n8n.test", engine_webhook_path="webhook/custom")
    assert config.engine_webhook_url == "https://n8n.test/webhook/custom"


def test_request_size_cap_override(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("MAX_REQUEST_BYTES", "0")
    assert load_config().max_request_bytes == 0

    monkeypatch.setenv("MAX_REQUEST_BYTES", "2048")
    assert load_config().max_request_bytes == 2048
