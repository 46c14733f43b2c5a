"""Dashboard API configuration values."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import UTC, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .env import optional_env_float, optional_env_int, require_env_vars
from .errors import ConfigurationError
from .http_resilience import DEFAULT_HEADERS, RateLimit, ResilienceConfig
from .reconciliation import DEFAULT_BACKOFF_SECONDS, DEFAULT_WINDOW_SECONDS, ReconciliationConfig

DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_LOGIN_PATH = "/login"
DEFAULT_REDIRECT_DELAY_SECONDS = 1.0
DEFAULT_RATE_LIMIT_PERIOD_SECONDS = 1.0

# Endpoints where a 404 means "nothing yet" rather than a broken call.
EXPECTED_NOT_FOUND_PATHS: tuple[str, ...] = (
    "/learning-forecast",
    "/unit-progress",
    "/daily-reports/contract/",
)


@dataclass(frozen=True, slots=True)
class ApiConfig:
    resilience: ResilienceConfig
    reconciliation: ReconciliationConfig = field(default_factory=ReconciliationConfig)
    login_path: str = DEFAULT_LOGIN_PATH
    redirect_delay_seconds: float = DEFAULT_REDIRECT_DELAY_SECONDS
    expected_not_found_paths: tuple[str, ...] = EXPECTED_NOT_FOUND_PATHS


def _rate_limit_from_env() -> RateLimit | None:
    max_calls = optional_env_int("DASHLINK_RATE_LIMIT_CALLS")
    if max_calls is None:
        return None
    per_seconds = optional_env_float(
        "DASHLINK_RATE_LIMIT_PERIOD_SECONDS", DEFAULT_RATE_LIMIT_PERIOD_SECONDS
    )
    if per_seconds <= 0:
        raise ConfigurationError(
            "DASHLINK_RATE_LIMIT_PERIOD_SECONDS must be positive",
            variable="DASHLINK_RATE_LIMIT_PERIOD_SECONDS",
        )
    return RateLimit(max_calls=max_calls, per_seconds=per_seconds)


def _naive_timezone_from_env() -> tzinfo | None:
    name = os.getenv("DASHLINK_NAIVE_TIMEZONE", "").strip()
    if not name:
        return None
    if name.upper() == "UTC":
        return UTC
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigurationError(
            f"DASHLINK_NAIVE_TIMEZONE is not a known zone: {name!r}",
            variable="DASHLINK_NAIVE_TIMEZONE",
        ) from exc


def get_api_config() -> ApiConfig:
    values = require_env_vars(("DASHLINK_API_BASE_URL",))
    resilience = ResilienceConfig(
        name="dashboard-api",
        base_url=values["DASHLINK_API_BASE_URL"].rstrip("/"),
        timeout_seconds=optional_env_float("DASHLINK_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS),
        ratelimit=_rate_limit_from_env(),
        default_headers=DEFAULT_HEADERS,
    )
    reconciliation = ReconciliationConfig(
        backoff_seconds=optional_env_float(
            "DASHLINK_RECONCILE_BACKOFF_SECONDS", DEFAULT_BACKOFF_SECONDS
        ),
        window_seconds=optional_env_float(
            "DASHLINK_RECONCILE_WINDOW_SECONDS", DEFAULT_WINDOW_SECONDS
        ),
        naive_timezone=_naive_timezone_from_env(),
    )
    return ApiConfig(resilience=resilience, reconciliation=reconciliation)
