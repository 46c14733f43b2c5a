"""Application configuration helpers."""

from __future__ import annotations

from dashlink.common.logging import configure_logging

from .api import EXPECTED_NOT_FOUND_PATHS, ApiConfig, get_api_config
from .env import optional_env_float, optional_env_int, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import DEFAULT_HEADERS, RateLimit, ResilienceConfig
from .reconciliation import ReconciliationConfig

__all__ = [
    "DEFAULT_HEADERS",
    "EXPECTED_NOT_FOUND_PATHS",
    "ApiConfig",
    "ConfigurationError",
    "MissingConfigurationError",
    "RateLimit",
    "ReconciliationConfig",
    "ResilienceConfig",
    "configure_logging",
    "get_api_config",
    "optional_env_float",
    "optional_env_int",
    "require_env_vars",
]
