"""Adapters binding the request layer to httpx and credential storage."""

from __future__ import annotations

from .auth import SessionGuard
from .executor import RequestExecutor, classify_transport_error
from .http_resilience import ResilientClient
from .session import FileKeyValueStore, MemoryKeyValueStore, SessionKeys, SessionStoreAdapter
from .uploads import upload_file

__all__ = [
    "FileKeyValueStore",
    "MemoryKeyValueStore",
    "RequestExecutor",
    "ResilientClient",
    "SessionGuard",
    "SessionKeys",
    "SessionStoreAdapter",
    "classify_transport_error",
    "upload_file",
]
