"""Domain port definitions for adapters."""

from __future__ import annotations

from .requests import Decoder, RequestExecutorPort
from .session import KeyValueStore, Navigator, SessionStore

__all__ = [
    "Decoder",
    "KeyValueStore",
    "Navigator",
    "RequestExecutorPort",
    "SessionStore",
]
