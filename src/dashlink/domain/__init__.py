"""Pure request-layer types: taxonomy, outcomes, descriptors and body classification."""

from __future__ import annotations

from .errors import ErrorKind
from .integrity import BodyIntegrity, inspect_body
from .outcome import Ambiguous, Failure, Outcome, OutcomeStatus, Success
from .requests import MutationHint, RequestDescriptor

__all__ = [
    "Ambiguous",
    "BodyIntegrity",
    "ErrorKind",
    "Failure",
    "MutationHint",
    "Outcome",
    "OutcomeStatus",
    "RequestDescriptor",
    "Success",
    "inspect_body",
]
