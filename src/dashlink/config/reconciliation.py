"""Settings for resolving ambiguous mutation outcomes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import tzinfo

DEFAULT_BACKOFF_SECONDS = 1.5
DEFAULT_WINDOW_SECONDS = 10.0
DEFAULT_AMOUNT_EPSILON = 0.01


@dataclass(slots=True, frozen=True)
class ReconciliationConfig:
    backoff_seconds: float = DEFAULT_BACKOFF_SECONDS
    window_seconds: float = DEFAULT_WINDOW_SECONDS
    # tolerated lead of server timestamps before the submission time
    clock_skew_seconds: float = 0.0
    amount_epsilon: float = DEFAULT_AMOUNT_EPSILON
    # zone for server timestamps without an offset; None means the local zone
    naive_timezone: tzinfo | None = None

    def __post_init__(self) -> None:
        if self.backoff_seconds < 0 or self.window_seconds < 0 or self.clock_skew_seconds < 0:
            raise ValueError("Reconciliation durations must be non-negative")
        if self.amount_epsilon <= 0:
            raise ValueError("Reconciliation epsilon must be positive")
