"""
Grouping thresholds.

Module-level constants so they can be reviewed / tuned without hunting
through logic; CorrelationConfig carries them into an engine instance.
"""
from __future__ import annotations

from dataclasses import dataclass, replace

# Max confidence gap for two related findings to be "the same observation"
SIMILARITY_THRESHOLD     = 0.03
# Min correlation for clinical relevance (grouping rule 1 and group merge)
CORRELATION_THRESHOLD    = 0.65
# Correlation at which findings group regardless of confidence gap
STRONG_RELATION_OVERRIDE = 0.75
# Number of groups returned by rank()
DEFAULT_TOP_N            = 3

# Absorbs float error in confidence subtraction (0.80 - 0.77 != 0.03)
THRESHOLD_TOLERANCE      = 1e-9


@dataclass(frozen=True)
class CorrelationConfig:
    """Thresholds used by one engine instance."""
    similarity_threshold: float = SIMILARITY_THRESHOLD
    correlation_threshold: float = CORRELATION_THRESHOLD
    strong_relation_override: float = STRONG_RELATION_OVERRIDE
    top_n: int = DEFAULT_TOP_N

    def with_overrides(self, **changes) -> "CorrelationConfig":
        return replace(self, **changes)


def at_most(value: float, limit: float) -> bool:
    """Inclusive ``value <= limit``."""
    return value <= limit + THRESHOLD_TOLERANCE


def at_least(value: float, limit: float) -> bool:
    """Inclusive ``value >= limit``."""
    return value >= limit - THRESHOLD_TOLERANCE
