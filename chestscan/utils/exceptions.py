"""
Custom Exception Hierarchy

Errors raised at the package boundaries: loading knowledge tables and
parsing raw classifier payloads.  The ranking path itself does not raise
for data-shape reasons.
"""
from typing import Optional, Dict, Any


class ChestScanError(Exception):
    """Base exception for all chestscan errors."""

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details
        }


class KnowledgeBaseError(ChestScanError):
    """Malformed or unreadable prevalence / relationship tables."""

    def __init__(
        self,
        message: str,
        source: str = "unknown",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="KNOWLEDGE_BASE_ERROR",
            details={"source": source, **(details or {})}
        )
        self.source = source


class PredictionFormatError(ChestScanError):
    """Classifier payload that cannot be turned into findings."""

    def __init__(
        self,
        message: str,
        index: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="PREDICTION_FORMAT_ERROR",
            details={"index": index, **(details or {})}
        )
        self.index = index
