"""
Utilities Package - Logging and Exception Handling
"""
from .logging import get_logger, setup_logging
from .exceptions import (
    ChestScanError,
    KnowledgeBaseError,
    PredictionFormatError,
)

__all__ = [
    "get_logger",
    "setup_logging",
    "ChestScanError",
    "KnowledgeBaseError",
    "PredictionFormatError",
]
