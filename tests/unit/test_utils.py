"""
Unit Tests for Logging and Exception Utilities
"""
import logging

from chestscan.utils import (
    ChestScanError,
    KnowledgeBaseError,
    PredictionFormatError,
    get_logger,
    setup_logging,
)
from chestscan.utils.logging import StructuredFormatter


class TestExceptions:
    """Tests for the exception hierarchy."""

    def test_base_to_dict(self):
        err = ChestScanError("boom", details={"a": 1})
        assert err.to_dict() == {"error": "UNKNOWN_ERROR", "message": "boom", "details": {"a": 1}}

    def test_knowledge_base_error(self):
        err = KnowledgeBaseError("bad table", source="kb.json", details={"row": "A"})

        assert isinstance(err, ChestScanError)
        assert err.code == "KNOWLEDGE_BASE_ERROR"
        assert err.details == {"source": "kb.json", "row": "A"}
        assert str(err) == "bad table"

    def test_prediction_format_error(self):
        err = PredictionFormatError("bad record", index=3)
        assert err.to_dict()["details"] == {"index": 3}


class TestLogging:
    """Tests for logger helpers."""

    def test_get_logger(self):
        assert get_logger("chestscan.test").name == "chestscan.test"

    def test_formatter_without_color(self):
        record = logging.LogRecord("chestscan", logging.INFO, __file__, 1, "hello", None, None)
        line = StructuredFormatter(use_color=False).format(record)

        assert "INFO" in line
        assert "[chestscan] hello" in line
        assert "\033[" not in line

    def test_setup_logging_with_file(self, tmp_path):
        root = logging.getLogger()
        saved_handlers, saved_level = list(root.handlers), root.level
        log_file = tmp_path / "engine.log"
        try:
            setup_logging("DEBUG", log_file=str(log_file))
            get_logger("chestscan.test").debug("written")
            for handler in root.handlers:
                handler.flush()
        finally:
            for handler in root.handlers:
                if isinstance(handler, logging.FileHandler):
                    handler.close()
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)

        assert "written" in log_file.read_text()
