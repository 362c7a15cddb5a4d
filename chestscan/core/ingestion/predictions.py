"""
Classifier Prediction Parsing

The hosted X-ray classifier returns ``predictions`` as ``[disease, confidence]``
pairs; stored scans carry ``{"disease_name": ..., "confidence": ...}``
records (optionally with ``disease_code`` and a bounding box).  Both shapes
are accepted here and converted into Finding objects for the engine.

Confidence is expected as a 0-1 fraction.  Its range is the caller's
responsibility and is not checked; only the record shape is.
"""
from __future__ import annotations

from typing import Any, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from chestscan.core.correlation.base import Finding
from chestscan.utils import PredictionFormatError, get_logger

logger = get_logger(__name__)


class PredictionRecord(BaseModel):
    """One classifier prediction as stored with a scan."""
    model_config = ConfigDict(extra="ignore")

    disease_name: str = Field(..., min_length=1)
    confidence: float = Field(..., description="Fraction in [0, 1], not a percentage")
    disease_code: Optional[str] = None

    def to_finding(self) -> Finding:
        return Finding(name=self.disease_name, confidence=self.confidence)


def _as_mapping(item: Any, index: int) -> Mapping[str, Any]:
    if isinstance(item, Mapping):
        return item
    if isinstance(item, (list, tuple)):
        if len(item) != 2:
            raise PredictionFormatError(
                f"prediction {index}: expected [disease, confidence] pair, got {len(item)} items",
                index=index,
            )
        return {"disease_name": item[0], "confidence": item[1]}
    raise PredictionFormatError(
        f"prediction {index}: unsupported type {type(item).__name__}",
        index=index,
    )


def parse_records(payload: Any) -> List[PredictionRecord]:
    """Validate a prediction list into PredictionRecords."""
    if not isinstance(payload, (list, tuple)):
        raise PredictionFormatError(
            f"predictions must be a list, got {type(payload).__name__}"
        )

    records: List[PredictionRecord] = []
    for index, item in enumerate(payload):
        data = _as_mapping(item, index)
        try:
            records.append(PredictionRecord.model_validate(data))
        except ValidationError as exc:
            raise PredictionFormatError(
                f"prediction {index}: invalid record",
                index=index,
                details={"errors": [
                    f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
                    for err in exc.errors()
                ]},
            ) from exc

    logger.debug(f"Parsed {len(records)} prediction record(s)")
    return records


def parse_predictions(payload: Any) -> List[Finding]:
    """
    Convert a raw classifier payload into Findings, preserving order.

    Raises:
        PredictionFormatError: payload is not a list, or an item is neither
            a 2-element pair nor a mapping with disease_name / confidence.
    """
    return [record.to_finding() for record in parse_records(payload)]


def is_valid_predictions(payload: Any) -> bool:
    """Non-raising shape check for stored prediction payloads."""
    try:
        parse_records(payload)
    except PredictionFormatError:
        return False
    return True
