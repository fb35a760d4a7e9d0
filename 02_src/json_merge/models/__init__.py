"""Core data models for json_merge."""

from .event import (
    TAGS,
    TIMESTAMP,
    TIMESTAMP_FAILURE_FIELD,
    TIMESTAMP_FAILURE_TAG,
    Event,
)
from .field_ref import parse_field_ref
from .result import Result
from .timestamp import Timestamp, coerce_timestamp

__all__ = [
    # Event
    "Event",
    "TAGS",
    "TIMESTAMP",
    "TIMESTAMP_FAILURE_FIELD",
    "TIMESTAMP_FAILURE_TAG",
    "parse_field_ref",
    # Values
    "Result",
    "Timestamp",
    "coerce_timestamp",
]
