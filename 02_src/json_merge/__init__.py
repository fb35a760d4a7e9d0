"""JSON decode-and-merge filter for event pipelines."""

from .errors import (
    ConfigurationError,
    FieldReferenceError,
    JsonMergeError,
    TimestampParserError,
)
from .filters import (
    DEFAULT_FAILURE_TAG,
    BaseFilter,
    FilterConfig,
    JsonFilterConfig,
    JsonMergeFilter,
    decode_json,
)
from .models import (
    TAGS,
    TIMESTAMP,
    TIMESTAMP_FAILURE_FIELD,
    TIMESTAMP_FAILURE_TAG,
    Event,
    Result,
    Timestamp,
    coerce_timestamp,
    parse_field_ref,
)
from .tracker import IMatchTracker, Tracker

__all__ = [
    # Models
    "Event",
    "Result",
    "Timestamp",
    "coerce_timestamp",
    "parse_field_ref",
    "TAGS",
    "TIMESTAMP",
    "TIMESTAMP_FAILURE_FIELD",
    "TIMESTAMP_FAILURE_TAG",
    # Filters
    "BaseFilter",
    "FilterConfig",
    "JsonFilterConfig",
    "JsonMergeFilter",
    "DEFAULT_FAILURE_TAG",
    "decode_json",
    # Bookkeeping
    "IMatchTracker",
    "Tracker",
    # Errors
    "JsonMergeError",
    "ConfigurationError",
    "FieldReferenceError",
    "TimestampParserError",
]
