"""Filters module."""

from .base import BaseFilter, FilterConfig
from .json_filter import (
    DEFAULT_FAILURE_TAG,
    JsonFilterConfig,
    JsonMergeFilter,
    decode_json,
)

__all__ = [
    "BaseFilter",
    "FilterConfig",
    "DEFAULT_FAILURE_TAG",
    "JsonFilterConfig",
    "JsonMergeFilter",
    "decode_json",
]
