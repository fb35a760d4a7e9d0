"""JSON decode-and-merge filter.

Takes a field holding JSON text and expands it into the event, either under
``target`` or, when no target is configured, at the event root.

Failure handling:

- source field missing, None or false: the event is returned untouched.
- text is not valid JSON (or not text at all): every ``tag_on_failure`` tag is
  appended and a warning is logged, unless ``skip_on_invalid_json`` is set.
- no target and the decoded value is not an object: tagged and logged the same way.
- decoded ``@timestamp`` that cannot be coerced: fields are still merged, the
  event timestamp becomes the current time, ``_timestampparsefailure`` is
  appended and the raw value is kept in ``_@timestamp``.
"""

import json
import logging
from typing import Any

from pydantic import Field, field_validator

from ..logging_config import get_logger
from ..models import (
    TIMESTAMP,
    TIMESTAMP_FAILURE_FIELD,
    TIMESTAMP_FAILURE_TAG,
    Event,
    Result,
    Timestamp,
    coerce_timestamp,
    parse_field_ref,
)
from ..models.event import raw_text
from .base import BaseFilter, FilterConfig

logger = get_logger(__name__)

DEFAULT_FAILURE_TAG = "_jsonparsefailure"


class JsonFilterConfig(FilterConfig):
    """Configuration for JsonMergeFilter."""

    source: str
    target: str | None = None
    tag_on_failure: list[str] = Field(
        default_factory=lambda: [DEFAULT_FAILURE_TAG], alias="tagOnFailure"
    )
    skip_on_invalid_json: bool = Field(False, alias="skipOnInvalidJson")

    @field_validator("source")
    @classmethod
    def _check_source(cls, value: str) -> str:
        if not value:
            raise ValueError("source must be a non-empty field name")
        parse_field_ref(value)
        return value

    @field_validator("target")
    @classmethod
    def _check_target(cls, value: str | None) -> str | None:
        if value is None:
            return value
        if not value:
            raise ValueError("target must be a non-empty field name when set")
        if parse_field_ref(value)[0] == TIMESTAMP:
            raise ValueError(f"target cannot be {TIMESTAMP} or a field inside it")
        return value


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Invalid JSON constant {name}")


def decode_json(value: Any) -> Result:
    """Decode JSON text strictly. Non-string input is a failure, never coerced."""
    if not isinstance(value, str):
        return Result.failure(
            TypeError(f"Expected JSON text, got {type(value).__name__}")
        )
    try:
        return Result.success(json.loads(value, parse_constant=_reject_constant))
    except (ValueError, RecursionError) as e:
        return Result.failure(e)


class JsonMergeFilter(BaseFilter):
    """Decodes the JSON in ``source`` and merges it into the event."""

    config_name = "json"
    config_class = JsonFilterConfig

    @property
    def source(self) -> str:
        return self._config.source

    @property
    def target(self) -> str | None:
        return self._config.target

    def process(self, event: Event) -> Event:
        """Decode and merge in place. Malformed input never raises."""
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Running json filter", extra={"context": {"event": event.to_dict()}})

        source = event.get(self.source)
        if source is None or source is False:
            return event

        decoded = decode_json(source)
        if not decoded.ok:
            if not self._config.skip_on_invalid_json:
                self._tag_failure(event)
                logger.warning(
                    "Error parsing json",
                    extra={
                        "context": {
                            "source": self.source,
                            "raw": source,
                            "exception": repr(decoded.error),
                        }
                    },
                )
            return event

        if self.target is not None:
            event.set(self.target, decoded.value)
        else:
            if not isinstance(decoded.value, dict):
                self._tag_failure(event)
                logger.warning(
                    "Parsed JSON object/hash requires a target configuration option",
                    extra={"context": {"source": self.source, "raw": source}},
                )
                return event
            self._merge_root(event, decoded.value)

        self.filter_matched(event)

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Event after json filter", extra={"context": {"event": event.to_dict()}})
        return event

    def _merge_root(self, event: Event, fields: dict[str, Any]) -> None:
        # @timestamp is pulled out first and re-applied after the other fields
        parsed_timestamp = fields.pop(TIMESTAMP, None)
        # null and false count as no timestamp at all
        if parsed_timestamp is None or parsed_timestamp is False:
            parsed_timestamp = None
        coerced = coerce_timestamp(parsed_timestamp) if parsed_timestamp is not None else None

        event.merge(fields)

        if coerced is None:
            return
        if coerced.ok:
            event.timestamp = coerced.value
            return

        event.timestamp = Timestamp.now()
        logger.warning(
            f"Unrecognized {TIMESTAMP} value, setting current time to {TIMESTAMP}, "
            f"original in {TIMESTAMP_FAILURE_FIELD} field",
            extra={"context": {"value": repr(parsed_timestamp), "exception": str(coerced.error)}},
        )
        event.tag(TIMESTAMP_FAILURE_TAG)
        event.merge({TIMESTAMP_FAILURE_FIELD: raw_text(parsed_timestamp)})

    def _tag_failure(self, event: Event) -> None:
        for tag in self._config.tag_on_failure:
            event.tag(tag)
        self._track("failure")
