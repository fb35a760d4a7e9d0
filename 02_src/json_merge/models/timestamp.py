"""Event timestamp model and coercion."""

from dataclasses import dataclass
from datetime import datetime, timezone

from ..errors import TimestampParserError
from .result import Result


@dataclass(frozen=True, order=True)
class Timestamp:
    """An instant in UTC, rendered as ISO-8601 with millisecond precision."""

    time: datetime

    def __post_init__(self) -> None:
        if not isinstance(self.time, datetime):
            raise TypeError(f"Timestamp requires a datetime, got {type(self.time).__name__}")
        if self.time.tzinfo is None:
            object.__setattr__(self, "time", self.time.replace(tzinfo=timezone.utc))
        else:
            object.__setattr__(self, "time", self.time.astimezone(timezone.utc))

    @classmethod
    def now(cls) -> "Timestamp":
        return cls(datetime.now(timezone.utc))

    @classmethod
    def parse_iso8601(cls, text: str) -> "Timestamp":
        """Parse an ISO-8601 string such as ``2013-10-19T00:14:32.996Z``."""
        if not isinstance(text, str):
            raise TimestampParserError(f"Expected a string, got {type(text).__name__}")
        try:
            return cls(datetime.fromisoformat(text))
        except ValueError as e:
            raise TimestampParserError(f"Invalid ISO8601 timestamp {text!r}") from e

    @classmethod
    def from_epoch(cls, seconds: int | float) -> "Timestamp":
        """Build a Timestamp from seconds since the Unix epoch."""
        try:
            return cls(datetime.fromtimestamp(seconds, tz=timezone.utc))
        except (OverflowError, OSError, ValueError) as e:
            raise TimestampParserError(f"Epoch value out of range: {seconds!r}") from e

    def to_iso8601(self) -> str:
        t = self.time
        return f"{t.year:04d}-" + t.strftime("%m-%dT%H:%M:%S.") + f"{t.microsecond // 1000:03d}Z"

    def __str__(self) -> str:
        return self.to_iso8601()


def coerce_timestamp(value: object) -> Result[Timestamp]:
    """
    Coerce a raw value into a Timestamp.

    Accepts Timestamp, datetime, ISO-8601 strings and numeric epoch seconds.
    Never raises; an unusable value yields a failed Result.
    """
    try:
        if isinstance(value, Timestamp):
            return Result.success(value)
        if isinstance(value, datetime):
            return Result.success(Timestamp(value))
        if isinstance(value, str):
            return Result.success(Timestamp.parse_iso8601(value))
        # bool is an int subclass but never a valid instant
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return Result.success(Timestamp.from_epoch(value))
    except TimestampParserError as e:
        return Result.failure(e)
    return Result.failure(
        TimestampParserError(f"Cannot coerce {type(value).__name__} to a timestamp")
    )
