"""Event model: an ordered field mapping with reserved timestamp and tags."""

import json
import re
from typing import Any, Iterator, Mapping

from ..errors import FieldReferenceError
from .field_ref import parse_field_ref
from .timestamp import Timestamp, coerce_timestamp

TIMESTAMP = "@timestamp"
TAGS = "tags"
TIMESTAMP_FAILURE_TAG = "_timestampparsefailure"
TIMESTAMP_FAILURE_FIELD = "_@timestamp"

_MISSING = object()
_SPRINTF = re.compile(r"%\{([^}]+)\}")
_INDEX = re.compile(r"-?\d+")


def raw_text(value: Any) -> str:
    """Render a raw value as the text preserved on timestamp failures."""
    if isinstance(value, str):
        return value
    return json.dumps(value, default=str)


class Event:
    """
    A single pipeline record.

    Fields are addressed by reference strings (see ``parse_field_ref``).
    ``@timestamp`` always holds a Timestamp; ``tags`` is an append-only list.
    """

    def __init__(self, data: Mapping[str, Any] | None = None):
        self._data: dict[str, Any] = dict(data or {})
        self._init_timestamp()

    def _init_timestamp(self) -> None:
        raw = self._data.pop(TIMESTAMP, None)
        if raw is None:
            self._data[TIMESTAMP] = Timestamp.now()
            return

        result = coerce_timestamp(raw)
        if result.ok:
            self._data[TIMESTAMP] = result.value
        else:
            self._data[TIMESTAMP] = Timestamp.now()
            self.tag(TIMESTAMP_FAILURE_TAG)
            self._data[TIMESTAMP_FAILURE_FIELD] = raw_text(raw)

    # Field access

    def get(self, ref: str, default: Any = None) -> Any:
        """Return the value at ``ref``, or ``default`` if any part is missing."""
        node: Any = self._data
        for part in parse_field_ref(ref):
            node = _child(node, part)
            if node is _MISSING:
                return default
        return node

    def set(self, ref: str, value: Any) -> None:
        """Set ``ref`` to ``value``, creating intermediate mappings as needed."""
        parts = parse_field_ref(ref)
        if parts[0] == TIMESTAMP and (len(parts) > 1 or not isinstance(value, Timestamp)):
            raise TypeError(f"{TIMESTAMP} must be a Timestamp, got {type(value).__name__}")

        node = self._data
        for part in parts[:-1]:
            child = node.get(part)
            if not isinstance(child, dict):
                child = {}
                node[part] = child
            node = child
        node[parts[-1]] = value

    def remove(self, ref: str) -> Any:
        """Remove ``ref`` and return its value; missing fields return None."""
        parts = parse_field_ref(ref)
        if parts == (TIMESTAMP,):
            raise ValueError(f"{TIMESTAMP} cannot be removed from an event")

        node: Any = self._data
        for part in parts[:-1]:
            node = _child(node, part)
            if node is _MISSING:
                return None
        if isinstance(node, dict):
            return node.pop(parts[-1], None)
        if isinstance(node, list) and _is_index(parts[-1], node):
            return node.pop(int(parts[-1]))
        return None

    def merge(self, fields: Mapping[str, Any]) -> None:
        """Write every key of ``fields`` as a literal top-level field, overwriting."""
        if TIMESTAMP in fields and not isinstance(fields[TIMESTAMP], Timestamp):
            raise TypeError(f"{TIMESTAMP} must be a Timestamp")
        self._data.update(fields)

    def includes(self, ref: str) -> bool:
        return self.get(ref, _MISSING) is not _MISSING

    def __contains__(self, ref: str) -> bool:
        return self.includes(ref)

    def keys(self) -> Iterator[str]:
        return iter(list(self._data))

    # Reserved fields

    @property
    def timestamp(self) -> Timestamp:
        return self._data[TIMESTAMP]

    @timestamp.setter
    def timestamp(self, value: Timestamp) -> None:
        self.set(TIMESTAMP, value)

    def tag(self, value: str) -> None:
        """Append ``value`` to ``tags``. Existing tags are kept; no dedup."""
        tags = self._data.get(TAGS)
        if tags is None:
            self._data[TAGS] = [value]
        elif isinstance(tags, list):
            tags.append(value)
        else:
            self._data[TAGS] = [tags, value]

    def sprintf(self, template: str) -> str:
        """Replace each ``%{ref}`` in ``template`` with that field's value.

        References to missing fields are left as written.
        """

        def substitute(match: re.Match) -> str:
            try:
                value = self.get(match.group(1), _MISSING)
            except FieldReferenceError:
                return match.group(0)
            if value is _MISSING or value is None:
                return match.group(0)
            if isinstance(value, Timestamp):
                return value.to_iso8601()
            if isinstance(value, (dict, list)):
                return json.dumps(_plain(value))
            return str(value)

        return _SPRINTF.sub(substitute, template)

    # Serialization

    def to_dict(self) -> dict[str, Any]:
        return _plain(self._data)

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    def __repr__(self) -> str:
        return f"Event({self.to_dict()!r})"


def _is_index(part: str, node: list) -> bool:
    return _INDEX.fullmatch(part) is not None and -len(node) <= int(part) < len(node)


def _child(node: Any, part: str) -> Any:
    if isinstance(node, dict):
        return node.get(part, _MISSING)
    if isinstance(node, list) and _is_index(part, node):
        return node[int(part)]
    return _MISSING


def _plain(value: Any) -> Any:
    if isinstance(value, Timestamp):
        return value.to_iso8601()
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_plain(v) for v in value]
    return value
