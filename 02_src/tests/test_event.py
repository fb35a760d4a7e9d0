"""Tests for Event and field references."""

import json

import pytest

from json_merge.errors import FieldReferenceError
from json_merge.models import (
    TIMESTAMP_FAILURE_FIELD,
    TIMESTAMP_FAILURE_TAG,
    Event,
    Timestamp,
    parse_field_ref,
)


class TestParseFieldRef:
    """Tests for parse_field_ref()."""

    def test_bare_name(self):
        """Test a top-level field name."""
        assert parse_field_ref("message") == ("message",)
        assert parse_field_ref("@timestamp") == ("@timestamp",)

    def test_bracketed_path(self):
        """Test a nested bracketed reference."""
        assert parse_field_ref("[doc][hello]") == ("doc", "hello")
        assert parse_field_ref("[message]") == ("message",)

    @pytest.mark.parametrize("ref", ["", "[doc", "[]", "[a]b", "a[b]", "[a]]"])
    def test_malformed_references(self, ref):
        """Test that malformed references raise FieldReferenceError."""
        with pytest.raises(FieldReferenceError):
            parse_field_ref(ref)


class TestEventTimestamp:
    """Tests for timestamp initialisation."""

    def test_missing_timestamp_defaults_to_now(self):
        """Test that a new event always carries a Timestamp."""
        event = Event({"message": "hi"})
        assert isinstance(event.timestamp, Timestamp)

    def test_valid_timestamp_is_coerced(self):
        """Test that a string timestamp becomes a Timestamp."""
        event = Event({"@timestamp": "2013-10-19T00:14:32.996Z"})
        assert str(event.timestamp) == "2013-10-19T00:14:32.996Z"
        assert event.get("tags") is None

    def test_invalid_timestamp_is_tagged_and_preserved(self):
        """Test that an unparsable timestamp is kept in the fallback field."""
        event = Event({"@timestamp": "not a date"})
        assert isinstance(event.timestamp, Timestamp)
        assert event.get("tags") == [TIMESTAMP_FAILURE_TAG]
        assert event.get(TIMESTAMP_FAILURE_FIELD) == "not a date"

    def test_setting_non_timestamp_raises(self):
        """Test that @timestamp only accepts Timestamp values."""
        event = Event()
        with pytest.raises(TypeError):
            event.set("@timestamp", "2020-01-01T00:00:00Z")

    def test_setting_inside_timestamp_raises(self):
        """Test that nested references cannot replace @timestamp."""
        event = Event()
        with pytest.raises(TypeError):
            event.set("[@timestamp][x]", "v")
        assert isinstance(event.timestamp, Timestamp)

    def test_timestamp_cannot_be_removed(self):
        """Test that @timestamp is never removed."""
        event = Event()
        with pytest.raises(ValueError):
            event.remove("@timestamp")


class TestEventFields:
    """Tests for get/set/remove/includes."""

    def test_get_missing_returns_default(self):
        """Test get() with missing fields."""
        event = Event({"a": {"b": 1}})
        assert event.get("missing") is None
        assert event.get("[a][missing]", "dflt") == "dflt"
        assert event.get("[a][b][c]") is None

    def test_set_creates_intermediate_mappings(self):
        """Test that set() builds nested mappings."""
        event = Event()
        event.set("[doc][inner][value]", 3)
        assert event.get("doc") == {"inner": {"value": 3}}

    def test_set_replaces_non_mapping_parent(self):
        """Test that a scalar parent is replaced by a mapping."""
        event = Event({"doc": "text"})
        event.set("[doc][k]", "v")
        assert event.get("doc") == {"k": "v"}

    def test_list_index_access(self):
        """Test numeric parts index into lists."""
        event = Event({"list": [{"k": "v"}, 2]})
        assert event.get("[list][0][k]") == "v"
        assert event.get("[list][-1]") == 2
        assert event.get("[list][5]") is None

    def test_remove(self):
        """Test remove() returns the removed value."""
        event = Event({"a": {"b": 1, "c": 2}})
        assert event.remove("[a][b]") == 1
        assert event.get("a") == {"c": 2}
        assert event.remove("[x][y]") is None

    def test_includes_counts_none_values(self):
        """Test includes() for present-but-None fields."""
        event = Event({"empty": None})
        assert event.includes("empty")
        assert "empty" in event
        assert "missing" not in event

    def test_merge_writes_literal_keys(self):
        """Test merge() does not interpret keys as references."""
        event = Event({"a": 1})
        event.merge({"a": 2, "[b]": 3})
        assert event.get("a") == 2
        assert "[b]" in list(event.keys())


class TestEventTags:
    """Tests for Event.tag()."""

    def test_tag_creates_list(self):
        """Test tagging an event without tags."""
        event = Event()
        event.tag("one")
        assert event.get("tags") == ["one"]

    def test_tag_appends_without_dedup(self):
        """Test that tags keep order and duplicates."""
        event = Event({"tags": ["a"]})
        event.tag("b")
        event.tag("a")
        assert event.get("tags") == ["a", "b", "a"]

    def test_tag_promotes_scalar(self):
        """Test that a scalar tags value becomes a list."""
        event = Event({"tags": "solo"})
        event.tag("next")
        assert event.get("tags") == ["solo", "next"]


class TestEventSerialization:
    """Tests for sprintf/to_dict/to_json."""

    def test_to_json_renders_timestamp(self):
        """Test that the timestamp serializes as its ISO string."""
        event = Event({"@timestamp": "2013-10-19T00:14:32.996Z", "n": [1, 2]})
        data = json.loads(event.to_json())
        assert data["@timestamp"] == "2013-10-19T00:14:32.996Z"
        assert data["n"] == [1, 2]

    def test_sprintf(self):
        """Test field interpolation."""
        event = Event({"host": "web1", "doc": {"k": "v"}})
        assert event.sprintf("from %{host}") == "from web1"
        assert event.sprintf("%{[doc][k]}") == "v"
        assert event.sprintf("%{doc}") == '{"k": "v"}'
        assert event.sprintf("%{missing}") == "%{missing}"
        assert event.sprintf("%{[bad}") == "%{[bad}"
