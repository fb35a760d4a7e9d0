"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

import pytest

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))


@pytest.fixture
def tracker():
    """Create an in-memory match tracker."""
    from json_merge.tracker import Tracker

    return Tracker()


@pytest.fixture
def make_filter(tracker):
    """Build and register a JsonMergeFilter from a config mapping."""
    from json_merge.filters import JsonMergeFilter

    def _make(**config):
        config.setdefault("id", "json_test")
        flt = JsonMergeFilter(config, tracker=tracker)
        flt.register()
        return flt

    return _make


@pytest.fixture
def message_filter(make_filter):
    """Filter reading the 'message' field and merging at the root."""
    return make_filter(source="message")


@pytest.fixture
def clean_env(monkeypatch):
    """Remove JSON_FILTER_* and logging variables from the environment."""
    for name in (
        "JSON_FILTER_SOURCE",
        "JSON_FILTER_TARGET",
        "JSON_FILTER_TAG_ON_FAILURE",
        "JSON_FILTER_SKIP_ON_INVALID_JSON",
        "LOG_LEVEL",
        "LOG_FILE",
    ):
        # setenv first so teardown also undoes values written by load_dotenv
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return monkeypatch
