"""Project-level configuration and environment helpers."""

import os
from pathlib import Path
from typing import Any, Union

from dotenv import load_dotenv

from .errors import ConfigurationError

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
LOGS_DIR = PROJECT_ROOT / "04_logs"
DEFAULT_LOG_PATH = LOGS_DIR / "json_merge.log"
DEFAULT_ENV_FILE = PROJECT_ROOT / ".env"

ENV_PREFIX = "JSON_FILTER_"

PathLike = Union[str, Path]

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


def load_env(env_file: PathLike | None = None) -> bool:
    """Load variables from a .env file without overriding the process environment."""
    return load_dotenv(env_file or DEFAULT_ENV_FILE, override=False)


def resolve_log_path(env_value: PathLike | None = None) -> Path:
    """Resolve LOG_FILE to an absolute path."""
    if not env_value:
        return DEFAULT_LOG_PATH

    candidate = Path(env_value)
    return candidate if candidate.is_absolute() else PROJECT_ROOT / candidate


def parse_bool(value: str) -> bool:
    normalized = value.strip().lower()
    if normalized in _TRUE:
        return True
    if normalized in _FALSE:
        return False
    raise ValueError(f"Not a boolean value: {value!r}")


def filter_settings_from_env(prefix: str = ENV_PREFIX) -> dict[str, Any]:
    """
    Build a JSON filter configuration mapping from environment variables.

    Reads <prefix>SOURCE, <prefix>TARGET, <prefix>TAG_ON_FAILURE (comma
    separated) and <prefix>SKIP_ON_INVALID_JSON. Unset variables are omitted
    so the filter defaults apply.
    """
    settings: dict[str, Any] = {}

    source = os.getenv(f"{prefix}SOURCE")
    if source is not None:
        settings["source"] = source

    target = os.getenv(f"{prefix}TARGET")
    if target:
        settings["target"] = target

    tags = os.getenv(f"{prefix}TAG_ON_FAILURE")
    if tags is not None:
        settings["tag_on_failure"] = [t.strip() for t in tags.split(",") if t.strip()]

    skip = os.getenv(f"{prefix}SKIP_ON_INVALID_JSON")
    if skip is not None:
        try:
            settings["skip_on_invalid_json"] = parse_bool(skip)
        except ValueError as e:
            raise ConfigurationError(f"{prefix}SKIP_ON_INVALID_JSON: {e}") from e

    return settings
