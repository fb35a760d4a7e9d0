"""Field reference parsing.

A reference is either a bare top-level name (``message``) or a sequence of
bracketed parts naming a nested path (``[doc][hello]``).
"""

import re
from functools import lru_cache

from ..errors import FieldReferenceError

_BRACKETED = re.compile(r"(?:\[[^\[\]]+\])+")
_PART = re.compile(r"\[([^\[\]]+)\]")


@lru_cache(maxsize=1024)
def parse_field_ref(ref: str) -> tuple[str, ...]:
    """Split a field reference into its path parts."""
    if not isinstance(ref, str) or not ref:
        raise FieldReferenceError(f"Invalid field reference: {ref!r}")

    if ref.startswith("["):
        if not _BRACKETED.fullmatch(ref):
            raise FieldReferenceError(f"Malformed field reference: {ref!r}")
        return tuple(_PART.findall(ref))

    if "[" in ref or "]" in ref:
        raise FieldReferenceError(f"Malformed field reference: {ref!r}")
    return (ref,)
