from __future__ import annotations

import re
import uuid
from typing import Any

# Legacy rows use auto-increment integers, newer rows use UUIDs. Both kinds
# show up in sire/dam columns, sometimes as int and sometimes as text.

_DIGITS_RE = re.compile(r"^\d+$")
_UUID_RE = re.compile(
    r"^\{?[0-9a-f]{8}-?[0-9a-f]{4}-?[0-9a-f]{4}-?[0-9a-f]{4}-?[0-9a-f]{12}\}?$",
    re.IGNORECASE,
)


def is_uuid_format(value: Any) -> bool:
    """True for UUID-shaped tokens (hyphenated, bare 32-hex or braced)."""
    if isinstance(value, uuid.UUID):
        return True
    if not isinstance(value, str):
        return False
    return bool(_UUID_RE.match(value.strip()))


def is_legacy_numeric_id(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    if isinstance(value, str):
        s = value.strip()
        return bool(_DIGITS_RE.match(s)) and not _UUID_RE.match(s)
    return False


def normalize_dog_id(value: Any) -> str:
    """
    Canonicalize a dog identifier into a string map key.

    Rules:
      - None -> ""
      - int / digit-string / integral float -> decimal integer string ("042" -> "42")
      - UUID object or UUID-shaped string -> lowercase hyphenated UUID
      - any other string -> stripped text
      - anything else -> str(value), stripped

    Two identifiers compare equal after normalization iff they point at the
    same record, whichever representation a given row happens to use.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, str):
        s = value.strip()
        if not s:
            return ""
        # UUID shape first: a 32-digit hex UUID is not a legacy integer key
        if _UUID_RE.match(s):
            return str(uuid.UUID(s.strip("{}")))
        if _DIGITS_RE.match(s):
            return str(int(s))
        return s
    return str(value).strip()


def is_missing_id(value: Any) -> bool:
    """True when a sire/dam reference carries no usable identifier."""
    return normalize_dog_id(value) == ""
