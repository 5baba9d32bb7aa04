# mergeguard/core/payload.py
import json
from typing import Any, Optional

from mergeguard.core.exceptions import PayloadError

_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1


def parse_payload(raw: bytes) -> Any:
    """Decode the raw webhook body. Malformed input raises ``PayloadError``."""
    try:
        return json.loads(raw)
    except ValueError as e:
        raise PayloadError(f"Webhook body is not valid JSON: {e}") from e


def get_path(doc: Any, *path: str) -> Any:
    """Walk ``path`` through nested objects, returning None when any segment is missing."""
    current = doc
    for key in path:
        if not isinstance(current, dict) or key not in current:
            return None
        current = current[key]
    return current


def get_string(doc: Any, *path: str) -> Optional[str]:
    value = get_path(doc, *path)
    return value if isinstance(value, str) else None


def get_int(doc: Any, *path: str) -> Optional[int]:
    value = get_path(doc, *path)
    # bool is an int subclass; JSON true/false is not a number
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    if not _INT32_MIN <= value <= _INT32_MAX:
        return None
    return value
