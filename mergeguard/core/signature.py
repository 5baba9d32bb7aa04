# mergeguard/core/signature.py
import hashlib
import hmac
from typing import Optional

SIGNATURE_PREFIX = "sha256="


def compute_signature(body: bytes, secret: str) -> str:
    """HMAC-SHA256 of the raw body keyed with the UTF-8 secret, as lowercase hex."""
    return hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()


def fixed_time_equals(a: str, b: str) -> bool:
    """Compare two strings without short-circuiting on the first mismatch.

    Only the length check returns early, so the comparison leaks the length
    and nothing else.
    """
    if len(a) != len(b):
        return False

    diff = 0
    for x, y in zip(a, b):
        diff |= ord(x) ^ ord(y)
    return diff == 0


def verify_signature(body: bytes, secret: str, signature_header: Optional[str]) -> bool:
    """Check a ``sha256=<hex>`` header against the body.

    Anything that is not a ``sha256=`` header is rejected before an HMAC is
    computed.
    """
    if not signature_header or not signature_header.strip():
        return False
    if signature_header[: len(SIGNATURE_PREFIX)].lower() != SIGNATURE_PREFIX:
        return False

    their_hex = signature_header[len(SIGNATURE_PREFIX):].strip()
    our_hex = compute_signature(body, secret)
    return fixed_time_equals(our_hex, their_hex)
