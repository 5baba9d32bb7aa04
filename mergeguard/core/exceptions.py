# mergeguard/core/exceptions.py
from typing import Optional


class MergeGuardError(Exception):
    """Base exception for all MergeGuard errors."""


class PayloadError(MergeGuardError):
    """Webhook body could not be decoded."""


class InferenceError(MergeGuardError):
    """The inference service failed or answered with an unusable envelope."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
