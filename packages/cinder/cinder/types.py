"""Shared type aliases and exceptions for the cinder rule engine."""

from __future__ import annotations

from typing import Union

Millis = float
Scalar = Union[int, float, bool]


class ConfigurationError(ValueError):
    """Raised at load time when a definition references something undefined."""


class InvariantViolation(RuntimeError):
    """Raised in strict mode when a caller breaks a state invariant.

    In lenient mode the same conditions are logged and clamped instead.
    """

    def __init__(self, subject: str, message: str) -> None:
        self.subject = subject
        super().__init__(message)


class SnapshotError(Exception):
    """Raised on restore failures (version mismatch, malformed payload)."""
