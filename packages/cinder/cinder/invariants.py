"""Invariant policy: raise in strict mode, log and clamp otherwise."""

from __future__ import annotations

import logging

from cinder.types import InvariantViolation

logger = logging.getLogger(__name__)


class InvariantPolicy:
    def __init__(self, strict: bool = __debug__) -> None:
        self._strict = strict

    @property
    def strict(self) -> bool:
        return self._strict

    def violation(self, subject: str, message: str) -> None:
        """Report a broken invariant. Raises InvariantViolation when strict."""
        if self._strict:
            raise InvariantViolation(subject, message)
        logger.warning("invariant violation on %s: %s", subject, message)

    def non_negative(self, subject: str, value: int) -> int:
        """Return *value*, or report and clamp it to 0 if negative."""
        if value >= 0:
            return value
        self.violation(subject, f"{subject} would become {value}")
        return 0
