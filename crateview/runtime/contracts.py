"""Runtime contract checks for read-before-load accessors."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from crateview.errors import PreconditionViolation

LOGGER = logging.getLogger(__name__)


@dataclass
class PreconditionReporter:
    """Reports broken preconditions: raise when strict, warn otherwise."""

    strict: bool = True

    def check(self, condition: bool, message: str) -> bool:
        """Return ``condition``; report ``message`` when it is false."""

        if condition:
            return True
        if self.strict:
            raise PreconditionViolation(message)
        LOGGER.warning("Precondition violated: %s", message)
        return False
