"""Error taxonomy shared by the crate aggregate and its collaborators."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from crateview.models.responses import WriteResponse


class CrateViewError(Exception):
    """Base error for crate aggregate operations."""


class PreconditionViolation(CrateViewError):
    """Raised when a read-before-load contract is broken by the caller."""


class RelationLoadError(CrateViewError):
    """Raised when a relation could not be fetched from the remote source."""

    def __init__(self, relation: str, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(f"Failed to load relation '{relation}': {message}")
        self.relation = relation
        self.status_code = status_code


class RemoteWriteError(CrateViewError):
    """Raised when a remote write fails at the transport level."""

    def __init__(
        self,
        method: str,
        path: str,
        message: str,
        *,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(f"{method} {path} failed: {message}")
        self.method = method
        self.path = path
        self.status_code = status_code


class WriteRejectedError(CrateViewError):
    """Raised when the remote accepted the request but reported it unsuccessful."""

    def __init__(self, response: "WriteResponse") -> None:
        detail = response.message or "remote reported ok=false"
        super().__init__(detail)
        self.response = response


__all__ = [
    "CrateViewError",
    "PreconditionViolation",
    "RelationLoadError",
    "RemoteWriteError",
    "WriteRejectedError",
]
