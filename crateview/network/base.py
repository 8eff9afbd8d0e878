"""Boundary interfaces consumed by the crate aggregate."""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Sequence

from crateview.models.responses import WriteResponse


class RelationName(str, enum.Enum):
    VERSIONS = "versions"
    OWNER_TEAM = "owner_team"
    OWNER_USER = "owner_user"
    KEYWORDS = "keywords"
    CATEGORIES = "categories"


class RelationState(str, enum.Enum):
    NOT_LOADED = "not_loaded"
    LOADED = "loaded"
    FAILED = "failed"


class RelationSource(ABC):
    """Fetches the full remote contents of a crate relation."""

    @abstractmethod
    async def fetch(self, relation: str) -> Sequence[Any]:
        """Return every record of ``relation``; raise ``RelationLoadError`` on failure."""

    async def close(self) -> None:
        return None


class RelationLoader(ABC):
    """Holds the materialized set of each relation and (re)populates it."""

    @abstractmethod
    def state(self, relation: str) -> RelationState:
        ...

    @abstractmethod
    def value(self, relation: str) -> Optional[Sequence[Any]]:
        """Currently materialized records, or ``None`` if never loaded.

        Each successful load installs a new sequence object; callers may key
        caches on its identity.
        """

    @abstractmethod
    def generation(self, relation: str) -> int:
        """Number of materialized sets installed so far for ``relation``."""

    @abstractmethod
    async def load(self, relation: str) -> Sequence[Any]:
        """Load if absent: reuse an installed or in-flight load."""

    @abstractmethod
    async def reload(self, relation: str) -> Sequence[Any]:
        """Issue a fresh fetch and replace the materialized set."""


class WriteClient(ABC):
    """Performs writes against sub-resources of one crate."""

    @abstractmethod
    async def request(
        self,
        method: str,
        path: str,
        data: Optional[Dict[str, Any]] = None,
    ) -> WriteResponse:
        """Send the write; raise ``RemoteWriteError`` on transport failure."""

    async def close(self) -> None:
        return None
