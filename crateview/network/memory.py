"""In-memory relation source and write client for offline use and tests."""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict, deque
from dataclasses import dataclass, field
from typing import Any, Deque, Dict, List, Optional, Sequence

from crateview.errors import RelationLoadError
from crateview.models.responses import WriteResponse
from crateview.network.base import RelationSource, WriteClient

LOGGER = logging.getLogger(__name__)


class StaticRelationSource(RelationSource):
    """Serves relation records from memory, counting every fetch."""

    def __init__(
        self,
        records: Optional[Dict[str, Sequence[Any]]] = None,
        *,
        delay_seconds: float = 0.0,
    ) -> None:
        self._records: Dict[str, List[Any]] = {key: list(value) for key, value in (records or {}).items()}
        self._failures: Dict[str, BaseException] = {}
        self.delay_seconds = delay_seconds
        self.fetch_counts: Dict[str, int] = defaultdict(int)

    def set(self, relation: str, records: Sequence[Any]) -> None:
        self._records[relation] = list(records)

    def fail(self, relation: str, exc: Optional[BaseException] = None) -> None:
        """Make the next fetches of ``relation`` raise until ``set`` or ``heal`` is called."""

        self._failures[relation] = exc or RelationLoadError(relation, "simulated failure")

    def heal(self, relation: str) -> None:
        self._failures.pop(relation, None)

    async def fetch(self, relation: str) -> Sequence[Any]:
        self.fetch_counts[relation] += 1
        LOGGER.debug("Static fetch of %s (#%s)", relation, self.fetch_counts[relation])
        if self.delay_seconds:
            await asyncio.sleep(self.delay_seconds)
        failure = self._failures.get(relation)
        if failure is not None:
            raise failure
        return list(self._records.get(relation, []))


@dataclass
class RecordedWrite:
    method: str
    path: str
    data: Optional[Dict[str, Any]] = None


@dataclass
class RecordingWriteClient(WriteClient):
    """Records writes and answers with queued responses (``ok=True`` when none are queued)."""

    requests: List[RecordedWrite] = field(default_factory=list)
    _responses: Deque[WriteResponse | BaseException] = field(default_factory=deque, repr=False)

    def queue(self, response: WriteResponse | BaseException) -> None:
        self._responses.append(response)

    async def request(
        self,
        method: str,
        path: str,
        data: Optional[Dict[str, Any]] = None,
    ) -> WriteResponse:
        self.requests.append(RecordedWrite(method=method, path=path, data=data))
        LOGGER.debug("Recorded write %s %s data=%s", method, path, data)
        if not self._responses:
            return WriteResponse(ok=True, status_code=200)
        outcome = self._responses.popleft()
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome
