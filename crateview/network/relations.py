"""Relation loader that materializes crate relations from a relation source."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from itertools import count
from typing import Any, Dict, Optional, Sequence

from crateview.network.base import RelationLoader, RelationSource, RelationState

LOGGER = logging.getLogger(__name__)


@dataclass
class RelationReference:
    """Load state of one relation of one crate."""

    name: str
    state: RelationState = RelationState.NOT_LOADED
    value: Optional[tuple[Any, ...]] = None
    error: Optional[BaseException] = None
    generation: int = 0
    installed_ticket: int = 0
    pending: Optional["asyncio.Future[tuple[Any, ...]]"] = field(default=None, repr=False)


class RemoteRelationLoader(RelationLoader):
    """Materializes relations on demand.

    ``load`` joins whatever fetch is in flight (or returns the installed set);
    ``reload`` always starts a new fetch. Every fetch draws a ticket when it
    starts and only installs its result if no later-started fetch has
    installed one already, so completion order never rolls the set back.
    """

    def __init__(self, source: RelationSource) -> None:
        self._source = source
        self._refs: Dict[str, RelationReference] = {}
        self._tickets = count(1)

    @property
    def source(self) -> RelationSource:
        return self._source

    def reference(self, relation: str) -> RelationReference:
        relation = _relation_key(relation)
        ref = self._refs.get(relation)
        if ref is None:
            ref = RelationReference(name=relation)
            self._refs[relation] = ref
        return ref

    def state(self, relation: str) -> RelationState:
        return self.reference(relation).state

    def value(self, relation: str) -> Optional[Sequence[Any]]:
        return self.reference(relation).value

    def generation(self, relation: str) -> int:
        return self.reference(relation).generation

    def error(self, relation: str) -> Optional[BaseException]:
        return self.reference(relation).error

    async def load(self, relation: str) -> Sequence[Any]:
        ref = self.reference(relation)
        if ref.pending is not None and not ref.pending.done():
            LOGGER.debug("Joining in-flight fetch of %s", ref.name)
            return await asyncio.shield(ref.pending)
        if ref.state is RelationState.LOADED and ref.value is not None:
            return ref.value
        return await self._start(ref)

    async def reload(self, relation: str) -> Sequence[Any]:
        return await self._start(self.reference(relation))

    async def _start(self, ref: RelationReference) -> tuple[Any, ...]:
        future = asyncio.ensure_future(self._fetch(ref, next(self._tickets)))
        ref.pending = future
        future.add_done_callback(lambda fut: self._clear_pending(ref, fut))
        return await asyncio.shield(future)

    async def _fetch(self, ref: RelationReference, ticket: int) -> tuple[Any, ...]:
        LOGGER.debug("Fetching relation %s ticket=%s", ref.name, ticket)
        try:
            records = tuple(await self._source.fetch(ref.name))
        except Exception as exc:
            if ticket > ref.installed_ticket:
                ref.error = exc
                if ref.state is not RelationState.LOADED:
                    ref.state = RelationState.FAILED
            raise

        if ticket < ref.installed_ticket:
            LOGGER.warning(
                "Discarding stale fetch of %s (ticket %s older than installed %s)",
                ref.name,
                ticket,
                ref.installed_ticket,
            )
            assert ref.value is not None
            return ref.value

        ref.value = records
        ref.installed_ticket = ticket
        ref.generation += 1
        ref.state = RelationState.LOADED
        ref.error = None
        LOGGER.info("Loaded %s record(s) for relation %s (generation %s)", len(records), ref.name, ref.generation)
        return records

    @staticmethod
    def _clear_pending(ref: RelationReference, future: "asyncio.Future[Any]") -> None:
        if not future.cancelled():
            # Mark the exception retrieved; callers that awaited it already saw it.
            future.exception()
        if ref.pending is future:
            ref.pending = None


def _relation_key(relation: Any) -> str:
    return getattr(relation, "value", relation)
