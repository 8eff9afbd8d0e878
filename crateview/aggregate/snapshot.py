"""Point-in-time lookups over whatever part of a relation is materialized."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional, Sequence

from crateview.network.base import RelationLoader, RelationName

LOGGER = logging.getLogger(__name__)

_EMPTY: Mapping[Any, Any] = MappingProxyType({})


@dataclass(frozen=True)
class RelationSnapshot:
    """Lookups built from one materialized set; ``generation`` counts rebuilds."""

    generation: int
    records: tuple[Any, ...] = ()
    by_id: Mapping[Any, Any] = field(default_factory=lambda: _EMPTY, repr=False)
    by_num: Mapping[str, Any] = field(default_factory=lambda: _EMPTY, repr=False)


class RelationSnapshotCache:
    """Rebuilds the snapshot whenever the loader installs a new materialized set."""

    def __init__(self, loader: RelationLoader, relation: str = RelationName.VERSIONS.value) -> None:
        self._loader = loader
        self._relation = getattr(relation, "value", relation)
        self._source: Optional[Sequence[Any]] = None
        self._snapshot = RelationSnapshot(generation=0)

    @property
    def relation(self) -> str:
        return self._relation

    def current(self) -> RelationSnapshot:
        source = self._loader.value(self._relation)
        if source is None:
            if self._source is not None:
                # Loader forgot the relation; fall back to empty lookups.
                self._source = None
                self._snapshot = RelationSnapshot(generation=self._snapshot.generation + 1)
            return self._snapshot
        if source is not self._source:
            self._snapshot = self._build(source, self._snapshot.generation + 1)
            self._source = source
        return self._snapshot

    @property
    def by_id(self) -> Mapping[Any, Any]:
        return self.current().by_id

    @property
    def by_num(self) -> Mapping[str, Any]:
        return self.current().by_num

    def _build(self, source: Sequence[Any], generation: int) -> RelationSnapshot:
        by_id = {record.id: record for record in source}
        # Overlapping pages can repeat a record; keep one per id.
        records = tuple(by_id.values())
        if len(records) != len(source):
            LOGGER.debug("Dropped %s duplicate %s record(s)", len(source) - len(records), self._relation)
        by_num = {record.num: record for record in records if getattr(record, "num", None) is not None}
        LOGGER.debug(
            "Rebuilt %s snapshot generation=%s (%s records)",
            self._relation,
            generation,
            len(records),
        )
        return RelationSnapshot(
            generation=generation,
            records=records,
            by_id=MappingProxyType(by_id),
            by_num=MappingProxyType(by_num),
        )
