"""Memoized version views derived from the current relation snapshot."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, FrozenSet, Tuple, TypeVar

from crateview.aggregate.snapshot import RelationSnapshot, RelationSnapshotCache
from crateview.versions.ordering import sort_by_date, sort_by_semver

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


class DerivedViewCache:
    """Ordered id sequences and release-track representatives for the versions relation.

    Each view is computed at most once per snapshot generation and is never
    returned for a generation other than the current one.
    """

    def __init__(self, snapshots: RelationSnapshotCache) -> None:
        self._snapshots = snapshots
        self._memo: Dict[str, Tuple[int, Any]] = {}

    @property
    def version_ids_by_semver(self) -> Tuple[Any, ...]:
        return self._memoized("by_semver", lambda snap: tuple(v.id for v in sort_by_semver(snap.records)))

    @property
    def version_ids_by_date(self) -> Tuple[Any, ...]:
        return self._memoized("by_date", lambda snap: tuple(v.id for v in sort_by_date(snap.records)))

    @property
    def release_track_set(self) -> FrozenSet[Any]:
        return self._memoized("release_tracks", self._release_tracks)

    def _release_tracks(self, snapshot: RelationSnapshot) -> FrozenSet[Any]:
        representatives: Dict[str, Any] = {}
        for version_id in self.version_ids_by_semver:
            version = snapshot.by_id[version_id]
            track = version.release_track
            if track and not version.is_prerelease and not version.yanked and track not in representatives:
                representatives[track] = version_id
        return frozenset(representatives.values())

    def _memoized(self, name: str, compute: Callable[[RelationSnapshot], T]) -> T:
        snapshot = self._snapshots.current()
        cached = self._memo.get(name)
        if cached is not None and cached[0] == snapshot.generation:
            return cached[1]
        value = compute(snapshot)
        self._memo[name] = (snapshot.generation, value)
        LOGGER.debug("Recomputed %s view for generation %s", name, snapshot.generation)
        return value
