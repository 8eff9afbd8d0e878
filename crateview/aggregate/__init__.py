"""Crate aggregate: snapshot cache, derived views, load tasks, writes."""

from .actions import MutationActions
from .crate import CrateAggregate
from .snapshot import RelationSnapshot, RelationSnapshotCache
from .views import DerivedViewCache

__all__ = [
    "CrateAggregate",
    "DerivedViewCache",
    "MutationActions",
    "RelationSnapshot",
    "RelationSnapshotCache",
]
