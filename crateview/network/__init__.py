"""Boundary collaborators: relation sources, relation loader, write clients."""

from crateview.network.base import RelationLoader, RelationName, RelationSource, RelationState, WriteClient
from crateview.network.http import HttpRelationSource, HttpWriteClient, build_http_client
from crateview.network.memory import RecordedWrite, RecordingWriteClient, StaticRelationSource
from crateview.network.relations import RelationReference, RemoteRelationLoader

__all__ = [
    "RelationLoader",
    "RelationName",
    "RelationSource",
    "RelationState",
    "WriteClient",
    "HttpRelationSource",
    "HttpWriteClient",
    "build_http_client",
    "RecordedWrite",
    "RecordingWriteClient",
    "StaticRelationSource",
    "RelationReference",
    "RemoteRelationLoader",
]
