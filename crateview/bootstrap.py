"""Wiring from settings to a ready crate aggregate."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import httpx

from crateview.aggregate import CrateAggregate
from crateview.config import CrateViewSettings, get_settings
from crateview.network.http import HttpRelationSource, HttpWriteClient, build_http_client
from crateview.network.relations import RemoteRelationLoader
from crateview.runtime.contracts import PreconditionReporter

LOGGER = logging.getLogger(__name__)


@asynccontextmanager
async def open_crate(
    name: str,
    *,
    settings: Optional[CrateViewSettings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> AsyncIterator[CrateAggregate]:
    """Fetch the crate record and yield an aggregate bound to the registry API.

    The underlying HTTP client is closed when the context exits.
    """

    settings = settings or get_settings()
    client = build_http_client(settings, transport=transport)
    try:
        source = HttpRelationSource(name, settings, client)
        record = await source.fetch_crate()
        LOGGER.debug("Fetched crate record %s (%s versions)", record.name, record.num_versions)
        aggregate = CrateAggregate(
            record,
            RemoteRelationLoader(source),
            HttpWriteClient(name, client),
            reporter=PreconditionReporter(strict=settings.preconditions_are_strict),
        )
        yield aggregate
    finally:
        await client.aclose()
