"""Fire-and-confirm writes against a crate's sub-resources."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from crateview.errors import WriteRejectedError
from crateview.models.responses import WriteResponse
from crateview.network.base import WriteClient

LOGGER = logging.getLogger(__name__)


@dataclass
class MutationActions:
    """Follow/unfollow and owner invitations for one crate.

    Nothing cached locally is touched; callers re-run the matching load task
    to observe the effect of a successful write.
    """

    crate_name: str
    client: WriteClient

    async def follow(self) -> WriteResponse:
        return await self.client.request("PUT", "follow")

    async def unfollow(self) -> WriteResponse:
        return await self.client.request("DELETE", "follow")

    async def invite_owner(self, username: str) -> WriteResponse:
        response = await self.client.request("PUT", "owners", {"owners": [username]})
        return self._require_ok(response, "invite", username)

    async def remove_owner(self, username: str) -> WriteResponse:
        response = await self.client.request("DELETE", "owners", {"owners": [username]})
        return self._require_ok(response, "remove", username)

    def _require_ok(self, response: WriteResponse, verb: str, username: str) -> WriteResponse:
        if response.ok:
            LOGGER.info("Owner %s of %s succeeded for %s", verb, self.crate_name, username)
            return response
        LOGGER.debug("Owner %s of %s rejected for %s: %s", verb, self.crate_name, username, response.message)
        raise WriteRejectedError(response)
