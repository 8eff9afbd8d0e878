"""httpx-backed relation source and write client for a crates.io style registry."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ValidationError

from crateview.config import CrateViewSettings
from crateview.errors import RelationLoadError, RemoteWriteError
from crateview.models import Category, Crate, Keyword, Team, User, Version, WriteResponse
from crateview.network.base import RelationName, RelationSource, WriteClient

LOGGER = logging.getLogger(__name__)


def build_http_client(
    settings: CrateViewSettings,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """Create the shared async client used by the source and the write client."""

    headers = {
        "Accept": "application/json",
        "User-Agent": settings.user_agent,
    }
    if settings.auth_token:
        headers["Authorization"] = settings.auth_token
    return httpx.AsyncClient(
        base_url=str(settings.api_base_url),
        headers=headers,
        timeout=settings.request_timeout_seconds,
        follow_redirects=True,
        transport=transport,
    )


def _error_detail(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    errors = payload.get("errors") if isinstance(payload, dict) else None
    if errors:
        details = [str(item.get("detail", item)) if isinstance(item, dict) else str(item) for item in errors]
        return "; ".join(details)
    return response.reason_phrase


class HttpRelationSource(RelationSource):
    """Fetches crate relations from the registry REST API."""

    def __init__(self, crate_name: str, settings: CrateViewSettings, client: httpx.AsyncClient) -> None:
        self._crate_name = crate_name
        self._settings = settings
        self._client = client

    @property
    def crate_path(self) -> str:
        return f"crates/{quote(self._crate_name, safe='')}"

    async def fetch_crate(self) -> Crate:
        payload = await self._get_json(self.crate_path, relation="crate")
        return self._validate("crate", Crate, [payload.get("crate") or {}])[0]

    async def fetch(self, relation: str) -> Sequence[Any]:
        relation = getattr(relation, "value", relation)
        if relation == RelationName.VERSIONS.value:
            return await self._fetch_versions()
        if relation == RelationName.OWNER_TEAM.value:
            payload = await self._get_json(f"{self.crate_path}/owner_team", relation=relation)
            return self._validate(relation, Team, payload.get("teams") or [])
        if relation == RelationName.OWNER_USER.value:
            payload = await self._get_json(f"{self.crate_path}/owner_user", relation=relation)
            return self._validate(relation, User, payload.get("users") or [])
        if relation == RelationName.KEYWORDS.value:
            payload = await self._get_json(self.crate_path, relation=relation)
            return self._validate(relation, Keyword, payload.get("keywords") or [])
        if relation == RelationName.CATEGORIES.value:
            payload = await self._get_json(self.crate_path, relation=relation)
            return self._validate(relation, Category, payload.get("categories") or [])
        raise RelationLoadError(relation, "relation is not served by the HTTP source")

    async def _fetch_versions(self) -> List[Version]:
        relation = RelationName.VERSIONS.value
        url = f"{self.crate_path}/versions"
        params: Dict[str, Any] = {"per_page": self._settings.versions_page_size}
        raw: List[Dict[str, Any]] = []
        while True:
            payload = await self._get_json(url, relation=relation, params=params)
            raw.extend(payload.get("versions") or [])
            next_page = (payload.get("meta") or {}).get("next_page")
            if not next_page:
                break
            params = dict(httpx.QueryParams(next_page.lstrip("?")))
            LOGGER.debug("Following versions page for %s: %s", self._crate_name, params)
        return self._validate(relation, Version, raw)

    async def _get_json(
        self,
        url: str,
        *,
        relation: str,
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        try:
            response = await self._client.get(url, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            raise RelationLoadError(relation, _error_detail(exc.response), status_code=status) from exc
        except httpx.HTTPError as exc:
            raise RelationLoadError(relation, str(exc) or type(exc).__name__) from exc
        try:
            payload = response.json()
        except ValueError as exc:
            raise RelationLoadError(relation, "response is not valid JSON", status_code=response.status_code) from exc
        if not isinstance(payload, dict):
            raise RelationLoadError(relation, "response is not a JSON object", status_code=response.status_code)
        return payload

    @staticmethod
    def _validate(relation: str, model: type[BaseModel], items: List[Any]) -> List[Any]:
        try:
            return [model.model_validate(item) for item in items]
        except ValidationError as exc:
            raise RelationLoadError(relation, f"malformed {model.__name__} record: {exc}") from exc


class HttpWriteClient(WriteClient):
    """Sends writes to ``crates/<name>/<path>``.

    Only transport failures raise; any HTTP status comes back as a
    ``WriteResponse`` whose ``ok`` flag reflects it.
    """

    def __init__(self, crate_name: str, client: httpx.AsyncClient) -> None:
        self._crate_name = crate_name
        self._client = client

    async def request(
        self,
        method: str,
        path: str,
        data: Optional[Dict[str, Any]] = None,
    ) -> WriteResponse:
        url = f"crates/{quote(self._crate_name, safe='')}/{path}"
        try:
            response = await self._client.request(method, url, json=data)
        except httpx.HTTPError as exc:
            raise RemoteWriteError(method, path, str(exc) or type(exc).__name__) from exc

        try:
            body = response.json() if response.content else {}
        except ValueError:
            LOGGER.debug("Non-JSON body for %s %s", method, url)
            body = {}
        if not isinstance(body, dict):
            body = {}
        ok = response.is_success and bool(body.get("ok", True))
        message = body.get("msg")
        if not response.is_success:
            message = message or _error_detail(response)
            LOGGER.debug("%s %s answered %s: %s", method, url, response.status_code, message)
        return WriteResponse(ok=ok, status_code=response.status_code, message=message, body=body)
