"""HTTP client for the freelancer management API.

The four collection reads run concurrently on one ``httpx.AsyncClient``.
Every read is attempted even when another fails; the snapshot is only
handed over when all four succeeded.
"""

from __future__ import annotations

import asyncio
from typing import Any

import httpx
import structlog

from freelancedesk.config.models import ApiConfig
from freelancedesk.domain.snapshot import COLLECTIONS
from freelancedesk.infrastructure.sources import (
    ProjectUpdateError,
    RawCollections,
    SourceFetchError,
)

log = structlog.get_logger(__name__)


def _describe(exc: BaseException) -> str:
    if isinstance(exc, httpx.HTTPStatusError):
        return f"HTTP {exc.response.status_code}"
    if isinstance(exc, httpx.TimeoutException):
        return "timed out"
    if isinstance(exc, httpx.TransportError):
        return f"connection failed ({exc.__class__.__name__})"
    return str(exc) or exc.__class__.__name__


class ApiSnapshotSource:
    """Snapshot source backed by the REST API.

    *transport* replaces the network layer (tests pass an
    ``httpx.MockTransport``).
    """

    def __init__(
        self,
        config: ApiConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        sync_transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.config = config
        self._transport = transport
        self._sync_transport = sync_transport

    @property
    def headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.config.token:
            headers["Authorization"] = self.config.token
        return headers

    def _client_kwargs(self) -> dict[str, Any]:
        return {
            "base_url": self.config.base_url.rstrip("/"),
            "headers": self.headers,
            "timeout": self.config.timeout,
        }

    async def _read(self, client: httpx.AsyncClient, name: str) -> list[Any]:
        response = await client.get(f"/{name}")
        response.raise_for_status()
        try:
            payload = response.json()
        except ValueError as exc:
            raise SourceFetchError({name: "invalid JSON"}) from exc
        if not isinstance(payload, list):
            raise SourceFetchError({name: "expected a list"})
        log.debug("source.read", source=name, records=len(payload))
        return payload

    async def fetch_async(self) -> RawCollections:
        """Read every collection concurrently.

        Raises:
            SourceFetchError: naming each collection that could not be read.
        """
        async with httpx.AsyncClient(transport=self._transport, **self._client_kwargs()) as client:
            results = await asyncio.gather(
                *(self._read(client, name) for name in COLLECTIONS),
                return_exceptions=True,
            )

        collections: RawCollections = {}
        failures: dict[str, str] = {}
        for name, result in zip(COLLECTIONS, results, strict=True):
            if isinstance(result, SourceFetchError):
                failures.update(result.failures)
            elif isinstance(result, BaseException):
                failures[name] = _describe(result)
            else:
                collections[name] = result
        if failures:
            log.warning("source.failed", sources=list(failures))
            raise SourceFetchError(failures)
        return collections

    def fetch(self) -> RawCollections:
        return asyncio.run(self.fetch_async())

    def update_project(self, project_id: str, changes: dict[str, Any]) -> dict[str, Any]:
        """PATCH one project; returns the API's JSON body (empty if none).

        Raises:
            ProjectUpdateError: on any HTTP or transport failure.
        """
        with httpx.Client(transport=self._sync_transport, **self._client_kwargs()) as client:
            try:
                response = client.patch(f"/projects/{project_id}", json=changes)
                response.raise_for_status()
            except httpx.HTTPError as exc:
                raise ProjectUpdateError(_describe(exc)) from exc
        log.debug("project.updated", project_id=project_id, **changes)
        if not response.content:
            return {}
        try:
            body = response.json()
        except ValueError:
            return {}
        return body if isinstance(body, dict) else {}
