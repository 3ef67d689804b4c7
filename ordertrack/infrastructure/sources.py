"""Retrieval of the raw order-tracking feeds.

All registered sources are requested together and awaited as one barrier:
the caller only gets payloads once every source has answered, and any single
failure fails the whole fetch.
"""
from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Iterable, Protocol

import httpx

from ordertrack.core.aggregate import as_record_list
from ordertrack.core.errors import SourceError, SourceFetchError, SourceParseError
from ordertrack.core.schema import RawSourceRecord
from ordertrack.core.sources import DEFAULT_REGISTRY, SourceDefinition, SourceRegistry, api_base_url, api_timeout

logger = logging.getLogger(__name__)


class SourceClient(Protocol):
    """Contract for source retrieval integrations."""

    registry: SourceRegistry

    async def fetch_all(self) -> dict[str, list[RawSourceRecord]]:
        """Fetch every registered source, keyed by source name."""


async def _gather_sources(
    sources: Iterable[SourceDefinition],
    fetch,
) -> dict[str, list[RawSourceRecord]]:
    ordered = list(sources)
    results = await asyncio.gather(*(fetch(source) for source in ordered), return_exceptions=True)

    payloads: dict[str, list[RawSourceRecord]] = {}
    for source, result in zip(ordered, results):
        if isinstance(result, BaseException):
            raise result
        logger.debug("source %s returned %d records", source.name, len(result))
        payloads[source.name] = result
    return payloads


class HttpSourceClient:
    """Fetches the sources as JSON over HTTP."""

    def __init__(
        self,
        base_url: str,
        *,
        registry: SourceRegistry = DEFAULT_REGISTRY,
        timeout: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.registry = registry
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._client = http_client

    def url_for(self, source: SourceDefinition) -> str:
        path = source.path if source.path.startswith("/") else f"/{source.path}"
        return f"{self._base_url}{path}"

    async def _fetch_one(self, client: httpx.AsyncClient, source: SourceDefinition) -> list[RawSourceRecord]:
        url = self.url_for(source)
        try:
            response = await client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise SourceFetchError(source.name, f"server returned {exc.response.status_code}") from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise SourceFetchError(source.name, str(exc) or exc.__class__.__name__) from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise SourceParseError(source.name, "response is not valid JSON") from exc
        return as_record_list(source.name, payload)

    async def fetch_all(self) -> dict[str, list[RawSourceRecord]]:
        logger.debug("fetching %d sources from %s", len(self.registry.all), self._base_url)
        if self._client is not None:
            client = self._client
            return await _gather_sources(self.registry.all, lambda source: self._fetch_one(client, source))

        async with httpx.AsyncClient(timeout=self._timeout) as client:
            return await _gather_sources(self.registry.all, lambda source: self._fetch_one(client, source))


class DirectorySourceClient:
    """Reads ``<name>.json`` files from a directory, for offline work and demos."""

    def __init__(self, root: Path, *, registry: SourceRegistry = DEFAULT_REGISTRY) -> None:
        self.registry = registry
        self._root = Path(root)

    def _read(self, source: SourceDefinition) -> list[RawSourceRecord]:
        path = self._root / f"{source.name}.json"
        if not path.exists():
            raise SourceFetchError(source.name, f"{path.name} not found in {self._root}")
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except UnicodeDecodeError as exc:
            raise SourceParseError(source.name, f"{path.name} is not UTF-8 text") from exc
        except json.JSONDecodeError as exc:
            raise SourceParseError(source.name, f"{path.name} is not valid JSON") from exc
        except OSError as exc:
            raise SourceFetchError(source.name, f"cannot read {path.name}: {exc.strerror or exc}") from exc
        return as_record_list(source.name, payload)

    async def fetch_all(self) -> dict[str, list[RawSourceRecord]]:
        async def read(source: SourceDefinition) -> list[RawSourceRecord]:
            return await asyncio.to_thread(self._read, source)

        return await _gather_sources(self.registry.all, read)


_client: SourceClient | None = None


def configure_source_client(client: SourceClient | None) -> None:
    """Install the source client used by the order board service."""

    global _client
    _client = client


def get_source_client() -> SourceClient:
    """Return the configured source client, defaulting to HTTP against ``ORDER_API_BASE``."""

    global _client
    if _client is None:
        _client = HttpSourceClient(api_base_url(), timeout=api_timeout())
    return _client


__all__ = [
    "DirectorySourceClient",
    "HttpSourceClient",
    "SourceClient",
    "SourceError",
    "SourceFetchError",
    "SourceParseError",
    "configure_source_client",
    "get_source_client",
]
