"""
Boundary file sources.

A source turns an AdminLevel into a decoded GeoJSON document. The data
manager only depends on the `fetch(level)` coroutine, so tests can inject
their own.
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Optional, Protocol

import aiohttp

from thaimap.engine.models import AdminLevel

logger = logging.getLogger("GeoJSONSource")


class GeoJSONSource(Protocol):
    async def fetch(self, level: AdminLevel) -> Any:
        ...


def geojson_filename(level: AdminLevel) -> str:
    return f"{level.value}.geojson"


class HttpGeoJSONSource:
    """Fetches {base_url}/{level}.geojson with a shared aiohttp session."""

    def __init__(self, base_url: str, session: Optional[aiohttp.ClientSession] = None):
        self.base_url = base_url.rstrip("/")
        self._session = session

    def url_for(self, level: AdminLevel) -> str:
        return f"{self.base_url}/{geojson_filename(level)}"

    async def fetch(self, level: AdminLevel) -> Any:
        if self._session is not None:
            return await self._get(self._session, level)
        async with aiohttp.ClientSession() as session:
            return await self._get(session, level)

    async def _get(self, session: aiohttp.ClientSession, level: AdminLevel) -> Any:
        url = self.url_for(level)
        async with session.get(url) as resp:
            if resp.status != 200:
                logger.warning(f"{url} -> HTTP {resp.status}")
                raise aiohttp.ClientResponseError(
                    resp.request_info,
                    resp.history,
                    status=resp.status,
                    message=resp.reason or "",
                    headers=resp.headers,
                )
            # .geojson is often served as application/geo+json or octet-stream
            return await resp.json(content_type=None)


class FileGeoJSONSource:
    """Reads {directory}/{level}.geojson from local disk."""

    def __init__(self, directory):
        self.directory = Path(directory)

    def path_for(self, level: AdminLevel) -> Path:
        return self.directory / geojson_filename(level)

    def _read(self, level: AdminLevel) -> Any:
        with open(self.path_for(level), "r", encoding="utf-8") as f:
            return json.load(f)

    async def fetch(self, level: AdminLevel) -> Any:
        return await asyncio.to_thread(self._read, level)
