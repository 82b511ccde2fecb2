"""Mapbox forward-geocoding adapter."""

from __future__ import annotations

import logging
import math
from typing import Optional
from urllib.parse import quote

import httpx

from taskforce.domain.directory.models import Coordinates
from taskforce.domain.directory.ports import GeocodingProvider
from taskforce.utils.log_once import log_once

logger = logging.getLogger(__name__)


class MapboxGeocoder(GeocodingProvider):
    """Resolve country/region names to a centre point.

    Only the first feature of type ``country`` or ``region`` is used.
    Every failure (no token, HTTP error, unexpected payload) resolves
    to ``None``.
    """

    DEFAULT_BASE_URL = "https://api.mapbox.com/geocoding/v5/mapbox.places"
    DEFAULT_TIMEOUT = 5.0

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._token = token.strip()
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._client = client

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def resolve_place(self, name: str) -> Coordinates | None:
        if not self._token:
            log_once(
                "mapbox-token-missing",
                "Mapbox token is not configured; organisation markers without coordinates are skipped",
            )
            return None

        url = f"{self._base_url}/{quote(name, safe='')}.json"
        params = {"access_token": self._token, "types": "country,region", "limit": "1"}
        try:
            response = await self._get_client().get(url, params=params)
        except httpx.HTTPError as e:
            logger.error("Geocoding request for %r failed: %s", name, e)
            return None

        if response.status_code != 200:
            logger.warning("Geocoding %r returned HTTP %s", name, response.status_code)
            return None

        try:
            payload = response.json()
        except ValueError:
            logger.warning("Geocoding %r returned a non-JSON body", name)
            return None

        return _first_center(payload)


def _first_center(payload: object) -> Coordinates | None:
    if not isinstance(payload, dict):
        return None
    features = payload.get("features") or []
    if not features or not isinstance(features[0], dict):
        return None
    center = features[0].get("center")
    if not isinstance(center, (list, tuple)) or len(center) < 2:
        return None
    lng, lat = center[0], center[1]
    if not isinstance(lat, (int, float)) or not isinstance(lng, (int, float)):
        return None
    if not (math.isfinite(lat) and math.isfinite(lng)):
        return None
    return Coordinates(lat=float(lat), lng=float(lng))
