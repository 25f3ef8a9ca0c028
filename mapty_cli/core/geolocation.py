"""Startup location providers."""

from __future__ import annotations

from typing import Any, Dict, Optional, Protocol

import requests
from loguru import logger

from mapty_cli.core.constants import DEFAULT_GEOLOCATION_URL
from mapty_cli.core.errors import GeolocationUnavailableError
from mapty_cli.core.models import Location


class Geolocator(Protocol):
    def request_location(self) -> Location: ...


class IPGeolocator:
    """Approximate the device position from an IP geolocation service.

    One attempt, no retry: a failure is final for the session.
    """

    def __init__(self, url: str = DEFAULT_GEOLOCATION_URL, timeout_seconds: float = 5) -> None:
        self.url = url
        self.timeout_seconds = timeout_seconds

    def request_location(self) -> Location:
        try:
            response = requests.get(self.url, timeout=self.timeout_seconds)
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as exc:
            logger.warning("Geolocation lookup failed: {}", exc)
            raise GeolocationUnavailableError(f"Geolocation lookup failed: {exc}") from exc

        if not isinstance(payload, dict):
            raise GeolocationUnavailableError("Geolocation response is not an object")
        try:
            location = Location(float(payload["latitude"]), float(payload["longitude"]))
        except (KeyError, TypeError, ValueError) as exc:
            raise GeolocationUnavailableError("Geolocation response has no coordinates") from exc
        logger.debug("Geolocation resolved to {}", location)
        return location


class FixedGeolocator:
    """Always report the configured home location."""

    def __init__(self, location: Location) -> None:
        self.location = location

    def request_location(self) -> Location:
        return self.location


class DisabledGeolocator:
    """Decline every request."""

    def request_location(self) -> Location:
        raise GeolocationUnavailableError("Geolocation is disabled")


def geolocator_from_config(config: Dict[str, Any]) -> Geolocator:
    """Pick a provider from ``geolocation.provider``."""
    geo_cfg = config.get("geolocation", {})
    provider = geo_cfg.get("provider", "ip")

    if provider == "fixed":
        home = _home_location(geo_cfg)
        if home is None:
            logger.warning("geolocation.provider is 'fixed' but no latitude/longitude is set")
            return DisabledGeolocator()
        return FixedGeolocator(home)
    if provider == "none":
        return DisabledGeolocator()
    return IPGeolocator(
        url=str(geo_cfg.get("url") or DEFAULT_GEOLOCATION_URL),
        timeout_seconds=float(geo_cfg.get("timeout_seconds", 5)),
    )


def _home_location(geo_cfg: Dict[str, Any]) -> Optional[Location]:
    lat = geo_cfg.get("latitude")
    lng = geo_cfg.get("longitude")
    if lat is None or lng is None:
        return None
    try:
        return Location(float(lat), float(lng))
    except (TypeError, ValueError):
        return None
