from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

import httpx
import structlog

from mileage.client.errors import ApiError
from mileage.client.http import send
from mileage.client.toast import ToastService

logger = structlog.get_logger()

DEFAULT_NOMINATIM_URL = "https://nominatim.openstreetmap.org"


@dataclass(frozen=True)
class GeocodedLocation:
    lat: float
    lng: float
    display_name: str


def search_query(location: Mapping[str, Any]) -> str:
    parts = (
        location.get("address"),
        location.get("city"),
        location.get("state"),
        location.get("zip_code"),
        location.get("country"),
    )
    return ", ".join("" if p is None else str(p) for p in parts)


class GeocodingService:
    """Free-text address search against Nominatim; never sends the bearer token."""

    def __init__(self, http: httpx.AsyncClient, toasts: ToastService, base_url: str = DEFAULT_NOMINATIM_URL):
        self.http = http
        self.toasts = toasts
        self.base_url = base_url.rstrip("/")

    async def geocode(self, location: Mapping[str, Any]) -> Optional[GeocodedLocation]:
        params = {"q": search_query(location), "format": "json", "limit": "1"}
        try:
            results = await send(
                self.http, "GET", f"{self.base_url}/search", params=params, skip_auth=True
            )
            if not results:
                self.toasts.error("Address not found.")
                return None
            first = results[0]
            return GeocodedLocation(
                lat=float(first["lat"]),
                lng=float(first["lon"]),
                display_name=first.get("display_name", ""),
            )
        except (ApiError, KeyError, IndexError, TypeError, ValueError) as exc:
            logger.warning("geocoding_failed", query=params["q"], error=str(exc))
            self.toasts.error("Geocoding failed.")
            return None


class ReverseGeocodingService:
    def __init__(self, http: httpx.AsyncClient, toasts: ToastService, base_url: str = DEFAULT_NOMINATIM_URL):
        self.http = http
        self.toasts = toasts
        self.base_url = base_url.rstrip("/")

    async def reverse_geocode(self, lat: float, lon: float) -> Optional[Dict[str, str]]:
        params = {"lat": str(lat), "lon": str(lon), "format": "json"}
        try:
            result = await send(
                self.http, "GET", f"{self.base_url}/reverse", params=params, skip_auth=True
            )
            address = result["address"]
            if not isinstance(address, dict):
                raise TypeError(f"unexpected address block: {address!r}")
        except (ApiError, KeyError, TypeError) as exc:
            logger.warning("reverse_geocoding_failed", lat=lat, lon=lon, error=str(exc))
            self.toasts.error("Reverse geocoding failed.")
            return None
        return {
            "address": address.get("road") or address.get("hamlet") or "",
            "city": address.get("city") or address.get("town") or address.get("village") or "",
            "state": address.get("state") or "",
            "zip_code": address.get("postcode") or "",
            "country": (address.get("country_code") or "").upper(),
        }
