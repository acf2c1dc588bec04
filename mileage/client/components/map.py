import inspect
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, List, Mapping, Optional, Tuple

import structlog

from mileage.client.geocoding import GeocodedLocation, GeocodingService
from mileage.client.signals import Computed, Signal
from mileage.client.toast import ToastService

logger = structlog.get_logger()

TILE_URL = "https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png"
DEFAULT_CENTER = (39.5, -98.35)
DEFAULT_ZOOM = 4
GEOCODED_ZOOM = 14


class GeolocationError(Exception):
    """The device refused or failed to report a position."""


# async () -> (lat, lng); None means the platform has no geolocation
Geolocator = Callable[[], Awaitable[Tuple[float, float]]]


@dataclass(frozen=True)
class ViewOptions:
    center: Tuple[float, float]
    zoom: int
    tile_url: str = TILE_URL


@dataclass(frozen=True)
class Marker:
    lat: float
    lng: float
    kind: str  # "geocoded" or "placed"


class MapComponent:
    """
    Map state for a location.

    ``view_options`` is None while a supplied location is still being
    geocoded. The geocoded marker and the user-placed marker are independent.
    """

    def __init__(
        self,
        geocoding: GeocodingService,
        toasts: ToastService,
        interactive: bool = False,
        on_coordinates_selected: Optional[Callable[[float, float], Any]] = None,
    ):
        self.geocoding = geocoding
        self.toasts = toasts
        self.interactive = interactive
        self.on_coordinates_selected = on_coordinates_selected

        self.location: Signal[Optional[Mapping[str, Any]]] = Signal(None)
        self._geocoded: Signal[Optional[GeocodedLocation]] = Signal(None)
        self._clicked_marker: Signal[Optional[Tuple[float, float]]] = Signal(None)
        self.geocoded = self._geocoded.as_readonly()
        self._geocode_ticket = 0

        self.view_options = Computed(self._view_options, self.location, self._geocoded)
        self.layers = Computed(self._layers, self._geocoded, self._clicked_marker)

    def _view_options(self) -> Optional[ViewOptions]:
        geocoded = self._geocoded()
        if geocoded is not None:
            return ViewOptions(center=(geocoded.lat, geocoded.lng), zoom=GEOCODED_ZOOM)
        if self.location() is None:
            return ViewOptions(center=DEFAULT_CENTER, zoom=DEFAULT_ZOOM)
        return None

    def _layers(self) -> List[Marker]:
        layers = []
        geocoded = self._geocoded()
        if geocoded is not None:
            layers.append(Marker(geocoded.lat, geocoded.lng, "geocoded"))
        clicked = self._clicked_marker()
        if clicked is not None:
            layers.append(Marker(clicked[0], clicked[1], "placed"))
        return layers

    async def set_location(self, location: Optional[Mapping[str, Any]]) -> None:
        self._geocode_ticket += 1
        ticket = self._geocode_ticket
        self._geocoded.set(None)
        self.location.set(location)
        if location is None:
            return
        result = await self.geocoding.geocode(location)
        # a newer location may have been set while this one was resolving
        if result is not None and ticket == self._geocode_ticket:
            self._geocoded.set(result)

    def _select(self, lat: float, lng: float) -> Any:
        self._clicked_marker.set((lat, lng))
        if self.on_coordinates_selected is not None:
            return self.on_coordinates_selected(lat, lng)
        return None

    async def on_map_click(self, lat: float, lng: float) -> None:
        if not self.interactive:
            return
        result = self._select(lat, lng)
        if inspect.isawaitable(result):
            await result

    async def locate_me(self, geolocator: Optional[Geolocator]) -> None:
        if geolocator is None:
            self.toasts.error("Geolocation is not supported by your browser.")
            return
        try:
            lat, lng = await geolocator()
        except GeolocationError as exc:
            logger.info("geolocation_denied", error=str(exc))
            self.toasts.error("Location permission denied.")
            return
        result = self._select(lat, lng)
        if inspect.isawaitable(result):
            await result

    def destroy(self) -> None:
        self.view_options.dispose()
        self.layers.dispose()
