"""Terminal stand-in for the interactive map."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional

from loguru import logger

from mapty_cli.core.constants import MAP_VIEW_URL
from mapty_cli.core.errors import MapUnavailableError
from mapty_cli.core.models import Location

PickHandler = Callable[[Location], None]


@dataclass(frozen=True)
class Marker:
    location: Location
    popup_text: str
    style_class: str


class TerminalMap:
    """Map view state: center, zoom, markers and the location-pick handler."""

    def __init__(self) -> None:
        self.center: Optional[Location] = None
        self.zoom_level: Optional[int] = None
        self.markers: List[Marker] = []
        self._pick_handler: Optional[PickHandler] = None

    @property
    def ready(self) -> bool:
        return self.center is not None

    def _require_ready(self) -> None:
        if not self.ready:
            raise MapUnavailableError("Map is not initialized")

    def initialize(self, center: Location, zoom_level: int) -> None:
        self.center = center
        self.zoom_level = zoom_level
        logger.debug("Map initialized at {} (zoom {})", center, zoom_level)

    def on_location_pick(self, handler: PickHandler) -> None:
        self._require_ready()
        self._pick_handler = handler

    def pick(self, location: Location) -> None:
        """Simulate a click on the map at ``location``."""
        self._require_ready()
        if self._pick_handler is not None:
            self._pick_handler(location)

    def add_marker(self, location: Location, popup_text: str, style_class: str) -> Marker:
        self._require_ready()
        marker = Marker(location=location, popup_text=popup_text, style_class=style_class)
        self.markers.append(marker)
        return marker

    def pan_to(self, location: Location, zoom_level: int, animate: bool = True) -> None:
        self._require_ready()
        self.center = location
        self.zoom_level = zoom_level
        logger.debug("Map moved to {} (zoom {}, animate={})", location, zoom_level, animate)

    def view_url(self) -> str:
        if self.center is None:
            raise MapUnavailableError("Map is not initialized")
        return MAP_VIEW_URL.format(
            zoom=self.zoom_level,
            lat=self.center.latitude,
            lng=self.center.longitude,
        )
