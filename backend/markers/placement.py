from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

logger = logging.getLogger(__name__)

DEFAULT_MARKER_TITLE = "Marcador"
MANUAL_MARKER_COLOR = "#22c55e"


class MarkerMode(str, Enum):
    idle = "idle"
    armed = "armed"


@dataclass(frozen=True)
class ManualMarker:
    id: str
    lon: float
    lat: float
    title: str = DEFAULT_MARKER_TITLE


@dataclass
class MarkerPlacement:
    """
    Two-state toggle: `arm()` then one map click drops exactly one marker.
    """

    mode: MarkerMode = MarkerMode.idle
    markers: list[ManualMarker] = field(default_factory=list)
    _seq: int = field(default=0, repr=False)

    @property
    def armed(self) -> bool:
        return self.mode is MarkerMode.armed

    def arm(self) -> None:
        self.mode = MarkerMode.armed

    def handle_click(
        self, lon: float, lat: float, *, title: str = DEFAULT_MARKER_TITLE
    ) -> ManualMarker | None:
        if self.mode is not MarkerMode.armed:
            return None
        self._seq += 1
        marker = ManualMarker(id=f"marker-{self._seq}", lon=float(lon), lat=float(lat), title=title)
        self.markers.append(marker)
        self.mode = MarkerMode.idle
        logger.info("Manual marker placed at %.5f, %.5f", lat, lon)
        return marker

    def clear(self) -> None:
        self.markers.clear()
        self.mode = MarkerMode.idle
