from .placement import (
    DEFAULT_MARKER_TITLE,
    MANUAL_MARKER_COLOR,
    ManualMarker,
    MarkerMode,
    MarkerPlacement,
)

__all__ = [
    "DEFAULT_MARKER_TITLE",
    "MANUAL_MARKER_COLOR",
    "ManualMarker",
    "MarkerMode",
    "MarkerPlacement",
]
