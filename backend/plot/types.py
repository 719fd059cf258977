from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Measurement:
    """
    A drawn path kept on the map together with its measured length.
    """

    id: str
    coords: tuple[tuple[float, float], ...]  # ((lon, lat), ...)
    km: float
