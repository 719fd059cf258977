from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator


@dataclass(frozen=True)
class PointFeature:
    id: str
    # None when the source feature carried no usable point geometry.
    lon: float | None
    lat: float | None
    props: dict[str, Any]

    @property
    def has_coords(self) -> bool:
        return self.lon is not None and self.lat is not None


@dataclass(frozen=True)
class FeatureCollection:
    """
    An immutable set of point records loaded from one dataset file.

    Filtering never touches this object; it only derives views from it.
    """

    features: tuple[PointFeature, ...] = ()

    def __len__(self) -> int:
        return len(self.features)

    def __iter__(self) -> Iterator[PointFeature]:
        return iter(self.features)

    def get(self, feature_id: str) -> PointFeature | None:
        fid = (feature_id or "").strip()
        for f in self.features:
            if f.id == fid:
                return f
        return None


@dataclass
class LayerEntry:
    """
    A named overlay: its source records, fixed color, visibility and the
    currently rendered (filtered) view.
    """

    name: str
    source: FeatureCollection
    color: str
    visible: bool = True
    view: tuple[PointFeature, ...] = field(default=(), repr=False)

    @property
    def rendered_count(self) -> int:
        return len(self.view)
