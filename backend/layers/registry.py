from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterator

from geo.aoi import BBox
from geo.bounds import bounds_of_points
from layers.colors import color_for
from layers.download import ShapefileLink, shapefile_link
from layers.errors import UnknownLayerError
from layers.filters import (
    DEFAULT_FILTER_FIELD,
    FILTER_FIELDS,
    FilterState,
    apply_filter,
    normalize_filter_field,
)
from layers.types import FeatureCollection, LayerEntry, PointFeature

logger = logging.getLogger(__name__)


@dataclass
class LayerRegistry:
    """
    Named overlays plus the single filter shared by all of them.

    Sources are never mutated: every filter change derives a fresh view per
    layer from the original records.
    """

    filter_fields: tuple[str, ...] = FILTER_FIELDS
    color_overrides: dict[str, str] = field(default_factory=dict)
    _entries: dict[str, LayerEntry] = field(default_factory=dict, repr=False)
    _filter: FilterState = field(default_factory=FilterState, repr=False)

    def __post_init__(self) -> None:
        field_name = (
            DEFAULT_FILTER_FIELD
            if DEFAULT_FILTER_FIELD in self.filter_fields
            else self.filter_fields[0]
        )
        self._filter = FilterState(field=field_name, query="")

    @property
    def filter(self) -> FilterState:
        return self._filter

    def register_layer(
        self, name: str, source: FeatureCollection | None
    ) -> LayerEntry | None:
        if source is None or len(source) == 0:
            logger.debug("Layer %s has no dataset; omitted", name)
            return None

        entry = LayerEntry(
            name=name,
            source=source,
            color=color_for(name, self.color_overrides),
            view=apply_filter(source, self._filter),
        )
        # Re-registering keeps the original position in the layer list.
        self._entries[name] = entry
        logger.info("Registered layer %s (%d features)", name, len(source))
        return entry

    def get(self, name: str) -> LayerEntry:
        entry = self._entries.get(name)
        if entry is None:
            raise UnknownLayerError(name)
        return entry

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def set_visibility(self, name: str, visible: bool) -> LayerEntry:
        entry = self.get(name)
        entry.visible = bool(visible)
        return entry

    def set_filter(self, field_name: str, query: str | None) -> FilterState:
        state = FilterState(
            field=normalize_filter_field(field_name, self.filter_fields),
            query=(query or "").strip(),
        )
        # All views are built before any is swapped in.
        views = {
            name: apply_filter(entry.source, state)
            for name, entry in self._entries.items()
        }
        for name, view in views.items():
            self._entries[name].view = view
        self._filter = state
        logger.info(
            "Filter %s=%r applied: %d records rendered",
            state.field,
            state.query,
            sum(len(v) for v in views.values()),
        )
        return state

    def clear_filter(self) -> FilterState:
        return self.set_filter(self._filter.field, "")

    def list_layers(self) -> Iterator[LayerEntry]:
        # Snapshot; callers may re-register while iterating.
        yield from list(self._entries.values())

    def legend(self) -> list[tuple[str, str]]:
        return [(e.name, e.color) for e in self._entries.values()]

    def download_link(self, name: str) -> ShapefileLink:
        return shapefile_link(self.get(name).name)

    def fit_bounds_for(
        self, name: str | None = None, *, filtered: bool = True
    ) -> BBox | None:
        """
        Envelope of one layer (or all layers when `name` is None).

        Unknown names, empty sets and sets without coordinates give None.
        """
        if name is None:
            entries = list(self._entries.values())
        else:
            entry = self._entries.get(name)
            if entry is None:
                return None
            entries = [entry]

        points: list[PointFeature] = []
        for entry in entries:
            points.extend(entry.view if filtered else entry.source.features)
        return bounds_of_points(points)
