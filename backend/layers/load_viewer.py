from __future__ import annotations

import logging

from layers.loaders import load_geojson_points
from layers.registry import LayerRegistry
from viewer.registry import resolve_repo_path
from viewer.types import ViewerConfig

logger = logging.getLogger(__name__)


def load_viewer_layers(cfg: ViewerConfig) -> LayerRegistry:
    """
    Build the layer registry for a viewer from its configured GeoJSON files.

    Datasets that are missing on disk are left out of the registry.
    """
    registry = LayerRegistry(
        filter_fields=tuple(cfg.filterFields),
        color_overrides=cfg.color_overrides(),
    )
    registry.set_filter(cfg.defaultFilterField, "")

    for layer_cfg in cfg.layers:
        source = load_geojson_points(resolve_repo_path(layer_cfg.path))
        if registry.register_layer(layer_cfg.name, source) is None:
            logger.info("Viewer '%s': layer %s omitted", cfg.id, layer_cfg.name)

    return registry
