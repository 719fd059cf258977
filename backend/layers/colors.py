from __future__ import annotations

DEFAULT_COLOR = "#cccccc"

LAYER_COLORS: dict[str, str] = {
    "Riego": "#0000FF",
    "REPANA": "#FF0000",
    "Reforestación": "#00FF00",
    "Frutal": "#FF69B4",
    "Canapas": "#FFA500",
    "Apis": "#FFFF00",
    "Gallinero": "#D3D3D3",
    "Huertos": "#9370DB",
}


def color_for(name: str, overrides: dict[str, str] | None = None) -> str:
    """
    Fixed swatch for a layer name; unknown names get the neutral gray.

    `overrides` lets a viewer config pin colors for names outside the table.
    """
    if overrides and name in overrides:
        return overrides[name]
    return LAYER_COLORS.get(name, DEFAULT_COLOR)
