from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

SHAPEFILE_URL_PREFIX = "shp"


@dataclass(frozen=True)
class ShapefileLink:
    href: str  # e.g. "shp/riego.zip"
    filename: str  # e.g. "Riego.zip"


def shapefile_link(name: str) -> ShapefileLink:
    # Naming convention only: nothing is generated, files are hosted as-is.
    return ShapefileLink(
        href=f"{SHAPEFILE_URL_PREFIX}/{name.lower()}.zip",
        filename=f"{name}.zip",
    )


def shapefile_path(shp_dir: Path, name: str) -> Path:
    return shp_dir / f"{name.lower()}.zip"
