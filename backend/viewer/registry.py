from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Iterable

import yaml

from viewer.types import ViewerConfig

DEFAULT_VIEWER_ID = "geovisor"


def _repo_root() -> Path:
    # .../backend/viewer/registry.py -> repo root is 2 levels up
    return Path(__file__).resolve().parents[2]


def _viewers_root() -> Path:
    return _repo_root() / "viewers"


@dataclass(frozen=True)
class ViewerEntry:
    config: ViewerConfig
    # Absolute path to viewer.yaml on disk (useful for debugging).
    path: Path


def _iter_viewer_yaml_files() -> Iterable[Path]:
    root = _viewers_root()
    if not root.exists():
        return []
    # Convention: viewers/*/viewer.yaml
    return root.glob("*/viewer.yaml")


def _load_yaml(path: Path) -> dict:
    raw = path.read_text(encoding="utf-8")
    data = yaml.safe_load(raw) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid viewer yaml root: {path}")
    return data


def load_viewer_config(path: Path) -> ViewerConfig:
    cfg = ViewerConfig.model_validate(_load_yaml(path))
    if not cfg.layers:
        raise ValueError(f"Viewer is missing `layers`: {path}")
    return cfg


@lru_cache(maxsize=1)
def get_registry() -> dict[str, ViewerEntry]:
    out: dict[str, ViewerEntry] = {}
    for p in sorted(_iter_viewer_yaml_files(), key=lambda x: str(x)):
        cfg = load_viewer_config(p)
        out[cfg.id] = ViewerEntry(config=cfg, path=p)
    return out


def default_viewer_id() -> str:
    return (os.getenv("GEOVISOR_VIEWER") or "").strip() or DEFAULT_VIEWER_ID


def list_viewer_ids() -> list[str]:
    return list(get_registry().keys())


def get_viewer(viewer_id: str | None = None) -> ViewerEntry:
    reg = get_registry()
    if not reg:
        raise RuntimeError("No viewers discovered under `viewers/*/viewer.yaml`")
    vid = (viewer_id or "").strip() or default_viewer_id()
    if vid not in reg:
        raise KeyError(f"Unknown viewer: {vid}")
    return reg[vid]


def resolve_repo_path(repo_relative: str) -> Path:
    # Allow both "data/..." and "/data/..." inputs (normalize to repo-relative).
    rel = (repo_relative or "").lstrip("/")
    return _repo_root() / rel


def clear_registry_cache() -> None:
    """
    Clear in-memory viewer registry cache.

    Useful during development: viewer YAML changes are otherwise not picked up until
    the backend process restarts.
    """
    get_registry.cache_clear()
