from __future__ import annotations

import os
from pathlib import Path


def _repo_root() -> Path:
    return Path(__file__).resolve().parents[2]


def telemetry_path() -> Path:
    return Path(
        os.getenv("GEOVISOR_TELEMETRY_PATH")
        or (_repo_root() / "data" / "telemetry" / "geovisor.duckdb")
    )


def telemetry_enabled() -> bool:
    # Opt-in: the viewer keeps no state on disk unless asked to.
    v = (os.getenv("GEOVISOR_TELEMETRY") or "0").strip().lower()
    return v in {"1", "true", "yes", "on"}
