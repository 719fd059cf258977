from __future__ import annotations

import threading

import duckdb

from telemetry.config import telemetry_enabled, telemetry_path
from telemetry.store import TelemetryStore

_STORE: TelemetryStore | None = None
_STORE_LOCK = threading.RLock()


def get_store() -> TelemetryStore | None:
    global _STORE
    if not telemetry_enabled():
        return None
    with _STORE_LOCK:
        path = telemetry_path()
        if _STORE is not None:
            # Reopen when the configured path changes (e.g. across tests).
            if _STORE.path.resolve() == path.resolve():
                return _STORE
            _STORE.stop(timeout_s=2.0)
            _STORE.conn.close()
            _STORE = None

        path.parent.mkdir(parents=True, exist_ok=True)
        conn = duckdb.connect(str(path))
        _STORE = TelemetryStore(path=path, conn=conn)
        _STORE.ensure_schema()
        _STORE.start()
        return _STORE


def reset_store() -> None:
    global _STORE
    with _STORE_LOCK:
        if _STORE is not None:
            _STORE.reset()
            _STORE = None
        else:
            telemetry_path().unlink(missing_ok=True)
