from __future__ import annotations

import json
import logging
import queue
import threading
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import duckdb

from telemetry.sql import (
    CREATE_EVENTS_TABLE_SQL,
    INSERT_EVENTS_SQL,
    SUMMARY_SQL_TEMPLATE,
    TOP_QUERIES_SQL_TEMPLATE,
)

logger = logging.getLogger(__name__)


def _safe_float(v) -> float | None:
    try:
        if v is None:
            return None
        return float(v)
    except (TypeError, ValueError):
        return None


@dataclass
class TelemetryStore:
    """
    Append-only log of viewer actions (filters, toggles, measurements...).

    Writes are queued and flushed in batches by a single background thread, so
    recording never blocks a request.
    """

    path: Path
    conn: duckdb.DuckDBPyConnection
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)
    _q: "queue.Queue[dict[str, Any]]" = field(default_factory=queue.Queue, repr=False)
    _stop: threading.Event = field(default_factory=threading.Event, repr=False)
    _worker: threading.Thread | None = field(default=None, repr=False)

    def ensure_schema(self) -> None:
        with self._lock:
            self.conn.execute(CREATE_EVENTS_TABLE_SQL)

    def start(self) -> None:
        if self._worker is not None:
            return
        self._stop.clear()
        self._worker = threading.Thread(
            target=self._run, name="telemetry-writer", daemon=True
        )
        self._worker.start()

    def stop(self, *, timeout_s: float = 2.0) -> None:
        self._stop.set()
        w = self._worker
        if w is not None and w.is_alive():
            w.join(timeout=timeout_s)
        self._worker = None

    def record(
        self,
        *,
        action: str,
        layer: str | None = None,
        filter_field: str | None = None,
        filter_query: str | None = None,
        stats: dict[str, Any] | None = None,
    ) -> None:
        # Non-blocking: enqueue and return.
        self.start()
        try:
            self._q.put_nowait(
                {
                    "ts_ms": int(time.time() * 1000),
                    "action": str(action),
                    "layer": layer,
                    "filter_field": filter_field,
                    "filter_query": filter_query,
                    "stats_json": json.dumps(stats or {}, ensure_ascii=False),
                }
            )
        except queue.Full:
            logger.debug("Telemetry queue full; dropping %s event", action)

    def flush(self, *, timeout_s: float = 2.0) -> None:
        """
        Wait until queued events are written (used by tests).
        """
        if self._worker is None:
            return
        deadline = time.time() + timeout_s
        while time.time() < deadline:
            if self._q.unfinished_tasks == 0:
                break
            time.sleep(0.01)
        # Give the writer thread time to flush on its time-based trigger.
        time.sleep(0.55)

    def query(self, sql: str, params: list[Any] | None = None) -> list[tuple]:
        with self._lock:
            if params:
                return self.conn.execute(sql, params).fetchall()
            return self.conn.execute(sql).fetchall()

    def summary(self, *, since_ms: int | None = None) -> list[dict[str, Any]]:
        params: list[Any] = []
        where_sql = ""
        if since_ms is not None:
            where_sql = "WHERE ts_ms >= ?"
            params.append(int(since_ms))

        rows = self.query(SUMMARY_SQL_TEMPLATE.format(where_sql=where_sql), params)
        return [
            {
                "action": action,
                "n": int(n),
                "layers": int(layers),
                "lastTsMs": int(last_ts) if last_ts is not None else None,
                "avgRenderedPoints": _safe_float(avg_pts),
            }
            for action, n, layers, last_ts, avg_pts in rows
        ]

    def top_queries(self, *, limit: int = 10) -> list[dict[str, Any]]:
        rows = self.query(TOP_QUERIES_SQL_TEMPLATE, [int(max(1, min(200, limit)))])
        return [{"field": f, "query": q, "n": int(n)} for f, q, n in rows]

    def reset(self) -> None:
        # Stop the writer first so it can't write to a closed connection.
        self.stop(timeout_s=2.0)
        with self._lock:
            self.conn.close()
            self.path.unlink(missing_ok=True)

    def _run(self) -> None:
        self.ensure_schema()
        batch: list[dict[str, Any]] = []
        last_flush = time.time()

        def flush_batch() -> None:
            nonlocal batch
            if not batch:
                return
            try:
                with self._lock:
                    self.conn.executemany(
                        INSERT_EVENTS_SQL,
                        [
                            (
                                e["ts_ms"],
                                e["action"],
                                e["layer"],
                                e["filter_field"],
                                e["filter_query"],
                                e["stats_json"],
                            )
                            for e in batch
                        ],
                    )
                    self.conn.execute("CHECKPOINT;")
            except duckdb.Error:
                logger.warning("Dropping %d telemetry events", len(batch), exc_info=True)
            batch = []

        while not self._stop.is_set():
            try:
                e = self._q.get(timeout=0.1)
            except queue.Empty:
                e = None

            if e is not None:
                batch.append(e)
                self._q.task_done()

            # Flush on size or time.
            now = time.time()
            if len(batch) >= 250 or (batch and (now - last_flush) >= 0.5):
                flush_batch()
                last_flush = now

        # Drain remaining
        while True:
            try:
                e = self._q.get_nowait()
            except queue.Empty:
                break
            batch.append(e)
            self._q.task_done()
        flush_batch()
