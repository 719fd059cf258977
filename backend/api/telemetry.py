from __future__ import annotations

import logging
from typing import Any

import duckdb

from telemetry.singleton import get_store
from viewer.session import ViewerSession

logger = logging.getLogger(__name__)


def record_action(
    session: ViewerSession,
    action: str,
    *,
    layer: str | None = None,
    stats: dict[str, Any] | None = None,
) -> None:
    """
    Log one viewer action when telemetry is enabled; failures never reach the caller.
    """
    try:
        store = get_store()
    except (duckdb.Error, OSError):
        logger.warning("Telemetry store unavailable", exc_info=True)
        return
    if store is None:
        return

    state = session.registry.filter
    rendered = sum(e.rendered_count for e in session.registry.list_layers() if e.visible)
    store.record(
        action=action,
        layer=layer,
        filter_field=state.field,
        filter_query=state.query,
        stats={"renderedPoints": rendered, **(stats or {})},
    )
