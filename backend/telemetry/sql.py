from __future__ import annotations

CREATE_EVENTS_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS events (
  ts_ms BIGINT,
  action TEXT,
  layer TEXT,
  filter_field TEXT,
  filter_query TEXT,
  stats_json TEXT
);
"""

SUMMARY_SQL_TEMPLATE = """
SELECT
  action,
  COUNT(*) AS n,
  COUNT(DISTINCT layer) AS layers,
  MAX(ts_ms) AS last_ts_ms,
  AVG(try_cast(json_extract(stats_json, '$.renderedPoints') AS DOUBLE)) AS avg_rendered_points
FROM events
{where_sql}
GROUP BY action
ORDER BY action
"""

TOP_QUERIES_SQL_TEMPLATE = """
SELECT
  filter_field,
  lower(filter_query) AS q,
  COUNT(*) AS n
FROM events
WHERE action = 'filter' AND coalesce(filter_query, '') <> ''
GROUP BY filter_field, q
ORDER BY n DESC, q
LIMIT ?
"""

INSERT_EVENTS_SQL = """
INSERT INTO events
  (ts_ms, action, layer, filter_field, filter_query, stats_json)
VALUES (?, ?, ?, ?, ?, ?)
"""
