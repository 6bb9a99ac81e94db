"""Structured Logging — entity-aware log records in JSON or key=value text.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Entity fields (entity, entity_id, operation, relation, error_code, path)
      are surfaced in both formats when present, always in that order
    - setup_logging owns exactly one root handler; calling it again replaces it

Design Decisions:
    - operation_context() builds the `extra` dict so every service logs the same
      field names; None values are dropped rather than logged as null
    - setup_logging called once on startup via lifespan; re-entry (tests, reload)
      must not duplicate output
"""

import logging
import json
from datetime import datetime, timezone

ENTITY_FIELDS = (
    "entity", "entity_id", "operation", "relation", "error_code", "path",
)


def operation_context(
    entity: str,
    entity_id: int | None = None,
    operation: str | None = None,
    relation: str | None = None,
) -> dict:
    """`extra` mapping for a log call about one entity."""
    fields = {
        "entity": entity, "entity_id": entity_id,
        "operation": operation, "relation": relation,
    }
    return {key: val for key, val in fields.items() if val is not None}


def entity_fields(record: logging.LogRecord) -> dict:
    """Entity fields attached to a record, in ENTITY_FIELDS order."""
    fields = {}
    for key in ENTITY_FIELDS:
        val = record.__dict__.get(key)
        if val is not None:
            fields[key] = val
    return fields


class JSONFormatter(logging.Formatter):
    """One JSON object per record, for log shipping."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **entity_fields(record),
        }
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


class KeyValueFormatter(logging.Formatter):
    """Human-readable line with entity fields appended as key=value pairs."""

    def __init__(self):
        super().__init__("%(asctime)s %(levelname)s %(name)s: %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = entity_fields(record)
        if not fields:
            return line
        pairs = " ".join(f"{key}={val}" for key, val in fields.items())
        head, sep, tail = line.partition("\n")
        return f"{head} [{pairs}]{sep}{tail}"


class _RelationsHandler(logging.StreamHandler):
    """Marker type so setup_logging can find the handler it installed."""


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Install (or replace) the application's root log handler."""
    for existing in list(logging.root.handlers):
        if isinstance(existing, _RelationsHandler):
            logging.root.removeHandler(existing)
    handler = _RelationsHandler()
    handler.setFormatter(JSONFormatter() if fmt == "json" else KeyValueFormatter())
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
    return handler
