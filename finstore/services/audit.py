"""Audit trail writers.

``record_audit_event`` appends a single entry. ``track_audit_events`` hooks a
session so every flush appends INSERT/UPDATE/DELETE entries for tracked
models in the same transaction as the change. The acting user is read from
``log_context`` (``actor_id``); when unbound the change is attributed to the
system.
"""
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Iterable

from sqlalchemy import event, inspect, insert
from sqlalchemy.orm import Session

from finstore.core.logger import get_logger, log_context
from finstore.domain.enums import AuditEventType
from finstore.models import (
    Account,
    AccountConnection,
    AuditEvent,
    Holding,
    InvestmentTransaction,
    Plan,
    PlanEvent,
    PlanMilestone,
    Transaction,
    User,
    Valuation,
)

LOGGER = get_logger(__name__)

DEFAULT_TRACKED_MODELS: tuple[type, ...] = (
    User,
    AccountConnection,
    Account,
    Transaction,
    InvestmentTransaction,
    Holding,
    Valuation,
    Plan,
    PlanEvent,
    PlanMilestone,
)

# Credentials never leave the provider tables.
REDACTED_FIELDS = frozenset({"plaid_access_token", "teller_access_token"})


def _json_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return format(value, "f")
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return dict(value)
    if isinstance(value, list):
        return list(value)
    return value


def _column_values(obj: object) -> dict[str, Any]:
    # Only loaded values; server defaults are expired until the next refresh.
    state = inspect(obj)
    loaded = state.dict
    return {
        attr.key: _json_value(loaded[attr.key])
        for attr in state.mapper.column_attrs
        if attr.key in loaded and attr.key not in REDACTED_FIELDS
    }


def _changed_values(obj: object) -> dict[str, Any]:
    state = inspect(obj)
    changes: dict[str, Any] = {}
    for attr in state.mapper.column_attrs:
        if attr.key in REDACTED_FIELDS:
            continue
        history = state.attrs[attr.key].history
        if history.has_changes():
            old = history.deleted[0] if history.deleted else None
            new = history.added[0] if history.added else None
            changes[attr.key] = {"old": _json_value(old), "new": _json_value(new)}
    return changes


def _actor_id() -> int | None:
    actor = log_context.get("actor_id")
    return int(actor) if actor is not None else None


def record_audit_event(
    session: Session,
    event_type: AuditEventType,
    model: str,
    model_id: int,
    payload: dict[str, Any] | None = None,
    *,
    user_id: int | None = None,
) -> AuditEvent:
    """Append one audit entry to the session."""

    entry = AuditEvent(
        type=event_type,
        model=model,
        model_id=model_id,
        payload=payload or {},
        user_id=user_id,
    )
    session.add(entry)
    LOGGER.debug("Audit %s %s#%s", event_type.value, model, model_id)
    return entry


def _collect(session: Session, tracked: tuple[type, ...]) -> list[dict[str, Any]]:
    actor = _actor_id()
    rows: list[dict[str, Any]] = []

    def _add(event_type: AuditEventType, objects: Iterable[object], payload_fn) -> None:
        for obj in objects:
            if not isinstance(obj, tracked):
                continue
            payload = payload_fn(obj)
            if event_type is AuditEventType.UPDATE and not payload:
                continue
            rows.append(
                {
                    "type": event_type,
                    "model": type(obj).__name__,
                    "model_id": inspect(obj).mapper.primary_key_from_instance(obj)[0],
                    "payload": payload,
                    "user_id": actor,
                }
            )

    _add(AuditEventType.INSERT, session.new, _column_values)
    _add(AuditEventType.UPDATE, session.dirty, _changed_values)
    _add(AuditEventType.DELETE, session.deleted, _column_values)
    return rows


def track_audit_events(
    session: Session, models: Iterable[type] = DEFAULT_TRACKED_MODELS
) -> None:
    """Append audit entries for every flushed change to ``models`` in ``session``."""

    tracked = tuple(models)

    @event.listens_for(session, "after_flush")
    def _after_flush(flushed: Session, flush_context) -> None:
        rows = _collect(flushed, tracked)
        if not rows:
            return
        flushed.connection().execute(insert(AuditEvent.__table__), rows)
        LOGGER.debug("Recorded %d audit events", len(rows))
