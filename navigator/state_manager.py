"""
Session state manager.

PURPOSE:
- Keeps a small per-session record: free-form state, a trace of recommendation runs,
  and a TTL for automatic cleanup.
- The backing key-value store is injected. `MemoryStore` serves tests and local runs,
  `DynamoStore` the deployed service; SESSION_STORE picks the default.

CONTEXT:
- Used by Navigator when a request carries a session_id. Nothing in the recommendation
  engine reads from here.

CREDITS:
- Original work – no external code reuse.
"""

from __future__ import annotations
from typing import Any, Dict, Optional, List
from datetime import datetime, timedelta, timezone
import copy
import os

from navigator.tools import dynamodb_tool as ddb


# Default number of days to retain session records before expiry.
DEFAULT_TTL_DAYS = int(os.getenv("SESSION_TTL_DAYS", "14"))


def _ttl_epoch(days: int = DEFAULT_TTL_DAYS) -> int:
    """Unix timestamp `days` from now, used as the record's expiry time."""
    return int((datetime.now(timezone.utc) + timedelta(days=days)).timestamp())


class SessionStore:
    """Key-value interface: one record per session_id."""

    def get(self, session_id: str) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    def put(self, item: Dict[str, Any]) -> Dict[str, Any]:
        raise NotImplementedError

    def update(self, session_id: str, field: str, value: Any) -> Dict[str, Any]:
        raise NotImplementedError


class MemoryStore(SessionStore):
    """Process-local store. Returns copies so callers never share mutable records."""

    def __init__(self):
        self._items: Dict[str, Dict[str, Any]] = {}

    def get(self, session_id):
        item = self._items.get(session_id)
        return copy.deepcopy(item) if item is not None else None

    def put(self, item):
        self._items[item["session_id"]] = copy.deepcopy(item)
        return {"ok": True}

    def update(self, session_id, field, value):
        self._items.setdefault(session_id, {"session_id": session_id})[field] = copy.deepcopy(value)
        return {"ok": True}


class DynamoStore(SessionStore):
    """DynamoDB-backed store (table from DDB_SESSION_TABLE)."""

    def get(self, session_id):
        return ddb.get_item(session_id)

    def put(self, item):
        return ddb.put_item(item)

    def update(self, session_id, field, value):
        return ddb.update_json(session_id, field, value)


_default_store: Optional[SessionStore] = None


def default_store() -> SessionStore:
    """Store chosen by SESSION_STORE ("memory" or "dynamodb"), created once per process."""
    global _default_store
    if _default_store is None:
        kind = os.getenv("SESSION_STORE", "memory").strip().lower()
        _default_store = DynamoStore() if kind == "dynamodb" else MemoryStore()
    return _default_store


def init_session(session_id: str, meta: Optional[Dict[str, Any]] = None, store: Optional[SessionStore] = None) -> Dict[str, Any]:
    """
    Create a fresh session record.

    parameters:
    - session_id: str – unique ID for the session.
    - meta: dict (optional) – initial state, e.g. {"created_by": "Navigator"}.
    - store: SessionStore (optional) – defaults to `default_store()`.
    """
    item = {
        "session_id": session_id,
        "state": meta or {},
        "trace": [],
        "ttl_epoch": _ttl_epoch(),
    }
    return (store or default_store()).put(item)


def get_session(session_id: str, store: Optional[SessionStore] = None) -> Optional[Dict[str, Any]]:
    """Session record, or None if unknown."""
    return (store or default_store()).get(session_id)


def save_state(session_id: str, state: Dict[str, Any], store: Optional[SessionStore] = None) -> Dict[str, Any]:
    """Overwrite the session's 'state' field."""
    return (store or default_store()).update(session_id, "state", state)


def append_trace(session_id: str, record: Dict[str, Any], store: Optional[SessionStore] = None) -> Dict[str, Any]:
    """
    Append an event to the session's 'trace' list.

    notes:
    - Read, append, write back. Concurrent writers to one session can lose an entry;
      traces are diagnostic only.
    """
    store = store or default_store()
    sess = store.get(session_id) or {
        "session_id": session_id,
        "state": {},
        "trace": [],
        "ttl_epoch": _ttl_epoch(),
    }
    trace: List[Dict[str, Any]] = list(sess.get("trace", []))
    trace.append(record)
    return store.update(session_id, "trace", trace)
