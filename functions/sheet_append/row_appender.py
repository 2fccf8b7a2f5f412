"""
functions/sheet_append/row_appender.py

WHAT THIS FILE IS FOR
---------------------
Appends one flat record as a new spreadsheet row, growing the header row
(row 1) when the record carries keys the sheet has never seen.

APPEND PROTOCOL
---------------
1) Read the header row fresh (no caching across calls).
   Empty sheet -> header starts as ["Timestamp"] and is written out.
2) incoming = record keys, minus the routing key "_sheet".
3) missing  = incoming keys not in the header, in record order.
4) If anything is missing, overwrite row 1 with header + missing.
   Existing columns never move; new ones are appended on the right.
5) Build a row aligned to the header:
   - column 0 named "Timestamp" -> current UTC time, ISO-8601
   - otherwise the record value, or "" when absent / None
   - booleans stay native so the sheet renders TRUE/FALSE cells
6) Append the row at the end of the tab.

Steps are not transactional: if the header update succeeds and the
append fails, the header keeps its new columns without a matching row.

CONCURRENCY
-----------
Row 1 is replaced wholesale, so two writers that each add different
columns from the same stale snapshot would drop each other's columns.
Within one process the whole read/update/append sequence is serialized
per spreadsheet, so tab names chosen by callers never add lock state.
Writers in other processes are not covered; the Sheets API has no
conditional update to close that gap.
"""

from __future__ import annotations

import threading
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol, Sequence, Tuple

import structlog

from functions.sheet_append.record_flattener import FlatRecord

logger = structlog.get_logger(__name__)

TIMESTAMP_HEADER = "Timestamp"
ROUTING_KEY = "_sheet"


class SheetBackend(Protocol):
    spreadsheet_id: str

    def read_header(self, tab: str) -> List[str]: ...

    def write_header(self, tab: str, headers: Sequence[str]) -> None: ...

    def append_row(self, tab: str, row: Sequence[Any]) -> None: ...


def utc_timestamp() -> str:
    """Current UTC time as `2025-01-31T12:00:00.000Z`."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def resolve_target_tab(body: Any, default_tab: str, honor_routing_key: bool = True) -> str:
    """
    Pick the tab a request writes to.

    A non-empty string `_sheet` in the JSON body wins when routing is
    honored; anything else falls back to `default_tab`.
    """
    if not honor_routing_key or not isinstance(body, dict):
        return default_tab
    requested = body.get(ROUTING_KEY)
    if isinstance(requested, str) and requested.strip():
        return requested.strip()
    return default_tab


def reconcile_headers(headers: Sequence[str], record: Mapping[str, Any]) -> Tuple[List[str], List[str]]:
    """
    Return (new_headers, missing) for `record` against `headers`.

    An empty header row is treated as ["Timestamp"].
    """
    current = list(headers) or [TIMESTAMP_HEADER]
    known = set(current)

    missing: List[str] = []
    for key in record:
        if key == ROUTING_KEY or key in known:
            continue
        known.add(key)
        missing.append(key)

    return current + missing, missing


def build_row(headers: Sequence[str], record: Mapping[str, Any], now: Callable[[], str] = utc_timestamp) -> List[Any]:
    row: List[Any] = []
    for idx, name in enumerate(headers):
        if idx == 0 and name == TIMESTAMP_HEADER:
            row.append(now())
            continue
        value = record.get(name)
        row.append("" if value is None else value)
    return row


class SheetRowAppender:
    """
    Header-reconciling row appender over a SheetBackend.

    One lock per spreadsheet serializes appends inside this process.
    """

    def __init__(self, backend: SheetBackend, default_tab: str, now: Callable[[], str] = utc_timestamp) -> None:
        self.backend = backend
        self.default_tab = default_tab
        self._now = now
        self._locks: Dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def append(self, record: FlatRecord, tab: Optional[str] = None) -> List[Any]:
        """
        Append `record` to `tab` (default tab when omitted).

        Returns the row that was appended. Backend errors propagate.
        """
        target = tab or self.default_tab

        with self._spreadsheet_lock():
            existing = self.backend.read_header(target)
            headers, missing = reconcile_headers(existing, record)

            # An empty sheet gets its header written even with nothing missing,
            # otherwise the first data row would land in row 1.
            if missing or not existing:
                self.backend.write_header(target, headers)
                logger.info("sheet_header_extended", tab=target, added=missing, column_count=len(headers))

            row = build_row(headers, record, self._now)
            self.backend.append_row(target, row)

        return row

    def _spreadsheet_lock(self) -> threading.Lock:
        # not keyed on the tab: tab names come from the request body
        key = self.backend.spreadsheet_id
        with self._locks_guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock
