"""
functions/sheet_append/record_flattener.py

WHAT THIS FILE IS FOR
---------------------
Turns an arbitrary JSON-like value into a *flat record*: a mapping from
dotted-path keys to scalar cell values, ready to be laid out as one
spreadsheet row.

FLATTENING RULES
----------------
- dict    -> recurse into every entry, key becomes "<prefix>.<key>"
- list    -> NOT expanded; stored whole as compact JSON text
             under the current prefix (one trailing dot stripped)
- scalar  -> stored verbatim (str, int, float, bool, None)
- None at the root -> empty record

Example:
    {"a": {"b": 1, "c": [1, 2]}}  ->  {"a.b": 1, "a.c": "[1,2]"}

Every produced key is non-empty: a bare scalar or list at the root has
no path to live under and is dropped.

WHAT THIS FILE IS NOT FOR
-------------------------
- Deciding which keys become columns (see row_appender.py)
- Any spreadsheet I/O

It is a pure transformation utility.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Optional, Union

Scalar = Union[str, int, float, bool, None]
FlatRecord = Dict[str, Scalar]


def flatten(value: Any, prefix: str = "", out: Optional[FlatRecord] = None) -> FlatRecord:
    """
    Flatten `value` into dotted-path keys.

    Args:
        value: Any JSON-compatible value.
        prefix: Dotted path of `value` inside the enclosing object.
        out: Accumulator used by the recursion; callers normally omit it.

    Returns:
        The flat record (insertion-ordered, a new dict unless `out` is given).
    """
    if out is None:
        out = {}

    if value is None and not prefix:
        return out

    if isinstance(value, dict):
        for key, child in value.items():
            child_prefix = f"{prefix}.{key}" if prefix else str(key)
            flatten(child, child_prefix, out)
        return out

    key = prefix.removesuffix(".")
    if not key:
        return out

    if isinstance(value, (list, tuple)):
        out[key] = json.dumps(list(value), separators=(",", ":"), ensure_ascii=False)
    else:
        out[key] = value
    return out
