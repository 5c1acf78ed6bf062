"""
Value type inference for documented example values.

The rules form an ordered table evaluated top to bottom; the first rule
that matches wins. Order matters: "0" is an integer (not a boolean or a
number) and "192.168.1.1" is an IP address before anything else gets a
chance at it.
"""

from __future__ import annotations

import re
from typing import Callable

# ─── Rules ───────────────────────────────────────────────────────────
# re.ASCII keeps \d to 0-9 only.

_INTEGER = re.compile(r"-?\d+", re.ASCII)
_NUMBER = re.compile(r"-?\d+\.\d+", re.ASCII)
_URL = re.compile(r"https?://")
_EMAIL = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
_IP_ADDRESS = re.compile(r"\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3}", re.ASCII)

TYPE_RULES: tuple[tuple[Callable[[str], bool], str], ...] = (
    (lambda v: v == "", "empty"),
    (lambda v: v in ("true", "false"), "boolean"),
    (lambda v: _INTEGER.fullmatch(v) is not None, "integer"),
    (lambda v: _NUMBER.fullmatch(v) is not None, "number"),
    (lambda v: _URL.match(v) is not None, "url"),
    (lambda v: _EMAIL.fullmatch(v) is not None, "email"),
    (lambda v: _IP_ADDRESS.fullmatch(v) is not None, "ip address"),
    (lambda v: ":" in v and "//" in v, "connection string"),
)

DEFAULT_TYPE = "string"


def infer_type(value: str) -> str:
    """Return the type tag of the first rule matching ``value``."""
    for predicate, tag in TYPE_RULES:
        if predicate(value):
            return tag
    return DEFAULT_TYPE
