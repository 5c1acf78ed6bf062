"""Masking of values whose key name looks sensitive."""

from __future__ import annotations

SENSITIVE_TERMS: tuple[str, ...] = (
    "password", "secret", "key", "token", "auth", "credential", "private",
)

_MAX_MASK_LENGTH = 20


def is_sensitive(key: str) -> bool:
    lowered = key.lower()
    return any(term in lowered for term in SENSITIVE_TERMS)


def mask_sensitive(key: str, value: str) -> str:
    """Hide most of ``value`` when ``key`` names a credential.

    Short values are fully hidden; longer ones keep two characters at each
    end so two masked values can still be told apart.
    """
    if not is_sensitive(key):
        return value
    if len(value) <= 4:
        return "****"
    stars = "*" * min(len(value) - 4, _MAX_MASK_LENGTH)
    return f"{value[:2]}{stars}{value[-2:]}"
