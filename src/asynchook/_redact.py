"""Helpers for safe debug logging of parameter snapshots.

Fetcher arguments regularly carry credentials (API tokens, passwords) and
large payloads.  Snapshots pass through :func:`redact_for_log` before they
are emitted in DEBUG logs.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

_SENSITIVE_VALUE_KEYS: frozenset[str] = frozenset(
    {
        "password",
        "passwd",
        "secret",
        "token",
        "accesstoken",
        "refreshtoken",
        "apikey",
        "api_key",
        "authorization",
        "cookie",
        "session",
    }
)


def redact_for_log(value: Any, *, max_string: int = 120, _depth: int = 0) -> Any:
    """Return a redacted, size-bounded copy of *value* suitable for debug logs."""
    if _depth > 8:
        return "<max-depth>"

    if value is None or isinstance(value, (bool, int, float)):
        return value

    if isinstance(value, str):
        if len(value) > max_string:
            return f"{value[:max_string]}…<truncated>"
        return value

    if isinstance(value, (bytes, bytearray)):
        return f"<bytes:{len(value)}b>"

    if isinstance(value, Mapping):
        redacted: dict[str, Any] = {}
        for k, v in value.items():
            key = str(k)
            if key.lower().replace("-", "") in _SENSITIVE_VALUE_KEYS:
                redacted[key] = "<redacted>"
            else:
                redacted[key] = redact_for_log(v, max_string=max_string, _depth=_depth + 1)
        return redacted

    if isinstance(value, Sequence):
        return [redact_for_log(v, max_string=max_string, _depth=_depth + 1) for v in value]

    # Unknown objects are shown by type only; their repr may be large or leak data.
    return f"<{type(value).__name__}>"
