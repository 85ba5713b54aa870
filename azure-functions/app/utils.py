"""Utility helpers (time, query parameters)."""

from __future__ import annotations

from cloutscore.models import isoformat_utc, utc_now


def now_iso() -> str:
    return isoformat_utc(utc_now())


def clamp_int(value: str | None, *, default: int, min_value: int, max_value: int) -> int:
    if value is None or value == "":
        return default
    try:
        parsed = int(value)
    except ValueError:
        return default
    return max(min_value, min(max_value, parsed))
