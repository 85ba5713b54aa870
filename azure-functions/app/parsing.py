"""Request parsing helpers for API payloads."""

from __future__ import annotations

from typing import Any

import azure.functions as func


def parse_json(req: func.HttpRequest) -> dict[str, Any] | None:
    try:
        data = req.get_json()
    except ValueError:
        return None
    return data if isinstance(data, dict) else None


def require_str(data: dict[str, Any], field: str) -> str:
    value = str(data.get(field) or "").strip()
    if not value:
        raise ValueError(f"Missing required field: {field}")
    return value


def normalize_vote_payload(data: dict[str, Any]) -> dict[str, str]:
    winner_id = require_str(data, "winner_id")
    loser_id = require_str(data, "loser_id")
    if winner_id == loser_id:
        raise ValueError("winner_id and loser_id must differ")
    return {
        "winner_id": winner_id,
        "loser_id": loser_id,
        "voter_id": require_str(data, "voter_id"),
    }


def normalize_profile_payload(data: dict[str, Any]) -> dict[str, Any]:
    return {
        "profile_id": require_str(data, "id"),
        "first_name": require_str(data, "first_name"),
        "last_name": str(data.get("last_name") or "").strip(),
        "image_url": str(data.get("image_url") or "").strip(),
        "is_auth_user": bool(data.get("is_auth_user", True)),
    }
