"""HTTP helpers for Azure Functions (CORS + safe responses)."""

from __future__ import annotations

import json
from typing import Any, Callable

import azure.functions as func

from cloutscore.errors import (
    CloutScoreError,
    DuplicateVoteError,
    InvalidVoteError,
    NotEnoughProfilesError,
    ProfileNotFoundError,
    StoreError,
)

from .config import DEBUG, logger


def cors_headers() -> dict[str, str]:
    return {
        "Access-Control-Allow-Origin": "*",
        "Access-Control-Allow-Methods": "GET,POST,OPTIONS",
        "Access-Control-Allow-Headers": "Content-Type, Authorization",
        "Access-Control-Max-Age": "86400",
        "Vary": "Origin",
    }


def json_response(payload: dict[str, Any], status: int = 200) -> func.HttpResponse:
    headers = {
        "Content-Type": "application/json",
        **cors_headers(),
    }
    return func.HttpResponse(json.dumps(payload, default=str), status_code=status, headers=headers)


def cors_preflight() -> func.HttpResponse:
    return func.HttpResponse("", status_code=204, headers=cors_headers())


def error_status(exc: CloutScoreError) -> int:
    if isinstance(exc, ProfileNotFoundError):
        return 404
    if isinstance(exc, DuplicateVoteError):
        return 429
    if isinstance(exc, (InvalidVoteError, NotEnoughProfilesError)):
        return 422
    if isinstance(exc, StoreError):
        return 503
    return 500


def safe(handler: Callable[[], func.HttpResponse]) -> func.HttpResponse:
    try:
        return handler()
    except CloutScoreError as exc:
        status = error_status(exc)
        if status >= 500:
            logger.error("Request failed: %s", exc.message)
        return json_response({"error": exc.message, "type": type(exc).__name__}, status=status)
    except Exception as exc:
        logger.exception("Unhandled request error: %s", exc)
        message = "Internal server error"
        if DEBUG:
            message = f"{message}: {exc}"
        return json_response({"error": message}, status=500)
