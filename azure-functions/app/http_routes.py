"""HTTP API routes for CloutScore Azure Functions."""

from __future__ import annotations

import azure.functions as func

from cloutscore.rating import prefetch_pairs
from cloutscore.voting import create_profile, fetch_rankings, get_profile, submit_vote

from .clients import get_vote_store
from .config import MAX_PAIRS_PER_REQUEST, RANKINGS_LIMIT, RECENT_VOTE_WINDOW_MINUTES
from .http_utils import cors_preflight, json_response, safe
from .parsing import normalize_profile_payload, normalize_vote_payload, parse_json
from .utils import clamp_int

bp = func.Blueprint()


@bp.route(route="{*path}", methods=["OPTIONS"])
def preflight_any(req: func.HttpRequest) -> func.HttpResponse:
    return cors_preflight()


@bp.route(route="health", methods=["GET", "OPTIONS"])
def health_check(req: func.HttpRequest) -> func.HttpResponse:
    if req.method == "OPTIONS":
        return cors_preflight()

    def handler():
        database_ok = get_vote_store().ping()
        return json_response({
            "status": "ok" if database_ok else "degraded",
            "version": "0.1.0",
            "database": "connected" if database_ok else "unavailable",
        })

    return safe(handler)


@bp.route(route="profiles", methods=["POST", "OPTIONS"])
def create_profile_endpoint(req: func.HttpRequest) -> func.HttpResponse:
    if req.method == "OPTIONS":
        return cors_preflight()

    def handler():
        data = parse_json(req)
        if data is None:
            return json_response({"error": "Invalid JSON body"}, status=400)

        try:
            payload = normalize_profile_payload(data)
        except ValueError as exc:
            return json_response({"error": str(exc)}, status=400)

        profile = create_profile(get_vote_store(), **payload)
        return json_response(profile.model_dump(mode="json"), status=201)

    return safe(handler)


@bp.route(route="profiles/{profile_id}", methods=["GET", "OPTIONS"])
def get_profile_endpoint(req: func.HttpRequest) -> func.HttpResponse:
    if req.method == "OPTIONS":
        return cors_preflight()

    def handler():
        profile = get_profile(get_vote_store(), req.route_params.get("profile_id", ""))
        return json_response(profile.model_dump(mode="json"))

    return safe(handler)


@bp.route(route="votes", methods=["POST", "OPTIONS"])
def submit_vote_endpoint(req: func.HttpRequest) -> func.HttpResponse:
    if req.method == "OPTIONS":
        return cors_preflight()

    def handler():
        data = parse_json(req)
        if data is None:
            return json_response({"error": "Invalid JSON body"}, status=400)

        try:
            payload = normalize_vote_payload(data)
        except ValueError as exc:
            return json_response({"error": str(exc)}, status=400)

        vote = submit_vote(
            get_vote_store(),
            within_minutes=RECENT_VOTE_WINDOW_MINUTES,
            **payload,
        )
        return json_response(
            {
                "vote_id": vote.id,
                "status": vote.status.value,
                "message": "Vote recorded; scores update on the next aggregation run",
            },
            status=202,
        )

    return safe(handler)


@bp.route(route="pairs", methods=["GET", "OPTIONS"])
def voting_pairs(req: func.HttpRequest) -> func.HttpResponse:
    if req.method == "OPTIONS":
        return cors_preflight()

    def handler():
        count = clamp_int(req.params.get("count"), default=1, min_value=1, max_value=MAX_PAIRS_PER_REQUEST)
        exclude_id = req.params.get("exclude") or None
        profiles = get_vote_store().list_profiles()
        pairs = prefetch_pairs(profiles, count=count, exclude_id=exclude_id)
        return json_response({"pairs": [pair.model_dump(mode="json") for pair in pairs]})

    return safe(handler)


@bp.route(route="rankings", methods=["GET", "OPTIONS"])
def rankings(req: func.HttpRequest) -> func.HttpResponse:
    if req.method == "OPTIONS":
        return cors_preflight()

    def handler():
        limit = clamp_int(req.params.get("limit"), default=RANKINGS_LIMIT, min_value=1, max_value=RANKINGS_LIMIT)
        ranked = fetch_rankings(get_vote_store(), limit=limit)
        return json_response({
            "rankings": [r.model_dump(mode="json") for r in ranked],
            "count": len(ranked),
        })

    return safe(handler)
