"""Unit tests for HTTP parsing and error mapping."""

import json

import azure.functions as func
import pytest

from app.http_utils import error_status, json_response, safe
from app.parsing import normalize_profile_payload, normalize_vote_payload, parse_json
from app.utils import clamp_int
from cloutscore.errors import (
    DuplicateVoteError,
    InvalidVoteError,
    NotEnoughProfilesError,
    ProfileNotFoundError,
    SealFailedError,
    StoreError,
    TickInProgressError,
)

pytestmark = pytest.mark.unit


def make_request(body: bytes) -> func.HttpRequest:
    return func.HttpRequest(method="POST", url="/api/votes", body=body, headers={})


class TestParsing:
    def test_parse_json_object(self):
        assert parse_json(make_request(b'{"winner_id": "a"}')) == {"winner_id": "a"}

    def test_parse_json_rejects_non_object(self):
        assert parse_json(make_request(b"[1, 2]")) is None

    def test_parse_json_rejects_garbage(self):
        assert parse_json(make_request(b"not json")) is None

    def test_vote_payload_strips_fields(self):
        payload = normalize_vote_payload({"winner_id": " a ", "loser_id": "b", "voter_id": "u"})
        assert payload == {"winner_id": "a", "loser_id": "b", "voter_id": "u"}

    def test_vote_payload_missing_field(self):
        with pytest.raises(ValueError, match="voter_id"):
            normalize_vote_payload({"winner_id": "a", "loser_id": "b"})

    def test_vote_payload_self_vote(self):
        with pytest.raises(ValueError):
            normalize_vote_payload({"winner_id": "a", "loser_id": "a", "voter_id": "u"})

    def test_profile_payload_maps_id(self):
        payload = normalize_profile_payload({"id": "p1", "first_name": "Ada"})
        assert payload["profile_id"] == "p1"
        assert payload["last_name"] == ""
        assert payload["is_auth_user"] is True

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [(None, 5), ("", 5), ("abc", 5), ("0", 1), ("3", 3), ("500", 10)],
    )
    def test_clamp_int(self, raw, expected):
        assert clamp_int(raw, default=5, min_value=1, max_value=10) == expected


class TestErrorMapping:
    @pytest.mark.parametrize(
        ("exc", "status"),
        [
            (ProfileNotFoundError("ghost"), 404),
            (DuplicateVoteError("again"), 429),
            (InvalidVoteError("bad"), 422),
            (NotEnoughProfilesError(needed=2, available=1), 422),
            (StoreError("down"), 503),
            (SealFailedError("partial", committed_deltas={}, vote_ids=[]), 503),
            (TickInProgressError("busy"), 500),
        ],
    )
    def test_error_status(self, exc, status):
        assert error_status(exc) == status

    def test_safe_maps_domain_error(self):
        def handler():
            raise DuplicateVoteError("already voted")

        response = safe(handler)

        assert response.status_code == 429
        body = json.loads(response.get_body())
        assert body == {"error": "already voted", "type": "DuplicateVoteError"}

    def test_safe_hides_unexpected_error(self):
        def handler():
            raise RuntimeError("secret detail")

        response = safe(handler)

        assert response.status_code == 500
        assert "secret detail" not in response.get_body().decode()

    def test_json_response_has_cors(self):
        response = json_response({"ok": True}, status=201)

        assert response.status_code == 201
        assert response.headers["Access-Control-Allow-Origin"] == "*"
