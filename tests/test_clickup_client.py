from __future__ import annotations

import sys
from datetime import datetime, timezone
from pathlib import Path

import httpx
import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from timegrid.infrastructure.clickup import ClickUpClient, ClickUpError, team_member_ids


def test_fetch_time_entries_sends_range_and_members():
    captured: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["url"] = request.url
        captured["auth"] = request.headers.get("authorization")
        return httpx.Response(200, json={"data": [{"id": "e1"}, "junk"]})

    http_client = httpx.Client(transport=httpx.MockTransport(handler))
    client = ClickUpClient(api_base="https://clickup.test/api/v2", http_client=http_client)

    entries = client.fetch_time_entries(
        "pk_token",
        "team-1",
        start=datetime(2024, 3, 1, tzinfo=timezone.utc),
        end=datetime(2024, 3, 2, tzinfo=timezone.utc),
        assignees=["101", "102"],
    )

    assert entries == [{"id": "e1"}]
    url = captured["url"]
    assert url.path == "/api/v2/team/team-1/time_entries"
    assert url.params["start_date"] == "1709251200000"
    assert url.params["end_date"] == "1709337600000"
    assert url.params["assignee"] == "101,102"
    assert url.params["include_location_names"] == "true"
    assert url.params["include_task_tags"] == "true"
    assert captured["auth"] == "pk_token"


def test_fetch_teams_returns_team_payloads():
    teams_payload = {
        "teams": [
            {"id": "team-1", "name": "Agency", "members": [{"user": {"id": 101}}, {"user": {"id": 102}}, {}]},
        ]
    }
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json=teams_payload))
    client = ClickUpClient(http_client=httpx.Client(transport=transport))

    teams = client.fetch_teams("pk_token")

    assert [team["id"] for team in teams] == ["team-1"]
    assert team_member_ids(teams[0]) == ["101", "102"]


def test_error_response_raises():
    transport = httpx.MockTransport(lambda request: httpx.Response(401, json={"err": "Token invalid", "ECODE": "OAUTH_025"}))
    client = ClickUpClient(http_client=httpx.Client(transport=transport))

    with pytest.raises(ClickUpError, match="Token invalid"):
        client.fetch_teams("bad")


def test_api_base_requires_scheme():
    with pytest.raises(ValueError):
        ClickUpClient(api_base="clickup.test/api")
