"""Integration with the ClickUp v2 REST API."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Sequence
from urllib.parse import urlparse

import httpx

DEFAULT_API_BASE = "https://api.clickup.com/api/v2"


class ClickUpError(RuntimeError):
    """Raised when the ClickUp API rejects a request."""


class ClickUpClient:
    """Read-only client for teams and time entries."""

    def __init__(
        self,
        *,
        api_base: str = DEFAULT_API_BASE,
        timeout: float = 30.0,
        http_client: httpx.Client | None = None,
    ) -> None:
        parsed = urlparse(api_base)
        if not parsed.scheme or not parsed.netloc:
            raise ValueError("api_base must include scheme and host")

        self._api_base = api_base.rstrip("/")
        self._client = http_client or httpx.Client(timeout=timeout)
        self._owns_client = http_client is None

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _headers(token: str) -> dict[str, str]:
        return {"Authorization": token, "Content-Type": "application/json"}

    @staticmethod
    def _to_millis(value: datetime) -> int:
        return int(value.timestamp() * 1000)

    def _get(self, path: str, token: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        response = self._client.get(f"{self._api_base}{path}", params=params, headers=self._headers(token))
        if response.status_code >= 400:
            try:
                body = response.json()
            except ValueError:
                body = {}
            message = body.get("err") if isinstance(body, dict) else None
            raise ClickUpError(f"{response.status_code}: {message or response.reason_phrase}")

        payload = response.json()
        if not isinstance(payload, dict):
            raise ClickUpError("unexpected response payload")
        return payload

    # ------------------------------------------------------------------
    # public API
    # ------------------------------------------------------------------
    def fetch_teams(self, token: str) -> list[dict[str, Any]]:
        payload = self._get("/team", token)
        teams = payload.get("teams") or []
        return [team for team in teams if isinstance(team, dict)]

    def fetch_time_entries(
        self,
        token: str,
        team_id: str,
        *,
        start: datetime,
        end: datetime,
        assignees: Sequence[str],
    ) -> list[dict[str, Any]]:
        params: dict[str, Any] = {
            "start_date": self._to_millis(start),
            "end_date": self._to_millis(end),
            "include_location_names": "true",
            "include_task_tags": "true",
        }
        if assignees:
            params["assignee"] = ",".join(str(member) for member in assignees)

        payload = self._get(f"/team/{team_id}/time_entries", token, params)
        entries = payload.get("data") or []
        return [entry for entry in entries if isinstance(entry, dict)]

    def close(self) -> None:  # pragma: no cover - best effort cleanup
        if self._owns_client:
            self._client.close()


def team_member_ids(team: dict[str, Any]) -> list[str]:
    """Extract member user ids from a team payload."""

    ids: list[str] = []
    for member in team.get("members") or []:
        user = member.get("user") if isinstance(member, dict) else None
        if isinstance(user, dict) and user.get("id") is not None:
            ids.append(str(user["id"]))
    return ids


__all__ = ["ClickUpClient", "ClickUpError", "team_member_ids"]
