"""Time entry provider hooks.

The grid reads teams and time entries through a small protocol so that the
service can run against the real provider in production and against canned
data in tests.  Install a client with ``configure_entry_source`` at start-up.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Protocol, Sequence


class TimeEntrySource(Protocol):
    """Contract for time-tracking provider integrations."""

    def fetch_teams(self, token: str) -> list[dict[str, Any]]:
        """Return the teams visible to ``token``, each with ``id`` and ``members``."""

    def fetch_time_entries(
        self,
        token: str,
        team_id: str,
        *,
        start: datetime,
        end: datetime,
        assignees: Sequence[str],
    ) -> list[dict[str, Any]]:
        """Return raw time entries of ``assignees`` ending within ``start..end``."""


class NoOpEntrySource:
    """Fallback source used when no provider is configured."""

    def fetch_teams(self, token: str) -> list[dict[str, Any]]:  # pragma: no cover - trivial
        return []

    def fetch_time_entries(
        self,
        token: str,
        team_id: str,
        *,
        start: datetime,
        end: datetime,
        assignees: Sequence[str],
    ) -> list[dict[str, Any]]:  # pragma: no cover - trivial
        return []


_source: TimeEntrySource = NoOpEntrySource()


def configure_entry_source(source: TimeEntrySource) -> None:
    """Install the provider client used by the timing service."""

    global _source
    _source = source


def get_entry_source() -> TimeEntrySource:
    """Return the currently configured provider client."""

    return _source


def reset_entry_source() -> None:
    global _source
    _source = NoOpEntrySource()
