"""Session-token validation and daily request limits checked before a Dive run."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Callable, Protocol

from dive.config import settings
from dive.services.logger import get_logger

log = get_logger("session_gate")


@dataclass(frozen=True, slots=True)
class GateDecision:
    allowed: bool
    status_code: int = 200
    error: str | None = None
    current_count: int = 0
    reset_time: str | None = None
    message: str | None = None

    def to_body(self) -> dict:
        body: dict = {"error": self.error}
        if self.status_code == 429:
            body["currentCount"] = self.current_count
            body["resetTime"] = self.reset_time
            body["message"] = self.message
        return body


class SessionGate(Protocol):
    async def check(self, session_token: str | None) -> GateDecision: ...


class AllowAllSessionGate:
    async def check(self, session_token: str | None) -> GateDecision:
        return GateDecision(allowed=True)


@dataclass(slots=True)
class _Session:
    authenticated: bool = False
    roles: tuple[str, ...] = ()
    day: date | None = None
    count: int = 0


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def next_utc_midnight(now: datetime) -> datetime:
    return (now + timedelta(days=1)).replace(hour=0, minute=0, second=0, microsecond=0)


@dataclass
class InMemorySessionGate:
    """Per-process session store with UTC-daily request counters."""

    anonymous_limit: int = field(default_factory=lambda: settings.anonymous_daily_limit)
    authenticated_limit: int = field(default_factory=lambda: settings.authenticated_daily_limit)
    plus_limit: int = field(default_factory=lambda: settings.plus_daily_limit)
    clock: Callable[[], datetime] = _utcnow

    def __post_init__(self) -> None:
        self._sessions: dict[str, _Session] = {}

    def register(
        self,
        token: str,
        *,
        authenticated: bool = False,
        roles: tuple[str, ...] = (),
    ) -> None:
        self._sessions[token] = _Session(authenticated=authenticated, roles=tuple(roles))

    def revoke(self, token: str) -> None:
        self._sessions.pop(token, None)

    def limit_for(self, token: str) -> int:
        session = self._sessions[token]
        if any(role.lower() == "paid" for role in session.roles):
            return self.plus_limit
        return self.authenticated_limit if session.authenticated else self.anonymous_limit

    async def check(self, session_token: str | None) -> GateDecision:
        if not session_token:
            return GateDecision(allowed=False, status_code=401, error="Session token required")

        session = self._sessions.get(session_token)
        if session is None:
            return GateDecision(
                allowed=False,
                status_code=401,
                error="Invalid or expired session token",
            )

        now = self.clock()
        if session.day != now.date():
            session.day = now.date()
            session.count = 0
        session.count += 1

        limit = self.limit_for(session_token)
        if session.count > limit:
            log.warning(
                f"Session exceeded request limit for /api/dive. Count: {session.count}"
            )
            return GateDecision(
                allowed=False,
                status_code=429,
                error="Rate limit exceeded",
                current_count=session.count,
                reset_time=next_utc_midnight(now).isoformat(),
                message="Daily request limit reached. Limit resets at midnight UTC.",
            )
        return GateDecision(allowed=True, current_count=session.count)
