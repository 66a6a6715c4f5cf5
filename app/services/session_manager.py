# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Sessions — one member lifecycle controller per signed-in user.

A controller is built when a session starts and dropped when it ends, so a
member list never outlives the sign-in it was loaded for. Sessions idle for
longer than SESSION_TTL_SECONDS are ended the same way.
"""

import secrets
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Optional

from app.core.config import settings
from app.core.logging import get_logger
from app.metrics import ACTIVE_SESSIONS
from app.models.domain import Principal
from app.repositories.member_store import MemberStore
from app.services.member_lifecycle import MemberLifecycleController

logger = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Session:
    token: str
    principal: Optional[Principal]
    controller: MemberLifecycleController = field(repr=False)
    started_at: datetime = field(default_factory=_utcnow)
    last_used: datetime = field(default_factory=_utcnow)

    def current_principal(self) -> Optional[Principal]:
        return self.principal

    def end(self) -> None:
        self.principal = None
        self.controller.reset()


class SessionManager:
    def __init__(
        self,
        store: MemberStore,
        timeout: Optional[float] = None,
        ttl_seconds: Optional[int] = None,
    ) -> None:
        self._store = store
        self._timeout = timeout
        self._ttl = settings.SESSION_TTL_SECONDS if ttl_seconds is None else ttl_seconds
        self._sessions: dict[str, Session] = {}

    def start(self, principal: Principal) -> Session:
        self.sweep()
        token = secrets.token_urlsafe(32)
        session = Session(token=token, principal=principal, controller=None)
        session.controller = MemberLifecycleController(
            self._store, session.current_principal, timeout=self._timeout,
        )
        self._sessions[token] = session
        ACTIVE_SESSIONS.set(len(self._sessions))
        logger.info("Session started", extra={"uid": principal.uid})
        return session

    def get(self, token: str) -> Optional[Session]:
        session = self._sessions.get(token)
        if session is None:
            return None
        now = _utcnow()
        if self._expired(session, now):
            self._drop(token, "expired")
            return None
        session.last_used = now
        return session

    def end(self, token: str) -> bool:
        return self._drop(token, "ended")

    def sweep(self) -> int:
        """End every idle session past the TTL; returns how many were dropped."""
        now = _utcnow()
        stale = [t for t, s in self._sessions.items() if self._expired(s, now)]
        for token in stale:
            self._drop(token, "expired")
        return len(stale)

    def count(self) -> int:
        return len(self._sessions)

    def clear(self) -> None:
        for session in self._sessions.values():
            session.end()
        self._sessions.clear()
        ACTIVE_SESSIONS.set(0)

    # ── Private ──

    def _expired(self, session: Session, now: datetime) -> bool:
        if self._ttl <= 0:
            return False
        return now - session.last_used > timedelta(seconds=self._ttl)

    def _drop(self, token: str, reason: str) -> bool:
        session = self._sessions.pop(token, None)
        if session is None:
            return False
        uid = session.principal.uid if session.principal else None
        session.end()
        ACTIVE_SESSIONS.set(len(self._sessions))
        logger.info("Session %s", reason, extra={"uid": uid})
        return True
