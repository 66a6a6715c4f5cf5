# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
FastAPI dependency injection — wire the record store, auth and sessions.
"""

from typing import Optional

import httpx
from fastapi import Header

from app.core.config import settings
from app.core.database import build_engine
from app.core.errors import NotAuthenticated
from app.repositories.document_member_store import DocumentMemberStore
from app.repositories.member_store import InMemoryMemberStore, MemberStore
from app.repositories.sql_member_store import SqlMemberStore
from app.services.auth_service import AuthService
from app.services.session_manager import Session, SessionManager


def build_store(backend: Optional[str] = None) -> MemberStore:
    """Pick the record store backend named by STORE_BACKEND."""
    backend = (backend or settings.STORE_BACKEND).lower()
    if backend == "memory":
        return InMemoryMemberStore()
    if backend == "sql":
        return SqlMemberStore(build_engine())
    if backend == "document":
        return DocumentMemberStore(httpx.AsyncClient(timeout=settings.STORE_TIMEOUT))
    raise ValueError(f"Unknown STORE_BACKEND '{backend}' (expected memory, sql or document)")


# ── Singletons ──
_store = build_store()
_auth_service = AuthService()
_session_manager = SessionManager(_store)


# ── FastAPI dependency functions ──
def get_member_store() -> MemberStore:
    return _store


def get_auth_service() -> AuthService:
    return _auth_service


def get_session_manager() -> SessionManager:
    return _session_manager


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def get_current_session(authorization: Optional[str] = Header(default=None)) -> Session:
    token = bearer_token(authorization)
    session = _session_manager.get(token) if token else None
    if session is None:
        raise NotAuthenticated()
    return session
