# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Authentication service — e-mail/password accounts for the login page."""
import hashlib
import hmac
import secrets
import time
import uuid
from collections import defaultdict
from typing import Dict, Optional

from app.core.config import settings
from app.core.errors import (
    AccountExists,
    InvalidCredential,
    InvalidEmail,
    MissingCredentials,
    TooManyAttempts,
    WeakPassword,
)
from app.core.logging import get_logger
from app.metrics import AUTH_ATTEMPTS
from app.models.domain import Principal, is_email

logger = get_logger(__name__)

_HASH_ITERATIONS = 120_000


def _hash_password(password: str, salt: bytes) -> bytes:
    return hashlib.pbkdf2_hmac("sha256", password.encode(), salt, _HASH_ITERATIONS)


class FailedLoginTracker:
    """Sliding-window count of failed sign-ins keyed by e-mail."""

    def __init__(self, max_failures: int, window_seconds: int):
        self.max_failures = max_failures
        self.window = window_seconds
        self._hits: dict[str, list[float]] = defaultdict(list)

    def is_locked(self, key: str) -> bool:
        if self.max_failures <= 0:
            return False
        cutoff = time.monotonic() - self.window
        hits = [t for t in self._hits.get(key, ()) if t > cutoff]
        if hits:
            self._hits[key] = hits
        else:
            self._hits.pop(key, None)
        return len(hits) >= self.max_failures

    def record_failure(self, key: str) -> None:
        self._hits[key].append(time.monotonic())

    def reset(self, key: str) -> None:
        self._hits.pop(key, None)

    def clear(self) -> None:
        self._hits.clear()


class AuthService:
    def __init__(self, min_password_length: Optional[int] = None,
                 tracker: Optional[FailedLoginTracker] = None):
        self._min_password_length = (
            min_password_length if min_password_length is not None
            else settings.MIN_PASSWORD_LENGTH
        )
        self._tracker = tracker or FailedLoginTracker(
            settings.MAX_FAILED_LOGINS, settings.LOGIN_LOCKOUT_SECONDS,
        )
        # email -> {"uid", "salt", "hash"}
        self._accounts: Dict[str, Dict] = {}

    def seed_from_config(self, raw: str) -> int:
        """Create accounts from ``email:password`` pairs; returns how many."""
        created = 0
        for pair in raw.split(","):
            pair = pair.strip()
            if ":" not in pair:
                continue
            email, password = pair.split(":", 1)
            email = email.strip().lower()
            if email and email not in self._accounts:
                self._store_account(email, password.strip())
                created += 1
        if created:
            logger.info("Seeded %d user account(s) from configuration", created)
        return created

    def sign_up(self, email: str, password: str) -> Principal:
        email = (email or "").strip().lower()
        if not email or not password:
            AUTH_ATTEMPTS.labels(action="sign_up", outcome="rejected").inc()
            raise MissingCredentials()
        if not is_email(email):
            AUTH_ATTEMPTS.labels(action="sign_up", outcome="rejected").inc()
            raise InvalidEmail()
        if len(password) < self._min_password_length:
            AUTH_ATTEMPTS.labels(action="sign_up", outcome="rejected").inc()
            raise WeakPassword(
                f"Password must be at least {self._min_password_length} characters"
            )
        if email in self._accounts:
            AUTH_ATTEMPTS.labels(action="sign_up", outcome="rejected").inc()
            raise AccountExists()

        principal = self._store_account(email, password)
        AUTH_ATTEMPTS.labels(action="sign_up", outcome="success").inc()
        logger.info("Account created: uid=%s", principal.uid)
        return principal

    def sign_in(self, email: str, password: str) -> Principal:
        email = (email or "").strip().lower()
        if not email or not password:
            AUTH_ATTEMPTS.labels(action="sign_in", outcome="rejected").inc()
            raise MissingCredentials()
        if self._tracker.is_locked(email):
            AUTH_ATTEMPTS.labels(action="sign_in", outcome="locked").inc()
            raise TooManyAttempts()

        account = self._accounts.get(email)
        if account is None or not hmac.compare_digest(
            account["hash"], _hash_password(password, account["salt"])
        ):
            self._tracker.record_failure(email)
            AUTH_ATTEMPTS.labels(action="sign_in", outcome="failure").inc()
            logger.warning("Sign-in failed for %s", email)
            raise InvalidCredential()

        self._tracker.reset(email)
        AUTH_ATTEMPTS.labels(action="sign_in", outcome="success").inc()
        return Principal(uid=account["uid"], email=email)

    def clear(self) -> None:
        self._accounts.clear()
        self._tracker.clear()

    def _store_account(self, email: str, password: str) -> Principal:
        salt = secrets.token_bytes(16)
        uid = str(uuid.uuid4())
        self._accounts[email] = {"uid": uid, "salt": salt, "hash": _hash_password(password, salt)}
        return Principal(uid=uid, email=email)
