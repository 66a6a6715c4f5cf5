# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Closed error taxonomy — produced once at the service boundary.

Store adapters raise ``StoreError``; the lifecycle controller maps it to one
of the member kinds below. Nothing backend-specific travels further up.
"""


class StoreError(Exception):
    """Raised by record store adapters for any transport or backend failure."""


# ── Member lifecycle ──

class MembershipError(Exception):
    kind: str = "membership_error"
    status_code: int = 500
    message: str = "Something went wrong"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)
        self.message = message or self.message


class NotAuthenticated(MembershipError):
    kind = "not_authenticated"
    status_code = 401
    message = "Please sign in to continue"


class RecordNotFound(MembershipError):
    kind = "record_not_found"
    status_code = 404
    message = "Member not found"


class OperationInProgress(MembershipError):
    kind = "operation_in_progress"
    status_code = 409
    message = "Another save is already in progress"


class LoadFailure(MembershipError):
    kind = "load_failure"
    status_code = 502
    message = "Failed to load members"


class CreateFailure(MembershipError):
    kind = "create_failure"
    status_code = 502
    message = "Failed to add member"


class UpdateFailure(MembershipError):
    kind = "update_failure"
    status_code = 502
    message = "Failed to update member"


class DeleteFailure(MembershipError):
    kind = "delete_failure"
    status_code = 502
    message = "Failed to delete member"


# ── Login flow ──

class AuthError(Exception):
    kind: str = "auth_error"
    status_code: int = 400
    message: str = "Login failed. Please check your credentials"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)
        self.message = message or self.message


class MissingCredentials(AuthError):
    kind = "missing_credentials"
    status_code = 400
    message = "Please fill in all fields"


class InvalidEmail(AuthError):
    kind = "invalid_email"
    status_code = 400
    message = "Invalid email address"


class WeakPassword(AuthError):
    kind = "weak_password"
    status_code = 400
    message = "Password is too weak"


class AccountExists(AuthError):
    kind = "account_exists"
    status_code = 409
    message = "An account with this email already exists"


class InvalidCredential(AuthError):
    kind = "invalid_credential"
    status_code = 401
    message = "Invalid email or password"


class TooManyAttempts(AuthError):
    kind = "too_many_attempts"
    status_code = 429
    message = "Too many failed attempts. Please try again later"
