# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Request / Response schemas — API contract definitions.
These are Pydantic models used ONLY at the controller (HTTP) boundary.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.models.domain import CamelModel, MemberDraft, MemberPatch, MemberRecord, Principal


# ── Member Schemas ──

MemberCreateRequest = MemberDraft
MemberReplaceRequest = MemberDraft
MemberUpdateRequest = MemberPatch


class MembersView(CamelModel):
    """What the dashboard renders: the list plus its loading flags."""
    records: List[MemberRecord]
    count: int
    is_loading: bool
    pending_operation: bool


class MemberMutationResponse(CamelModel):
    member: MemberRecord
    message: str


class MemberDeleteResponse(CamelModel):
    id: str
    message: str


# ── Auth Schemas ──

class CredentialsRequest(CamelModel):
    model_config = ConfigDict(str_strip_whitespace=False)

    # Empty values are reported by the auth service, not as 422s
    email: str = Field(default="", max_length=255)
    password: str = Field(default="", max_length=255)


class SessionResponse(CamelModel):
    token: str
    principal: Principal
    message: str


class LogoutResponse(CamelModel):
    message: str


# ── Errors ──

class ErrorResponse(BaseModel):
    error: str
    detail: Optional[str] = None
    request_id: Optional[str] = None
