# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: Member endpoints for the dashboard.
Thin HTTP layer — delegates ALL logic to the session's lifecycle controller.
Failures surface as MembershipError and are rendered by main.py.
"""

from fastapi import APIRouter, Depends

from app.core.dependencies import get_current_session
from app.schemas import (
    MemberCreateRequest,
    MemberDeleteResponse,
    MemberMutationResponse,
    MemberReplaceRequest,
    MemberUpdateRequest,
    MembersView,
)
from app.services.session_manager import Session

router = APIRouter(prefix="/api/v1/members", tags=["Members"])


@router.get("", response_model=MembersView)
async def list_members(session: Session = Depends(get_current_session)):
    """Current member list, newest first."""
    return session.controller.snapshot()


@router.post("/reload", response_model=MembersView)
async def reload_members(session: Session = Depends(get_current_session)):
    """Re-fetch the member list from the record store."""
    await session.controller.reload()
    return session.controller.snapshot()


@router.post("", status_code=201, response_model=MemberMutationResponse)
async def create_member(
    payload: MemberCreateRequest,
    session: Session = Depends(get_current_session),
):
    member = await session.controller.create(payload)
    return {"member": member, "message": "Member added successfully"}


@router.put("/{member_id}", response_model=MemberMutationResponse)
async def replace_member(
    member_id: str,
    payload: MemberReplaceRequest,
    session: Session = Depends(get_current_session),
):
    """Overwrite every editable field of a member."""
    member = await session.controller.update(member_id, payload)
    return {"member": member, "message": "Member updated successfully"}


@router.patch("/{member_id}", response_model=MemberMutationResponse)
async def update_member(
    member_id: str,
    payload: MemberUpdateRequest,
    session: Session = Depends(get_current_session),
):
    """Change only the fields present in the body."""
    member = await session.controller.update(member_id, payload)
    return {"member": member, "message": "Member updated successfully"}


@router.delete("/{member_id}", response_model=MemberDeleteResponse)
async def delete_member(
    member_id: str,
    session: Session = Depends(get_current_session),
):
    await session.controller.delete(member_id)
    return {"id": member_id, "message": "Member deleted successfully"}
