# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Controller: Authentication — sign-up, sign-in, sign-out."""
from fastapi import APIRouter, Depends

from app.core.dependencies import get_auth_service, get_current_session, get_session_manager
from app.core.errors import MembershipError
from app.core.logging import get_logger
from app.models.domain import Principal
from app.schemas import CredentialsRequest, LogoutResponse, SessionResponse
from app.services.auth_service import AuthService
from app.services.session_manager import Session, SessionManager

router = APIRouter(prefix="/api/v1/auth", tags=["Auth"])
logger = get_logger(__name__)


async def _open_session(sessions: SessionManager, principal: Principal, message: str):
    session = sessions.start(principal)
    # The dashboard shows members right after sign-in
    try:
        await session.controller.handle_session_change()
    except MembershipError as exc:
        logger.warning("Initial member load failed: %s", exc.message, extra={"uid": principal.uid})
    return {"token": session.token, "principal": principal, "message": message}


@router.post("/signup", status_code=201, response_model=SessionResponse)
async def sign_up(
    payload: CredentialsRequest,
    auth: AuthService = Depends(get_auth_service),
    sessions: SessionManager = Depends(get_session_manager),
):
    principal = auth.sign_up(payload.email, payload.password)
    return await _open_session(sessions, principal, "Account created successfully!")


@router.post("/login", response_model=SessionResponse)
async def sign_in(
    payload: CredentialsRequest,
    auth: AuthService = Depends(get_auth_service),
    sessions: SessionManager = Depends(get_session_manager),
):
    principal = auth.sign_in(payload.email, payload.password)
    return await _open_session(sessions, principal, "Login successful")


@router.post("/logout", response_model=LogoutResponse)
async def sign_out(
    session: Session = Depends(get_current_session),
    sessions: SessionManager = Depends(get_session_manager),
):
    sessions.end(session.token)
    return {"message": "Logged out successfully"}


@router.get("/me")
async def whoami(session: Session = Depends(get_current_session)):
    return session.principal.model_dump(by_alias=True)
