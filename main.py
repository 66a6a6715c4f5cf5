# type: ignore
# pyright: reportGeneralTypeIssues=false
# pyright: reportOptionalMemberAccess=false
"""
Church Membership Service
=========================
Signed-in users keep a list of church members (full name, address, phone
number, cell group, e-mail) through a form-and-table dashboard.

Each session owns a member list that mirrors the record store. Mutations are
applied to that list only after the store confirms them:
    create  ─► store insert ─► prepend
    update  ─► store update ─► replace in place
    delete  ─► store delete ─► remove

Record store backends: memory | sql | document  (STORE_BACKEND)

Port: 8000
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.controllers import auth_controller, member_controller, system_controller
from app.core.config import settings
from app.core.dependencies import get_auth_service, get_member_store
from app.core.errors import AuthError, MembershipError
from app.core.logging import get_logger
from app.middleware import MetricsMiddleware, RequestIDMiddleware
from app.repositories.sql_member_store import SqlMemberStore
from app.schemas import ErrorResponse

logger = get_logger("membership-service")


# ── Lifespan ──────────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(application: FastAPI):
    store = get_member_store()
    if isinstance(store, SqlMemberStore):
        store.create_schema()
    get_auth_service().seed_from_config(settings.AUTH_USERS)
    logger.info(
        "Membership service starting — store_backend=%s version=%s",
        store.backend, settings.SERVICE_VERSION,
    )
    yield
    await store.close()
    logger.info("Membership service shutting down")


# ── FastAPI App ───────────────────────────────────────────────────────────
app = FastAPI(
    title="Church Membership Service",
    description="Manage church membership records: sign in, then add, edit and remove members.",
    version=settings.SERVICE_VERSION,
    lifespan=lifespan,
    responses={
        422: {"model": ErrorResponse, "description": "Validation error"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
)

app.add_middleware(MetricsMiddleware)
app.add_middleware(RequestIDMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Exception handlers ────────────────────────────────────────────────────
def _error_body(request: Request, kind: str, detail: str) -> dict:
    return {
        "error": kind,
        "detail": detail,
        "request_id": getattr(request.state, "request_id", None),
    }


@app.exception_handler(MembershipError)
async def membership_error_handler(request: Request, exc: MembershipError):
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(request, exc.kind, exc.message),
    )


@app.exception_handler(AuthError)
async def auth_error_handler(request: Request, exc: AuthError):
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(request, exc.kind, exc.message),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    detail = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg', 'invalid')}"
        for err in exc.errors()
    )
    return JSONResponse(
        status_code=422,
        content=_error_body(request, "validation_error", detail or "Invalid request"),
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    req_id = getattr(request.state, "request_id", None)
    logger.exception("Unhandled exception", extra={"request_id": req_id})
    return JSONResponse(
        status_code=500,
        content={"error": "internal_server_error", "detail": str(exc), "request_id": req_id},
    )


# ── Routers ───────────────────────────────────────────────────────────────
app.include_router(system_controller.router)
app.include_router(auth_controller.router)
app.include_router(member_controller.router)


# ── Entrypoint ────────────────────────────────────────────────────────────
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.SERVICE_PORT, log_level="info")
