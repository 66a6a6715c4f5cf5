# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Relational record store — one ``members`` row per member, snake_case columns."""
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import Column, DateTime, MetaData, String, Table, Text, delete, func, insert, select, text, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from starlette.concurrency import run_in_threadpool

from app.core.errors import StoreError
from app.core.logging import get_logger
from app.models.domain import MEMBER_FIELDS, MemberDraft, Principal, StoredRecord
from app.repositories.member_store import MemberStore

logger = get_logger(__name__)

metadata = MetaData()

members_table = Table(
    "members",
    metadata,
    Column("id", String(64), primary_key=True),
    Column("full_name", Text, nullable=False),
    Column("address", Text, nullable=False),
    Column("phone_number", String(50), nullable=False),
    Column("cell_group", Text, nullable=False),
    Column("email", String(255), nullable=False),
    Column("owner_id", String(128)),
    Column("created_at", DateTime(timezone=True), nullable=False, index=True),
    Column("updated_at", DateTime(timezone=True), nullable=False),
)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _row_to_record(row) -> StoredRecord:
    data = dict(row._mapping)
    data["created_at"] = _as_utc(data["created_at"])
    data["updated_at"] = _as_utc(data["updated_at"])
    return StoredRecord(**data)


class SqlMemberStore(MemberStore):
    backend = "sql"

    def __init__(self, engine: Engine):
        self._engine = engine

    def create_schema(self) -> None:
        metadata.create_all(self._engine)

    # ── Read ───────────────────────────────────────────────────────────

    async def list_all(self) -> List[StoredRecord]:
        return await run_in_threadpool(self._list_all)

    async def count(self) -> int:
        return await run_in_threadpool(self._count)

    async def verify_connection(self) -> None:
        await run_in_threadpool(self._ping)

    # ── Write ──────────────────────────────────────────────────────────

    async def insert(self, draft: MemberDraft, owner: Principal) -> StoredRecord:
        return await run_in_threadpool(self._insert, draft, owner)

    async def update_by_id(self, record_id: str, fields: Dict[str, Any]) -> Optional[datetime]:
        return await run_in_threadpool(self._update, record_id, fields)

    async def delete_by_id(self, record_id: str) -> None:
        await run_in_threadpool(self._delete, record_id)

    async def close(self) -> None:
        self._engine.dispose()

    def clear(self) -> None:
        with self._engine.begin() as conn:
            conn.execute(delete(members_table))

    # ── Private (blocking) ─────────────────────────────────────────────

    def _list_all(self) -> List[StoredRecord]:
        try:
            with self._engine.connect() as conn:
                rows = conn.execute(
                    select(members_table).order_by(members_table.c.created_at.desc())
                ).fetchall()
        except SQLAlchemyError as exc:
            raise StoreError(f"list members failed: {exc}") from exc
        return [_row_to_record(r) for r in rows]

    def _count(self) -> int:
        try:
            with self._engine.connect() as conn:
                return conn.execute(select(func.count()).select_from(members_table)).scalar() or 0
        except SQLAlchemyError as exc:
            raise StoreError(f"count members failed: {exc}") from exc

    def _ping(self) -> None:
        try:
            with self._engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            raise StoreError(f"database unreachable: {exc}") from exc

    def _insert(self, draft: MemberDraft, owner: Principal) -> StoredRecord:
        now = datetime.now(timezone.utc)
        row: Dict[str, Any] = {
            "id": str(uuid.uuid4()),
            **draft.model_dump(),
            "owner_id": owner.uid,
            "created_at": now,
            "updated_at": now,
        }
        try:
            with self._engine.begin() as conn:
                conn.execute(insert(members_table).values(**row))
        except SQLAlchemyError as exc:
            raise StoreError(f"insert member failed: {exc}") from exc
        logger.debug("Inserted member row id=%s", row["id"])
        return StoredRecord(**row)

    def _update(self, record_id: str, fields: Dict[str, Any]) -> datetime:
        values = {k: v for k, v in fields.items() if k in MEMBER_FIELDS}
        now = datetime.now(timezone.utc)
        values["updated_at"] = now
        try:
            with self._engine.begin() as conn:
                result = conn.execute(
                    update(members_table).where(members_table.c.id == record_id).values(**values)
                )
        except SQLAlchemyError as exc:
            raise StoreError(f"update member failed: {exc}") from exc
        if result.rowcount == 0:
            raise StoreError(f"member {record_id} does not exist")
        return now

    def _delete(self, record_id: str) -> None:
        try:
            with self._engine.begin() as conn:
                result = conn.execute(delete(members_table).where(members_table.c.id == record_id))
        except SQLAlchemyError as exc:
            raise StoreError(f"delete member failed: {exc}") from exc
        if result.rowcount == 0:
            raise StoreError(f"member {record_id} does not exist")
