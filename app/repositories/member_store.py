# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: Record store contract and the in-memory backend.
NO business rules here — pure CRUD against the source of truth.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from app.core.errors import StoreError
from app.models.domain import MemberDraft, Principal, StoredRecord


class MemberStore:
    """Async record store used by the lifecycle controller.

    Implementations assign ``id``, ``created_at`` and ``updated_at`` on insert,
    return records newest first from ``list_all`` and raise ``StoreError`` for
    every failure.
    """

    backend: str = "abstract"

    async def list_all(self) -> list[StoredRecord]:
        raise NotImplementedError

    async def insert(self, draft: MemberDraft, owner: Principal) -> StoredRecord:
        raise NotImplementedError

    async def update_by_id(self, record_id: str, fields: dict[str, Any]) -> Optional[datetime]:
        """Apply ``fields``; return the store's confirmation time if it has one."""
        raise NotImplementedError

    async def delete_by_id(self, record_id: str) -> None:
        raise NotImplementedError

    async def count(self) -> int:
        return len(await self.list_all())

    async def verify_connection(self) -> None:
        await self.list_all()

    async def close(self) -> None:
        return None


class InMemoryMemberStore(MemberStore):
    """In-memory member storage."""

    backend = "memory"

    def __init__(self) -> None:
        self._store: dict[str, dict[str, Any]] = {}

    # ── Read ──

    async def list_all(self) -> list[StoredRecord]:
        rows = sorted(self._store.values(), key=lambda r: r["created_at"], reverse=True)
        return [StoredRecord(**row) for row in rows]

    async def count(self) -> int:
        return len(self._store)

    async def verify_connection(self) -> None:
        return None

    # ── Write ──

    async def insert(self, draft: MemberDraft, owner: Principal) -> StoredRecord:
        now = datetime.now(timezone.utc)
        row: dict[str, Any] = {
            "id": str(uuid.uuid4()),
            **draft.model_dump(),
            "owner_id": owner.uid,
            "created_at": now,
            "updated_at": now,
        }
        self._store[row["id"]] = row
        return StoredRecord(**row)

    async def update_by_id(self, record_id: str, fields: dict[str, Any]) -> Optional[datetime]:
        row = self._store.get(record_id)
        if row is None:
            raise StoreError(f"member {record_id} does not exist")
        now = datetime.now(timezone.utc)
        row.update(fields)
        row["updated_at"] = now
        return now

    async def delete_by_id(self, record_id: str) -> None:
        if self._store.pop(record_id, None) is None:
            raise StoreError(f"member {record_id} does not exist")

    # ── Bulk / internal ──

    def clear(self) -> None:
        self._store.clear()

    @property
    def store(self) -> dict[str, dict[str, Any]]:
        """Direct access for tests and seeding."""
        return self._store
