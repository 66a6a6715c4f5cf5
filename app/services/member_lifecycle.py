# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Member record lifecycle — the session's in-memory member list.

The list is a cache of the record store. It only ever reflects the last
successful reload plus mutations the store has confirmed; a failed or
in-flight call never touches it.
"""

import asyncio
from datetime import datetime, timezone
from typing import Any, Callable, Optional, Union

from app.core.config import settings
from app.core.errors import (
    CreateFailure,
    DeleteFailure,
    LoadFailure,
    NotAuthenticated,
    OperationInProgress,
    RecordNotFound,
    StoreError,
    UpdateFailure,
)
from app.core.logging import get_logger
from app.metrics import MEMBER_OPERATIONS, STORE_LATENCY
from app.models.domain import MemberDraft, MemberPatch, MemberRecord, Principal
from app.repositories.member_store import MemberStore

logger = get_logger(__name__)

Changes = Union[MemberDraft, MemberPatch, dict]


class MemberLifecycleController:
    """Owns one session's member list and keeps it in step with the store."""

    def __init__(
        self,
        store: MemberStore,
        principal_provider: Callable[[], Optional[Principal]],
        timeout: Optional[float] = None,
    ) -> None:
        self._store = store
        self._current_principal = principal_provider
        self._timeout = timeout if timeout is not None else settings.STORE_TIMEOUT
        self._records: list[MemberRecord] = []
        self.is_loading = False
        self.pending_operation = False

    # ── View ──

    @property
    def records(self) -> tuple[MemberRecord, ...]:
        return tuple(self._records)

    @property
    def count(self) -> int:
        return len(self._records)

    def snapshot(self) -> dict[str, Any]:
        return {
            "records": self.records,
            "count": self.count,
            "is_loading": self.is_loading,
            "pending_operation": self.pending_operation,
        }

    # ── Session lifecycle ──

    def reset(self) -> None:
        """Drop the cached list; the next reload repopulates it."""
        self._records = []

    async def handle_session_change(self) -> tuple[MemberRecord, ...]:
        self.reset()
        return await self.reload()

    # ── Commands ──

    async def reload(self) -> tuple[MemberRecord, ...]:
        if self._current_principal() is None:
            return self.records

        self.is_loading = True
        try:
            stored = await self._call("list_all", self._store.list_all())
            self._records = [s.to_record() for s in stored]
        except StoreError as exc:
            self._failed("reload", exc)
            raise LoadFailure() from exc
        finally:
            self.is_loading = False

        MEMBER_OPERATIONS.labels(operation="reload", outcome="success").inc()
        logger.info("Members reloaded: count=%d", len(self._records), extra=self._log_context("reload"))
        return self.records

    async def create(self, draft: MemberDraft) -> MemberRecord:
        principal = self._require_principal("create")
        self._require_idle("create")

        self.pending_operation = True
        try:
            stored = await self._call("insert", self._store.insert(draft, principal))
        except StoreError as exc:
            self._failed("create", exc)
            raise CreateFailure() from exc
        finally:
            self.pending_operation = False

        record = MemberRecord(
            id=stored.id,
            **draft.model_dump(),
            created_at=stored.created_at,
            updated_at=stored.updated_at,
        )
        self._records = [record] + [r for r in self._records if r.id != record.id]
        MEMBER_OPERATIONS.labels(operation="create", outcome="success").inc()
        logger.info("Member created", extra=self._log_context("create", record.id))
        return record

    async def update(self, record_id: str, changes: Changes) -> MemberRecord:
        self._require_principal("update")
        before = self._find(record_id, "update")
        self._require_idle("update")
        fields = self._normalize_changes(changes)

        self.pending_operation = True
        try:
            confirmed_at = await self._call("update", self._store.update_by_id(record_id, fields))
        except StoreError as exc:
            self._failed("update", exc)
            raise UpdateFailure() from exc
        finally:
            self.pending_operation = False

        # Server timestamp when the store gives one, local clock otherwise
        updated_at = confirmed_at or datetime.now(timezone.utc)
        index = self._index_of(record_id)
        current = self._records[index] if index is not None else before
        updated = current.model_copy(
            update={**fields, "updated_at": max(updated_at, current.created_at)}
        )
        if index is not None:
            self._records[index] = updated
        else:
            logger.info(
                "Member left the list while its update was in flight",
                extra=self._log_context("update", record_id),
            )

        MEMBER_OPERATIONS.labels(operation="update", outcome="success").inc()
        logger.info("Member updated: fields=%s", sorted(fields), extra=self._log_context("update", record_id))
        return updated

    async def delete(self, record_id: str) -> None:
        self._require_principal("delete")
        self._find(record_id, "delete")

        try:
            await self._call("delete", self._store.delete_by_id(record_id))
        except StoreError as exc:
            self._failed("delete", exc)
            raise DeleteFailure() from exc

        self._records = [r for r in self._records if r.id != record_id]
        MEMBER_OPERATIONS.labels(operation="delete", outcome="success").inc()
        logger.info("Member deleted", extra=self._log_context("delete", record_id))

    # ── Helpers ──

    async def _call(self, operation: str, awaitable):
        with STORE_LATENCY.labels(operation=operation).time():
            try:
                return await asyncio.wait_for(awaitable, timeout=self._timeout)
            except asyncio.TimeoutError as exc:
                raise StoreError(f"{operation} timed out after {self._timeout}s") from exc

    def _require_principal(self, operation: str) -> Principal:
        principal = self._current_principal()
        if principal is None:
            MEMBER_OPERATIONS.labels(operation=operation, outcome="rejected").inc()
            raise NotAuthenticated()
        return principal

    def _require_idle(self, operation: str) -> None:
        if self.pending_operation:
            MEMBER_OPERATIONS.labels(operation=operation, outcome="rejected").inc()
            raise OperationInProgress()

    def _find(self, record_id: str, operation: str) -> MemberRecord:
        index = self._index_of(record_id)
        if index is None:
            MEMBER_OPERATIONS.labels(operation=operation, outcome="rejected").inc()
            raise RecordNotFound()
        return self._records[index]

    def _index_of(self, record_id: str) -> Optional[int]:
        for i, record in enumerate(self._records):
            if record.id == record_id:
                return i
        return None

    def _failed(self, operation: str, exc: Exception) -> None:
        MEMBER_OPERATIONS.labels(operation=operation, outcome="failure").inc()
        logger.warning("Member %s failed: %s", operation, exc, extra=self._log_context(operation))

    def _log_context(self, operation: str, member_id: Optional[str] = None) -> dict[str, Any]:
        principal = self._current_principal()
        context = {"uid": principal.uid if principal else None, "operation": operation}
        if member_id is not None:
            context["member_id"] = member_id
        return context

    @staticmethod
    def _normalize_changes(changes: Changes) -> dict[str, Any]:
        if isinstance(changes, MemberDraft):
            return changes.model_dump()
        if isinstance(changes, MemberPatch):
            return changes.changes()
        return MemberPatch.model_validate(changes).changes()
