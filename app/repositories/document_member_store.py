# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Document record store — members kept as documents in a hosted collection,
reached over HTTP. Field names on the wire are camelCase.

Wire contract:
    GET    {base}/collections/{collection}/documents?orderBy=createdAt&direction=desc
           -> {"documents": [{"id": ..., "fields": {...}}]}
    POST   {base}/collections/{collection}/documents          -> {"id", "fields"}
    PATCH  {base}/collections/{collection}/documents/{id}     -> {"updateTime"?}
    DELETE {base}/collections/{collection}/documents/{id}
"""

from datetime import datetime, timezone
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from app.core.config import settings
from app.core.errors import StoreError
from app.core.logging import get_logger
from app.models.domain import MEMBER_FIELDS, MemberDraft, Principal, StoredRecord
from app.repositories.member_store import MemberStore

logger = get_logger(__name__)

_TO_WIRE: dict[str, str] = {
    "full_name": "fullName",
    "address": "address",
    "phone_number": "phoneNumber",
    "cell_group": "cellGroup",
    "email": "email",
}


def _parse_timestamp(value: Any) -> datetime:
    """Documents written without server timestamps fall back to now."""
    if not value:
        return datetime.now(timezone.utc)
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return datetime.now(timezone.utc)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def document_to_record(document: dict[str, Any]) -> StoredRecord:
    """Map one wire document to a record; malformed documents raise StoreError."""
    try:
        data = document.get("fields") or {}
        return StoredRecord(
            id=document["id"],
            full_name=data.get("fullName", ""),
            address=data.get("address", ""),
            phone_number=data.get("phoneNumber", ""),
            cell_group=data.get("cellGroup", ""),
            email=data.get("email", ""),
            owner_id=data.get("ownerId"),
            created_at=_parse_timestamp(data.get("createdAt")),
            updated_at=_parse_timestamp(data.get("updatedAt")),
        )
    except (KeyError, TypeError, AttributeError, ValidationError) as exc:
        raise StoreError(f"document store returned a malformed document: {exc}") from exc


def fields_to_wire(fields: dict[str, Any]) -> dict[str, Any]:
    return {_TO_WIRE[k]: v for k, v in fields.items() if k in MEMBER_FIELDS}


class DocumentMemberStore(MemberStore):
    backend = "document"

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str | None = None,
        collection: str | None = None,
    ) -> None:
        self._client = client
        base = (base_url or settings.DOCUMENT_STORE_URL).rstrip("/")
        self._documents_url = f"{base}/collections/{collection or settings.DOCUMENT_COLLECTION}/documents"

    # ── Read ──

    async def list_all(self) -> list[StoredRecord]:
        body = await self._request(
            "GET", self._documents_url,
            params={"orderBy": "createdAt", "direction": "desc"},
        )
        documents = (body or {}).get("documents")
        if documents is None:
            documents = []
        if not isinstance(documents, list):
            raise StoreError("document store returned a non-list 'documents' field")
        records = [document_to_record(d) for d in documents]
        # Enforce newest-first even if the store ignores orderBy
        records.sort(key=lambda r: r.created_at, reverse=True)
        return records

    # ── Write ──

    async def insert(self, draft: MemberDraft, owner: Principal) -> StoredRecord:
        payload = {
            "fields": {
                **fields_to_wire(draft.model_dump()),
                "ownerId": owner.uid,
            },
            "serverTimestamps": ["createdAt", "updatedAt"],
        }
        body = await self._request("POST", self._documents_url, json=payload)
        if not body or "id" not in body:
            raise StoreError("document store did not return a document id")
        fields = body.get("fields") or {}
        if not isinstance(fields, dict):
            raise StoreError("document store returned non-object 'fields'")
        # Echo back what we sent when the store only returns id + timestamps
        merged = {**payload["fields"], **fields}
        return document_to_record({"id": body["id"], "fields": merged})

    async def update_by_id(self, record_id: str, fields: dict[str, Any]) -> Optional[datetime]:
        payload = {
            "fields": fields_to_wire(fields),
            "serverTimestamps": ["updatedAt"],
        }
        body = await self._request("PATCH", f"{self._documents_url}/{record_id}", json=payload)
        update_time = (body or {}).get("updateTime")
        return _parse_timestamp(update_time) if update_time else None

    async def delete_by_id(self, record_id: str) -> None:
        await self._request("DELETE", f"{self._documents_url}/{record_id}")

    async def close(self) -> None:
        await self._client.aclose()

    # ── Private ──

    async def _request(self, method: str, url: str, **kwargs) -> Optional[dict[str, Any]]:
        headers = {}
        if settings.DOCUMENT_STORE_API_KEY:
            headers["Authorization"] = f"Bearer {settings.DOCUMENT_STORE_API_KEY}"
        try:
            resp = await self._client.request(method, url, headers=headers, **kwargs)
        except httpx.HTTPError as exc:
            raise StoreError(f"document store unreachable: {exc}") from exc
        if resp.status_code >= 300:
            logger.warning(
                "Document store returned %s for %s %s", resp.status_code, method, url,
            )
            raise StoreError(f"document store returned {resp.status_code}")
        if resp.status_code == 204 or not resp.content:
            return None
        try:
            body = resp.json()
        except ValueError as exc:
            raise StoreError("document store returned invalid JSON") from exc
        if not isinstance(body, dict):
            raise StoreError(f"document store returned a {type(body).__name__}, expected an object")
        return body
