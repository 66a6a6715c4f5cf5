# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Repository package."""
from app.repositories.member_store import InMemoryMemberStore, MemberStore
from app.repositories.sql_member_store import SqlMemberStore
from app.repositories.document_member_store import DocumentMemberStore

__all__ = ["MemberStore", "InMemoryMemberStore", "SqlMemberStore", "DocumentMemberStore"]
