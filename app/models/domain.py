# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Domain models — pure data structures, NO FastAPI dependency.

Attributes are snake_case in Python and camelCase on the wire
(``full_name`` <-> ``fullName``).
"""

import re
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

MEMBER_FIELDS: tuple[str, ...] = (
    "full_name", "address", "phone_number", "cell_group", "email",
)


def is_email(value: str) -> bool:
    return bool(EMAIL_PATTERN.match(value))


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class MemberDraft(CamelModel):
    """The editable field set submitted from the member form."""
    full_name: str = Field(..., min_length=1, max_length=255, description="Full name")
    address: str = Field(..., min_length=1, max_length=500, description="Postal address")
    phone_number: str = Field(..., min_length=1, max_length=50, description="Phone number")
    cell_group: str = Field(..., min_length=1, max_length=255, description="Cell group")
    email: str = Field(..., min_length=1, max_length=255, description="E-mail address")

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        if not is_email(v):
            raise ValueError("email must look like name@example.com")
        return v


class MemberPatch(CamelModel):
    """Partial update: only the fields that are set get sent to the store."""
    full_name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    address: Optional[str] = Field(default=None, min_length=1, max_length=500)
    phone_number: Optional[str] = Field(default=None, min_length=1, max_length=50)
    cell_group: Optional[str] = Field(default=None, min_length=1, max_length=255)
    email: Optional[str] = Field(default=None, min_length=1, max_length=255)

    @field_validator("email")
    @classmethod
    def check_email(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not is_email(v):
            raise ValueError("email must look like name@example.com")
        return v

    @model_validator(mode="after")
    def check_not_empty(self) -> "MemberPatch":
        for name in self.model_fields_set:
            if getattr(self, name) is None:
                raise ValueError(f"{to_camel(name)} cannot be null")
        if not self.model_fields_set:
            raise ValueError("at least one field must be provided")
        return self

    def changes(self) -> dict[str, Any]:
        return {name: getattr(self, name) for name in MEMBER_FIELDS if name in self.model_fields_set}


class MemberRecord(CamelModel):
    """One church member as held in a session's member list."""
    id: str
    full_name: str
    address: str
    phone_number: str
    cell_group: str
    email: str
    created_at: datetime
    updated_at: datetime

    def fields(self) -> dict[str, Any]:
        return {name: getattr(self, name) for name in MEMBER_FIELDS}


class StoredRecord(MemberRecord):
    """A record as returned by a record store, including its owner."""
    owner_id: Optional[str] = None

    def to_record(self) -> MemberRecord:
        return MemberRecord(**self.model_dump(exclude={"owner_id"}))


class Principal(CamelModel):
    """The authenticated identity of a session."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    uid: str
    email: str
