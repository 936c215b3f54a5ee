"""Bill Pydantic Schemas"""

from dataclasses import dataclass
from datetime import date as calendar_date
from typing import Any, Optional, Union
from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from billed.models.enums import BillStatus


class Bill(BaseModel):
    """
    Expense bill as exchanged with the remote store.

    Field names are snake_case in Python and camelCase on the wire
    (fileUrl, fileName, commentAdmin). A bill without an id is a draft.
    """
    id: Optional[str] = None
    email: Optional[str] = None
    type: Optional[str] = None
    name: Optional[str] = None
    amount: Optional[Union[int, float]] = None
    date: Optional[str] = None
    vat: Optional[str] = None
    pct: Optional[Union[int, float]] = None
    commentary: Optional[str] = None
    file_url: Optional[str] = None
    file_name: Optional[str] = None
    status: Optional[str] = BillStatus.PENDING.value
    comment_admin: Optional[str] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @field_validator("vat", mode="before")
    @classmethod
    def stringify_vat(cls, v: Any) -> Any:
        """VAT is free text; stores sometimes send it as a number"""
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("date", mode="before")
    @classmethod
    def stringify_date(cls, v: Any) -> Any:
        """Dates are kept as text; a non-string date is passed on as its str()"""
        if isinstance(v, calendar_date):
            return v.isoformat()
        if v is not None and not isinstance(v, str):
            return str(v)
        return v

    @property
    def is_draft(self) -> bool:
        return self.id is None

    def to_payload(self) -> dict:
        """Wire representation sent to the store (camelCase, no id)"""
        return self.model_dump(by_alias=True, exclude={"id"})


class FileUploadResult(BaseModel):
    """Answer of the store to a file upload: where the file lives and the draft key"""
    file_url: Optional[str] = None
    key: Optional[str] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


@dataclass
class UploadedFile:
    """A file picked in a file input"""
    name: str
    content_type: str
    content: bytes = b""


@dataclass
class FilePayload:
    """Multipart body of a bill file upload"""
    file: UploadedFile
    email: Optional[str] = None
