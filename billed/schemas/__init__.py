"""Schemas Package"""

from billed.schemas.bill import Bill, FilePayload, FileUploadResult, UploadedFile
from billed.schemas.session import SessionRecord


__all__ = [
    "Bill",
    "FilePayload",
    "FileUploadResult",
    "SessionRecord",
    "UploadedFile",
]
