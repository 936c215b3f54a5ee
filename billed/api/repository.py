"""In-memory persistence behind the local bills API"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from billed.models.enums import UserRole
from billed.schemas.bill import Bill


@dataclass
class UserRecord:
    email: str
    name: str
    role: UserRole
    password_hash: str


@dataclass
class StoredFile:
    name: str
    content_type: str
    content: bytes


@dataclass
class InMemoryRepository:
    users: Dict[str, UserRecord] = field(default_factory=dict)
    bills: Dict[str, Bill] = field(default_factory=dict)
    files: Dict[str, StoredFile] = field(default_factory=dict)

    def bills_visible_to(self, user: UserRecord) -> List[Bill]:
        if user.role == UserRole.ADMIN:
            return list(self.bills.values())
        return [b for b in self.bills.values() if b.email == user.email]

    def get_bill_for(self, user: UserRecord, key: str) -> Optional[Bill]:
        bill = self.bills.get(key)
        if bill is None:
            return None
        if user.role != UserRole.ADMIN and bill.email != user.email:
            return None
        return bill
