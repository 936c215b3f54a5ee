"""Models Package - Export enums for easy imports"""

from billed.models.enums import BillStatus, ExpenseType, RoutePath, UserRole, ViewName


__all__ = [
    "BillStatus",
    "ExpenseType",
    "RoutePath",
    "UserRole",
    "ViewName",
]
