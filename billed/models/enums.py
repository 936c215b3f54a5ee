"""Centralized Enum Definitions"""

import enum


# Session
class UserRole(str, enum.Enum):
    """Roles a Session Record can carry"""
    EMPLOYEE = "Employee"
    ADMIN = "Admin"


# Bills
class BillStatus(str, enum.Enum):
    """Approval status of a bill"""
    PENDING = "pending"
    ACCEPTED = "accepted"
    REFUSED = "refused"


class ExpenseType(str, enum.Enum):
    """Expense categories offered by the new bill form"""
    TRANSPORTS = "Transports"
    RESTAURANTS = "Restaurants et bars"
    HOTEL = "Hôtel et logement"
    ONLINE_SERVICES = "Services en ligne"
    IT = "IT et électronique"
    EQUIPMENT = "Equipement et matériel"
    OFFICE_SUPPLIES = "Fournitures de bureau"


# Navigation
class RoutePath(str, enum.Enum):
    """Logical paths the router knows about"""
    LOGIN = "/"
    BILLS = "#employee/bills"
    NEW_BILL = "#employee/bill/new"
    DASHBOARD = "#admin/dashboard"


class ViewName(str, enum.Enum):
    """Views the renderer can produce"""
    LOGIN = "login"
    BILLS = "bills"
    NEW_BILL = "new_bill"
    DASHBOARD = "dashboard"
    LOADING = "loading"
    ERROR = "error"
    NOT_FOUND = "not_found"
