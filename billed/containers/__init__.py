"""Containers: the logic behind each view"""

from billed.containers.bills import Bills
from billed.containers.dashboard import Dashboard
from billed.containers.login import Login
from billed.containers.logout import Logout
from billed.containers.new_bill import NewBill


__all__ = ["Bills", "Dashboard", "Login", "Logout", "NewBill"]
