"""Shared pytest fixtures for unit and integration tests."""

import copy
import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from billed.services.session_storage import MemorySessionStorage

EMPLOYEE_EMAIL = "employee@test.tld"

# Store order is deliberately not chronological
BILLS = [
    {
        "id": "47qAXb6fIm2zOKkLzMro",
        "vat": "80",
        "fileUrl": "https://storage.test/bills/preview-facture-free-201801-pdf-1.jpg",
        "status": "pending",
        "type": "Hôtel et logement",
        "commentary": "séminaire billed",
        "name": "encore",
        "fileName": "preview-facture-free-201801-pdf-1.jpg",
        "date": "2004-04-04",
        "amount": 400,
        "commentAdmin": "ok",
        "email": "a@a",
        "pct": 20,
    },
    {
        "id": "BeKy5Mo4jkmdfPGYpTxZ",
        "vat": "",
        "amount": 100,
        "name": "test1",
        "fileName": "1592770761.jpeg",
        "commentary": "plop",
        "pct": 20,
        "type": "Transports",
        "email": "a@a",
        "fileUrl": "https://storage.test/bills/1592770761.jpeg",
        "date": "2001-01-01",
        "status": "refused",
        "commentAdmin": "en fait non",
    },
    {
        "id": "UIUZtnPQvnbFnB0ozvJh",
        "name": "test3",
        "email": "a@a",
        "type": "Services en ligne",
        "vat": "60",
        "pct": 20,
        "commentAdmin": "bon bah d'accord",
        "amount": 300,
        "status": "accepted",
        "date": "2003-03-03",
        "commentary": "",
        "fileName": "facture-client-php-exportee.png",
        "fileUrl": "https://storage.test/bills/facture-client-php-exportee.png",
    },
    {
        "id": "qcCK3SzECmaZAGRrHjaC",
        "status": "refused",
        "pct": 20,
        "amount": 200,
        "email": "a@a",
        "name": "test2",
        "vat": "40",
        "fileName": "preview-facture-free-201801-pdf-1.jpg",
        "date": "2002-02-02",
        "commentAdmin": "pas la bonne facture",
        "commentary": "test2",
        "type": "Restaurants et bars",
        "fileUrl": "https://storage.test/bills/preview-facture-free-201801-pdf-1.jpg",
    },
]


@pytest.fixture
def bills_data() -> list:
    return copy.deepcopy(BILLS)


@pytest.fixture
def storage() -> MemorySessionStorage:
    """Session storage with a signed-in employee."""
    return MemorySessionStorage(
        {"user": json.dumps({"type": "Employee", "email": EMPLOYEE_EMAIL, "status": "connected"})}
    )


@pytest.fixture
def admin_storage() -> MemorySessionStorage:
    return MemorySessionStorage(
        {"user": json.dumps({"type": "Admin", "email": "admin@test.tld", "status": "connected"})}
    )


@pytest.fixture
def mock_store(bills_data):
    """Store whose bills() resource answers like the real API."""
    resource = MagicMock()
    resource.list = AsyncMock(return_value=bills_data)
    resource.create = AsyncMock(
        return_value={"fileUrl": "https://localhost:3456/images/test.jpg", "key": "1234"}
    )
    resource.update = AsyncMock(return_value=bills_data[0])
    store = MagicMock()
    store.bills.return_value = resource
    return store


@pytest.fixture
def navigate() -> MagicMock:
    return MagicMock()
