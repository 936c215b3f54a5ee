"""Unit tests for the sign-in container."""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from billed.containers.login import Login
from billed.core.exceptions import StoreError
from billed.models.enums import RoutePath
from billed.services.session_storage import MemorySessionStorage, load_session
from billed.ui.dom import Document, change, submit
from billed.views.login import login_page


def _fill(document: Document, prefix: str, email: str, password: str) -> None:
    change(document.get_by_test_id(f"{prefix}-email-input"), value=email)
    change(document.get_by_test_id(f"{prefix}-password-input"), value=password)


@pytest.fixture
def login_store():
    store = MagicMock()
    store.login = AsyncMock(return_value="token-123")
    store.users.return_value.create = AsyncMock(return_value={"email": "johndoe@email.com"})
    return store


@pytest.mark.asyncio
async def test_employee_sign_in_without_store(navigate):
    document = Document(login_page())
    storage = MemorySessionStorage()
    Login(document, navigate, storage)

    _fill(document, "employee", "johndoe@email.com", "azerty")
    assert submit(document.get_by_test_id("form-employee")) is False
    await document.settle()

    session = load_session(storage)
    assert session.is_employee
    assert session.email == "johndoe@email.com"
    assert json.loads(storage.get_item("user"))["status"] == "connected"
    assert "azerty" not in storage.get_item("user")
    navigate.assert_called_once_with(RoutePath.BILLS)


@pytest.mark.asyncio
async def test_admin_sign_in_goes_to_dashboard(navigate, login_store):
    document = Document(login_page())
    storage = MemorySessionStorage()
    Login(document, navigate, storage, login_store)

    _fill(document, "admin", "admin@company.tld", "secret")
    submit(document.get_by_test_id("form-admin"))
    await document.settle()

    assert load_session(storage).is_admin
    assert storage.get_item("jwt") == "token-123"
    login_store.login.assert_awaited_once_with("admin@company.tld", "secret")
    navigate.assert_called_once_with(RoutePath.DASHBOARD)


@pytest.mark.asyncio
async def test_unknown_user_is_registered_then_logged_in(navigate, login_store):
    login_store.login = AsyncMock(side_effect=[StoreError("User not found", status_code=401), "token-456"])
    document = Document(login_page())
    storage = MemorySessionStorage()
    Login(document, navigate, storage, login_store)

    _fill(document, "employee", "johndoe@email.com", "azerty")
    submit(document.get_by_test_id("form-employee"))
    await document.settle()

    login_store.users.return_value.create.assert_awaited_once_with(
        data={"type": "Employee", "name": "johndoe", "email": "johndoe@email.com", "password": "azerty"}
    )
    assert storage.get_item("jwt") == "token-456"
    navigate.assert_called_once_with(RoutePath.BILLS)


@pytest.mark.asyncio
async def test_failed_registration_does_not_navigate(navigate, login_store, caplog):
    login_store.login = AsyncMock(side_effect=StoreError("Unauthorized", status_code=401))
    login_store.users.return_value.create = AsyncMock(side_effect=StoreError("Conflict", status_code=409))
    document = Document(login_page())
    storage = MemorySessionStorage()
    Login(document, navigate, storage, login_store)

    _fill(document, "employee", "johndoe@email.com", "azerty")
    submit(document.get_by_test_id("form-employee"))
    await document.settle()

    navigate.assert_not_called()
    assert storage.get_item("jwt") is None
    assert "Sign-in failed" in caplog.text
