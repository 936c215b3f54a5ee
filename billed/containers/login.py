"""Sign-in forms for employees and administrators"""

import logging
from typing import Callable, Optional

from billed.core.exceptions import StoreError
from billed.models.enums import RoutePath, UserRole
from billed.schemas.session import SessionRecord
from billed.services.session_storage import TOKEN_KEY, SessionStorage, save_session
from billed.services.store import Store
from billed.ui.dom import Document, Element, Event

logger = logging.getLogger(__name__)

HOME_PATHS = {
    UserRole.EMPLOYEE: RoutePath.BILLS,
    UserRole.ADMIN: RoutePath.DASHBOARD,
}


class Login:
    def __init__(
        self,
        document: Document,
        on_navigate: Callable[[str], None],
        storage: SessionStorage,
        store: Optional[Store] = None,
    ):
        self.document = document
        self.on_navigate = on_navigate
        self.storage = storage
        self.store = store

        form_employee = document.get_by_test_id("form-employee")
        if form_employee is not None:
            form_employee.add_event_listener("submit", self.handle_submit_employee)
        form_admin = document.get_by_test_id("form-admin")
        if form_admin is not None:
            form_admin.add_event_listener("submit", self.handle_submit_admin)

    def handle_submit_employee(self, event: Event):
        event.prevent_default()
        return self.sign_in(event.target, "employee", UserRole.EMPLOYEE)

    def handle_submit_admin(self, event: Event):
        event.prevent_default()
        return self.sign_in(event.target, "admin", UserRole.ADMIN)

    async def sign_in(self, form: Element, prefix: str, role: UserRole) -> None:
        email_input = form.get_by_test_id(f"{prefix}-email-input")
        password_input = form.get_by_test_id(f"{prefix}-password-input")
        email = email_input.value if email_input is not None else ""
        password = password_input.value if password_input is not None else ""

        save_session(self.storage, SessionRecord(role=role, email=email, status="connected"))

        if self.store is not None and hasattr(self.store, "login"):
            try:
                await self.login(email, password, role)
            except Exception as e:
                logger.error("Sign-in failed for %s: %s", email, e)
                return

        self.on_navigate(HOME_PATHS[role])

    async def login(self, email: str, password: str, role: UserRole) -> None:
        """Log in, registering the user first when the store does not know them"""
        try:
            token = await self.store.login(email, password)
        except StoreError as e:
            logger.info("Login rejected (%s), registering %s", e, email)
            await self.create_user(email, password, role)
            token = await self.store.login(email, password)
        if token:
            self.storage.set_item(TOKEN_KEY, token)

    async def create_user(self, email: str, password: str, role: UserRole) -> None:
        await self.store.users().create(
            data={
                "type": role.value,
                "name": email.split("@")[0],
                "email": email,
                "password": password,
            }
        )
