"""Admin dashboard container: review every user's bills and accept or refuse them."""

import logging
from functools import partial
from typing import Any, Callable, Dict, Iterable, List, Optional

from billed.containers.bills import display_bills, validate_bills
from billed.containers.logout import Logout
from billed.models.enums import BillStatus, RoutePath
from billed.schemas.bill import Bill
from billed.services.session_storage import SessionStorage
from billed.services.store import Store
from billed.ui.dom import Document, Element, Event
from billed.utils.format import sort_bills

logger = logging.getLogger(__name__)


def filtered_bills(bills: Iterable[Bill], status: str) -> List[Bill]:
    status = BillStatus(status).value
    return [bill for bill in bills if bill.status == status]


class Dashboard:
    def __init__(
        self,
        document: Document,
        on_navigate: Callable[[str], None],
        store: Optional[Store] = None,
        storage: Optional[SessionStorage] = None,
    ):
        self.document = document
        self.on_navigate = on_navigate
        self.store = store

        for button in document.query_all_by_test_id("btn-accept-bill"):
            button.add_event_listener("click", partial(self.handle_accept_submit, button))
        for button in document.query_all_by_test_id("btn-refuse-bill"):
            button.add_event_listener("click", partial(self.handle_refuse_submit, button))
        if storage is not None:
            Logout(document, storage, on_navigate)

    async def get_bills_all_users(self) -> List[Bill]:
        """All bills with display dates; statuses stay raw so they can be grouped"""
        if not self.store:
            return []
        snapshot = await self.store.bills().list()
        return display_bills(sort_bills(validate_bills(snapshot)), status_labels=False)

    def _comment_for(self, bill_id: str) -> str:
        for textarea in self.document.query_all_by_test_id("commentary2"):
            if textarea.get_attribute("data-bill-id") == bill_id:
                return textarea.value
        return ""

    def handle_accept_submit(self, button: Element, event: Event = None):
        return self.decide(button.get_attribute("data-bill-id"), BillStatus.ACCEPTED)

    def handle_refuse_submit(self, button: Element, event: Event = None):
        return self.decide(button.get_attribute("data-bill-id"), BillStatus.REFUSED)

    async def decide(self, bill_id: Optional[str], status: BillStatus) -> None:
        if not bill_id:
            logger.debug("Decision button without a bill id")
            return
        await self.update_bill(
            bill_id,
            {"status": status.value, "commentAdmin": self._comment_for(bill_id)},
        )

    async def update_bill(self, bill_id: str, changes: Dict[str, Any]) -> None:
        if not self.store:
            return
        try:
            await self.store.bills().update(data=changes, selector=bill_id)
        except Exception as e:
            logger.error(
                "Bill review failed: %s",
                e,
                extra={"bill_id": bill_id, "status_code": getattr(e, "status_code", None)},
            )
            return
        self.on_navigate(RoutePath.DASHBOARD)
