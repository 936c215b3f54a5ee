"""
Employee bill list container.

Fetches the bills through the store, turns them into display records and
wires the list affordances (new bill button, proof preview icons).
"""

import logging
from functools import partial
from typing import Any, Callable, Iterable, List, Optional

from pydantic import ValidationError

from billed.containers.logout import Logout
from billed.models.enums import RoutePath
from billed.schemas.bill import Bill
from billed.services.session_storage import SessionStorage
from billed.services.store import Store
from billed.ui.dom import Document, Element, Event
from billed.ui.preview import ImagePreview, ModalImagePreview
from billed.utils.format import format_date, format_status, sort_bills

logger = logging.getLogger(__name__)


def validate_bills(snapshot: Iterable[Any]) -> List[Bill]:
    """
    Turn raw store records into bills.

    A record with unexpected field values is kept as is (unvalidated) so
    the list stays complete; only values that are not records at all are
    dropped.
    """
    bills = []
    for doc in snapshot or []:
        if isinstance(doc, Bill):
            bills.append(doc)
            continue
        if not isinstance(doc, dict):
            logger.warning("Skipping bill record that is not an object", extra={"bill": repr(doc)})
            continue
        try:
            bills.append(Bill.model_validate(doc))
        except ValidationError as e:
            logger.warning("Keeping unvalidated bill record: %s", e, extra={"bill": doc})
            bills.append(Bill.model_construct(**doc))
    return bills


def display_bills(bills: Iterable[Bill], status_labels: bool = True) -> List[Bill]:
    """
    Copies of the bills with a display date (and status label).

    A bill whose date does not parse keeps its original date string; the
    failure is logged with the bill and the rest of the list is unaffected.
    """
    displayed = []
    for bill in bills:
        try:
            date = format_date(bill.date)
        except ValueError as e:
            logger.warning(
                "%s for bill %s", e, bill.id,
                extra={"bill": bill.model_dump(by_alias=True, warnings=False)},
            )
            date = bill.date
        status = format_status(bill.status) if status_labels else bill.status
        displayed.append(bill.model_copy(update={"date": date, "status": status}))
    return displayed


class Bills:
    def __init__(
        self,
        document: Document,
        on_navigate: Callable[[str], None],
        store: Optional[Store] = None,
        storage: Optional[SessionStorage] = None,
        preview: Optional[ImagePreview] = None,
    ):
        self.document = document
        self.on_navigate = on_navigate
        self.store = store
        self.preview = preview or ModalImagePreview(document)

        button_new_bill = document.get_by_test_id("btn-new-bill")
        if button_new_bill is not None:
            button_new_bill.add_event_listener("click", self.handle_click_new_bill)
        for icon in document.query_all_by_test_id("icon-eye"):
            icon.add_event_listener("click", partial(self.handle_click_icon_eye, icon))
        if storage is not None:
            Logout(document, storage, on_navigate)

    def handle_click_new_bill(self, event: Event = None) -> None:
        self.on_navigate(RoutePath.NEW_BILL)

    def handle_click_icon_eye(self, icon: Element, event: Event = None) -> None:
        bill_url = icon.get_attribute("data-bill-url")
        if not bill_url:
            logger.debug("Bill has no proof to preview")
            return
        self.preview.show(bill_url)

    async def get_bills(self) -> List[Bill]:
        """
        Bills of the signed-in employee, newest first, ready for display.

        Returns an empty list when no store is configured. A rejected list
        call propagates as StoreError.
        """
        if not self.store:
            return []
        snapshot = await self.store.bills().list()
        return display_bills(sort_bills(validate_bills(snapshot)))
