"""
New bill form container.

Per form instance:

    IDLE -> FILE_SELECTED -> UPLOADING -> UPLOAD_FAILED | UPLOAD_SUCCEEDED
         -> SUBMITTING -> SUBMIT_FAILED | SUBMITTED (navigates to the list)

The proof file is uploaded as soon as it is picked; submitting the form
then updates the draft created by the upload. A submit made while the
upload is in flight waits for it, and once SUBMITTING the upload phase
can no longer move the state. Store failures are logged and leave the
form populated.
"""

import asyncio
import enum
import logging
import math
from typing import Callable, Collection, Optional, Union

from billed.config import settings
from billed.containers.logout import Logout
from billed.models.enums import BillStatus, RoutePath
from billed.schemas.bill import Bill, FilePayload, FileUploadResult, UploadedFile
from billed.services.session_storage import SessionStorage, session_email
from billed.services.store import Store
from billed.ui.dom import Document, Element, Event

logger = logging.getLogger(__name__)


class FormState(str, enum.Enum):
    IDLE = "idle"
    FILE_SELECTED = "file_selected"
    UPLOADING = "uploading"
    UPLOAD_FAILED = "upload_failed"
    UPLOAD_SUCCEEDED = "upload_succeeded"
    SUBMITTING = "submitting"
    SUBMIT_FAILED = "submit_failed"
    SUBMITTED = "submitted"


def parse_number(text: Optional[str]) -> Optional[Union[int, float]]:
    """Numeric form input as int or float; None when blank or not a finite number"""
    text = (text or "").strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def file_name_of(file: UploadedFile) -> str:
    return file.name.replace("\\", "/").rsplit("/", 1)[-1]


class NewBill:
    def __init__(
        self,
        document: Document,
        on_navigate: Callable[[str], None],
        store: Optional[Store] = None,
        storage: Optional[SessionStorage] = None,
        accepted_types: Optional[Collection[str]] = None,
    ):
        self.document = document
        self.on_navigate = on_navigate
        self.store = store
        self.storage = storage
        self.accepted_types = {t.lower() for t in (accepted_types or settings.ACCEPTED_FILE_TYPES)}

        self.file_url: Optional[str] = None
        self.file_name: Optional[str] = None
        self.bill_id: Optional[str] = None
        self.state = FormState.IDLE
        self._selected: Optional[UploadedFile] = None
        self._upload: Optional["asyncio.Task[None]"] = None

        form = document.get_by_test_id("form-new-bill")
        if form is not None:
            form.add_event_listener("submit", self.handle_submit)
        file_input = document.get_by_test_id("file")
        if file_input is not None:
            file_input.add_event_listener("change", self.handle_change_file)
        if storage is not None:
            Logout(document, storage, on_navigate)

    @property
    def email(self) -> Optional[str]:
        return session_email(self.storage) if self.storage is not None else None

    def is_accepted(self, file: UploadedFile) -> bool:
        return (file.content_type or "").lower() in self.accepted_types

    def _advance(self, state: FormState) -> None:
        """Move through the upload phase; a submission in progress keeps its state"""
        if self.state != FormState.SUBMITTING:
            self.state = state

    def _forget_file(self) -> None:
        self._selected = None
        self.file_url = None
        self.file_name = None
        self.bill_id = None

    def handle_change_file(self, event: Event) -> None:
        event.prevent_default()
        file_input = event.target
        file = file_input.files[0] if file_input.files else None
        if file is None:
            return
        # A new pick replaces whatever the previous one uploaded
        self._forget_file()
        if not self.is_accepted(file):
            file_input.value = ""
            self._advance(FormState.IDLE)
            return
        self._advance(FormState.FILE_SELECTED)
        if self.store:
            self._upload = self.document.schedule(self.upload_file(file))

    async def upload_file(self, file: UploadedFile) -> None:
        """
        Create the draft with its proof; on failure the file fields stay empty.

        Only the latest selected file counts: the result of an upload
        superseded by another pick (or a rejected file) is dropped.
        """
        if not self.store:
            return
        self._selected = file
        self._advance(FormState.UPLOADING)
        payload = FilePayload(file=file, email=self.email)
        try:
            result = await self.store.bills().create(data=payload, headers={"noContentType": True})
            uploaded = FileUploadResult.model_validate(result or {})
        except Exception as e:
            logger.error(
                "Bill file upload failed: %s",
                e,
                extra={"file_name": file.name, "status_code": getattr(e, "status_code", None)},
            )
            if file is self._selected:
                self._advance(FormState.UPLOAD_FAILED)
            return

        if file is not self._selected:
            logger.info(
                "Upload of %s superseded, result dropped", file.name, extra={"bill_id": uploaded.key}
            )
            return
        self.bill_id = uploaded.key
        self.file_url = uploaded.file_url
        self.file_name = file_name_of(file)
        self._advance(FormState.UPLOAD_SUCCEEDED)

    def read_form(self, form: Element) -> Bill:
        def field(test_id: str) -> str:
            element = form.get_by_test_id(test_id)
            return element.value if element is not None else ""

        pct = parse_number(field("pct"))
        return Bill(
            email=self.email,
            type=field("expense-type"),
            name=field("expense-name"),
            amount=parse_number(field("amount")),
            date=field("datepicker"),
            vat=field("vat"),
            pct=settings.DEFAULT_PCT if pct is None else pct,
            commentary=field("commentary"),
            file_url=self.file_url,
            file_name=self.file_name,
            status=BillStatus.PENDING.value,
        )

    def handle_submit(self, event: Event):
        event.prevent_default()
        if self.state == FormState.SUBMITTING:
            logger.info("Submission already in progress, ignoring")
            return None
        bill = self.read_form(event.target)
        if self.store:
            # Marked before the update task starts so a second submit is ignored
            self.state = FormState.SUBMITTING
        return self.update_bill(bill)

    async def update_bill(self, bill: Bill) -> None:
        """Send the bill to the store, then show the list. No store: no-op."""
        if not self.store:
            return
        self.state = FormState.SUBMITTING
        button = self.document.get_by_test_id("btn-send-bill")
        if button is not None:
            button.set_attribute("disabled", "")
        try:
            if self._upload is not None and not self._upload.done():
                logger.info("Waiting for the proof upload before submitting")
                await self._upload
                bill = bill.model_copy(update={"file_url": self.file_url, "file_name": self.file_name})
            await self.store.bills().update(data=bill.to_payload(), selector=self.bill_id)
        except Exception as e:
            logger.error(
                "Bill submission failed: %s",
                e,
                extra={"bill_id": self.bill_id, "status_code": getattr(e, "status_code", None)},
            )
            self.state = FormState.SUBMIT_FAILED
            return
        finally:
            if button is not None:
                button.remove_attribute("disabled")

        self.state = FormState.SUBMITTED
        self.on_navigate(RoutePath.BILLS)
