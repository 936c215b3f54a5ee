"""Image preview widget shown when an employee opens a bill's proof."""

import logging
from html import escape
from typing import Protocol

from billed.ui.dom import Document

logger = logging.getLogger(__name__)

MODAL_ID = "modaleFile"


class ImagePreview(Protocol):
    def show(self, url: str) -> None: ...


class ModalImagePreview:
    """Renders the image into the page's file modal and opens it"""

    def __init__(self, document: Document, width: int = 500):
        self.document = document
        self.width = width

    def show(self, url: str) -> None:
        modal = self.document.get_element_by_id(MODAL_ID)
        if modal is None:
            logger.debug("No file modal on the current view")
            return
        body = modal.find(lambda el: "modal-body" in el.class_list)
        if body is None:
            return
        body.inner_html = (
            "<div style='text-align: center;' class=\"bill-proof-container\">"
            f'<img width="{self.width // 2}" src="{escape(url, quote=True)}" alt="Bill" />'
            "</div>"
        )
        # Bootstrap's modal('show')
        modal.class_list.add("show")
        modal.set_attribute("aria-hidden", "false")
