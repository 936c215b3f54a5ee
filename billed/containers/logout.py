"""Sign-out affordance of the vertical navigation bar"""

from typing import Callable

from billed.models.enums import RoutePath
from billed.services.session_storage import SessionStorage
from billed.ui.dom import Document, Event


class Logout:
    def __init__(self, document: Document, storage: SessionStorage, on_navigate: Callable[[str], None]):
        self.storage = storage
        self.on_navigate = on_navigate
        button = document.get_element_by_id("layout-disconnect")
        if button is not None:
            button.add_event_listener("click", self.handle_click)

    def handle_click(self, event: Event = None) -> None:
        self.storage.clear()
        self.on_navigate(RoutePath.LOGIN)
