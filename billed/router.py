"""
View router.

Maps a logical path to a guarded view, owns the mount node and keeps the
navigation icons in sync with the active view. `Router.navigate` is the
navigation capability handed to every container.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Union

from billed.containers import Bills, Dashboard, Login, NewBill
from billed.containers.login import HOME_PATHS
from billed.core.exceptions import error_message
from billed.models.enums import RoutePath, UserRole, ViewName
from billed.services.session_storage import SessionStorage, load_session
from billed.services.store import Store
from billed.ui.dom import Document, Element
from billed.ui.preview import ImagePreview, ModalImagePreview
from billed.views import render

logger = logging.getLogger(__name__)

NAV_ICONS = ("layout-icon1", "layout-icon2")


@dataclass(frozen=True)
class Route:
    view: ViewName
    role: Optional[UserRole] = None
    icon: Optional[str] = None


ROUTES: Dict[RoutePath, Route] = {
    RoutePath.LOGIN: Route(ViewName.LOGIN),
    RoutePath.BILLS: Route(ViewName.BILLS, UserRole.EMPLOYEE, "layout-icon1"),
    RoutePath.NEW_BILL: Route(ViewName.NEW_BILL, UserRole.EMPLOYEE, "layout-icon2"),
    RoutePath.DASHBOARD: Route(ViewName.DASHBOARD, UserRole.ADMIN),
}


def resolve_path(path: Union[str, RoutePath]) -> Optional[RoutePath]:
    try:
        return RoutePath(path)
    except ValueError:
        return None


class Router:
    """
    Args:
        document: document holding the mount node
        storage: session storage the guard reads the Session Record from
        store: remote store client, None to run without one
        renderer: view renderer, render(view_name, **props) -> markup
        preview: image preview widget for bill proofs
        mount_id: id of the mount node
    """

    def __init__(
        self,
        document: Document,
        storage: SessionStorage,
        store: Optional[Store] = None,
        renderer: Callable[..., str] = render,
        preview: Optional[ImagePreview] = None,
        mount_id: str = "root",
    ):
        self.document = document
        self.storage = storage
        self.store = store
        self.renderer = renderer
        self.preview = preview or ModalImagePreview(document)
        self.mount_id = mount_id
        self.current_path: Optional[str] = None
        self._generation = 0
        self._builders: Dict[RoutePath, Callable[[], None]] = {
            RoutePath.LOGIN: self._show_login,
            RoutePath.BILLS: self._show_bills,
            RoutePath.NEW_BILL: self._show_new_bill,
            RoutePath.DASHBOARD: self._show_dashboard,
        }

    @property
    def root(self) -> Element:
        root = self.document.get_element_by_id(self.mount_id)
        if root is None:
            root = Element("div", {"id": self.mount_id}, self.document)
            self.document.body.append(root)
        return root

    def start(self, path: Optional[str] = None) -> None:
        """Show the requested view, or the signed-in user's home, or the login page"""
        session = load_session(self.storage)
        if session is None:
            self.navigate(RoutePath.LOGIN)
        elif path is None or resolve_path(path) == RoutePath.LOGIN:
            self.navigate(HOME_PATHS[session.role])
        else:
            self.navigate(path)

    def navigate(self, path: Union[str, RoutePath]) -> None:
        """Guarded transition to `path`. Never raises for unknown or forbidden paths."""
        self._generation += 1
        route_path = resolve_path(path)
        if route_path is None:
            logger.info("Unknown path %s", path, extra={"path": str(path)})
            self._mount(str(path), self.renderer(ViewName.NOT_FOUND, path=str(path)))
            return

        route = ROUTES[route_path]
        if route.role is not None:
            session = load_session(self.storage)
            if session is None or session.role != route.role:
                logger.info(
                    "Access to %s denied, showing login",
                    route_path.value,
                    extra={"path": route_path.value},
                )
                self._show_login()
                return

        self._builders[route_path]()

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    def _mount(self, path: str, markup: str) -> None:
        self.root.inner_html = markup
        self.current_path = path
        self._highlight(path)

    def _highlight(self, path: str) -> None:
        route_path = resolve_path(path)
        active_icon = ROUTES[route_path].icon if route_path is not None else None
        for icon_id in NAV_ICONS:
            icon = self.document.get_element_by_id(icon_id)
            if icon is None:
                continue
            if icon_id == active_icon:
                icon.class_list.add("active-icon")
            else:
                icon.class_list.remove("active-icon")

    def _show_login(self) -> None:
        self._mount(RoutePath.LOGIN.value, self.renderer(ViewName.LOGIN))
        Login(self.document, self.navigate, self.storage, self.store)

    def _show_bills(self) -> None:
        self._mount(RoutePath.BILLS.value, self.renderer(ViewName.BILLS, loading=True))
        container = Bills(self.document, self.navigate, self.store, self.storage, self.preview)
        self.document.schedule(self._load_bills(container, self._generation))

    async def _load_bills(self, container: Bills, generation: int) -> None:
        try:
            data = await container.get_bills()
        except Exception as e:
            logger.error(
                "Could not load bills: %s",
                e,
                extra={"path": RoutePath.BILLS.value, "status_code": getattr(e, "status_code", None)},
            )
            if self._is_current(generation):
                self._mount(RoutePath.BILLS.value, self.renderer(ViewName.BILLS, error=error_message(e)))
            return
        if not self._is_current(generation):
            logger.debug("Bills arrived after navigating away, dropped")
            return
        self._mount(RoutePath.BILLS.value, self.renderer(ViewName.BILLS, data=data))
        Bills(self.document, self.navigate, self.store, self.storage, self.preview)

    def _show_new_bill(self) -> None:
        self._mount(RoutePath.NEW_BILL.value, self.renderer(ViewName.NEW_BILL))
        NewBill(self.document, self.navigate, self.store, self.storage)

    def _show_dashboard(self) -> None:
        self._mount(RoutePath.DASHBOARD.value, self.renderer(ViewName.DASHBOARD, loading=True))
        container = Dashboard(self.document, self.navigate, self.store, self.storage)
        self.document.schedule(self._load_dashboard(container, self._generation))

    async def _load_dashboard(self, container: Dashboard, generation: int) -> None:
        try:
            data = await container.get_bills_all_users()
        except Exception as e:
            logger.error(
                "Could not load dashboard: %s",
                e,
                extra={"path": RoutePath.DASHBOARD.value, "status_code": getattr(e, "status_code", None)},
            )
            if self._is_current(generation):
                self._mount(RoutePath.DASHBOARD.value, self.renderer(ViewName.DASHBOARD, error=error_message(e)))
            return
        if not self._is_current(generation):
            logger.debug("Dashboard arrived after navigating away, dropped")
            return
        self._mount(RoutePath.DASHBOARD.value, self.renderer(ViewName.DASHBOARD, data=data))
        Dashboard(self.document, self.navigate, self.store, self.storage)
