"""
In-memory document model.

Markup produced by the view renderer is parsed into an `Element` tree the
containers can query and bind listeners on. Coroutine listeners and
scheduled coroutines run as asyncio tasks tracked by the `Document`;
`await document.settle()` waits for all of them.

Events do not bubble: listeners fire only on the element an event is
dispatched to. Dispatching to an element that was detached by a later
mount is a no-op.
"""

import asyncio
import inspect
import logging
from dataclasses import dataclass
from html import escape
from html.parser import HTMLParser
from typing import Any, Awaitable, Callable, Dict, Iterator, List, Optional, Set, Union

from billed.schemas.bill import UploadedFile

logger = logging.getLogger(__name__)

VOID_TAGS = {
    "area", "base", "br", "col", "embed", "hr", "img", "input",
    "link", "meta", "source", "track", "wbr",
}

Listener = Callable[["Event"], Any]
Node = Union["Element", str]


@dataclass
class Event:
    """A dispatched UI event"""
    type: str
    target: Optional["Element"] = None
    default_prevented: bool = False

    def prevent_default(self) -> None:
        self.default_prevented = True


class ClassList:
    """Live view over an element's class attribute"""

    def __init__(self, element: "Element"):
        self._element = element

    def _names(self) -> List[str]:
        return self._element.get_attribute("class", "").split()

    def contains(self, name: str) -> bool:
        return name in self._names()

    def add(self, name: str) -> None:
        names = self._names()
        if name not in names:
            names.append(name)
            self._element.set_attribute("class", " ".join(names))

    def remove(self, name: str) -> None:
        names = [n for n in self._names() if n != name]
        self._element.set_attribute("class", " ".join(names))

    def __contains__(self, name: str) -> bool:
        return self.contains(name)

    def __iter__(self) -> Iterator[str]:
        return iter(self._names())


class Element:
    """A node of the document tree"""

    def __init__(self, tag: str, attributes: Optional[Dict[str, str]] = None, document: Optional["Document"] = None):
        self.tag = tag.lower()
        self.attributes: Dict[str, str] = dict(attributes or {})
        self.children: List[Node] = []
        self.parent: Optional["Element"] = None
        self.document = document
        self.files: List[UploadedFile] = []
        self._value: Optional[str] = None
        self._listeners: Dict[str, List[Listener]] = {}

    def __repr__(self) -> str:
        return f"<Element {self.tag} {self.attributes!r}>"

    # Attributes

    def get_attribute(self, name: str, default: Any = None) -> Any:
        return self.attributes.get(name, default)

    def set_attribute(self, name: str, value: str) -> None:
        self.attributes[name] = str(value)

    def remove_attribute(self, name: str) -> None:
        self.attributes.pop(name, None)

    def has_attribute(self, name: str) -> bool:
        return name in self.attributes

    @property
    def id(self) -> Optional[str]:
        return self.attributes.get("id")

    @property
    def test_id(self) -> Optional[str]:
        return self.attributes.get("data-testid")

    @property
    def class_list(self) -> ClassList:
        return ClassList(self)

    # Tree

    def append(self, node: Node) -> None:
        if isinstance(node, Element):
            node.parent = self
            node._adopt(self.document)
        self.children.append(node)

    def _adopt(self, document: Optional["Document"]) -> None:
        self.document = document
        for child in self.element_children:
            child._adopt(document)

    def _detach_children(self) -> None:
        for child in self.element_children:
            child.parent = None
        self.children = []

    @property
    def element_children(self) -> List["Element"]:
        return [c for c in self.children if isinstance(c, Element)]

    @property
    def is_connected(self) -> bool:
        node = self
        while node.parent is not None:
            node = node.parent
        return self.document is not None and node is self.document.body

    def iter(self) -> Iterator["Element"]:
        """Depth-first walk over descendants, excluding self"""
        for child in self.element_children:
            yield child
            yield from child.iter()

    def find(self, predicate: Callable[["Element"], bool]) -> Optional["Element"]:
        return next((el for el in self.iter() if predicate(el)), None)

    def find_all(self, predicate: Callable[["Element"], bool]) -> List["Element"]:
        return [el for el in self.iter() if predicate(el)]

    def get_element_by_id(self, element_id: str) -> Optional["Element"]:
        return self.find(lambda el: el.id == element_id)

    def get_by_test_id(self, test_id: str) -> Optional["Element"]:
        return self.find(lambda el: el.test_id == test_id)

    def query_all_by_test_id(self, test_id: str) -> List["Element"]:
        return self.find_all(lambda el: el.test_id == test_id)

    def get_by_tag(self, tag: str) -> List["Element"]:
        tag = tag.lower()
        return self.find_all(lambda el: el.tag == tag)

    # Content

    @property
    def text_content(self) -> str:
        parts = []
        for child in self.children:
            parts.append(child if isinstance(child, str) else child.text_content)
        return "".join(parts)

    @property
    def inner_html(self) -> str:
        return "".join(
            escape(c, quote=False) if isinstance(c, str) else c.outer_html for c in self.children
        )

    @inner_html.setter
    def inner_html(self, markup: str) -> None:
        self._detach_children()
        for node in parse_markup(markup, self.document):
            self.append(node)

    @property
    def outer_html(self) -> str:
        attrs = "".join(f' {k}="{escape(v, quote=True)}"' for k, v in self.attributes.items())
        if self.tag in VOID_TAGS:
            return f"<{self.tag}{attrs}>"
        return f"<{self.tag}{attrs}>{self.inner_html}</{self.tag}>"

    # Form controls

    @property
    def value(self) -> str:
        if self.tag == "input" and self.get_attribute("type") == "file":
            # Browsers expose a fake path for the first selected file
            return f"C:\\fakepath\\{self.files[0].name}" if self.files else ""
        if self._value is not None:
            return self._value
        if self.tag == "textarea":
            return self.text_content
        if self.tag == "select":
            options = self.get_by_tag("option")
            chosen = next((o for o in options if o.has_attribute("selected")), None)
            chosen = chosen or (options[0] if options else None)
            if chosen is None:
                return ""
            return chosen.get_attribute("value", chosen.text_content)
        return self.get_attribute("value", "")

    @value.setter
    def value(self, new_value: str) -> None:
        if self.tag == "input" and self.get_attribute("type") == "file":
            # Only clearing is allowed on a file input
            if new_value == "":
                self.files = []
            return
        self._value = new_value

    # Events

    def add_event_listener(self, event_type: str, listener: Listener) -> None:
        self._listeners.setdefault(event_type, []).append(listener)

    def remove_event_listener(self, event_type: str, listener: Listener) -> None:
        listeners = self._listeners.get(event_type, [])
        if listener in listeners:
            listeners.remove(listener)

    def dispatch_event(self, event: Event) -> bool:
        """
        Run listeners for the event.

        Returns:
            False when a listener called prevent_default()
        """
        if not self.is_connected:
            return True
        if event.target is None:
            event.target = self
        for listener in list(self._listeners.get(event.type, [])):
            result = listener(event)
            if inspect.isawaitable(result):
                self.document.schedule(result)
        return not event.default_prevented


class _TreeBuilder(HTMLParser):
    def __init__(self, document: Optional["Document"]):
        super().__init__(convert_charrefs=True)
        self.document = document
        self.roots: List[Node] = []
        self.stack: List[Element] = []

    def _add(self, node: Node) -> None:
        if self.stack:
            self.stack[-1].append(node)
        else:
            self.roots.append(node)

    def handle_starttag(self, tag, attrs):
        element = Element(tag, {k: (v if v is not None else "") for k, v in attrs}, self.document)
        self._add(element)
        if element.tag not in VOID_TAGS:
            self.stack.append(element)

    def handle_startendtag(self, tag, attrs):
        element = Element(tag, {k: (v if v is not None else "") for k, v in attrs}, self.document)
        self._add(element)

    def handle_endtag(self, tag):
        tag = tag.lower()
        for index in range(len(self.stack) - 1, -1, -1):
            if self.stack[index].tag == tag:
                del self.stack[index:]
                return

    def handle_data(self, data):
        if data.strip():
            self._add(data)


def parse_markup(markup: str, document: Optional["Document"] = None) -> List[Node]:
    builder = _TreeBuilder(document)
    builder.feed(markup or "")
    builder.close()
    return builder.roots


class Document:
    """
    Root of the element tree plus the tracker for UI tasks.

    Args:
        markup: initial body content, by default a single mount node
    """

    def __init__(self, markup: str = '<div id="root"></div>'):
        self.body = Element("body", document=self)
        self.body.inner_html = markup
        self._tasks: Set["asyncio.Task[Any]"] = set()

    def get_element_by_id(self, element_id: str) -> Optional[Element]:
        return self.body.get_element_by_id(element_id)

    def get_by_test_id(self, test_id: str) -> Optional[Element]:
        return self.body.get_by_test_id(test_id)

    def query_all_by_test_id(self, test_id: str) -> List[Element]:
        return self.body.query_all_by_test_id(test_id)

    def schedule(self, awaitable: Awaitable[Any]) -> "asyncio.Task[Any]":
        """Run a coroutine as a tracked task on the running loop"""
        task = asyncio.ensure_future(awaitable)
        self._tasks.add(task)
        task.add_done_callback(self._task_done)
        return task

    def _task_done(self, task: "asyncio.Task[Any]") -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Unhandled error in UI task", exc_info=exc)

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def settle(self) -> None:
        """Wait until no UI task is outstanding, including tasks spawned meanwhile"""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)


# User interactions


def click(element: Element) -> bool:
    return element.dispatch_event(Event("click"))


def submit(form: Element) -> bool:
    return form.dispatch_event(Event("submit"))


def change(element: Element, files: Optional[List[UploadedFile]] = None, value: Optional[str] = None) -> bool:
    """Simulate the user picking files or typing, then fire "change"."""
    if files is not None:
        element.files = list(files)
    if value is not None:
        element.value = value
    return element.dispatch_event(Event("change"))
