"""A minimal DOM-like element and click-event model.

Elements use the same attribute names as BeautifulSoup's ``Tag`` (``name``,
``attrs``, ``parent``, ``get``), so trees parsed with ``bs4`` can be walked by
:func:`find_anchor` exactly like trees built from :class:`Element`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

Listener = Callable[["ClickEvent"], Any]


@dataclass(slots=True)
class Document:
    """The document an element tree belongs to."""

    location: str


@dataclass(eq=False)
class Element:
    """An element node with attributes, children and click listeners."""

    name: str
    attrs: Dict[str, str] = field(default_factory=dict)
    parent: Optional["Element"] = field(default=None, repr=False)
    children: List["Element"] = field(default_factory=list, repr=False)
    document: Optional[Document] = field(default=None, repr=False)
    _listeners: Dict[str, List[Listener]] = field(
        default_factory=dict, init=False, repr=False
    )

    def get(self, attr: str, default: Optional[str] = None) -> Optional[str]:
        return self.attrs.get(attr, default)

    def append(self, child: "Element") -> "Element":
        child.parent = self
        self.children.append(child)
        return child

    @property
    def owner_document(self) -> Optional[Document]:
        node: Optional[Element] = self
        while node is not None:
            if node.document is not None:
                return node.document
            node = node.parent
        return None

    def add_event_listener(self, event_type: str, listener: Listener) -> None:
        listeners = self._listeners.setdefault(event_type, [])
        if listener not in listeners:
            listeners.append(listener)

    def remove_event_listener(self, event_type: str, listener: Listener) -> None:
        listeners = self._listeners.get(event_type, [])
        if listener in listeners:
            listeners.remove(listener)

    def dispatch_event(self, event: "ClickEvent") -> bool:
        """Dispatch ``event`` at this element and bubble it to the root.

        Returns False if a listener called ``prevent_default()``.
        """
        if event.target is None:
            event.target = self
        node: Optional[Element] = self
        while node is not None and not event.propagation_stopped:
            event.current_target = node
            for listener in list(node._listeners.get(event.type, ())):
                listener(event)
            node = node.parent
        event.current_target = None
        return not event.default_prevented


@dataclass
class ClickEvent:
    """A click as seen by listeners. ``which`` is 1, 2 or 3 for the left,
    middle and right mouse buttons."""

    target: Any = None
    ctrl_key: bool = False
    meta_key: bool = False
    which: int = 1
    default_prevented: bool = False
    current_target: Any = None
    type: str = "click"
    propagation_stopped: bool = field(default=False, repr=False)

    def prevent_default(self) -> None:
        self.default_prevented = True

    def stop_propagation(self) -> None:
        self.propagation_stopped = True


def find_anchor(element: Any, guard: Any = None) -> Any:
    """Return the nearest ``<a>`` at or above ``element``, stopping at ``guard``.

    The guard itself is never returned. Text nodes (``name`` of None) are
    skipped over.
    """
    while element is not None and element is not guard:
        name = getattr(element, "name", None)
        if isinstance(name, str) and name.upper() == "A":
            return element
        element = getattr(element, "parent", None)
    return None
