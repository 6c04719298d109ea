"""Read-only navigation over a parsed HTML document.

The extractors only talk to :class:`Node`, never to BeautifulSoup directly.
Whitespace-only text nodes and comments are treated as formatting: they are
skipped by sibling/child traversal and by :meth:`Node.first_text`.
"""

from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Tuple

from bs4 import BeautifulSoup
from bs4.element import NavigableString, PageElement, PreformattedString, Tag

from flipkart_scraper.config import HTML_PARSER

__all__ = ["Node", "ClassSelector", "parse_document"]


def _is_content(element: Optional[PageElement]) -> bool:
    """True for tags and non-blank text nodes."""
    if element is None:
        return False
    if isinstance(element, Tag):
        return True
    if isinstance(element, PreformattedString):
        return False
    if isinstance(element, NavigableString):
        return bool(element.strip())
    return False


@dataclass(frozen=True)
class ClassSelector:
    """Selector for "elements carrying all of these classes".

    Built from class lists discovered at run time. An empty selector is a
    valid value that matches nothing.
    """

    classes: Tuple[str, ...] = ()

    @classmethod
    def from_classes(cls, classes: Optional[Iterable[str]]) -> "ClassSelector":
        if not classes:
            return cls()
        if isinstance(classes, str):
            classes = classes.split()
        seen: List[str] = []
        for name in classes:
            name = (name or "").strip()
            if name and name not in seen:
                seen.append(name)
        return cls(tuple(seen))

    @property
    def is_empty(self) -> bool:
        return not self.classes

    @property
    def css(self) -> str:
        return "".join(f".{name}" for name in self.classes)

    def matches(self, node: "Node") -> bool:
        if self.is_empty or not node.is_element:
            return False
        own = set(node.classes)
        return all(name in own for name in self.classes)

    def __str__(self) -> str:
        return self.css or "<empty>"


class Node:
    """A tag or text node of a parsed document."""

    __slots__ = ("_el",)

    def __init__(self, element: PageElement):
        self._el = element

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Node) and other._el is self._el

    def __hash__(self) -> int:
        return id(self._el)

    def __repr__(self) -> str:
        if self.is_element:
            return f"<Node {self.tag_name} {ClassSelector.from_classes(self.classes)}>"
        return f"<Node text {self.text[:30]!r}>"

    @staticmethod
    def _wrap(element: Optional[PageElement]) -> Optional["Node"]:
        return Node(element) if element is not None else None

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------

    @property
    def is_element(self) -> bool:
        return isinstance(self._el, Tag)

    @property
    def is_text(self) -> bool:
        return isinstance(self._el, NavigableString)

    @property
    def tag_name(self) -> Optional[str]:
        return self._el.name if self.is_element else None

    @property
    def text(self) -> str:
        """Raw content of a text node ("" for elements)."""
        return str(self._el) if self.is_text else ""

    # ------------------------------------------------------------------
    # Querying
    # ------------------------------------------------------------------

    def select(self, selector: str) -> List["Node"]:
        """Descendant elements matching a CSS selector, in document order."""
        if not self.is_element:
            return []
        return [Node(el) for el in self._el.select(selector)]

    def select_one(self, selector: str) -> Optional["Node"]:
        if not self.is_element:
            return None
        return self._wrap(self._el.select_one(selector))

    def select_matching(self, selector: ClassSelector) -> List["Node"]:
        """Descendant elements carrying every class of ``selector``."""
        if selector.is_empty or not self.is_element:
            return []
        return [
            Node(el)
            for el in self._el.find_all(True)
            if selector.matches(Node(el))
        ]

    def find_by_id(self, element_id: str) -> Optional["Node"]:
        if not self.is_element:
            return None
        return self._wrap(self._el.find(id=element_id))

    def matches(self, selector: ClassSelector) -> bool:
        return selector.matches(self)

    # ------------------------------------------------------------------
    # Attributes
    # ------------------------------------------------------------------

    def attr(self, name: str) -> Optional[str]:
        if not self.is_element:
            return None
        value = self._el.get(name)
        if value is None:
            return None
        if isinstance(value, list):
            return " ".join(value)
        return str(value)

    @property
    def classes(self) -> Tuple[str, ...]:
        if not self.is_element:
            return ()
        value = self._el.get("class") or []
        if isinstance(value, str):
            value = value.split()
        return tuple(value)

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    @property
    def parent(self) -> Optional["Node"]:
        return self._wrap(self._el.parent)

    @property
    def children(self) -> List["Node"]:
        if not self.is_element:
            return []
        return [Node(el) for el in self._el.children if _is_content(el)]

    @property
    def element_children(self) -> List["Node"]:
        return [child for child in self.children if child.is_element]

    @property
    def first_child(self) -> Optional["Node"]:
        children = self.children
        return children[0] if children else None

    @property
    def last_child(self) -> Optional["Node"]:
        children = self.children
        return children[-1] if children else None

    @property
    def next_sibling(self) -> Optional["Node"]:
        sibling = self._el.next_sibling
        while sibling is not None and not _is_content(sibling):
            sibling = sibling.next_sibling
        return self._wrap(sibling)

    @property
    def previous_sibling(self) -> Optional["Node"]:
        sibling = self._el.previous_sibling
        while sibling is not None and not _is_content(sibling):
            sibling = sibling.previous_sibling
        return self._wrap(sibling)

    def next_element_siblings(self) -> Iterator["Node"]:
        """Following sibling elements, nearest first."""
        sibling = self.next_sibling
        while sibling is not None:
            if sibling.is_element:
                yield sibling
            sibling = sibling.next_sibling

    def ancestors(self) -> Iterator["Node"]:
        node = self.parent
        while node is not None:
            yield node
            node = node.parent

    # ------------------------------------------------------------------
    # Text
    # ------------------------------------------------------------------

    def texts(self) -> Iterator[str]:
        """Non-blank text nodes below this node, stripped, in document order."""
        if self.is_text:
            if self.text.strip():
                yield self.text.strip()
            return
        for string in self._el.strings:
            string = string.strip()
            if string:
                yield string

    def first_text(self) -> str:
        """The leading text token: first non-blank text node, or ""."""
        return next(self.texts(), "")

    def own_text(self) -> str:
        """Direct text children only, stripped and joined with spaces."""
        if self.is_text:
            return self.text.strip()
        return " ".join(child.text.strip() for child in self.children if child.is_text)

    def all_text(self) -> str:
        """All descendant text joined, untrimmed."""
        if self.is_text:
            return self.text
        return self._el.get_text()


def parse_document(html: str) -> Node:
    """Parse an HTML body and return its root node."""
    return Node(BeautifulSoup(html, HTML_PARSER))
