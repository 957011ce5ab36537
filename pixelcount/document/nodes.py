"""
Document Model — Pages and Visual Node Trees

Read-only view of a host-managed design document:
    Document → Pages → recursive Node trees

Design decisions:
    - `Node.children` is Optional: None means the node kind has no
      children attribute at all (text, shapes), [] means an empty
      container. Both are leaves.
    - Geometry is an explicit optional query (`get_geometry`) instead of
      attribute probing; a node missing either dimension, or with a
      non-numeric one, has none.
    - Pages may be unloaded. Their subtree is only readable after a
      PageLoader has attached it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterator, Optional, Union

Number = Union[int, float]


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class PageNotLoadedError(RuntimeError):
    """Raised when an unloaded page's subtree is read."""

    def __init__(self, page_id: str) -> None:
        super().__init__(f"Page {page_id!r} is not loaded")
        self.page_id = page_id


# ──────────────────────────────────────────────────────────────
# Data classes
# ──────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Geometry:
    """Width and height of a node with a visual geometry. Not validated."""

    width: Number
    height: Number

    @property
    def area(self) -> Number:
        return self.width * self.height


@dataclass
class Node:
    """
    A single element in a page's node tree.

    Attributes:
        node_id: Opaque host identifier.
        name: Layer name.
        node_type: Host node kind (FRAME, GROUP, RECTANGLE, TEXT, ...).
        children: Child nodes, or None if this kind cannot have children.
        width: Optional width; only meaningful together with height.
        height: Optional height.
    """

    node_id: str
    name: str = ""
    node_type: str = "NODE"
    children: Optional[list[Node]] = None
    width: Optional[Number] = None
    height: Optional[Number] = None

    def has_children_attribute(self) -> bool:
        return self.children is not None

    def is_leaf(self) -> bool:
        """A node is a leaf if it has no children attribute or an empty one."""
        return not self.children

    def get_geometry(self) -> Optional[Geometry]:
        """Return the node's geometry, or None unless both dimensions are numbers."""
        if not (_is_number(self.width) and _is_number(self.height)):
            return None
        return Geometry(self.width, self.height)

    def walk(self) -> Iterator[Node]:
        """Depth-first pre-order traversal of this node and its descendants."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            if node.children:
                stack.extend(reversed(node.children))

    def to_dict(self) -> dict:
        """
        Convert node to dictionary for JSON serialization.

        Keys for absent attributes are omitted so that the distinction
        between "no children attribute" and "empty children" survives.
        """
        data: dict = {"id": self.node_id, "name": self.name, "type": self.node_type}
        if self.width is not None:
            data["width"] = self.width
        if self.height is not None:
            data["height"] = self.height
        if self.children is not None:
            data["children"] = [child.to_dict() for child in self.children]
        return data

    @classmethod
    def from_dict(cls, data: dict) -> Node:
        """
        Create a Node from a dictionary.

        Raises:
            KeyError: If the node has no "id".
            TypeError: If "children" is present but not a list.
        """
        raw_children = data.get("children")
        children: Optional[list[Node]] = None
        if raw_children is not None:
            if not isinstance(raw_children, list):
                raise TypeError(
                    f"children of node {data.get('id')!r} must be a list, "
                    f"got {type(raw_children).__name__}"
                )
            children = [cls.from_dict(child) for child in raw_children]
        return cls(
            node_id=str(data["id"]),
            name=data.get("name", ""),
            node_type=data.get("type", "NODE"),
            children=children,
            width=data.get("width"),
            height=data.get("height"),
        )


@dataclass
class Page:
    """
    A top-level container of nodes. Created unloaded unless its subtree
    is supplied up front.

    Attributes:
        page_id: Host identifier.
        name: Page name.
        source: Where a deferred subtree lives (loader specific).
    """

    page_id: str
    name: str = ""
    source: Optional[str] = None
    _children: Optional[list[Node]] = field(default=None, repr=False)

    @classmethod
    def loaded(cls, page_id: str, name: str = "", children: Optional[list[Node]] = None) -> Page:
        page = cls(page_id=page_id, name=name)
        page.attach(children or [])
        return page

    @property
    def is_loaded(self) -> bool:
        return self._children is not None

    @property
    def children(self) -> list[Node]:
        if self._children is None:
            raise PageNotLoadedError(self.page_id)
        return self._children

    def attach(self, children: list[Node]) -> None:
        """Materialize the page subtree. Called by the host or a PageLoader."""
        self._children = list(children)

    def walk(self) -> Iterator[Node]:
        """Depth-first traversal of every node on the page."""
        for child in self.children:
            yield from child.walk()

    def find_all(self, predicate: Callable[[Node], bool]) -> list[Node]:
        """Return every descendant matching predicate, in depth-first order."""
        return [node for node in self.walk() if predicate(node)]

    def to_dict(self) -> dict:
        data: dict = {"id": self.page_id, "name": self.name}
        if self.is_loaded:
            data["children"] = [node.to_dict() for node in self.children]
        elif self.source is not None:
            data["source"] = self.source
        return data

    @classmethod
    def from_dict(cls, data: dict) -> Page:
        """
        Create a Page from a dictionary.

        Inline "children" produce a loaded page; otherwise the page stays
        unloaded and keeps its "source" reference.
        """
        page = cls(
            page_id=str(data["id"]),
            name=data.get("name", ""),
            source=data.get("source"),
        )
        if "children" in data:
            page.attach([Node.from_dict(node) for node in data["children"]])
        return page


@dataclass
class Document:
    """Ownership root: an ordered sequence of pages."""

    name: str = ""
    pages: list[Page] = field(default_factory=list)

    def concat(self, other: Document) -> Document:
        """Document over this document's pages followed by other's."""
        return Document(name=self.name, pages=[*self.pages, *other.pages])

    def to_dict(self) -> dict:
        return {"name": self.name, "pages": [page.to_dict() for page in self.pages]}

    @classmethod
    def from_dict(cls, data: dict) -> Document:
        return cls(
            name=data.get("name", ""),
            pages=[Page.from_dict(page) for page in data.get("pages", [])],
        )


def is_leaf(node: Node) -> bool:
    """Leaf predicate used by traversal."""
    return node.is_leaf()
