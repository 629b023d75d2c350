"""
Selections - positional bulk operations over document nodes and the
index-based data join.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional

from ._callbacks import adapt
from .document import Document

logger = logging.getLogger(__name__)

_UNSET = object()


class PendingNodeError(RuntimeError):
    """Raised when a host tree operation reaches an enter placeholder."""

    def __init__(self, operation: str, node: 'EnterNode'):
        super().__init__(
            f"Cannot {operation} on non-tree node: enter placeholder for datum "
            f"{node.datum!r} at index {node.index} has not been appended to the document"
        )
        self.operation = operation
        self.node = node


@dataclass
class EnterNode:
    """Placeholder for a datum that has no element in the document yet."""
    datum: Any
    index: int
    parent: Any = None
    entering: bool = True


def _value_function(value) -> Callable[[Any, int, Any], Any]:
    """Wrap a constant or a function of (datum, index, node) as fn(datum, index, node)."""
    if not callable(value):
        return lambda datum, index, node: value
    return adapt(value, 3)


class Selection:
    """
    Ordered set of document nodes supporting positional bulk operations.

    Every operation is applied independently to each entry of the node list;
    None entries are skipped and stay None in derived selections. Enter
    placeholders are never passed to the document: touching one raises
    PendingNodeError.
    """

    def __init__(self, nodes: List[Any], parents: List[Any], document: Document):
        self._nodes = nodes
        self._parents = parents
        self._document = document
        self._enter_nodes: Optional[List[EnterNode]] = None

    def _real(self, node, operation: str):
        if isinstance(node, EnterNode):
            raise PendingNodeError(operation, node)
        return node

    # -- traversal ---------------------------------------------------------

    def select(self, selector: str) -> 'Selection':
        """
        Select the first descendant matching selector for each node.

        Returns:
            Selection of the same length, parented by this selection's nodes
        """
        nodes = []
        for node in self._nodes:
            if node is None:
                nodes.append(None)
            else:
                nodes.append(self._document.query(self._real(node, "select"), selector))
        return Selection(nodes, self._nodes, self._document)

    def select_all(self, selector: str) -> 'Selection':
        """
        Select every descendant matching selector for each node.

        The per-node result groups are flattened in node order; the returned
        selection is parented by this selection's nodes.
        """
        nodes = []
        for node in self._nodes:
            if node is not None:
                nodes.extend(self._document.query_all(self._real(node, "select_all"), selector))
        return Selection(nodes, self._nodes, self._document)

    # -- mutation ----------------------------------------------------------

    def append(self, name: str) -> 'Selection':
        """
        Append a new element called name to each node.

        Enter placeholders produced by enter() append into their parent and
        pass their datum on to the new element. Children of bound nodes
        inherit the parent's datum.

        Returns:
            Selection of the new elements (None where the source entry was None)
        """
        document = self._document
        nodes = []
        for node in self._nodes:
            if node is None:
                nodes.append(None)
                continue
            if isinstance(node, EnterNode):
                if node.parent is None or isinstance(node.parent, EnterNode):
                    raise PendingNodeError("append", node)
                child = document.create_child(node.parent, name)
                document.set_datum(child, node.datum)
            else:
                child = document.create_child(node, name)
                if document.has_datum(node):
                    document.set_datum(child, document.get_datum(node))
            nodes.append(child)
        return Selection(nodes, self._nodes, document)

    def attr(self, name: str, value: Any = _UNSET):
        """
        Get or set an attribute.

        Args:
            name: Attribute name ('xlink:href' style prefixes are resolved)
            value: Constant, or function of (datum, index[, node]); None removes
                   the attribute. Omit to read the attribute of the first node.

        Returns:
            The attribute value (getter) or this selection (setter)

        Examples:
            bars.attr("width", 20)
            bars.attr("height", lambda d, i: d * 10)
            bars.attr("x", x_scale)
        """
        if value is _UNSET:
            return self.get_attr(name)
        self._apply("attr", value,
                    lambda node, result: self._document.set_attribute(node, name, result))
        return self

    def get_attr(self, name: str) -> Optional[str]:
        node = self._first("attr")
        return None if node is None else self._document.get_attribute(node, name)

    def style(self, name: str, value: Any = _UNSET):
        """Get or set an inline style property, same conventions as attr()."""
        if value is _UNSET:
            return self.get_style(name)
        self._apply("style", value,
                    lambda node, result: self._document.set_style(node, name, result))
        return self

    def get_style(self, name: str) -> Optional[str]:
        node = self._first("style")
        return None if node is None else self._document.get_style(node, name)

    def text(self, value: Any = _UNSET):
        """Get the first node's text content, or replace every node's content."""
        if value is _UNSET:
            return self.get_text()
        self._apply("text", value, self._document.set_text)
        return self

    def get_text(self) -> Optional[str]:
        node = self._first("text")
        return None if node is None else self._document.get_text(node)

    def _first(self, operation: str):
        if not self._nodes or self._nodes[0] is None:
            return None
        return self._real(self._nodes[0], operation)

    def _apply(self, operation: str, value: Any, write: Callable[[Any, Any], None]):
        function = _value_function(value)
        for index, node in enumerate(self._nodes):
            if node is None:
                continue
            node = self._real(node, operation)
            write(node, function(self._document.get_datum(node), index, node))

    # -- data join ---------------------------------------------------------

    def data(self, values: Iterable[Any]) -> 'Selection':
        """
        Join values to this selection's nodes by index.

        Position i keeps its node, rebound to values[i] (update), or, when no
        node exists there, holds an enter placeholder carrying values[i].
        Nodes past the end of values are kept with their previous datum.
        Matching is positional only: reordering values reassigns data to the
        existing nodes rather than tracking identity.

        Returns:
            Selection of length max(len(nodes), len(values)) with enter() available
        """
        values = list(values)
        document = self._document
        nodes = []
        for index in range(max(len(self._nodes), len(values))):
            node = self._nodes[index] if index < len(self._nodes) else None
            if index < len(values):
                if node is None or isinstance(node, EnterNode):
                    node = EnterNode(values[index], index)
                else:
                    document.set_datum(node, values[index])
            nodes.append(node)

        joined = Selection(nodes, self._parents, document)
        joined._enter_nodes = [node for node in nodes[:len(values)] if isinstance(node, EnterNode)]
        logger.debug("data join: %d nodes, %d values, %d entering",
                     len(self._nodes), len(values), len(joined._enter_nodes))
        return joined

    def enter(self) -> 'Selection':
        """
        Placeholders for data with no matching element.

        Each placeholder is attached to the parent at its index (the last
        parent when there are fewer parents than placeholders), so that
        enter().append(name) inserts into the right container.
        """
        if not self._enter_nodes:
            return Selection([], self._parents, self._document)
        nodes = [
            EnterNode(placeholder.datum, placeholder.index, self._parent_for(placeholder.index))
            for placeholder in self._enter_nodes
        ]
        return Selection(nodes, self._parents, self._document)

    def _parent_for(self, index: int):
        if not self._parents:
            return None
        return self._parents[min(index, len(self._parents) - 1)]

    def datum(self, value: Any = _UNSET):
        """Get the first node's datum, or bind value (constant or function) to every node."""
        if value is _UNSET:
            if not self._nodes or self._nodes[0] is None:
                return None
            node = self._nodes[0]
            if isinstance(node, EnterNode):
                return node.datum
            return self._document.get_datum(node)
        self._apply("datum", value, self._document.set_datum)
        return self

    # -- misc --------------------------------------------------------------

    def each(self, function: Callable) -> 'Selection':
        """Call function(datum, index[, node]) for every non-empty entry."""
        self._apply("each", function, lambda node, result: None)
        return self

    def call(self, function: Callable, *args, **kwargs) -> 'Selection':
        """Invoke function(self, *args, **kwargs) once and return this selection."""
        function(self, *args, **kwargs)
        return self

    def node(self):
        """First non-empty entry, or None."""
        for node in self._nodes:
            if node is not None:
                return node
        return None

    def nodes(self) -> List[Any]:
        return [node for node in self._nodes if node is not None]

    def size(self) -> int:
        return len(self.nodes())

    def empty(self) -> bool:
        return self.node() is None

    @property
    def document(self) -> Document:
        return self._document

    def __len__(self):
        return len(self._nodes)

    def __iter__(self):
        return iter(self._nodes)

    def __repr__(self):
        return f"<Selection {len(self._nodes)} nodes>"


def select(target=None, document: Optional[Document] = None) -> Selection:
    """
    Create a root selection of length 1.

    Args:
        target: CSS selector, element, Document, or None for the document root
        document: Document to query and to hold bound data (required unless
                  target is itself a Document)

    Returns:
        Selection with a single entry and a single empty parent

    Examples:
        doc = Document.create(DocumentConfig(width=320, height=240))
        svg = select(doc)
        chart = select("g.chart", doc)
    """
    if isinstance(target, Document):
        document, node = target, target.root
    elif document is None:
        raise ValueError("select() needs a document to resolve selectors and bind data")
    elif target is None:
        node = document.root
    elif isinstance(target, str):
        node = document.find(target)
    else:
        node = target
    return Selection([node], [None], document)

