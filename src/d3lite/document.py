"""
Host document - lxml-backed tree that selections operate on.
Handles element creation, CSS queries, bound data and SVG output.
"""

import logging
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

from cssselect import GenericTranslator
from lxml import etree
from lxml.cssselect import CSSSelector

# Optional imports for Jupyter notebook support
try:
    import ipywidgets as widgets
    from IPython.display import display
    JUPYTER_AVAILABLE = True
except ImportError:
    widgets = None
    display = None
    JUPYTER_AVAILABLE = False

logger = logging.getLogger(__name__)

SVG_NS = "http://www.w3.org/2000/svg"

NAMESPACES = {
    "svg": SVG_NS,
    "xhtml": "http://www.w3.org/1999/xhtml",
    "xlink": "http://www.w3.org/1999/xlink",
    "xml": "http://www.w3.org/XML/1998/namespace",
    "xmlns": "http://www.w3.org/2000/xmlns/",
}

_SELECTOR_PREFIX = "ns"


@dataclass
class DocumentConfig:
    """Shared configuration for new documents."""
    width: Optional[int] = None
    height: Optional[int] = None
    namespace: Optional[str] = SVG_NS
    root: str = "svg"
    namespaces: Dict[str, str] = field(default_factory=dict)


def _build_root_attributes(config: DocumentConfig, **kwargs) -> Dict[str, Any]:
    """Build root attribute dictionary from DocumentConfig and additional kwargs."""
    attributes = {}
    if config.width is not None:
        attributes['width'] = config.width
    if config.height is not None:
        attributes['height'] = config.height
    attributes.update(kwargs)
    return attributes


def format_value(value: Any) -> str:
    """Render a Python value the way it should appear in markup."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _split_name(name: str, prefixes: Dict[str, str]) -> Tuple[Optional[str], str]:
    prefix, sep, local = name.partition(":")
    if not sep:
        return None, name
    if prefix not in prefixes:
        raise ValueError(f"Unknown namespace prefix '{prefix}' in '{name}'; "
                         f"known prefixes: {', '.join(sorted(prefixes))}. "
                         f"Register it with DocumentConfig(namespaces={{'{prefix}': uri}})")
    return prefixes[prefix], local


class _DefaultNamespaceTranslator(GenericTranslator):
    """Ensure bare element selectors target the document namespace."""

    def xpath_element(self, selector):
        if selector.namespace is None and selector.element is not None:
            selector = selector.__class__(_SELECTOR_PREFIX, selector.element)
        return super().xpath_element(selector)


_NAMESPACE_TRANSLATOR = _DefaultNamespaceTranslator()


@lru_cache(maxsize=256)
def _compile_selector(css: str, namespace: Optional[str]) -> CSSSelector:
    if namespace is None:
        return CSSSelector(css)
    return CSSSelector(css, translator=_NAMESPACE_TRANSLATOR,
                       namespaces={_SELECTOR_PREFIX: namespace})


def _is_element(node) -> bool:
    # Comments and processing instructions have a callable tag
    return isinstance(node, etree._Element) and isinstance(node.tag, str)


def _parse_style(declaration: Optional[str]) -> Dict[str, str]:
    properties = {}
    for pair in (declaration or "").split(";"):
        if pair.strip():
            key, _, val = pair.partition(":")
            properties[key.strip()] = val.strip()
    return properties


class Document:
    """
    Host tree for selections.

    Wraps an lxml element tree and supplies the minimal capability set that
    selections rely on: descendant queries, namespaced element creation,
    attribute/style/text access and a per-node bound datum.
    """

    def __init__(self, root, config: Optional[DocumentConfig] = None):
        """
        Wrap an existing lxml root element.

        Args:
            root: lxml element acting as the document root
            config: Document configuration (namespace is taken from the root when omitted)
        """
        if not _is_element(root):
            raise TypeError(f"Document root must be an lxml element, got {type(root).__name__}")
        self.root = root
        if config is None:
            namespace = etree.QName(root).namespace
            prefixes = {prefix: uri for prefix, uri in root.nsmap.items() if prefix}
            config = DocumentConfig(namespace=namespace, root=etree.QName(root).localname,
                                    namespaces=prefixes)
        self.config = config
        self._prefixes = {**NAMESPACES, **config.namespaces}
        # id -> (node, datum); holding the node keeps its lxml proxy (and id) alive.
        # Entries live until set_text() drops the subtree that owns them.
        self._data: Dict[int, Tuple[Any, Any]] = {}

    @classmethod
    def create(cls, config: Optional[DocumentConfig] = None, **attrs) -> 'Document':
        """
        Create a document with a single empty root element.

        Args:
            config: Document configuration (default: 'svg' root in the SVG namespace)
            **attrs: Additional root attributes

        Returns:
            New Document

        Examples:
            doc = Document.create(DocumentConfig(width=320, height=240))
            doc = Document.create(viewBox="0 0 100 100")
        """
        config = config or DocumentConfig()
        if config.namespace is None:
            root = etree.Element(config.root)
        else:
            root = etree.Element(f"{{{config.namespace}}}{config.root}",
                                 nsmap={None: config.namespace})
        document = cls(root, config)
        for name, value in _build_root_attributes(config, **attrs).items():
            document.set_attribute(root, name, value)
        logger.debug("created <%s> document with attributes %s", config.root, sorted(attrs))
        return document

    @classmethod
    def from_string(cls, markup: str) -> 'Document':
        """Parse markup text into a document."""
        try:
            root = etree.fromstring(markup.encode("utf-8"))
        except etree.XMLSyntaxError as e:
            raise ValueError(f"Invalid document markup: {e}")
        logger.debug("parsed document with root %s", root.tag)
        return cls(root)

    @property
    def namespace(self) -> Optional[str]:
        return self.config.namespace

    def select(self, selector):
        """Select the first matching element (or the root for None) as a Selection."""
        from .selection import select
        return select(selector, self)

    # -- queries -----------------------------------------------------------

    def find(self, selector: str):
        """Return the first element in the whole document (root included) matching selector."""
        compiled = _compile_selector(selector, self.namespace)
        for match in compiled(self.root):
            return match
        return None

    def query(self, node, selector: str):
        """Return the first descendant of node matching selector, or None."""
        for match in self._matches(node, selector):
            return match
        return None

    def query_all(self, node, selector: str) -> List[Any]:
        """Return every descendant of node matching selector in document order."""
        return list(self._matches(node, selector))

    def _matches(self, node, selector: str) -> Iterator[Any]:
        if not _is_element(node):
            return iter(())
        compiled = _compile_selector(selector, self.namespace)
        return (match for match in compiled(node) if match is not node)

    # -- mutation ----------------------------------------------------------

    def create_child(self, parent, name: str):
        """Create a new element called name as the last child of parent."""
        namespace, local = _split_name(name, self._prefixes)
        if namespace is None:
            namespace = self.namespace
        tag = local if namespace is None else f"{{{namespace}}}{local}"
        return etree.SubElement(parent, tag)

    def get_attribute(self, node, name: str) -> Optional[str]:
        return node.get(self._attribute_key(name))

    def set_attribute(self, node, name: str, value: Any):
        """Set an attribute; None removes it."""
        key = self._attribute_key(name)
        if value is None:
            node.attrib.pop(key, None)
        else:
            node.set(key, format_value(value))

    def _attribute_key(self, name: str) -> str:
        namespace, local = _split_name(name, self._prefixes)
        if namespace is None:
            return name
        return f"{{{namespace}}}{local}"

    def get_style(self, node, name: str) -> Optional[str]:
        if not _is_element(node):
            return None
        return _parse_style(node.get("style")).get(name)

    def set_style(self, node, name: str, value: Any):
        """Merge one property into the inline style; nodes without styles are skipped."""
        if not _is_element(node):
            return
        properties = _parse_style(node.get("style"))
        if value is None:
            properties.pop(name, None)
        else:
            properties[name] = format_value(value)
        if properties:
            node.set("style", ";".join(f"{k}:{v}" for k, v in properties.items()))
        else:
            node.attrib.pop("style", None)

    def get_text(self, node) -> str:
        return "".join(node.itertext())

    def set_text(self, node, value: Any):
        """Replace all content of node with a single text value."""
        for child in list(node):
            node.remove(child)
            self._release(child)
        node.text = None if value is None else format_value(value)

    # -- bound data --------------------------------------------------------

    def has_datum(self, node) -> bool:
        binding = self._data.get(id(node))
        return binding is not None and binding[0] is node

    def get_datum(self, node):
        binding = self._data.get(id(node))
        if binding is not None and binding[0] is node:
            return binding[1]
        return None

    def set_datum(self, node, value):
        self._data[id(node)] = (node, value)

    def _release(self, node):
        # Bindings hold their node; drop them once the subtree leaves the document
        for descendant in node.iter():
            binding = self._data.get(id(descendant))
            if binding is not None and binding[0] is descendant:
                del self._data[id(descendant)]

    # -- output ------------------------------------------------------------

    def to_string(self, pretty: bool = False) -> str:
        """Serialize the document to markup text."""
        return etree.tostring(self.root, encoding="unicode", pretty_print=pretty)

    def save_svg(self, filepath) -> Path:
        """Write the serialized document to filepath, creating missing directories, and return the path."""
        target = Path(filepath).expanduser()
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(self.to_string(), encoding="utf-8")
        except OSError as e:
            raise RuntimeError(f"Could not write document to {target}: {e}")
        logger.debug("wrote %d bytes of markup to %s", target.stat().st_size, target)
        return target

    def show(self):
        """
        Display the document using ipywidgets HTML (if available).

        Returns:
            ipywidgets.HTML widget if Jupyter is available, otherwise None
        """
        if not JUPYTER_AVAILABLE:
            logger.info("Jupyter not available. Document rendered (%d chars) but cannot display.",
                        len(self.to_string()))
            return None

        widget = widgets.HTML(value=f'<div style="margin: 10px 0;">{self.to_string()}</div>')
        display(widget)
        return widget

    def _repr_html_(self):
        """Enable direct display in Jupyter notebooks via display()."""
        return self.to_string()

    def __repr__(self):
        return f"<Document <{etree.QName(self.root).localname}>>"
