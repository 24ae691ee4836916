"""Parse nodes: the reader's view of a tokenized document.

Text is tokenized by PyYAML (``yaml.compose``) into a node graph; JSON is a
subset of the YAML flow syntax and goes through the same path. Each graph
node is wrapped in one of three classes:

* :class:`MapNode` -- an insertion-ordered mapping of key to child node;
* :class:`ListNode` -- an ordered sequence of child nodes;
* :class:`ValueNode` -- a scalar, keeping its raw text and whether it was
  quoted, so the Any-value rules can tell ``"5"`` from ``5``.

Nodes can also be built from plain Python data with :func:`from_python`,
for callers that already hold a decoded document.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Any, Callable, Iterator, Optional, TypeVar

import yaml

from oasmodel.any import AnyArray, AnyObject, OpenApiAny, any_from_scalar
from oasmodel.exceptions import DocumentParseError, ReferenceSyntaxError

if TYPE_CHECKING:
    from oasmodel.readers.context import ParsingContext
    from oasmodel.schema import JsonSchema

T = TypeVar("T")

_TRUE = ("true", "True", "TRUE")
_FALSE = ("false", "False", "FALSE")


class ParseNode:
    """Base class of the three node kinds."""

    kind = "node"

    def __init__(self, line: Optional[int] = None) -> None:
        self.line = line

    def create_any(self, schema: Optional["JsonSchema"] = None) -> OpenApiAny:
        raise NotImplementedError

    def to_python(self) -> Any:
        raise NotImplementedError


class ValueNode(ParseNode):
    """A scalar with its raw text."""

    kind = "scalar"

    def __init__(self, raw: str, quoted: bool = False, line: Optional[int] = None) -> None:
        super().__init__(line)
        self.raw = raw
        self.quoted = quoted

    def scalar(self) -> str:
        return self.raw

    def create_any(self, schema: Optional["JsonSchema"] = None) -> OpenApiAny:
        return any_from_scalar(self.raw, self.quoted, schema)

    def to_python(self) -> Any:
        return any_from_scalar(self.raw, self.quoted).to_python()

    def as_bool(self, field: str, context: "ParsingContext") -> bool:
        """Parse a boolean field.

        Raises:
            DocumentParseError: If the text is not ``true`` or ``false``.
        """
        if self.raw in _TRUE:
            return True
        if self.raw in _FALSE:
            return False
        raise context.error("Expected a boolean", field=field, raw=self.raw)

    def __repr__(self) -> str:
        return f"ValueNode({self.raw!r}, quoted={self.quoted})"


class ListNode(ParseNode):
    kind = "sequence"

    def __init__(self, items: list[ParseNode], line: Optional[int] = None) -> None:
        super().__init__(line)
        self.items = items

    def __iter__(self) -> Iterator[ParseNode]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def create_list(
        self, loader: Callable[[ParseNode, "ParsingContext"], T], context: "ParsingContext"
    ) -> list[T]:
        result = []
        for index, item in enumerate(self.items):
            with context.location(str(index)):
                result.append(loader(item, context))
        return result

    def create_simple_list(self, field: str, context: "ParsingContext") -> list[str]:
        result = []
        for index, item in enumerate(self.items):
            with context.location(str(index)):
                result.append(expect_scalar(item, field, context))
        return result

    def create_any(self, schema: Optional["JsonSchema"] = None) -> OpenApiAny:
        items_schema = schema.items if schema is not None else None
        return AnyArray(item.create_any(items_schema) for item in self.items)

    def to_python(self) -> list[Any]:
        return [item.to_python() for item in self.items]


class MapNode(ParseNode):
    kind = "mapping"

    def __init__(self, entries: dict[str, ParseNode], line: Optional[int] = None) -> None:
        super().__init__(line)
        self.entries = entries

    def __contains__(self, key: object) -> bool:
        return key in self.entries

    def __getitem__(self, key: str) -> ParseNode:
        return self.entries[key]

    def __len__(self) -> int:
        return len(self.entries)

    def get(self, key: str) -> Optional[ParseNode]:
        return self.entries.get(key)

    def items(self):
        return self.entries.items()

    def keys(self):
        return self.entries.keys()

    def scalar_value(self, key: str) -> Optional[str]:
        """The raw text of the scalar under *key*, or ``None``."""
        node = self.entries.get(key)
        return node.raw if isinstance(node, ValueNode) else None

    def reference_pointer(self) -> Optional[str]:
        """The ``$ref`` text when this map is a reference object.

        Raises:
            ReferenceSyntaxError: If ``$ref`` holds a mapping or a sequence.
        """
        node = self.entries.get("$ref")
        if node is None:
            return None
        if not isinstance(node, ValueNode):
            raise ReferenceSyntaxError(
                str(node.to_python()), f"'$ref' must be a string, found a {node.kind}"
            )
        return node.raw

    def create_map(
        self, loader: Callable[[ParseNode, "ParsingContext"], T], context: "ParsingContext"
    ) -> dict[str, T]:
        result = {}
        for key, node in self.entries.items():
            with context.location(key):
                result[key] = loader(node, context)
        return result

    def create_simple_map(self, field: str, context: "ParsingContext") -> dict[str, str]:
        result = {}
        for key, node in self.entries.items():
            with context.location(key):
                result[key] = expect_scalar(node, field, context)
        return result

    def create_any(self, schema: Optional["JsonSchema"] = None) -> OpenApiAny:
        properties = schema.properties if schema is not None else {}
        return AnyObject(
            {key: node.create_any(properties.get(key)) for key, node in self.entries.items()}
        )

    def to_python(self) -> dict[str, Any]:
        return {key: node.to_python() for key, node in self.entries.items()}


def expect_map(node: ParseNode, field: str, context: "ParsingContext") -> MapNode:
    if not isinstance(node, MapNode):
        raise context.error(f"Expected a mapping, found a {node.kind}", field=field, raw=_raw(node))
    return node


def expect_list(node: ParseNode, field: str, context: "ParsingContext") -> ListNode:
    if not isinstance(node, ListNode):
        raise context.error(f"Expected a sequence, found a {node.kind}", field=field, raw=_raw(node))
    return node


def expect_scalar(node: ParseNode, field: str, context: "ParsingContext") -> str:
    if not isinstance(node, ValueNode):
        raise context.error(f"Expected a scalar, found a {node.kind}", field=field)
    return node.raw


def _raw(node: ParseNode) -> Optional[str]:
    return node.raw if isinstance(node, ValueNode) else None


# ---------------------------------------------------------------------- #
# Construction
# ---------------------------------------------------------------------- #


def from_yaml(node: yaml.Node, _active: Optional[set[int]] = None) -> ParseNode:
    """Wrap a node composed by :func:`yaml.compose`.

    Raises:
        DocumentParseError: On a non-scalar mapping key or a recursive alias.
    """
    active = _active if _active is not None else set()
    line = node.start_mark.line + 1 if node.start_mark is not None else None
    if isinstance(node, yaml.ScalarNode):
        return ValueNode(str(node.value), quoted=node.style not in (None, ""), line=line)

    if id(node) in active:
        raise DocumentParseError(f"Recursive alias at line {line}")
    active.add(id(node))
    try:
        if isinstance(node, yaml.SequenceNode):
            return ListNode([from_yaml(item, active) for item in node.value], line=line)
        entries: dict[str, ParseNode] = {}
        for key_node, value_node in node.value:
            if not isinstance(key_node, yaml.ScalarNode):
                raise DocumentParseError(f"Mapping keys must be scalars (line {line})")
            if key_node.value == "<<" and key_node.tag == "tag:yaml.org,2002:merge":
                _merge_into(entries, from_yaml(value_node, active))
                continue
            entries[str(key_node.value)] = from_yaml(value_node, active)
        return MapNode(entries, line=line)
    finally:
        active.discard(id(node))


def _merge_into(entries: dict[str, ParseNode], merged: ParseNode) -> None:
    sources = merged.items if isinstance(merged, ListNode) else [merged]
    for source in sources:
        if isinstance(source, MapNode):
            for key, value in source.items():
                entries.setdefault(key, value)


def from_python(value: Any) -> ParseNode:
    """Wrap plain Python data (``json.loads`` / ``yaml.safe_load`` output).

    Strings become quoted scalars; numbers, booleans and ``None`` become
    plain scalars with their JSON spelling.
    """
    if isinstance(value, dict):
        return MapNode({str(key): from_python(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return ListNode([from_python(item) for item in value])
    if value is None:
        return ValueNode("null")
    if isinstance(value, bool):
        return ValueNode("true" if value else "false")
    if isinstance(value, int):
        return ValueNode(str(value))
    if isinstance(value, float):
        if math.isnan(value):
            return ValueNode(".nan")
        if math.isinf(value):
            return ValueNode("-.inf" if value < 0 else ".inf")
        return ValueNode(repr(value))
    if isinstance(value, str):
        return ValueNode(value, quoted=True)
    raise TypeError(f"Cannot build a parse node from {type(value).__name__}")


def compose(text: str) -> ParseNode:
    """Tokenize *text* (YAML or JSON) into a parse-node tree.

    Raises:
        DocumentParseError: If the text is not well-formed or is empty.
    """
    try:
        root = yaml.compose(text)
    except yaml.YAMLError as exc:
        raise DocumentParseError(f"Malformed document: {exc}") from exc
    if root is None:
        raise DocumentParseError("The document is empty")
    return from_yaml(root)

