"""Table-driven reading of map nodes into model instances.

Each element type, per version, is described by tables built once at import:

* a :data:`FixedFieldMap` of exact field name to a read action;
* a :data:`PatternFieldMap` of ``(predicate, action)`` pairs, tried in
  declaration order for names no fixed field matched (vendor extensions);
* optionally an :class:`AnyField` / :class:`AnyMapField` map naming the
  fields whose Any-values must be re-derived once the sibling ``schema`` is
  known.

Keys matched by neither table are ignored.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, NamedTuple, Optional, Tuple, TypeVar

from oasmodel.exceptions import DocumentParseError
from oasmodel.extensions import is_extension_name
from oasmodel.readers.context import ParsingContext
from oasmodel.readers.parse_node import (
    MapNode,
    ParseNode,
    ValueNode,
    expect_list,
    expect_map,
    expect_scalar,
)
from oasmodel.schema import JsonSchema

T = TypeVar("T")

FieldAction = Callable[[Any, ParseNode, ParsingContext], None]
PatternAction = Callable[[Any, str, ParseNode, ParsingContext], None]

FixedFieldMap = Dict[str, FieldAction]
PatternFieldMap = List[Tuple[Callable[[str], bool], PatternAction]]


class AnyField(NamedTuple):
    """An Any-valued field and the sibling schema that guides it."""

    setter: Callable[[Any, Any], None]
    schema: Callable[[Any], Optional[JsonSchema]]


class AnyMapField(NamedTuple):
    """A map of elements (e.g. examples) each holding an Any-valued field."""

    elements: Callable[[Any], Optional[dict]]
    value_key: str
    setter: Callable[[Any, Any], None]
    schema: Callable[[Any], Optional[JsonSchema]]


AnyFieldMap = Dict[str, AnyField]
AnyMapFieldMap = Dict[str, AnyMapField]


def parse_map(
    node: MapNode,
    target: T,
    fixed_fields: FixedFieldMap,
    pattern_fields: PatternFieldMap,
    context: ParsingContext,
) -> T:
    """Apply *fixed_fields* then *pattern_fields* to every key of *node*."""
    for name, value in node.items():
        with context.location(name):
            action = fixed_fields.get(name)
            if action is not None:
                action(target, value, context)
                continue
            for predicate, pattern_action in pattern_fields:
                if predicate(name):
                    pattern_action(target, name, value, context)
                    break
    return target


def process_any_fields(node: MapNode, target: Any, any_fields: AnyFieldMap, context: ParsingContext) -> None:
    """Re-derive each Any-valued field with its sibling schema."""
    for name, field in any_fields.items():
        value = node.get(name)
        if value is None:
            continue
        with context.location(name):
            field.setter(target, value.create_any(field.schema(target)))


def process_any_map_fields(
    node: MapNode, target: Any, any_map_fields: AnyMapFieldMap, context: ParsingContext
) -> None:
    """Re-derive the Any-value inside each element of a map-valued field."""
    for name, field in any_map_fields.items():
        map_node = node.get(name)
        elements = field.elements(target)
        if not isinstance(map_node, MapNode) or not elements:
            continue
        schema = field.schema(target)
        for key, element_node in map_node.items():
            element = elements.get(key)
            if element is None or not isinstance(element_node, MapNode):
                continue
            if getattr(element, "reference", None) is not None:
                continue
            value_node = element_node.get(field.value_key)
            if value_node is not None:
                field.setter(element, value_node.create_any(schema))


# ---------------------------------------------------------------------- #
# Common actions
# ---------------------------------------------------------------------- #


def string_field(attribute: str, name: Optional[str] = None) -> FieldAction:
    def action(target: Any, node: ParseNode, context: ParsingContext) -> None:
        setattr(target, attribute, expect_scalar(node, name or attribute, context))

    return action


def string_list_field(attribute: str, name: Optional[str] = None) -> FieldAction:
    def action(target: Any, node: ParseNode, context: ParsingContext) -> None:
        field = name or attribute
        setattr(target, attribute, expect_list(node, field, context).create_simple_list(field, context))

    return action


def element_field(attribute: str, loader: str) -> FieldAction:
    """Read a nested element with the active deserializer's *loader* method."""

    def action(target: Any, node: ParseNode, context: ParsingContext) -> None:
        setattr(target, attribute, getattr(context.deserializer, loader)(node, context))

    return action


def extensible_map_field(attribute: str, extensions_attribute: str, loader: str) -> FieldAction:
    """Read a map whose ``x-`` keys extend the map itself (``paths``, ``responses``).

    Entries go to *attribute* and extensions to *extensions_attribute*,
    which is left ``None`` when there are none.
    """

    def action(target: Any, node: ParseNode, context: ParsingContext) -> None:
        element_loader = getattr(context.deserializer, loader)
        entries: dict = {}
        extensions: dict = {}
        for key, value in expect_map(node, attribute, context).items():
            with context.location(key):
                if is_extension_name(key):
                    extensions[key] = load_extension(key, value, context)
                else:
                    entries[key] = element_loader(value, context)
        setattr(target, attribute, entries)
        setattr(target, extensions_attribute, extensions or None)

    return action


def list_field(attribute: str, loader: str, name: Optional[str] = None) -> FieldAction:
    def action(target: Any, node: ParseNode, context: ParsingContext) -> None:
        items = expect_list(node, name or attribute, context)
        setattr(target, attribute, items.create_list(getattr(context.deserializer, loader), context))

    return action


def map_field(attribute: str, loader: str, name: Optional[str] = None) -> FieldAction:
    def action(target: Any, node: ParseNode, context: ParsingContext) -> None:
        entries = expect_map(node, name or attribute, context)
        setattr(target, attribute, entries.create_map(getattr(context.deserializer, loader), context))

    return action


def bool_field(attribute: str, name: str) -> FieldAction:
    def action(target: Any, node: ParseNode, context: ParsingContext) -> None:
        if not isinstance(node, ValueNode):
            raise context.error("Expected a boolean", field=name)
        setattr(target, attribute, node.as_bool(name, context))

    return action


def any_field(attribute: str) -> FieldAction:
    def action(target: Any, node: ParseNode, context: ParsingContext) -> None:
        setattr(target, attribute, node.create_any())

    return action


def schema_field(attribute: str) -> FieldAction:
    def action(target: Any, node: ParseNode, context: ParsingContext) -> None:
        setattr(target, attribute, load_schema(node, context))

    return action


def load_schema(node: ParseNode, context: ParsingContext) -> JsonSchema:
    data = node.to_python()
    if not isinstance(data, (dict, bool)):
        raise context.error("Expected a schema object", field="schema", raw=getattr(node, "raw", None))
    return JsonSchema(data)


def load_extension(name: str, node: ParseNode, context: ParsingContext) -> Any:
    value = node.create_any()
    try:
        return context.extensions.parse(name, value, context.version)
    except DocumentParseError as exc:
        if exc.path is not None:
            raise
        error = DocumentParseError(str(exc), path=context.path)
        error.field = exc.field
        raise error from exc


def _add_extension(target: Any, name: str, node: ParseNode, context: ParsingContext) -> None:
    target.add_extension(name, load_extension(name, node, context))


EXTENSION_PATTERNS: PatternFieldMap = [(is_extension_name, _add_extension)]
