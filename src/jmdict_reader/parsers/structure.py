"""
Declarative record schemas and the structural decoder.

A RecordSchema pairs a pydantic model with a table of FieldSpecs that say
where each field comes from in the XML subtree:

- child text      <reb>あ</reb>             -> str (or converted value)
- child record    <k_ele>...</k_ele>        -> nested model
- attribute       <gloss g_type="lit">      -> str
- content         <gloss>to eat</gloss>     -> str (text directly inside)

Repeated children become tuples in document order. Optional fields hold
None when absent, which is distinct from an empty element ("").
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple, Type

from lxml import etree
from pydantic import BaseModel, ValidationError

from jmdict_reader.errors import StructuralMismatchError


XML_NAMESPACE = 'http://www.w3.org/XML/1998/namespace'


class FieldKind(str, Enum):
    """Where a field's value is read from."""

    CHILD_TEXT = 'child_text'
    CHILD_RECORD = 'child_record'
    ATTRIBUTE = 'attribute'
    CONTENT = 'content'


@dataclass(frozen=True)
class FieldSpec:
    """
    Mapping of one model field onto the XML subtree.

    Attributes:
        name: Model field name
        source: Child tag or attribute local name (unused for CONTENT)
        kind: Where the value is read from
        repeated: Collect every occurrence into a tuple
        optional: Allow the source to be absent (field becomes None)
        unique: Reject a second occurrence instead of keeping the first
        convert: Converter applied to text values (e.g. int)
        namespace: Attribute namespace URI (e.g. XML_NAMESPACE for xml:lang)
        schema: Nested schema for CHILD_RECORD fields
    """

    name: str
    source: str
    kind: FieldKind
    repeated: bool = False
    optional: bool = False
    unique: bool = False
    convert: Callable[[str], Any] = str
    namespace: Optional[str] = None
    schema: Optional['RecordSchema'] = None


@dataclass(frozen=True)
class RecordSchema:
    """
    Declarative schema for one record type.

    Attributes:
        model: Frozen pydantic model built from the decoded values
        fields: Field mappings
        tag: Expected element tag; checked when set
    """

    model: Type[BaseModel]
    fields: Tuple[FieldSpec, ...]
    tag: Optional[str] = None
    _child_sources: frozenset = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        sources = frozenset(
            spec.source for spec in self.fields
            if spec.kind in (FieldKind.CHILD_TEXT, FieldKind.CHILD_RECORD)
        )
        object.__setattr__(self, '_child_sources', sources)

    def field_names(self) -> List[str]:
        return [spec.name for spec in self.fields]


def child(name: str, source: Optional[str] = None, **options) -> FieldSpec:
    """Field read from the text of a child element."""
    return FieldSpec(name=name, source=source or name, kind=FieldKind.CHILD_TEXT, **options)


def children(name: str, source: str, **options) -> FieldSpec:
    """Repeated field read from the text of every matching child."""
    return FieldSpec(
        name=name, source=source, kind=FieldKind.CHILD_TEXT, repeated=True, **options
    )


def record(name: str, source: str, schema: RecordSchema, **options) -> FieldSpec:
    """Field decoded from a child element with a nested schema."""
    return FieldSpec(
        name=name, source=source, kind=FieldKind.CHILD_RECORD, schema=schema, **options
    )


def attribute(name: str, source: Optional[str] = None, **options) -> FieldSpec:
    """Field read from an attribute of the element itself."""
    return FieldSpec(name=name, source=source or name, kind=FieldKind.ATTRIBUTE, **options)


def content(name: str = 'value', **options) -> FieldSpec:
    """Field holding the text directly inside the element."""
    return FieldSpec(name=name, source='', kind=FieldKind.CONTENT, **options)


def local_name(element: etree._Element) -> Optional[str]:
    """Tag without namespace; None for comments and processing instructions."""
    if not isinstance(element.tag, str):
        return None
    return etree.QName(element).localname


def direct_text(element: etree._Element) -> str:
    """Character data directly inside element, excluding its children's text."""
    parts = [element.text or '']
    for node in element:
        parts.append(node.tail or '')
    return ''.join(parts)


def decode_subtree(element: etree._Element, schema: RecordSchema) -> BaseModel:
    """
    Decode one element subtree into a record.

    Args:
        element: Fully parsed lxml element
        schema: Record schema describing the element

    Returns:
        Instance of schema.model

    Raises:
        StructuralMismatchError: If the subtree does not satisfy the schema

    Example:
        >>> from jmdict_reader.models.jmdict import JMDICT_READING_SCHEMA
        >>> elem = etree.fromstring('<r_ele><reb>かな</reb></r_ele>')
        >>> decode_subtree(elem, JMDICT_READING_SCHEMA).reading
        'かな'
    """
    tag = local_name(element)
    if schema.tag is not None and tag != schema.tag:
        raise StructuralMismatchError(
            f"expected <{schema.tag}> element", tag=tag, line=element.sourceline
        )

    # Group direct children by tag once; fields then look up their matches
    grouped: Dict[str, List[etree._Element]] = {}
    for node in element:
        name = local_name(node)
        if name in schema._child_sources:
            grouped.setdefault(name, []).append(node)

    values = {}
    for spec in schema.fields:
        if spec.kind is FieldKind.ATTRIBUTE:
            values[spec.name] = _decode_attribute(element, spec)
        elif spec.kind is FieldKind.CONTENT:
            values[spec.name] = _convert(element, spec, direct_text(element))
        else:
            values[spec.name] = _decode_children(element, spec, grouped.get(spec.source, []))

    try:
        return schema.model(**values)
    except ValidationError as e:
        raise StructuralMismatchError(
            f"invalid {schema.model.__name__}: {e}", tag=tag, line=element.sourceline
        ) from e


def _decode_attribute(element: etree._Element, spec: FieldSpec) -> Any:
    key = spec.source if spec.namespace is None else f"{{{spec.namespace}}}{spec.source}"
    raw = element.get(key)

    if raw is None:
        if spec.optional:
            return None
        raise StructuralMismatchError(
            f"missing required attribute '{spec.source}'",
            tag=local_name(element),
            line=element.sourceline
        )

    return _convert(element, spec, raw)


def _decode_children(
    element: etree._Element,
    spec: FieldSpec,
    matches: List[etree._Element]
) -> Any:
    if spec.repeated:
        return tuple(_decode_child(node, spec) for node in matches)

    if not matches:
        if spec.optional:
            return None
        raise StructuralMismatchError(
            f"missing required child <{spec.source}>",
            tag=local_name(element),
            line=element.sourceline
        )

    if spec.unique and len(matches) > 1:
        raise StructuralMismatchError(
            f"<{spec.source}> occurs {len(matches)} times but is not repeatable",
            tag=local_name(element),
            line=matches[1].sourceline
        )

    # First occurrence wins
    return _decode_child(matches[0], spec)


def _decode_child(node: etree._Element, spec: FieldSpec) -> Any:
    if spec.kind is FieldKind.CHILD_RECORD:
        return decode_subtree(node, spec.schema)
    return _convert(node, spec, direct_text(node))


def _convert(element: etree._Element, spec: FieldSpec, raw: str) -> Any:
    if spec.convert is str:
        return raw

    try:
        return spec.convert(raw.strip())
    except (TypeError, ValueError) as e:
        raise StructuralMismatchError(
            f"cannot convert {raw!r} for field '{spec.name}': {e}",
            tag=local_name(element),
            line=element.sourceline
        ) from e
