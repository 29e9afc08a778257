"""
Parsing modules for entity-bearing dictionary XML.

- entities: ENTITY declaration extraction and expansion policy
- structure: declarative record schemas and the structural decoder
- stream: streaming token decoder (callback and document modes)
"""

from .entities import extract_entities, resolve_entities, check_directive
from .structure import (
    FieldKind,
    FieldSpec,
    RecordSchema,
    attribute,
    child,
    children,
    content,
    record,
    decode_subtree,
)
from .stream import CallbackMode, DocumentMode, ParseMode, decode

__all__ = [
    # Entities
    'extract_entities',
    'resolve_entities',
    'check_directive',
    # Schemas
    'FieldKind',
    'FieldSpec',
    'RecordSchema',
    'attribute',
    'child',
    'children',
    'content',
    'record',
    'decode_subtree',
    # Streaming decoder
    'CallbackMode',
    'DocumentMode',
    'ParseMode',
    'decode',
]
