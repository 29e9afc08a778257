"""
User-facing loaders for dictionary documents.

Two generic entry points map onto the two decode strategies:

- parse_with_callback(): stream elements with a given tag to a handler
- parse_whole_document(): decode the root element into one container

Named presets cover the bundled dictionaries, each with and without
entity expansion:

    >>> jmdict, entities = load_jmdict('JMdict_e.gz')
    >>> jmdict, codes = load_jmdict_no_transform('JMdict_e.gz')
"""

import logging
from functools import partial
from typing import Any, Callable, Dict, List, Optional, Tuple

from lxml import etree

from jmdict_reader.config import ParserSettings, get_catalog
from jmdict_reader.models.jmdict import JMDICT_ENTRY_SCHEMA, JMDICT_SCHEMA, Jmdict
from jmdict_reader.models.jmnedict import (
    JMNEDICT_ENTRY_SCHEMA,
    JMNEDICT_SCHEMA,
    Jmnedict,
    JmnedictEntry,
)
from jmdict_reader.models.kanjidic import (
    KANJIDIC_CHARACTER_SCHEMA,
    KANJIDIC_SCHEMA,
    Kanjidic,
    KanjidicCharacter,
)
from jmdict_reader.models.result import ParseResult
from jmdict_reader.parsers.stream import CallbackMode, DocumentMode, decode
from jmdict_reader.parsers.structure import RecordSchema, decode_subtree
from .sources import Source, open_source

logger = logging.getLogger(__name__)

EntityTable = Dict[str, str]

# Dictionary name -> (container schema, entry schema)
_SCHEMAS: Dict[str, Tuple[RecordSchema, RecordSchema]] = {
    'jmdict': (JMDICT_SCHEMA, JMDICT_ENTRY_SCHEMA),
    'jmnedict': (JMNEDICT_SCHEMA, JMNEDICT_ENTRY_SCHEMA),
    'enamdict': (JMNEDICT_SCHEMA, JMNEDICT_ENTRY_SCHEMA),
    'kanjidic': (KANJIDIC_SCHEMA, KANJIDIC_CHARACTER_SCHEMA),
}


def parse_with_callback(
    source: Source,
    tag_name: str,
    handler: Callable[[etree._Element], Any],
    expand: bool = True,
    settings: Optional[ParserSettings] = None
) -> ParseResult:
    """
    Decode every element named ``tag_name`` with ``handler``.

    Matching elements are found at any depth; other elements are skipped
    without being decoded.

    Args:
        source: Open stream or path
        tag_name: Local tag name of the elements to decode (e.g. 'entry')
        handler: Called with each complete element; its non-None return
            values become ParseResult.records
        expand: Expand entity references (True) or keep entity names (False)
        settings: Parser settings override

    Returns:
        ParseResult with records and entity table

    Example:
        >>> handler = partial(decode_subtree, schema=JMNEDICT_ENTRY_SCHEMA)
        >>> result = parse_with_callback('JMnedict.xml', 'entry', handler)
        >>> result.records[0].translations[0].name_types
        ('family or surname',)
    """
    with open_source(source) as stream:
        return decode(stream, CallbackMode.for_tag(tag_name, handler), expand, settings)


def parse_whole_document(
    source: Source,
    container_schema: RecordSchema,
    expand: bool = True,
    settings: Optional[ParserSettings] = None
) -> ParseResult:
    """
    Decode the whole document into one container.

    Args:
        source: Open stream or path
        container_schema: Schema of the root element; its repeated record
            fields collect the entries
        expand: Expand entity references (True) or keep entity names (False)
        settings: Parser settings override

    Returns:
        ParseResult with container and entity table
    """
    with open_source(source) as stream:
        return decode(stream, DocumentMode(container_schema), expand, settings)


def load_dictionary(
    name: str,
    source: Source,
    expand: bool = True,
    mode: Optional[str] = None,
    settings: Optional[ParserSettings] = None
) -> ParseResult:
    """
    Load a dictionary listed in the catalog (data/dictionaries.yaml).

    Args:
        name: Catalog name ('jmdict', 'jmnedict', 'enamdict', 'kanjidic')
        source: Open stream or path
        expand: Expand entity references (True) or keep entity names (False)
        mode: 'document' or 'callback'; defaults to the catalog's mode
        settings: Parser settings override

    Returns:
        ParseResult (container for document mode, records for callback mode)

    Raises:
        ValueError: If name or mode is unknown
    """
    catalog = get_catalog()
    if not catalog.is_valid_dictionary(name) or name not in _SCHEMAS:
        raise ValueError(
            f"Unknown dictionary: {name}\n"
            f"Available dictionaries: {sorted(set(catalog.dictionaries) & set(_SCHEMAS))}"
        )

    variant = catalog.get_variant(name)
    container_schema, entry_schema = _SCHEMAS[name]
    mode = mode or variant.mode

    logger.info(f"Loading {name} ({variant.description}), {mode} mode, expand={expand}")

    if mode == 'callback':
        handler = partial(decode_subtree, schema=entry_schema)
        return parse_with_callback(source, variant.entry_tag, handler, expand, settings)
    if mode == 'document':
        return parse_whole_document(source, container_schema, expand, settings)

    raise ValueError(f"Unknown parse mode: {mode} (expected 'document' or 'callback')")


def load_jmdict(source: Source, expand: bool = True) -> Tuple[Jmdict, EntityTable]:
    """
    Load JMdict with entity expansion.

    Returns:
        (Jmdict container, entity table)

    Example:
        >>> jmdict, entities = load_jmdict('JMdict_e.gz')
        >>> jmdict.entries[0].sense[0].parts_of_speech
        ('expressions (phrases, clauses, etc.)',)
    """
    result = load_dictionary('jmdict', source, expand)
    return result.container, result.entities


def load_jmdict_no_transform(source: Source) -> Tuple[Jmdict, EntityTable]:
    """Load JMdict keeping entity codes (e.g. 'v5k') instead of prose."""
    return load_jmdict(source, expand=False)


def load_jmnedict(source: Source, expand: bool = True) -> Tuple[Jmnedict, EntityTable]:
    """Load JMnedict with entity expansion."""
    result = load_dictionary('jmnedict', source, expand)
    return result.container, result.entities


def load_jmnedict_no_transform(source: Source) -> Tuple[Jmnedict, EntityTable]:
    """Load JMnedict keeping name-type codes (e.g. 'surname')."""
    return load_jmnedict(source, expand=False)


def load_enamdict(source: Source, expand: bool) -> Tuple[List[JmnedictEntry], EntityTable]:
    """
    Stream name entries one <entry> at a time.

    Args:
        source: Open stream or path
        expand: Expand entity references (True) or keep entity names (False)

    Returns:
        (list of JmnedictEntry, entity table)
    """
    result = load_dictionary('enamdict', source, expand)
    return list(result.records), result.entities


def load_kanjidic(source: Source, expand: bool = True) -> Tuple[Kanjidic, EntityTable]:
    """Load KANJIDIC2 including its header."""
    result = load_dictionary('kanjidic', source, expand)
    return result.container, result.entities


def load_kanjidic_no_transform(source: Source) -> Tuple[Kanjidic, EntityTable]:
    return load_kanjidic(source, expand=False)


def load_kanjidic_characters(
    source: Source,
    expand: bool = True
) -> Tuple[List[KanjidicCharacter], EntityTable]:
    """
    Stream KANJIDIC2 <character> elements, skipping the header.

    Returns:
        (list of KanjidicCharacter, entity table)
    """
    result = load_dictionary('kanjidic', source, expand, mode='callback')
    return list(result.records), result.entities
