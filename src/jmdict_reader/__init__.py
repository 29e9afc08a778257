"""
jmdict-reader: streaming reader for JMdict, JMnedict and KANJIDIC2 XML.

Main package exports for user-facing API.
"""

from jmdict_reader.api import (
    parse_with_callback,
    parse_whole_document,
    load_dictionary,
    load_jmdict,
    load_jmdict_no_transform,
    load_jmnedict,
    load_jmnedict_no_transform,
    load_enamdict,
    load_kanjidic,
    load_kanjidic_no_transform,
    load_kanjidic_characters,
)
from jmdict_reader.errors import (
    DictionaryParseError,
    MalformedDirectiveError,
    StructuralMismatchError,
    StreamFailureError,
)
from jmdict_reader.types import DictionaryTypes

__all__ = [
    'parse_with_callback',
    'parse_whole_document',
    'load_dictionary',
    'load_jmdict',
    'load_jmdict_no_transform',
    'load_jmnedict',
    'load_jmnedict_no_transform',
    'load_enamdict',
    'load_kanjidic',
    'load_kanjidic_no_transform',
    'load_kanjidic_characters',
    'DictionaryParseError',
    'MalformedDirectiveError',
    'StructuralMismatchError',
    'StreamFailureError',
    'DictionaryTypes',
]
