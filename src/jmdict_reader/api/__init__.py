"""
User-facing API for loading dictionaries.
"""

from jmdict_reader.api.loaders import (
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
from jmdict_reader.api.sources import open_source

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
    'open_source',
]
