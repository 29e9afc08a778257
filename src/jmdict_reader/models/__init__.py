"""
Pydantic models for decoded dictionary records.

Each dictionary module pairs frozen models with the record schemas that
map XML elements onto them.
"""

from jmdict_reader.models.result import ParseResult
from jmdict_reader.models.jmdict import Jmdict, JmdictEntry, JMDICT_SCHEMA, JMDICT_ENTRY_SCHEMA
from jmdict_reader.models.jmnedict import (
    Jmnedict,
    JmnedictEntry,
    JMNEDICT_SCHEMA,
    JMNEDICT_ENTRY_SCHEMA,
)
from jmdict_reader.models.kanjidic import (
    Kanjidic,
    KanjidicCharacter,
    KANJIDIC_SCHEMA,
    KANJIDIC_CHARACTER_SCHEMA,
)

__all__ = [
    'ParseResult',
    'Jmdict',
    'JmdictEntry',
    'JMDICT_SCHEMA',
    'JMDICT_ENTRY_SCHEMA',
    'Jmnedict',
    'JmnedictEntry',
    'JMNEDICT_SCHEMA',
    'JMNEDICT_ENTRY_SCHEMA',
    'Kanjidic',
    'KanjidicCharacter',
    'KANJIDIC_SCHEMA',
    'KANJIDIC_CHARACTER_SCHEMA',
]
