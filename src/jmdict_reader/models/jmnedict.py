"""
Pydantic models and record schemas for JMnedict (proper name dictionary).

The same entries are read by the ENAMDICT loader, which streams them one
<entry> at a time instead of decoding the <JMnedict> root in one pass.
"""

from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from jmdict_reader.parsers.structure import (
    RecordSchema,
    XML_NAMESPACE,
    attribute,
    child,
    children,
    record,
)


class JmnedictKanji(BaseModel):
    """Name written with at least one non-kana character (<k_ele>)."""

    expression: str
    information: Tuple[str, ...] = ()
    priorities: Tuple[str, ...] = ()

    model_config = ConfigDict(frozen=True)


class JmnedictReading(BaseModel):
    """Kana reading of the name (<r_ele>)."""

    reading: str
    restrictions: Tuple[str, ...] = ()
    information: Tuple[str, ...] = ()
    priorities: Tuple[str, ...] = ()

    model_config = ConfigDict(frozen=True)


class JmnedictTranslation(BaseModel):
    """
    Translation element (<trans>).

    ``name_types`` are entity codes (surname, place, given, ...).
    """

    name_types: Tuple[str, ...] = Field(
        default=(),
        description="Kind of name, e.g. 'family or surname' or 'surname' (name_type)"
    )
    references: Tuple[str, ...] = ()
    translations: Tuple[str, ...] = Field(
        default=(),
        description="Transcriptions of the name into the target language (trans_det)"
    )
    language: Optional[str] = None

    model_config = ConfigDict(frozen=True)


class JmnedictEntry(BaseModel):
    """One proper-name entry (<entry>)."""

    sequence: int
    kanji: Tuple[JmnedictKanji, ...] = ()
    readings: Tuple[JmnedictReading, ...] = ()
    translations: Tuple[JmnedictTranslation, ...] = ()

    model_config = ConfigDict(frozen=True)


class Jmnedict(BaseModel):
    """Whole JMnedict document (<JMnedict>)."""

    entries: Tuple[JmnedictEntry, ...] = ()

    model_config = ConfigDict(frozen=True)

    def __repr__(self) -> str:
        return f"Jmnedict(entries={len(self.entries)})"


JMNEDICT_KANJI_SCHEMA = RecordSchema(
    model=JmnedictKanji,
    fields=(
        child('expression', 'keb'),
        children('information', 'ke_inf'),
        children('priorities', 'ke_pri'),
    )
)

JMNEDICT_READING_SCHEMA = RecordSchema(
    model=JmnedictReading,
    fields=(
        child('reading', 'reb'),
        children('restrictions', 're_restr'),
        children('information', 're_inf'),
        children('priorities', 're_pri'),
    )
)

JMNEDICT_TRANSLATION_SCHEMA = RecordSchema(
    model=JmnedictTranslation,
    fields=(
        children('name_types', 'name_type'),
        children('references', 'xref'),
        children('translations', 'trans_det'),
        attribute('language', 'lang', namespace=XML_NAMESPACE, optional=True),
    )
)

JMNEDICT_ENTRY_SCHEMA = RecordSchema(
    model=JmnedictEntry,
    tag='entry',
    fields=(
        child('sequence', 'ent_seq', convert=int, unique=True),
        record('kanji', 'k_ele', JMNEDICT_KANJI_SCHEMA, repeated=True),
        record('readings', 'r_ele', JMNEDICT_READING_SCHEMA, repeated=True),
        record('translations', 'trans', JMNEDICT_TRANSLATION_SCHEMA, repeated=True),
    )
)

JMNEDICT_SCHEMA = RecordSchema(
    model=Jmnedict,
    tag='JMnedict',
    fields=(
        record('entries', 'entry', JMNEDICT_ENTRY_SCHEMA, repeated=True),
    )
)
