"""
Pydantic models and record schemas for JMdict (word dictionary).

Schema Design:
- One JmdictEntry per <entry> element, keyed by ent_seq
- Kanji, reading and sense elements are nested records
- Coded fields (pos, misc, field, dial, ke_inf, re_inf) hold entity
  references and are expanded or kept as codes depending on the parse
"""

from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from jmdict_reader.parsers.structure import (
    RecordSchema,
    XML_NAMESPACE,
    attribute,
    child,
    children,
    content,
    record,
)


class JmdictKanji(BaseModel):
    """
    Kanji element (<k_ele>): a written form using at least one non-kana
    character.
    """

    expression: str = Field(..., description="Word or phrase in kanji (keb)")
    information: Tuple[str, ...] = Field(
        default=(),
        description="Orthography codes, e.g. irregular okurigana (ke_inf)"
    )
    priorities: Tuple[str, ...] = Field(
        default=(),
        description="Frequency markers such as news1, ichi1, nf01 (ke_pri)"
    )

    model_config = ConfigDict(frozen=True)


class JmdictReading(BaseModel):
    """
    Reading element (<r_ele>).

    ``no_kanji`` is None when <re_nokanji> is absent and "" when the
    (normally empty) element is present: the reading is then not a true
    reading of the kanji.
    """

    reading: str
    no_kanji: Optional[str] = None
    restrictions: Tuple[str, ...] = ()
    information: Tuple[str, ...] = ()
    priorities: Tuple[str, ...] = ()

    model_config = ConfigDict(frozen=True)


class JmdictSource(BaseModel):
    """Source language of a loanword (<lsource>)."""

    content: str = ""
    language: Optional[str] = Field(
        default=None,
        description="ISO 639-2 code from xml:lang; absent means English"
    )
    type: Optional[str] = Field(
        default=None,
        description="ls_type: 'part' when only partially describing the source"
    )
    wasei: Optional[str] = Field(
        default=None,
        description="ls_wasei: set for words constructed in Japanese (waseieigo)"
    )

    model_config = ConfigDict(frozen=True)


class JmdictGlossary(BaseModel):
    """Target-language gloss (<gloss>)."""

    content: str = ""
    language: Optional[str] = None
    gender: Optional[str] = None
    type: Optional[str] = Field(
        default=None,
        description="g_type: lit, fig, expl or tm"
    )

    model_config = ConfigDict(frozen=True)


class JmdictExampleSource(BaseModel):
    """Source of an example sentence (<ex_srce>), typically Tatoeba."""

    id: str
    source_type: Optional[str] = None

    model_config = ConfigDict(frozen=True)


class JmdictExampleSentence(BaseModel):
    text: str
    language: Optional[str] = None

    model_config = ConfigDict(frozen=True)


class JmdictExample(BaseModel):
    """Example of a sense in use (<example>)."""

    source: JmdictExampleSource
    text: str
    sentences: Tuple[JmdictExampleSentence, ...] = ()

    model_config = ConfigDict(frozen=True)


class JmdictSense(BaseModel):
    """
    Sense element (<sense>): one translational meaning of the entry.

    Part-of-speech, field, misc and dialect values are entity codes; with
    expansion they read e.g. "Godan verb with 'ku' ending", without it
    "v5k".
    """

    restricted_kanji: Tuple[str, ...] = ()
    restricted_readings: Tuple[str, ...] = ()
    references: Tuple[str, ...] = ()
    antonyms: Tuple[str, ...] = ()
    parts_of_speech: Tuple[str, ...] = ()
    fields: Tuple[str, ...] = ()
    misc: Tuple[str, ...] = ()
    source_languages: Tuple[JmdictSource, ...] = ()
    dialects: Tuple[str, ...] = ()
    information: Tuple[str, ...] = ()
    glossary: Tuple[JmdictGlossary, ...] = ()
    examples: Tuple[JmdictExample, ...] = ()

    model_config = ConfigDict(frozen=True)


class JmdictEntry(BaseModel):
    """
    One JMdict entry (<entry>).

    Each entry has at least one reading and one sense in practice; only the
    sequence number is required for decoding.

    Example:
        >>> entry.sequence
        1358280
        >>> entry.kanji[0].expression
        '食べる'
        >>> entry.sense[0].parts_of_speech
        ('Ichidan verb', 'transitive verb')
    """

    sequence: int = Field(..., description="Unique entry sequence number (ent_seq)")
    kanji: Tuple[JmdictKanji, ...] = ()
    readings: Tuple[JmdictReading, ...] = ()
    sense: Tuple[JmdictSense, ...] = ()

    model_config = ConfigDict(frozen=True)


class Jmdict(BaseModel):
    """Whole JMdict document (<JMdict>)."""

    entries: Tuple[JmdictEntry, ...] = ()

    model_config = ConfigDict(frozen=True)

    def __repr__(self) -> str:
        return f"Jmdict(entries={len(self.entries)})"


# === Record schemas ===

JMDICT_KANJI_SCHEMA = RecordSchema(
    model=JmdictKanji,
    fields=(
        child('expression', 'keb'),
        children('information', 'ke_inf'),
        children('priorities', 'ke_pri'),
    )
)

JMDICT_READING_SCHEMA = RecordSchema(
    model=JmdictReading,
    fields=(
        child('reading', 'reb'),
        child('no_kanji', 're_nokanji', optional=True),
        children('restrictions', 're_restr'),
        children('information', 're_inf'),
        children('priorities', 're_pri'),
    )
)

JMDICT_SOURCE_SCHEMA = RecordSchema(
    model=JmdictSource,
    fields=(
        content('content'),
        attribute('language', 'lang', namespace=XML_NAMESPACE, optional=True),
        attribute('type', 'ls_type', optional=True),
        attribute('wasei', 'ls_wasei', optional=True),
    )
)

JMDICT_GLOSSARY_SCHEMA = RecordSchema(
    model=JmdictGlossary,
    fields=(
        content('content'),
        attribute('language', 'lang', namespace=XML_NAMESPACE, optional=True),
        attribute('gender', 'g_gend', optional=True),
        attribute('type', 'g_type', optional=True),
    )
)

JMDICT_EXAMPLE_SOURCE_SCHEMA = RecordSchema(
    model=JmdictExampleSource,
    fields=(
        content('id'),
        attribute('source_type', 'exsrc_type', optional=True),
    )
)

JMDICT_EXAMPLE_SENTENCE_SCHEMA = RecordSchema(
    model=JmdictExampleSentence,
    fields=(
        content('text'),
        attribute('language', 'lang', namespace=XML_NAMESPACE, optional=True),
    )
)

JMDICT_EXAMPLE_SCHEMA = RecordSchema(
    model=JmdictExample,
    fields=(
        record('source', 'ex_srce', JMDICT_EXAMPLE_SOURCE_SCHEMA),
        child('text', 'ex_text'),
        record('sentences', 'ex_sent', JMDICT_EXAMPLE_SENTENCE_SCHEMA, repeated=True),
    )
)

JMDICT_SENSE_SCHEMA = RecordSchema(
    model=JmdictSense,
    fields=(
        children('restricted_kanji', 'stagk'),
        children('restricted_readings', 'stagr'),
        children('references', 'xref'),
        children('antonyms', 'ant'),
        children('parts_of_speech', 'pos'),
        children('fields', 'field'),
        children('misc', 'misc'),
        record('source_languages', 'lsource', JMDICT_SOURCE_SCHEMA, repeated=True),
        children('dialects', 'dial'),
        children('information', 's_inf'),
        record('glossary', 'gloss', JMDICT_GLOSSARY_SCHEMA, repeated=True),
        record('examples', 'example', JMDICT_EXAMPLE_SCHEMA, repeated=True),
    )
)

JMDICT_ENTRY_SCHEMA = RecordSchema(
    model=JmdictEntry,
    tag='entry',
    fields=(
        child('sequence', 'ent_seq', convert=int, unique=True),
        record('kanji', 'k_ele', JMDICT_KANJI_SCHEMA, repeated=True),
        record('readings', 'r_ele', JMDICT_READING_SCHEMA, repeated=True),
        record('sense', 'sense', JMDICT_SENSE_SCHEMA, repeated=True),
    )
)

JMDICT_SCHEMA = RecordSchema(
    model=Jmdict,
    tag='JMdict',
    fields=(
        record('entries', 'entry', JMDICT_ENTRY_SCHEMA, repeated=True),
    )
)
