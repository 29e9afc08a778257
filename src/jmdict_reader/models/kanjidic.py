"""
Pydantic models and record schemas for KANJIDIC2 (character dictionary).

Structure of one <character>:
- literal                 the kanji itself
- codepoint/cp_value      JIS and Unicode code points
- radical/rad_value       classical and Nelson radical numbers
- misc                    grade, stroke counts, variants, frequency, JLPT
- dic_number/dic_ref      index numbers in published dictionaries
- query_code/q_code       SKIP, Four Corner, De Roo, ... lookup codes
- reading_meaning         on/kun readings, meanings and nanori readings

Numeric fields (grade, stroke_count, freq, jlpt) are converted to int;
a non-numeric value fails the parse.
"""

from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from jmdict_reader.parsers.structure import (
    RecordSchema,
    attribute,
    child,
    children,
    content,
    record,
)


class KanjidicHeader(BaseModel):
    """File metadata (<header>)."""

    file_version: str
    database_version: str
    date_of_creation: str

    model_config = ConfigDict(frozen=True)


class KanjidicCodepointValue(BaseModel):
    """Code point in one standard (<cp_value cp_type="ucs">)."""

    value: str
    type: str = Field(..., description="jis208, jis212, jis213 or ucs")

    model_config = ConfigDict(frozen=True)


class KanjidicCodepoint(BaseModel):
    values: Tuple[KanjidicCodepointValue, ...] = ()

    model_config = ConfigDict(frozen=True)


class KanjidicRadicalValue(BaseModel):
    """Radical number (<rad_value rad_type="classical">)."""

    value: str
    type: str = Field(..., description="classical (Kangxi Zidian) or nelson_c")

    model_config = ConfigDict(frozen=True)


class KanjidicRadical(BaseModel):
    values: Tuple[KanjidicRadicalValue, ...] = ()

    model_config = ConfigDict(frozen=True)


class KanjidicVariant(BaseModel):
    """Cross-reference to a variant kanji (<variant var_type="jis208">)."""

    value: str
    type: str

    model_config = ConfigDict(frozen=True)


class KanjidicMisc(BaseModel):
    """
    Miscellaneous information (<misc>).

    Attributes:
        grade: Kyouiku/Jouyou grade (1-6 school grades, 8 remaining
            jouyou, 9-10 jinmeiyou); None when not taught
        stroke_counts: Accepted stroke count first, then common miscounts
        frequency: Rank among the 2,500 most used kanji in newspapers
        jlpt_level: Former JLPT level, 4 (elementary) to 1 (advanced)
    """

    grade: Optional[int] = None
    stroke_counts: Tuple[int, ...] = ()
    variants: Tuple[KanjidicVariant, ...] = ()
    frequency: Optional[int] = None
    radical_names: Tuple[str, ...] = ()
    jlpt_level: Optional[int] = None

    model_config = ConfigDict(frozen=True)


class KanjidicDictionaryReference(BaseModel):
    """
    Index number in a published dictionary (<dic_ref dr_type="nelson_c">).

    ``volume`` and ``page`` are only given for Morohashi (``moro``).
    """

    value: str
    type: str
    volume: Optional[str] = None
    page: Optional[str] = None

    model_config = ConfigDict(frozen=True)


class KanjidicDictionaryNumbers(BaseModel):
    references: Tuple[KanjidicDictionaryReference, ...] = ()

    model_config = ConfigDict(frozen=True)


class KanjidicQueryCode(BaseModel):
    """Lookup code (<q_code qc_type="skip">)."""

    value: str
    type: str
    skip_misclassification: Optional[str] = None

    model_config = ConfigDict(frozen=True)


class KanjidicQueryCodes(BaseModel):
    codes: Tuple[KanjidicQueryCode, ...] = ()

    model_config = ConfigDict(frozen=True)


class KanjidicReading(BaseModel):
    """Reading in one language or romanization (<reading r_type="ja_on">)."""

    value: str
    type: str
    on_type: Optional[str] = None
    status: Optional[str] = None

    model_config = ConfigDict(frozen=True)


class KanjidicMeaning(BaseModel):
    """Meaning; ``language`` is None for English (<meaning m_lang="fr">)."""

    value: str
    language: Optional[str] = None

    model_config = ConfigDict(frozen=True)


class KanjidicReadingGroup(BaseModel):
    readings: Tuple[KanjidicReading, ...] = ()
    meanings: Tuple[KanjidicMeaning, ...] = ()

    model_config = ConfigDict(frozen=True)


class KanjidicReadingMeaning(BaseModel):
    """Readings and meanings (<reading_meaning>), plus name-only readings."""

    groups: Tuple[KanjidicReadingGroup, ...] = ()
    nanori: Tuple[str, ...] = ()

    model_config = ConfigDict(frozen=True)


class KanjidicCharacter(BaseModel):
    """
    One kanji (<character>).

    Example:
        >>> character.literal
        '亜'
        >>> character.misc.stroke_counts
        (7,)
    """

    literal: str
    codepoint: KanjidicCodepoint
    radical: KanjidicRadical
    misc: KanjidicMisc
    dictionary_numbers: Optional[KanjidicDictionaryNumbers] = None
    query_codes: Optional[KanjidicQueryCodes] = None
    reading_meaning: Optional[KanjidicReadingMeaning] = None

    model_config = ConfigDict(frozen=True)


class Kanjidic(BaseModel):
    """Whole KANJIDIC2 document (<kanjidic2>)."""

    header: KanjidicHeader
    characters: Tuple[KanjidicCharacter, ...] = ()

    model_config = ConfigDict(frozen=True)

    def __repr__(self) -> str:
        return (
            f"Kanjidic(file_version='{self.header.file_version}', "
            f"characters={len(self.characters)})"
        )


KANJIDIC_HEADER_SCHEMA = RecordSchema(
    model=KanjidicHeader,
    fields=(
        child('file_version'),
        child('database_version'),
        child('date_of_creation'),
    )
)

KANJIDIC_CODEPOINT_SCHEMA = RecordSchema(
    model=KanjidicCodepoint,
    fields=(
        record('values', 'cp_value', RecordSchema(
            model=KanjidicCodepointValue,
            fields=(content('value'), attribute('type', 'cp_type')),
        ), repeated=True),
    )
)

KANJIDIC_RADICAL_SCHEMA = RecordSchema(
    model=KanjidicRadical,
    fields=(
        record('values', 'rad_value', RecordSchema(
            model=KanjidicRadicalValue,
            fields=(content('value'), attribute('type', 'rad_type')),
        ), repeated=True),
    )
)

KANJIDIC_MISC_SCHEMA = RecordSchema(
    model=KanjidicMisc,
    fields=(
        child('grade', optional=True, convert=int),
        children('stroke_counts', 'stroke_count', convert=int),
        record('variants', 'variant', RecordSchema(
            model=KanjidicVariant,
            fields=(content('value'), attribute('type', 'var_type')),
        ), repeated=True),
        child('frequency', 'freq', optional=True, convert=int),
        children('radical_names', 'rad_name'),
        child('jlpt_level', 'jlpt', optional=True, convert=int),
    )
)

KANJIDIC_DICTIONARY_NUMBERS_SCHEMA = RecordSchema(
    model=KanjidicDictionaryNumbers,
    fields=(
        record('references', 'dic_ref', RecordSchema(
            model=KanjidicDictionaryReference,
            fields=(
                content('value'),
                attribute('type', 'dr_type'),
                attribute('volume', 'm_vol', optional=True),
                attribute('page', 'm_page', optional=True),
            ),
        ), repeated=True),
    )
)

KANJIDIC_QUERY_CODES_SCHEMA = RecordSchema(
    model=KanjidicQueryCodes,
    fields=(
        record('codes', 'q_code', RecordSchema(
            model=KanjidicQueryCode,
            fields=(
                content('value'),
                attribute('type', 'qc_type'),
                attribute('skip_misclassification', 'skip_misclass', optional=True),
            ),
        ), repeated=True),
    )
)

KANJIDIC_READING_MEANING_SCHEMA = RecordSchema(
    model=KanjidicReadingMeaning,
    fields=(
        record('groups', 'rmgroup', RecordSchema(
            model=KanjidicReadingGroup,
            fields=(
                record('readings', 'reading', RecordSchema(
                    model=KanjidicReading,
                    fields=(
                        content('value'),
                        attribute('type', 'r_type'),
                        attribute('on_type', optional=True),
                        attribute('status', 'r_status', optional=True),
                    ),
                ), repeated=True),
                record('meanings', 'meaning', RecordSchema(
                    model=KanjidicMeaning,
                    fields=(
                        content('value'),
                        attribute('language', 'm_lang', optional=True),
                    ),
                ), repeated=True),
            ),
        ), repeated=True),
        children('nanori', 'nanori'),
    )
)

KANJIDIC_CHARACTER_SCHEMA = RecordSchema(
    model=KanjidicCharacter,
    tag='character',
    fields=(
        child('literal', unique=True),
        record('codepoint', 'codepoint', KANJIDIC_CODEPOINT_SCHEMA),
        record('radical', 'radical', KANJIDIC_RADICAL_SCHEMA),
        record('misc', 'misc', KANJIDIC_MISC_SCHEMA),
        record('dictionary_numbers', 'dic_number', KANJIDIC_DICTIONARY_NUMBERS_SCHEMA, optional=True),
        record('query_codes', 'query_code', KANJIDIC_QUERY_CODES_SCHEMA, optional=True),
        record('reading_meaning', 'reading_meaning', KANJIDIC_READING_MEANING_SCHEMA, optional=True),
    )
)

KANJIDIC_SCHEMA = RecordSchema(
    model=Kanjidic,
    tag='kanjidic2',
    fields=(
        record('header', 'header', KANJIDIC_HEADER_SCHEMA),
        record('characters', 'character', KANJIDIC_CHARACTER_SCHEMA, repeated=True),
    )
)
