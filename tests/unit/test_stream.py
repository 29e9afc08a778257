"""
Unit tests for the streaming token decoder.

Covers both parse modes, entity handling at arbitrary chunk boundaries,
and the terminal failure policy (no partial results).
"""

import io

import pytest


def _decode(data: bytes, mode, expand: bool = True, chunk_size: int = 65536, **settings):
    from jmdict_reader.config import ParserSettings
    from jmdict_reader.parsers.stream import decode

    return decode(
        io.BytesIO(data), mode, expand,
        ParserSettings(chunk_size=chunk_size, **settings)
    )


def _document_mode():
    from jmdict_reader.parsers.stream import DocumentMode
    from jmdict_reader.models.jmdict import JMDICT_SCHEMA

    return DocumentMode(JMDICT_SCHEMA)


def _entry_mode():
    from jmdict_reader.parsers.stream import CallbackMode
    from jmdict_reader.models.jmdict import JMDICT_ENTRY_SCHEMA

    return CallbackMode.for_schema('entry', JMDICT_ENTRY_SCHEMA)


GODAN_DOCUMENT = b"""<!DOCTYPE JMdict [
<!ENTITY v1 "Godan verb">
]>
<JMdict>
<entry><ent_seq>1</ent_seq><sense><pos>&v1;</pos><gloss>to go</gloss></sense></entry>
</JMdict>
"""


class TestEntityExpansion:
    """Test how entity references are rewritten with the active table."""

    def test_expand_substitutes_declared_text(self):
        """&v1; should decode to the declared replacement text."""
        result = _decode(GODAN_DOCUMENT, _document_mode(), expand=True)

        assert result.container.entries[0].sense[0].parts_of_speech == ('Godan verb',)
        assert result.entities == {'v1': 'Godan verb'}

    def test_no_expand_keeps_entity_name(self):
        """&v1; should decode to the literal name 'v1'."""
        result = _decode(GODAN_DOCUMENT, _document_mode(), expand=False)

        assert result.container.entries[0].sense[0].parts_of_speech == ('v1',)
        assert result.entities == {'v1': 'v1'}
        assert result.declarations == {'v1': 'Godan verb'}

    def test_callback_mode_shares_entity_handling(self):
        """Both modes should produce the same entries."""
        for expand in (True, False):
            document = _decode(GODAN_DOCUMENT, _document_mode(), expand=expand)
            callback = _decode(GODAN_DOCUMENT, _entry_mode(), expand=expand)

            assert callback.records == document.container.entries

    def test_sample_dictionary_expansion(self, jmdict_xml):
        """Should expand every coded field of the sample JMdict."""
        result = _decode(jmdict_xml, _document_mode())

        eat, mark, write = result.container.entries
        assert eat.sense[0].parts_of_speech == ('Ichidan verb', 'transitive verb')
        assert mark.sense[0].parts_of_speech == ('noun (common) (futsuumeishi)',)
        assert write.sense[0].parts_of_speech == ("Godan verb with `ku' ending",)

    def test_predefined_entities_pass_through(self, jmdict_xml):
        """&amp; is handled by the XML parser, not the entity table."""
        result = _decode(jmdict_xml, _document_mode())

        source = result.container.entries[1].sense[0].source_languages[0]
        assert source.content == 'rock & roll'
        assert source.language == 'eng'
        assert source.wasei == 'y'

    def test_cdata_is_not_rewritten(self, jmdict_xml):
        """References inside CDATA sections stay literal."""
        result = _decode(jmdict_xml, _document_mode())

        gloss = result.container.entries[2].sense[0].glossary[0]
        assert gloss.content == 'to write &v1; <verbatim>'

    def test_replacement_text_is_character_data(self):
        """Markup characters in a value should not be parsed as markup."""
        data = b"""<!DOCTYPE JMdict [
<!ENTITY odd "a < b & c">
]>
<JMdict><entry><ent_seq>1</ent_seq><sense><pos>&odd;</pos></sense></entry></JMdict>"""

        result = _decode(data, _document_mode())

        assert result.container.entries[0].sense[0].parts_of_speech == ('a < b & c',)

    def test_references_in_attribute_values(self):
        """Attribute values should be expanded the same way as text."""
        data = b"""<!DOCTYPE JMdict [
<!ENTITY lit "literal">
]>
<JMdict><entry><ent_seq>1</ent_seq>
<sense><gloss g_type="&lit;">dog</gloss></sense></entry></JMdict>"""

        expanded = _decode(data, _document_mode(), expand=True)
        kept = _decode(data, _document_mode(), expand=False)

        assert expanded.container.entries[0].sense[0].glossary[0].type == 'literal'
        assert kept.container.entries[0].sense[0].glossary[0].type == 'lit'

    def test_character_references_pass_through(self):
        """Numeric character references are left to the XML parser."""
        data = b"""<!DOCTYPE JMdict [<!ENTITY n "noun">]>
<JMdict><entry><ent_seq>1</ent_seq><sense><gloss>&#x3042;&#12354;</gloss></sense></entry></JMdict>"""

        result = _decode(data, _document_mode())

        assert result.container.entries[0].sense[0].glossary[0].content == 'ああ'

    def test_redeclared_entity_uses_later_value(self):
        """The later declaration should apply to every reference."""
        data = b"""<!DOCTYPE JMdict [
<!ENTITY v1 "first">
<!ENTITY v1 "second">
]>
<JMdict><entry><ent_seq>1</ent_seq><sense><pos>&v1;</pos></sense></entry></JMdict>"""

        result = _decode(data, _document_mode())

        assert result.container.entries[0].sense[0].parts_of_speech == ('second',)
        assert result.entities == {'v1': 'second'}

    def test_last_directive_wins(self):
        """A second directive in the prolog replaces the entity table."""
        data = b"""<!DOCTYPE JMdict [
<!ENTITY v1 "old">
<!ENTITY n "noun">
]>
<!DOCTYPE JMdict [<!ENTITY v1 "new">]>
<JMdict><entry><ent_seq>1</ent_seq><sense><pos>&v1;</pos></sense></entry></JMdict>"""

        result = _decode(data, _document_mode())

        assert result.container.entries[0].sense[0].parts_of_speech == ('new',)
        assert result.entities == {'v1': 'new'}

    @pytest.mark.parametrize('chunk_size', [1, 7, 65536])
    def test_long_declared_name(self, chunk_size):
        """Declared names of any length should be expanded."""
        name = b'x' * 100
        data = (
            b'<!DOCTYPE JMdict [\n<!ENTITY ' + name + b' "long">\n]>\n'
            b'<JMdict><entry><ent_seq>1</ent_seq><sense><pos>&' + name + b';</pos>'
            b'</sense></entry></JMdict>'
        )

        expanded = _decode(data, _entry_mode(), chunk_size=chunk_size)
        kept = _decode(data, _document_mode(), expand=False, chunk_size=chunk_size)

        assert expanded.records[0].sense[0].parts_of_speech == ('long',)
        assert kept.container.entries[0].sense[0].parts_of_speech == (name.decode(),)

    def test_non_utf8_document(self):
        """Replacement text uses the configured encoding of the document."""
        data = (
            '<?xml version="1.0" encoding="ISO-8859-1"?>\n'
            '<!DOCTYPE JMdict [\n<!ENTITY cafe "café">\n]>\n'
            '<JMdict><entry><ent_seq>1</ent_seq><sense><pos>&cafe;</pos>'
            '<gloss>déjà</gloss></sense></entry></JMdict>'
        ).encode('iso-8859-1')

        result = _decode(data, _document_mode(), encoding='iso-8859-1')

        sense = result.container.entries[0].sense[0]
        assert sense.parts_of_speech == ('café',)
        assert sense.glossary[0].content == 'déjà'

    def test_document_without_directive(self):
        """No directive means an empty entity table."""
        data = b'<JMdict><entry><ent_seq>1</ent_seq></entry></JMdict>'

        result = _decode(data, _document_mode())

        assert result.entities == {}
        assert result.container.entries[0].sequence == 1


class TestChunkBoundaries:
    """Decoding must not depend on where the stream splits its reads."""

    @pytest.mark.parametrize('chunk_size', [1, 2, 3, 7, 13, 64])
    def test_small_chunks_match_single_read(self, jmdict_xml, chunk_size):
        """Should decode the same entries for every chunk size."""
        expected = _decode(jmdict_xml, _document_mode())

        result = _decode(jmdict_xml, _document_mode(), chunk_size=chunk_size)

        assert result == expected

    @pytest.mark.parametrize('chunk_size', [1, 5])
    def test_small_chunks_without_expansion(self, jmdict_xml, chunk_size):
        """Preserved entity names survive split references too."""
        result = _decode(jmdict_xml, _entry_mode(), expand=False, chunk_size=chunk_size)

        assert result.records[0].sense[0].parts_of_speech == ('v1', 'vt')
        assert result.records[2].sense[0].glossary[0].content == 'to write &v1; <verbatim>'

    def test_text_stream_input(self, jmdict_xml):
        """A text stream should be encoded with the configured encoding."""
        from jmdict_reader.config import ParserSettings
        from jmdict_reader.parsers.stream import decode

        stream = io.StringIO(jmdict_xml.decode('utf-8'))

        result = decode(stream, _entry_mode(), settings=ParserSettings(chunk_size=11))

        assert [r.sequence for r in result.records] == [1358280, 1000000, 1000100]


class TestCallbackMode:
    """Test CallbackMode element filtering."""

    def test_skips_non_matching_siblings(self):
        """An <entry> beside a <header> yields exactly one record."""
        data = b"""<root>
<header><title>not an entry</title></header>
<entry><ent_seq>42</ent_seq></entry>
</root>"""

        result = _decode(data, _entry_mode())

        assert result.record_count == 1
        assert result.records[0].sequence == 42
        assert result.container is None

    def test_matches_at_any_depth(self):
        """Entries nested below the root should still be found."""
        data = b"""<root><part><section>
<entry><ent_seq>1</ent_seq></entry>
</section></part><entry><ent_seq>2</ent_seq></entry></root>"""

        result = _decode(data, _entry_mode())

        assert [r.sequence for r in result.records] == [1, 2]

    def test_outermost_match_only(self):
        """A matching element inside a matching element is part of its parent."""
        from jmdict_reader.parsers.stream import CallbackMode

        data = b'<root><box id="a"><box id="b"/></box><box id="c"/></root>'
        mode = CallbackMode.for_tag('box', lambda el: (el.get('id'), len(el)))

        result = _decode(data, mode)

        assert result.records == (('a', 1), ('c', 0))

    def test_handler_returning_none_records_nothing(self):
        """None results are not collected."""
        from jmdict_reader.parsers.stream import CallbackMode

        seen = []

        def handler(element):
            seen.append(element.findtext('ent_seq'))
            return None

        result = _decode(GODAN_DOCUMENT, CallbackMode.for_tag('entry', handler))

        assert seen == ['1']
        assert result.records == ()

    def test_handler_may_keep_the_element(self):
        """Elements handed to the handler are not emptied afterwards."""
        from jmdict_reader.parsers.stream import CallbackMode

        data = b'<root><entry><a>1</a></entry>text<entry><a>2</a></entry></root>'

        for chunk_size in (1, 65536):
            result = _decode(data, CallbackMode.for_tag('entry', lambda el: el), chunk_size=chunk_size)

            assert [len(el) for el in result.records] == [1, 1]
            assert [el.findtext('a') for el in result.records] == ['1', '2']
            assert all(el.getparent() is None for el in result.records)

    def test_custom_predicate(self):
        """Predicates receive the local tag name."""
        from jmdict_reader.parsers.stream import CallbackMode

        data = b'<root><k_ele/><r_ele/><sense/></root>'
        mode = CallbackMode(predicate=lambda tag: tag.endswith('_ele'), handler=lambda el: el.tag)

        assert _decode(data, mode).records == ('k_ele', 'r_ele')

    def test_header_is_skipped_in_kanjidic(self, kanjidic_xml):
        """Streaming <character> elements should ignore the header."""
        from jmdict_reader.parsers.stream import CallbackMode
        from jmdict_reader.models.kanjidic import KANJIDIC_CHARACTER_SCHEMA

        result = _decode(kanjidic_xml, CallbackMode.for_schema('character', KANJIDIC_CHARACTER_SCHEMA))

        assert [c.literal for c in result.records] == ['亜', '唖']


class TestDocumentMode:
    """Test DocumentMode container decoding."""

    def test_decodes_root_container(self, jmdict_xml):
        """Should decode every entry into the container."""
        from jmdict_reader.models.jmdict import Jmdict

        result = _decode(jmdict_xml, _document_mode())

        assert isinstance(result.container, Jmdict)
        assert [e.sequence for e in result.container.entries] == [1358280, 1000000, 1000100]
        assert result.records == ()

    def test_optional_presence_marker(self, jmdict_xml):
        """<re_nokanji/> is '' when present and None when absent."""
        result = _decode(jmdict_xml, _document_mode())

        eat, mark, _ = result.container.entries
        assert eat.readings[0].no_kanji is None
        assert mark.readings[0].no_kanji == ''

    def test_wrong_root_element(self, jmnedict_xml):
        """A root element other than the schema's tag is a mismatch."""
        from jmdict_reader.errors import StructuralMismatchError

        with pytest.raises(StructuralMismatchError, match="expected <JMdict> element"):
            _decode(jmnedict_xml, _document_mode())


class TestIdempotence:
    """Parsing the same input twice gives equal results."""

    @pytest.mark.parametrize('expand', [True, False])
    def test_repeated_parse_is_equal(self, jmdict_xml, expand):
        """Two separate calls should yield structurally equal results."""
        first = _decode(jmdict_xml, _document_mode(), expand=expand)
        second = _decode(jmdict_xml, _document_mode(), expand=expand)

        assert first == second
        assert first.entities is not second.entities


INVALID_THIRD_ENTRY = b"""<!DOCTYPE JMdict [<!ENTITY n "noun">]>
<JMdict>
<entry><ent_seq>1</ent_seq></entry>
<entry><ent_seq>2</ent_seq></entry>
<entry><r_ele><reb>missing sequence</reb></r_ele></entry>
</JMdict>"""


class TestFailurePolicy:
    """Errors are terminal and return no partial result."""

    def test_document_mode_structural_failure(self):
        """Should raise instead of returning the two valid entries."""
        from jmdict_reader.errors import StructuralMismatchError

        with pytest.raises(StructuralMismatchError, match="missing required child <ent_seq>"):
            _decode(INVALID_THIRD_ENTRY, _document_mode())

    def test_callback_mode_structural_failure(self):
        """Callback mode aborts on the third entry the same way."""
        from jmdict_reader.errors import StructuralMismatchError

        with pytest.raises(StructuralMismatchError) as exc_info:
            _decode(INVALID_THIRD_ENTRY, _entry_mode())

        assert exc_info.value.tag == 'entry'
        assert exc_info.value.line == 5

    def test_handler_exception_propagates(self):
        """Errors raised by a handler are not swallowed."""
        from jmdict_reader.parsers.stream import CallbackMode

        def handler(element):
            raise RuntimeError("handler failed")

        with pytest.raises(RuntimeError, match="handler failed"):
            _decode(GODAN_DOCUMENT, CallbackMode.for_tag('entry', handler))

    @pytest.mark.parametrize('mode_factory', [_document_mode, _entry_mode])
    def test_truncated_input(self, jmdict_xml, mode_factory):
        """Input ending mid-element is a stream failure, not a clean end."""
        from jmdict_reader.errors import StreamFailureError

        truncated = jmdict_xml[:jmdict_xml.index(b'<ent_seq>1000000') + 5]

        with pytest.raises(StreamFailureError, match="Malformed or truncated XML"):
            _decode(truncated, mode_factory())

    @pytest.mark.parametrize('data', [b'', b'   \n', b'<!DOCTYPE JMdict [<!ENTITY n "noun">]>'])
    def test_input_without_root_element(self, data):
        """A document with no root element cannot be decoded."""
        from jmdict_reader.errors import StreamFailureError

        with pytest.raises(StreamFailureError):
            _decode(data, _document_mode())

    def test_unterminated_directive(self):
        """A directive cut off by end-of-input is a stream failure."""
        from jmdict_reader.errors import StreamFailureError

        with pytest.raises(StreamFailureError):
            _decode(b'<!DOCTYPE JMdict [<!ENTITY n "noun">', _entry_mode())

    def test_directive_after_root_is_rejected(self):
        """DOCTYPE is only recognised in the prolog."""
        from jmdict_reader.errors import StreamFailureError

        data = b'<JMdict><!DOCTYPE JMdict [<!ENTITY n "noun">]><entry/></JMdict>'

        with pytest.raises(StreamFailureError):
            _decode(data, _entry_mode())

    def test_read_error_becomes_stream_failure(self):
        """OSError from the stream is wrapped in StreamFailureError."""
        from jmdict_reader.config import ParserSettings
        from jmdict_reader.errors import StreamFailureError
        from jmdict_reader.parsers.stream import decode

        class BrokenStream:
            def __init__(self):
                self.calls = 0

            def read(self, size):
                self.calls += 1
                if self.calls > 1:
                    raise OSError("connection reset")
                return GODAN_DOCUMENT[:40]

        with pytest.raises(StreamFailureError, match="connection reset"):
            decode(BrokenStream(), _entry_mode(), settings=ParserSettings(chunk_size=40))

    def test_strict_directives(self):
        """Strict settings reject declarations the extractor cannot read."""
        from jmdict_reader.errors import MalformedDirectiveError

        data = b"""<!DOCTYPE JMdict [<!ENTITY bad 'single'>]>
<JMdict><entry><ent_seq>1</ent_seq></entry></JMdict>"""

        with pytest.raises(MalformedDirectiveError):
            _decode(data, _document_mode(), strict_directives=True)

        assert _decode(data, _document_mode()).entities == {}

    def test_unsupported_mode(self):
        """Only CallbackMode and DocumentMode are accepted."""
        from jmdict_reader.parsers.stream import decode

        with pytest.raises(TypeError, match="Unsupported parse mode"):
            decode(io.BytesIO(GODAN_DOCUMENT), 'document')

    def test_all_errors_share_base_class(self):
        """Callers can catch every parse failure with one class."""
        from jmdict_reader.errors import (
            DictionaryParseError,
            MalformedDirectiveError,
            StreamFailureError,
            StructuralMismatchError,
        )

        for error in (MalformedDirectiveError, StreamFailureError, StructuralMismatchError):
            assert issubclass(error, DictionaryParseError)


class TestErrorLocation:
    """Structural errors point at the source line of the element."""

    def test_line_numbers_count_directive_lines(self):
        """Lines of a multi-line directive are kept in element positions."""
        from jmdict_reader.errors import StructuralMismatchError

        data = b"""<?xml version="1.0"?>
<!DOCTYPE JMdict [
<!ENTITY n "noun">
<!ENTITY v1 "Ichidan verb">
]>
<JMdict>
<entry><r_ele><reb>no sequence</reb></r_ele></entry>
</JMdict>"""

        with pytest.raises(StructuralMismatchError, match=r"<entry> \(line 7\)"):
            _decode(data, _entry_mode())
