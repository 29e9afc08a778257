"""
Streaming token decoder for entity-bearing dictionary documents.

The input is read forward in chunks and split into two token classes:

1. Directive tokens: ``<!DOCTYPE ...>`` in the prolog. Their ENTITY
   declarations are extracted and resolved into the entity table that
   applies to everything read afterwards.
2. Markup chunks: everything else. Entity references are rewritten with
   the active table, then the bytes are pushed into an lxml pull parser.

The pull parser's element events drive one of two modes:

- CallbackMode: every outermost element whose tag satisfies a predicate
  is handed to a handler once its subtree is complete. Other elements
  are released as soon as they end, so memory stays bounded by one entry.
- DocumentMode: the root element is decoded once into a container with
  a record schema.

The libxml2 parser never sees the DOCTYPE, so entity handling is the same
for both modes and for element text and attribute values alike.
"""

import logging
import re
from dataclasses import dataclass
from functools import partial
from typing import (
    Any, BinaryIO, Callable, Dict, Iterable, Iterator, List, Optional, Tuple, Union
)
from xml.sax.saxutils import escape

from lxml import etree

from jmdict_reader.config import ParserSettings, get_parser_settings
from jmdict_reader.errors import StreamFailureError
from jmdict_reader.models.result import ParseResult
from .entities import check_directive, extract_entities, resolve_entities
from .structure import RecordSchema, decode_subtree, local_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CallbackMode:
    """
    Decode every element whose local tag name satisfies ``predicate``.

    Attributes:
        predicate: Called with the element's local tag name
        handler: Called with the complete lxml element; returns the record
            to collect, or None to collect nothing

    Handed-off elements are detached from the document but left intact, so
    a handler may return the element itself.

    Example:
        >>> mode = CallbackMode.for_schema('entry', JMNEDICT_ENTRY_SCHEMA)
    """

    predicate: Callable[[str], bool]
    handler: Callable[[etree._Element], Any]

    @classmethod
    def for_tag(cls, tag_name: str, handler: Callable[[etree._Element], Any]) -> 'CallbackMode':
        """Match elements named ``tag_name`` exactly."""
        return cls(predicate=lambda tag: tag == tag_name, handler=handler)

    @classmethod
    def for_schema(cls, tag_name: str, schema: RecordSchema) -> 'CallbackMode':
        """Match elements named ``tag_name`` and decode them with ``schema``."""
        return cls.for_tag(tag_name, partial(decode_subtree, schema=schema))


@dataclass(frozen=True)
class DocumentMode:
    """Decode the whole root element into one container with ``schema``."""

    schema: RecordSchema


ParseMode = Union[CallbackMode, DocumentMode]


@dataclass(frozen=True)
class Directive:
    """A DOCTYPE directive, without the surrounding ``<!`` and ``>``."""

    text: str


_DOCTYPE = b'<!DOCTYPE'
_COMMENT_OPEN = b'<!--'
_PI_OPEN = b'<?'

# Regions whose content is not parsed for references
_OPAQUE_SECTIONS = (
    (b'<![CDATA[', b']]>'),
    (_COMMENT_OPEN, b'-->'),
    (_PI_OPEN, b'?>'),
)

# '<' is only interesting when it may open an opaque section
_MARKUP = re.compile(rb'&|<(?:[!?]|\Z)')
# Names longer than this are only recognised when declared
_MIN_REFERENCE_LENGTH = 64

_PREDEFINED_ENTITIES = frozenset({'amp', 'lt', 'gt', 'quot', 'apos'})
_QUOTE_ESCAPES = {'"': '&quot;', "'": '&apos;'}

_PARTIAL = object()


class _TokenReader:
    """Splits a stream into Directive tokens and raw markup chunks."""

    def __init__(self, stream: BinaryIO, chunk_size: int, encoding: str):
        self._stream = stream
        self._chunk_size = chunk_size
        self._encoding = encoding

    def __iter__(self) -> Iterator[Union[Directive, bytes]]:
        buffer = b''
        in_prolog = True

        for chunk in self._read_chunks():
            if not in_prolog:
                yield chunk
                continue

            buffer += chunk
            tokens, buffer, in_prolog = self._scan_prolog(buffer)
            yield from tokens

            if not in_prolog and buffer:
                yield buffer
                buffer = b''

        # Unterminated prolog constructs go to the XML parser, which reports them
        if buffer:
            yield buffer

    def _read_chunks(self) -> Iterator[bytes]:
        while True:
            try:
                chunk = self._stream.read(self._chunk_size)
            except (OSError, EOFError) as e:
                raise StreamFailureError(f"Failed to read input stream: {e}") from e

            if not chunk:
                return
            if isinstance(chunk, str):
                chunk = chunk.encode(self._encoding)
            yield chunk

    def _scan_prolog(self, buffer: bytes) -> Tuple[List[Union[Directive, bytes]], bytes, bool]:
        """
        Consume complete prolog constructs from buffer.

        Returns:
            (tokens, unconsumed remainder, still in prolog)
        """
        tokens: List[Union[Directive, bytes]] = []
        pos = 0

        while True:
            start = buffer.find(b'<', pos)
            if start < 0:
                if pos < len(buffer):
                    tokens.append(buffer[pos:])
                return tokens, b'', True

            if start > pos:
                tokens.append(buffer[pos:start])
            rest = buffer[start:]

            if rest.startswith(_PI_OPEN):
                end = buffer.find(b'?>', start + 2)
                if end < 0:
                    return tokens, rest, True
                tokens.append(buffer[start:end + 2])
                pos = end + 2
            elif rest.startswith(_COMMENT_OPEN):
                end = buffer.find(b'-->', start + 4)
                if end < 0:
                    return tokens, rest, True
                tokens.append(buffer[start:end + 3])
                pos = end + 3
            elif rest.startswith(_DOCTYPE):
                end = _directive_end(buffer, start)
                if end is None:
                    return tokens, rest, True
                raw = buffer[start + 2:end]
                tokens.append(Directive(self._decode_text(raw)))
                # Keep element line numbers aligned with the source
                if b'\n' in raw:
                    tokens.append(b'\n' * raw.count(b'\n'))
                pos = end + 1
            elif len(rest) < len(_DOCTYPE) and (
                _DOCTYPE.startswith(rest) or _COMMENT_OPEN.startswith(rest)
            ):
                # Too short to tell what this markup is yet
                return tokens, rest, True
            else:
                # Root element start: the prolog is over
                return tokens, rest, False

    def _decode_text(self, raw: bytes) -> str:
        try:
            return raw.decode(self._encoding)
        except UnicodeDecodeError as e:
            raise StreamFailureError(
                f"DOCTYPE directive is not valid {self._encoding}: {e}"
            ) from e


def _directive_end(buffer: bytes, start: int) -> Optional[int]:
    """
    Find the '>' closing the directive that opens at ``start``.

    Nested ``<...>`` declarations, quoted literals and comments inside the
    internal subset are skipped. Returns None if the buffer ends first.
    """
    depth = 0
    quote = None
    i = start

    while i < len(buffer):
        c = buffer[i:i + 1]
        if quote is not None:
            if c == quote:
                quote = None
        elif c in (b'"', b"'"):
            quote = c
        elif buffer.startswith(_COMMENT_OPEN, i):
            close = buffer.find(b'-->', i + 4)
            if close < 0:
                return None
            i = close + 3
            continue
        elif c == b'<':
            depth += 1
        elif c == b'>':
            depth -= 1
            if depth == 0:
                return i
        i += 1

    return None


class _ReferenceExpander:
    """
    Rewrites ``&name;`` references in markup chunks with the entity table.

    Replacement values are inserted as literal character data (escaped),
    never re-parsed as markup. Predefined XML entities, character
    references and unknown names are passed through untouched. CDATA
    sections, comments and processing instructions are not rewritten.
    Input split anywhere across chunks is handled by holding back an
    incomplete reference or section marker until the next chunk.
    """

    def __init__(self, encoding: str):
        self._encoding = encoding
        self._replacements: Dict[bytes, bytes] = {}
        self._pending = b''
        self._closer: Optional[bytes] = None
        self._reference, self._partial_reference = _reference_patterns(_MIN_REFERENCE_LENGTH)

    def install(self, table: Dict[str, str]) -> None:
        self._replacements = {
            name.encode(self._encoding): escape(value, _QUOTE_ESCAPES).encode(self._encoding)
            for name, value in table.items()
            if name not in _PREDEFINED_ENTITIES
        }
        longest = max((len(name) for name in self._replacements), default=0)
        self._reference, self._partial_reference = _reference_patterns(
            max(longest, _MIN_REFERENCE_LENGTH)
        )

    def feed(self, data: bytes) -> bytes:
        buffer = self._pending + data
        self._pending = b''
        out = []
        pos = 0
        end = len(buffer)

        while pos < end:
            if self._closer is not None:
                close = buffer.find(self._closer, pos)
                if close < 0:
                    split = max(pos, end - len(self._closer) + 1)
                    out.append(buffer[pos:split])
                    self._pending = buffer[split:]
                    break
                close += len(self._closer)
                out.append(buffer[pos:close])
                pos = close
                self._closer = None
                continue

            match = _MARKUP.search(buffer, pos)
            if match is None:
                out.append(buffer[pos:])
                break

            start = match.start()
            out.append(buffer[pos:start])

            if buffer.startswith(b'<', start):
                section = _open_section(buffer, start)
                if section is _PARTIAL:
                    self._pending = buffer[start:]
                    break
                if section is None:
                    out.append(b'<')
                    pos = start + 1
                else:
                    opener, self._closer = section
                    out.append(opener)
                    pos = start + len(opener)
                continue

            reference = self._reference.match(buffer, start)
            if reference is not None:
                replacement = self._replacements.get(reference.group(1))
                out.append(reference.group(0) if replacement is None else replacement)
                pos = reference.end()
                continue

            if self._partial_reference.match(buffer, start).end() == end:
                self._pending = buffer[start:]
                break

            out.append(b'&')
            pos = start + 1

        return b''.join(out)

    def flush(self) -> bytes:
        pending, self._pending = self._pending, b''
        return pending


def _reference_patterns(max_length: int) -> Tuple[re.Pattern, re.Pattern]:
    """Complete and incomplete reference patterns for names up to max_length bytes."""
    return (
        re.compile(rb'&([^\s&<;]{1,%d});' % max_length),
        re.compile(rb'&[^\s&<;]{0,%d}' % max_length),
    )


def _open_section(buffer: bytes, start: int):
    """Return (opener, closer) for an opaque section at start, _PARTIAL, or None."""
    rest = buffer[start:start + len(_OPAQUE_SECTIONS[0][0])]
    for opener, closer in _OPAQUE_SECTIONS:
        if rest.startswith(opener):
            return opener, closer
        if len(rest) < len(opener) and opener.startswith(rest):
            return _PARTIAL
    return None


class _Assembler:
    """Turns pull-parser events into records for one parse mode."""

    def __init__(self, mode: ParseMode):
        self.mode = mode
        self.records: List[Any] = []
        self.container: Optional[Any] = None
        self._depth = 0
        self._capture: Optional[etree._Element] = None

    def consume(self, events: Iterable[Tuple[str, etree._Element]]) -> None:
        for event, element in events:
            if event == 'start':
                if self._capture is None and self._wants(element):
                    self._capture = element
                self._depth += 1
                continue

            self._depth -= 1
            if element is self._capture:
                self._capture = None
                self._dispatch(element)
                if isinstance(self.mode, CallbackMode):
                    # The handler may keep the element, so it is detached intact
                    _detach(element)
                else:
                    _release(element)
            elif self._capture is None:
                # Subtree holds no match; nothing will need it again
                _release(element)

    def _wants(self, element: etree._Element) -> bool:
        if isinstance(self.mode, DocumentMode):
            return self._depth == 0
        return bool(self.mode.predicate(local_name(element)))

    def _dispatch(self, element: etree._Element) -> None:
        if isinstance(self.mode, DocumentMode):
            self.container = decode_subtree(element, self.mode.schema)
            return

        record = self.mode.handler(element)
        if record is not None:
            self.records.append(record)


def _release(element: etree._Element) -> None:
    """Free a finished element and the already-processed siblings before it."""
    element.clear(keep_tail=True)
    parent = element.getparent()
    if parent is not None:
        while element.getprevious() is not None:
            del parent[0]


def _detach(element: etree._Element) -> None:
    """Unlink a handed-off element and the processed siblings before it, without clearing it."""
    parent = element.getparent()
    if parent is not None:
        while element.getprevious() is not None:
            del parent[0]
        parent.remove(element)


def decode(
    stream: BinaryIO,
    mode: ParseMode,
    expand: bool = True,
    settings: Optional[ParserSettings] = None
) -> ParseResult:
    """
    Decode a dictionary document from a stream.

    Args:
        stream: Readable binary (or text) stream, read forward only
        mode: CallbackMode or DocumentMode
        expand: Replace entity references with their declared text (True)
            or with the entity name itself (False)
        settings: Parser settings (defaults to get_parser_settings())

    Returns:
        ParseResult with records (callback mode) or container (document mode)

    Raises:
        StructuralMismatchError: If a decoded subtree does not fit its schema
        StreamFailureError: If the stream fails or the XML is malformed,
            truncated or has no root element
            (a DOCTYPE after the root element starts counts as malformed)
        MalformedDirectiveError: If strict directives are enabled and an
            ENTITY declaration cannot be parsed

    Example:
        >>> with open('JMdict_e', 'rb') as f:
        ...     result = decode(f, DocumentMode(JMDICT_SCHEMA))
        >>> len(result.container.entries)
        213000
    """
    if not isinstance(mode, (CallbackMode, DocumentMode)):
        raise TypeError(f"Unsupported parse mode: {mode!r}")

    settings = settings or get_parser_settings()
    reader = _TokenReader(stream, settings.chunk_size, settings.encoding)
    expander = _ReferenceExpander(settings.encoding)
    assembler = _Assembler(mode)
    parser = etree.XMLPullParser(
        events=('start', 'end'),
        resolve_entities=False,
        huge_tree=settings.huge_tree,
        remove_comments=True,
        remove_pis=True,
        no_network=True
    )

    declarations: Dict[str, str] = {}
    entities: Dict[str, str] = {}

    try:
        for token in reader:
            if isinstance(token, Directive):
                check_directive(token.text, strict=settings.strict_directives)
                declarations = extract_entities(token.text)
                entities = resolve_entities(declarations, expand)
                expander.install(entities)
                logger.debug(
                    f"Installed entity table: {len(entities)} entities "
                    f"(expand={expand})"
                )
                continue

            markup = expander.feed(token)
            if markup:
                parser.feed(markup)
                assembler.consume(parser.read_events())

        tail = expander.flush()
        if tail:
            parser.feed(tail)
        parser.close()
    except etree.XMLSyntaxError as e:
        raise StreamFailureError(f"Malformed or truncated XML: {e}") from e

    assembler.consume(parser.read_events())

    if isinstance(mode, DocumentMode) and assembler.container is None:
        raise StreamFailureError("Input ended before the root element was complete")

    logger.info(
        f"Decoded {type(mode).__name__}: {len(assembler.records)} records, "
        f"{len(entities)} entities"
    )

    return ParseResult(
        records=tuple(assembler.records),
        container=assembler.container,
        entities=entities,
        declarations=declarations
    )
