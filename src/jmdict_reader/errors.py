"""
Error types raised while decoding dictionary documents.

Every failure is terminal for the parse call that raised it: no partial
records are returned and nothing is retried.
"""

from typing import Optional


class DictionaryParseError(Exception):
    """Base exception for all dictionary parsing errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class MalformedDirectiveError(DictionaryParseError):
    """
    Raised when a DOCTYPE directive holds entity declarations that cannot
    be matched.

    Only raised when strict directive checking is enabled
    (``JMDICT_STRICT_DIRECTIVES=true``). By default such declarations are
    silently ignored.
    """

    pass


class StructuralMismatchError(DictionaryParseError):
    """
    Raised when an element subtree does not satisfy its record schema.

    Examples:
    - Required child element missing (e.g. ``ent_seq``)
    - Numeric field holding a non-numeric literal
    - Second occurrence of a field declared unique
    - Root element with an unexpected tag in document mode
    """

    def __init__(
        self,
        message: str,
        tag: Optional[str] = None,
        line: Optional[int] = None
    ):
        self.tag = tag
        self.line = line
        if tag is not None:
            location = f"<{tag}>" if line is None else f"<{tag}> (line {line})"
            message = f"{location}: {message}"
        super().__init__(message)


class StreamFailureError(DictionaryParseError):
    """
    Raised when the input cannot be read to a well-formed end.

    Covers I/O errors from the underlying stream, XML syntax errors,
    input truncated mid-element and input with no root element.
    """

    pass
