"""
Input source handling for the loaders.

Dictionary files are commonly distributed gzip-compressed (JMdict_e.gz,
kanjidic2.xml.gz), so paths ending in .gz are decompressed on the fly.
"""

import gzip
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator, Union

from jmdict_reader.errors import StreamFailureError

logger = logging.getLogger(__name__)

Source = Union[str, Path, BinaryIO]


@contextmanager
def open_source(source: Source) -> Iterator[BinaryIO]:
    """
    Open a dictionary source for reading.

    Streams are yielded as-is and left open for the caller. Paths are
    opened in binary mode (gzip-decompressed for .gz) and closed on exit.

    Args:
        source: Open stream, or path to an XML or .gz file

    Raises:
        StreamFailureError: If the path cannot be opened

    Example:
        >>> with open_source('data/JMdict_e.gz') as stream:
        ...     result = decode(stream, DocumentMode(JMDICT_SCHEMA))
    """
    if not isinstance(source, (str, Path)):
        yield source
        return

    path = Path(source)
    try:
        if path.suffix == '.gz':
            stream = gzip.open(path, 'rb')
        else:
            stream = open(path, 'rb')
    except OSError as e:
        raise StreamFailureError(f"Cannot open dictionary file {path}: {e}") from e

    logger.debug(f"Opened {path}")
    with stream:
        yield stream
