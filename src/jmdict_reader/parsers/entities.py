"""
Entity declaration extraction and resolution.

Dictionary files such as JMdict declare their coded vocabulary (parts of
speech, fields, dialects, ...) as internal entities in the DOCTYPE:

    <!ENTITY v5k "Godan verb with 'ku' ending">

Entries then reference them as ``&v5k;``. The extractor reads these
declarations from the raw directive text, and the resolution policy
decides whether references expand to the declared prose or stay as the
bare code.
"""

import logging
import re
from typing import Dict, Mapping

from jmdict_reader.errors import MalformedDirectiveError

logger = logging.getLogger(__name__)

# The name class spans A-z (including [\]^_`) and the value match is greedy.
# Existing corpora rely on one declaration per line, so both stay as-is.
ENTITY_DECLARATION = re.compile(r'<!ENTITY\s([0-9\-A-z]+)\s"(.+)">')

_DECLARATION_KEYWORD = '<!ENTITY'
_COMMENT = re.compile(r'<!--.*?-->', re.DOTALL)


def extract_entities(directive_text: str) -> Dict[str, str]:
    """
    Extract entity declarations from DOCTYPE directive text.

    Args:
        directive_text: Raw directive text (``DOCTYPE JMdict [ ... ]``)

    Returns:
        Dictionary mapping entity name to replacement text, exactly as
        written between the quotes. Later duplicates override earlier ones.

    Example:
        >>> extract_entities('<!ENTITY v1 "Ichidan verb">\\n<!ENTITY n "noun">')
        {'v1': 'Ichidan verb', 'n': 'noun'}
    """
    entities = {}
    for name, value in ENTITY_DECLARATION.findall(directive_text):
        entities[name] = value
    return entities


def resolve_entities(extracted: Mapping[str, str], expand: bool) -> Dict[str, str]:
    """
    Build the lookup table consulted for entity references.

    Args:
        extracted: Declarations from extract_entities()
        expand: True to substitute declared text, False to keep the
            entity name itself (e.g. ``v5k`` instead of the English prose)

    Returns:
        Fresh dictionary with the same key set as ``extracted``

    Example:
        >>> resolve_entities({'n': 'noun'}, expand=False)
        {'n': 'n'}
    """
    if expand:
        return dict(extracted)
    return {name: name for name in extracted}


def check_directive(directive_text: str, strict: bool = False) -> int:
    """
    Count ENTITY declarations in the directive that the pattern missed.

    Counts ``<!ENTITY`` keywords against pattern matches, ignoring DTD
    comments. Duplicated names still count as matched.

    Args:
        directive_text: Raw directive text
        strict: Raise instead of warning when declarations were missed

    Returns:
        Number of unmatched declarations (0 for a clean directive)

    Raises:
        MalformedDirectiveError: If strict and some declarations did not match
    """
    text = _COMMENT.sub('', directive_text)
    declared = text.count(_DECLARATION_KEYWORD)
    matched = len(ENTITY_DECLARATION.findall(text))
    unmatched = max(declared - matched, 0)

    if unmatched:
        message = (
            f"Directive declares {declared} entities but only {matched} "
            f"could be parsed"
        )
        if strict:
            raise MalformedDirectiveError(message)
        logger.warning(f"{message}; unmatched declarations are ignored")

    return unmatched
