"""
Discovery helper for the dictionary catalog.

Provides user-facing APIs to discover the dictionary layouts listed in
data/dictionaries.yaml.
"""

from typing import Dict
from jmdict_reader.config import get_catalog


class DictionaryTypes:
    """
    Helper class for discovering supported dictionary layouts.

    All methods use the centralized catalog from dictionaries.yaml and
    return copies to prevent accidental mutations.

    Example:
        >>> DictionaryTypes.list_available()
        {'jmdict': 'JMdict Japanese-Multilingual word dictionary', ...}

        >>> DictionaryTypes.get_entry_tag('kanjidic')
        'character'

        >>> DictionaryTypes.is_valid('edict')
        False
    """

    @staticmethod
    def list_available() -> Dict[str, str]:
        """
        List all dictionary names with their descriptions.

        Returns:
            Dictionary mapping dictionary name to description
        """
        return {
            name: variant.description
            for name, variant in get_catalog().dictionaries.items()
        }

    @staticmethod
    def list_by_mode(mode: str) -> Dict[str, str]:
        """
        List dictionaries whose default decode strategy is ``mode``.

        Args:
            mode: 'document' or 'callback'

        Example:
            >>> DictionaryTypes.list_by_mode('callback')
            {'enamdict': 'ENAMDICT name dictionary (JMnedict entries, streamed)'}
        """
        return {
            name: variant.description
            for name, variant in get_catalog().dictionaries.items()
            if variant.mode == mode
        }

    @staticmethod
    def get_description(name: str) -> str:
        """
        Get the description of a dictionary.

        Raises:
            ValueError: If name is not found
        """
        try:
            return get_catalog().get_variant(name).description
        except KeyError as e:
            raise ValueError(f"Unknown dictionary: {name}") from e

    @staticmethod
    def get_entry_tag(name: str) -> str:
        """
        Get the tag of the record-bearing element of a dictionary.

        Raises:
            ValueError: If name is not found
        """
        try:
            return get_catalog().get_variant(name).entry_tag
        except KeyError as e:
            raise ValueError(f"Unknown dictionary: {name}") from e

    @staticmethod
    def get_root_tag(name: str) -> str:
        """
        Get the root element tag of a dictionary.

        Raises:
            ValueError: If name is not found
        """
        try:
            return get_catalog().get_variant(name).root_tag
        except KeyError as e:
            raise ValueError(f"Unknown dictionary: {name}") from e

    @staticmethod
    def is_valid(name: str) -> bool:
        """Check if a dictionary name is in the catalog."""
        return get_catalog().is_valid_dictionary(name)
