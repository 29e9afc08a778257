"""
Configuration management using Pydantic Settings.

Provides type-safe access to:
- Parser settings (read chunk size, encoding, libxml2 limits), loaded from
  environment variables prefixed with ``JMDICT_`` and an optional .env file
- The dictionary catalog, automatically loaded from data/dictionaries.yaml
"""

from pathlib import Path
from typing import Dict, Optional
import yaml
from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


CATALOG_PATH = Path(__file__).parent / 'data' / 'dictionaries.yaml'


class ParserSettings(BaseSettings):
    """
    Parser configuration loaded from environment variables.

    Environment Variables (from .env):
        JMDICT_CHUNK_SIZE: Bytes requested per stream read (default: 65536)
        JMDICT_ENCODING: Encoding of directive text and entity values (default: utf-8);
            must match the document's declared encoding
        JMDICT_HUGE_TREE: Lift libxml2 size limits (default: true)
        JMDICT_STRICT_DIRECTIVES: Reject unparseable ENTITY declarations (default: false)

    Example:
        >>> settings = get_parser_settings()
        >>> settings.chunk_size
        65536
        >>> ParserSettings(chunk_size=16).chunk_size
        16
    """

    chunk_size: int = Field(
        default=64 * 1024,
        gt=0,
        description="Number of bytes requested from the stream per read"
    )

    encoding: str = Field(
        default="utf-8",
        description=(
            "Encoding used for directive text and entity replacement values; "
            "it must match the encoding named by the document's XML declaration"
        )
    )

    huge_tree: bool = Field(
        default=True,
        description="Disable libxml2 security limits (JMdict exceeds the defaults)"
    )

    strict_directives: bool = Field(
        default=False,
        description="Raise MalformedDirectiveError for unparseable ENTITY declarations"
    )

    model_config = SettingsConfigDict(
        env_prefix='JMDICT_',
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore'
    )


# Singleton pattern - loaded once, cached forever
_parser_settings: Optional[ParserSettings] = None


def get_parser_settings() -> ParserSettings:
    """
    Get global parser settings instance (lazy-loaded singleton).

    Returns:
        Singleton ParserSettings instance

    Example:
        >>> settings = get_parser_settings()
        >>> settings is get_parser_settings()
        True
    """
    global _parser_settings
    if _parser_settings is None:
        _parser_settings = ParserSettings()
    return _parser_settings


class DictionaryVariant(BaseModel):
    """One named dictionary layout from data/dictionaries.yaml."""

    description: str
    root_tag: str
    entry_tag: str
    mode: str = Field(
        default="document",
        pattern=r'^(document|callback)$',
        description="Default decode strategy for this dictionary"
    )


class DictionaryCatalog(BaseSettings):
    """
    Catalog of dictionary variants automatically loaded from
    data/dictionaries.yaml.

    Attributes:
        dictionaries: Mapping of dictionary name to its variant description

    Example:
        >>> catalog = DictionaryCatalog()
        >>> catalog.get_variant('jmdict').entry_tag
        'entry'
    """

    dictionaries: Dict[str, DictionaryVariant] = Field(
        default_factory=dict,
        description="Named dictionary variants (jmdict, jmnedict, kanjidic, ...)"
    )

    model_config = SettingsConfigDict(
        extra='ignore'
    )

    @model_validator(mode='before')
    @classmethod
    def load_yaml_catalog(cls, data: dict) -> dict:
        """
        Load the catalog from data/dictionaries.yaml if not already provided.
        """
        # If data already has values (e.g., from tests), don't override
        if data:
            return data

        if not CATALOG_PATH.exists():
            raise FileNotFoundError(
                f"Dictionary catalog not found at {CATALOG_PATH}. "
                f"Ensure the package data was installed."
            )

        with open(CATALOG_PATH, 'r', encoding='utf-8') as f:
            yaml_data = yaml.safe_load(f) or {}

        return {'dictionaries': yaml_data.get('dictionaries', {})}

    def is_valid_dictionary(self, name: Optional[str]) -> bool:
        """Check if a dictionary name is present in the catalog."""
        if name is None:
            return False
        return name in self.dictionaries

    def get_variant(self, name: str) -> DictionaryVariant:
        """
        Get the variant description for a dictionary name.

        Raises:
            KeyError: If name is not found in the catalog
        """
        if name not in self.dictionaries:
            raise KeyError(f"Unknown dictionary: {name}")
        return self.dictionaries[name]


_catalog: Optional[DictionaryCatalog] = None


def get_catalog() -> DictionaryCatalog:
    """
    Get global dictionary catalog instance (lazy-loaded singleton).

    Example:
        >>> get_catalog().is_valid_dictionary('kanjidic')
        True
    """
    global _catalog
    if _catalog is None:
        _catalog = DictionaryCatalog()
    return _catalog
