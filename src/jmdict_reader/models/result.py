"""
Parse result returned by the streaming decoder.
"""

from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class ParseResult(BaseModel):
    """
    Outcome of one successful parse call.

    Callback mode fills ``records``; document mode fills ``container``.
    Only produced on success: a failed parse raises instead of returning
    what was decoded before the failure.

    Attributes:
        records: Records returned by the callback handler, in document order
        container: Root record decoded in document mode
        entities: Entity table used for decoding (name -> lookup value)
        declarations: Entity declarations as written in the directive

    Example:
        >>> result = decode(stream, DocumentMode(JMDICT_SCHEMA), expand=False)
        >>> result.entities['v5k']
        'v5k'
        >>> result.declarations['v5k']
        "Godan verb with 'ku' ending"
    """

    records: Tuple[Any, ...] = Field(
        default=(),
        description="Decoded records (callback mode)"
    )

    container: Optional[Any] = Field(
        default=None,
        description="Decoded root container (document mode)"
    )

    entities: Dict[str, str] = Field(
        default_factory=dict,
        description="Resolved entity table active during decoding"
    )

    declarations: Dict[str, str] = Field(
        default_factory=dict,
        description="Entity declarations extracted from the directive"
    )

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    @property
    def record_count(self) -> int:
        """Number of callback records (0 in document mode)."""
        return len(self.records)

    def __repr__(self) -> str:
        # Full record lists would flood the terminal
        kind = type(self.container).__name__ if self.container is not None else None
        return (
            f"ParseResult("
            f"records={len(self.records)}, "
            f"container={kind}, "
            f"entities={len(self.entities)})"
        )
