from __future__ import annotations

from typing import Optional


class CardError(Exception):
    """Base class for every failure that aborts a card render.

    ``stage`` names the composer stage that failed (``surface``, ``base``,
    ``content``, ``metadata``, ``code`` or ``serialize``) once the composer
    has seen the error; it is ``None`` when raised outside a render.
    """

    def __init__(self, message: str = "", stage: Optional[str] = None) -> None:
        super().__init__(message)
        self.stage = stage

    def at_stage(self, stage: str) -> "CardError":
        # Same class, message prefixed with the stage that raised it
        return type(self)(f"{stage}: {self}", stage=stage)


class UnsupportedContentError(CardError):
    pass


class AssetLoadError(CardError):
    pass


class CodeGenerationError(CardError):
    pass


class SurfaceError(CardError):
    pass


class ArenaError(Exception):
    """Lookup of a block on the Are.na API failed."""
