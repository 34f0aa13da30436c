from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Union

from .settings import Rect


def present(value: Optional[str]) -> bool:
    """Empty or whitespace-only metadata counts as absent."""
    return value is not None and str(value).strip() != ""


@dataclass(frozen=True)
class CardMetadata:
    title: Optional[str] = None
    description: Optional[str] = None
    created_at: Optional[str] = None
    username: Optional[str] = None


@dataclass(frozen=True)
class ImageContent:
    primary_url: str
    display_url: Optional[str] = None
    metadata: CardMetadata = field(default_factory=CardMetadata)
    kind: str = field(default="image", init=False)

    @property
    def source_url(self) -> str:
        # the lighter display rendition wins when the block has one
        return self.display_url if present(self.display_url) else self.primary_url


@dataclass(frozen=True)
class TextContent:
    text: str
    metadata: CardMetadata = field(default_factory=CardMetadata)
    kind: str = field(default="text", init=False)


Content = Union[ImageContent, TextContent]


@dataclass(frozen=True)
class RenderRequest:
    content: Content
    code_payload: str


@dataclass
class Placement:
    """Where the content renderer put the subject."""

    area: Rect
    drawn: Optional[Rect] = None
    lines: List[str] = field(default_factory=list)


@dataclass
class MetadataBlock:
    name: str
    lines: List[str]
    top: int
    height: int
