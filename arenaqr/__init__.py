"""Render Are.na blocks as shareable cards with an embedded QR code."""

__version__ = "0.1.0"

from .composer import CardComposer, compose, render_card, to_data_url
from .errors import (
    ArenaError,
    AssetLoadError,
    CardError,
    CodeGenerationError,
    SurfaceError,
    UnsupportedContentError,
)
from .models import CardMetadata, ImageContent, RenderRequest, TextContent
from .settings import RenderSettings

__all__ = [
    "ArenaError",
    "AssetLoadError",
    "CardComposer",
    "CardError",
    "CardMetadata",
    "CodeGenerationError",
    "ImageContent",
    "RenderRequest",
    "RenderSettings",
    "SurfaceError",
    "TextContent",
    "UnsupportedContentError",
    "compose",
    "render_card",
    "to_data_url",
]
