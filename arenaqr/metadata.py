from __future__ import annotations

import logging
from datetime import datetime
from typing import List

from .assets import DEFAULT_LOGO, AssetLoader
from .content import paste_fitted
from .fonts import get_font
from .layout import Surface
from .models import CardMetadata, MetadataBlock, present
from .settings import Rect, RenderSettings, hex_to_rgb
from .text import wrap_text

log = logging.getLogger(__name__)


def format_date(raw: str, fmt: str) -> str:
    """Format an ISO-like timestamp, or hand back the raw string unchanged."""
    s = raw.strip()
    if s.endswith(("Z", "z")):
        s = s[:-1] + "+00:00"
    try:
        value = datetime.fromisoformat(s)
    except ValueError:
        log.debug("Unparseable date %r shown verbatim", raw)
        return raw
    if value.tzinfo is not None:
        value = value.astimezone()
    return value.strftime(fmt)


class _Stack:
    """Running vertical cursor inside the metadata panel."""

    def __init__(self, surface: Surface, settings: RenderSettings, area: Rect, top: float) -> None:
        self.surface = surface
        self.settings = settings
        self.area = area
        self.y = top
        self.blocks: List[MetadataBlock] = []

    def add(self, name: str, lines: List[str], size: int, family: str, color: str,
            bold: bool = False, advance: bool = True) -> None:
        font = get_font(size, family, bold=bold)
        line_h = self.settings.line_height(size)
        fill = hex_to_rgb(color)
        top = int(round(self.y))
        for i, line in enumerate(lines):
            self.surface.draw.text((self.area.left, int(round(self.y + i * line_h))), line, font=font, fill=fill)
        height = int(round(len(lines) * line_h))
        self.blocks.append(MetadataBlock(name=name, lines=lines, top=top, height=height))
        if advance:
            self.y += len(lines) * line_h + self.settings.space_between

    def wrapped(self, text: str, size: int, family: str, bold: bool = False) -> List[str]:
        font = get_font(size, family, bold=bold)
        return wrap_text(text, lambda s: self.surface.measure(s, font), self.area.width)


async def render_metadata(metadata: CardMetadata, surface: Surface, settings: RenderSettings,
                          loader: AssetLoader) -> List[MetadataBlock]:
    area = settings.metadata_area()
    logo_url = settings.logo_url or str(DEFAULT_LOGO)
    logo = await loader.load(logo_url)
    logo_box = Rect(area.left, area.top, area.left + settings.logo_size, area.top + settings.logo_size)
    paste_fitted(surface, logo, logo_box)

    s = settings
    stack = _Stack(surface, settings, area, logo_box.bottom + settings.space_between)
    if present(metadata.title):
        lines = stack.wrapped(metadata.title, s.title_font_size, s.title_font_family, bold=True)
        stack.add("title", lines, s.title_font_size, s.title_font_family, s.title_color, bold=True)
    if present(metadata.description):
        lines = stack.wrapped(metadata.description, s.description_font_size, s.description_font_family)
        stack.add("description", lines, s.description_font_size, s.description_font_family, s.description_color)
    if present(metadata.created_at):
        text = s.date_label + format_date(metadata.created_at, s.date_format)
        stack.add("date", [text], s.date_font_size, s.date_font_family, s.date_color)
    if present(metadata.username):
        text = s.author_label + metadata.username.strip()
        stack.add("author", [text], s.author_font_size, s.author_font_family, s.author_color, advance=False)
    log.debug("Metadata blocks: %s", [(b.name, b.top) for b in stack.blocks])
    return stack.blocks
