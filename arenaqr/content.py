from __future__ import annotations

import logging
from typing import Awaitable, Callable, Dict

from PIL import Image

from .assets import AssetLoader
from .errors import UnsupportedContentError
from .fonts import get_font
from .layout import Surface
from .models import Content, ImageContent, Placement, TextContent, present
from .settings import Rect, RenderSettings, hex_to_rgb
from .text import wrap_text

log = logging.getLogger(__name__)


def fit_within(width: int, height: int, area: Rect) -> Rect:
    """Scale (width, height) uniformly to fit ``area`` and centre it.

    The result never exceeds the area and touches it on at least one axis.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"cannot fit an empty bitmap ({width}x{height})")
    scale = min(area.width / width, area.height / height)
    w = max(1, min(area.width, int(round(width * scale))))
    h = max(1, min(area.height, int(round(height * scale))))
    left = area.left + (area.width - w) // 2
    top = area.top + (area.height - h) // 2
    return Rect(left, top, left + w, top + h)


def paste_fitted(surface: Surface, bitmap: Image.Image, area: Rect) -> Rect:
    target = fit_within(bitmap.width, bitmap.height, area)
    scaled = bitmap.resize((target.width, target.height), Image.Resampling.LANCZOS)
    if scaled.mode == "RGBA":
        surface.image.paste(scaled, (target.left, target.top), scaled)
    else:
        surface.image.paste(scaled.convert("RGB"), (target.left, target.top))
    return target


def draw_container(surface: Surface, settings: RenderSettings) -> Rect:
    # grey frame around a white sub-area
    surface.fill(settings.content_container(), settings.container_color)
    area = settings.content_area()
    surface.fill(area, settings.background_color)
    return area


async def _render_image(content: ImageContent, surface: Surface, settings: RenderSettings,
                        loader: AssetLoader) -> Placement:
    url = content.source_url
    if not present(url):
        raise UnsupportedContentError("image content has no URL")
    log.info("Loading subject image %s", url)
    bitmap = await loader.load(url)
    area = draw_container(surface, settings)
    drawn = paste_fitted(surface, bitmap, area)
    log.debug("Subject %sx%s drawn at %s", bitmap.width, bitmap.height, drawn)
    return Placement(area=area, drawn=drawn)


async def _render_text(content: TextContent, surface: Surface, settings: RenderSettings,
                       loader: AssetLoader) -> Placement:
    if not present(content.text):
        raise UnsupportedContentError("text content is empty")
    area = draw_container(surface, settings)
    inner = area.inset(settings.padding)
    font = get_font(settings.body_font_size, settings.body_font_family)
    lines = wrap_text(content.text, lambda s: surface.measure(s, font), inner.width)
    line_h = settings.line_height(settings.body_font_size)
    fill = hex_to_rgb(settings.body_color)
    drawn = []
    y = float(inner.top)
    for line in lines:
        # a line starting below the sub-area is dropped, not an error
        if y > area.bottom:
            break
        surface.draw.text((inner.left, int(round(y))), line, font=font, fill=fill)
        drawn.append(line)
        y += line_h
    if len(drawn) < len(lines):
        log.debug("Text truncated: %d of %d lines fit", len(drawn), len(lines))
    return Placement(area=area, lines=drawn)


_RENDERERS: Dict[str, Callable[..., Awaitable[Placement]]] = {
    "image": _render_image,
    "text": _render_text,
}


async def render_content(content: Content, surface: Surface, settings: RenderSettings,
                         loader: AssetLoader) -> Placement:
    kind = getattr(content, "kind", None)
    renderer = _RENDERERS.get(kind)
    if renderer is None:
        raise UnsupportedContentError(f"unsupported content kind: {kind!r}")
    return await renderer(content, surface, settings, loader)
