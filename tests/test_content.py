import asyncio

import pytest
from PIL import Image

from arenaqr.content import fit_within, render_content
from arenaqr.errors import AssetLoadError, UnsupportedContentError
from arenaqr.fonts import get_font
from arenaqr.layout import Surface, paint_base
from arenaqr.models import CardMetadata, ImageContent, TextContent
from arenaqr.settings import Rect, RenderSettings, hex_to_rgb
from arenaqr.text import wrap_text

from conftest import SUBJECT_COLOR, StubLoader


def _render(content, loader, settings=None):
    s = settings or RenderSettings()
    surface = Surface.create(s)
    paint_base(surface, s)
    placement = asyncio.run(render_content(content, surface, s, loader))
    return surface, placement


@pytest.mark.parametrize("size", [(1000, 500), (500, 1000), (640, 480), (300, 300), (123, 457), (2000, 1999)])
def test_fit_preserves_aspect_and_fills_one_axis(size):
    w, h = size
    area = Rect(0, 0, 566, 464)
    r = fit_within(w, h, area)
    assert r.width <= area.width and r.height <= area.height
    assert r.width == area.width or r.height == area.height
    assert r.width / r.height == pytest.approx(w / h, rel=0.02)
    # centred on both axes
    assert abs((r.left - area.left) - (area.right - r.right)) <= 1
    assert abs((r.top - area.top) - (area.bottom - r.bottom)) <= 1


def test_wide_image_is_width_limited():
    loader = StubLoader({"https://x/img.png": Image.new("RGB", (1000, 500), SUBJECT_COLOR)})
    surface, placement = _render(ImageContent(primary_url="https://x/img.png"), loader)
    area = RenderSettings().content_area()
    assert placement.area == area
    assert placement.drawn.width == area.width
    assert placement.drawn.height == 282
    px = surface.image.load()
    cx = (placement.drawn.left + placement.drawn.right) // 2
    cy = (placement.drawn.top + placement.drawn.bottom) // 2
    assert all(abs(a - b) <= 2 for a, b in zip(px[cx, cy], SUBJECT_COLOR))
    # white sub-area above the letterboxed image, grey container around it
    assert px[cx, area.top + 2] == (255, 255, 255)
    assert px[cx, area.top - 1] == hex_to_rgb(RenderSettings().container_color)


def test_display_url_is_preferred():
    loader = StubLoader()
    _render(ImageContent(primary_url="https://x/original.png", display_url="https://x/display.png"), loader)
    assert loader.calls == ["https://x/display.png"]


def test_blank_display_url_falls_back_to_primary():
    loader = StubLoader()
    _render(ImageContent(primary_url="https://x/original.png", display_url=""), loader)
    assert loader.calls == ["https://x/original.png"]


def test_image_load_failure_leaves_base_layout_only():
    loader = StubLoader({"https://x/broken.png": AssetLoadError("Failed to load image")})
    s = RenderSettings()
    surface = Surface.create(s)
    paint_base(surface, s)
    with pytest.raises(AssetLoadError):
        asyncio.run(render_content(ImageContent(primary_url="https://x/broken.png"), surface, s, loader))
    # no container was painted
    assert surface.image.getpixel((s.content_container().left, 250)) == (255, 255, 255)


def test_text_is_wrapped_inside_sub_area():
    surface, placement = _render(TextContent(text="Hello world"), StubLoader())
    assert placement.lines == ["Hello world"]
    assert placement.drawn is None


def test_long_text_is_truncated_silently():
    s = RenderSettings()
    text = " ".join(["overflowing"] * 400)
    loader = StubLoader()
    surface, placement = _render(TextContent(text=text), loader)
    assert loader.calls == []

    area = s.content_area()
    inner = area.inset(s.padding)
    font = get_font(s.body_font_size, s.body_font_family)
    all_lines = wrap_text(text, lambda t: surface.measure(t, font), inner.width)
    line_h = s.line_height(s.body_font_size)
    assert 0 < len(placement.lines) < len(all_lines)
    assert placement.lines == all_lines[:len(placement.lines)]
    # the last drawn line starts inside the sub-area, the next would not
    last_top = inner.top + (len(placement.lines) - 1) * line_h
    assert last_top <= area.bottom
    assert last_top + line_h > area.bottom


def test_line_starting_on_the_bottom_bound_is_drawn():
    # sub-area 3..497 with 13px lines: the 39th line starts exactly on the bound
    s = RenderSettings(padding=0, body_font_size=13, line_height_ratio=1.0)
    area = s.content_area()
    assert (area.top, area.bottom) == (3, 497)
    surface, placement = _render(TextContent(text=" ".join(["w"] * 4000)), StubLoader(), s)
    assert len(placement.lines) == 39


def test_empty_text_is_unsupported():
    with pytest.raises(UnsupportedContentError):
        _render(TextContent(text="   "), StubLoader())


def test_unknown_kind_is_unsupported():
    class VideoContent:
        kind = "video"
        metadata = CardMetadata()

    with pytest.raises(UnsupportedContentError, match="video"):
        _render(VideoContent(), StubLoader())
