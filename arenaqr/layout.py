from __future__ import annotations

import logging
from dataclasses import dataclass

from PIL import Image, ImageDraw, ImageFont

from .errors import SurfaceError
from .settings import Rect, RenderSettings, hex_to_rgb

log = logging.getLogger(__name__)


@dataclass
class Surface:
    """The single raster every stage of one render paints onto."""

    image: Image.Image
    draw: ImageDraw.ImageDraw

    @classmethod
    def create(cls, settings: RenderSettings) -> "Surface":
        settings.validate()
        try:
            image = Image.new("RGB", (settings.canvas_width, settings.canvas_height),
                              hex_to_rgb(settings.background_color))
        except (ValueError, MemoryError) as exc:
            raise SurfaceError(f"could not allocate surface: {exc}") from exc
        return cls(image=image, draw=ImageDraw.Draw(image))

    @property
    def size(self):
        return self.image.size

    def measure(self, text: str, font: ImageFont.FreeTypeFont | ImageFont.ImageFont) -> float:
        return self.draw.textlength(text, font=font)

    def fill(self, rect: Rect, color: str) -> None:
        if rect.width <= 0 or rect.height <= 0:
            return
        self.draw.rectangle(rect.box, fill=hex_to_rgb(color))


def paint_base(surface: Surface, settings: RenderSettings) -> None:
    """Outer border, frame, background and the content/metadata divider."""
    f = settings.frame_width
    full = Rect(0, 0, settings.canvas_width, settings.canvas_height)
    surface.fill(full, settings.border_color)
    surface.fill(full.inset(f), settings.frame_color)
    surface.fill(full.inset(2 * f), settings.background_color)
    surface.fill(settings.divider(), settings.frame_color)
    log.debug("Base layout painted: %sx%s frame=%s divider_x=%s",
              settings.canvas_width, settings.canvas_height, f, settings.content_panel_width)
