from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping, Optional, Tuple

from .errors import SurfaceError

log = logging.getLogger(__name__)


def hex_to_rgb(hex_str: str) -> Tuple[int, int, int]:
    s = hex_str.strip()
    if s.startswith('#'):
        s = s[1:]
    if len(s) == 3:
        s = ''.join(ch * 2 for ch in s)
    try:
        r = int(s[0:2], 16)
        g = int(s[2:4], 16)
        b = int(s[4:6], 16)
        return (r, g, b)
    except ValueError:
        return (0, 0, 0)


@dataclass(frozen=True)
class Rect:
    """Axis-aligned box; ``right`` and ``bottom`` are exclusive."""

    left: int
    top: int
    right: int
    bottom: int

    @property
    def width(self) -> int:
        return max(0, self.right - self.left)

    @property
    def height(self) -> int:
        return max(0, self.bottom - self.top)

    def inset(self, n: int) -> "Rect":
        return Rect(self.left + n, self.top + n, self.right - n, self.bottom - n)

    def outset(self, n: int) -> "Rect":
        return self.inset(-n)

    @property
    def box(self) -> Tuple[int, int, int, int]:
        # ImageDraw.rectangle treats both corners as inclusive
        return (self.left, self.top, self.right - 1, self.bottom - 1)


@dataclass(frozen=True)
class RenderSettings:
    canvas_width: int = 800
    canvas_height: int = 500
    content_panel_width: int = 600
    metadata_panel_width: int = 200
    frame_width: int = 1
    frame_color: str = "#D3D3D3"
    border_color: str = "#000000"
    background_color: str = "#FFFFFF"
    container_color: str = "#EEEEEE"
    padding: int = 16
    # per-field typography; an empty family means "first system sans font"
    title_font_size: int = 18
    title_font_family: str = ""
    title_color: str = "#333333"
    description_font_size: int = 14
    description_font_family: str = ""
    description_color: str = "#808080"
    date_font_size: int = 12
    date_font_family: str = ""
    date_color: str = "#808080"
    author_font_size: int = 12
    author_font_family: str = ""
    author_color: str = "#808080"
    body_font_size: int = 16
    body_font_family: str = ""
    body_color: str = "#333333"
    line_height_ratio: float = 1.4
    logo_size: int = 32
    logo_url: Optional[str] = None  # None -> packaged mark
    date_format: str = "%b %d, %Y"
    date_label: str = "Added "
    author_label: str = "By "
    code_size: int = 150
    code_quiet_margin: int = 1
    code_dark_color: str = "#000000"
    code_light_color: str = "#FFFFFF"
    code_backing_margin: int = 5
    space_between: int = 15
    jpeg_quality: int = 90

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "RenderSettings":
        """Build settings from a config section, ignoring unknown keys and bad numbers."""
        if not data:
            return cls()
        known = {f.name: f for f in fields(cls)}
        kwargs: Dict[str, Any] = {}
        for key, value in data.items():
            f = known.get(key)
            if f is None:
                continue
            default = getattr(cls, key)
            if value is not None and isinstance(default, (int, float)) and not isinstance(default, bool):
                try:
                    value = type(default)(value)
                except (TypeError, ValueError):
                    log.warning("Ignoring render setting %s=%r: expected %s", key, value, type(default).__name__)
                    continue
            kwargs[key] = value
        return cls(**kwargs)

    def validate(self) -> None:
        if self.canvas_width <= 0 or self.canvas_height <= 0:
            raise SurfaceError(f"invalid canvas size {self.canvas_width}x{self.canvas_height}")
        if self.content_panel_width <= 0 or self.metadata_panel_width <= 0:
            raise SurfaceError("panel widths must be positive")
        if self.content_panel_width + self.metadata_panel_width != self.canvas_width:
            raise SurfaceError(
                f"content panel ({self.content_panel_width}) + metadata panel "
                f"({self.metadata_panel_width}) must equal canvas width ({self.canvas_width})"
            )
        if self.frame_width < 0 or self.padding < 0:
            raise SurfaceError("frame width and padding must not be negative")

    # Derived geometry

    def live_area(self) -> Rect:
        f = self.frame_width
        return Rect(2 * f, 2 * f, self.canvas_width - 2 * f, self.canvas_height - 2 * f)

    def divider(self) -> Rect:
        f = self.frame_width
        x = self.content_panel_width
        return Rect(x, f, x + f, self.canvas_height - f)

    def content_container(self) -> Rect:
        live = self.live_area()
        panel = Rect(live.left, live.top, self.content_panel_width, live.bottom)
        return panel.inset(self.padding)

    def content_area(self) -> Rect:
        return self.content_container().inset(self.frame_width)

    def metadata_area(self) -> Rect:
        live = self.live_area()
        panel = Rect(self.content_panel_width + self.frame_width, live.top, live.right, live.bottom)
        return panel.inset(self.padding)

    def line_height(self, font_size: int) -> float:
        return font_size * self.line_height_ratio
