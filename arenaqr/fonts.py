from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from PIL import ImageFont

log = logging.getLogger(__name__)

_FONT_DIRS: List[Path] = [
    Path('/usr/share/fonts'),
    Path('/usr/local/share/fonts'),
    Path.home() / '.fonts',
    Path('/Library/Fonts'),
    Path('/System/Library/Fonts'),
    Path.home() / 'Library/Fonts',
]
if os.name == 'nt':
    _FONT_DIRS = [Path(os.environ.get('WINDIR', 'C:/Windows')) / 'Fonts']

# Latin sans faces tried when no family is configured
_SANS_REGULAR = [
    'LiberationSans-Regular', 'DejaVuSans', 'NotoSans-Regular', 'Arial', 'Helvetica', 'arial',
]
_SANS_BOLD = [
    'LiberationSans-Bold', 'DejaVuSans-Bold', 'NotoSans-Bold', 'Arial Bold', 'arialbd',
]


def _norm(s: str) -> str:
    return s.lower().replace(' ', '').replace('-', '').replace('_', '')


@lru_cache(maxsize=64)
def find_font_file(family: str, bold: bool = False) -> Optional[str]:
    """Resolve a family name to a font file by fuzzy filename match.

    Bold requests prefer files whose stem mentions bold/black/heavy.
    """
    if not family:
        return None
    want = _norm(family)
    best: Optional[Path] = None
    best_score = -1
    for root in _FONT_DIRS:
        if not root.exists():
            continue
        for p in root.rglob('*'):
            if p.suffix.lower() not in ('.ttf', '.otf', '.ttc'):
                continue
            stem = _norm(p.stem)
            if want not in stem:
                continue
            score = 1
            is_bold = any(k in stem for k in ('bold', 'black', 'heavy'))
            if bold == is_bold:
                score += 2
            if stem == want:
                score += 1
            if score > best_score:
                best, best_score = p, score
    return str(best) if best is not None else None


def get_font(size: int, family: str = "", bold: bool = False) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    candidates = [family] if family else []
    candidates += _SANS_BOLD if bold else _SANS_REGULAR
    for name in candidates:
        path = find_font_file(name, bold)
        if not path:
            continue
        try:
            return ImageFont.truetype(path, size)
        except OSError:
            log.debug("Font %s could not be opened, trying next", path)
    # Pillow's bundled face scales with size since 10.1
    return ImageFont.load_default(size=size)
