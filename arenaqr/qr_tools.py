from __future__ import annotations

import asyncio
import logging
from typing import Callable

import qrcode
from qrcode.exceptions import DataOverflowError
from PIL import Image

from .errors import CodeGenerationError
from .layout import Surface
from .settings import Rect, RenderSettings

log = logging.getLogger(__name__)

CodeEncoder = Callable[[str, int, int, str, str], Image.Image]


def make_code_image(payload: str, size: int, quiet_margin: int, dark: str, light: str) -> Image.Image:
    """Encode ``payload`` as a square QR bitmap of ``size`` pixels."""
    if not payload:
        raise CodeGenerationError("Failed to generate QR code: empty payload")
    qr = qrcode.QRCode(error_correction=qrcode.constants.ERROR_CORRECT_M, border=max(0, int(quiet_margin)))
    try:
        qr.add_data(payload)
        qr.make(fit=True)
    except (DataOverflowError, ValueError) as exc:
        raise CodeGenerationError(
            f"Failed to generate QR code: payload of {len(payload)} characters does not fit ({exc})"
        ) from exc
    # whole-pixel modules first, then a nearest-neighbour resize to the exact size
    modules = qr.modules_count + 2 * qr.border
    qr.box_size = max(1, size // modules)
    qr_img = qr.make_image(fill_color=dark, back_color=light).convert("RGB")
    if qr_img.size != (size, size):
        qr_img = qr_img.resize((size, size), Image.Resampling.NEAREST)
    log.debug("QR version %s, %d modules, %dpx", qr.version, qr.modules_count, size)
    return qr_img


def code_position(settings: RenderSettings) -> Rect:
    area = settings.metadata_area()
    size = settings.code_size
    x = area.left + (area.width - size) // 2
    y = area.bottom - size
    return Rect(x, y, x + size, y + size)


async def embed_code(payload: str, surface: Surface, settings: RenderSettings,
                     encoder: CodeEncoder = make_code_image) -> Rect:
    code = await asyncio.to_thread(
        encoder,
        payload,
        settings.code_size,
        settings.code_quiet_margin,
        settings.code_dark_color,
        settings.code_light_color,
    )
    target = code_position(settings)
    if code.size != (target.width, target.height):
        code = code.resize((target.width, target.height), Image.Resampling.NEAREST)
    # light backing keeps the quiet zone readable over anything beneath it
    surface.fill(target.outset(settings.code_backing_margin), settings.code_light_color)
    surface.image.paste(code.convert("RGB"), (target.left, target.top))
    return target
