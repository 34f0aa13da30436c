from __future__ import annotations

import asyncio
import base64
import contextlib
import logging
from io import BytesIO
from typing import Iterator, Optional

from .assets import AssetLoader
from .content import render_content
from .errors import CardError, SurfaceError
from .layout import Surface, paint_base
from .metadata import render_metadata
from .models import RenderRequest
from .qr_tools import CodeEncoder, embed_code, make_code_image
from .settings import RenderSettings

log = logging.getLogger(__name__)


@contextlib.contextmanager
def _stage(name: str) -> Iterator[None]:
    try:
        yield
    except CardError as exc:
        log.warning("Render failed in %s stage: %s", name, exc)
        raise exc.at_stage(name) from exc


def to_data_url(payload: bytes, mime: str = "image/jpeg") -> str:
    return f"data:{mime};base64,{base64.b64encode(payload).decode('ascii')}"


class CardComposer:
    """Runs the render stages in order against one surface and encodes it.

    Stages: base layout, content, metadata, code. Each render allocates its
    own surface; a failure in any stage discards it.
    """

    def __init__(self, settings: Optional[RenderSettings] = None,
                 loader: Optional[AssetLoader] = None,
                 encoder: CodeEncoder = make_code_image) -> None:
        self.settings = settings or RenderSettings()
        self.loader = loader or AssetLoader()
        self.encoder = encoder

    async def compose(self, request: RenderRequest) -> bytes:
        s = self.settings
        with _stage("surface"):
            surface = Surface.create(s)
        with _stage("base"):
            paint_base(surface, s)
        with _stage("content"):
            await render_content(request.content, surface, s, self.loader)
        with _stage("metadata"):
            await render_metadata(request.content.metadata, surface, s, self.loader)
        with _stage("code"):
            await embed_code(request.code_payload, surface, s, self.encoder)
        with _stage("serialize"):
            data = self._serialize(surface)
        log.info("Card rendered: %s %s, %d bytes", request.content.kind, surface.size, len(data))
        return data

    def _serialize(self, surface: Surface) -> bytes:
        buf = BytesIO()
        try:
            surface.image.save(buf, format="JPEG", quality=self.settings.jpeg_quality)
        except (OSError, ValueError) as exc:
            raise SurfaceError(f"could not encode JPEG: {exc}") from exc
        return buf.getvalue()


async def compose(request: RenderRequest, settings: Optional[RenderSettings] = None,
                  loader: Optional[AssetLoader] = None,
                  encoder: CodeEncoder = make_code_image) -> bytes:
    return await CardComposer(settings, loader, encoder).compose(request)


def render_card(request: RenderRequest, settings: Optional[RenderSettings] = None,
                loader: Optional[AssetLoader] = None,
                encoder: CodeEncoder = make_code_image) -> bytes:
    """Blocking wrapper around :func:`compose` for callers without a loop."""
    return asyncio.run(compose(request, settings, loader, encoder))
