from __future__ import annotations

import asyncio
import base64
import binascii
import logging
from io import BytesIO
from pathlib import Path
from typing import Optional
from urllib.parse import unquote, urlparse

import httpx
from PIL import Image, ImageOps, UnidentifiedImageError

from .errors import AssetLoadError

log = logging.getLogger(__name__)

DEFAULT_LOGO = Path(__file__).parent / "resources" / "logo.pbm"
DEFAULT_TIMEOUT = 30.0


def decode_image(data: bytes, source: str = "") -> Image.Image:
    try:
        img = Image.open(BytesIO(data))
        img.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
        raise AssetLoadError(f"Failed to decode image {source[:80]}: {exc}") from exc
    img = ImageOps.exif_transpose(img)
    if img.mode in ("RGBA", "LA") or (img.mode == "P" and "transparency" in img.info):
        return img.convert("RGBA")
    return img.convert("RGB")


def _decode_data_url(url: str) -> bytes:
    header, _, body = url.partition(",")
    if not body:
        raise AssetLoadError("Malformed data URL")
    try:
        if header.endswith(";base64"):
            return base64.b64decode(body, validate=True)
        return unquote(body).encode("latin-1")
    except (binascii.Error, ValueError) as exc:
        raise AssetLoadError(f"Malformed data URL: {exc}") from exc


class AssetLoader:
    """Fetch and decode bitmaps from http(s), ``data:`` URLs or local files.

    An ``httpx.AsyncClient`` may be shared in; otherwise a short-lived client
    is opened per request.
    """

    def __init__(self, client: Optional[httpx.AsyncClient] = None, timeout: float = DEFAULT_TIMEOUT) -> None:
        self._client = client
        self.timeout = timeout

    async def load(self, url: str) -> Image.Image:
        if not url:
            raise AssetLoadError("Failed to load image: empty URL")
        if url.startswith("data:"):
            return decode_image(_decode_data_url(url), "data URL")
        scheme = urlparse(url).scheme.lower()
        if scheme in ("http", "https"):
            data = await self._fetch(url)
            return decode_image(data, url)
        path = Path(unquote(urlparse(url).path)) if scheme == "file" else Path(url)
        return await asyncio.to_thread(self._read_file, path)

    async def _fetch(self, url: str) -> bytes:
        log.debug("GET %s", url)
        try:
            if self._client is not None:
                resp = await self._client.get(url)
            else:
                async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
                    resp = await client.get(url)
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise AssetLoadError(f"Failed to load image: HTTP {exc.response.status_code} for {url}") from exc
        except httpx.HTTPError as exc:
            raise AssetLoadError(f"Failed to load image {url}: {exc}") from exc
        return resp.content

    @staticmethod
    def _read_file(path: Path) -> Image.Image:
        try:
            data = path.read_bytes()
        except OSError as exc:
            raise AssetLoadError(f"Failed to load image {path}: {exc}") from exc
        return decode_image(data, str(path))
