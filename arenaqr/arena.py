from __future__ import annotations

import logging
import re
from typing import Any, Dict, Optional

import httpx

from .assets import DEFAULT_TIMEOUT, AssetLoader
from .composer import compose
from .errors import ArenaError, UnsupportedContentError
from .models import CardMetadata, Content, ImageContent, RenderRequest, TextContent
from .settings import RenderSettings

log = logging.getLogger(__name__)

API_BASE = "https://api.are.na/v2"

EXAMPLE_BLOCK_URLS = [
    "https://www.are.na/block/35251863",
    "https://www.are.na/block/35284311",
    "https://www.are.na/block/35021175",
    "https://www.are.na/block/34879567",
    "https://www.are.na/block/33647520",
]

_BLOCK_PATTERNS = [
    re.compile(r"are\.na/.*/.*/([0-9]+)"),
    re.compile(r"are\.na/block/([0-9]+)"),
]


def parse_block_id(url: str) -> str:
    for pattern in _BLOCK_PATTERNS:
        m = pattern.search(url or "")
        if m:
            return m.group(1)
    raise ArenaError("Invalid Are.na URL. Please provide a valid block URL.")


async def fetch_block(url: str, client: Optional[httpx.AsyncClient] = None,
                      timeout: float = DEFAULT_TIMEOUT) -> Dict[str, Any]:
    block_id = parse_block_id(url)
    api_url = f"{API_BASE}/blocks/{block_id}"
    log.info("Fetching Are.na block %s", block_id)
    try:
        if client is not None:
            resp = await client.get(api_url)
        else:
            async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as c:
                resp = await c.get(api_url)
    except httpx.HTTPError as exc:
        raise ArenaError(f"Failed to fetch Are.na block: {exc}") from exc
    if not resp.is_success:
        raise ArenaError(f"Failed to fetch Are.na block: HTTP error! status: {resp.status_code}")
    try:
        data = resp.json()
    except ValueError as exc:
        raise ArenaError(f"Failed to fetch Are.na block: invalid JSON ({exc})") from exc
    if not isinstance(data, dict):
        raise ArenaError("Failed to fetch Are.na block: unexpected response")
    return data


def _get(obj: Any, *keys: str) -> Any:
    for k in keys:
        if not isinstance(obj, dict):
            return None
        obj = obj.get(k)
    return obj


def content_from_block(block: Dict[str, Any]) -> Content:
    """Map an Are.na block to card content.

    Text blocks become text, image blocks prefer their display rendition,
    attachments fall back to the attachment URL.
    """
    metadata = CardMetadata(
        title=block.get("title") or block.get("generated_title") or None,
        description=block.get("description") or None,
        created_at=block.get("created_at") or None,
        username=_get(block, "user", "username"),
    )
    block_class = block.get("class") or ""
    if block_class == "Text" and block.get("content"):
        return TextContent(text=str(block["content"]), metadata=metadata)
    original = _get(block, "image", "original", "url")
    if original:
        return ImageContent(primary_url=original, display_url=_get(block, "image", "display", "url"),
                            metadata=metadata)
    attachment = _get(block, "attachment", "url")
    if attachment:
        return ImageContent(primary_url=attachment, metadata=metadata)
    raise UnsupportedContentError("No valid content found in this Are.na block")


async def create_card_from_url(url: str, settings: Optional[RenderSettings] = None,
                               client: Optional[httpx.AsyncClient] = None,
                               timeout: float = DEFAULT_TIMEOUT) -> bytes:
    """Fetch a block and render its card; the block URL itself is encoded."""
    url = (url or "").strip()
    block = await fetch_block(url, client=client, timeout=timeout)
    content = content_from_block(block)
    loader = AssetLoader(client=client, timeout=timeout)
    return await compose(RenderRequest(content=content, code_payload=url), settings, loader)
