import sys
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import pytest
from PIL import Image

# Ensure the repo root is on sys.path for direct pytest runs
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

SUBJECT_COLOR = (200, 30, 30)


class StubLoader:
    """Deterministic asset loader: mapped URLs first, otherwise a flat bitmap."""

    def __init__(self, images: Optional[Dict[str, Union[Image.Image, Exception]]] = None,
                 default_size: Tuple[int, int] = (64, 32)) -> None:
        self.images = images or {}
        self.default_size = default_size
        self.calls: List[str] = []

    async def load(self, url: str) -> Image.Image:
        self.calls.append(url)
        value = self.images.get(url)
        if isinstance(value, Exception):
            raise value
        if value is not None:
            return value.copy()
        return Image.new("RGB", self.default_size, SUBJECT_COLOR)


@pytest.fixture
def loader():
    return StubLoader()
