import asyncio
import time

import pytest

from arenaqr.assets import DEFAULT_LOGO
from arenaqr.errors import AssetLoadError
from arenaqr.layout import Surface, paint_base
from arenaqr.metadata import format_date, render_metadata
from arenaqr.models import CardMetadata
from arenaqr.settings import RenderSettings

from conftest import StubLoader

# metadata area top (18) + logo (32) + gap (15)
FIRST_BLOCK_TOP = 65


def _blocks(metadata, loader=None, settings=None):
    s = settings or RenderSettings()
    surface = Surface.create(s)
    paint_base(surface, s)
    return asyncio.run(render_metadata(metadata, surface, s, loader or StubLoader()))


def test_title_only_reserves_nothing_else():
    blocks = _blocks(CardMetadata(title="Untitled"))
    assert [b.name for b in blocks] == ["title"]
    assert blocks[0].top == FIRST_BLOCK_TOP
    assert blocks[0].lines == ["Untitled"]


def test_all_fields_stack_in_fixed_order():
    blocks = _blocks(CardMetadata(
        title="A fairly long block title that needs more than one line",
        description="Some description of the block",
        created_at="2024-12-24T18:26:12.519Z",
        username="someone",
    ))
    assert [b.name for b in blocks] == ["title", "description", "date", "author"]
    tops = [b.top for b in blocks]
    assert tops == sorted(tops) and len(set(tops)) == 4
    assert len(blocks[0].lines) > 1
    assert blocks[2].lines == ["Added Dec 24, 2024"]
    assert blocks[3].lines == ["By someone"]


def test_cursor_advance_uses_real_line_count():
    s = RenderSettings()
    blocks = _blocks(CardMetadata(title="One two three four five six seven eight nine", username="me"))
    title, author = blocks
    expected = FIRST_BLOCK_TOP + len(title.lines) * s.line_height(s.title_font_size) + s.space_between
    assert author.top == round(expected)


def test_bad_date_is_shown_verbatim():
    blocks = _blocks(CardMetadata(created_at="not-a-date"))
    assert [b.name for b in blocks] == ["date"]
    assert blocks[0].lines == ["Added not-a-date"]


def test_empty_strings_count_as_absent():
    blocks = _blocks(CardMetadata(title="", description="   ", created_at="", username="bob"))
    assert [b.name for b in blocks] == ["author"]
    assert blocks[0].top == FIRST_BLOCK_TOP


def test_no_metadata_draws_only_the_logo():
    loader = StubLoader()
    assert _blocks(CardMetadata(), loader) == []
    assert loader.calls == [str(DEFAULT_LOGO)]


def test_custom_logo_url():
    loader = StubLoader()
    _blocks(CardMetadata(), loader, RenderSettings(logo_url="https://x/logo.png"))
    assert loader.calls == ["https://x/logo.png"]


def test_logo_failure_raises():
    loader = StubLoader({str(DEFAULT_LOGO): AssetLoadError("Failed to load image")})
    with pytest.raises(AssetLoadError):
        _blocks(CardMetadata(title="x"), loader)


@pytest.fixture
def local_tz(monkeypatch):
    if not hasattr(time, "tzset"):
        pytest.skip("process timezone cannot be switched on this platform")

    def switch(name):
        monkeypatch.setenv("TZ", name)
        time.tzset()

    yield switch
    monkeypatch.undo()
    time.tzset()


@pytest.mark.parametrize("raw,expected", [
    ("2024-12-24T18:26:12.519Z", "Dec 24, 2024"),
    ("2023-01-05", "Jan 05, 2023"),
    ("2023-01-05T10:00:00+02:00", "Jan 05, 2023"),
    ("yesterday", "yesterday"),
    ("", ""),
])
def test_format_date(raw, expected, local_tz):
    local_tz("UTC")
    assert format_date(raw, "%b %d, %Y") == expected


def test_aware_dates_are_shown_in_local_time(local_tz):
    local_tz("Asia/Tokyo")
    assert format_date("2024-12-24T18:26:12Z", "%b %d, %Y") == "Dec 25, 2024"
    local_tz("America/New_York")
    assert format_date("2024-12-25T02:00:00+00:00", "%b %d, %Y") == "Dec 24, 2024"
    # naive values are already local
    assert format_date("2024-12-24T23:30:00", "%b %d, %Y") == "Dec 24, 2024"
