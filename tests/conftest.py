import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pygame as pg
import pytest

from lyric_clock import HighlightClock
from lyric_layout import FontCache
from lyric_renderer import LyricRenderer


class FakeTime:
    """Manually advanced time source in milliseconds."""

    def __init__(self, start=1000.0):
        self.now = float(start)

    def __call__(self):
        return self.now

    def advance(self, ms):
        self.now += ms


@pytest.fixture(scope="session", autouse=True)
def pygame_fonts():
    pg.font.init()
    yield
    pg.font.quit()


@pytest.fixture
def fake_time():
    return FakeTime()


@pytest.fixture
def clock(fake_time):
    return HighlightClock(time_source=fake_time)


@pytest.fixture
def fonts():
    # pygame default font: same metrics on every machine
    return FontCache(family=None)


@pytest.fixture
def renderer(fonts):
    return LyricRenderer(fonts)
