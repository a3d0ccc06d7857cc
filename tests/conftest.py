"""Shared fixtures for emoji_text tests."""

import pytest
from PIL import Image

from emoji_text import LoadedEmoji


def _new_image(color, size=(32, 32)):
    return Image.new("RGBA", size, color)


@pytest.fixture
def make_image():
    """Factory for solid-color RGBA images."""
    return _new_image


@pytest.fixture
def wave():
    return LoadedEmoji("wave", [_new_image((255, 200, 0, 255))])


@pytest.fixture
def wide():
    return LoadedEmoji("wide", [_new_image((0, 0, 255, 255), size=(64, 32))])


@pytest.fixture
def blink():
    """Two-frame animated emoji: 0.1s red, then 0.2s green."""
    frames = [_new_image((255, 0, 0, 255)), _new_image((0, 255, 0, 255))]
    return LoadedEmoji("blink", frames, [0.1, 0.2])


@pytest.fixture
def emojis(wave, wide, blink):
    return {"wave": wave, "wide": wide, "blink": blink}
