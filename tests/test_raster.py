"""Tests for drawing rich text onto an image."""

import os

import pytest
from PIL import Image

from emoji_text import EmojiRenderer, RichText, TextRasterizer, TextRun, TextStyle
from emoji_text.raster import hex_to_rgb, save_animation, save_image

CONFIG = {"image_width": 200, "image_scale": 1, "padding": 10, "font_size": 16}


@pytest.fixture
def rasterizer():
    return TextRasterizer(CONFIG)


def test_hex_to_rgb():
    assert hex_to_rgb("#ffffff") == (255, 255, 255)
    assert hex_to_rgb("#0f0") == (0, 255, 0)


def test_emoji_size_defaults_to_font_size():
    assert TextRasterizer(CONFIG).emoji_size == int(16 * 1.1)
    assert TextRasterizer({**CONFIG, "emoji_size": 40, "image_scale": 2}).emoji_size == 80


def test_canvas_width_follows_config(rasterizer):
    image = rasterizer.render(RichText((TextRun("hello"),)))
    assert image.mode == "RGBA"
    assert image.size[0] == 200


def test_long_text_wraps(rasterizer):
    short = rasterizer.render(RichText((TextRun("hi"),)))
    long = rasterizer.render(RichText((TextRun("word " * 40),)))
    assert long.size[1] > short.size[1]


def test_newlines_add_lines(rasterizer):
    one = rasterizer.render(RichText((TextRun("a"),)))
    two = rasterizer.render(RichText((TextRun("a\nb"),)))
    assert two.size[1] > one.size[1]


def test_tall_emoji_grows_the_line(rasterizer, wave):
    small = rasterizer.render(EmojiRenderer(":wave:").render({"wave": wave}, size=10))
    tall = rasterizer.render(EmojiRenderer(":wave:").render({"wave": wave}, size=120))
    assert tall.size[1] > small.size[1]


def test_emoji_pixels_are_drawn(rasterizer, wave):
    image = rasterizer.render(EmojiRenderer(":wave:").render({"wave": wave}, size=30))
    colors = {color for _, color in image.getcolors(maxcolors=1 << 16)}
    assert (255, 200, 0, 255) in colors


def test_styled_runs_and_attributed_input(rasterizer, emojis):
    text = "**b** *i* `c` ~~s~~ [l](https://example.com) :blink:"
    attributed = EmojiRenderer(text).render_attributed(emojis, size=rasterizer.emoji_size)
    immutable = EmojiRenderer(text).render(emojis, size=rasterizer.emoji_size)
    assert rasterizer.render(attributed).tobytes() == rasterizer.render(immutable).tobytes()


def test_styles_change_pixels(rasterizer):
    plain = rasterizer.render(RichText((TextRun("text"),)))
    for style in (
        TextStyle(bold=True),
        TextStyle(italic=True),
        TextStyle(code=True),
        TextStyle(strikethrough=True),
        TextStyle(link="https://example.com"),
    ):
        styled = rasterizer.render(RichText((TextRun("text", style),)))
        assert styled.size == plain.size
        assert styled.tobytes() != plain.tobytes()


def test_save_image(rasterizer):
    path = save_image(rasterizer.render(RichText((TextRun("x"),))))
    try:
        with Image.open(path) as img:
            assert img.format == "JPEG"
            assert img.size[0] == 200
    finally:
        os.remove(path)


def test_save_animation(rasterizer, emojis):
    renderer = EmojiRenderer("x :blink:")
    frames = [
        rasterizer.render(renderer.render_animated(emojis, size=20, time=t))
        for t in (0, 0.15)
    ]
    path = save_animation(frames, 100)
    try:
        with Image.open(path) as img:
            assert img.format == "GIF"
            assert img.n_frames == 2
    finally:
        os.remove(path)


def test_save_animation_requires_frames():
    with pytest.raises(ValueError):
        save_animation([], 100)
