"""Tests for splitting text into literal and emoji segments."""

import pytest

from emoji_text import SEPARATOR, EmojiRef, Literal, ShortcodeSplitter, join_segments, segment


def test_empty_text():
    assert segment("", {"x"}) == []


@pytest.mark.parametrize("text", ["plain text", "x marks the spot", ":y: is not known", "a:x b"])
def test_text_without_known_shortcodes_is_one_literal(text):
    assert segment(text, {"x"}) == [Literal(text)]


def test_no_shortcodes_at_all():
    assert segment("Hello :wave:", set()) == [Literal("Hello :wave:")]


def test_trailing_emoji():
    assert segment("Hello :wave:", {"wave"}) == [Literal("Hello "), EmojiRef("wave")]


def test_colon_wrapped_keys_are_accepted():
    assert segment("Hello :wave:", {":wave:"}) == [Literal("Hello "), EmojiRef("wave")]


def test_adjacent_emoji_without_space():
    assert segment("Hi:a::b:!", {"a", "b"}) == [
        Literal("Hi"),
        EmojiRef("a"),
        EmojiRef("b"),
        Literal("!"),
    ]


def test_spaces_between_emoji_kept_by_default():
    assert segment("A :x: :y: B", {"x", "y"}) == [
        Literal("A "),
        EmojiRef("x"),
        Literal(" "),
        EmojiRef("y"),
        Literal(" B"),
    ]


def test_spaces_between_emoji_omitted():
    assert segment("A :x: :y: B", {"x", "y"}, omit_spaces_between_emojis=True) == [
        Literal("A "),
        EmojiRef("x"),
        EmojiRef("y"),
        Literal(" B"),
    ]


def test_omitting_only_drops_whitespace_between_two_emoji():
    segments = segment(" :x:\t\n:y: and :y: ", {"x", "y"}, omit_spaces_between_emojis=True)
    assert segments == [
        Literal(" "),
        EmojiRef("x"),
        EmojiRef("y"),
        Literal(" and "),
        EmojiRef("y"),
        Literal(" "),
    ]


def test_repeated_emoji():
    assert segment(":x::x:", {"x"}) == [EmojiRef("x"), EmojiRef("x")]


def test_longest_shortcode_wins():
    assert segment(":a:b:", {"a", "a:b"}) == [EmojiRef("a:b")]


def test_markdown_around_shortcode_is_left_in_literals():
    assert segment("**bold :x:**", {"x"}) == [Literal("**bold "), EmojiRef("x"), Literal("**")]


def test_separator_in_input_is_dropped():
    assert segment(f"a{SEPARATOR}b :x:", {"x"}) == [Literal("ab "), EmojiRef("x")]


def test_shortcode_containing_separator_is_ignored():
    splitter = ShortcodeSplitter({f"bad{SEPARATOR}", "ok"})
    assert splitter.shortcodes == ["ok"]


@pytest.mark.parametrize(
    "text",
    [
        "",
        "no emoji here",
        "Hello :wave:",
        ":a::b::a:",
        "Hi:a::b:!",
        "A :a: :b: B",
        "::a:::",
        "**:a:** _:b:_",
    ],
)
def test_join_reconstructs_text(text):
    assert join_segments(segment(text, {"a", "b", "wave"})) == text


@pytest.mark.parametrize("text", ["Hello :wave:", "Hi:a::b:!", "A :a: :b: B"])
def test_segmenting_joined_segments_is_stable(text):
    shortcodes = {"a", "b", "wave"}
    for omit in (False, True):
        segments = segment(text, shortcodes, omit)
        assert segment(join_segments(segments), shortcodes, omit) == segments


def test_emoji_ref_text_form():
    assert EmojiRef("wave").text == ":wave:"
