"""表情文本渲染器"""

from typing import Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from .emoji import LoadedEmoji
from .markdown import MarkdownParseError, parse_markdown
from .richtext import AttributedString, RichText
from .segmenter import ShortcodeSplitter
from .styles import EmojiRef, InlineImage, PLAIN, Segment, TextRun, shortcode_name

MarkdownParser = Callable[[str], Tuple[TextRun, ...]]


def _by_name(emojis: Mapping[str, LoadedEmoji]) -> Dict[str, LoadedEmoji]:
    """按表情名索引，`wave` 与 `:wave:` 同时存在时取 `wave`"""
    lookup: Dict[str, LoadedEmoji] = {}
    for key, emoji in emojis.items():
        name = shortcode_name(key)
        if key == name or name not in lookup:
            lookup[name] = emoji
    return lookup


def fold_segments(
    segments: Iterable[Segment],
    emojis: Mapping[str, LoadedEmoji],
    size: Optional[float],
    time: float,
    append_text: Callable[[TextRun], None],
    append_image: Callable[[InlineImage], None],
    markdown: MarkdownParser = parse_markdown,
) -> None:
    """按顺序处理片段，两种输出共用

    表情缺失时按原文当普通文字处理，markdown 解析失败时按纯文本输出，都不会抛错。
    """
    lookup = _by_name(emojis)
    for seg in segments:
        if isinstance(seg, EmojiRef):
            emoji = lookup.get(seg.shortcode)
            if emoji is not None:
                append_image(emoji.render(size, time))
                continue

        try:
            runs = markdown(seg.text)
        except MarkdownParseError:
            append_text(TextRun(seg.text, PLAIN))
            continue
        for run in runs:
            append_text(run)


class EmojiRenderer:
    """把带短代码的文本渲染为富文本"""

    def __init__(
        self,
        text: str,
        omit_spaces_between_emojis: bool = False,
        markdown: MarkdownParser = parse_markdown,
    ):
        self.text = text
        self.omit_spaces_between_emojis = omit_spaces_between_emojis
        self.markdown = markdown

    def split(self, emojis: Mapping[str, LoadedEmoji]) -> List[Segment]:
        splitter = ShortcodeSplitter(emojis.keys(), self.omit_spaces_between_emojis)
        return splitter.split(self.text)

    def used_emojis(self, emojis: Mapping[str, LoadedEmoji]) -> Dict[str, LoadedEmoji]:
        """文本里实际出现的表情"""
        lookup = _by_name(emojis)
        return {
            seg.shortcode: lookup[seg.shortcode]
            for seg in self.split(emojis)
            if isinstance(seg, EmojiRef) and seg.shortcode in lookup
        }

    # 不可变结果
    def render(self, emojis: Mapping[str, LoadedEmoji], size: Optional[float] = None) -> RichText:
        return self.render_animated(emojis, size, 0)

    def render_animated(
        self,
        emojis: Mapping[str, LoadedEmoji],
        size: Optional[float] = None,
        time: float = 0,
    ) -> RichText:
        result = RichText()

        def append(piece):
            nonlocal result
            result = result + piece

        fold_segments(self.split(emojis), emojis, size, time, append, append, self.markdown)
        return result

    # 可变结果
    def render_attributed(
        self,
        emojis: Mapping[str, LoadedEmoji],
        size: Optional[float] = None,
    ) -> AttributedString:
        result = AttributedString()
        with result.editing():
            fold_segments(
                self.split(emojis), emojis, size, 0,
                result.append, result.append, self.markdown,
            )
        return result


def render_static(
    text: str,
    emojis: Mapping[str, LoadedEmoji],
    size: Optional[float] = None,
    *,
    omit_spaces_between_emojis: bool = False,
) -> RichText:
    """静态渲染

    `emojis` 的键可写作 `wave` 或 `:wave:`，两者同时存在时取 `wave`。
    无效的 `size`（非正数、NaN、无穷）按表情原始尺寸处理。
    """
    return EmojiRenderer(text, omit_spaces_between_emojis).render(emojis, size)


def render_animated(
    text: str,
    emojis: Mapping[str, LoadedEmoji],
    size: Optional[float] = None,
    time: float = 0,
    *,
    omit_spaces_between_emojis: bool = False,
) -> RichText:
    return EmojiRenderer(text, omit_spaces_between_emojis).render_animated(emojis, size, time)


def render_attributed(
    text: str,
    emojis: Mapping[str, LoadedEmoji],
    size: Optional[float] = None,
    *,
    omit_spaces_between_emojis: bool = False,
) -> AttributedString:
    return EmojiRenderer(text, omit_spaces_between_emojis).render_attributed(emojis, size)
