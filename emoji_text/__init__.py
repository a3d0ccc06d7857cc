from .styles import EmojiRef, InlineImage, Literal, TextRun, TextStyle
from .segmenter import SEPARATOR, ShortcodeSplitter, join_segments, segment
from .markdown import MarkdownParseError, parse_markdown
from .emoji import LoadedEmoji
from .richtext import AttributedString, RichText
from .renderer import EmojiRenderer, fold_segments, render_animated, render_attributed, render_static
from .raster import TextRasterizer

__all__ = [
    'TextStyle', 'Literal', 'EmojiRef', 'TextRun', 'InlineImage',
    'SEPARATOR', 'ShortcodeSplitter', 'segment', 'join_segments',
    'MarkdownParseError', 'parse_markdown',
    'LoadedEmoji',
    'RichText', 'AttributedString',
    'EmojiRenderer', 'fold_segments', 'render_static', 'render_animated', 'render_attributed',
    'TextRasterizer',
]
