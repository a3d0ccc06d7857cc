"""样式与片段定义"""

from dataclasses import dataclass, field, replace
from typing import Any, Optional, Union


def shortcode_name(shortcode: str) -> str:
    """去掉两侧冒号，得到表情名"""
    if len(shortcode) > 2 and shortcode.startswith(':') and shortcode.endswith(':'):
        return shortcode[1:-1]
    return shortcode


def shortcode_text(shortcode: str) -> str:
    """表情名在正文中的写法，即 `:name:`"""
    return f":{shortcode_name(shortcode)}:"


@dataclass(frozen=True)
class TextStyle:
    """文字样式"""
    bold: bool = False
    italic: bool = False
    code: bool = False
    strikethrough: bool = False
    link: Optional[str] = None

    def merge(self, **changes) -> "TextStyle":
        return replace(self, **changes)


PLAIN = TextStyle()


@dataclass(frozen=True)
class Literal:
    """普通文字片段，交给 markdown 解析"""
    text: str


@dataclass(frozen=True)
class EmojiRef:
    """表情引用片段"""
    shortcode: str

    @property
    def text(self) -> str:
        return shortcode_text(self.shortcode)


Segment = Union[Literal, EmojiRef]


@dataclass(frozen=True)
class TextRun:
    """带样式的文字"""
    text: str
    style: TextStyle = PLAIN


@dataclass(frozen=True)
class InlineImage:
    """行内图片，比较时忽略像素数据"""
    shortcode: str
    image: Any = field(compare=False, hash=False, repr=False)
    size: tuple = (0, 0)
    frame: int = 0

    @property
    def text(self) -> str:
        return shortcode_text(self.shortcode)


Piece = Union[TextRun, InlineImage]
