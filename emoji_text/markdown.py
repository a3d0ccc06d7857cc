"""Markdown 行内解析"""

from typing import List, Optional, Tuple

from markdown_it import MarkdownIt
from markdown_it.token import Token

from .styles import PLAIN, TextRun, TextStyle


class MarkdownParseError(ValueError):
    """markdown 解析失败"""

    def __init__(self, text: str):
        super().__init__(f"无法解析 markdown: {text!r}")
        self.text = text


_md = MarkdownIt("commonmark", {"html": False}).enable("strikethrough")

# 开闭标记 -> 样式字段
_TOGGLES = {
    "strong": "bold",
    "em": "italic",
    "s": "strikethrough",
}


def parse_markdown(text: str) -> Tuple[TextRun, ...]:
    """只解析行内语法，保留首尾空白"""
    stripped = text.strip()
    if not stripped:
        return (TextRun(text),) if text else ()

    leading = text[:len(text) - len(text.lstrip())]
    trailing = text[len(text.rstrip()):]

    try:
        tokens = _md.parseInline(stripped)
    except Exception as exc:
        raise MarkdownParseError(text) from exc

    runs: List[TextRun] = []
    _append(runs, leading, PLAIN)
    for token in tokens:
        _walk(token.children or [], PLAIN, runs)
    _append(runs, trailing, PLAIN)
    return tuple(runs)


def _walk(tokens: List[Token], style: TextStyle, runs: List[TextRun]) -> None:
    stack: List[TextStyle] = []
    for token in tokens:
        kind = token.type
        if kind.endswith("_open"):
            stack.append(style)
            style = _open(kind[:-len("_open")], token, style)
        elif kind.endswith("_close"):
            if stack:
                style = stack.pop()
        elif kind == "text":
            _append(runs, token.content, style)
        elif kind == "code_inline":
            _append(runs, token.content, style.merge(code=True))
        elif kind in ("softbreak", "hardbreak"):
            _append(runs, "\n", style)
        elif kind == "image":
            # 图片只保留替代文字
            _append(runs, token.content, style)
        elif token.children:
            _walk(token.children, style, runs)
        elif token.content:
            _append(runs, token.content, style)


def _open(tag: str, token: Token, style: TextStyle) -> TextStyle:
    if tag == "link":
        href: Optional[str] = token.attrGet("href")
        return style.merge(link=str(href) if href is not None else None)
    field = _TOGGLES.get(tag)
    if field is None:
        return style
    return style.merge(**{field: True})


def _append(runs: List[TextRun], text: str, style: TextStyle) -> None:
    """追加文字，与前一段同样式时合并"""
    if not text:
        return
    if runs and runs[-1].style == style:
        runs[-1] = TextRun(runs[-1].text + text, style)
    else:
        runs.append(TextRun(text, style))
