"""短代码拆分器"""

import re
from typing import Dict, Iterable, List, Optional

from .styles import EmojiRef, Literal, Segment, shortcode_name, shortcode_text

# Unicode 非字符，正常文本中不会出现
SEPARATOR = '\uffff'


class ShortcodeSplitter:
    """把文本拆分为普通文字和表情引用

    先用分隔符把每个已知短代码包起来，再按分隔符切开。
    """

    def __init__(self, shortcodes: Iterable[str], omit_spaces_between_emojis: bool = False):
        self.omit_spaces_between_emojis = omit_spaces_between_emojis
        # 正文写法 -> 表情名
        self._known: Dict[str, str] = {}
        for shortcode in shortcodes:
            name = shortcode_name(shortcode)
            if not name or SEPARATOR in name:
                continue
            self._known[shortcode_text(name)] = name
        self._pattern = self._compile(self._known)

    @staticmethod
    def _compile(known: Dict[str, str]) -> Optional["re.Pattern[str]"]:
        if not known:
            return None
        # 长的优先，同一位置取最长匹配
        forms = sorted(known, key=len, reverse=True)
        return re.compile('|'.join(re.escape(form) for form in forms))

    @property
    def shortcodes(self) -> List[str]:
        return list(self._known.values())

    def mark(self, text: str) -> str:
        """给每处短代码两侧加上分隔符"""
        text = text.replace(SEPARATOR, '')
        if self._pattern is None:
            return text
        return self._pattern.sub(lambda m: f"{SEPARATOR}{m.group(0)}{SEPARATOR}", text)

    def split(self, text: str) -> List[Segment]:
        result: List[Segment] = []
        for part in self.mark(text).split(SEPARATOR):
            if not part:
                continue
            name = self._known.get(part)
            if name is not None:
                result.append(EmojiRef(shortcode=name))
            else:
                result.append(Literal(text=part))

        if self.omit_spaces_between_emojis:
            result = _omit_spaces_between_emojis(result)
        return result


def _omit_spaces_between_emojis(segments: List[Segment]) -> List[Segment]:
    """去掉夹在两个表情之间的纯空白片段"""
    result = []
    for i, seg in enumerate(segments):
        if (
            isinstance(seg, Literal)
            and not seg.text.strip()
            and 0 < i < len(segments) - 1
            and isinstance(segments[i - 1], EmojiRef)
            and isinstance(segments[i + 1], EmojiRef)
        ):
            continue
        result.append(seg)
    return result


def segment(
    text: str,
    shortcodes: Iterable[str],
    omit_spaces_between_emojis: bool = False,
) -> List[Segment]:
    """拆分文本，`shortcodes` 可以带冒号也可以不带"""
    return ShortcodeSplitter(shortcodes, omit_spaces_between_emojis).split(text)


def join_segments(segments: Iterable[Segment]) -> str:
    """按顺序拼回文本，表情还原为 `:name:`"""
    return ''.join(seg.text for seg in segments)
