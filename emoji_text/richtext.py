"""富文本结果类型

`RichText` 不可变，用 `+` 拼接；`AttributedString` 可变，原地追加，
配合 begin_editing / end_editing 批量通知观察者。
"""

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterator, List, Tuple, Union

from .styles import InlineImage, Piece, TextRun


@dataclass(frozen=True)
class RichText:
    """不可变富文本"""
    pieces: Tuple[Piece, ...] = ()

    @classmethod
    def of(cls, piece: Piece) -> "RichText":
        return cls((piece,))

    def __add__(self, other: Union["RichText", TextRun, InlineImage]) -> "RichText":
        if isinstance(other, RichText):
            return RichText(self.pieces + other.pieces)
        if isinstance(other, (TextRun, InlineImage)):
            return RichText(self.pieces + (other,))
        return NotImplemented

    def __iter__(self) -> Iterator[Piece]:
        return iter(self.pieces)

    def __len__(self) -> int:
        return len(self.pieces)

    @property
    def plain(self) -> str:
        return ''.join(piece.text for piece in self.pieces)


class AttributedString:
    """可变富文本缓冲区"""

    def __init__(self):
        self._pieces: List[Piece] = []
        self._observers: List[Callable[["AttributedString"], None]] = []
        self._edit_depth = 0
        self._dirty = False

    @property
    def pieces(self) -> Tuple[Piece, ...]:
        return tuple(self._pieces)

    @property
    def plain(self) -> str:
        return ''.join(piece.text for piece in self._pieces)

    @property
    def is_editing(self) -> bool:
        return self._edit_depth > 0

    def observe(self, callback: Callable[["AttributedString"], None]) -> None:
        self._observers.append(callback)

    def append(self, item: Union[Piece, "AttributedString", RichText]) -> None:
        if isinstance(item, (AttributedString, RichText)):
            self._pieces.extend(item.pieces)
        else:
            self._pieces.append(item)
        self._changed()

    def begin_editing(self) -> None:
        self._edit_depth += 1

    def end_editing(self) -> None:
        if self._edit_depth == 0:
            raise RuntimeError("end_editing 没有对应的 begin_editing")
        self._edit_depth -= 1
        if self._edit_depth == 0 and self._dirty:
            self._notify()

    @contextmanager
    def editing(self) -> Iterator["AttributedString"]:
        self.begin_editing()
        try:
            yield self
        finally:
            self.end_editing()

    def to_rich_text(self) -> RichText:
        return RichText(self.pieces)

    def _changed(self) -> None:
        if self._edit_depth > 0:
            self._dirty = True
        else:
            self._notify()

    def _notify(self) -> None:
        self._dirty = False
        for callback in list(self._observers):
            callback(self)

    def __len__(self) -> int:
        return len(self._pieces)

    def __iter__(self) -> Iterator[Piece]:
        return iter(self.pieces)

    def __repr__(self) -> str:
        return f"AttributedString({self._pieces!r})"
