"""已加载的表情图片"""

import math
from typing import Dict, List, Optional, Sequence, Tuple

from PIL import Image, ImageSequence

from .styles import InlineImage, shortcode_name

DEFAULT_FRAME_DURATION = 0.1


class LoadedEmoji:
    """一个表情的全部帧，可能是动图

    图片由调用方解码好再传进来，这里只负责取帧和缩放。
    """

    def __init__(
        self,
        shortcode: str,
        frames: Sequence[Image.Image],
        durations: Optional[Sequence[float]] = None,
    ):
        if not frames:
            raise ValueError(f"表情 {shortcode} 没有任何帧")
        if durations is None:
            durations = [DEFAULT_FRAME_DURATION] * len(frames)
        if len(durations) != len(frames):
            raise ValueError("帧数与时长数量不一致")

        self.shortcode = shortcode_name(shortcode)
        self.frames: List[Image.Image] = [f.convert("RGBA") for f in frames]
        self.durations: List[float] = [d if d > 0 else DEFAULT_FRAME_DURATION for d in durations]
        self._cache: Dict[Tuple[int, int], Image.Image] = {}

    @classmethod
    def from_image(cls, shortcode: str, image: Image.Image) -> "LoadedEmoji":
        """从 Pillow 图片构造，GIF/APNG/WebP 动图会拆成多帧"""
        frames = []
        durations = []
        for frame in ImageSequence.Iterator(image):
            frames.append(frame.copy())
            durations.append(frame.info.get("duration", 0) / 1000)
        return cls(shortcode, frames, durations)

    @property
    def is_animated(self) -> bool:
        return len(self.frames) > 1

    @property
    def loop_duration(self) -> float:
        return sum(self.durations)

    def frame_at(self, time: float) -> int:
        """给定时间对应的帧号，循环播放"""
        if not self.is_animated:
            return 0
        t = time % self.loop_duration
        for index, duration in enumerate(self.durations):
            if t < duration:
                return index
            t -= duration
        return len(self.frames) - 1

    def _scaled_size(self, frame: Image.Image, size: Optional[float]) -> Tuple[int, int]:
        # 无效尺寸按原始大小处理
        if size is None or not math.isfinite(size) or size <= 0:
            return frame.size
        width, height = frame.size
        # 按高度缩放，宽表情保持比例
        scaled_height = max(1, round(size))
        scaled_width = max(1, round(width * scaled_height / height))
        return scaled_width, scaled_height

    def get_image(self, size: Optional[float] = None, time: float = 0) -> Image.Image:
        index = self.frame_at(time)
        frame = self.frames[index]
        target = self._scaled_size(frame, size)
        if target == frame.size:
            return frame

        cache_key = (index, target[1])
        if cache_key not in self._cache:
            self._cache[cache_key] = frame.resize(target, Image.LANCZOS)
        return self._cache[cache_key]

    def render(self, size: Optional[float] = None, time: float = 0) -> InlineImage:
        """生成行内图片片段"""
        image = self.get_image(size, time)
        return InlineImage(
            shortcode=self.shortcode,
            image=image,
            size=image.size,
            frame=self.frame_at(time),
        )

    def __repr__(self) -> str:
        return f"LoadedEmoji({self.shortcode!r}, frames={len(self.frames)})"
