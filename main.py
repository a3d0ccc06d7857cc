"""
表情文本插件
- 把回复中的 :短代码: 替换为自定义表情图片
- 其余文字按 markdown 渲染
- 支持动图表情（GIF 输出）
"""

import asyncio
import base64
import os
from pathlib import Path
from typing import Any, Dict, Optional

from PIL import Image

from astrbot.api import AstrBotConfig, logger
from astrbot.api.event import AstrMessageEvent, filter
from astrbot.api.provider import LLMResponse
from astrbot.api.star import Context, Star

import astrbot.api.message_components as Comp

from .emoji_text import EmojiRenderer, LoadedEmoji, TextRasterizer
from .emoji_text.raster import save_animation, save_image

PLAIN_COMPONENT_TYPES = tuple(
    getattr(Comp, name)
    for name in ("Plain", "Text")
    if hasattr(Comp, name)
)

EMOJI_SUFFIXES = {".png", ".gif", ".webp", ".jpg", ".jpeg"}

# 动图最多帧数
MAX_FRAMES = 60


class EmojiTextPlugin(Star):
    """表情文本插件"""

    PLUGIN_ID = "astrbot_plugin_emoji_text"

    def __init__(self, context: Context, config: Optional[AstrBotConfig] = None):
        super().__init__(context)
        self._cfg_obj: AstrBotConfig | dict | None = config
        self._base_dir = Path(__file__).resolve().parent
        self._font_dir = self._base_dir / "ziti"
        self._render_semaphore = asyncio.Semaphore(3)
        self.emojis: Dict[str, LoadedEmoji] = self._load_emojis()
        logger.info(f"[表情文本] 插件已加载，共 {len(self.emojis)} 个表情")

    def cfg(self) -> Dict[str, Any]:
        try:
            return self._cfg_obj if isinstance(self._cfg_obj, dict) else (self._cfg_obj or {})
        except Exception:
            return {}

    def _cfg_bool(self, key: str, default: bool) -> bool:
        val = self.cfg().get(key, default)
        return bool(val) if not isinstance(val, str) else val.lower() in {"1", "true", "yes", "on"}

    def _load_emojis(self) -> Dict[str, LoadedEmoji]:
        """从表情目录加载，文件名即短代码"""
        emoji_dir = self._base_dir / str(self.cfg().get("emoji_dir", "emojis"))
        if not emoji_dir.is_dir():
            logger.warning(f"[表情文本] 表情目录不存在: {emoji_dir}")
            return {}

        emojis: Dict[str, LoadedEmoji] = {}
        for path in sorted(emoji_dir.iterdir()):
            if path.suffix.lower() not in EMOJI_SUFFIXES:
                continue
            try:
                with Image.open(path) as img:
                    emojis[path.stem] = LoadedEmoji.from_image(path.stem, img)
            except Exception as exc:
                logger.warning(f"[表情文本] 加载表情失败 {path.name}: {exc}")
        return emojis

    def _render(self, text: str) -> Optional[str]:
        """渲染为图片文件，文本里没有表情时返回 None"""
        renderer = EmojiRenderer(text, self._cfg_bool("omit_spaces_between_emojis", False))
        used = renderer.used_emojis(self.emojis)
        if not used:
            return None

        rasterizer = TextRasterizer(self.cfg(), self._font_dir)
        size = rasterizer.emoji_size
        animated = [emoji for emoji in used.values() if emoji.is_animated]

        if animated and self._cfg_bool("animate", False):
            fps = max(1, int(self.cfg().get("animation_fps", 10)))
            duration = max(emoji.loop_duration for emoji in animated)
            count = min(MAX_FRAMES, max(1, round(duration * fps)))
            logger.debug(f"[表情文本] 渲染动图: {count} 帧, {fps} fps")
            frames = [
                rasterizer.render(renderer.render_animated(self.emojis, size, i / fps))
                for i in range(count)
            ]
            return save_animation(frames, int(1000 / fps))

        rich = renderer.render_attributed(self.emojis, size)
        return save_image(rasterizer.render(rich), str(self.cfg().get("bg_color", "#ffffff")))

    async def _render_async(self, text: str) -> Optional[str]:
        try:
            return await asyncio.to_thread(self._render, text)
        except Exception as exc:
            logger.error("[表情文本] 渲染失败: %s", exc)
            return None

    def _chain_to_plain_text(self, chain: list[Any]) -> Optional[str]:
        if not chain:
            return None
        builder: list[str] = []
        for seg in chain:
            if PLAIN_COMPONENT_TYPES and isinstance(seg, PLAIN_COMPONENT_TYPES):
                builder.append(getattr(seg, "text", "") or "")
            elif hasattr(seg, "text") and seg.__class__.__name__.lower() in {"plain", "text"}:
                builder.append(getattr(seg, "text", "") or "")
            else:
                return None
        text = "".join(builder).strip()
        return text if text else None

    @filter.on_decorating_result(priority=-10)
    async def on_decorating_result(self, event: AstrMessageEvent):
        if not self._cfg_bool("enable_render", True) or not self.emojis:
            return

        result = event.get_result()
        if not result or not result.chain:
            return

        render_scope = str(self.cfg().get("render_scope", "llm_only")).lower()
        resp = event.get_extra("llm_resp")
        if render_scope == "llm_only" and not isinstance(resp, LLMResponse):
            return

        text = self._chain_to_plain_text(result.chain)
        if not text:
            return

        async with self._render_semaphore:
            image_path = await self._render_async(text)

        if not image_path:
            logger.debug("[表情文本] 回复中没有表情，跳过")
            return

        # 替换消息链（使用 base64 避免临时文件残留）
        try:
            with open(image_path, 'rb') as f:
                img_data = base64.b64encode(f.read()).decode('utf-8')
            result.chain = [Comp.Image(file=f'base64://{img_data}')]
        except Exception as exc:
            logger.error("[表情文本] 创建图片组件失败: %s", exc)
        finally:
            # 清理临时文件
            try:
                os.remove(image_path)
            except OSError:
                pass

    @filter.on_llm_response(priority=100000)
    async def save_llm_response(self, event: AstrMessageEvent, resp: LLMResponse):
        event.set_extra("llm_resp", resp)
