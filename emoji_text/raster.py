"""富文本绘制"""

import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from PIL import Image, ImageDraw, ImageFont

from .richtext import AttributedString, RichText
from .styles import InlineImage, TextStyle

Drawable = Union[RichText, AttributedString]

# 斜体的倾斜系数
ITALIC_SHEAR = 0.2


def hex_to_rgb(hex_color: str) -> Tuple[int, int, int]:
    """十六进制转 RGB"""
    hex_color = hex_color.lstrip("#")
    if len(hex_color) == 3:
        hex_color = "".join(c * 2 for c in hex_color)
    return tuple(int(hex_color[i:i+2], 16) for i in (0, 2, 4))


class _Item:
    """排版后的一个字符或一张图片"""
    __slots__ = ("text", "style", "image", "width")

    def __init__(self, width: int, text: str = "", style: Optional[TextStyle] = None, image=None):
        self.width = width
        self.text = text
        self.style = style
        self.image = image


class TextRasterizer:
    """把富文本画成图片"""

    def __init__(self, config: Dict[str, Any], font_dir: Optional[Path] = None):
        self.config = config
        self.font_dir = font_dir
        self._font_cache: Dict[str, ImageFont.FreeTypeFont] = {}

    def _get_config(self, key: str, default: Any) -> Any:
        return self.config.get(key, default)

    @property
    def scale(self) -> int:
        return int(self._get_config("image_scale", 2))

    @property
    def font_size(self) -> int:
        return int(self._get_config("font_size", 24)) * self.scale

    @property
    def emoji_size(self) -> int:
        """行内表情高度（已乘缩放）"""
        size = int(self._get_config("emoji_size", 0))
        if size > 0:
            return size * self.scale
        return int(self.font_size * 1.1)

    def _load_font(self, size: int):
        """加载字体"""
        cache_key = f"{size}"
        if cache_key in self._font_cache:
            return self._font_cache[cache_key]

        font_name = str(self._get_config("font_file", "Source_Han_Serif_SC_Light_Light.otf"))
        try:
            if self.font_dir is None:
                raise OSError("未配置字体目录")
            font = ImageFont.truetype(str(self.font_dir / font_name), size=size)
        except OSError:
            font = ImageFont.load_default(size=size)
        self._font_cache[cache_key] = font
        return font

    def _layout(self, text: Drawable, font, text_area_width: int) -> List[List[_Item]]:
        """按宽度折行，`\\n` 强制换行"""
        lines: List[List[_Item]] = []
        line: List[_Item] = []
        current_x = 0

        def wrap(width: int):
            nonlocal line, current_x
            if current_x + width > text_area_width and current_x > 0:
                lines.append(line)
                line = []
                current_x = 0

        for piece in text.pieces:
            if isinstance(piece, InlineImage):
                width = piece.size[0]
                wrap(width)
                line.append(_Item(width, image=piece.image))
                current_x += width
                continue

            for char in piece.text:
                if char == '\n':
                    lines.append(line)
                    line = []
                    current_x = 0
                    continue
                width = int(font.getlength(char))
                wrap(width)
                line.append(_Item(width, text=char, style=piece.style))
                current_x += width

        lines.append(line)
        return lines

    def render(self, text: Drawable) -> Image.Image:
        """绘制富文本，返回 RGBA 图片"""
        # 配置
        width = int(self._get_config("image_width", 375))
        padding = int(self._get_config("padding", 24))
        line_height = float(self._get_config("line_height", 1.6))
        bg_color = str(self._get_config("bg_color", "#ffffff"))
        text_color = str(self._get_config("text_color", "#333333"))
        link_color = str(self._get_config("link_color", "#1e6bd6"))
        code_bg_color = str(self._get_config("code_bg_color", "#eeeeee"))

        real_width = width * self.scale
        real_padding = padding * self.scale
        real_font_size = self.font_size
        text_area_width = real_width - real_padding * 2

        font = self._load_font(real_font_size)
        left, top, right, bottom = font.getbbox("Ay")
        font_height = bottom
        line_pixel_height = int(real_font_size * line_height)

        lines = self._layout(text, font, text_area_width)

        # 计算画布高度
        heights = []
        for items in lines:
            if not items:
                heights.append(int(line_pixel_height * 0.5))
                continue
            tallest = max((item.image.size[1] for item in items if item.image is not None), default=0)
            heights.append(max(line_pixel_height, tallest))
        canvas_height = sum(heights) + real_padding * 2

        # 创建画布
        bg_rgb = hex_to_rgb(bg_color)
        colors = {
            "text": hex_to_rgb(text_color),
            "link": hex_to_rgb(link_color),
            "code_bg": hex_to_rgb(code_bg_color),
        }
        canvas = Image.new("RGBA", (real_width, canvas_height), (*bg_rgb, 255))
        draw = ImageDraw.Draw(canvas)

        # 绘制
        y = real_padding
        for items, height in zip(lines, heights):
            x = real_padding
            for item in items:
                if item.image is not None:
                    image_y = y + (height - item.image.size[1]) // 2
                    canvas.paste(item.image, (x, image_y), item.image)
                else:
                    text_y = y + (height - font_height) // 2
                    self._draw_char(canvas, draw, item, (x, text_y), font, font_height, colors)
                x += item.width
            y += height

        return canvas

    def _draw_char(self, canvas, draw, item: _Item, pos, font, font_height, colors):
        x, y = pos
        style = item.style
        fill = colors["link"] if style.link else colors["text"]

        if style.code:
            draw.rectangle((x, y, x + item.width, y + font_height), fill=colors["code_bg"])

        stroke = max(1, self.scale // 2) if style.bold else 0
        if style.italic:
            self._draw_italic(canvas, item.text, (x, y), font, fill, stroke, font_height)
        else:
            draw.text((x, y), item.text, font=font, fill=fill, stroke_width=stroke, stroke_fill=fill)

        if style.strikethrough:
            mid = y + font_height // 2
            draw.line((x, mid, x + item.width, mid), fill=fill, width=self.scale)
        if style.link:
            draw.line((x, y + font_height, x + item.width, y + font_height), fill=fill, width=self.scale)

    def _draw_italic(self, canvas, char, pos, font, fill, stroke, font_height):
        """单独画一个字再错切，贴回画布"""
        x, y = pos
        margin = int(font_height * ITALIC_SHEAR) + stroke
        width = int(font.getlength(char)) + margin * 2
        layer = Image.new("RGBA", (width, font_height + stroke * 2), (0, 0, 0, 0))
        ImageDraw.Draw(layer).text(
            (margin, stroke), char, font=font, fill=fill, stroke_width=stroke, stroke_fill=fill
        )
        sheared = layer.transform(
            layer.size,
            Image.AFFINE,
            (1, ITALIC_SHEAR, -ITALIC_SHEAR * layer.size[1], 0, 1, 0),
            resample=Image.BICUBIC,
        )
        canvas.paste(sheared, (x - margin, y - stroke), sheared)


def save_image(canvas: Image.Image, bg_color: str = "#ffffff") -> str:
    """保存图片（JPEG 格式），返回临时文件路径"""
    bg_rgb = hex_to_rgb(bg_color)
    tmp = tempfile.NamedTemporaryFile(prefix="emoji_text_", suffix=".jpg", delete=False)
    canvas_rgb = Image.new("RGB", canvas.size, bg_rgb)
    canvas_rgb.paste(canvas, mask=canvas.split()[3] if canvas.mode == 'RGBA' else None)
    canvas_rgb.save(tmp.name, format="JPEG", quality=80)
    return tmp.name


def save_animation(frames: Sequence[Image.Image], duration_ms: int) -> str:
    """保存动图（GIF 格式），所有帧尺寸取最大值"""
    if not frames:
        raise ValueError("没有可保存的帧")
    size = (max(f.size[0] for f in frames), max(f.size[1] for f in frames))
    converted = []
    for frame in frames:
        if frame.size != size:
            padded = Image.new("RGBA", size, frame.getpixel((0, 0)))
            padded.paste(frame, (0, 0))
            frame = padded
        converted.append(frame.convert("RGB"))

    tmp = tempfile.NamedTemporaryFile(prefix="emoji_text_", suffix=".gif", delete=False)
    converted[0].save(
        tmp.name,
        format="GIF",
        save_all=True,
        append_images=converted[1:],
        duration=duration_ms,
        loop=0,
    )
    return tmp.name
