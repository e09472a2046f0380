"""
漫画页栅格化 - 图层元素 → PNG

职责：
1. 按 scale 倍（默认3倍，800x1100 逻辑尺寸）分配位图并填充背景色
2. 同一页的图片元素并发加载，全部完成后按元素数组顺序绘制（z序 = 数组顺序）
3. 单个图片加载/解码失败跳过，整页仍输出

测试要点：
- test_output_size: 输出尺寸为逻辑尺寸 × scale
- test_draw_order_is_array_order: 后加载完成的元素不会改变叠放顺序
- test_failed_image_skipped: 失败元素不影响其它元素
"""

from __future__ import annotations

import asyncio
import io
import logging
from typing import TYPE_CHECKING

from PIL import Image, ImageColor, UnidentifiedImageError

from ..config import CanvasConfig, get_config
from ..interfaces import AssetFetchError, IAssetFetcher, ICanvasRasterizer, RasterizeError

if TYPE_CHECKING:
    from ..models import ComicPage, VisualElement

logger = logging.getLogger(__name__)


def _decode_image(data: bytes) -> Image.Image:
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            return img.convert("RGBA")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        raise RasterizeError(f"图片解码失败: {e}") from e


class CanvasRasterizer(ICanvasRasterizer):
    """漫画页栅格化实现"""

    def __init__(self, fetcher: IAssetFetcher, config: CanvasConfig | None = None):
        self.fetcher = fetcher
        self.config = config or get_config().canvas

    @property
    def output_size(self) -> tuple[int, int]:
        scale = self.config.scale
        return self.config.width * scale, self.config.height * scale

    async def rasterize(self, page: ComicPage) -> bytes:
        canvas = Image.new("RGB", self.output_size, self._background(page.background_color))

        elements = [el for el in page.image_elements() if el.image_url]
        loaded = await asyncio.gather(*(self._load(el) for el in elements))

        for element, image in zip(elements, loaded):
            if image is not None:
                self._draw(canvas, image, element)

        buffer = io.BytesIO()
        canvas.save(buffer, format="PNG")
        return buffer.getvalue()

    def _background(self, color: str | None) -> tuple[int, int, int]:
        value = color or self.config.default_background
        try:
            return ImageColor.getrgb(value)[:3]
        except ValueError:
            logger.warning(f"无法解析背景色 {value!r}，使用默认背景")
            return ImageColor.getrgb(self.config.default_background)[:3]

    async def _load(self, element: VisualElement) -> Image.Image | None:
        url = element.image_url or ""
        try:
            data = await self.fetcher.fetch(url)
            return await asyncio.to_thread(_decode_image, data)
        except (AssetFetchError, RasterizeError) as e:
            logger.warning(f"漫画图层加载失败，已跳过: {e}")
            return None

    def _draw(self, canvas: Image.Image, image: Image.Image, element: VisualElement) -> None:
        scale = self.config.scale
        width = round(element.width * scale)
        height = round(element.height * scale)
        if width <= 0 or height <= 0:
            return

        if image.size != (width, height):
            image = image.resize((width, height), Image.Resampling.LANCZOS)
        position = (round(element.x * scale), round(element.y * scale))
        canvas.paste(image, position, image)
