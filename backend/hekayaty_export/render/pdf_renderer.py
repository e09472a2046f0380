"""
PDF渲染器 - 作品 → A4分页PDF

职责：
1. 小说：标题（大字号、按页宽折行）+ 各页正文逐行输出，页与页之间空一行
2. 漫画/图片故事：只输出一行占位文字，引导读者查看HTML
3. 分页：写每一行前检查剩余高度，不足则换页、游标回到上边距

依赖：
- reportlab: 矢量PDF输出（canvas 逐行绘制）

测试要点：
- test_story_paginates: 长文本输出多页，任何行不越过下边距
- test_placeholder_only_for_visual_projects: 占位文字只出现在漫画/图片故事
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import simpleSplit
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.pdfgen import canvas

from ..config import PDFLayoutConfig, get_config
from ..interfaces import IPDFRenderer, RenderError
from ..models import ComicInput, PhotoInput, StoryInput
from .markup import extract_text

if TYPE_CHECKING:
    from ..interfaces import AnyProjectInput
    from ..models import StoryProject

logger = logging.getLogger(__name__)

CUSTOM_FONT_NAME = "HekayatyBody"
PLACEHOLDER_SUFFIX = "see HTML for full experience."


def placeholder_line(title: str) -> str:
    return f"{title} – {PLACEHOLDER_SUFFIX}"


@dataclass
class RenderedPDF:
    """PDF渲染结果"""
    data: bytes
    page_count: int


class _PageLayout:
    """
    单列文本排版游标

    两个状态：当前页有空间 / 需要换页。cursor_y 为距页顶的基线位置。
    """

    def __init__(self, pdf: canvas.Canvas, config: PDFLayoutConfig, font_name: str):
        self.pdf = pdf
        self.page_width, self.page_height = A4
        self.margin = config.margin
        self.line_height = config.line_height
        self.font_name = font_name
        self.font_size = config.font_size
        self.cursor_y = self.margin
        self.page_count = 1

    @property
    def text_width(self) -> float:
        return self.page_width - self.margin * 2

    @property
    def bottom_limit(self) -> float:
        return self.page_height - self.margin

    def set_font_size(self, size: float) -> None:
        self.font_size = size
        self.pdf.setFont(self.font_name, size)

    def ensure_room(self, extra_height: float) -> None:
        if self.cursor_y + extra_height > self.bottom_limit:
            self.pdf.showPage()
            # showPage 会重置图形状态
            self.pdf.setFont(self.font_name, self.font_size)
            self.cursor_y = self.margin
            self.page_count += 1

    def write_line(self, text: str) -> None:
        self.ensure_room(self.line_height)
        if text:
            self.pdf.drawString(self.margin, self.page_height - self.cursor_y, text)
        self.cursor_y += self.line_height

    def write_wrapped(self, text: str) -> None:
        for paragraph in text.split("\n"):
            lines = simpleSplit(paragraph, self.font_name, self.font_size, self.text_width)
            if not lines:
                self.write_line("")
                continue
            for line in lines:
                self.write_line(line)

    def skip_line(self) -> None:
        self.cursor_y += self.line_height


class PDFRenderer(IPDFRenderer):
    """PDF渲染器实现"""

    def __init__(self, config: PDFLayoutConfig | None = None):
        self.config = config or get_config().pdf
        self.font_name = self._resolve_font()

    def _resolve_font(self) -> str:
        if not self.config.font_path:
            return self.config.font_name
        if CUSTOM_FONT_NAME not in pdfmetrics.getRegisteredFontNames():
            try:
                pdfmetrics.registerFont(TTFont(CUSTOM_FONT_NAME, self.config.font_path))
            except Exception as e:
                raise RenderError(f"字体加载失败: {self.config.font_path}: {e}") from e
        return CUSTOM_FONT_NAME

    def render(self, project_input: AnyProjectInput) -> bytes:
        return self.render_document(project_input).data

    def render_document(self, project_input: AnyProjectInput) -> RenderedPDF:
        """渲染并返回页数"""
        buffer = io.BytesIO()
        # invariant=1：同一输入输出字节一致
        pdf = canvas.Canvas(buffer, pagesize=A4, invariant=1)
        pdf.setTitle(project_input.project.title)
        layout = _PageLayout(pdf, self.config, self.font_name)
        layout.set_font_size(self.config.font_size)

        if isinstance(project_input, StoryInput):
            self._render_story(layout, project_input.project)
        elif isinstance(project_input, (ComicInput, PhotoInput)):
            layout.write_line(placeholder_line(project_input.project.title))
        else:
            raise RenderError(f"未知作品类型: {type(project_input).__name__}")

        pdf.showPage()
        pdf.save()
        logger.debug(f"PDF渲染完成: {layout.page_count} 页")
        return RenderedPDF(data=buffer.getvalue(), page_count=layout.page_count)

    def _render_story(self, layout: _PageLayout, project: StoryProject) -> None:
        layout.set_font_size(self.config.title_font_size)
        for line in simpleSplit(project.title, self.font_name, self.config.title_font_size, layout.text_width):
            layout.write_line(line)
        layout.set_font_size(self.config.font_size)

        for page in project.iter_pages():
            text = extract_text(page.content, self.config.text_extraction)
            if text:
                layout.write_wrapped(text)
            layout.skip_line()
