"""
渲染模块 - HTML/PDF/漫画页PNG

子模块：
- markup: HTML片段工具（插图提取/改写、正文提取）
- html_renderer: 静态HTML文档
- pdf_renderer: A4分页PDF
- canvas_rasterizer: 漫画页栅格化
"""

from .canvas_rasterizer import CanvasRasterizer
from .html_renderer import HTMLRenderer
from .pdf_renderer import PDFRenderer, RenderedPDF, placeholder_line

__all__ = [
    "HTMLRenderer",
    "PDFRenderer",
    "RenderedPDF",
    "CanvasRasterizer",
    "placeholder_line",
]
