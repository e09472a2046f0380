"""
HTML渲染器 - 作品 → 单个静态HTML文档

职责：
1. 小说：拼接各章各页内容，页间细分隔线、章间粗分隔线，插图改写为 assets/img-<hash><ext>
2. 漫画：每页一张 assets/page-<n>.png
3. 图片故事：每页一个 <figure>（assets/photo-<n><ext> + 图注）

资源文件名与 AssetResolver / CanvasRasterizer 使用同一套命名函数。

测试要点：
- test_story_title_and_images: <h1>标题</h1> 与插图改写
- test_empty_project: 空作品只输出标题
"""

from __future__ import annotations

from html import escape
from typing import TYPE_CHECKING

from ..assets.naming import comic_page_name, photo_asset_name, story_asset_name
from ..interfaces import IHTMLRenderer, RenderError
from ..models import ComicInput, PhotoInput, StoryInput
from .markup import rewrite_image_sources

if TYPE_CHECKING:
    from ..interfaces import AnyProjectInput
    from ..models import ComicProject, PhotoProject, StoryProject

ASSETS_DIR = "assets"

PAGE_SEPARATOR = '<hr style="margin:40px 0">'
CHAPTER_SEPARATOR = '<hr style="margin:60px 0;border-top:3px solid #999">'

STORY_STYLE = (
    "body{font-family:Georgia,serif;line-height:1.6;padding:40px;max-width:800px;"
    "margin:auto;background:#fafafa}"
    "h1{text-align:center}"
    "img{max-width:100%;height:auto}"
)
COMIC_STYLE = (
    "body{font-family:sans-serif;padding:20px;background:#fafafa;text-align:center}"
    "img{width:100%;margin:40px 0}"
)
PHOTO_STYLE = (
    "body{font-family:sans-serif;padding:20px;background:#fafafa}"
    "figure{text-align:center;margin:40px 0}"
    "img{max-width:100%;height:auto}"
)


def _document(title: str, style: str, body: str) -> str:
    safe_title = escape(title)
    return (
        "<!DOCTYPE html>\n"
        '<html lang="en">\n'
        "<head>\n"
        '<meta charset="UTF-8">\n'
        f"<title>{safe_title}</title>\n"
        f"<style>{style}</style>\n"
        "</head>\n"
        "<body>\n"
        f"<h1>{safe_title}</h1>\n"
        f"{body}\n"
        "</body>\n"
        "</html>\n"
    )


def _local_story_src(url: str) -> str:
    return f"{ASSETS_DIR}/{story_asset_name(url)}"


class HTMLRenderer(IHTMLRenderer):
    """HTML渲染器实现"""

    def render(self, project_input: AnyProjectInput) -> str:
        if isinstance(project_input, StoryInput):
            return self.render_story(project_input.project)
        if isinstance(project_input, ComicInput):
            return self.render_comic(project_input.project)
        if isinstance(project_input, PhotoInput):
            return self.render_photo(project_input.project)
        raise RenderError(f"未知作品类型: {type(project_input).__name__}")

    def render_story(self, project: StoryProject) -> str:
        chapters_html = []
        for chapter in project.chapters:
            pages_html = [
                rewrite_image_sources(page.content, _local_story_src)
                for page in chapter.pages
            ]
            chapters_html.append(PAGE_SEPARATOR.join(pages_html))
        return _document(project.title, STORY_STYLE, CHAPTER_SEPARATOR.join(chapters_html))

    def render_comic(self, project: ComicProject) -> str:
        pages_html = "\n".join(
            f'<img src="{ASSETS_DIR}/{comic_page_name(i)}" alt="Page {i + 1}">'
            for i in range(len(project.pages))
        )
        return _document(project.title, COMIC_STYLE, pages_html)

    def render_photo(self, project: PhotoProject) -> str:
        figures = []
        for i, page in enumerate(project.pages):
            parts = ["<figure>"]
            if page.photo_url:
                src = f"{ASSETS_DIR}/{photo_asset_name(i, page.photo_url)}"
                parts.append(f'<img src="{escape(src)}" alt="Photo {i + 1}">')
            parts.append(f"<figcaption>{escape(page.caption)}</figcaption>")
            parts.append("</figure>")
            figures.append("".join(parts))
        return _document(project.title, PHOTO_STYLE, "<br>".join(figures))
