"""
HTML渲染器单元测试

每个模块完成后必须运行：pytest backend/tests/unit/test_html_renderer.py -v
"""

import pytest

from hekayaty_export.assets import story_asset_name
from hekayaty_export.models import parse_project_input
from hekayaty_export.render import HTMLRenderer
from hekayaty_export.render.html_renderer import CHAPTER_SEPARATOR, PAGE_SEPARATOR


@pytest.fixture
def renderer() -> HTMLRenderer:
    return HTMLRenderer()


class TestStoryHTML:
    """小说HTML测试"""

    def test_title_and_local_images(self, renderer: HTMLRenderer, story_input):
        """测试标题与插图改写为本地路径"""
        html = renderer.render(story_input)
        assert html.startswith("<!DOCTYPE html>")
        assert '<meta charset="UTF-8">' in html
        assert "<h1>Test</h1>" in html
        assert f'src="assets/{story_asset_name("https://x/y.png")}"' in html
        assert "https://x/y.png" not in html

    def test_separators(self, renderer: HTMLRenderer):
        """测试页间细线、章间粗线"""
        project = parse_project_input({
            "type": "story",
            "project": {
                "title": "Two",
                "chapters": [
                    {"pages": [{"content": "<p>c1p1</p>"}, {"content": "<p>c1p2</p>"}]},
                    {"pages": [{"content": "<p>c2p1</p>"}]},
                ],
            },
        })
        html = renderer.render(project)
        assert f"<p>c1p1</p>{PAGE_SEPARATOR}<p>c1p2</p>" in html
        assert f"<p>c1p2</p>{CHAPTER_SEPARATOR}<p>c2p1</p>" in html
        assert html.count(PAGE_SEPARATOR) == 1
        assert html.count(CHAPTER_SEPARATOR) == 1

    def test_title_escaped(self, renderer: HTMLRenderer):
        """测试标题转义"""
        project = parse_project_input({"type": "story", "project": {"title": "A & <B>"}})
        html = renderer.render(project)
        assert "<h1>A &amp; &lt;B&gt;</h1>" in html
        assert "<title>A &amp; &lt;B&gt;</title>" in html

    def test_empty_project(self, renderer: HTMLRenderer):
        """测试空作品只输出标题"""
        project = parse_project_input({"type": "story", "project": {"title": "Empty", "chapters": []}})
        html = renderer.render(project)
        assert "<h1>Empty</h1>" in html
        assert "<hr" not in html
        assert html.rstrip().endswith("</html>")


class TestComicHTML:
    """漫画HTML测试"""

    def test_page_images(self, renderer: HTMLRenderer, comic_input):
        """测试每页一张渲染图"""
        html = renderer.render(comic_input)
        assert '<img src="assets/page-1.png" alt="Page 1">' in html
        assert '<img src="assets/page-2.png" alt="Page 2">' in html
        assert "cdn.test" not in html


class TestPhotoHTML:
    """图片故事HTML测试"""

    def test_figures(self, renderer: HTMLRenderer, photo_input):
        """测试 figure + 转义图注，空URL页无图片"""
        html = renderer.render(photo_input)
        assert html.count("<figure>") == 3
        assert '<img src="assets/photo-1.jpg" alt="Photo 1">' in html
        assert '<img src="assets/photo-3.png" alt="Photo 3">' in html
        assert "photo-2" not in html
        assert "<figcaption>Gate &lt;1&gt;</figcaption>" in html
        assert "<figcaption>No photo</figcaption>" in html
