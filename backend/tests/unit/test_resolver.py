"""
资源解析器单元测试

每个模块完成后必须运行：pytest backend/tests/unit/test_resolver.py -v
"""

from hekayaty_export.assets import AssetFetcher, AssetResolver, story_asset_name, url_hash
from hekayaty_export.config import FetchConfig
from hekayaty_export.interfaces import ICanvasRasterizer
from hekayaty_export.models import ExportJob, ProjectType, parse_project_input


def _story(*pages: str):
    return parse_project_input({
        "type": "story",
        "project": {"title": "S", "chapters": [{"pages": [{"content": c} for c in pages]}]},
    })


def _resolve(asset_server, project_input, job=None, rasterizer=None):
    async def _run(client):
        resolver = AssetResolver(AssetFetcher(client, FetchConfig()), rasterizer)
        return await resolver.resolve(project_input, job)

    return asset_server.run(_run)


class _RecordingRasterizer(ICanvasRasterizer):
    def __init__(self):
        self.pages = []

    async def rasterize(self, page):
        self.pages.append(page.id)
        return b"PNG:" + page.id.encode()


class TestStoryAssets:
    """小说插图测试"""

    def test_dedup_across_pages(self, asset_server):
        """测试同一URL跨页引用只抓取一次"""
        url = "https://x/y.png"
        asset_server.add(url, b"img")
        project = _story(f'<img src="{url}">', f'<p><img src="{url}"></p>', f'<img src="{url}">')

        assets = _resolve(asset_server, project)

        assert [a.filename for a in assets] == [f"img-{url_hash(url)}.png"]
        assert assets[0].data == b"img"
        assert asset_server.request_count(url) == 1

    def test_partial_failure(self, asset_server):
        """测试一个可达一个不可达"""
        good, bad = "https://x/good.jpg", "https://down/bad.png"
        asset_server.add(good, b"ok")
        job = ExportJob(project_type=ProjectType.STORY)
        project = _story(f'<img src="{good}"><img src="{bad}">')

        assets = _resolve(asset_server, project, job)

        assert [a.filename for a in assets] == [story_asset_name(good)]
        assert job.missing_assets == [bad]

    def test_invalid_url_skipped(self, asset_server):
        """测试非法URL只记录缺失，不影响其它插图"""
        good, bad = "https://x/good.jpg", "https://exa\x00mple/x.png"
        asset_server.add(good, b"ok")
        job = ExportJob(project_type=ProjectType.STORY)
        project = _story(f'<img src="{good}"><img src="{bad}">')

        assets = _resolve(asset_server, project, job)

        assert [a.filename for a in assets] == [story_asset_name(good)]
        assert job.missing_assets == [bad]

    def test_hash_collision_first_wins(self, asset_server):
        """测试文件名冲突时保留先出现者"""
        # "Aa" 与 "BB" 的滚动哈希相同
        first, second = "https://x/Aa.png", "https://x/BB.png"
        assert story_asset_name(first) == story_asset_name(second)
        asset_server.add(first, b"first")
        asset_server.add(second, b"second")
        job = ExportJob(project_type=ProjectType.STORY)

        assets = _resolve(asset_server, _story(f'<img src="{first}"><img src="{second}">'), job)

        assert [a.data for a in assets] == [b"first"]
        assert any(flag.startswith("文件名冲突") for flag in job.flags)

    def test_hash_collision_first_wins_even_if_it_fails(self, asset_server):
        """测试先出现者抓取失败时，同名的后来者不会顶替其文件"""
        first, second = "https://x/Aa.png", "https://x/BB.png"
        asset_server.add(second, b"second")
        job = ExportJob(project_type=ProjectType.STORY)

        assets = _resolve(asset_server, _story(f'<img src="{first}"><img src="{second}">'), job)

        assert assets == []
        assert job.missing_assets == [first]
        assert asset_server.request_count(second) == 0
        assert f"文件名冲突:{story_asset_name(first)}" in job.flags

    def test_no_images(self, asset_server):
        """测试无插图"""
        assert _resolve(asset_server, _story("<p>plain</p>")) == []
        assert asset_server.requests == []


class TestPhotoAssets:
    """图片故事测试"""

    def test_positional_names(self, asset_server, photo_input):
        """测试按页序号命名，空URL跳过"""
        asset_server.add("https://cdn.test/a.jpg?w=800", b"a")
        asset_server.add("https://cdn.test/c.png", b"c")

        assets = _resolve(asset_server, photo_input)

        assert {a.filename: a.data for a in assets} == {"photo-1.jpg": b"a", "photo-3.png": b"c"}

    def test_failed_photo_skipped(self, asset_server, photo_input):
        """测试单张失败不影响其它"""
        asset_server.add("https://cdn.test/c.png", b"c")
        job = ExportJob(project_type=ProjectType.PHOTO)

        assets = _resolve(asset_server, photo_input, job)

        assert [a.filename for a in assets] == ["photo-3.png"]
        assert job.missing_assets == ["https://cdn.test/a.jpg?w=800"]


class TestComicAssets:
    """漫画渲染页测试"""

    def test_pages_rendered_in_order(self, asset_server, comic_input):
        """测试逐页栅格化并命名 page-<n>.png"""
        rasterizer = _RecordingRasterizer()

        assets = _resolve(asset_server, comic_input, rasterizer=rasterizer)

        assert rasterizer.pages == ["p1", "p2"]
        assert [(a.filename, a.data) for a in assets] == [
            ("page-1.png", b"PNG:p1"),
            ("page-2.png", b"PNG:p2"),
        ]
        assert all(a.source_url is None for a in assets)
