"""
pytest 配置与公共 fixtures

使用方式：
    def test_something(asset_server, runtime_config):
        asset_server.add("https://x/y.png", make_png("red"))
        job = asset_server.run(lambda client: BundleAssembler(runtime_config, client).export(...))
"""

from __future__ import annotations

import asyncio
import io
import tempfile
from pathlib import Path
from typing import Any, Awaitable, Callable, Generator

import httpx
import pytest
from PIL import Image

from hekayaty_export.config import BundleConfig, CanvasConfig, RuntimeConfig
from hekayaty_export.models import (
    ComicInput,
    PhotoInput,
    StoryInput,
    parse_project_input,
)


def make_png(color: str = "red", size: tuple[int, int] = (4, 4)) -> bytes:
    """生成纯色PNG"""
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


# ============================================================================
# 网络 Fixtures
# ============================================================================

class FakeAssetServer:
    """按URL返回预设响应；未登记的URL视为不可达"""

    def __init__(self) -> None:
        self.routes: dict[str, tuple[int, bytes]] = {}
        self.requests: list[str] = []

    def add(self, url: str, content: bytes = b"", status: int = 200) -> None:
        self.routes[url] = (status, content)

    def handler(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.requests.append(url)
        if url not in self.routes:
            raise httpx.ConnectError("unreachable", request=request)
        status, content = self.routes[url]
        return httpx.Response(status, content=content)

    def request_count(self, url: str) -> int:
        return self.requests.count(url)

    def run(self, fn: Callable[[httpx.AsyncClient], Awaitable[Any]]) -> Any:
        """在带 MockTransport 的 AsyncClient 中执行协程"""

        async def _run() -> Any:
            transport = httpx.MockTransport(self.handler)
            async with httpx.AsyncClient(transport=transport) as client:
                return await fn(client)

        return asyncio.run(_run())


@pytest.fixture
def asset_server() -> FakeAssetServer:
    return FakeAssetServer()


@pytest.fixture
def png_factory() -> Callable[..., bytes]:
    return make_png


# ============================================================================
# 配置 Fixtures
# ============================================================================

@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """临时目录"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def runtime_config(temp_dir: Path) -> RuntimeConfig:
    """运行期配置（输出到临时目录，缩小画布加快测试）"""
    return RuntimeConfig(
        bundle=BundleConfig(output_dir=temp_dir),
        canvas=CanvasConfig(width=80, height=110, scale=3),
    )


# ============================================================================
# 作品 Fixtures
# ============================================================================

@pytest.fixture
def story_input() -> StoryInput:
    """单章单页、含一张插图的小说"""
    return parse_project_input({
        "type": "story",
        "project": {
            "title": "Test",
            "chapters": [
                {"pages": [{"content": '<p>Hello <img src="https://x/y.png"></p>'}]},
            ],
        },
    })


@pytest.fixture
def comic_input() -> ComicInput:
    return parse_project_input({
        "type": "comic",
        "project": {
            "title": "Night Market",
            "pages": [
                {
                    "id": "p1",
                    "title": "Page 1",
                    "backgroundColor": "#00ff00",
                    "elements": [
                        {"type": "image", "imageUrl": "https://cdn.test/panel.png",
                         "x": 10, "y": 10, "width": 20, "height": 20},
                        {"type": "text", "text": "Hi!"},
                    ],
                },
                {"id": "p2", "title": "Page 2", "backgroundColor": "", "elements": []},
            ],
        },
    })


@pytest.fixture
def photo_input() -> PhotoInput:
    return parse_project_input({
        "type": "photo",
        "project": {
            "title": "Old Cairo",
            "pages": [
                {"photoUrl": "https://cdn.test/a.jpg?w=800", "caption": "Gate <1>"},
                {"photoUrl": "", "caption": "No photo"},
                {"photoUrl": "https://cdn.test/c.png", "caption": "Minaret"},
            ],
        },
    })
