"""
资源解析器 - 收集作品引用的资源并抓取为本地文件

职责：
1. 小说：扫描各页HTML中的 <img src>，去重后逐个抓取，命名 img-<hash><ext>
2. 图片故事：按页顺序抓取 photoUrl，命名 photo-<n><ext>
3. 漫画：逐页调用栅格化器，命名 page-<n>.png
4. 失败隔离（单个资源失败只记录，不影响整体导出）

测试要点：
- test_story_dedup: 同一URL多次引用只抓取一次
- test_story_partial_failure: 一个失败一个成功，只产出一个文件
- test_photo_positional_names: 按页序号命名，空URL跳过
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..interfaces import AssetFetchError, IAssetFetcher, IAssetResolver, ICanvasRasterizer
from ..models import AssetInfo, ComicInput, PhotoInput, StoryInput
from ..render.markup import iter_image_sources
from .naming import comic_page_name, photo_asset_name, story_asset_name

if TYPE_CHECKING:
    from ..interfaces import AnyProjectInput
    from ..models import ComicProject, ExportJob, PhotoProject, StoryProject

logger = logging.getLogger(__name__)


def collect_story_image_urls(project: StoryProject) -> list[str]:
    """按首次出现顺序收集去重后的插图URL"""
    seen: dict[str, None] = {}
    for page in project.iter_pages():
        for src in iter_image_sources(page.content):
            seen.setdefault(src, None)
    return list(seen)


class AssetResolver(IAssetResolver):
    """资源解析器实现"""

    def __init__(self, fetcher: IAssetFetcher, rasterizer: ICanvasRasterizer | None = None):
        self.fetcher = fetcher
        self.rasterizer = rasterizer

    async def resolve(
        self, project_input: AnyProjectInput, job: ExportJob | None = None
    ) -> list[AssetInfo]:
        """收集并抓取资源"""
        if isinstance(project_input, StoryInput):
            return await self._resolve_story(project_input.project, job)
        if isinstance(project_input, PhotoInput):
            return await self._resolve_photo(project_input.project, job)
        if isinstance(project_input, ComicInput):
            return await self._render_comic(project_input.project)
        raise TypeError(f"未知作品类型: {type(project_input).__name__}")

    async def _resolve_story(self, project: StoryProject, job: ExportJob | None) -> list[AssetInfo]:
        assets: list[AssetInfo] = []
        used_names: dict[str, str] = {}

        for url in collect_story_image_urls(project):
            filename = story_asset_name(url)
            if filename in used_names:
                # 哈希碰撞：先到先得
                logger.warning(f"资源文件名冲突 {filename}: {url} 与 {used_names[filename]}")
                if job:
                    job.add_flag(f"文件名冲突:{filename}")
                continue

            # 先占用文件名：即使抓取失败，后来的同名URL也不能顶替
            used_names[filename] = url
            data = await self._fetch(url, job)
            if data is None:
                continue
            assets.append(AssetInfo(filename=filename, data=data, source_url=url))

        return assets

    async def _resolve_photo(self, project: PhotoProject, job: ExportJob | None) -> list[AssetInfo]:
        assets: list[AssetInfo] = []
        for i, page in enumerate(project.pages):
            if not page.photo_url:
                continue
            data = await self._fetch(page.photo_url, job)
            if data is None:
                continue
            assets.append(
                AssetInfo(
                    filename=photo_asset_name(i, page.photo_url),
                    data=data,
                    source_url=page.photo_url,
                )
            )
        return assets

    async def _render_comic(self, project: ComicProject) -> list[AssetInfo]:
        if self.rasterizer is None:
            raise RuntimeError("漫画导出需要栅格化器")

        assets: list[AssetInfo] = []
        # 页与页之间串行
        for i, page in enumerate(project.pages):
            png = await self.rasterizer.rasterize(page)
            assets.append(AssetInfo(filename=comic_page_name(i), data=png))
        return assets

    async def _fetch(self, url: str, job: ExportJob | None) -> bytes | None:
        try:
            return await self.fetcher.fetch(url)
        except AssetFetchError as e:
            logger.warning(f"资源抓取失败，已跳过: {e}")
            if job:
                job.add_missing_asset(url)
            return None
