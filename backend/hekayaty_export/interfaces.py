"""
模块接口契约 - 定义导出流水线各模块的抽象接口

设计原则：
1. 模块间通过接口通信，不直接依赖具体实现
2. 每个接口定义清晰的输入输出类型
3. 便于单元测试和mock替换

使用方式：
    from hekayaty_export.interfaces import IAssetFetcher

    class CachedFetcher(IAssetFetcher):
        async def fetch(self, url: str) -> bytes:
            ...
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from .models import (
        AssetInfo,
        ComicInput,
        ComicPage,
        ExportJob,
        PhotoInput,
        StoryInput,
    )

    AnyProjectInput = Union[StoryInput, ComicInput, PhotoInput]


# ============================================================================
# 资源模块接口
# ============================================================================

class IAssetFetcher(ABC):
    """资源抓取接口 - URL → 二进制"""

    @abstractmethod
    async def fetch(self, url: str) -> bytes:
        """
        抓取单个资源

        Args:
            url: http(s) 或 data: URL

        Returns:
            响应体二进制

        Raises:
            AssetFetchError: 网络错误/超时/非2xx/无法解码
        """
        ...


class IAssetResolver(ABC):
    """资源解析器接口 - 作品 → 本地资源列表"""

    @abstractmethod
    async def resolve(
        self, project_input: AnyProjectInput, job: ExportJob | None = None
    ) -> list[AssetInfo]:
        """
        收集并抓取作品引用的全部资源

        单个资源失败只记录到 job.missing_assets，不中断。

        Args:
            project_input: 带类型标签的作品
            job: 记录缺失资源与告警的任务（可选）

        Returns:
            资源列表（顺序无关）
        """
        ...


# ============================================================================
# 渲染模块接口
# ============================================================================

class IHTMLRenderer(ABC):
    """HTML渲染器接口"""

    @abstractmethod
    def render(self, project_input: AnyProjectInput) -> str:
        """
        生成完整独立的HTML文档，资源引用指向 assets/

        Raises:
            RenderError: 结构异常
        """
        ...


class IPDFRenderer(ABC):
    """PDF渲染器接口"""

    @abstractmethod
    def render(self, project_input: AnyProjectInput) -> bytes:
        """
        生成A4分页PDF

        Raises:
            RenderError: 结构异常
        """
        ...


class ICanvasRasterizer(ABC):
    """漫画页栅格化接口"""

    @abstractmethod
    async def rasterize(self, page: ComicPage) -> bytes:
        """
        合成单页图层并输出PNG

        单个图片加载失败跳过，整页仍输出。
        """
        ...


# ============================================================================
# 打包接口
# ============================================================================

class IPackager(ABC):
    """打包器接口"""

    @abstractmethod
    def package(self, html: str, pdf: bytes, assets: list[AssetInfo]) -> bytes:
        """
        组装ZIP

        Returns:
            ZIP二进制（index.html + story.pdf + assets/*）
        """
        ...

    @abstractmethod
    def save(self, data: bytes, title: str, output_dir: Path | None = None) -> Path:
        """
        交付ZIP（写入 <title 或 project>.zip）

        Returns:
            ZIP路径
        """
        ...

    @abstractmethod
    def generate_manifest(self, job: ExportJob) -> Path:
        """
        生成 <name>.manifest.json（ZIP旁路文件，不入包）

        Returns:
            manifest 路径
        """
        ...


# ============================================================================
# 异常定义
# ============================================================================

class HekayatyExportError(Exception):
    """基础异常"""
    pass


class AssetFetchError(HekayatyExportError):
    """资源抓取错误（可跳过）"""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"{reason}: {url[:120]}")


class RasterizeError(HekayatyExportError):
    """栅格化错误（单元素可跳过）"""
    pass


class RenderError(HekayatyExportError):
    """HTML/PDF渲染错误（致命）"""
    pass


class PackageError(HekayatyExportError):
    """打包/保存错误（致命）"""
    pass
