"""
导出执行器 - 编排各阶段执行（Bundle Assembler）

职责：
1. 按顺序执行各阶段：HTML → PDF → 资源 → 打包 → 交付
2. 更新任务进度
3. HTML/PDF/打包失败中止整个导出；资源失败只记录告警
4. 可选生成manifest

测试要点：
- test_export_story_end_to_end: 完整导出
- test_partial_asset_failure: 部分资源失败仍成功
- test_render_failure_aborts: 渲染失败标记任务失败并抛出
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

import httpx

from ..assets import AssetFetcher, AssetResolver
from ..config import RuntimeConfig, get_config
from ..models import ExportJob, ProjectType, parse_project_input
from ..render import CanvasRasterizer, HTMLRenderer, PDFRenderer
from .packager import Packager
from .stages import BUILD_STAGES, EXPORT_STAGES, PipelineStage, StageEnum

if TYPE_CHECKING:
    from ..interfaces import AnyProjectInput, IAssetFetcher

logger = logging.getLogger(__name__)


class BundleAssembler:
    """导出执行器

    每次调用独立持有自己的工作数据；调用方需自行避免同一作品并发导出。
    """

    def __init__(
        self,
        config: RuntimeConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self.config = config or get_config()
        self.client = client

        self.html_renderer = HTMLRenderer()
        self.pdf_renderer = PDFRenderer(self.config.pdf)
        self.packager = Packager(self.config.bundle)

    async def build(self, project_input: AnyProjectInput, job: ExportJob | None = None) -> bytes:
        """在内存中构建ZIP（不落盘）"""
        job = job or self._new_job(project_input)
        context = await self._run(job, project_input, BUILD_STAGES, output_dir=None)
        return context["zip_data"]

    async def export(
        self, project_input: AnyProjectInput, output_dir: Path | None = None
    ) -> ExportJob:
        """构建ZIP并交付到输出目录"""
        job = self._new_job(project_input)
        await self._run(job, project_input, EXPORT_STAGES, output_dir=output_dir)

        if self.config.bundle.write_manifest:
            job.artifacts.manifest_path = self.packager.generate_manifest(job)
        return job

    def _new_job(self, project_input: AnyProjectInput) -> ExportJob:
        return ExportJob(
            project_type=ProjectType(project_input.type),
            title=project_input.project.title,
        )

    async def _run(
        self,
        job: ExportJob,
        project_input: AnyProjectInput,
        stages: list[PipelineStage],
        output_dir: Path | None,
    ) -> dict[str, Any]:
        job.mark_running(stages[0].name)
        logger.info(f"[{job.job_id}] 导出开始: {job.project_type.value} {job.title!r}")

        context: dict[str, Any] = {
            "html": "",
            "pdf": b"",
            "assets": [],
            "zip_data": b"",
            "output_dir": output_dir,
        }

        try:
            async with AssetFetcher(self.client, self.config.fetch) as fetcher:
                context["fetcher"] = fetcher
                for stage in stages:
                    await self._execute_stage(job, stage, project_input, context)

            job.mark_succeeded()

        except Exception as e:
            logger.exception(f"导出失败: {job.job_id}")
            job.mark_failed(str(e))
            raise

        if job.missing_assets:
            logger.warning(f"[{job.job_id}] 导出完成，缺失资源 {job.missing_asset_count} 个")
        else:
            logger.info(f"[{job.job_id}] 导出完成")
        return context

    async def _execute_stage(
        self,
        job: ExportJob,
        stage: PipelineStage,
        project_input: AnyProjectInput,
        context: dict[str, Any],
    ) -> None:
        """执行单个阶段"""
        job.progress.stage = stage.name
        job.progress.percent = stage.progress_start
        logger.info(f"[{job.job_id}] 开始阶段: {stage.name}")

        try:
            if stage.name == StageEnum.RENDER_HTML.value:
                context["html"] = self.html_renderer.render(project_input)

            elif stage.name == StageEnum.RENDER_PDF.value:
                rendered = self.pdf_renderer.render_document(project_input)
                context["pdf"] = rendered.data
                job.artifacts.pdf_pages = rendered.page_count

            elif stage.name == StageEnum.COLLECT_ASSETS.value:
                await self._stage_collect_assets(job, project_input, context)

            elif stage.name == StageEnum.PACKAGE_ZIP.value:
                context["zip_data"] = self.packager.package(
                    context["html"], context["pdf"], context["assets"]
                )
                job.artifacts.zip_size = len(context["zip_data"])

            elif stage.name == StageEnum.DELIVER.value:
                job.artifacts.zip_path = self.packager.save(
                    context["zip_data"], job.title, context["output_dir"]
                )

        except Exception as e:
            logger.error(f"[{job.job_id}] 阶段失败 {stage.name}: {e}")
            job.add_flag(f"阶段失败:{stage.name}")
            raise

        job.progress.percent = stage.progress_end
        job.progress.message = f"完成阶段: {stage.name}"
        logger.info(f"[{job.job_id}] 完成阶段: {stage.name} ({stage.progress_end}%)")

    async def _stage_collect_assets(
        self, job: ExportJob, project_input: AnyProjectInput, context: dict[str, Any]
    ) -> None:
        """抓取资源（漫画为逐页栅格化）"""
        fetcher: IAssetFetcher = context["fetcher"]
        rasterizer = CanvasRasterizer(fetcher, self.config.canvas)
        resolver = AssetResolver(fetcher, rasterizer)

        assets = await resolver.resolve(project_input, job)
        context["assets"] = assets
        job.artifacts.asset_files = [asset.filename for asset in assets]


async def export_project(
    project_input: AnyProjectInput | dict[str, Any],
    output_dir: Path | None = None,
    *,
    config: RuntimeConfig | None = None,
    client: httpx.AsyncClient | None = None,
) -> ExportJob:
    """
    导出作品为ZIP

    Args:
        project_input: {type, project} 结构或已解析的输入模型
        output_dir: 输出目录（默认取配置 bundle.output_dir）
        config: 运行期配置（默认全局配置）
        client: 注入的 httpx.AsyncClient（由调用方关闭）

    Returns:
        导出任务（状态/告警/产物路径）
    """
    if isinstance(project_input, dict):
        project_input = parse_project_input(project_input)
    assembler = BundleAssembler(config=config, client=client)
    return await assembler.export(project_input, output_dir)
