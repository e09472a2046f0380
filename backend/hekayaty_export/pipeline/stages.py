"""
导出流水线阶段定义

职责：
1. 定义各阶段的名称和进度区间
2. 阶段严格串行：HTML → PDF → 资源 → 打包 → 交付
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class StageEnum(str, Enum):
    """流水线阶段枚举"""
    RENDER_HTML = "RENDER_HTML"
    RENDER_PDF = "RENDER_PDF"
    COLLECT_ASSETS = "COLLECT_ASSETS"
    PACKAGE_ZIP = "PACKAGE_ZIP"
    DELIVER = "DELIVER"


@dataclass(frozen=True)
class PipelineStage:
    """流水线阶段"""
    name: str
    progress_start: int  # 进度起点（0-100）
    progress_end: int    # 进度终点


# 构建ZIP所需阶段（内存中完成）
BUILD_STAGES: list[PipelineStage] = [
    PipelineStage(StageEnum.RENDER_HTML.value, 0, 10),
    PipelineStage(StageEnum.RENDER_PDF.value, 10, 25),
    PipelineStage(StageEnum.COLLECT_ASSETS.value, 25, 85),
    PipelineStage(StageEnum.PACKAGE_ZIP.value, 85, 95),
]

# 完整导出：构建 + 落盘交付
EXPORT_STAGES: list[PipelineStage] = BUILD_STAGES + [
    PipelineStage(StageEnum.DELIVER.value, 95, 100),
]
