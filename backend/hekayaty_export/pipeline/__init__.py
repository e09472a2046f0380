"""
流水线模块 - 导出编排与打包

子模块：
- stages: 流水线各阶段定义
- executor: 导出执行器（Bundle Assembler）
- packager: ZIP打包、交付与manifest生成
"""

from .executor import BundleAssembler, export_project
from .packager import Packager, bundle_basename
from .stages import BUILD_STAGES, EXPORT_STAGES, PipelineStage, StageEnum

__all__ = [
    "PipelineStage",
    "StageEnum",
    "BUILD_STAGES",
    "EXPORT_STAGES",
    "BundleAssembler",
    "export_project",
    "Packager",
    "bundle_basename",
]
