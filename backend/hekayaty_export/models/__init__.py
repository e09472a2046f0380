"""
数据模型层 - 定义导出流水线核心数据结构

所有模块通过这些模型交互，实现解耦：
- ProjectInput: 带类型标签的作品输入（story/comic/photo）
- AssetInfo: 单个打包资源（文件名+二进制）
- ExportJob: 单次导出的状态与报告
"""

from .asset import AssetInfo
from .job import ExportArtifacts, ExportJob, ExportProgress, JobStatus
from .project import (
    Chapter,
    ComicInput,
    ComicPage,
    ComicProject,
    PhotoInput,
    PhotoPage,
    PhotoProject,
    ProjectInput,
    ProjectType,
    StoryInput,
    StoryPage,
    StoryProject,
    VisualElement,
    parse_project_input,
)

__all__ = [
    "ProjectType",
    "ProjectInput",
    "StoryInput",
    "ComicInput",
    "PhotoInput",
    "StoryProject",
    "Chapter",
    "StoryPage",
    "ComicProject",
    "ComicPage",
    "VisualElement",
    "PhotoProject",
    "PhotoPage",
    "parse_project_input",
    "AssetInfo",
    "ExportJob",
    "ExportArtifacts",
    "ExportProgress",
    "JobStatus",
]
