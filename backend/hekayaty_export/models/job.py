"""
导出任务模型 - 单次导出的状态、产物与告警

一次导出调用对应一个 ExportJob，不跨调用共享、不持久化。
"""

from __future__ import annotations

import uuid
from datetime import datetime
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field

from .project import ProjectType


class JobStatus(str, Enum):
    """任务状态枚举"""
    QUEUED = "queued"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class ExportArtifacts(BaseModel):
    """导出产物"""
    zip_path: Path | None = None
    manifest_path: Path | None = None
    zip_size: int = 0
    asset_files: list[str] = Field(default_factory=list)
    pdf_pages: int = 0


class ExportProgress(BaseModel):
    """任务进度"""
    stage: str = "INIT"
    percent: int = 0
    message: str = ""


class ExportJob(BaseModel):
    """导出任务实体"""
    job_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    project_type: ProjectType
    title: str = ""

    # 状态
    status: JobStatus = JobStatus.QUEUED
    progress: ExportProgress = Field(default_factory=ExportProgress)

    # 产物
    artifacts: ExportArtifacts = Field(default_factory=ExportArtifacts)

    # 结果
    flags: list[str] = Field(default_factory=list, description="告警标记")
    missing_assets: list[str] = Field(default_factory=list, description="抓取失败的资源URL")
    errors: list[str] = Field(default_factory=list, description="错误信息")

    # 时间戳
    created_at: datetime = Field(default_factory=datetime.now)
    started_at: datetime | None = None
    finished_at: datetime | None = None

    def mark_running(self, stage: str = "RENDER_HTML") -> None:
        """标记为运行中"""
        self.status = JobStatus.RUNNING
        self.started_at = datetime.now()
        self.progress.stage = stage

    def mark_succeeded(self) -> None:
        """标记为成功"""
        self.status = JobStatus.SUCCEEDED
        self.finished_at = datetime.now()
        self.progress.percent = 100
        if self.missing_assets:
            self.add_flag(f"缺失资源:{len(self.missing_assets)}")

    def mark_failed(self, error: str) -> None:
        """标记为失败"""
        self.status = JobStatus.FAILED
        self.finished_at = datetime.now()
        self.errors.append(error)

    def add_flag(self, flag: str) -> None:
        """添加告警标记（不中断）"""
        if flag not in self.flags:
            self.flags.append(flag)

    def add_missing_asset(self, url: str) -> None:
        """记录抓取失败的资源（不中断）"""
        if url not in self.missing_assets:
            self.missing_assets.append(url)

    @property
    def missing_asset_count(self) -> int:
        return len(self.missing_assets)

    @property
    def succeeded(self) -> bool:
        return self.status == JobStatus.SUCCEEDED
