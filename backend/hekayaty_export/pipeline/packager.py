"""
打包器 - 生成导出ZIP与manifest

职责：
1. 组装 package ZIP：index.html + story.pdf + assets/*
2. 交付：写入 <标题 或 project>.zip
3. 可选生成 <name>.manifest.json（ZIP旁路文件，不入包）

测试要点：
- test_package_layout: ZIP结构
- test_package_is_byte_stable: 相同输入ZIP字节一致
- test_bundle_filename: 标题为空/含路径分隔符
"""

from __future__ import annotations

import io
import json
import re
import zipfile
from pathlib import Path
from typing import TYPE_CHECKING

from ..config import BundleConfig, get_config
from ..interfaces import IPackager, PackageError

if TYPE_CHECKING:
    from ..models import AssetInfo, ExportJob

INDEX_NAME = "index.html"
PDF_NAME = "story.pdf"
ASSETS_DIR = "assets/"

# 固定时间戳，保证相同输入ZIP字节一致
_ZIP_DATE_TIME = (1980, 1, 1, 0, 0, 0)
_UNSAFE_NAME_RE = re.compile(r'[\\/:*?"<>|\x00-\x1f]')


def bundle_basename(title: str | None, fallback: str = "project") -> str:
    """下载文件名主干：标题为空时使用 fallback，去掉路径分隔符等非法字符"""
    name = _UNSAFE_NAME_RE.sub("_", (title or "").strip())
    return name or fallback


class Packager(IPackager):
    """打包器实现"""

    def __init__(self, config: BundleConfig | None = None):
        self.config = config or get_config().bundle

    @property
    def compression(self) -> int:
        return zipfile.ZIP_DEFLATED if self.config.compress else zipfile.ZIP_STORED

    def package(self, html: str, pdf: bytes, assets: list[AssetInfo]) -> bytes:
        """组装ZIP"""
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w", self.compression) as zf:
            self._write(zf, INDEX_NAME, html.encode("utf-8"))
            self._write(zf, PDF_NAME, pdf)

            # 目录项始终存在（无资源时为空目录）
            dir_info = zipfile.ZipInfo(ASSETS_DIR, date_time=_ZIP_DATE_TIME)
            dir_info.external_attr = (0o40755 << 16) | 0x10
            zf.writestr(dir_info, b"")

            for asset in assets:
                self._write(zf, f"{ASSETS_DIR}{asset.filename}", asset.data)

        return buffer.getvalue()

    def _write(self, zf: zipfile.ZipFile, arcname: str, data: bytes) -> None:
        info = zipfile.ZipInfo(arcname, date_time=_ZIP_DATE_TIME)
        info.compress_type = self.compression
        info.external_attr = 0o644 << 16
        zf.writestr(info, data)

    def bundle_path(self, title: str | None, output_dir: Path | None = None) -> Path:
        directory = output_dir or self.config.output_dir
        return directory / f"{bundle_basename(title, self.config.fallback_name)}.zip"

    def save(self, data: bytes, title: str, output_dir: Path | None = None) -> Path:
        """交付ZIP"""
        zip_path = self.bundle_path(title, output_dir)
        try:
            zip_path.parent.mkdir(parents=True, exist_ok=True)
            zip_path.write_bytes(data)
        except OSError as e:
            raise PackageError(f"ZIP写入失败: {zip_path}: {e}") from e
        return zip_path

    def generate_manifest(self, job: ExportJob) -> Path:
        """生成manifest.json"""
        zip_path = job.artifacts.zip_path
        if not zip_path:
            raise PackageError("Job zip_path not set")

        manifest = {
            "schema_version": "1.0",
            "job_id": job.job_id,
            "project_type": job.project_type.value,
            "title": job.title,

            "artifacts": {
                "package_zip": zip_path.name,
                "zip_size": job.artifacts.zip_size,
                "entries": [INDEX_NAME, PDF_NAME]
                + [f"{ASSETS_DIR}{name}" for name in job.artifacts.asset_files],
                "pdf_pages": job.artifacts.pdf_pages,
            },

            "missing_assets": job.missing_assets,
            "flags": job.flags,
            "errors": job.errors,

            "timestamps": {
                "created_at": job.created_at.isoformat() if job.created_at else None,
                "started_at": job.started_at.isoformat() if job.started_at else None,
                "finished_at": job.finished_at.isoformat() if job.finished_at else None,
            },
        }

        manifest_path = zip_path.with_name(f"{zip_path.stem}.manifest.json")
        with open(manifest_path, "w", encoding="utf-8") as f:
            json.dump(manifest, f, ensure_ascii=False, indent=2)

        return manifest_path
