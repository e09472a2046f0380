"""
命令行入口 - 导出保存的作品草稿（JSON）

用法：
    python -m hekayaty_export draft.json -o exports/
    python -m hekayaty_export tc_draft_story.json --type story --manifest

JSON 可以是 {"type": ..., "project": {...}}，也可以是裸作品配合 --type。
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .config import RuntimeConfig, get_config, reload_config
from .interfaces import HekayatyExportError
from .models import ProjectType, parse_project_input
from .pipeline import export_project

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="hekayaty-export",
        description="Export a Hekayaty story/comic/photo project to a ZIP bundle.",
    )
    ap.add_argument("project", type=Path, help="project JSON file")
    ap.add_argument("-o", "--output-dir", type=Path, default=None)
    ap.add_argument(
        "--type",
        dest="project_type",
        choices=[t.value for t in ProjectType],
        help="project type when the JSON holds a bare project",
    )
    ap.add_argument("--config", type=Path, default=None, help="runtime YAML")
    ap.add_argument("--manifest", action="store_true", help="write <name>.manifest.json")
    ap.add_argument("-v", "--verbose", action="store_true")
    return ap


def load_input(path: Path, project_type: str | None) -> dict[str, Any]:
    """读取草稿JSON并补齐 {type, project} 结构"""
    with open(path, encoding="utf-8") as f:
        data = json.load(f)

    if isinstance(data, dict) and "type" in data and "project" in data:
        if project_type and project_type != data["type"]:
            raise ValueError(f"--type {project_type} 与文件中的 {data['type']} 不一致")
        return data
    if not project_type:
        raise ValueError("裸作品JSON需要指定 --type")
    return {"type": project_type, "project": data}


def _setup_logging(config: RuntimeConfig, verbose: bool) -> None:
    level = logging.DEBUG if verbose else config.logging.log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    config = reload_config(args.config) if args.config else get_config()
    if args.manifest:
        config = config.model_copy(deep=True)
        config.bundle.write_manifest = True
    _setup_logging(config, args.verbose)

    try:
        project_input = parse_project_input(load_input(args.project, args.project_type))
    except (OSError, ValueError, ValidationError) as e:
        logger.error(f"无法读取作品: {e}")
        return 1

    try:
        job = asyncio.run(export_project(project_input, args.output_dir, config=config))
    except HekayatyExportError as e:
        logger.error(f"导出失败: {e}")
        return 1

    print(job.artifacts.zip_path)
    if job.missing_assets:
        print(f"exported with {job.missing_asset_count} missing asset(s):", file=sys.stderr)
        for url in job.missing_assets:
            print(f"  {url[:120]}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
