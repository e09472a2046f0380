"""
资源模型 - 待写入 assets/ 的单个二进制文件
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class AssetInfo(BaseModel):
    """打包资源（单次导出内一次性使用）"""
    filename: str = Field(..., description="assets/ 下的本地文件名")
    data: bytes
    source_url: str | None = Field(None, description="来源URL（漫画渲染页为None）")
