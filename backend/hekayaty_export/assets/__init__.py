"""
资源模块 - 资源命名/抓取/解析

子模块：
- naming: 确定性文件名（hash + 扩展名）
- fetcher: http(s)/data: 抓取
- resolver: 作品 → 资源列表
"""

from .fetcher import AssetFetcher, decode_data_url
from .naming import get_extension, story_asset_name, url_hash
from .resolver import AssetResolver, collect_story_image_urls

__all__ = [
    "AssetFetcher",
    "AssetResolver",
    "collect_story_image_urls",
    "decode_data_url",
    "get_extension",
    "story_asset_name",
    "url_hash",
]
