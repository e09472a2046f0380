"""
资源命名 - URL → 确定性本地文件名

规则：
- 小说插图: img-<hash(url)><ext>
- 图片故事: photo-<序号，从1开始><ext>
- 漫画渲染页: page-<序号，从1开始>.png

hash 为32位滚动乘法哈希（非密码学），同一URL在任意次运行中得到同一文件名。

测试要点：
- test_url_hash_known_values: 与 String.hashCode 取绝对值一致
- test_extension_strips_query: 去掉查询串后保留扩展名
"""

from __future__ import annotations

import mimetypes
import posixpath
from urllib.parse import urlsplit

_INT32_MASK = 0xFFFFFFFF

# mimetypes 在部分平台上给出的扩展名不常用
_MIME_EXT_OVERRIDES = {
    "image/jpeg": ".jpg",
    "image/svg+xml": ".svg",
    "image/webp": ".webp",
}


def url_hash(value: str) -> int:
    """
    32位滚动乘法哈希：h = h*31 + code_unit（按int32溢出），返回 |h|

    按 UTF-16 码元计算，-2**31 的绝对值为 2147483648。
    """
    h = 0
    raw = value.encode("utf-16-le", "surrogatepass")
    for i in range(0, len(raw), 2):
        code_unit = raw[i] | (raw[i + 1] << 8)
        h = (h * 31 + code_unit) & _INT32_MASK
    if h & 0x80000000:
        h -= 1 << 32
    return abs(h)


def get_extension(url: str) -> str:
    """
    取URL路径最后一段的扩展名（含点）

    查询串与锚点先去掉；无扩展名返回空串；data: URL 按 MIME 类型推断。
    """
    if url.startswith("data:"):
        mime = url[5:].split(",", 1)[0].split(";", 1)[0].strip().lower()
        return mime_to_extension(mime)

    try:
        path = urlsplit(url).path
    except ValueError:
        # 如 "http://[::1/x.png"：按原文截掉查询串与锚点
        path = url.split("?", 1)[0].split("#", 1)[0]
    segment = posixpath.basename(path)
    dot = segment.rfind(".")
    if dot <= 0 or dot == len(segment) - 1:
        return ""
    return segment[dot:]


def mime_to_extension(mime: str) -> str:
    if not mime:
        return ""
    if mime in _MIME_EXT_OVERRIDES:
        return _MIME_EXT_OVERRIDES[mime]
    return mimetypes.guess_extension(mime) or ""


def story_asset_name(url: str) -> str:
    return f"img-{url_hash(url)}{get_extension(url)}"


def photo_asset_name(index: int, url: str) -> str:
    """index 从0开始，文件名序号从1开始"""
    return f"photo-{index + 1}{get_extension(url)}"


def comic_page_name(index: int) -> str:
    """index 从0开始，文件名序号从1开始"""
    return f"page-{index + 1}.png"
