"""
HTML片段工具 - 插图提取/改写、正文提取

插图按标签扫描，只改写 src 值，作者的其余HTML原样保留。

正文提取两种模式：
- parser: BeautifulSoup 解析，实体解码，<br>/块级元素换行
- regex: 朴素去标签 <[^>]+>，实体与嵌套不处理（与旧版输出一致）
"""

from __future__ import annotations

import re
from html import escape, unescape
from typing import Callable

from bs4 import BeautifulSoup

_TAG_RE = re.compile(r"<[^>]+>")
_BLANK_LINES_RE = re.compile(r"\n{3,}")

# 引号内的 ">" 不结束标签
_IMG_TAG_RE = re.compile(r"""<img\b(?:[^>"']|"[^"]*"|'[^']*')*>""", re.IGNORECASE)
_ATTR_RE = re.compile(
    r"""(?P<name>[^\s"'>/=]+)"""
    r"""(?:\s*=\s*(?:"(?P<dq>[^"]*)"|'(?P<sq>[^']*)'|(?P<bare>[^\s"'>]+)))?"""
)

BLOCK_TAGS = (
    "p", "div", "li", "blockquote", "pre", "section", "article",
    "h1", "h2", "h3", "h4", "h5", "h6", "tr", "figcaption",
)


def _soup(fragment: str) -> BeautifulSoup:
    return BeautifulSoup(fragment, "html.parser")


def _src_attribute(tag: str) -> tuple[str, int, int, bool] | None:
    """
    在单个 <img ...> 标签内定位 src 属性值

    Returns:
        (解码后的值, 值起点, 值终点, 是否带引号)；无 src 或值为空时返回 None
    """
    for attr in _ATTR_RE.finditer(tag, len("<img")):
        if attr.group("name").lower() != "src":
            continue
        for group in ("dq", "sq", "bare"):
            if attr.group(group) is not None:
                value = unescape(attr.group(group)).strip()
                if not value:
                    return None
                start, end = attr.span(group)
                return value, start, end, group != "bare"
        return None
    return None


def iter_image_sources(fragment: str) -> list[str]:
    """按出现顺序返回 <img src> 值（未去重）"""
    if not fragment:
        return []
    sources = []
    for match in _IMG_TAG_RE.finditer(fragment):
        found = _src_attribute(match.group(0))
        if found:
            sources.append(found[0])
    return sources


def rewrite_image_sources(fragment: str, mapper: Callable[[str], str]) -> str:
    """只替换每个 <img> 的 src 值为 mapper(src)，片段其余部分原样保留"""
    if not fragment:
        return fragment

    def _replace(match: re.Match[str]) -> str:
        tag = match.group(0)
        found = _src_attribute(tag)
        if found is None:
            return tag
        value, start, end, quoted = found
        new_value = escape(mapper(value), quote=True)
        if not quoted:
            new_value = f'"{new_value}"'
        return tag[:start] + new_value + tag[end:]

    return _IMG_TAG_RE.sub(_replace, fragment)


def strip_tags_naive(fragment: str) -> str:
    return _TAG_RE.sub("", fragment)


def html_to_text(fragment: str) -> str:
    """解析HTML片段为纯文本，保留段落换行"""
    if not fragment:
        return ""
    soup = _soup(fragment)
    for br in soup.find_all("br"):
        br.replace_with("\n")
    for block in soup.find_all(BLOCK_TAGS):
        block.append("\n")

    lines = [line.rstrip() for line in soup.get_text().replace("\xa0", " ").splitlines()]
    text = "\n".join(lines)
    return _BLANK_LINES_RE.sub("\n\n", text).strip("\n")


def extract_text(fragment: str, mode: str = "parser") -> str:
    if mode == "regex":
        return strip_tags_naive(fragment)
    return html_to_text(fragment)
