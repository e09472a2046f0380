"""
资源抓取器 - http(s)/data: URL → 二进制

职责：
1. http(s) GET（不附带认证头），非2xx视为失败
2. data: URL 本地解码（编辑器上传的图片以内联形式保存）
3. 单次抓取超时上限，超时按失败处理

测试要点：
- test_fetch_ok: 正常抓取
- test_fetch_http_error: 404 抛 AssetFetchError
- test_fetch_data_url: base64 data URL 解码
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import logging
from urllib.parse import unquote_to_bytes, urlsplit

import httpx

from ..config import FetchConfig, get_config
from ..interfaces import AssetFetchError, IAssetFetcher

logger = logging.getLogger(__name__)


def decode_data_url(url: str) -> bytes:
    """解码 data:[<mime>][;base64],<payload>"""
    header, sep, payload = url[5:].partition(",")
    if not sep:
        raise AssetFetchError(url, "data URL格式错误")

    if header.lower().endswith(";base64"):
        try:
            return base64.b64decode("".join(payload.split()), validate=True)
        except (binascii.Error, ValueError) as e:
            raise AssetFetchError(url, "data URL base64解码失败") from e
    return unquote_to_bytes(payload)


class AssetFetcher(IAssetFetcher):
    """资源抓取器实现

    未注入 client 时按需创建 httpx.AsyncClient，并在 aclose() 时关闭；
    注入的 client 由调用方负责关闭。
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        config: FetchConfig | None = None,
    ):
        self.config = config or get_config().fetch
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self) -> AssetFetcher:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.config.timeout_sec),
                follow_redirects=self.config.follow_redirects,
                headers={"User-Agent": self.config.user_agent},
            )
        return self._client

    async def fetch(self, url: str) -> bytes:
        """抓取单个资源"""
        if url.startswith("data:"):
            return decode_data_url(url)

        try:
            scheme = urlsplit(url).scheme.lower()
        except ValueError as e:
            raise AssetFetchError(url, "URL无效") from e
        if scheme not in ("http", "https"):
            raise AssetFetchError(url, f"不支持的协议: {scheme or '相对路径'}")

        client = self._get_client()
        try:
            response = await asyncio.wait_for(
                client.get(url), timeout=self.config.timeout_sec
            )
            response.raise_for_status()
        except (httpx.InvalidURL, ValueError) as e:
            # InvalidURL 不是 HTTPError 的子类
            raise AssetFetchError(url, "URL无效") from e
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise AssetFetchError(url, "抓取超时") from e
        except httpx.HTTPStatusError as e:
            raise AssetFetchError(url, f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise AssetFetchError(url, f"网络错误 {type(e).__name__}") from e

        logger.debug(f"抓取完成: {url} ({len(response.content)} bytes)")
        return response.content
