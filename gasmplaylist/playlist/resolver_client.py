"""
解析服务客户端 - 通过HTTP调用解析服务的 /resolve 端点
"""

import asyncio
import logging

import aiohttp

from gasmplaylist.core.interfaces import IResolverClient, ResolutionError, ResolvedAudio


class HttpResolverClient(IResolverClient):
    """
    HTTP 解析客户端

    每次解析使用独立的会话，解析请求之间不共享状态。
    """

    def __init__(self, base_url: str, timeout: float = 30):
        """
        初始化解析客户端

        Args:
            base_url: 解析服务根地址
            timeout: 请求总超时（秒）
        """
        self.base_url = base_url.rstrip('/')
        self.logger = logging.getLogger("gasmplaylist.playlist.resolver_client")
        self.timeout = aiohttp.ClientTimeout(total=timeout)

        self.logger.debug(f"解析客户端初始化完成 - 服务地址: {self.base_url}")

    async def resolve(self, page_url: str) -> ResolvedAudio:
        """
        请求解析服务解析页面链接

        Args:
            page_url: 页面链接

        Returns:
            解析结果

        Raises:
            ResolutionError: 解析服务返回错误、响应缺少 audioUrl 或网络错误
        """
        endpoint = f"{self.base_url}/resolve"
        self.logger.debug(f"请求解析: {page_url}")

        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.get(endpoint, params={'url': page_url}) as response:
                    if not 200 <= response.status < 300:
                        self.logger.warning(f"解析服务返回状态 {response.status}: {page_url}")
                        raise ResolutionError(
                            f"解析失败: {page_url}", page_url, response.status
                        )
                    data = await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            self.logger.error(f"解析请求出错 - {page_url}: {e}")
            raise ResolutionError(f"解析出错: {page_url}", page_url) from e

        audio_url = data.get('audioUrl') if isinstance(data, dict) else None
        if not audio_url:
            self.logger.warning(f"解析服务未返回音频链接: {page_url}")
            raise ResolutionError(f"解析服务未返回音频链接: {page_url}", page_url)

        return ResolvedAudio(audio_url=audio_url, title=data.get('title') or None)
