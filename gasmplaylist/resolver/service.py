"""
解析服务 - 把托管站点的页面链接解析为可直接播放的音频链接

验证输入、抓取页面HTML，然后交给提取模块按优先级匹配音频链接和标题。
服务本身无状态，每次调用对应一次请求/响应。
"""

import asyncio
import logging
from typing import Optional, Tuple
from urllib.parse import urlparse

import aiohttp

from gasmplaylist.core.interfaces import ResolvedAudio
from .errors import (
    AudioNotFoundError,
    ForbiddenHostError,
    InvalidUrlError,
    MissingParameterError,
    UpstreamFetchFailedError
)
from .extractor import extract_audio_url, extract_title


DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; SoundgasmResolver/1.0)"


class ResolverService:
    """
    页面解析服务

    只允许解析指定域名（及其子域名）下的页面。
    """

    def __init__(
        self,
        allowed_domain: str = "soundgasm.net",
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = 15
    ):
        """
        初始化解析服务

        Args:
            allowed_domain: 允许解析的域名后缀
            user_agent: 抓取页面时使用的 User-Agent
            timeout: 抓取页面的总超时（秒）
        """
        self.allowed_domain = allowed_domain.lower()
        self.logger = logging.getLogger("gasmplaylist.resolver.service")

        # HTTP 会话配置
        self.session_timeout = aiohttp.ClientTimeout(total=timeout)
        self.headers = {
            'User-Agent': user_agent,
            'Accept': 'text/html'
        }

        self.logger.debug(f"解析服务初始化完成 - 允许域名: {self.allowed_domain}")

    def is_allowed_host(self, hostname: Optional[str]) -> bool:
        """
        检查主机是否为允许的域名或其子域名（不区分大小写）

        Args:
            hostname: 主机名

        Returns:
            允许时返回True
        """
        if not hostname:
            return False
        hostname = hostname.lower()
        return hostname == self.allowed_domain or hostname.endswith(f".{self.allowed_domain}")

    def validate_page_url(self, page_url: Optional[str]) -> str:
        """
        按顺序验证页面链接：参数存在、URL格式、主机域名

        Args:
            page_url: 查询参数中的页面链接

        Returns:
            验证通过的页面链接

        Raises:
            MissingParameterError: 参数缺失或为空
            InvalidUrlError: 不是合法的绝对URL
            ForbiddenHostError: 主机不在允许的域名下
        """
        if not page_url:
            raise MissingParameterError()

        try:
            parsed = urlparse(page_url)
            hostname = parsed.hostname
            # 端口越界或不是数字时抛出 ValueError
            parsed.port
        except ValueError:
            raise InvalidUrlError()

        if not parsed.scheme or not parsed.netloc:
            raise InvalidUrlError()

        if not self.is_allowed_host(hostname):
            raise ForbiddenHostError(self.allowed_domain)

        return page_url

    async def fetch_page(self, page_url: str) -> Tuple[int, str]:
        """
        抓取页面HTML

        Args:
            page_url: 页面链接

        Returns:
            (HTTP状态码, 页面文本)

        Raises:
            aiohttp.ClientError: 网络错误
            asyncio.TimeoutError: 请求超时
        """
        async with aiohttp.ClientSession(timeout=self.session_timeout, headers=self.headers) as session:
            async with session.get(page_url) as response:
                return response.status, await response.text(errors='replace')

    async def resolve(self, page_url: Optional[str]) -> ResolvedAudio:
        """
        解析页面链接

        Args:
            page_url: 页面链接

        Returns:
            音频链接和标题

        Raises:
            ResolverError: 任何一步失败时抛出对应的子类
        """
        page_url = self.validate_page_url(page_url)
        self.logger.debug(f"开始解析页面: {page_url}")

        try:
            status, html = await self.fetch_page(page_url)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            self.logger.warning(f"抓取页面失败 - {page_url}: {e}")
            raise UpstreamFetchFailedError(None) from e

        if not 200 <= status < 300:
            self.logger.warning(f"抓取页面失败 - {page_url}: 状态码 {status}")
            raise UpstreamFetchFailedError(status)

        title = extract_title(html)
        audio_url = extract_audio_url(html)

        if not audio_url:
            self.logger.warning(f"页面中未找到音频链接: {page_url}")
            raise AudioNotFoundError()

        self.logger.info(f"解析成功: {title or page_url} -> {audio_url}")
        return ResolvedAudio(audio_url=audio_url, title=title)
