"""
核心接口定义 - 定义播放列表各模块间的抽象接口

队列控制器只依赖这里声明的端口：解析客户端、状态存储和播放界面。
具体实现（HTTP 客户端、JSON 文件、Discord 语音）在各自模块中提供。
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional


@dataclass
class ResolvedAudio:
    """解析结果数据类"""
    audio_url: str
    title: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """转换为解析服务的响应格式"""
        return {
            "audioUrl": self.audio_url,
            "title": self.title
        }


class ResolutionError(Exception):
    """
    解析失败异常

    单个页面链接无法解析时由解析客户端抛出。
    批量添加时只影响当前链接，不会中断其余链接的处理。
    """
    def __init__(self, message: str, page_url: str, status: Optional[int] = None):
        super().__init__(message)
        self.page_url = page_url
        self.status = status  # 解析服务返回的HTTP状态码（网络错误时为None）


class PlaybackStartFailed(Exception):
    """
    播放启动失败异常

    播放界面无法开始播放时抛出（例如尚未连接语音频道）。
    队列控制器将其转换为状态消息，不会继续向上抛出。
    """


class IResolverClient(ABC):
    """解析客户端接口 - 把页面链接转换为可直接播放的音频链接"""

    @abstractmethod
    async def resolve(self, page_url: str) -> ResolvedAudio:
        """解析页面链接，失败时抛出 ResolutionError"""
        pass


class IStateStore(ABC):
    """状态存储接口 - 保存和读取队列状态记录"""

    @abstractmethod
    async def load(self) -> Optional[Dict[str, Any]]:
        """读取状态记录，不存在或损坏时返回None"""
        pass

    @abstractmethod
    async def save(self, state: Dict[str, Any]) -> None:
        """写入状态记录"""
        pass


class IPlaybackSurface(ABC):
    """播放界面接口 - 设置音源、开始、停止以及播放结束通知"""

    @abstractmethod
    def set_source(self, url: str) -> None:
        """设置当前音源"""
        pass

    @abstractmethod
    async def start(self) -> None:
        """开始（或恢复）播放当前音源，失败时抛出 PlaybackStartFailed"""
        pass

    @abstractmethod
    def stop(self) -> None:
        """停止播放并清除音源"""
        pass

    @abstractmethod
    def set_ended_callback(self, callback: Optional[Callable[[], Awaitable[None]]]) -> None:
        """设置播放自然结束时调用的协程函数"""
        pass
