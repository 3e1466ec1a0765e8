"""
曲目数据模型 - 定义队列中曲目条目的数据结构

页面链接是曲目的身份键，队列中同一页面链接只会出现一次。
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, Optional


# 以音频扩展名结尾（可带查询字符串）的链接可以直接播放
DIRECT_AUDIO_PATTERN = re.compile(r'\.(mp3|m4a|ogg)(\?.*)?$', re.IGNORECASE)


def is_direct_audio(url: str) -> bool:
    """
    检查链接是否为音频直链

    Args:
        url: 要检查的链接

    Returns:
        以 .mp3/.m4a/.ogg 结尾（可带查询字符串）时返回True
    """
    return DIRECT_AUDIO_PATTERN.search(url) is not None


@dataclass
class TrackEntry:
    """
    曲目条目数据类

    Attributes:
        page_url: 用户提交的原始链接（去重键）
        audio_url: 可直接播放的音频链接
        title: 可选的显示标题
    """
    page_url: str
    audio_url: str
    title: Optional[str] = None

    @classmethod
    def from_direct_link(cls, url: str) -> 'TrackEntry':
        """从音频直链创建条目，标题取链接最后一段"""
        return cls(page_url=url, audio_url=url, title=url.split('/')[-1])

    def display_title(self, index: Optional[int] = None) -> str:
        """
        获取显示标题

        Args:
            index: 队列中的位置（从0开始），提供时无标题条目显示为 "Track N"

        Returns:
            显示标题
        """
        if self.title:
            return self.title
        if index is not None:
            return f"Track {index + 1}"
        return self.page_url

    def to_dict(self) -> Dict[str, Any]:
        """
        转换为字典格式（用于持久化）

        Returns:
            曲目信息字典
        """
        return {
            'pageUrl': self.page_url,
            'audioUrl': self.audio_url,
            'title': self.title
        }

    @classmethod
    def from_dict(cls, data: Any) -> Optional['TrackEntry']:
        """
        从字典创建曲目条目（用于持久化恢复）

        Args:
            data: 曲目信息字典

        Returns:
            曲目条目，数据不完整时返回None
        """
        if not isinstance(data, dict):
            return None

        page_url = data.get('pageUrl')
        audio_url = data.get('audioUrl')
        title = data.get('title')

        if not isinstance(page_url, str) or not page_url:
            return None
        if not isinstance(audio_url, str) or not audio_url:
            return None
        if title is not None and not isinstance(title, str):
            title = None

        return cls(page_url=page_url, audio_url=audio_url, title=title)
