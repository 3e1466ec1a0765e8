"""
页面提取 - 从页面HTML中尽力提取音频链接和标题

按优先级依次尝试多种模式，第一个命中的模式胜出。
页面标记变化时，只要任意一种模式仍然命中即可继续工作。
"""

import re
from typing import List, Optional, Pattern

# 标题：<title> 元素中的文本
TITLE_PATTERN = re.compile(r'<title>\s*([^<]+)\s*</title>', re.IGNORECASE)

# 音频链接模式（按优先级排列）
AUDIO_URL_PATTERNS: List[Pattern[str]] = [
    # 页面中任意位置的 mp3/m4a/ogg 直链
    re.compile(
        r'https?://[^"\' <>\n\r\t]+\.(?:mp3|m4a|ogg)(?:\?[^"\' <>\n\r\t]*)?',
        re.IGNORECASE
    ),
    # JSON 风格: "url":"https://...mp3"
    re.compile(r'"url"\s*:\s*"([^"]+\.(?:mp3|m4a|ogg)[^"]*)"', re.IGNORECASE),
    # <audio src="...">
    re.compile(r'<audio[^>]+src="([^"]+)"', re.IGNORECASE),
]


def unescape_candidate(candidate: str) -> str:
    """
    还原脚本中转义过的链接

    Args:
        candidate: 匹配到的原始字符串

    Returns:
        将 \\u0026 还原为 &、\\/ 还原为 / 后的链接
    """
    return candidate.replace('\\u0026', '&').replace('\\/', '/')


def extract_title(html: str) -> Optional[str]:
    """
    提取页面标题

    Args:
        html: 页面HTML

    Returns:
        去除首尾空白的标题，未找到时返回None
    """
    match = TITLE_PATTERN.search(html)
    if not match:
        return None
    return match.group(1).strip()


def extract_audio_url(html: str) -> Optional[str]:
    """
    提取音频链接

    Args:
        html: 页面HTML

    Returns:
        还原转义后的音频链接，所有模式都未命中时返回None
    """
    for pattern in AUDIO_URL_PATTERNS:
        match = pattern.search(html)
        if match:
            candidate = match.group(1) if match.groups() else match.group(0)
            return unescape_candidate(candidate)
    return None
