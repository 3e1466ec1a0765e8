"""
播放模块 - Discord 语音播放界面与服务器播放引擎
"""

from .voice_surface import DiscordVoiceSurface
from .playback_engine import PlaybackEngine, format_status

__all__ = [
    "DiscordVoiceSurface",
    "PlaybackEngine",
    "format_status"
]
