"""
播放列表模块 - 处理播放队列的管理和持久化

该模块负责队列的所有操作，包括添加、播放、推进、移除、清空，以及队列状态的持久化。
"""

from .queue_controller import QueueController, IDLE_INDEX
from .persistence_manager import JsonStateStore
from .resolver_client import HttpResolverClient
from .track import TrackEntry, is_direct_audio

__all__ = [
    "QueueController",
    "IDLE_INDEX",
    "JsonStateStore",
    "HttpResolverClient",
    "TrackEntry",
    "is_direct_audio"
]
