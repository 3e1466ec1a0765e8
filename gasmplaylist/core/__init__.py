"""核心模块 - 接口与共享数据类型"""

from .interfaces import (
    IPlaybackSurface,
    IResolverClient,
    IStateStore,
    PlaybackStartFailed,
    ResolutionError,
    ResolvedAudio
)

__all__ = [
    "IPlaybackSurface",
    "IResolverClient",
    "IStateStore",
    "PlaybackStartFailed",
    "ResolutionError",
    "ResolvedAudio"
]
