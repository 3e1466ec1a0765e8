"""gasmplaylist 命令模块。"""

from .playlist_commands import PlaylistCommands

__all__ = [
    "PlaylistCommands"
]
