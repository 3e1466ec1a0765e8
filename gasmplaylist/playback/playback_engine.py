"""
播放引擎 - 为每个 Discord 服务器管理一个队列控制器

协调解析客户端、状态存储和语音播放界面，按需创建并恢复服务器的播放列表。
负责把控制器的状态消息发送到对应的文本频道。
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from functools import partial
from typing import AsyncIterator, Dict, List, Optional, Tuple
import discord
from discord.ext import commands

from gasmplaylist.core.interfaces import IResolverClient
from gasmplaylist.playlist import HttpResolverClient, JsonStateStore, QueueController
from gasmplaylist.utils.config_manager import ConfigManager
from .voice_surface import DiscordVoiceSurface


TONE_ICONS = {
    "info": "ℹ️",
    "success": "✅",
    "error": "❌"
}


def format_status(message: str, tone: str) -> str:
    """格式化状态消息"""
    return f"{TONE_ICONS.get(tone, TONE_ICONS['info'])} {message}"


class PlaybackEngine:
    """
    播放引擎实现

    服务器特定的控制器在第一次使用时创建，并立即从状态存储恢复。
    """

    def __init__(
        self,
        bot: commands.Bot,
        config: ConfigManager,
        resolver_client: Optional[IResolverClient] = None
    ):
        """
        初始化播放引擎

        Args:
            bot: Discord机器人实例
            config: 配置管理器
            resolver_client: 解析客户端，为 None 时使用配置的HTTP解析服务
        """
        self.bot = bot
        self.config = config
        self.logger = logging.getLogger("gasmplaylist.playback.engine")

        self.resolver_client = resolver_client or HttpResolverClient(
            config.get_resolver_base_url(),
            config.get_resolver_client_timeout()
        )

        # 服务器特定的控制器和播放界面
        self._controllers: Dict[int, QueueController] = {}
        self._surfaces: Dict[int, DiscordVoiceSurface] = {}
        self._create_lock = asyncio.Lock()

        # 文本频道跟踪（用于发送状态消息）
        self._text_channels: Dict[int, int] = {}  # guild_id -> text_channel_id

        # 命令执行期间收集的状态消息
        self._collectors: Dict[int, List[Tuple[str, str]]] = {}

        self.logger.info("🎵 播放引擎初始化完成")

    def get_surface(self, guild_id: int) -> DiscordVoiceSurface:
        """
        获取或创建服务器的语音播放界面

        Args:
            guild_id: Discord服务器ID

        Returns:
            语音播放界面
        """
        if guild_id not in self._surfaces:
            self._surfaces[guild_id] = DiscordVoiceSurface(self.bot, guild_id)
        return self._surfaces[guild_id]

    async def get_controller(self, guild_id: int) -> QueueController:
        """
        获取或创建服务器的队列控制器

        Args:
            guild_id: Discord服务器ID

        Returns:
            已恢复状态的队列控制器
        """
        async with self._create_lock:
            if guild_id not in self._controllers:
                state_store = JsonStateStore(
                    self.config.get_playlist_data_dir(),
                    f"{self.config.get_playlist_storage_key()}_{guild_id}"
                )
                controller = QueueController(
                    resolver=self.resolver_client,
                    playback=self.get_surface(guild_id),
                    state_store=state_store,
                    name=str(guild_id)
                )
                controller.add_status_handler(partial(self._handle_status, guild_id))
                await controller.load()

                self._controllers[guild_id] = controller
                self.logger.debug(f"为服务器 {guild_id} 创建队列控制器")

            return self._controllers[guild_id]

    def set_text_channel(self, guild_id: int, channel_id: int) -> None:
        """
        设置服务器的文本频道ID（用于发送状态消息）

        Args:
            guild_id: Discord服务器ID
            channel_id: 文本频道ID
        """
        self._text_channels[guild_id] = channel_id

    def get_text_channel_id(self, guild_id: int) -> Optional[int]:
        """获取服务器的文本频道ID"""
        return self._text_channels.get(guild_id)

    @asynccontextmanager
    async def collect_status(self, guild_id: int) -> AsyncIterator[List[Tuple[str, str]]]:
        """
        在命令执行期间收集状态消息，而不是发送到文本频道

        Args:
            guild_id: Discord服务器ID

        Yields:
            (消息, 语气) 列表
        """
        messages: List[Tuple[str, str]] = []
        self._collectors[guild_id] = messages
        try:
            yield messages
        finally:
            if self._collectors.get(guild_id) is messages:
                del self._collectors[guild_id]

    async def _handle_status(self, guild_id: int, message: str, tone: str) -> None:
        """控制器状态消息处理器"""
        collector = self._collectors.get(guild_id)
        if collector is not None:
            collector.append((message, tone))
            return

        channel_id = self.get_text_channel_id(guild_id)
        if not channel_id:
            self.logger.debug(f"服务器 {guild_id} 没有设置文本频道，忽略状态消息: {message}")
            return

        channel = self.bot.get_channel(channel_id)
        if channel is None:
            self.logger.warning(f"找不到文本频道 {channel_id}")
            return

        await channel.send(format_status(message, tone))

    async def ensure_voice(self, member: discord.Member) -> Tuple[bool, Optional[str]]:
        """
        确保机器人已连接语音频道

        用户在语音频道中时连接（或移动）到该频道；否则沿用已有连接。

        Args:
            member: 发起命令的用户

        Returns:
            (成功标志, 错误消息)
        """
        surface = self.get_surface(member.guild.id)
        if member.voice and member.voice.channel:
            return await surface.connect(member.voice.channel)
        if surface.is_connected():
            return True, None
        return False, "请先加入语音频道。"

    async def cleanup_all(self) -> None:
        """停止所有播放并断开语音连接"""
        for guild_id, surface in self._surfaces.items():
            try:
                await surface.disconnect()
            except Exception as e:
                self.logger.error(f"清理服务器 {guild_id} 的语音连接失败: {e}")
