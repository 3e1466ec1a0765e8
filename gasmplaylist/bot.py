"""gasmplaylist Discord 机器人主实现"""
import asyncio
import logging
from typing import Optional
import discord
from discord.ext import commands

from gasmplaylist.commands import PlaylistCommands
from gasmplaylist.playback import PlaybackEngine
from gasmplaylist.utils.config_manager import ConfigManager


class PlaylistBot:
    """
    播放列表机器人主实现类。

    - 粘贴 Soundgasm 页面链接或音频直链组成播放列表
    - 在语音频道中按顺序播放，播放结束自动下一首
    - 每个服务器的播放列表独立保存，重启后恢复
    """

    def __init__(self, config: ConfigManager):
        """
        Initialize the Discord bot.

        Args:
            config: Configuration manager
        """
        self.logger = logging.getLogger("gasmplaylist.bot")
        self.config = config

        # Set up Discord bot
        intents = discord.Intents.default()

        self.bot = commands.Bot(
            command_prefix=self.config.get('discord.command_prefix', '!'),
            intents=intents,
            help_command=None
        )

        self.playback_engine = PlaybackEngine(self.bot, config)
        self.playlist_commands = PlaylistCommands(config, self.playback_engine)
        self.playlist_commands.register_commands(self.bot.tree)

        self._commands_synced = False
        self.bot.add_listener(self._on_ready, 'on_ready')

        self.logger.info("🎵 播放列表机器人初始化成功")

    async def _on_ready(self) -> None:
        """机器人就绪时的初始化任务"""
        try:
            self.logger.info(f"🤖 机器人已就绪: {self.bot.user}")

            # on_ready 可能多次触发，只同步一次
            if not self._commands_synced:
                synced = await self.bot.tree.sync()
                self._commands_synced = True
                self.logger.info(f"✅ 已全局同步 {len(synced)} 个命令")

        except Exception as e:
            self.logger.error(f"机器人就绪初始化失败: {e}", exc_info=True)

    async def start(self, token: str) -> None:
        """
        Start the Discord bot and release voice connections on exit.

        Args:
            token: Discord bot token
        """
        try:
            self.logger.info("🚀 启动播放列表机器人...")
            await self.bot.start(token)
        finally:
            await self.close()

    async def close(self) -> None:
        """关闭 Discord 机器人并清理资源。"""
        try:
            self.logger.info("🛑 正在关闭播放列表机器人...")
            await self.playback_engine.cleanup_all()
            await self.bot.close()
            self.logger.info("✅ 播放列表机器人关闭成功")
        except Exception as e:
            self.logger.error(f"关闭过程中发生错误: {e}", exc_info=True)

    def run(self, token: str) -> None:
        """
        运行 Discord 机器人（阻塞式）。

        Args:
            token: Discord 机器人令牌
        """
        try:
            asyncio.run(self.start(token))
        except KeyboardInterrupt:
            self.logger.info("用户停止了机器人")
        except Exception as e:
            self.logger.error(f"机器人崩溃: {e}", exc_info=True)
            raise

    @property
    def user(self) -> Optional[discord.ClientUser]:
        """获取机器人用户。"""
        return self.bot.user
