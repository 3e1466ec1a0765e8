"""
语音播放界面 - 用 Discord 语音连接实现播放界面接口

把队列控制器需要的四种能力（设置音源、开始、停止、播放结束通知）
映射到 Discord 语音客户端和 FFmpeg 音频源。
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional, Tuple
import discord
from discord.ext import commands

from gasmplaylist.core.interfaces import IPlaybackSurface, PlaybackStartFailed


class DiscordVoiceSurface(IPlaybackSurface):
    """
    Discord 语音播放界面

    每个服务器一个实例。语音客户端的 after 回调运行在播放线程中，
    通过 run_coroutine_threadsafe 转回事件循环。
    每次开始或停止播放都会递增播放代数，旧代数的 after 回调会被忽略，
    因此主动停止或切换音源不会被当作自然结束。
    """

    FFMPEG_OPTIONS = {
        'before_options': '-reconnect 1 -reconnect_streamed 1 -reconnect_delay_max 5',
        'options': '-vn'
    }

    def __init__(self, bot: commands.Bot, guild_id: int):
        """
        初始化语音播放界面

        Args:
            bot: Discord机器人实例
            guild_id: Discord服务器ID
        """
        self.bot = bot
        self.guild_id = guild_id
        self.logger = logging.getLogger(f"gasmplaylist.playback.surface.{guild_id}")

        self._source_url: Optional[str] = None
        self._ended_callback: Optional[Callable[[], Awaitable[None]]] = None
        self._generation = 0

    @property
    def source_url(self) -> Optional[str]:
        """当前音源"""
        return self._source_url

    def get_voice_client(self) -> Optional[discord.VoiceClient]:
        """
        获取服务器当前的语音客户端

        Returns:
            已连接的语音客户端，未连接时返回None
        """
        guild = self.bot.get_guild(self.guild_id)
        if guild and guild.voice_client and guild.voice_client.is_connected():
            return guild.voice_client
        return None

    def is_connected(self) -> bool:
        """检查是否已连接语音频道"""
        return self.get_voice_client() is not None

    async def connect(self, channel: discord.VoiceChannel) -> Tuple[bool, Optional[str]]:
        """
        连接到语音频道

        Args:
            channel: 要连接的语音频道

        Returns:
            (成功标志, 错误消息)
        """
        try:
            voice_client = self.get_voice_client()
            if voice_client:
                if voice_client.channel != channel:
                    await voice_client.move_to(channel)
                    self.logger.info(f"移动到频道: {channel.name}")
                return True, None

            await channel.connect()
            self.logger.info(f"成功连接到语音频道: {channel.name} (服务器: {channel.guild.name})")
            return True, None

        except discord.ClientException as e:
            error_msg = f"Discord客户端错误: {e}"
            self.logger.error(error_msg)
            return False, error_msg

        except asyncio.TimeoutError:
            error_msg = "连接语音频道超时"
            self.logger.error(error_msg)
            return False, error_msg

    async def disconnect(self) -> None:
        """停止播放并断开语音连接"""
        self.stop()
        voice_client = self.get_voice_client()
        if voice_client:
            await voice_client.disconnect()
            self.logger.info("已断开语音连接")

    def set_source(self, url: str) -> None:
        """设置音源，正在播放的旧音源会被停止"""
        self._halt()
        self._source_url = url
        self.logger.debug(f"设置音源: {url}")

    async def start(self) -> None:
        """
        开始播放当前音源，暂停中则恢复

        Raises:
            PlaybackStartFailed: 没有音源、未连接语音频道或 FFmpeg 启动失败
        """
        if not self._source_url:
            raise PlaybackStartFailed("没有可播放的音源")

        voice_client = self.get_voice_client()
        if not voice_client:
            raise PlaybackStartFailed("尚未连接语音频道")

        if voice_client.is_paused():
            voice_client.resume()
            self.logger.debug("恢复播放")
            return
        if voice_client.is_playing():
            return

        self._generation += 1
        generation = self._generation
        loop = asyncio.get_running_loop()

        try:
            audio_source = discord.FFmpegPCMAudio(self._source_url, **self.FFMPEG_OPTIONS)
            voice_client.play(
                audio_source,
                after=lambda error: self._after_playing(error, generation, loop)
            )
        except discord.ClientException as e:
            raise PlaybackStartFailed(str(e)) from e

        self.logger.debug(f"开始播放: {self._source_url}")

    def stop(self) -> None:
        """停止播放并清除音源"""
        self._halt()
        self._source_url = None

    def set_ended_callback(self, callback: Optional[Callable[[], Awaitable[None]]]) -> None:
        self._ended_callback = callback

    def _halt(self) -> None:
        """停止当前音频，使尚未触发的 after 回调失效"""
        self._generation += 1
        voice_client = self.get_voice_client()
        if voice_client and (voice_client.is_playing() or voice_client.is_paused()):
            voice_client.stop()

    def _after_playing(self, error: Optional[Exception], generation: int, loop: asyncio.AbstractEventLoop) -> None:
        """播放线程中的 after 回调"""
        # 播放出错不算自然结束，不推进队列
        if error is not None:
            self.logger.error(f"播放出错: {error}")
            return

        if generation != self._generation or self._ended_callback is None:
            return

        asyncio.run_coroutine_threadsafe(self._dispatch_ended(), loop)

    async def _dispatch_ended(self) -> None:
        """在事件循环中通知播放结束"""
        try:
            await self._ended_callback()
        except Exception as e:
            self.logger.error(f"处理播放结束事件时出错: {e}", exc_info=True)
