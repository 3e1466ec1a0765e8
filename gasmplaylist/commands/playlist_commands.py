"""
播放列表命令实现

处理播放列表相关的Slash命令：
- /add 添加链接
- /play 播放（指定位置或从当前位置继续）
- /next 下一首
- /remove 移除曲目
- /clear 清空队列
- /queue 显示队列
"""

import logging
from typing import List, Optional, Tuple
import discord
from discord import app_commands

from gasmplaylist.playback.playback_engine import PlaybackEngine, format_status
from gasmplaylist.utils.config_manager import ConfigManager


class PlaylistCommands:
    """
    播放列表命令处理器

    命令执行期间产生的状态消息作为交互回复发送；
    播放自然结束等后台事件的状态消息由播放引擎发送到文本频道。
    """

    QUEUE_DISPLAY_LIMIT = 15

    def __init__(self, config: ConfigManager, playback_engine: PlaybackEngine):
        """
        初始化播放列表命令

        Args:
            config: 配置管理器
            playback_engine: 播放引擎
        """
        self.logger = logging.getLogger("gasmplaylist.commands.playlist")
        self.config = config
        self.engine = playback_engine

        self.logger.debug("播放列表命令已初始化")

    def register_commands(self, tree: app_commands.CommandTree) -> None:
        """
        注册播放列表命令到命令树

        Args:
            tree: Discord命令树
        """
        @tree.command(name="add", description="添加一个或多个链接到播放列表")
        @app_commands.describe(urls="页面链接或音频直链，多个链接用空格分隔")
        async def add_command(interaction: discord.Interaction, urls: str):
            await self._run(interaction, "添加", self.handle_add(interaction, urls))

        @tree.command(name="play", description="播放指定位置的曲目，不指定则继续播放")
        @app_commands.describe(position="队列位置（从1开始）")
        async def play_command(interaction: discord.Interaction, position: Optional[int] = None):
            await self._run(interaction, "播放", self.handle_play(interaction, position))

        @tree.command(name="next", description="播放下一首")
        async def next_command(interaction: discord.Interaction):
            await self._run(interaction, "下一首", self.handle_next(interaction))

        @tree.command(name="remove", description="从播放列表移除曲目")
        @app_commands.describe(position="队列位置（从1开始）")
        async def remove_command(interaction: discord.Interaction, position: int):
            await self._run(interaction, "移除", self.handle_remove(interaction, position))

        @tree.command(name="clear", description="清空播放列表并停止播放")
        async def clear_command(interaction: discord.Interaction):
            await self._run(interaction, "清空", self.handle_clear(interaction))

        @tree.command(name="queue", description="显示当前播放列表")
        async def queue_command(interaction: discord.Interaction):
            await self._run(interaction, "队列", self.handle_queue(interaction))

        self.logger.info("播放列表命令已注册")

    async def _run(self, interaction: discord.Interaction, name: str, handler) -> None:
        """执行命令处理器，异常转换为错误回复"""
        try:
            await handler
        except Exception as e:
            self.logger.error(f"{name}命令执行失败: {e}", exc_info=True)
            await self._send_error_response(interaction, f"{name}命令执行失败")

    async def _check_guild(self, interaction: discord.Interaction) -> bool:
        """检查命令是否在服务器中使用，并记录文本频道"""
        if not interaction.guild:
            await self._send_error_response(interaction, "此命令只能在服务器中使用")
            return False

        if interaction.channel:
            self.engine.set_text_channel(interaction.guild.id, interaction.channel.id)
        return True

    async def handle_add(self, interaction: discord.Interaction, urls: str) -> None:
        """
        处理添加命令

        Args:
            interaction: Discord交互对象
            urls: 以空白分隔的链接
        """
        if not await self._check_guild(interaction):
            return

        await interaction.response.defer()
        controller = await self.engine.get_controller(interaction.guild.id)

        # Slash 命令参数不能换行，按空白拆分后每行一个链接
        async with self.engine.collect_status(interaction.guild.id) as messages:
            await controller.add_urls("\n".join(urls.split()))

        await self._send_statuses(interaction, messages)

    async def handle_play(self, interaction: discord.Interaction, position: Optional[int]) -> None:
        """
        处理播放命令

        Args:
            interaction: Discord交互对象
            position: 队列位置（从1开始），为None时继续当前曲目或从头播放
        """
        if not await self._check_guild(interaction):
            return

        await interaction.response.defer()

        success, error = await self.engine.ensure_voice(interaction.user)
        if not success:
            await self._send_statuses(interaction, [(error or "无法连接语音频道", "error")])
            return

        controller = await self.engine.get_controller(interaction.guild.id)
        async with self.engine.collect_status(interaction.guild.id) as messages:
            if position is None:
                played = await controller.play()
            else:
                played = await controller.play_at_index(position - 1)

        if not played:
            messages.append(("队列为空或位置超出范围。", "error"))
        await self._send_statuses(interaction, messages)

    async def handle_next(self, interaction: discord.Interaction) -> None:
        """处理下一首命令"""
        if not await self._check_guild(interaction):
            return

        await interaction.response.defer()
        controller = await self.engine.get_controller(interaction.guild.id)

        async with self.engine.collect_status(interaction.guild.id) as messages:
            await controller.play_next()

        await self._send_statuses(interaction, messages)

    async def handle_remove(self, interaction: discord.Interaction, position: int) -> None:
        """
        处理移除命令

        Args:
            interaction: Discord交互对象
            position: 队列位置（从1开始）
        """
        if not await self._check_guild(interaction):
            return

        await interaction.response.defer()
        controller = await self.engine.get_controller(interaction.guild.id)

        removed = await controller.remove_at_index(position - 1)
        if removed is None:
            await self._send_statuses(interaction, [(f"位置 {position} 超出队列范围。", "error")])
            return

        await self._send_statuses(interaction, [(f"已移除 {removed.display_title(position - 1)}", "success")])

    async def handle_clear(self, interaction: discord.Interaction) -> None:
        """处理清空命令"""
        if not await self._check_guild(interaction):
            return

        await interaction.response.defer()
        controller = await self.engine.get_controller(interaction.guild.id)

        async with self.engine.collect_status(interaction.guild.id) as messages:
            await controller.clear()

        await self._send_statuses(interaction, messages)

    async def handle_queue(self, interaction: discord.Interaction) -> None:
        """处理队列显示命令"""
        if not await self._check_guild(interaction):
            return

        controller = await self.engine.get_controller(interaction.guild.id)
        queue = controller.queue

        embed = discord.Embed(title="🎵 播放列表", color=discord.Color.blue())

        current = controller.now_playing()
        embed.add_field(
            name="🎶 正在播放",
            value=f"**{current.display_title()}**" if current else "没有正在播放的曲目。",
            inline=False
        )

        if not queue:
            embed.description = "队列为空。"
        else:
            lines = []
            for index, track in enumerate(queue[:self.QUEUE_DISPLAY_LIMIT]):
                marker = "▶️ " if index == controller.current_index else ""
                lines.append(f"{marker}**{index + 1}.** {track.display_title(index)}\n{track.page_url}")
            if len(queue) > self.QUEUE_DISPLAY_LIMIT:
                lines.append(f"... 还有 {len(queue) - self.QUEUE_DISPLAY_LIMIT} 个曲目")
            embed.description = "\n".join(lines)[:4096]  # Discord描述限制

        embed.set_footer(text=f"共 {len(queue)} 个曲目")
        await interaction.response.send_message(embed=embed, ephemeral=True)

    async def _send_statuses(self, interaction: discord.Interaction, messages: List[Tuple[str, str]]) -> None:
        """把收集到的状态消息作为交互回复发送"""
        if messages:
            content = "\n".join(format_status(message, tone) for message, tone in messages)
        else:
            content = format_status("完成。", "success")
        await interaction.followup.send(content[:2000])  # Discord消息长度限制

    async def _send_error_response(self, interaction: discord.Interaction, message: str) -> None:
        """
        发送错误响应

        Args:
            interaction: Discord交互对象
            message: 错误消息
        """
        embed = discord.Embed(
            title="❌ 错误",
            description=message,
            color=discord.Color.red()
        )

        try:
            if interaction.response.is_done():
                await interaction.followup.send(embed=embed, ephemeral=True)
            else:
                await interaction.response.send_message(embed=embed, ephemeral=True)
        except Exception as e:
            self.logger.error(f"发送错误响应失败: {e}")
