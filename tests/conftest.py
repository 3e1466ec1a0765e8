"""
测试配置

提供命令测试所需的fixtures
"""

from unittest.mock import AsyncMock, MagicMock, Mock

import discord
import pytest

from gasmplaylist.core.interfaces import IResolverClient, ResolvedAudio
from gasmplaylist.playback.playback_engine import PlaybackEngine
from gasmplaylist.utils.config_manager import ConfigManager


class StaticResolver(IResolverClient):
    """把页面链接解析为同名音频链接"""

    async def resolve(self, page_url: str) -> ResolvedAudio:
        return ResolvedAudio(audio_url=f"{page_url}.m4a", title=page_url.rsplit("/", 1)[-1])


@pytest.fixture
def mock_config(tmp_path):
    """创建模拟配置管理器，状态保存到临时目录"""
    config = Mock(spec=ConfigManager)
    config.get_playlist_data_dir.return_value = str(tmp_path)
    config.get_playlist_storage_key.return_value = "soundgasmPlaylistState"
    return config


@pytest.fixture
def mock_bot():
    """创建未连接任何语音频道的模拟机器人"""
    bot = MagicMock()
    bot.get_guild.return_value = None
    return bot


@pytest.fixture
def playback_engine(mock_bot, mock_config):
    """使用静态解析客户端的播放引擎"""
    return PlaybackEngine(mock_bot, mock_config, resolver_client=StaticResolver())


@pytest.fixture
def mock_interaction():
    """创建模拟Discord交互对象"""
    interaction = Mock(spec=discord.Interaction)
    interaction.guild = Mock()
    interaction.guild.id = 12345
    interaction.guild.name = "Test Guild"
    interaction.user = Mock()
    interaction.user.id = 67890
    interaction.user.guild.id = 12345
    interaction.user.voice = None
    interaction.channel = Mock()
    interaction.channel.id = 11111
    interaction.response = Mock()
    interaction.response.is_done = Mock(return_value=False)
    interaction.response.defer = AsyncMock()
    interaction.response.send_message = AsyncMock()
    interaction.followup = Mock()
    interaction.followup.send = AsyncMock()
    return interaction
