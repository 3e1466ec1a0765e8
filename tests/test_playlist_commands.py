"""
播放列表命令测试

使用真实的播放引擎和队列控制器（状态保存到临时目录），
验证各个 Slash 命令的回复内容。
"""

from unittest.mock import AsyncMock, Mock

import discord
import pytest

from gasmplaylist.commands.playlist_commands import PlaylistCommands


@pytest.fixture
def command(mock_config, playback_engine):
    return PlaylistCommands(mock_config, playback_engine)


def _followup_text(interaction) -> str:
    return interaction.followup.send.call_args.args[0]


class TestPlaylistCommands:
    """测试播放列表命令"""

    @pytest.mark.asyncio
    async def test_command_outside_guild(self, command, mock_interaction):
        mock_interaction.guild = None

        await command.handle_add(mock_interaction, "https://soundgasm.net/u/a/b")

        mock_interaction.response.send_message.assert_called_once()
        embed = mock_interaction.response.send_message.call_args.kwargs["embed"]
        assert embed.title == "❌ 错误"

    @pytest.mark.asyncio
    async def test_add_reports_statuses(self, command, mock_interaction, playback_engine):
        await command.handle_add(
            mock_interaction,
            "https://soundgasm.net/u/a/one https://cdn.example/two.mp3"
        )

        mock_interaction.response.defer.assert_awaited_once()
        text = _followup_text(mock_interaction)
        assert "✅ 已添加 2 个曲目到队列。" in text

        controller = await playback_engine.get_controller(12345)
        assert [t.title for t in controller.queue] == ["one", "two.mp3"]
        assert playback_engine.get_text_channel_id(12345) == 11111

    @pytest.mark.asyncio
    async def test_add_duplicates(self, command, mock_interaction):
        await command.handle_add(mock_interaction, "https://cdn.example/two.mp3")
        await command.handle_add(mock_interaction, "https://cdn.example/two.mp3")

        assert _followup_text(mock_interaction) == "ℹ️ 所有链接都已在队列中。"

    @pytest.mark.asyncio
    async def test_play_without_voice(self, command, mock_interaction):
        await command.handle_play(mock_interaction, None)

        assert _followup_text(mock_interaction).startswith("❌")

    @pytest.mark.asyncio
    async def test_play_out_of_range(self, command, mock_interaction, playback_engine):
        playback_engine.ensure_voice = AsyncMock(return_value=(True, None))

        await command.handle_play(mock_interaction, 3)

        assert _followup_text(mock_interaction) == "❌ 队列为空或位置超出范围。"

    @pytest.mark.asyncio
    async def test_play_position_sets_current(self, command, mock_interaction, playback_engine):
        playback_engine.ensure_voice = AsyncMock(return_value=(True, None))
        controller = await playback_engine.get_controller(12345)
        await controller.add_urls("https://cdn.example/a.mp3\nhttps://cdn.example/b.mp3")

        await command.handle_play(mock_interaction, 2)

        assert controller.current_index == 1
        # 模拟机器人没有语音客户端，开始播放失败时报告错误
        assert "无法开始播放" in _followup_text(mock_interaction)

    @pytest.mark.asyncio
    async def test_remove(self, command, mock_interaction, playback_engine):
        controller = await playback_engine.get_controller(12345)
        await controller.add_urls("https://cdn.example/a.mp3\nhttps://cdn.example/b.mp3")

        await command.handle_remove(mock_interaction, 1)

        assert _followup_text(mock_interaction) == "✅ 已移除 a.mp3"
        assert [t.title for t in controller.queue] == ["b.mp3"]

    @pytest.mark.asyncio
    async def test_remove_out_of_range(self, command, mock_interaction):
        await command.handle_remove(mock_interaction, 5)

        assert _followup_text(mock_interaction) == "❌ 位置 5 超出队列范围。"

    @pytest.mark.asyncio
    async def test_clear(self, command, mock_interaction, playback_engine):
        controller = await playback_engine.get_controller(12345)
        await controller.add_urls("https://cdn.example/a.mp3")

        await command.handle_clear(mock_interaction)

        assert _followup_text(mock_interaction) == "ℹ️ 队列已清空。"
        assert controller.queue == []

    @pytest.mark.asyncio
    async def test_next_at_end(self, command, mock_interaction, playback_engine):
        controller = await playback_engine.get_controller(12345)
        await controller.add_urls("https://cdn.example/a.mp3")
        await controller.play_at_index(0)

        await command.handle_next(mock_interaction)

        assert _followup_text(mock_interaction) == "ℹ️ 已到达队列末尾。"
        assert controller.is_idle()

    @pytest.mark.asyncio
    async def test_queue_embed_marks_current(self, command, mock_interaction, playback_engine):
        controller = await playback_engine.get_controller(12345)
        await controller.add_urls("https://cdn.example/a.mp3\nhttps://cdn.example/b.mp3")
        await controller.play_at_index(1)

        await command.handle_queue(mock_interaction)

        kwargs = mock_interaction.response.send_message.call_args.kwargs
        embed = kwargs["embed"]
        assert kwargs["ephemeral"] is True
        assert "▶️ **2.** b.mp3" in embed.description
        assert embed.footer.text == "共 2 个曲目"

    @pytest.mark.asyncio
    async def test_handler_error_becomes_error_response(self, command, mock_interaction):
        failing = AsyncMock(side_effect=RuntimeError("boom"))

        await command._run(mock_interaction, "测试", failing())

        embed = mock_interaction.response.send_message.call_args.kwargs["embed"]
        assert embed.description == "测试命令执行失败"

    def test_register_commands(self, command):
        tree = Mock(spec=discord.app_commands.CommandTree)
        registered = []

        def fake_command(**kwargs):
            registered.append(kwargs["name"])
            return lambda func: func

        tree.command.side_effect = fake_command

        command.register_commands(tree)

        assert registered == ["add", "play", "next", "remove", "clear", "queue"]
