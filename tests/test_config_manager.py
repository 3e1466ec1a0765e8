"""
配置管理器测试 - 验证 YAML 配置的读取、默认值和令牌校验
"""

import os
import shutil
import tempfile
import unittest

from gasmplaylist.utils.config_manager import ConfigManager


class TestConfigManager(unittest.TestCase):
    """配置管理器测试"""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.config_path = os.path.join(self.temp_dir, "config.yaml")

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def _write(self, content: str) -> ConfigManager:
        with open(self.config_path, "w", encoding="utf-8") as f:
            f.write(content)
        return ConfigManager(self.config_path)

    def test_missing_file_raises(self):
        with self.assertRaises(FileNotFoundError):
            ConfigManager(self.config_path)

    def test_defaults_for_empty_file(self):
        config = self._write("")

        self.assertEqual(config.get_resolver_port(), 8787)
        self.assertEqual(config.get_resolver_allowed_domain(), "soundgasm.net")
        self.assertEqual(config.get_resolver_timeout(), 15.0)
        self.assertEqual(config.get_resolver_base_url(), "http://127.0.0.1:8787")
        self.assertEqual(config.get_playlist_storage_key(), "soundgasmPlaylistState")
        self.assertEqual(config.get_playlist_data_dir(), "data/playlists")
        self.assertEqual(config.get_log_level(), "INFO")
        self.assertIsNone(config.get_log_file())

    def test_values_from_file(self):
        config = self._write(
            "resolver:\n"
            "  port: '9000'\n"
            "  allowed_domain: ' Example.ORG '\n"
            "playlist:\n"
            "  resolver_base_url: 'http://resolver:9000/'\n"
            "  storage_key: customKey\n"
            "logging:\n"
            "  level: DEBUG\n"
        )

        self.assertEqual(config.get_resolver_port(), 9000)
        self.assertEqual(config.get_resolver_allowed_domain(), "example.org")
        self.assertEqual(config.get_resolver_base_url(), "http://resolver:9000")
        self.assertEqual(config.get_playlist_storage_key(), "customKey")
        self.assertEqual(config.get_log_level(), "DEBUG")

    def test_example_config_sections(self):
        """示例配置包含所有配置段"""
        example_path = os.path.join(
            os.path.dirname(os.path.dirname(os.path.abspath(__file__))),
            "config", "config.yaml.example"
        )
        config = ConfigManager(example_path)

        for section in ("discord", "resolver", "playlist", "logging"):
            self.assertIsInstance(config.get(section), dict, section)
        self.assertEqual(config.get_resolver_allowed_domain(), "soundgasm.net")
        self.assertEqual(config.get_playlist_storage_key(), "soundgasmPlaylistState")
        with self.assertRaises(ValueError):
            config.get_discord_token()

    def test_dot_notation_get(self):
        config = self._write("a:\n  b:\n    c: 1\n")

        self.assertEqual(config.get("a.b.c"), 1)
        self.assertEqual(config.get("a.x.c", "fallback"), "fallback")
        self.assertIsNone(config.get("a.b.c.d"))

    def test_placeholder_token_is_rejected(self):
        config = self._write("discord:\n  token: YOUR_DISCORD_BOT_TOKEN_HERE\n")

        with self.assertRaises(ValueError):
            config.get_discord_token()

    def test_token(self):
        config = self._write("discord:\n  token: abc123\n")

        self.assertEqual(config.get_discord_token(), "abc123")


if __name__ == '__main__':
    unittest.main()
