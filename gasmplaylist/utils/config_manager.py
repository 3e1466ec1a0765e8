"""
Configuration manager for gasmplaylist.

Sections of config/config.yaml:
- discord: bot token and command prefix (bot mode only)
- resolver: listen address, allowed domain, User-Agent and fetch timeout of the /resolve service
- playlist: resolver base URL and timeout used by the bot, state directory and storage key
- logging: level, rotating log file, size and backup count
"""
import logging
import os
from typing import Any, Dict, Optional
import yaml

class ConfigManager:
    """
    Configuration manager for gasmplaylist.

    Handles loading and accessing configuration values from the config file.
    """

    def __init__(self, config_path: str = "config/config.yaml"):
        """
        Initialize the ConfigManager.

        Args:
            config_path: Path to the configuration file

        Raises:
            FileNotFoundError: If the configuration file does not exist
            yaml.YAMLError: If the configuration file is not valid YAML
        """
        self.logger = logging.getLogger("gasmplaylist.config")
        self.config_path = config_path
        self.config: Dict[str, Any] = {}

        self._load_config()

    def _load_config(self) -> None:
        """
        Load the configuration from the config file.

        Raises:
            FileNotFoundError: If the configuration file does not exist
            yaml.YAMLError: If the configuration file is not valid YAML
        """
        if not os.path.exists(self.config_path):
            example_path = f"{self.config_path}.example"
            if os.path.exists(example_path):
                self.logger.error(
                    f"Configuration file {self.config_path} not found. "
                    f"Please copy {example_path} to {self.config_path} and update it."
                )
            else:
                self.logger.error(f"Configuration file {self.config_path} not found.")
            raise FileNotFoundError(f"Configuration file {self.config_path} not found")

        try:
            with open(self.config_path, 'r', encoding='utf-8') as config_file:
                # 空文件时 safe_load 返回 None
                self.config = yaml.safe_load(config_file) or {}
                self.logger.debug(f"Loaded configuration from {self.config_path}")
        except yaml.YAMLError as e:
            self.logger.error(f"Error parsing configuration file: {e}")
            raise

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value.

        Args:
            key: The configuration key (dot notation for nested keys)
            default: Default value to return if the key is not found

        Returns:
            The configuration value or the default value if not found
        """
        keys = key.split('.')
        value = self.config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                self.logger.debug(f"Configuration key '{key}' not found, using default: {default}")
                return default

        return value

    def get_discord_token(self) -> str:
        """
        Get the Discord bot token.

        Returns:
            The Discord bot token

        Raises:
            ValueError: If the Discord bot token is not set
        """
        token = self.get('discord.token')
        if not token or token == "YOUR_DISCORD_BOT_TOKEN_HERE":
            self.logger.error("Discord bot token not set in configuration")
            raise ValueError("Discord bot token not set in configuration")
        return token

    def get_log_level(self) -> str:
        """
        Get the logging level.

        Returns:
            The logging level
        """
        return self.get('logging.level', 'INFO')

    def get_log_file(self) -> Optional[str]:
        """
        Get the log file path.

        Returns:
            The log file path or None if not set
        """
        return self.get('logging.file', None)

    def get_log_max_size(self) -> int:
        """
        Get the maximum log file size.

        Returns:
            The maximum log file size in bytes
        """
        return self.get('logging.max_size', 10485760)  # 10 MB

    def get_log_backup_count(self) -> int:
        """
        Get the number of backup log files to keep.

        Returns:
            The number of backup log files
        """
        return self.get('logging.backup_count', 5)

    # Resolver Service Configuration Methods
    def get_resolver_host(self) -> str:
        """
        获取解析服务监听地址

        Returns:
            监听地址
        """
        return self.get('resolver.host', '0.0.0.0')

    def get_resolver_port(self) -> int:
        """
        获取解析服务监听端口

        Returns:
            监听端口
        """
        return int(self.get('resolver.port', 8787))

    def get_resolver_allowed_domain(self) -> str:
        """
        获取允许解析的域名后缀

        Returns:
            域名后缀（例如 soundgasm.net）
        """
        domain = self.get('resolver.allowed_domain', 'soundgasm.net')
        return domain.strip().lower() if domain else 'soundgasm.net'

    def get_resolver_user_agent(self) -> str:
        """
        获取抓取页面时使用的 User-Agent

        Returns:
            User-Agent 字符串
        """
        return self.get('resolver.user_agent', 'Mozilla/5.0 (compatible; SoundgasmResolver/1.0)')

    def get_resolver_timeout(self) -> float:
        """
        获取抓取页面的超时时间

        Returns:
            超时秒数
        """
        return float(self.get('resolver.timeout', 15))

    # Playlist Client Configuration Methods
    def get_resolver_base_url(self) -> str:
        """
        获取播放列表客户端调用的解析服务地址

        Returns:
            解析服务根地址（不含结尾斜杠）
        """
        base_url = self.get('playlist.resolver_base_url', 'http://127.0.0.1:8787')
        return base_url.rstrip('/')

    def get_resolver_client_timeout(self) -> float:
        """
        获取客户端请求解析服务的超时时间

        Returns:
            超时秒数
        """
        return float(self.get('playlist.resolver_timeout', 30))

    def get_playlist_data_dir(self) -> str:
        """
        获取播放列表状态的存储目录

        Returns:
            存储目录路径
        """
        return self.get('playlist.data_dir', 'data/playlists')

    def get_playlist_storage_key(self) -> str:
        """
        获取播放列表状态的存储键前缀

        Returns:
            存储键前缀
        """
        return self.get('playlist.storage_key', 'soundgasmPlaylistState')
