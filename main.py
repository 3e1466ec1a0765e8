#!/usr/bin/env python3
"""
gasmplaylist - Soundgasm 播放列表机器人与页面解析服务

主程序入口点，负责配置加载、日志设置，并按子命令启动解析服务或 Discord 机器人。

    python main.py resolver   # 运行 /resolve 解析服务
    python main.py bot        # 运行 Discord 播放列表机器人
"""
import argparse
import logging

from gasmplaylist.utils.config_manager import ConfigManager
from gasmplaylist.utils.logger import setup_logger


def _run_resolver(config: ConfigManager, logger: logging.Logger) -> int:
    """运行解析服务"""
    from gasmplaylist.resolver import run_resolver_server

    logger.info(f"   允许域名: {config.get_resolver_allowed_domain()}")
    run_resolver_server(config)
    return 0


def _run_bot(config: ConfigManager, logger: logging.Logger) -> int:
    """运行 Discord 播放列表机器人"""
    from gasmplaylist.bot import PlaylistBot

    logger.info("正在获取 Discord 机器人令牌...")
    try:
        discord_token = config.get_discord_token()
        logger.info("✅ Discord 令牌获取成功")
    except ValueError as e:
        logger.error(f"❌ Discord 令牌配置错误: {e}")
        logger.error("请检查 config/config.yaml 文件并确保 Discord 令牌已正确设置")
        return 1

    logger.info("正在初始化播放列表机器人...")
    bot = PlaylistBot(config)

    logger.info("📋 机器人配置摘要:")
    logger.info(f"   解析服务: {config.get_resolver_base_url()}")
    logger.info(f"   状态目录: {config.get_playlist_data_dir()}")
    logger.info("按 Ctrl+C 停止机器人")
    bot.run(discord_token)
    return 0


def main() -> int:
    """
    gasmplaylist 主入口函数。

    Returns:
        int: 退出代码（0表示成功，1表示错误）
    """
    parser = argparse.ArgumentParser(description="Soundgasm 播放列表机器人与页面解析服务")
    parser.add_argument(
        "mode",
        nargs="?",
        choices=["bot", "resolver"],
        default="bot",
        help="运行模式：bot（Discord 机器人）或 resolver（解析服务）"
    )
    parser.add_argument(
        "--config",
        default="config/config.yaml",
        help="配置文件路径"
    )
    args = parser.parse_args()

    try:
        config = ConfigManager(args.config)
    except FileNotFoundError as e:
        logging.basicConfig(level=logging.INFO)
        logging.getLogger("gasmplaylist").error(f"❌ 配置文件错误: {e}")
        logging.getLogger("gasmplaylist").error("请复制 config/config.yaml.example 为 config/config.yaml")
        return 1

    setup_logger(
        log_level=config.get_log_level(),
        log_file=config.get_log_file(),
        max_size=config.get_log_max_size(),
        backup_count=config.get_log_backup_count()
    )
    logger = logging.getLogger("gasmplaylist")

    logger.info("=" * 60)
    logger.info(f"🎵 gasmplaylist 启动中 - 模式: {args.mode}")
    logger.info("=" * 60)

    try:
        if args.mode == "resolver":
            return _run_resolver(config, logger)
        return _run_bot(config, logger)
    except KeyboardInterrupt:
        logger.info("🛑 用户停止了程序 (Ctrl+C)")
        return 0
    except Exception as e:
        logger.error(f"❌ 运行时发生意外错误: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    exit(main())
