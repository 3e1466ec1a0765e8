"""日志配置 - 为 gasmplaylist 设置控制台与滚动文件日志"""
import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional


def setup_logger(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    max_size: int = 10485760,
    backup_count: int = 5
) -> logging.Logger:
    """
    设置 gasmplaylist 根日志记录器。

    Args:
        log_level: 日志级别名称（DEBUG/INFO/WARNING/ERROR）
        log_file: 日志文件路径，为 None 时只输出到控制台
        max_size: 单个日志文件的最大字节数
        backup_count: 保留的备份日志文件数量

    Returns:
        配置完成的根日志记录器
    """
    root_logger = logging.getLogger("gasmplaylist")
    level = getattr(logging, str(log_level).upper(), logging.INFO)
    root_logger.setLevel(level)

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # 重复调用时替换旧的处理器
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir)

        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=max_size,
            backupCount=backup_count,
            encoding='utf-8'
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    # discord.py 的日志只保留警告以上
    logging.getLogger("discord").setLevel(max(level, logging.WARNING))

    return root_logger
