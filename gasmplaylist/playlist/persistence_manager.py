"""
持久化管理器 - 处理播放列表状态的持久化存储

每个存储键对应数据目录下的一个JSON文件，内容为
{"queue": [...], "currentIndex": n}。缺失或损坏的记录视为没有保存的状态。
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from gasmplaylist.core.interfaces import IStateStore


class JsonStateStore(IStateStore):
    """
    JSON 文件状态存储

    负责单个存储键的读写，写入在线程池中执行，避免阻塞事件循环。
    """

    def __init__(self, data_dir: str, storage_key: str):
        """
        初始化状态存储

        Args:
            data_dir: 数据存储目录
            storage_key: 存储键（决定文件名）
        """
        self.logger = logging.getLogger("gasmplaylist.playlist.persistence")
        self.data_dir = Path(data_dir)
        self.storage_key = storage_key
        self.file_path = self.data_dir / f"{storage_key}.json"

        # 保存锁，防止并发写入
        self._save_lock = asyncio.Lock()

        self.logger.debug(f"状态存储初始化完成 - 文件: {self.file_path}")

    async def load(self) -> Optional[Dict[str, Any]]:
        """
        从磁盘读取状态记录

        Returns:
            状态字典，文件不存在或内容损坏时返回None
        """
        if not self.file_path.exists():
            return None

        def read_file():
            with open(self.file_path, 'r', encoding='utf-8') as f:
                return json.load(f)

        try:
            loop = asyncio.get_running_loop()
            data = await loop.run_in_executor(None, read_file)
        except (OSError, ValueError) as e:
            self.logger.error(f"读取保存的状态失败，将使用空队列 - {self.storage_key}: {e}")
            return None

        if not isinstance(data, dict):
            self.logger.error(f"保存的状态格式错误，将使用空队列 - {self.storage_key}")
            return None

        return data

    async def save(self, state: Dict[str, Any]) -> None:
        """
        写入状态记录

        Args:
            state: 状态字典

        Raises:
            OSError: 写入文件失败
        """
        async with self._save_lock:
            def write_file():
                self.data_dir.mkdir(parents=True, exist_ok=True)
                # 先写临时文件再替换，避免中途失败留下半个文件
                temp_path = self.file_path.with_suffix('.json.tmp')
                with open(temp_path, 'w', encoding='utf-8') as f:
                    json.dump(state, f, ensure_ascii=False, indent=2)
                temp_path.replace(self.file_path)

            loop = asyncio.get_running_loop()
            await loop.run_in_executor(None, write_file)

            self.logger.debug(f"状态保存成功 - {self.storage_key}, 队列长度: {len(state.get('queue', []))}")

