"""
队列控制器 - 管理播放列表队列状态和播放顺序

维护有序且去重的曲目列表和当前播放位置，负责链接解析、顺序播放和状态持久化。
每次修改队列状态后都会立即保存。

播放位置状态机：
- 空闲（current_index == IDLE_INDEX）
- 播放中（current_index 指向队列中的有效位置）
"""

import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence

from gasmplaylist.core.interfaces import (
    IPlaybackSurface,
    IResolverClient,
    IStateStore,
    PlaybackStartFailed,
    ResolutionError
)
from .track import TrackEntry, is_direct_audio


IDLE_INDEX = -1

StatusHandler = Callable[[str, str], Awaitable[None]]


class QueueController:
    """
    队列控制器实现

    队列和当前位置都是实例字段，多个控制器之间互不影响。
    所有状态转换都发生在同一个事件循环中，批量解析按顺序逐个等待。
    """

    def __init__(
        self,
        resolver: IResolverClient,
        playback: IPlaybackSurface,
        state_store: Optional[IStateStore] = None,
        queue: Optional[Sequence[TrackEntry]] = None,
        current_index: int = IDLE_INDEX,
        name: str = "default"
    ):
        """
        初始化队列控制器

        Args:
            resolver: 解析客户端
            playback: 播放界面
            state_store: 状态存储（可选）
            queue: 初始队列
            current_index: 初始播放位置
            name: 控制器名称（用于日志）
        """
        self.name = name
        self.logger = logging.getLogger(f"gasmplaylist.playlist.controller.{name}")

        self._resolver = resolver
        self._playback = playback
        self._state_store = state_store

        # 队列状态
        self._queue: List[TrackEntry] = []
        self._current_index = IDLE_INDEX
        self._restore(list(queue or []), current_index)

        # 状态消息
        self._status_handlers: List[StatusHandler] = []
        self.status_message = ""
        self.status_tone = "info"

        # 播放自然结束时推进到下一首
        self._playback.set_ended_callback(self.on_playback_ended)

        self.logger.debug(f"队列控制器初始化完成 - {name}")

    # 状态访问

    @property
    def queue(self) -> List[TrackEntry]:
        """队列副本"""
        return list(self._queue)

    @property
    def current_index(self) -> int:
        """当前播放位置，空闲时为 IDLE_INDEX"""
        return self._current_index

    def is_idle(self) -> bool:
        """是否没有选中的曲目"""
        return self._current_index == IDLE_INDEX

    def now_playing(self) -> Optional[TrackEntry]:
        """获取当前曲目"""
        if self.is_idle():
            return None
        return self._queue[self._current_index]

    def snapshot(self) -> Dict[str, Any]:
        """
        获取可持久化的状态记录

        Returns:
            {"queue": [...], "currentIndex": n}
        """
        return {
            "queue": [track.to_dict() for track in self._queue],
            "currentIndex": self._current_index
        }

    # 状态消息

    def add_status_handler(self, handler: StatusHandler) -> None:
        """
        添加状态消息处理器

        Args:
            handler: 接收 (消息, 语气) 的协程函数，语气为 info/success/error
        """
        self._status_handlers.append(handler)

    async def _set_status(self, message: str, tone: str = "info") -> None:
        """记录并分发状态消息，处理器的异常只记录不传播"""
        self.status_message = message
        self.status_tone = tone

        for handler in self._status_handlers:
            try:
                await handler(message, tone)
            except Exception as e:
                self.logger.error(f"状态处理器出错: {e}", exc_info=True)

    # 持久化

    def _restore(self, entries: List[TrackEntry], current_index: Any) -> None:
        """替换队列状态，丢弃重复条目并校正越界的播放位置"""
        seen = set()
        queue: List[TrackEntry] = []
        for track in entries:
            if track.page_url in seen:
                continue
            seen.add(track.page_url)
            queue.append(track)

        self._queue = queue
        if isinstance(current_index, int) and not isinstance(current_index, bool) \
                and 0 <= current_index < len(queue):
            self._current_index = current_index
        else:
            self._current_index = IDLE_INDEX

    async def load(self) -> None:
        """
        从状态存储恢复队列

        记录不存在或损坏时保持当前状态（全新开始）。
        恢复后如果有当前曲目，把它设置为播放界面的音源但不开始播放。
        """
        if not self._state_store:
            return

        data = await self._state_store.load()
        if data is None:
            return

        raw_queue = data.get("queue")
        if isinstance(raw_queue, list):
            entries = [TrackEntry.from_dict(item) for item in raw_queue]
            valid_entries = [track for track in entries if track is not None]
            if len(valid_entries) != len(raw_queue):
                self.logger.warning(f"丢弃了 {len(raw_queue) - len(valid_entries)} 个无效的曲目记录")
        else:
            valid_entries = list(self._queue)

        self._restore(valid_entries, data.get("currentIndex"))

        current = self.now_playing()
        if current:
            self._playback.set_source(current.audio_url)

        self.logger.info(f"队列状态已恢复 - 队列长度: {len(self._queue)}, 当前位置: {self._current_index}")

    async def _save_state(self) -> None:
        """保存当前队列状态到持久化存储"""
        if self._state_store:
            try:
                await self._state_store.save(self.snapshot())
            except Exception as e:
                self.logger.error(f"保存队列状态失败: {e}")

    # 队列操作

    async def add_urls(self, raw_text: str) -> List[TrackEntry]:
        """
        批量添加链接

        按行拆分输入，去掉空行以及已在队列中（或本批次重复）的链接。
        音频直链直接加入，其余链接逐个交给解析客户端；单个链接失败只报告状态，
        不影响其余链接。全部处理完成后按输入顺序追加到队列并保存。

        Args:
            raw_text: 每行一个链接的文本

        Returns:
            实际加入队列的曲目列表
        """
        urls = [line.strip() for line in raw_text.splitlines()]
        urls = [url for url in urls if url]

        if not urls:
            await self._set_status("请至少粘贴一个链接。", "error")
            return []

        existing_urls = {track.page_url for track in self._queue}
        unique_urls: List[str] = []
        for url in urls:
            if url in existing_urls:
                continue
            existing_urls.add(url)
            unique_urls.append(url)

        if not unique_urls:
            await self._set_status("所有链接都已在队列中。", "info")
            return []

        await self._set_status("正在解析链接...", "info")

        results: List[TrackEntry] = []
        for page_url in unique_urls:
            if is_direct_audio(page_url):
                results.append(TrackEntry.from_direct_link(page_url))
                continue

            try:
                resolved = await self._resolver.resolve(page_url)
            except ResolutionError as e:
                await self._set_status(str(e), "error")
                continue
            except Exception as e:
                self.logger.error(f"解析出错 - {page_url}: {e}", exc_info=True)
                await self._set_status(f"解析出错: {page_url}", "error")
                continue

            results.append(TrackEntry(
                page_url=page_url,
                audio_url=resolved.audio_url,
                title=resolved.title or page_url
            ))

        # 解析期间队列可能被其他操作修改，追加时再次去重
        current_urls = {track.page_url for track in self._queue}
        added = [track for track in results if track.page_url not in current_urls]
        self._queue.extend(added)
        await self._save_state()

        if added:
            self.logger.info(f"添加了 {len(added)} 个曲目 - 队列长度: {len(self._queue)}")
            await self._set_status(f"已添加 {len(added)} 个曲目到队列。", "success")

        return added

    async def play_at_index(self, index: int) -> bool:
        """
        播放指定位置的曲目

        播放启动失败（例如未连接语音频道）只报告状态，不抛出异常。

        Args:
            index: 队列位置（从0开始）

        Returns:
            位置有效时返回True，越界时不做任何操作并返回False
        """
        if index < 0 or index >= len(self._queue):
            return False

        self._current_index = index
        track = self._queue[index]
        self._playback.set_source(track.audio_url)
        await self._save_state()

        try:
            await self._playback.start()
        except PlaybackStartFailed as e:
            self.logger.error(f"播放失败 - {track.audio_url}: {e}")
            await self._set_status("无法开始播放，请检查语音连接。", "error")
            return True

        self.logger.info(f"正在播放: {track.display_title()}")
        await self._set_status(f"正在播放 {track.display_title()}", "success")
        return True

    async def play(self) -> bool:
        """
        播放按钮：空闲时从第一首开始，否则恢复当前曲目

        Returns:
            是否有曲目可以播放
        """
        if self.is_idle():
            return await self.play_at_index(0)

        try:
            await self._playback.start()
        except PlaybackStartFailed as e:
            self.logger.error(f"恢复播放失败: {e}")
            await self._set_status("无法恢复播放。", "error")
        return True

    async def play_next(self) -> None:
        """
        播放下一首

        队列为空或已经是最后一首时停止播放并回到空闲状态。
        """
        if not self._queue:
            self._stop_playback()
            await self._save_state()
            return

        next_index = self._current_index + 1
        if next_index >= len(self._queue):
            self._stop_playback()
            await self._save_state()
            await self._set_status("已到达队列末尾。", "info")
            return

        await self.play_at_index(next_index)

    async def remove_at_index(self, index: int) -> Optional[TrackEntry]:
        """
        移除指定位置的曲目并校正播放位置

        - 移除当前曲目：停止播放，回到空闲状态
        - 移除当前曲目之前的曲目：播放位置减一，仍指向同一曲目
        - 移除当前曲目之后的曲目：播放位置不变

        Args:
            index: 队列位置（从0开始）

        Returns:
            被移除的曲目，越界时返回None
        """
        if index < 0 or index >= len(self._queue):
            return None

        removed = self._queue.pop(index)
        if index == self._current_index:
            self._stop_playback()
        elif index < self._current_index:
            self._current_index -= 1

        await self._save_state()
        self.logger.debug(f"移除曲目: {removed.display_title()} - 当前位置: {self._current_index}")
        return removed

    async def clear(self) -> int:
        """
        清空队列并停止播放

        Returns:
            被清除的曲目数量
        """
        count = len(self._queue)
        self._queue = []
        self._stop_playback()
        await self._save_state()
        await self._set_status("队列已清空。", "info")
        return count

    async def on_playback_ended(self) -> None:
        """播放界面通知当前曲目自然结束"""
        self.logger.debug("当前曲目播放结束，推进到下一首")
        await self.play_next()

    def _stop_playback(self) -> None:
        """停止播放、清除音源并回到空闲状态"""
        self._playback.stop()
        self._current_index = IDLE_INDEX
