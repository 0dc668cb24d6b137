"""
Now-playing monitor for a viewer's selected channel.

Re-queries storage on a slow poll and advances playback progress on a fast
local tick from cached state. Queries are tagged with a generation token so
a response that arrives after the viewer switched channels is dropped.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Awaitable, Callable, Optional

from streamguide.playout.state import NowPlaying, Program
from streamguide.scheduling import timeline

logger = logging.getLogger(__name__)

NowPlayingFetcher = Callable[[str, datetime], Awaitable[NowPlaying]]


class QueryGeneration:
    """Monotonic token source for discarding stale async results."""

    def __init__(self) -> None:
        self._value = 0

    @property
    def value(self) -> int:
        return self._value

    def begin(self) -> int:
        """Token for a query issued now."""
        return self._value

    def invalidate(self) -> int:
        """Make every outstanding token stale."""
        self._value += 1
        return self._value

    def is_current(self, token: int) -> bool:
        return token == self._value


@dataclass
class ProgressSnapshot:
    """What the player shows for the selected channel."""

    channel_id: Optional[str]
    current: Optional[Program]
    next: Optional[Program]
    offset: float
    progress: float  # 0-100

    @property
    def remaining(self) -> float:
        if self.current is None:
            return 0.0
        return max(0.0, self.current.duration - self.offset)


class NowPlayingMonitor:
    """
    Tracks the live program of one channel at a time.

    Features:
    - Slow storage poll (``poll_interval`` seconds)
    - Fast local progress tick from cached state (``tick_interval`` seconds)
    - Stale query results dropped on channel switch
    """

    def __init__(
        self,
        fetch: NowPlayingFetcher,
        clock: Callable[[], datetime] = timeline.current_time,
        poll_interval: float = 10.0,
        tick_interval: float = 1.0,
    ):
        self._fetch = fetch
        self._clock = clock
        self.poll_interval = poll_interval
        self.tick_interval = tick_interval

        self.generation = QueryGeneration()
        self.channel_id: Optional[str] = None
        self.state = NowPlaying()
        self.progress = 0.0

        self._running = False
        self._poll_task: Optional[asyncio.Task] = None
        self._tick_task: Optional[asyncio.Task] = None

    def switch_channel(self, channel_id: Optional[str]) -> None:
        """Select a channel; any query still in flight becomes stale."""
        if channel_id == self.channel_id:
            return
        self.generation.invalidate()
        self.channel_id = channel_id
        self.state = NowPlaying()
        self.progress = 0.0
        logger.debug(f"Now-playing monitor switched to channel {channel_id}")

    async def refresh(self) -> bool:
        """
        Re-query storage for the selected channel.

        Returns:
            True if the result was applied, False if there is no channel or
            the result went stale while the query was in flight.
        """
        channel_id = self.channel_id
        if channel_id is None:
            return False

        token = self.generation.begin()
        playing = await self._fetch(channel_id, self._clock())

        if not self.generation.is_current(token):
            logger.debug(f"Discarding stale now-playing result for channel {channel_id}")
            return False

        self._apply(playing)
        return True

    def _apply(self, playing: NowPlaying) -> None:
        previous = self.state.current
        if playing.current is None:
            self.state = playing
            self.progress = 0.0
            return

        # Same program still playing: keep the locally ticked offset
        if previous is not None and previous.id == playing.current.id:
            playing.offset = max(playing.offset, self.state.offset)
        else:
            logger.info(f"Channel {self.channel_id} now playing: {playing.current.title!r}")

        self.state = playing
        self.progress = self._progress_for(playing.current, playing.offset)

    def tick(self) -> ProgressSnapshot:
        """Advance progress from the wall clock without touching storage."""
        current = self.state.current
        if current is not None:
            offset = (self._clock() - current.start).total_seconds()
            self.state.offset = max(0.0, offset)
            self.progress = self._progress_for(current, self.state.offset)
        return self.snapshot()

    def snapshot(self) -> ProgressSnapshot:
        return ProgressSnapshot(
            channel_id=self.channel_id,
            current=self.state.current,
            next=self.state.next,
            offset=self.state.offset,
            progress=self.progress,
        )

    @staticmethod
    def _progress_for(program: Program, offset: float) -> float:
        if program.duration <= 0:
            return 100.0
        return max(0.0, min(100.0, offset / program.duration * 100))

    async def start(self) -> None:
        """Refresh once, then start the poll and tick loops."""
        if self._running:
            return

        await self.refresh()
        self._running = True
        self._poll_task = asyncio.create_task(self._poll_loop())
        self._tick_task = asyncio.create_task(self._tick_loop())
        logger.info("Now-playing monitor started")

    async def stop(self) -> None:
        """Stop both loops."""
        if not self._running:
            return

        self._running = False
        for task in (self._poll_task, self._tick_task):
            if task is None:
                continue
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        self._poll_task = None
        self._tick_task = None
        logger.info("Now-playing monitor stopped")

    async def _poll_loop(self) -> None:
        while self._running:
            await asyncio.sleep(self.poll_interval)
            try:
                await self.refresh()
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error(f"Now-playing refresh failed: {e}")

    async def _tick_loop(self) -> None:
        while self._running:
            self.tick()
            await asyncio.sleep(self.tick_interval)
