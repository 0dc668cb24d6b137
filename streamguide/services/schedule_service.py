"""
Schedule service.

Ties the pure scheduling core to the program store: loads a channel's day,
plans appends, fillers and reorders with an explicit ``now``, and persists
the results.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Iterable, List, Optional

from streamguide.database.store import ProgramStore
from streamguide.errors import InvalidInputError, OverflowWarning
from streamguide.playout.filler import FillerPreset, compute_filler
from streamguide.playout.reflow import ReflowResult, move, reflow, validate_move
from streamguide.playout.scheduler import append_program
from streamguide.playout.state import ChannelInfo, NowPlaying, Program, ProgramCreate, ProgramId
from streamguide.scheduling import grid, liveness, timeline

logger = logging.getLogger(__name__)


@dataclass
class DayStats:
    """Totals shown above a day's program list."""

    count: int = 0
    scheduled_seconds: int = 0
    missing_seconds: int = timeline.SECONDS_PER_DAY

    @property
    def is_full(self) -> bool:
        return self.missing_seconds <= 0

    @property
    def fill_percent(self) -> float:
        return round(min(100.0, self.scheduled_seconds / timeline.SECONDS_PER_DAY * 100), 1)

    @classmethod
    def of(cls, programs: Iterable[Program]) -> "DayStats":
        programs = list(programs)
        scheduled = sum(p.duration for p in programs)
        return cls(
            count=len(programs),
            scheduled_seconds=scheduled,
            missing_seconds=max(0, timeline.SECONDS_PER_DAY - scheduled),
        )


@dataclass
class DayView:
    """Admin view of one channel's broadcast day."""

    channel: ChannelInfo
    date: str
    programs: List[Program]
    groups: grid.DaypartGroups
    active_daypart: grid.Daypart
    stats: DayStats
    live_program_id: Optional[ProgramId] = None
    tabs: List[str] = field(default_factory=list)


class ScheduleService:
    """Scheduling operations for the admin and viewer APIs."""

    def __init__(
        self,
        store: ProgramStore,
        filler_preset: Optional[FillerPreset] = None,
        clock: Callable[[], datetime] = timeline.current_time,
        date_tab_count: int = 7,
    ):
        self.store = store
        self.filler_preset = filler_preset or FillerPreset()
        self.clock = clock
        self.date_tab_count = date_tab_count

    # ------------------------------------------------------------ reads

    async def list_channels(self) -> List[ChannelInfo]:
        return await self.store.get_channels()

    async def channel_programs(self, channel_id: str) -> List[Program]:
        await self.store.get_channel(channel_id)
        return await self.store.get_programs_for_channel(channel_id, self.clock())

    async def day_programs(self, channel_id: str, date: timeline.DateLike) -> List[Program]:
        """Programs tagged with ``date`` on the channel, ordered by start."""
        programs = await self.store.get_programs_for_channel(channel_id, self.clock())
        return grid.programs_for_date(programs, date)

    async def day_view(self, channel_id: str, date: timeline.DateLike) -> DayView:
        channel = await self.store.get_channel(channel_id)
        day = timeline.format_date(date)
        now = self.clock()

        programs = await self.day_programs(channel_id, day)
        live = next((p for p in programs if liveness.is_live(p, now)), None)

        return DayView(
            channel=channel,
            date=day,
            programs=programs,
            groups=grid.group_by_daypart(programs),
            active_daypart=grid.active_daypart(now, day),
            stats=DayStats.of(programs),
            live_program_id=live.id if live else None,
            tabs=timeline.date_tabs(now.date(), self.date_tab_count),
        )

    async def guide(self, date: timeline.DateLike, channel_id: Optional[str] = None) -> List[Program]:
        """Viewer grid for ``date``: overlapping programs with clipped times."""
        return await self.store.get_programs_for_date(date, channel_id)

    async def now_playing(self, channel_id: str) -> NowPlaying:
        await self.store.get_channel(channel_id)
        return await self.store.get_current_program(channel_id, self.clock())

    # ------------------------------------------------------------ writes

    async def append(
        self,
        channel_id: str,
        date: timeline.DateLike,
        title: str,
        duration: int,
        description: Optional[str] = None,
        video_id: Optional[str] = None,
        thumbnail: Optional[str] = None,
        confirm_overflow: bool = False,
    ) -> Program:
        """
        Append a program at the tail of the channel's day.

        Raises:
            DayFullError: If the day has no time left.
            OverflowWarning: If the program would run past the end of the
                day and ``confirm_overflow`` is not set.
        """
        await self.store.get_channel(channel_id)
        day = timeline.format_date(date)
        programs = await self.day_programs(channel_id, day)

        plan = append_program(programs, duration, day)
        if plan.overflow and not confirm_overflow:
            raise OverflowWarning(plan)

        return await self.store.add_program(
            ProgramCreate(
                channel_id=channel_id,
                title=title,
                description=description,
                video_id=video_id,
                thumbnail=thumbnail,
                duration=duration,
                start=plan.start,
                end=plan.end,
            )
        )

    async def add_filler(self, channel_id: str, date: timeline.DateLike) -> Program:
        """Fill the rest of the day with the filler preset, ending at 24:00."""
        await self.store.get_channel(channel_id)
        day = timeline.format_date(date)
        programs = await self.day_programs(channel_id, day)

        plan = compute_filler(programs, day)
        logger.info(f"Adding {plan.duration}s filler to {channel_id} on {day} at {plan.start_time}")
        return await self.store.add_program(plan.to_create(channel_id, self.filler_preset))

    async def reorder(
        self,
        channel_id: str,
        date: timeline.DateLike,
        program_id: ProgramId,
        new_index: int,
    ) -> ReflowResult:
        """
        Move one program within its day and reflow the future programs.

        Raises:
            InvalidInputError: If the day is in the past, the program is not
                part of the day, or the move would displace a past or live
                program.
            StorageError: If the rewrite failed; nothing was saved.
        """
        await self.store.get_channel(channel_id)
        day = timeline.format_date(date)
        now = self.clock()
        if timeline.parse_date(day) < now.date():
            raise InvalidInputError(f"Programs of past day {day} cannot be reordered")

        programs = await self.day_programs(channel_id, day)
        reordered = move(programs, program_id, new_index)
        validate_move(programs, reordered, now)

        result = reflow(reordered, now, day)
        if result.changed:
            await self.store.reorder_programs(result.pending, result.anchor_start)
            if result.overflow:
                logger.warning(f"Reorder on {channel_id} {day} runs past the end of the day")
        return result

    async def update(
        self,
        program_id: ProgramId,
        title: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Program:
        return await self.store.update_program(program_id, title=title, description=description)

    async def delete(self, program_id: ProgramId) -> None:
        await self.store.delete_program(program_id)

    async def delete_many(self, program_ids: Iterable[ProgramId]) -> int:
        return await self.store.delete_programs(program_ids)
