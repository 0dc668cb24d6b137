"""
Program storage backed by SQLAlchemy.

Implements the storage operations the scheduling core relies on: loading a
channel's programs, inserting, deleting, editing, the bulk time rewrite
after a reorder, and now-playing lookups. Records are mapped to
``Program`` values with the HH:mm + date projection on the way out.
"""

import logging
from contextlib import contextmanager
from datetime import datetime, timedelta
from typing import Iterable, Iterator, List, Optional, Sequence

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from streamguide.database.models import Channel, ProgramRecord
from streamguide.errors import NotFoundError, StorageError
from streamguide.playout.reflow import rechain
from streamguide.playout.state import ChannelInfo, NowPlaying, Program, ProgramCreate, ProgramId
from streamguide.scheduling import grid, timeline

logger = logging.getLogger(__name__)


def channel_to_info(channel: Channel) -> ChannelInfo:
    """Map a Channel row to the read-only value the core uses."""
    return ChannelInfo(
        id=channel.id,
        name=channel.name,
        slug=channel.slug,
        logo=channel.display_logo,
        color=channel.color or "#000000",
        description=channel.description,
    )


def record_to_program(record: ProgramRecord) -> Program:
    """Project a stored record onto its broadcast day (date of its start)."""
    day = record.start_time.date().isoformat()
    return Program(
        id=record.id,
        channel_id=record.channel_id,
        title=record.title,
        description=record.description,
        thumbnail=record.thumbnail,
        video_id=record.video_id,
        duration=record.duration,
        start_time=timeline.format_time(record.start_time),
        end_time=timeline.format_end(record.end_time, day),
        date=day,
        starts_at=record.start_time,
        ends_at=record.end_time,
    )


def _as_key(program_id: ProgramId) -> int:
    try:
        return int(program_id)
    except (TypeError, ValueError) as e:
        raise NotFoundError(f"Program {program_id!r} not found") from e


class ProgramStore:
    """
    Storage collaborator for channels and programs.

    One store wraps one session; every write commits before returning.
    """

    def __init__(self, session: AsyncSession, history_days: int = 7):
        self.session = session
        self.history_days = history_days

    @contextmanager
    def _guard(self, action: str) -> Iterator[None]:
        """Translate database failures into StorageError."""
        try:
            yield
        except SQLAlchemyError as e:
            logger.error(f"Storage failure while trying to {action}: {e}")
            raise StorageError(f"Could not {action}", original_error=e) from e

    async def _rollback(self) -> None:
        try:
            await self.session.rollback()
        except SQLAlchemyError as e:
            logger.error(f"Rollback failed: {e}")

    # ------------------------------------------------------------ channels

    async def get_channels(self) -> List[ChannelInfo]:
        with self._guard("load channels"):
            result = await self.session.execute(select(Channel).order_by(Channel.name))
            return [channel_to_info(c) for c in result.scalars().all()]

    async def get_channel(self, channel_id: str) -> ChannelInfo:
        with self._guard("load channel"):
            channel = await self.session.get(Channel, channel_id)
        if channel is None:
            raise NotFoundError(f"Channel {channel_id!r} not found")
        return channel_to_info(channel)

    # ------------------------------------------------------------ queries

    async def get_programs_for_channel(self, channel_id: str, now: datetime) -> List[Program]:
        """Programs ending within the trailing history window onward, by start."""
        since = now - timedelta(days=self.history_days)
        stmt = (
            select(ProgramRecord)
            .where(ProgramRecord.channel_id == channel_id)
            .where(ProgramRecord.end_time >= since)
            .order_by(ProgramRecord.start_time)
        )
        with self._guard("load channel programs"):
            result = await self.session.execute(stmt)
            return [record_to_program(r) for r in result.scalars().all()]

    async def get_programs_for_date(
        self,
        date: timeline.DateLike,
        channel_id: Optional[str] = None,
    ) -> List[Program]:
        """
        Programs overlapping ``date``, with display times clipped to the day.
        """
        stmt = (
            select(ProgramRecord)
            .where(ProgramRecord.start_time <= timeline.day_end(date))
            .where(ProgramRecord.end_time >= timeline.day_start(date))
            .order_by(ProgramRecord.start_time)
        )
        if channel_id is not None:
            stmt = stmt.where(ProgramRecord.channel_id == channel_id)

        with self._guard("load programs for date"):
            result = await self.session.execute(stmt)
            programs = [record_to_program(r) for r in result.scalars().all()]

        logger.debug(f"Found {len(programs)} programs overlapping {timeline.format_date(date)}")
        return grid.window_for_date(programs, date)

    async def get_program(self, program_id: ProgramId) -> Program:
        return record_to_program(await self._get_record(program_id))

    async def get_last_program(self, channel_id: str) -> Optional[Program]:
        """Program with the latest end instant on the channel."""
        stmt = (
            select(ProgramRecord)
            .where(ProgramRecord.channel_id == channel_id)
            .order_by(ProgramRecord.end_time.desc())
            .limit(1)
        )
        with self._guard("load last program"):
            record = (await self.session.execute(stmt)).scalar_one_or_none()
        return record_to_program(record) if record else None

    async def get_current_program(self, channel_id: str, now: datetime) -> NowPlaying:
        """
        What is on ``channel_id`` at ``now``.

        When something is live, ``next`` is the first program starting at or
        after its end; otherwise ``next`` is the first upcoming program.
        """
        current_stmt = (
            select(ProgramRecord)
            .where(ProgramRecord.channel_id == channel_id)
            .where(ProgramRecord.start_time <= now)
            .where(ProgramRecord.end_time > now)
            .order_by(ProgramRecord.start_time)
            .limit(1)
        )
        with self._guard("load current program"):
            current = (await self.session.execute(current_stmt)).scalar_one_or_none()

            next_stmt = select(ProgramRecord).where(ProgramRecord.channel_id == channel_id)
            if current is not None:
                next_stmt = next_stmt.where(ProgramRecord.start_time >= current.end_time)
            else:
                next_stmt = next_stmt.where(ProgramRecord.start_time > now)
            next_stmt = next_stmt.order_by(ProgramRecord.start_time).limit(1)
            upcoming = (await self.session.execute(next_stmt)).scalar_one_or_none()

        playing = NowPlaying(
            current=record_to_program(current) if current else None,
            next=record_to_program(upcoming) if upcoming else None,
        )
        if current is not None:
            playing.offset = max(0.0, (now - current.start_time).total_seconds())
        return playing

    # ------------------------------------------------------------ writes

    async def add_program(self, create: ProgramCreate) -> Program:
        record = ProgramRecord(
            channel_id=create.channel_id,
            title=create.title,
            description=create.description,
            video_id=create.video_id,
            thumbnail=create.thumbnail,
            duration=create.duration,
            start_time=create.start,
            end_time=create.end,
        )
        try:
            self.session.add(record)
            await self.session.commit()
            await self.session.refresh(record)
        except SQLAlchemyError as e:
            await self._rollback()
            logger.error(f"Error adding program {create.title!r}: {e}")
            raise StorageError("Could not add program", original_error=e) from e

        logger.info(
            f"Added program {record.id} {record.title!r} on {record.channel_id} "
            f"{record.start_time.isoformat()} - {record.end_time.isoformat()}"
        )
        return record_to_program(record)

    async def update_program(
        self,
        program_id: ProgramId,
        title: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Program:
        """Edit descriptive fields only; timing is never changed here."""
        record = await self._get_record(program_id)
        if title is not None:
            record.title = title
        if description is not None:
            record.description = description

        try:
            await self.session.commit()
            await self.session.refresh(record)
        except SQLAlchemyError as e:
            await self._rollback()
            logger.error(f"Error updating program {program_id}: {e}")
            raise StorageError("Could not update program", [program_id], e) from e
        return record_to_program(record)

    async def delete_program(self, program_id: ProgramId) -> None:
        record = await self._get_record(program_id)
        try:
            await self.session.delete(record)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self._rollback()
            logger.error(f"Error deleting program {program_id}: {e}")
            raise StorageError("Could not delete program", [program_id], e) from e
        logger.info(f"Deleted program {program_id}")

    async def delete_programs(self, program_ids: Iterable[ProgramId]) -> int:
        """Delete several programs at once; returns how many were removed."""
        keys = [_as_key(pid) for pid in program_ids]
        if not keys:
            return 0
        try:
            result = await self.session.execute(
                delete(ProgramRecord).where(ProgramRecord.id.in_(keys))
            )
            await self.session.commit()
        except SQLAlchemyError as e:
            await self._rollback()
            logger.error(f"Error deleting programs {keys}: {e}")
            raise StorageError("Could not delete programs", keys, e) from e

        logger.info(f"Deleted {result.rowcount} of {len(keys)} requested programs")
        return result.rowcount

    async def reorder_programs(
        self,
        programs: Sequence[Program],
        anchor_start: Optional[datetime] = None,
    ) -> List[Program]:
        """
        Rewrite start/end of ``programs`` back to back from ``anchor_start``.

        Without an anchor, the first program's current start is used. All
        rows are written in one transaction: if any row is missing or fails,
        nothing is changed and a StorageError names the failed ids.
        """
        if not programs:
            return []

        if anchor_start is None:
            first = programs[0]
            anchor_start = timeline.combine(first.date, first.start_time)

        writes = rechain(programs, anchor_start)
        logger.info(
            f"Reordering {len(writes)} programs starting from {anchor_start.isoformat()}"
        )

        failed: List[ProgramId] = []
        records: List[ProgramRecord] = []
        try:
            for program_id, start, end in writes:
                record = await self.session.get(ProgramRecord, _as_key(program_id))
                if record is None:
                    failed.append(program_id)
                    continue
                record.start_time = start
                record.end_time = end
                records.append(record)

            if failed:
                raise NotFoundError(f"Programs not found: {failed}")
            await self.session.commit()
        except (SQLAlchemyError, NotFoundError) as e:
            await self._rollback()
            failed_ids = failed or [pid for pid, _, _ in writes]
            logger.error(f"Reorder aborted, {len(failed_ids)} programs failed: {e}")
            raise StorageError(
                "Could not rewrite program times; no changes were saved",
                failed_ids,
                e,
            ) from e

        return [record_to_program(r) for r in records]

    async def _get_record(self, program_id: ProgramId) -> ProgramRecord:
        with self._guard("load program"):
            record = await self.session.get(ProgramRecord, _as_key(program_id))
        if record is None:
            raise NotFoundError(f"Program {program_id!r} not found")
        return record
