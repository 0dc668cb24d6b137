"""
Unit tests for the schedule service on top of a real store.
"""

from datetime import datetime

import pytest

from streamguide.errors import DayFullError, InvalidInputError, NotFoundError, OverflowWarning
from streamguide.playout.filler import FillerPreset
from streamguide.scheduling.grid import Daypart
from streamguide.services import DayStats, ScheduleService
from tests.fixtures import (
    NOW,
    TODAY,
    TOMORROW,
    YESTERDAY,
    ChannelFactory,
    ProgramFactory,
    ProgramRecordFactory,
    spans,
)

CHANNEL = "music-box"


@pytest.fixture
async def channel(async_session):
    channel = ChannelFactory.create(id=CHANNEL, name="MusicBox")
    async_session.add(channel)
    await async_session.commit()
    return channel


@pytest.fixture
def service(store, channel) -> ScheduleService:
    return ScheduleService(
        store,
        filler_preset=FillerPreset(title="Test Pattern", video_id="abcdefghijk", thumbnail=None),
        clock=lambda: NOW,
    )


@pytest.fixture
async def today(async_session, channel):
    """10:00-10:30 (live at NOW), 10:30-10:40, 10:40-11:00."""
    records = ProgramRecordFactory.chain(CHANNEL, datetime(2026, 10, 19, 10, 0), [1800, 600, 1200])
    async_session.add_all(records)
    await async_session.commit()
    return records


async def seed(async_session, start: datetime, durations):
    records = ProgramRecordFactory.chain(CHANNEL, start, durations)
    async_session.add_all(records)
    await async_session.commit()
    return records


@pytest.mark.unit
class TestDayStats:
    def test_empty(self):
        stats = DayStats.of([])

        assert stats.count == 0
        assert stats.missing_seconds == 86400
        assert stats.fill_percent == 0.0
        assert stats.is_full is False

    def test_partial_and_full(self):
        partial = DayStats.of(ProgramFactory.chain(TODAY, [21600]))
        full = DayStats.of(ProgramFactory.chain(TODAY, [43200, 43200, 600]))

        assert partial.fill_percent == 25.0
        assert partial.missing_seconds == 64800
        assert full.is_full is True
        assert full.missing_seconds == 0
        assert full.fill_percent == 100.0


@pytest.mark.unit
class TestDayView:
    """Tests for the admin day view."""

    async def test_today(self, service: ScheduleService, today):
        view = await service.day_view(CHANNEL, TODAY)

        assert view.date == TODAY
        assert [p.id for p in view.programs] == [r.id for r in today]
        assert view.live_program_id == today[0].id
        assert view.active_daypart == Daypart.MORNING
        assert len(view.groups.morning) == 3
        assert view.stats.count == 3
        assert view.stats.scheduled_seconds == 3600
        assert view.tabs[0] == TODAY
        assert len(view.tabs) == 7

    async def test_other_day_has_no_live_program(self, service: ScheduleService, today):
        view = await service.day_view(CHANNEL, TOMORROW)

        assert view.programs == []
        assert view.live_program_id is None

    async def test_unknown_channel(self, service: ScheduleService):
        with pytest.raises(NotFoundError):
            await service.day_view("nope", TODAY)

    async def test_guide_clips_to_day(self, service: ScheduleService, async_session):
        await seed(async_session, datetime(2026, 10, 18, 23, 0), [7200])

        programs = await service.guide(TODAY)

        assert spans(programs) == [("00:00", "01:00")]

    async def test_now_playing(self, service: ScheduleService, today):
        playing = await service.now_playing(CHANNEL)

        assert playing.current.id == today[0].id
        assert playing.offset == 900


@pytest.mark.unit
class TestAppend:
    """Tests for appends and filler."""

    async def test_append_to_empty_day(self, service: ScheduleService):
        first = await service.append(CHANNEL, TOMORROW, "First", 600)
        second = await service.append(CHANNEL, TOMORROW, "Second", 45)

        assert (first.start_time, first.end_time) == ("00:00", "00:10")
        assert second.starts_at == first.ends_at
        assert second.end_time == "00:10"

    async def test_overflow_needs_confirmation(self, service: ScheduleService, async_session):
        await seed(async_session, datetime(2026, 10, 20, 0, 0), [82800])

        with pytest.raises(OverflowWarning) as exc_info:
            await service.append(CHANNEL, TOMORROW, "Long", 7200)
        assert exc_info.value.details == {"start_time": "23:00", "end_time": "01:00"}

        saved = await service.append(CHANNEL, TOMORROW, "Long", 7200, confirm_overflow=True)
        assert (saved.date, saved.start_time, saved.end_time) == (TOMORROW, "23:00", "01:00")

    async def test_full_day_rejected(self, service: ScheduleService, async_session):
        await seed(async_session, datetime(2026, 10, 20, 0, 0), [86400])

        with pytest.raises(DayFullError):
            await service.append(CHANNEL, TOMORROW, "More", 60)

    async def test_filler_fills_to_end_of_day(self, service: ScheduleService, async_session):
        await seed(async_session, datetime(2026, 10, 20, 8, 0), [1800, 600])

        filler = await service.add_filler(CHANNEL, TOMORROW)

        assert filler.title == "Test Pattern"
        assert filler.video_id == "abcdefghijk"
        assert (filler.start_time, filler.end_time) == ("08:40", "24:00")
        assert filler.duration == 55200
        view = await service.day_view(CHANNEL, TOMORROW)
        assert view.stats.count == 3


@pytest.mark.unit
class TestReorder:
    """Tests for reorder with reflow."""

    async def test_reorder_future_programs(self, service: ScheduleService, today):
        result = await service.reorder(CHANNEL, TODAY, today[2].id, 1)

        assert [p.id for p in result.changed] == [today[2].id, today[1].id]
        view = await service.day_view(CHANNEL, TODAY)
        assert [p.id for p in view.programs] == [today[0].id, today[2].id, today[1].id]
        assert spans(view.programs) == [("10:00", "10:30"), ("10:30", "10:50"), ("10:50", "11:00")]

    async def test_live_program_cannot_move(self, service: ScheduleService, today):
        with pytest.raises(InvalidInputError):
            await service.reorder(CHANNEL, TODAY, today[0].id, 2)

    async def test_past_day_rejected(self, service: ScheduleService, async_session):
        records = await seed(async_session, datetime(2026, 10, 18, 8, 0), [600, 600])

        with pytest.raises(InvalidInputError):
            await service.reorder(CHANNEL, YESTERDAY, records[1].id, 0)

    async def test_noop_reorder_writes_nothing(self, service: ScheduleService, today):
        result = await service.reorder(CHANNEL, TODAY, today[1].id, 1)

        assert result.changed == []


@pytest.mark.unit
class TestEdits:
    async def test_update_and_delete(self, service: ScheduleService, today):
        updated = await service.update(today[1].id, title="Renamed")
        assert updated.title == "Renamed"

        await service.delete(today[1].id)
        assert await service.delete_many([today[0].id, today[2].id]) == 2

        view = await service.day_view(CHANNEL, TODAY)
        assert view.programs == []
