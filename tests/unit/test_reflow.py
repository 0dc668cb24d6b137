"""
Unit tests for the daisy-chain reflow engine.
"""

from datetime import datetime

import pytest

from streamguide.errors import InvalidInputError
from streamguide.playout.reflow import move, rechain, reflow, validate_move
from streamguide.scheduling import liveness
from tests.fixtures import ProgramFactory, spans

DAY = "2026-10-19"


@pytest.fixture
def abc():
    """A 00:00-01:00, B 01:00-01:20, C 01:20-01:50."""
    return [
        ProgramFactory.create("00:00", "01:00", DAY, id="A"),
        ProgramFactory.create("01:00", "01:20", DAY, id="B"),
        ProgramFactory.create("01:20", "01:50", DAY, id="C"),
    ]


@pytest.mark.unit
class TestReflow:
    """Tests for reflow()."""

    def test_swap_after_live_program(self, abc):
        now = datetime(2026, 10, 19, 0, 30)  # A is live
        a, b, c = abc

        result = reflow([a, c, b], now, DAY)

        assert [p.id for p in result.updated] == ["A", "C", "B"]
        assert spans(result.updated) == [("00:00", "01:00"), ("01:00", "01:30"), ("01:30", "01:50")]
        assert [p.id for p in result.changed] == ["C", "B"]
        assert result.anchor_start == datetime(2026, 10, 19, 1, 0)

    def test_swap_after_past_program_closes_gap(self):
        now = datetime(2026, 10, 19, 1, 30)
        a = ProgramFactory.create("00:00", "01:00", DAY, id="A")
        b = ProgramFactory.create("02:00", "02:20", DAY, id="B")
        c = ProgramFactory.create("02:20", "02:50", DAY, id="C")
        assert liveness.is_past(a, now)

        result = reflow([a, c, b], now, DAY)

        assert spans(result.updated) == [("00:00", "01:00"), ("01:00", "01:30"), ("01:30", "01:50")]

    def test_fixed_programs_keep_times(self, abc):
        now = datetime(2026, 10, 19, 1, 10)  # A past, B live
        a, b, c = abc

        result = reflow([a, b, c], now, DAY)

        assert result.updated[0] is a
        assert result.updated[1] is b
        assert result.changed == []

    def test_airing_program_across_midnight_keeps_times(self):
        now = datetime(2026, 10, 19, 23, 45)
        late = ProgramFactory.create("23:30", "00:30", DAY, duration=3600, id="X")

        result = reflow([late], now, DAY)

        assert spans(result.updated) == [("23:30", "00:30")]
        assert result.changed == []
        assert result.pending == []

    def test_program_across_midnight_cannot_be_dragged(self):
        now = datetime(2026, 10, 19, 23, 45)
        earlier = ProgramFactory.create("22:00", "23:30", DAY, id="W")
        late = ProgramFactory.create("23:30", "00:30", DAY, id="X")

        with pytest.raises(InvalidInputError):
            validate_move([earlier, late], [late, earlier], now)

    def test_future_programs_are_contiguous(self):
        now = datetime(2026, 10, 19, 0, 30)
        programs = ProgramFactory.chain(DAY, [3600, 125, 3599, 61, 900])
        reordered = [programs[0], programs[3], programs[1], programs[4], programs[2]]

        result = reflow(reordered, now, DAY)

        future = result.updated[1:]
        assert future[0].start == programs[0].end
        for current, following in zip(future, future[1:]):
            assert current.end == following.start

    def test_idempotent(self, abc):
        now = datetime(2026, 10, 19, 0, 30)
        a, b, c = abc

        first = reflow([a, c, b], now, DAY)
        second = reflow(first.updated, now, DAY)

        assert spans(second.updated) == spans(first.updated)
        assert [p.id for p in second.updated] == [p.id for p in first.updated]
        assert second.changed == []

    def test_future_day_reflows_from_midnight(self):
        now = datetime(2026, 10, 18, 12, 0)
        programs = [
            ProgramFactory.create("06:00", "06:30", DAY, id="X"),
            ProgramFactory.create("06:30", "07:00", DAY, id="Y"),
        ]

        result = reflow(programs, now, DAY)

        assert spans(result.updated) == [("00:00", "00:30"), ("00:30", "01:00")]
        assert len(result.changed) == 2

    def test_unchanged_program_inside_pending_run(self):
        now = datetime(2026, 10, 18, 12, 0)
        x, y, z = ProgramFactory.chain(DAY, [600, 1200, 600])

        result = reflow([z, y, x], now, DAY)

        assert [p.id for p in result.changed] == [z.id, x.id]
        assert [p.id for p in result.pending] == [z.id, y.id, x.id]
        writes = rechain(result.pending, result.anchor_start)
        assert [(w[1], w[2]) for w in writes] == [p.span() for p in result.pending]

    def test_overflow_reported(self):
        now = datetime(2026, 10, 18, 12, 0)
        programs = ProgramFactory.chain(DAY, [600, 86000])
        a, b = programs

        result = reflow([b, a], now, DAY)

        assert result.overflow is True
        assert result.updated[-1].end > datetime(2026, 10, 20, 0, 0)

    def test_empty_day(self):
        result = reflow([], datetime(2026, 10, 19, 9, 0), DAY)

        assert result.updated == []
        assert result.anchor_start is None
        assert result.pending == []


@pytest.mark.unit
class TestRechain:
    """Tests for the bulk rewrite plan."""

    def test_rechain_uses_durations(self):
        programs = ProgramFactory.chain(DAY, [90, 30])
        anchor = datetime(2026, 10, 19, 5, 0)

        writes = rechain(programs, anchor)

        assert writes == [
            (programs[0].id, datetime(2026, 10, 19, 5, 0), datetime(2026, 10, 19, 5, 1, 30)),
            (programs[1].id, datetime(2026, 10, 19, 5, 1, 30), datetime(2026, 10, 19, 5, 2)),
        ]


@pytest.mark.unit
class TestMove:
    """Tests for move() and validate_move()."""

    def test_move_forward_and_back(self, abc):
        a, b, c = abc

        assert [p.id for p in move(abc, "C", 1)] == ["A", "C", "B"]
        assert [p.id for p in move(abc, "A", 2)] == ["B", "C", "A"]

    def test_move_unknown_program(self, abc):
        with pytest.raises(InvalidInputError):
            move(abc, "Z", 0)

    def test_move_out_of_range(self, abc):
        with pytest.raises(InvalidInputError):
            move(abc, "A", 3)

    def test_move_matches_int_and_str_ids(self):
        programs = [ProgramFactory.create("00:00", "00:10", DAY, id=7)]
        assert move(programs, "7", 0)[0].id == 7

    def test_fixed_program_cannot_move(self, abc):
        now = datetime(2026, 10, 19, 0, 30)

        with pytest.raises(InvalidInputError):
            validate_move(abc, move(abc, "A", 2), now)

    def test_nothing_moves_before_fixed_program(self, abc):
        now = datetime(2026, 10, 19, 0, 30)

        with pytest.raises(InvalidInputError):
            validate_move(abc, move(abc, "C", 0), now)

    def test_future_moves_allowed(self, abc):
        now = datetime(2026, 10, 19, 0, 30)

        validate_move(abc, move(abc, "C", 1), now)
