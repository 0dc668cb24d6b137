"""
Daisy-chain reflow of a broadcast day after a manual reorder.

Walks the day's programs in the operator's new order. Past and live
programs are fixed points: their times are kept and their end becomes the
anchor for whatever follows. Future programs are packed back to back from
the latest anchor (or from 00:00 when no fixed point has been seen yet).

The engine never touches storage. It reports which programs changed so the
caller can persist them in one bulk rewrite.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Iterable, List, Optional, Sequence, Tuple

from streamguide.errors import InvalidInputError
from streamguide.playout.state import Program, ProgramId
from streamguide.scheduling import liveness, timeline

logger = logging.getLogger(__name__)


@dataclass
class ReflowResult:
    """Outcome of a reflow pass."""

    updated: List[Program] = field(default_factory=list)
    changed: List[Program] = field(default_factory=list)
    future: List[Program] = field(default_factory=list)

    @property
    def anchor_start(self) -> Optional[datetime]:
        """Absolute start of the first changed program, if any."""
        if not self.changed:
            return None
        return self.changed[0].start

    @property
    def pending(self) -> List[Program]:
        """
        Future programs from the first changed one onward.

        This run is contiguous, so it can be persisted with a single
        ``rechain`` from ``anchor_start`` even when some programs inside it
        kept their times.
        """
        if not self.changed:
            return []
        first_id = self.changed[0].id
        index = next(i for i, p in enumerate(self.future) if p.id == first_id)
        return self.future[index:]

    @property
    def overflow(self) -> bool:
        """True when any rewritten program now runs past its day."""
        return any(p.end > timeline.day_end(p.date) for p in self.changed)


def reflow(
    day_programs: Sequence[Program],
    now: datetime,
    date: timeline.DateLike,
) -> ReflowResult:
    """
    Re-derive contiguous times for ``day_programs`` in the given order.

    Args:
        day_programs: The day's programs in the desired new order.
        now: Current wall-clock time (decides past/live/future).
        date: Broadcast day being reflowed.

    Returns:
        ReflowResult with every program (``updated``) and the future
        programs whose start or end moved (``changed``). Programs may end
        past 24:00; overflow is not rejected here.
    """
    result = ReflowResult()
    anchor: Optional[datetime] = None

    for program in day_programs:
        if liveness.is_fixed(program, now):
            result.updated.append(program)
            anchor = program.end
            continue

        if anchor is None:
            anchor = timeline.day_start(date)

        new_end = anchor + timedelta(seconds=program.duration)
        moved = program.with_times(anchor, new_end)
        result.updated.append(moved)
        result.future.append(moved)

        before = program.span()
        if before != (anchor, new_end) or (
            program.start_time,
            program.end_time,
        ) != (moved.start_time, moved.end_time):
            result.changed.append(moved)

        anchor = new_end

    if result.changed:
        logger.debug(
            f"Reflow of {timeline.format_date(date)} moved {len(result.changed)} "
            f"of {len(result.updated)} programs"
        )
    return result


def rechain(
    programs: Iterable[Program],
    anchor_start: datetime,
) -> List[Tuple[ProgramId, datetime, datetime]]:
    """
    Absolute ``(id, start, end)`` rewrites chained from ``anchor_start``.

    Works from real instants and durations rather than ``HH:mm`` strings so
    no rounding accumulates across the chain.
    """
    writes = []
    cursor = anchor_start
    for program in programs:
        end = cursor + timedelta(seconds=program.duration)
        writes.append((program.id, cursor, end))
        cursor = end
    return writes


def move(programs: Sequence[Program], program_id: ProgramId, new_index: int) -> List[Program]:
    """
    Return ``programs`` with ``program_id`` moved to ``new_index``.

    Raises:
        InvalidInputError: If the program is not in the list or the index
            is out of range.
    """
    ordered = list(programs)
    old_index = next(
        (i for i, p in enumerate(ordered) if str(p.id) == str(program_id)),
        None,
    )
    if old_index is None:
        raise InvalidInputError(f"Program {program_id} is not part of this day")
    if not 0 <= new_index < len(ordered):
        raise InvalidInputError(
            f"Target position {new_index} out of range (0-{len(ordered) - 1})"
        )

    ordered.insert(new_index, ordered.pop(old_index))
    return ordered


def validate_move(
    programs: Sequence[Program],
    reordered: Sequence[Program],
    now: datetime,
) -> None:
    """
    Reject reorders that displace a fixed (past or live) program.

    The reflow engine assumes fixed programs keep their relative position;
    this is the caller-side check for that assumption.

    Raises:
        InvalidInputError: If any fixed program changed position.
    """
    for index, (before, after) in enumerate(zip(programs, reordered)):
        if liveness.is_fixed(before, now) or liveness.is_fixed(after, now):
            if str(before.id) != str(after.id):
                raise InvalidInputError(
                    "Past or live programs cannot be moved, and nothing can be "
                    "moved in front of them",
                    {"position": index},
                )
