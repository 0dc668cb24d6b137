"""
StreamGuide Playout Engine

Broadcast-day scheduling for a channel's program list.

Features:
- Append scheduling at the tail of a day, with overflow detection
- Filler sized to exactly consume the rest of a day
- Daisy-chain reflow after manual reordering, around past/live anchors
"""

from streamguide.playout.filler import FillerPlan, FillerPreset, compute_filler
from streamguide.playout.reflow import ReflowResult, move, rechain, reflow, validate_move
from streamguide.playout.scheduler import AppendPlan, append_program, fill_until, tail_start
from streamguide.playout.state import ChannelInfo, NowPlaying, Program, ProgramCreate

__all__ = [
    # State
    "ChannelInfo",
    "NowPlaying",
    "Program",
    "ProgramCreate",
    # Scheduler
    "AppendPlan",
    "append_program",
    "fill_until",
    "tail_start",
    # Filler
    "FillerPlan",
    "FillerPreset",
    "compute_filler",
    # Reflow
    "ReflowResult",
    "move",
    "rechain",
    "reflow",
    "validate_move",
]
