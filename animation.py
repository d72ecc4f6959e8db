# animation.py
# Duration estimate for replaying a drop sequence

from __future__ import annotations

from dataclasses import dataclass

from sequencer import SequencedPiece, SequenceResult
from tetrominoes import rotation_count


@dataclass(frozen=True)
class AnimationTiming:
    field_top_padding_rows: int
    nudge_duration_ms: int
    rotate_duration_ms: int  # not read by the estimator; rotations are charged at the nudge rate
    hard_drop_duration_ms: int  # gravity interval while actions run
    piece_delay_ms: int
    think_duration_ms: int = 0  # pause before the first action
    min_hard_drop_delay_ms: int = 0  # per row once positioned


def action_count(seq_piece: SequencedPiece) -> int:
    """Rotations (from rotation 0) plus horizontal moves."""
    piece = seq_piece.piece
    count = rotation_count(piece.kind)
    rotations = piece.rotation_index % count if count > 1 else 0
    moves = sum(1 for step in seq_piece.steps if step.action == "move")
    return rotations + moves


@dataclass(frozen=True)
class PiecePlan:
    action_ms: int
    gravity_rows: int
    hard_drop_rows: int
    hard_drop_ms: int

    @property
    def total_ms(self) -> int:
        return self.action_ms + self.hard_drop_ms


def plan_piece(seq_piece: SequencedPiece, timing: AnimationTiming) -> PiecePlan:
    """Think, then act at nudge intervals while gravity pulls; hard-drop whatever is left."""
    action_ms = timing.think_duration_ms + action_count(seq_piece) * timing.nudge_duration_ms

    fall = seq_piece.piece.anchor[0] + timing.field_top_padding_rows
    if timing.hard_drop_duration_ms > 0:
        gravity_rows = min(action_ms // timing.hard_drop_duration_ms, fall)
    else:
        gravity_rows = 0
    hard_drop_rows = max(0, fall - gravity_rows)

    return PiecePlan(
        action_ms=action_ms,
        gravity_rows=gravity_rows,
        hard_drop_rows=hard_drop_rows,
        hard_drop_ms=hard_drop_rows * timing.min_hard_drop_delay_ms,
    )


def estimate_animation_duration_ms(seq_result: SequenceResult, timing: AnimationTiming) -> int:
    """Total replay time. Every piece, the last one included, is followed by the piece delay."""
    if not seq_result.success:
        return 0

    total = 0
    for seq_piece in seq_result.sequence:
        total += plan_piece(seq_piece, timing).total_ms
        total += timing.piece_delay_ms
    return total
