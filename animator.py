# animator.py
# Time-driven replay of a drop sequence, independent of any display

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Dict, List, Optional

from animation import AnimationTiming, PiecePlan, plan_piece
from grid import PlacedTetromino
from sequencer import SequencedPiece, SequenceResult
from settings import (
    DISPLAY_PAUSE_MS,
    FLASH_COUNT,
    FLASH_DURATION_MS,
    ROW_CLEAR_DELAY_MS,
)
from tetrominoes import TETROMINOES, Cell, absolute_cells, rotation_count


class Phase(Enum):
    DROPPING = auto()
    DISPLAY = auto()
    FLASHING = auto()
    CLEARING = auto()
    DONE = auto()


@dataclass(frozen=True)
class _Track:
    seq_piece: SequencedPiece
    plan: PiecePlan
    start_ms: int
    spawn_col: int
    rotations: int
    move_cols: tuple[int, ...]

    @property
    def lock_ms(self) -> int:
        return self.start_ms + self.plan.total_ms


class FieldAnimator:
    """Replays pieces one at a time, then runs the closing flash + row clear.

    Time only moves forward through `update(dt_ms)`; every query is a pure
    function of the elapsed time. Rows are visual rows: solver rows shifted
    down by the timing's top padding.
    """

    def __init__(self, seq_result: SequenceResult, timing: AnimationTiming, closing: bool = True):
        self.rows = seq_result.rows + timing.field_top_padding_rows
        self.cols = seq_result.cols
        self.timing = timing
        self.closing = closing
        self.elapsed_ms = 0
        self.cancelled = False
        self._tracks: List[_Track] = []

        start = 0
        if seq_result.success:
            for seq_piece in seq_result.sequence:
                track = self._make_track(seq_piece, start)
                self._tracks.append(track)
                start = track.lock_ms + timing.piece_delay_ms
        self.drop_ms = start

        self.display_end_ms = self.drop_ms + DISPLAY_PAUSE_MS
        self.flash_end_ms = self.display_end_ms + 2 * FLASH_COUNT * FLASH_DURATION_MS
        # bottom to top
        self._clear_rows = sorted(
            {self._visual_row(r) for track in self._tracks for r, _ in track.seq_piece.piece.cells},
            reverse=True,
        )
        self.total_ms = (
            self.flash_end_ms + len(self._clear_rows) * ROW_CLEAR_DELAY_MS if closing else self.drop_ms
        )

    def _make_track(self, seq_piece: SequencedPiece, start_ms: int) -> _Track:
        piece = seq_piece.piece
        count = rotation_count(piece.kind)
        spawn_col = next(step.col for step in seq_piece.steps if step.action == "spawn")
        return _Track(
            seq_piece=seq_piece,
            plan=plan_piece(seq_piece, self.timing),
            start_ms=start_ms,
            spawn_col=spawn_col if spawn_col is not None else piece.anchor[1],
            rotations=piece.rotation_index % count if count > 1 else 0,
            move_cols=tuple(step.col for step in seq_piece.steps if step.action == "move" and step.col is not None),
        )

    def _visual_row(self, row: int) -> int:
        return row + self.timing.field_top_padding_rows

    def update(self, dt_ms: int) -> None:
        if not self.cancelled:
            self.elapsed_ms = min(self.elapsed_ms + dt_ms, self.total_ms)

    def cancel(self) -> None:
        self.cancelled = True

    @property
    def done(self) -> bool:
        return self.cancelled or self.elapsed_ms >= self.total_ms

    @property
    def phase(self) -> Phase:
        t = self.elapsed_ms
        if self.done:
            return Phase.DONE
        if t < self.drop_ms:
            return Phase.DROPPING
        if t < self.display_end_ms:
            return Phase.DISPLAY
        if t < self.flash_end_ms:
            return Phase.FLASHING
        return Phase.CLEARING

    @property
    def flash_on(self) -> bool:
        if self.phase != Phase.FLASHING:
            return False
        return ((self.elapsed_ms - self.display_end_ms) // FLASH_DURATION_MS) % 2 == 0

    def cleared_rows(self) -> set[int]:
        if self.elapsed_ms < self.flash_end_ms or not self.closing:
            return set()
        count = (self.elapsed_ms - self.flash_end_ms) // ROW_CLEAR_DELAY_MS + 1
        return set(self._clear_rows[:count])

    def locked_cells(self) -> Dict[Cell, PlacedTetromino]:
        cleared = self.cleared_rows()
        locked: Dict[Cell, PlacedTetromino] = {}
        for track in self._tracks:
            if self.elapsed_ms < track.lock_ms:
                break
            piece = track.seq_piece.piece
            for r, c in piece.cells:
                vr = self._visual_row(r)
                if vr not in cleared:
                    locked[(vr, c)] = piece
        return locked

    def active_piece(self) -> Optional[PlacedTetromino]:
        track = self._active_track()
        return track.seq_piece.piece if track else None

    def active_cells(self) -> List[Cell]:
        """Visible cells of the falling piece at the current time."""
        track = self._active_track()
        if track is None:
            return []
        row, col, rotation = self._pose(track, self.elapsed_ms - track.start_ms)
        cells = absolute_cells(TETROMINOES[track.seq_piece.piece.kind], rotation, (row, col))
        return [
            (self._visual_row(r), c)
            for r, c in cells
            if 0 <= self._visual_row(r) < self.rows and 0 <= c < self.cols
        ]

    def _active_track(self) -> Optional[_Track]:
        for track in self._tracks:
            if track.start_ms <= self.elapsed_ms < track.lock_ms:
                return track
        return None

    def _pose(self, track: _Track, local_ms: int) -> tuple[int, int, int]:
        """(row, col, rotation index) of a track `local_ms` after its spawn."""
        timing = self.timing
        plan = track.plan
        target_row = track.seq_piece.piece.anchor[0]
        spawn_row = -timing.field_top_padding_rows

        # actions fire at think + k * nudge
        total_actions = track.rotations + len(track.move_cols)
        if local_ms < timing.think_duration_ms:
            actions = 0
        elif timing.nudge_duration_ms > 0:
            actions = min(total_actions, (local_ms - timing.think_duration_ms) // timing.nudge_duration_ms)
        else:
            actions = total_actions

        if local_ms < plan.action_ms:
            fallen = local_ms // timing.hard_drop_duration_ms if timing.hard_drop_duration_ms > 0 else 0
            fallen = min(fallen, plan.gravity_rows)
        elif timing.min_hard_drop_delay_ms > 0:
            extra = (local_ms - plan.action_ms) // timing.min_hard_drop_delay_ms
            fallen = plan.gravity_rows + min(plan.hard_drop_rows, extra)
        else:
            fallen = plan.gravity_rows + plan.hard_drop_rows
        row = min(spawn_row + fallen, target_row)

        rotation = min(actions, track.rotations)
        moves = actions - rotation
        col = track.move_cols[moves - 1] if moves > 0 else track.spawn_col
        return row, col, rotation % rotation_count(track.seq_piece.piece.kind)
