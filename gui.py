# gui.py

from __future__ import annotations

from typing import Dict, Tuple

import pygame

from animator import FieldAnimator, Phase
from digits import DIGIT_COLS, DIGIT_ROWS, TIME_COLON_GAP_COLS, TIME_COLS, TIME_DIGIT_GAP_COLS
from settings import FIELD_TOP_PADDING_ROWS

CELL_SIZE = 24
CELL_GAP = 2
TOP_BAR_HEIGHT = 96

FIELD_ROWS = DIGIT_ROWS + FIELD_TOP_PADDING_ROWS
FIELD_COLS = TIME_COLS

WINDOW_WIDTH = FIELD_COLS * CELL_SIZE
WINDOW_HEIGHT = FIELD_ROWS * CELL_SIZE + TOP_BAR_HEIGHT

# Colors – dark mode
BG = (15, 15, 17)
CARD_BG = (30, 30, 34)
GRID = (40, 40, 45)
TEXT_MAIN = (245, 245, 250)
TEXT_SECONDARY = (170, 170, 180)
FLASH = (255, 255, 255)
COLON = (245, 245, 250)

# Digit pieces are colored by type; background pieces share one dark blue
DIGIT_COLORS: Dict[str, Tuple[int, int, int]] = {
    "I": (119, 170, 255),
    "O": (254, 211, 64),
    "T": (196, 142, 253),
    "S": (33, 195, 111),
    "Z": (250, 110, 121),
    "J": (243, 122, 72),
    "L": (119, 170, 255),
}
BACKGROUND_COLOR = (26, 58, 92)


def piece_color(kind: str, is_lit: bool) -> Tuple[int, int, int]:
    return DIGIT_COLORS[kind] if is_lit else BACKGROUND_COLOR


def colon_center(
    digit_gap_cols: int = TIME_DIGIT_GAP_COLS,
    colon_gap_cols: int = TIME_COLON_GAP_COLS,
) -> Tuple[float, float]:
    """(col, row) at the middle of the HH|MM gap, vertically centered on the digits."""
    col = DIGIT_COLS * 2 + digit_gap_cols + (colon_gap_cols - 1) / 2
    row = FIELD_TOP_PADDING_ROWS + (DIGIT_ROWS - 1) / 2
    return col, row


def draw_top_bar(
    screen: pygame.Surface,
    title_font: pygame.font.Font,
    label_font: pygame.font.Font,
    mode: str,
    time_text: str,
    speed: float,
):
    width = screen.get_width()
    pygame.draw.rect(screen, BG, (0, 0, width, TOP_BAR_HEIGHT))

    card_rect = pygame.Rect(12, 12, width - 24, TOP_BAR_HEIGHT - 24)
    pygame.draw.rect(screen, CARD_BG, card_rect, border_radius=12)

    title_surf = title_font.render("Tetris Time", True, TEXT_MAIN)
    screen.blit(title_surf, (card_rect.x + 16, card_rect.y + 10))

    time_surf = title_font.render(time_text, True, TEXT_MAIN)
    screen.blit(time_surf, (card_rect.right - time_surf.get_width() - 16, card_rect.y + 10))

    info = f"{mode}  ·  speed {speed:g}  ·  up/down to change, esc to quit"
    info_surf = label_font.render(info, True, TEXT_SECONDARY)
    screen.blit(info_surf, (card_rect.x + 16, card_rect.y + 44))


def draw_field(screen: pygame.Surface, animator: FieldAnimator | None):
    """
    Draws the playfield below the top bar.
    Locked pieces keep their color; the falling piece is drawn on top.
    During the closing flash every filled cell turns white.
    """
    for r in range(FIELD_ROWS):
        for c in range(FIELD_COLS):
            rect = _cell_rect(r, c)
            pygame.draw.rect(screen, BG, rect, border_radius=4)
            pygame.draw.rect(screen, GRID, rect, width=1, border_radius=4)

    if animator is None:
        return

    flash = animator.flash_on

    for (r, c), piece in animator.locked_cells().items():
        color = FLASH if flash else piece_color(piece.kind, piece.is_lit)
        pygame.draw.rect(screen, color, _cell_rect(r, c), border_radius=4)

    active = animator.active_piece()
    if active is not None:
        color = piece_color(active.kind, active.is_lit)
        for r, c in animator.active_cells():
            pygame.draw.rect(screen, color, _cell_rect(r, c), border_radius=4)

    # Colon only once the time is fully assembled
    if animator.phase in (Phase.DISPLAY, Phase.FLASHING):
        draw_colon(screen)


def draw_colon(screen: pygame.Surface):
    col, row = colon_center()
    x = int(col * CELL_SIZE + CELL_SIZE / 2)
    radius = CELL_SIZE // 3
    for dy in (-2, 2):
        y = int(TOP_BAR_HEIGHT + (row + dy) * CELL_SIZE + CELL_SIZE / 2)
        pygame.draw.circle(screen, COLON, (x, y), radius)


def _cell_rect(row: int, col: int) -> pygame.Rect:
    x = col * CELL_SIZE
    y = TOP_BAR_HEIGHT + row * CELL_SIZE
    return pygame.Rect(x + CELL_GAP // 2, y + CELL_GAP // 2, CELL_SIZE - CELL_GAP, CELL_SIZE - CELL_GAP)
