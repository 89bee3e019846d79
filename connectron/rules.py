from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .alliances import AllianceRegistry
from .board import EMPTY, Board
from .config import RuleConfig

logger = logging.getLogger(__name__)

Cell = Tuple[int, int]

# horizontal, vertical, diagonal down-right, diagonal down-left
DIRECTIONS: Tuple[Tuple[int, int], ...] = ((0, 1), (1, 0), (1, 1), (1, -1))
ORTHOGONAL: Tuple[Tuple[int, int], ...] = ((0, 1), (1, 0), (0, -1), (-1, 0))
BLAST: Tuple[Tuple[int, int], ...] = tuple((dr, dc) for dr in (-1, 0, 1) for dc in (-1, 0, 1))

OVERFLOW_MIN_HEIGHT = 6


@dataclass(frozen=True)
class CornerBonus:
    player: int
    row: int
    column: int
    points: int


class RuleEngine:
    """Rule evaluators operating on a :class:`Board`.

    The engine holds no state of its own: every check takes the board and the
    match's :class:`RuleConfig`, and the special rules that change the board
    (solitaire, bomb, overflow) report which cells they touched.
    """

    @classmethod
    def check_win(
        cls,
        board: Board,
        row: int,
        column: int,
        config: RuleConfig,
        alliances: Optional[AllianceRegistry] = None,
    ) -> bool:
        """Return True if the counter at ``(row, column)`` completes a line.

        Walks both ways along each axis, counting counters of the same owner
        (or an ally, when alliances are on). A corner cell reached by the walk
        counts as ``config.corner_bonus_points`` counters when the corner bonus
        is enabled.
        """
        player = board.cell(row, column)
        if player == EMPTY:
            return False
        use_alliances = config.alliances_enabled and alliances is not None

        for dr, dc in DIRECTIONS:
            count = 1
            for sign in (-1, 1):
                r, c = row, column
                while True:
                    r += dr * sign
                    c += dc * sign
                    if not board.in_bounds(r, c):
                        break
                    other = board.cell(r, c)
                    if other != player and not (use_alliances and alliances.allied(player, other)):
                        break
                    count += 1
                    if config.corner_bonus_enabled and board.is_corner(r, c):
                        count += config.corner_bonus_points - 1
            logger.debug(
                "Line scan at (%d, %d) for player %d along (%d, %d): count %d",
                row, column, player, dr, dc, count,
            )
            if count >= config.win_length:
                logger.debug("Winning line for player %d, needed %d", player, config.win_length)
                return True
        return False

    @classmethod
    def check_corner_bonus(
        cls, board: Board, row: int, column: int, config: RuleConfig
    ) -> Optional[CornerBonus]:
        if not config.corner_bonus_enabled or not board.is_corner(row, column):
            return None
        player = board.cell(row, column)
        if player == EMPTY:
            return None
        bonus = CornerBonus(player, row, column, config.corner_bonus_points)
        logger.info("Player %d gets a corner bonus of %d points", player + 1, bonus.points)
        return bonus

    @classmethod
    def check_solitaire(cls, board: Board, config: RuleConfig) -> List[Cell]:
        """Destroy isolated counters until none remain.

        Every removal lets the column above it fall, so the scan starts over
        from the top-left after each one. Returns the removed positions in
        removal order.
        """
        removed: List[Cell] = []
        if not config.solitaire_rule_enabled:
            return removed
        while True:
            target = cls._find_isolated(board)
            if target is None:
                break
            row, column = target
            logger.info(
                "Solitaire destruction of player %d counter at (%d, %d)",
                board.cell(row, column) + 1, row, column,
            )
            board.collapse(row, column)
            removed.append(target)
        return removed

    @staticmethod
    def _find_isolated(board: Board) -> Optional[Cell]:
        for row, column, owner in board.occupied():
            surrounding = set()
            for dr, dc in ORTHOGONAL:
                r, c = row + dr, column + dc
                if not board.in_bounds(r, c):
                    break
                neighbour = board.cell(r, c)
                if neighbour == EMPTY:
                    break
                surrounding.add(neighbour)
            else:
                if len(surrounding) == 1 and owner not in surrounding:
                    return row, column
        return None

    @classmethod
    def use_bomb_counter(cls, board: Board, row: int, column: int, config: RuleConfig) -> List[Cell]:
        """Clear the 3x3 block centred on ``(row, column)``; returns the cells that held counters."""
        cleared: List[Cell] = []
        if not config.bomb_counter_enabled:
            return cleared
        for dr, dc in BLAST:
            r, c = row + dr, column + dc
            if board.in_bounds(r, c):
                if board.cell(r, c) != EMPTY:
                    cleared.append((r, c))
                board.remove(r, c)
        logger.info("Bomb at (%d, %d) cleared %d counters", row, column, len(cleared))
        return cleared

    @classmethod
    def check_overflow(cls, board: Board, column: int, player: int, config: RuleConfig) -> List[Cell]:
        """Spill a counter into each neighbour of a full ``column``.

        Returns ``(row, column)`` for every counter placed; a full or missing
        neighbour is skipped.
        """
        spilled: List[Cell] = []
        if not config.overflow_rule_enabled or board.height < OVERFLOW_MIN_HEIGHT:
            return spilled
        if not board.column_full(column):
            return spilled
        for neighbour in (column - 1, column + 1):
            if 0 <= neighbour < board.width:
                row, ok = board.drop(neighbour, player)
                if ok:
                    spilled.append((row, neighbour))
        if spilled:
            logger.info(
                "Column %d overflowed into %s for player %d",
                column, [c for _, c in spilled], player + 1,
            )
        return spilled

    @classmethod
    def is_draw(cls, board: Board, won: bool) -> bool:
        return not won and board.is_full()
