from __future__ import annotations

from typing import Optional, Set

from .alliances import AllianceRegistry
from .board import EMPTY, Board
from .config import RuleConfig
from .rules import DIRECTIONS


class Evaluator:
    """Static evaluation for connection positions.

    Scores are from the searching player's point of view: positive is good
    for ``player`` (and its allies), negative favours everybody else.
    """

    WIN_SCORE = 1_000_000
    CENTER_WEIGHT = 3

    @classmethod
    def baseline(
        cls,
        board: Board,
        player: int,
        config: RuleConfig,
        alliances: Optional[AllianceRegistry],
        maximizing: bool,
    ) -> int:
        """Flat score: +1 after the searching side moves, -1 after anybody else."""
        return 1 if maximizing else -1

    @classmethod
    def positional(
        cls,
        board: Board,
        player: int,
        config: RuleConfig,
        alliances: Optional[AllianceRegistry],
        maximizing: bool,
    ) -> int:
        """Window count heuristic.

        Every run of ``win_length`` cells holding only friendly counters and
        blanks scores the square of its friendly count; runs holding only one
        opponent's counters and blanks score the same against us. The centre
        column carries a small bonus.
        """
        friends = cls._friends(player, board, config, alliances)
        n = config.win_length
        score = 0

        center = board.width // 2
        for row in range(board.height):
            owner = board.cell(row, center)
            if owner in friends:
                score += cls.CENTER_WEIGHT
            elif owner != EMPTY:
                score -= cls.CENTER_WEIGHT

        for row in range(board.height):
            for column in range(board.width):
                for dr, dc in DIRECTIONS:
                    end_r, end_c = row + dr * (n - 1), column + dc * (n - 1)
                    if not board.in_bounds(end_r, end_c):
                        continue
                    window = [board.cell(row + dr * i, column + dc * i) for i in range(n)]
                    score += cls._score_window(window, friends)
        return score

    @staticmethod
    def _score_window(window, friends: Set[int]) -> int:
        mine = sum(1 for cell in window if cell in friends)
        others = {cell for cell in window if cell != EMPTY and cell not in friends}
        if mine and not others:
            return mine * mine
        if others and not mine and len(others) == 1:
            theirs = sum(1 for cell in window if cell != EMPTY)
            return -(theirs * theirs)
        return 0

    @staticmethod
    def _friends(
        player: int, board: Board, config: RuleConfig, alliances: Optional[AllianceRegistry]
    ) -> Set[int]:
        friends = {player}
        if config.alliances_enabled and alliances is not None:
            friends.update(p for _, _, p in board.occupied() if alliances.allied(player, p))
        return friends
