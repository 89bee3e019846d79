from __future__ import annotations

import logging
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from .alliances import AllianceRegistry
from .board import Board
from .config import PlayerType, RuleConfig
from .errors import NoLegalMove
from .evaluator import Evaluator
from .rules import RuleEngine

logger = logging.getLogger(__name__)

Move = Tuple[int, int]
EvaluateFn = Callable[[Board, int, RuleConfig, Optional[AllianceRegistry], bool], int]

# transposition table bounds
EXACT = "exact"
LOWER = "lower"
UPPER = "upper"


@dataclass
class SearchContext:
    """Who is searching, and under which rules."""

    player: int
    player_count: int
    config: RuleConfig
    alliances: Optional[AllianceRegistry] = None

    def mover(self, ply: int) -> int:
        return (self.player + ply) % self.player_count

    def friendly(self, other: int) -> bool:
        if other == self.player:
            return True
        return bool(
            self.config.alliances_enabled
            and self.alliances is not None
            and self.alliances.allied(self.player, other)
        )


class MoveStrategy(ABC):
    """Picks a column for an AI seat.

    Strategies never touch the board they are given; trial drops happen on
    a scratch copy. The returned ``(column, row)`` is where the counter would
    land on the live board.
    """

    @abstractmethod
    def select_move(
        self,
        board: Board,
        player: int,
        config: RuleConfig,
        rng: random.Random,
        player_count: int = 2,
        alliances: Optional[AllianceRegistry] = None,
    ) -> Move:
        raise NotImplementedError


class RandomStrategy(MoveStrategy):
    """Easy: uniformly random column, resampled until one has room."""

    def select_move(
        self,
        board: Board,
        player: int,
        config: RuleConfig,
        rng: random.Random,
        player_count: int = 2,
        alliances: Optional[AllianceRegistry] = None,
    ) -> Move:
        if not board.legal_columns():
            raise NoLegalMove("Board is full")
        while True:
            column = rng.randrange(board.width)
            row = board.landing_row(column)
            if row is not None:
                return column, row


class HeuristicStrategy(MoveStrategy):
    """Medium: take a winning column, else block an opponent's, else play randomly.

    Columns are tried left to right; for each one the win is tested first and
    then every opponent in turn order starting from the next seat. Allies are
    not blocked when alliances are on.
    """

    def __init__(self, fallback: Optional[MoveStrategy] = None) -> None:
        self.fallback = fallback or RandomStrategy()

    def select_move(
        self,
        board: Board,
        player: int,
        config: RuleConfig,
        rng: random.Random,
        player_count: int = 2,
        alliances: Optional[AllianceRegistry] = None,
    ) -> Move:
        ctx = SearchContext(player, player_count, config, alliances)
        opponents = [p for p in (ctx.mover(k) for k in range(1, player_count)) if not ctx.friendly(p)]

        for column in range(board.width):
            scratch = board.copy()
            row, ok = scratch.drop(column, player)
            if not ok:
                continue
            if RuleEngine.check_win(scratch, row, column, config, alliances):
                logger.debug("Player %d takes winning column %d", player, column)
                return column, row
            for opponent in opponents:
                scratch.remove(row, column)
                scratch.drop(column, opponent)
                if RuleEngine.check_win(scratch, row, column, config, alliances):
                    logger.debug("Player %d blocks player %d in column %d", player, opponent, column)
                    return column, row

        return self.fallback.select_move(board, player, config, rng, player_count, alliances)


@dataclass
class SearchResult:
    best_move: Optional[int]
    score: int
    nodes: int
    scored_moves: List[Tuple[int, int]] = field(default_factory=list)


class MinimaxStrategy(MoveStrategy):
    """Hard: depth-limited minimax with alpha-beta pruning.

    Plies follow the seat order from the searching player; seats friendly to
    the searcher maximise, everybody else minimises. With the default flat
    evaluator and no win detection every line scores the same, so the search
    settles on the leftmost playable column.
    """

    DEFAULT_DEPTH = 4

    def __init__(
        self,
        depth: int = DEFAULT_DEPTH,
        evaluate: Optional[EvaluateFn] = None,
        detect_wins: bool = False,
        use_table: bool = False,
        window: Tuple[int, int] = (-10000, 10000),
    ) -> None:
        self.depth = max(1, depth)
        self.evaluate: EvaluateFn = evaluate or Evaluator.baseline
        self.detect_wins = detect_wins
        self.use_table = use_table
        self.window = window
        # key: (cells, depth, seat to move) -> (score, bound)
        self.transposition_table: Dict[Tuple[object, int, int], Tuple[int, str]] = {}
        self.last_result: Optional[SearchResult] = None

    @classmethod
    def enhanced(cls, depth: int = DEFAULT_DEPTH) -> "MinimaxStrategy":
        """Positional evaluator, terminal wins and a transposition table."""
        return cls(
            depth=depth,
            evaluate=Evaluator.positional,
            detect_wins=True,
            use_table=True,
            window=(-10**9, 10**9),
        )

    def select_move(
        self,
        board: Board,
        player: int,
        config: RuleConfig,
        rng: random.Random,
        player_count: int = 2,
        alliances: Optional[AllianceRegistry] = None,
    ) -> Move:
        legal = board.legal_columns()
        if not legal:
            raise NoLegalMove("Board is full")

        ctx = SearchContext(player, player_count, config, alliances)
        self.transposition_table.clear()
        # Search on a copy so the live board is never touched
        search_board = board.copy()
        result = self._alphabeta_root(search_board, ctx)
        self.last_result = result

        column = result.best_move if result.best_move is not None else legal[0]
        logger.debug(
            "Minimax for player %d chose column %d (score %d, %d nodes)",
            player, column, result.score, result.nodes,
        )
        return column, board.landing_row(column)

    def _alphabeta_root(self, board: Board, ctx: SearchContext) -> SearchResult:
        alpha, beta = self.window
        best_move: Optional[int] = None
        nodes = 0
        scored_moves: List[Tuple[int, int]] = []

        for column in board.legal_columns():
            row, _ = board.drop(column, ctx.player)
            try:
                if self.detect_wins and RuleEngine.check_win(board, row, column, ctx.config, ctx.alliances):
                    score, sub_nodes = self._win_score(True, self.depth), 0
                else:
                    score, sub_nodes = self._alphabeta(board, self.depth - 1, alpha, beta, 1, ctx)
                nodes += sub_nodes + 1
            finally:
                board.remove(row, column)
            scored_moves.append((column, score))
            if score > alpha:
                alpha = score
                best_move = column

        return SearchResult(best_move=best_move, score=alpha, nodes=nodes, scored_moves=scored_moves)

    def _alphabeta(
        self,
        board: Board,
        depth: int,
        alpha: int,
        beta: int,
        ply: int,
        ctx: SearchContext,
    ) -> Tuple[int, int]:
        mover = ctx.mover(ply)
        key = (board.key(), depth, mover) if self.use_table else None
        alpha_orig, beta_orig = alpha, beta
        if key is not None and key in self.transposition_table:
            stored, bound = self.transposition_table[key]
            if (
                bound == EXACT
                or (bound == LOWER and stored >= beta)
                or (bound == UPPER and stored <= alpha)
            ):
                return stored, 0

        legal = board.legal_columns()
        if depth == 0 or not legal:
            last_friendly = ctx.friendly(ctx.mover(ply - 1))
            score = self.evaluate(board, ctx.player, ctx.config, ctx.alliances, last_friendly)
            if key is not None:
                self.transposition_table[key] = (score, EXACT)
            return score, 1

        maximizing = ctx.friendly(mover)
        low, high = self.window
        value = low if maximizing else high
        nodes = 0
        for column in legal:
            row, _ = board.drop(column, mover)
            try:
                if self.detect_wins and RuleEngine.check_win(board, row, column, ctx.config, ctx.alliances):
                    score, child_nodes = self._win_score(maximizing, depth), 0
                else:
                    score, child_nodes = self._alphabeta(board, depth - 1, alpha, beta, ply + 1, ctx)
                nodes += child_nodes + 1
            finally:
                board.remove(row, column)
            if maximizing:
                value = max(value, score)
                alpha = max(alpha, value)
            else:
                value = min(value, score)
                beta = min(beta, value)
            if alpha >= beta:
                break

        if key is not None:
            # a cutoff only proves a bound, not the node's value
            if value <= alpha_orig:
                bound = UPPER
            elif value >= beta_orig:
                bound = LOWER
            else:
                bound = EXACT
            self.transposition_table[key] = (value, bound)
        return value, nodes

    @staticmethod
    def _win_score(friendly: bool, depth: int) -> int:
        # sooner wins (more depth remaining) score higher
        score = Evaluator.WIN_SCORE + depth
        return score if friendly else -score


def strategy_for(player_type: PlayerType) -> MoveStrategy:
    if player_type is PlayerType.EASY_AI:
        return RandomStrategy()
    if player_type is PlayerType.MEDIUM_AI:
        return HeuristicStrategy()
    if player_type is PlayerType.HARD_AI:
        return MinimaxStrategy()
    raise ValueError(f"{player_type} is not an AI seat")
