from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .ai import MoveStrategy, strategy_for
from .alliances import AllianceRegistry
from .board import Board
from .config import GameSettings, PlayerType, RuleConfig
from .errors import BombAlreadyUsed, ColumnFull, InvalidColumn, NotYourTurn, RuleDisabled, SeriesOver
from .rules import OVERFLOW_MIN_HEIGHT, CornerBonus, RuleEngine

logger = logging.getLogger(__name__)

DRAW = 0


class MatchPhase(Enum):
    """Result of the last move.

    ``ROUND_WON`` and ``ROUND_DRAW`` hold until the next move; by then the
    following round's board is already set up and waiting.
    """

    AWAITING_MOVE = "awaiting_move"
    ROUND_WON = "round_won"
    ROUND_DRAW = "round_draw"
    SERIES_COMPLETE = "series_complete"


@dataclass
class MoveOutcome:
    player: int
    column: int
    applied_row: Optional[int]
    corner_bonus: Optional[CornerBonus] = None
    solitaire_removed: List[Tuple[int, int]] = field(default_factory=list)
    overflow_spill: List[Tuple[int, int]] = field(default_factory=list)
    bomb_cleared: List[Tuple[int, int]] = field(default_factory=list)
    winner: Optional[int] = None
    is_draw: bool = False
    series_complete: bool = False

    @property
    def corner_bonus_fired(self) -> bool:
        return self.corner_bonus is not None

    @property
    def overflow_spill_columns(self) -> List[int]:
        return [column for _, column in self.overflow_spill]

    @property
    def round_over(self) -> bool:
        return self.winner is not None or self.is_draw

    def to_dict(self) -> Dict[str, Any]:
        return {
            "player": self.player,
            "column": self.column,
            "applied_row": self.applied_row,
            "corner_bonus": self.corner_bonus.points if self.corner_bonus else None,
            "solitaire_removed": [list(c) for c in self.solitaire_removed],
            "overflow_spill_columns": self.overflow_spill_columns,
            "bomb_cleared": [list(c) for c in self.bomb_cleared],
            "winner": self.winner,
            "is_draw": self.is_draw,
            "series_complete": self.series_complete,
        }


@dataclass(frozen=True)
class RoundResult:
    winner: Optional[int]
    board: Board

    @property
    def is_draw(self) -> bool:
        return self.winner is None

    @property
    def record(self) -> int:
        """Leaderboard form: 0 for a draw, otherwise the 1-based player number."""
        return DRAW if self.winner is None else self.winner + 1


class Game:
    """Drives a best-of-N series of rounds.

    This class owns the live board for the current round and applies moves
    through the rule hooks in a fixed order: drop, corner bonus, solitaire,
    overflow, then win/draw. Every move is validated before the board is
    touched, so a rejected move leaves the game exactly as it was.
    """

    def __init__(
        self,
        settings: GameSettings,
        alliances: Optional[AllianceRegistry] = None,
        rng: Optional[random.Random] = None,
        strategies: Optional[Dict[int, MoveStrategy]] = None,
    ) -> None:
        self.settings = settings
        self.rules: RuleConfig = settings.rules
        if alliances is None:
            alliances = AllianceRegistry.from_lists(settings.alliances, player_count=settings.player_count)
        self.alliances = alliances
        self.player_types: List[PlayerType] = settings.seat_types()
        self.rng = rng or random.Random()
        self.strategies: Dict[int, MoveStrategy] = {
            seat: strategy_for(kind) for seat, kind in enumerate(self.player_types) if kind.is_ai
        }
        if strategies:
            self.strategies.update(strategies)

        self.round_count = settings.round_counter
        self.history: List[RoundResult] = []
        self.phase = MatchPhase.AWAITING_MOVE
        self._start_round()

    @property
    def player_count(self) -> int:
        return self.settings.player_count

    @property
    def best_of(self) -> int:
        return self.settings.best_of

    @property
    def series_complete(self) -> bool:
        return self.phase is MatchPhase.SERIES_COMPLETE

    def _start_round(self) -> None:
        self.board = Board(self.settings.width, self.settings.height)
        self.current_turn = 0
        self.bombs_used: List[bool] = [False] * self.player_count
        logger.debug("Round %d of %d started", self.round_count + 1, self.best_of)

    def is_ai_turn(self) -> bool:
        return not self.series_complete and self.player_types[self.current_turn].is_ai

    def require_human_turn(self) -> None:
        if self.is_ai_turn():
            raise NotYourTurn(f"It is Player {self.current_turn + 1}'s (AI) turn")

    def _check_playable(self, column: int) -> None:
        if self.series_complete:
            raise SeriesOver("The series is over")
        if not 0 <= column < self.board.width:
            raise InvalidColumn(column, self.board.width)

    def _overflow_redirect(self, column: int) -> bool:
        """Whether a drop into full ``column`` would spill into a neighbour."""
        if not self.rules.overflow_rule_enabled or self.board.height < OVERFLOW_MIN_HEIGHT:
            return False
        return any(
            0 <= n < self.board.width and not self.board.column_full(n) for n in (column - 1, column + 1)
        )

    def drop_at(self, column: int) -> MoveOutcome:
        """Play the current seat's counter into ``column``."""
        self._check_playable(column)
        player = self.current_turn

        if self.board.column_full(column):
            if not self._overflow_redirect(column):
                raise ColumnFull(column)
            outcome = MoveOutcome(player=player, column=column, applied_row=None)
            outcome.overflow_spill = RuleEngine.check_overflow(self.board, column, player, self.rules)
            return self._finish_move(outcome, outcome.overflow_spill)

        row, _ = self.board.drop(column, player)
        outcome = MoveOutcome(player=player, column=column, applied_row=row)
        outcome.corner_bonus = RuleEngine.check_corner_bonus(self.board, row, column, self.rules)
        outcome.solitaire_removed = RuleEngine.check_solitaire(self.board, self.rules)
        landed = _follow_collapses((row, column), outcome.solitaire_removed)
        outcome.overflow_spill = RuleEngine.check_overflow(self.board, column, player, self.rules)
        placed = ([landed] if landed is not None else []) + outcome.overflow_spill
        return self._finish_move(outcome, placed)

    def use_bomb(self, column: int) -> MoveOutcome:
        """Drop the current seat's bomb counter into ``column`` and detonate it."""
        if not self.rules.bomb_counter_enabled:
            raise RuleDisabled("The bomb counter rule is not enabled")
        self._check_playable(column)
        player = self.current_turn
        if self.bombs_used[player]:
            raise BombAlreadyUsed(player)
        if self.board.column_full(column):
            raise ColumnFull(column)

        row, _ = self.board.drop(column, player)
        outcome = MoveOutcome(player=player, column=column, applied_row=row)
        outcome.bomb_cleared = RuleEngine.use_bomb_counter(self.board, row, column, self.rules)
        self.bombs_used[player] = True
        # the landing cell is always cleared, so a bomb can neither win nor fill the board;
        # the bomber keeps the turn and still makes a normal drop
        self.phase = MatchPhase.AWAITING_MOVE
        return outcome

    def _finish_move(self, outcome: MoveOutcome, placed: Sequence[Tuple[int, int]]) -> MoveOutcome:
        winner = self._find_winner(placed)
        if winner is not None:
            outcome.winner = winner
            self.phase = MatchPhase.ROUND_WON
            logger.info("Player %d wins round %d", winner + 1, self.round_count + 1)
            self._end_round(winner)
        elif RuleEngine.is_draw(self.board, won=False):
            outcome.is_draw = True
            self.phase = MatchPhase.ROUND_DRAW
            logger.info("Round %d is a draw", self.round_count + 1)
            self._end_round(None)
        else:
            self._advance_turn()
        outcome.series_complete = self.series_complete
        return outcome

    def _find_winner(self, placed: Sequence[Tuple[int, int]]) -> Optional[int]:
        for row, column in placed:
            owner = self.board.cell(row, column)
            if owner < 0:
                continue
            if RuleEngine.check_win(self.board, row, column, self.rules, self.alliances):
                return owner
        return None

    def _advance_turn(self) -> None:
        self.current_turn = (self.current_turn + 1) % self.player_count
        self.phase = MatchPhase.AWAITING_MOVE

    def _end_round(self, winner: Optional[int]) -> None:
        self.history.append(RoundResult(winner=winner, board=self.board.snapshot()))
        self.round_count += 1
        if self.round_count < self.best_of:
            self._start_round()
        else:
            self.phase = MatchPhase.SERIES_COMPLETE
            logger.info("Series complete: %s", self.winners())

    def ai_move(self) -> MoveOutcome:
        """Let the AI in the current seat choose and play its column."""
        if not self.is_ai_turn():
            raise NotYourTurn(f"Player {self.current_turn + 1} is not an AI seat")
        strategy = self.strategies[self.current_turn]
        column, _ = strategy.select_move(
            self.board,
            self.current_turn,
            self.rules,
            self.rng,
            player_count=self.player_count,
            alliances=self.alliances,
        )
        return self.drop_at(column)

    def play_ai_turns(self, max_moves: Optional[int] = None) -> List[MoveOutcome]:
        """Play AI seats until a human is to move, the series ends, or ``max_moves`` is hit."""
        outcomes: List[MoveOutcome] = []
        while self.is_ai_turn() and (max_moves is None or len(outcomes) < max_moves):
            outcomes.append(self.ai_move())
        return outcomes

    def winners(self) -> List[int]:
        return [result.record for result in self.history]

    def standings(self) -> List[Tuple[int, int]]:
        """``(player number, rounds won)`` ordered by wins, most first."""
        wins: Dict[int, int] = {}
        for record in self.winners():
            if record != DRAW:
                wins[record] = wins.get(record, 0) + 1
        return sorted(wins.items(), key=lambda item: (-item[1], item[0]))

    def snapshot(self) -> Dict[str, object]:
        return {
            "board": self.board.to_rows(),
            "width": self.board.width,
            "height": self.board.height,
            "turn": self.current_turn,
            "player_types": [kind.value for kind in self.player_types],
            "rules": self.rules.to_dict(),
            "alliances": self.alliances.to_lists(),
            "phase": self.phase.value,
            "round": self.round_count,
            "best_of": self.best_of,
            "winners": self.winners(),
            "bombs_used": list(self.bombs_used),
            "series_complete": self.series_complete,
        }


def _follow_collapses(
    cell: Tuple[int, int], removed: Sequence[Tuple[int, int]]
) -> Optional[Tuple[int, int]]:
    """Where the counter at ``cell`` ends up after ``removed`` collapse in order, or None."""
    row, column = cell
    for r, c in removed:
        if c != column or r < row:
            continue
        if r == row:
            return None
        row += 1
    return row, column


def new_game(
    width: int,
    height: int,
    player_count: int,
    win_length: int,
    round_counter: int = 0,
    best_of: int = 1,
    player_types: Sequence[Any] = (),
    ai_for_missing: bool = False,
    corner_bonus: bool = False,
    solitaire_rule: bool = False,
    bomb_counter: bool = False,
    overflow_rule: bool = False,
    alliances_enabled: bool = False,
    alliances: Sequence[Sequence[str]] = (),
    rng: Optional[random.Random] = None,
) -> Game:
    rules = RuleConfig(
        win_length=win_length,
        corner_bonus_enabled=corner_bonus,
        solitaire_rule_enabled=solitaire_rule,
        bomb_counter_enabled=bomb_counter,
        overflow_rule_enabled=overflow_rule,
        alliances_enabled=alliances_enabled,
        ai_for_missing_players=ai_for_missing,
    )
    settings = GameSettings(
        width=width,
        height=height,
        player_count=player_count,
        best_of=best_of,
        round_counter=round_counter,
        player_types=tuple(player_types),
        rules=rules,
        alliances=tuple(tuple(a) for a in alliances),
    )
    return Game(settings, rng=rng)
