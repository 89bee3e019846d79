"""Connection-game engine: boards, rules, AI opponents, and best-of series.

Modules:
- board: Grid of counters with gravity drops
- rules: Win detection and the special rules (corner bonus, solitaire, bomb, overflow)
- alliances: Alliance setup and lookup
- evaluator: Static evaluation functions for the minimax search
- ai: Random, heuristic, and minimax move strategies
- game: Round and series controller
"""

from .board import Board, EMPTY
from .config import GameSettings, PlayerType, RuleConfig
from .alliances import Alliance, AllianceDraftSession, AllianceRegistry
from .rules import CornerBonus, RuleEngine
from .evaluator import Evaluator
from .ai import HeuristicStrategy, MinimaxStrategy, MoveStrategy, RandomStrategy, strategy_for
from .game import Game, MatchPhase, MoveOutcome, RoundResult, new_game
from .errors import (
    AllianceConflict,
    BombAlreadyUsed,
    ColumnFull,
    GameError,
    InvalidColumn,
    InvalidSettings,
    NoLegalMove,
    NotYourTurn,
    RuleDisabled,
    SeriesOver,
)

__all__ = [
    "Board",
    "EMPTY",
    "GameSettings",
    "PlayerType",
    "RuleConfig",
    "Alliance",
    "AllianceDraftSession",
    "AllianceRegistry",
    "CornerBonus",
    "RuleEngine",
    "Evaluator",
    "HeuristicStrategy",
    "MinimaxStrategy",
    "MoveStrategy",
    "RandomStrategy",
    "strategy_for",
    "Game",
    "MatchPhase",
    "MoveOutcome",
    "RoundResult",
    "new_game",
    "AllianceConflict",
    "BombAlreadyUsed",
    "ColumnFull",
    "GameError",
    "InvalidColumn",
    "InvalidSettings",
    "NoLegalMove",
    "NotYourTurn",
    "RuleDisabled",
    "SeriesOver",
]
