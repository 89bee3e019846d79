from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from .board import MAX_SIZE, MIN_SIZE
from .errors import InvalidSettings

MIN_WIN_LENGTH = 4
MAX_WIN_LENGTH = 10
MAX_PLAYERS = 10

_TRUE_WORDS = {"true", "1", "yes", "on"}
_FALSE_WORDS = {"false", "0", "no", "off", ""}


def _flag(data: Mapping[str, Any], key: str) -> bool:
    """Read a rule switch that may arrive as a JSON bool, a number or a form string."""
    value = data.get(key, False)
    if value is None or isinstance(value, bool):
        return bool(value)
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_WORDS:
            return True
        if text in _FALSE_WORDS:
            return False
    raise InvalidSettings(f"{key} must be true or false, got {value!r}")


class PlayerType(Enum):
    HUMAN = "human"
    EASY_AI = "easy"
    MEDIUM_AI = "medium"
    HARD_AI = "hard"

    @property
    def is_ai(self) -> bool:
        return self is not PlayerType.HUMAN

    @classmethod
    def from_label(cls, label: Any) -> "PlayerType":
        """Resolve a menu label ("Easy AI", "Person", "HARD_AI", "medium") to a member."""
        if isinstance(label, PlayerType):
            return label
        text = str(label).strip().lower().replace("_", " ").replace("-", " ")
        aliases = {
            "person": cls.HUMAN,
            "human": cls.HUMAN,
            "easy": cls.EASY_AI,
            "easy ai": cls.EASY_AI,
            "medium": cls.MEDIUM_AI,
            "medium ai": cls.MEDIUM_AI,
            "hard": cls.HARD_AI,
            "hard ai": cls.HARD_AI,
        }
        try:
            return aliases[text]
        except KeyError:
            raise InvalidSettings(f"Unknown player type: {label!r}") from None


@dataclass(frozen=True)
class RuleConfig:
    """Rule switches for a match. Fixed for the lifetime of a series."""

    win_length: int = 4
    corner_bonus_enabled: bool = False
    solitaire_rule_enabled: bool = False
    bomb_counter_enabled: bool = False
    overflow_rule_enabled: bool = False
    alliances_enabled: bool = False
    ai_for_missing_players: bool = False

    def __post_init__(self) -> None:
        if not MIN_WIN_LENGTH <= self.win_length <= MAX_WIN_LENGTH:
            raise InvalidSettings(
                f"Line length to win must be {MIN_WIN_LENGTH}-{MAX_WIN_LENGTH}, got {self.win_length}"
            )

    @property
    def corner_bonus_points(self) -> int:
        return 3 if self.win_length >= 7 else 2

    def to_dict(self) -> Dict[str, Any]:
        return {
            "win_length": self.win_length,
            "corner_bonus": self.corner_bonus_enabled,
            "solitaire_rule": self.solitaire_rule_enabled,
            "bomb_counter": self.bomb_counter_enabled,
            "overflow_rule": self.overflow_rule_enabled,
            "alliances_enabled": self.alliances_enabled,
            "ai_for_missing": self.ai_for_missing_players,
        }


@dataclass(frozen=True)
class GameSettings:
    width: int = 6
    height: int = 6
    player_count: int = 1
    best_of: int = 1
    round_counter: int = 0
    player_types: Tuple[PlayerType, ...] = ()
    rules: RuleConfig = field(default_factory=RuleConfig)
    alliances: Tuple[Tuple[str, ...], ...] = ()

    def __post_init__(self) -> None:
        for name, value in (("width", self.width), ("height", self.height)):
            if not MIN_SIZE <= value <= MAX_SIZE:
                raise InvalidSettings(f"Grid {name} must be {MIN_SIZE}-{MAX_SIZE}, got {value}")
        if not 1 <= self.player_count <= MAX_PLAYERS:
            raise InvalidSettings(f"Number of players must be 1-{MAX_PLAYERS}, got {self.player_count}")
        if self.best_of < 1 or self.best_of % 2 == 0:
            raise InvalidSettings(f"Best-of must be a positive odd number, got {self.best_of}")
        if not 0 <= self.round_counter < self.best_of:
            raise InvalidSettings(
                f"Round counter must be in 0..{self.best_of - 1}, got {self.round_counter}"
            )
        if len(self.player_types) > self.player_count:
            raise InvalidSettings(
                f"Got {len(self.player_types)} player types for {self.player_count} players"
            )
        # frozen: normalise through object.__setattr__
        object.__setattr__(
            self, "player_types", tuple(PlayerType.from_label(t) for t in self.player_types)
        )
        object.__setattr__(self, "alliances", tuple(tuple(a) for a in self.alliances))

    def seat_types(self) -> List[PlayerType]:
        """One type per seat, filling seats nobody configured."""
        filler = PlayerType.EASY_AI if self.rules.ai_for_missing_players else PlayerType.HUMAN
        types = list(self.player_types)
        types.extend([filler] * (self.player_count - len(types)))
        return types

    @classmethod
    def from_dict(cls, payload: Optional[Mapping[str, Any]]) -> "GameSettings":
        """Build settings from a JSON-style mapping, e.g. a request body."""
        data = dict(payload or {})
        try:
            rules = RuleConfig(
                win_length=int(data.get("win_length", 4)),
                corner_bonus_enabled=_flag(data, "corner_bonus"),
                solitaire_rule_enabled=_flag(data, "solitaire_rule"),
                bomb_counter_enabled=_flag(data, "bomb_counter"),
                overflow_rule_enabled=_flag(data, "overflow_rule"),
                alliances_enabled=_flag(data, "alliances_enabled"),
                ai_for_missing_players=_flag(data, "ai_for_missing"),
            )
            player_types: Sequence[Any] = data.get("player_types") or ()
            return cls(
                width=int(data.get("width", 6)),
                height=int(data.get("height", 6)),
                player_count=int(data.get("players", 1)),
                best_of=int(data.get("best_of", 1)),
                round_counter=int(data.get("round_counter", 0)),
                player_types=tuple(player_types),
                rules=rules,
                alliances=tuple(tuple(a) for a in data.get("alliances") or ()),
            )
        except InvalidSettings:
            raise
        except (TypeError, ValueError) as exc:
            raise InvalidSettings(f"Malformed settings: {exc}") from exc
