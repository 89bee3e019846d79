from __future__ import annotations


class GameError(ValueError):
    """Base class for recoverable engine errors.

    None of these leave the game in a partially-updated state; the same seat
    can simply be prompted again.
    """


class InvalidColumn(GameError):
    def __init__(self, column: int, width: int) -> None:
        super().__init__(f"Invalid column {column}: board has columns 0..{width - 1}")
        self.column = column


class ColumnFull(GameError):
    def __init__(self, column: int) -> None:
        super().__init__(f"Column {column} is full")
        self.column = column


class BombAlreadyUsed(GameError):
    def __init__(self, player: int) -> None:
        super().__init__(f"Player {player + 1} has already used their bomb counter")
        self.player = player


class RuleDisabled(GameError):
    pass


class NotYourTurn(GameError):
    pass


class SeriesOver(GameError):
    pass


class NoLegalMove(GameError):
    pass


class InvalidSettings(GameError):
    pass


class AllianceConflict(InvalidSettings):
    pass
