"""Player alliances.

Alliances are keyed by stable player names (``Player-1`` .. ``Player-N``)
rather than seat indices. During setup an :class:`AllianceDraftSession`
collects assignments; the finalized :class:`AllianceRegistry` is immutable and
is what the rules consult when checking for a winning line.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, List, Optional, Sequence, Tuple

from .errors import AllianceConflict

logger = logging.getLogger(__name__)


def player_name(index: int) -> str:
    return f"Player-{index + 1}"


@dataclass(frozen=True)
class Alliance:
    name: str
    members: FrozenSet[str]


class AllianceRegistry:
    """Immutable lookup of which players are allied.

    A player may belong to at most one alliance; anything else is rejected
    with :class:`AllianceConflict` when the registry is built.
    """

    def __init__(self, alliances: Iterable[Alliance] = (), player_count: Optional[int] = None) -> None:
        self._alliances: Tuple[Alliance, ...] = tuple(alliances)
        self._owner: Dict[str, str] = {}
        known = {player_name(i) for i in range(player_count)} if player_count is not None else None
        for alliance in self._alliances:
            for member in sorted(alliance.members):
                if known is not None and member not in known:
                    raise AllianceConflict(f"{alliance.name} lists unknown player {member}")
                if member in self._owner:
                    raise AllianceConflict(
                        f"{member} is in both {self._owner[member]} and {alliance.name}"
                    )
                self._owner[member] = alliance.name

    @classmethod
    def from_lists(
        cls, groups: Sequence[Sequence[str]], player_count: Optional[int] = None
    ) -> "AllianceRegistry":
        """Build from plain member lists, naming them ``Alliance-1``, ``Alliance-2``, ..."""
        alliances = []
        for i, members in enumerate(groups):
            if len(set(members)) != len(members):
                raise AllianceConflict(f"Alliance-{i + 1} lists a player more than once")
            alliances.append(Alliance(f"Alliance-{i + 1}", frozenset(members)))
        return cls(alliances, player_count=player_count)

    @property
    def alliances(self) -> Tuple[Alliance, ...]:
        return self._alliances

    def alliance_of(self, player: int) -> Optional[str]:
        return self._owner.get(player_name(player))

    def allied(self, first: int, second: int) -> bool:
        """True when two distinct, non-empty seats share an alliance."""
        if first < 0 or second < 0:
            return False
        name = self._owner.get(player_name(first))
        return name is not None and name == self._owner.get(player_name(second))

    def to_lists(self) -> List[List[str]]:
        return [sorted(a.members) for a in self._alliances]

    def __len__(self) -> int:
        return len(self._alliances)


class AllianceDraftSession:
    """Mutable alliance setup, owned by whichever flow is configuring a match."""

    def __init__(self, player_count: int) -> None:
        self.unassigned: List[str] = [player_name(i) for i in range(player_count)]
        self.alliances: Dict[str, List[str]] = {}
        self.player_count = player_count

    def add_alliance(self) -> str:
        name = f"Alliance-{len(self.alliances) + 1}"
        self.alliances[name] = []
        return name

    def assign(self, player: str, alliance: str) -> None:
        if alliance not in self.alliances:
            raise AllianceConflict(f"No alliance named {alliance}")
        if player not in self.unassigned:
            raise AllianceConflict(f"{player} is not unassigned")
        self.unassigned.remove(player)
        self.alliances[alliance].append(player)

    def unassign(self, player: str, alliance: str) -> None:
        members = self.alliances.get(alliance)
        if members is None or player not in members:
            raise AllianceConflict(f"{player} is not in {alliance}")
        members.remove(player)
        self.unassigned.append(player)

    def finalize(self) -> AllianceRegistry:
        registry = AllianceRegistry(
            (Alliance(name, frozenset(members)) for name, members in self.alliances.items() if members),
            player_count=self.player_count,
        )
        logger.info("Alliances confirmed: %s", registry.to_lists())
        return registry
