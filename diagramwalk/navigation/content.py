"""Position -> content lookup shared by both navigators."""

from __future__ import annotations

from typing import Dict, Generic, Hashable, Iterable, List, Mapping, TypeVar

from .errors import MissingContentError

P = TypeVar("P", bound=Hashable)
C = TypeVar("C")


class StepContentResolver(Generic[P, C]):
    """Maps a step index or node id to its content payload.

    Payloads are opaque: the resolver never inspects them. A lookup for an
    unregistered position is an authoring bug and raises
    ``MissingContentError`` instead of returning an empty payload.
    """

    def __init__(self, table: Mapping[P, C]) -> None:
        self._table: Dict[P, C] = dict(table)

    @classmethod
    def from_sequence(cls, items: Iterable[C]) -> "StepContentResolver[int, C]":
        return cls(dict(enumerate(items)))

    def resolve(self, position: P) -> C:
        try:
            return self._table[position]
        except (KeyError, TypeError):
            raise MissingContentError([position]) from None

    def require(self, positions: Iterable[P]) -> None:
        """Raise one MissingContentError naming every unregistered position."""
        missing: List[P] = [position for position in positions if position not in self]
        if missing:
            raise MissingContentError(missing)

    def positions(self) -> List[P]:
        return list(self._table)

    def __contains__(self, position: object) -> bool:
        try:
            return position in self._table
        except TypeError:
            return False

    def __len__(self) -> int:
        return len(self._table)
