"""Error taxonomy for the navigation engine."""

from __future__ import annotations

from typing import Hashable, Iterable, Optional, Tuple


class NavigationError(Exception):
    """Base class for navigation contract violations."""


class OutOfRangeError(NavigationError, IndexError):
    """An index fell outside the valid range for the requested operation."""

    def __init__(
        self, index: int, limit: int, what: str = "index", message: Optional[str] = None
    ) -> None:
        self.index = index
        self.limit = limit
        self.what = what
        super().__init__(message or f"{what} {index} out of range [0, {limit})")

    @property
    def valid_range(self) -> range:
        return range(self.limit)


class InvalidStateError(NavigationError):
    """The operation is not allowed in the current state."""

    def __init__(self, message: str, node_id: Optional[str] = None) -> None:
        self.node_id = node_id
        super().__init__(message)


class MissingContentError(NavigationError, LookupError):
    """No content is registered for one or more positions."""

    def __init__(self, positions: Iterable[Hashable]) -> None:
        self.positions: Tuple[Hashable, ...] = tuple(positions)
        listed = ", ".join(repr(position) for position in self.positions)
        super().__init__(f"No content registered for: {listed}")

    @property
    def position(self) -> Hashable:
        return self.positions[0]


class MalformedTreeError(NavigationError, ValueError):
    """The decision tree table is inconsistent."""

    def __init__(self, message: str, node_id: Optional[str] = None) -> None:
        self.node_id = node_id
        super().__init__(message)
