"""Linear step-through navigation with a history stack."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
from typing import Any, Optional, Tuple

from .content import StepContentResolver
from .errors import OutOfRangeError

logger = logging.getLogger(__name__)


class StepStatus(Enum):
    COMPLETED = "completed"
    CURRENT = "current"
    UPCOMING = "upcoming"


@dataclass(frozen=True)
class HistoryStack:
    """Visited step indices; the last entry is the current step."""

    entries: Tuple[int, ...]

    def __post_init__(self) -> None:
        if not self.entries:
            raise ValueError("HistoryStack cannot be empty")

    @classmethod
    def starting_at(cls, index: int) -> "HistoryStack":
        return cls((index,))

    @property
    def top(self) -> int:
        return self.entries[-1]

    @property
    def bottom(self) -> int:
        return self.entries[0]

    def push(self, index: int) -> "HistoryStack":
        return HistoryStack(self.entries + (index,))

    def pop(self) -> "HistoryStack":
        if len(self.entries) == 1:
            return self
        return HistoryStack(self.entries[:-1])

    def __len__(self) -> int:
        return len(self.entries)


def _check_index(index: Any, length: int, what: str = "step") -> int:
    if isinstance(index, bool) or not isinstance(index, int):
        raise TypeError(f"{what} index must be an int, got {type(index).__name__}")
    if index < 0 or index >= length:
        raise OutOfRangeError(index, length, what=what)
    return index


class LinearStepper:
    """Cursor into a fixed-length sequence of steps.

    ``advance`` and ``jump_to`` push onto the history stack, ``retreat`` pops
    it. A backward jump still pushes, so retreating right after a jump returns
    to wherever the learner was before the jump.
    """

    def __init__(
        self,
        length: int,
        start: int = 0,
        content: Optional[StepContentResolver] = None,
    ) -> None:
        if isinstance(length, bool) or not isinstance(length, int):
            raise TypeError("length must be an int")
        if length < 1:
            raise OutOfRangeError(
                length, 1, what="length", message=f"length must be at least 1, got {length}"
            )
        self._length = length
        self._start = _check_index(start, length, what="start")
        self._content = content
        self._accept(self._start)
        self._history = HistoryStack.starting_at(self._start)

    @property
    def length(self) -> int:
        return self._length

    @property
    def start(self) -> int:
        return self._start

    @property
    def history(self) -> Tuple[int, ...]:
        return self._history.entries

    @property
    def at_start(self) -> bool:
        return self.current() == 0

    @property
    def at_end(self) -> bool:
        return self.current() == self._length - 1

    @property
    def can_retreat(self) -> bool:
        return len(self._history) > 1

    def current(self) -> int:
        return self._history.top

    def advance(self) -> int:
        current = self.current()
        if current >= self._length - 1:
            return current
        self._move(self._history.push(current + 1))
        return self.current()

    def retreat(self) -> int:
        if not self.can_retreat:
            return self.current()
        self._move(self._history.pop())
        return self.current()

    def jump_to(self, index: int) -> int:
        _check_index(index, self._length)
        self._move(self._history.push(index))
        return self.current()

    def reset(self) -> int:
        self._move(HistoryStack.starting_at(self._start))
        return self.current()

    def status(self, index: int) -> StepStatus:
        _check_index(index, self._length)
        current = self.current()
        if index < current:
            return StepStatus.COMPLETED
        if index == current:
            return StepStatus.CURRENT
        return StepStatus.UPCOMING

    def progress(self) -> float:
        return (self.current() + 1) / self._length

    def _accept(self, index: int) -> None:
        if self._content is not None:
            self._content.resolve(index)

    def _move(self, history: HistoryStack) -> None:
        self._accept(history.top)
        previous = self._history.top
        self._history = history
        logger.debug("step %s -> %s (history depth %s)", previous, history.top, len(history))

    def __repr__(self) -> str:
        return f"LinearStepper(length={self._length}, current={self.current()})"
