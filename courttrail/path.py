"""
Path store: the append-only trail of court-frame positions for one session.

Invariants:
    - The first element is always the origin (0, 0).
    - While a session is active only the dead-reckoning engine appends.
    - reset() restores [(0, 0)] and is called exactly once per session start.
    - After freeze() the path is immutable until the next reset().

Readers never see a half-applied update: every mutation and every
snapshot() is taken under the same lock.
"""

import threading
from typing import Iterator, NamedTuple, Tuple

import numpy as np


class Position(NamedTuple):
    """2D court-frame position. Units: m."""

    x: float
    y: float


ORIGIN = Position(0.0, 0.0)


class PathStore:
    """
    Thread-safe, append-only sequence of positions.

    Example:
        >>> path = PathStore()
        >>> path.append(Position(0.0, 1.0))
        >>> path.snapshot()
        (Position(x=0.0, y=0.0), Position(x=0.0, y=1.0))
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._points = [ORIGIN]
        self._frozen = False

    def reset(self) -> None:
        """Restore [(0, 0)] and make the path writable again."""
        with self._lock:
            self._points = [ORIGIN]
            self._frozen = False

    def append(self, position: Position) -> None:
        """
        Append one position.

        Raises:
            RuntimeError: If the path has been frozen. A late sample must
                          never mutate a path that was already handed off.
        """
        with self._lock:
            if self._frozen:
                raise RuntimeError("Cannot append to a frozen path")
            self._points.append(Position(float(position[0]), float(position[1])))

    def freeze(self) -> Tuple[Position, ...]:
        """Mark the path immutable and return its final contents."""
        with self._lock:
            self._frozen = True
            return tuple(self._points)

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def last(self) -> Position:
        with self._lock:
            return self._points[-1]

    def snapshot(self) -> Tuple[Position, ...]:
        with self._lock:
            return tuple(self._points)

    def to_array(self) -> np.ndarray:
        """Positions as an (N, 2) float array."""
        return np.array(self.snapshot(), dtype=float).reshape(-1, 2)

    def __len__(self) -> int:
        with self._lock:
            return len(self._points)

    def __iter__(self) -> Iterator[Position]:
        return iter(self.snapshot())

    def __repr__(self) -> str:
        state = "frozen" if self._frozen else "open"
        return f"PathStore(n_points={len(self)}, {state})"
