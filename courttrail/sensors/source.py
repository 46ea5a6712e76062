"""
Motion sample sources and cancellable subscriptions.

The hardware side (permissions, starting and stopping capture) lives outside
this package. A source only has to say whether a sample kind is available
and deliver samples of that kind to subscribed handlers until the returned
handle is cancelled.

Handlers are called on the source's delivery thread. They must not block.
"""

import threading
from abc import ABC, abstractmethod
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from courttrail.sensors.types import (
    DEVICE_MOTION,
    PEDOMETER,
    SAMPLE_KINDS,
    MotionSample,
)

SampleHandler = Callable[[MotionSample], None]


class SubscriptionHandle:
    """
    Cancellable registration returned by ``subscribe``/``on_receive``.

    ``cancel()`` is idempotent and thread-safe. Once it returns, the owner
    guarantees no further deliveries to the handler.
    """

    def __init__(self, on_cancel: Callable[[], None]):
        self._on_cancel = on_cancel
        self._lock = threading.Lock()
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        with self._lock:
            if self._cancelled:
                return
            self._cancelled = True
        self._on_cancel()


class MotionSampleSource(ABC):
    """Abstract delivery interface for motion samples."""

    @abstractmethod
    def is_available(self, kind: str) -> bool:
        """Return True if the capability for ``kind`` exists on this device."""

    @abstractmethod
    def subscribe(self, kind: str, handler: SampleHandler) -> SubscriptionHandle:
        """Register ``handler`` for samples of ``kind``."""


def classify_sample(sample: MotionSample) -> Tuple[str, ...]:
    """
    Return the delivery kinds a sample belongs to.

    A recorded sample carrying both attitude and distance fields is
    delivered once per kind, each handler reading only its own fields.
    """
    kinds = []
    if sample.has_device_motion:
        kinds.append(DEVICE_MOTION)
    if sample.has_distance:
        kinds.append(PEDOMETER)
    return tuple(kinds)


class ReplaySampleSource(MotionSampleSource):
    """
    In-memory source that replays a recorded sample list.

    Used by the example scripts and the tests in place of real hardware.
    ``replay()`` delivers synchronously on the calling thread; call it from
    a worker thread to emulate asynchronous delivery.

    Args:
        samples: Recorded samples, in delivery order.
        available: Kinds reported as available. Default: all kinds.

    Example:
        >>> src = ReplaySampleSource([MotionSample(yaw=0.0),
        ...                           MotionSample(cumulative_distance=1.0)])
        >>> seen = []
        >>> handle = src.subscribe('pedometer', seen.append)
        >>> src.replay()
        1
        >>> len(seen)
        1
    """

    def __init__(
        self,
        samples: Iterable[MotionSample] = (),
        available: Optional[Sequence[str]] = None,
    ):
        self._samples: List[MotionSample] = list(samples)
        self._available = set(SAMPLE_KINDS if available is None else available)
        unknown = self._available - set(SAMPLE_KINDS)
        if unknown:
            raise ValueError(f"Unknown sample kinds: {sorted(unknown)}")
        self._lock = threading.Lock()
        self._handlers: Dict[str, List[Tuple[SubscriptionHandle, SampleHandler]]] = {
            kind: [] for kind in SAMPLE_KINDS
        }

    def is_available(self, kind: str) -> bool:
        return kind in self._available

    def subscribe(self, kind: str, handler: SampleHandler) -> SubscriptionHandle:
        if kind not in SAMPLE_KINDS:
            raise ValueError(f"Unknown sample kind '{kind}'")
        if not self.is_available(kind):
            raise RuntimeError(f"Sample kind '{kind}' is not available")

        entry: List[Tuple[SubscriptionHandle, SampleHandler]] = []

        def _remove() -> None:
            with self._lock:
                if entry and entry[0] in self._handlers[kind]:
                    self._handlers[kind].remove(entry[0])

        handle = SubscriptionHandle(_remove)
        entry.append((handle, handler))
        with self._lock:
            self._handlers[kind].append(entry[0])
        return handle

    def subscriber_count(self, kind: Optional[str] = None) -> int:
        with self._lock:
            if kind is not None:
                return len(self._handlers[kind])
            return sum(len(h) for h in self._handlers.values())

    def push(self, sample: MotionSample) -> int:
        """Deliver one sample to the current subscribers; return deliveries made."""
        delivered = 0
        for kind in classify_sample(sample):
            with self._lock:
                targets = list(self._handlers[kind])
            for handle, handler in targets:
                if handle.cancelled:
                    continue
                handler(sample)
                delivered += 1
        return delivered

    def replay(self) -> int:
        """Deliver every recorded sample in order; return deliveries made."""
        return sum(self.push(sample) for sample in self._samples)
