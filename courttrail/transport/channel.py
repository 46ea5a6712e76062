"""
Cross-device trail channel.

The physical delivery mechanism is external. This module only defines the
narrow service the session and the receiving side depend on:

    send(path)            hand a finished path off, or raise TransportError
    on_receive(callback)  register for incoming payloads; returns a
                          cancellable SubscriptionHandle

Delivery is best-effort: payloads may be duplicated or arrive out of order,
so receivers treat every payload as a complete, self-contained trail.

LoopbackChannel delivers within one process and stands in for the real
device link in the example script and the tests.
"""

import json
import threading
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from courttrail.errors import TransportError
from courttrail.path import Position
from courttrail.sensors.source import SubscriptionHandle
from courttrail.transport.codec import decode_payload, encode_path

PayloadCallback = Callable[[Dict[str, Any]], None]


class TrailChannel(ABC):
    """Abstract transport for finished trails."""

    @abstractmethod
    def send(self, path: Sequence[Position]) -> None:
        """Send ``path``; raise TransportError if it cannot be handed off."""

    @abstractmethod
    def on_receive(self, callback: PayloadCallback) -> SubscriptionHandle:
        """Register ``callback`` for incoming payloads."""


class LoopbackChannel(TrailChannel):
    """
    In-process channel that echoes sent payloads to its own receivers.

    The payload goes through a JSON round trip, so receivers get a fresh
    object just as they would from a real link. The channel must be
    activated before sending, like a device session that has to finish
    activation before it accepts transfers.

    Example:
        >>> channel = LoopbackChannel()
        >>> received = []
        >>> handle = channel.on_receive(received.append)
        >>> channel.activate()
        >>> channel.send([Position(0.0, 0.0)])
        >>> received[0]["workoutPath"]
        [{'x': 0.0, 'y': 0.0}]
    """

    def __init__(self, stamp_end_time: bool = True):
        self.stamp_end_time = stamp_end_time
        self._lock = threading.Lock()
        self._active = False
        self._callbacks: List[Tuple[SubscriptionHandle, PayloadCallback]] = []
        self.sent_count = 0

    @property
    def active(self) -> bool:
        return self._active

    def activate(self) -> None:
        with self._lock:
            self._active = True

    def deactivate(self) -> None:
        with self._lock:
            self._active = False

    def send(self, path: Sequence[Position]) -> None:
        end_time = datetime.now(timezone.utc) if self.stamp_end_time else None
        wire = json.dumps(encode_path(path, end_time=end_time))
        with self._lock:
            if not self._active:
                raise TransportError("Channel is not active; transfer cancelled")
            self.sent_count += 1
            targets = list(self._callbacks)
        for handle, callback in targets:
            if not handle.cancelled:
                callback(json.loads(wire))

    def on_receive(self, callback: PayloadCallback) -> SubscriptionHandle:
        entry: List[Tuple[SubscriptionHandle, PayloadCallback]] = []

        def _remove() -> None:
            with self._lock:
                if entry and entry[0] in self._callbacks:
                    self._callbacks.remove(entry[0])

        handle = SubscriptionHandle(_remove)
        entry.append((handle, callback))
        with self._lock:
            self._callbacks.append(entry[0])
        return handle


class TrailReceiver:
    """
    Receiving side: decode payloads into the "received trail".

    The received trail is a separate object from any local session path,
    so decoding never races with a local engine. Only non-empty results are
    published to ``on_path``.

    Args:
        channel: Channel to listen on.
        on_path: Optional callback taking the decoded positions.
    """

    def __init__(
        self,
        channel: TrailChannel,
        on_path: Optional[Callable[[Tuple[Position, ...]], None]] = None,
    ):
        self._lock = threading.Lock()
        self._latest: Tuple[Position, ...] = ()
        self.on_path = on_path
        self.received_count = 0
        self.published_count = 0
        self._handle = channel.on_receive(self.handle_payload)

    @property
    def latest(self) -> Tuple[Position, ...]:
        """Most recently published trail (empty before the first one)."""
        with self._lock:
            return self._latest

    def handle_payload(self, payload: Any) -> Tuple[Position, ...]:
        points = tuple(decode_payload(payload))
        with self._lock:
            self.received_count += 1
            if not points:
                return points
            self._latest = points
            self.published_count += 1
        if self.on_path is not None:
            self.on_path(points)
        return points

    def close(self) -> None:
        self._handle.cancel()
