"""
Error and warning taxonomy for court trail sessions.

Only PreconditionViolation is raised to callers as an actionable error.
Sensor and transport anomalies degrade functionality instead: they are
reported with ``warnings.warn`` and the session keeps running.

    PreconditionViolation     invalid session state transition (raised)
    TransportError            channel failed to send a path (raised by the
                              channel, captured in the session result)
    SensorUnavailableWarning  motion capability missing at session start
    EmptyPayloadWarning       a received payload decoded to zero points

Malformed payload entries and noise-rejected motion samples are not
errors at all: they are dropped and counted.
"""


class PreconditionViolation(RuntimeError):
    """Raised when a session transition is requested from the wrong state."""


class TransportError(RuntimeError):
    """Raised by a trail channel when a path cannot be handed off."""


class SensorUnavailableWarning(RuntimeWarning):
    """Motion capability unavailable; the session runs without PDR points."""


class EmptyPayloadWarning(RuntimeWarning):
    """Received payload contained no usable points; nothing is published."""
