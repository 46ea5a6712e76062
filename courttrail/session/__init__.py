"""
Session lifecycle: calibration, recording and hand-off of one trail.
"""

from courttrail.session.state import (
    SessionState,
    SessionResult,
    TrailSession,
    required_kinds,
)

__all__ = [
    "SessionState",
    "SessionResult",
    "TrailSession",
    "required_kinds",
]
