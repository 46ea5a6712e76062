"""
Court Session Examples

Runnable walkthroughs of a complete court session: calibrate, record a
walk, hand the trail across the loopback channel and bin it into a
heatmap grid.

Examples:
    - example_court_session.py: Replay a dataset (or an inline walk)
      through the full pipeline
"""

__all__ = []
