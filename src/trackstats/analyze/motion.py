# trackstats/analyze/motion.py
"""
Pause detection for a single track segment.
"""

from __future__ import annotations

# Below this average speed a segment is considered standing still.
DEFAULT_SPEED_THRESHOLD_MPS = 0.3
# Segments shorter than this are never pauses (sampling jitter).
DEFAULT_PAUSE_THRESHOLD_S = 5.0


def is_stationary(
        segment_distance_m: float,
        delta_s: float,
        speed_threshold_mps: float = DEFAULT_SPEED_THRESHOLD_MPS,
        pause_threshold_s: float = DEFAULT_PAUSE_THRESHOLD_S,
) -> bool:
    """Return True if the segment counts as a pause.

    The duration guard must run before the speed division: zero and
    negative deltas are always "moving".
    """
    if delta_s < pause_threshold_s or delta_s <= 0:
        return False
    return segment_distance_m / delta_s < speed_threshold_mps
