# trackstats/analyze/track.py
"""
Track analysis functions for trackstats

A track is folded pairwise into a Summary. The fold state lives in an
immutable accumulator that is rebuilt on every segment, so concurrent
calls on different tracks share nothing.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Iterable, Iterator, Optional

from trackstats.analyze.distance import EARTH_RADIUS_M, segment_distance_m
from trackstats.analyze.motion import (
    DEFAULT_PAUSE_THRESHOLD_S,
    DEFAULT_SPEED_THRESHOLD_MPS,
    is_stationary,
)
from trackstats.config import AnalysisSettings
from trackstats.errors import InsufficientDataError, NonMonotonicTimestampError
from trackstats.formats.gpx import load_points
from trackstats.models import Point, Split, Summary

SPLIT_DISTANCE_M = 1000.0


@dataclass(frozen=True)
class _Accumulator:
    moving_distance_m: float = 0.0
    moving_time_s: float = 0.0
    paused_time_s: float = 0.0
    pause_count: int = 0
    last_split_km: int = 0
    split_start_ms: float = 0.0
    splits: tuple[Split, ...] = ()


def iter_segments(
        points: list[Point], *, earth_radius_m: float = EARTH_RADIUS_M,
) -> Iterator[tuple[Point, Point, float, float]]:
    """Yield (p0, p1, distance m, dt s) for each consecutive pair of points."""
    for p0, p1 in zip(points, points[1:]):
        d_m = segment_distance_m(p0, p1, earth_radius_m=earth_radius_m)
        dt_s = (p1.timestamp_ms - p0.timestamp_ms) / 1000.0
        yield p0, p1, d_m, dt_s


def check_timestamps(points: list[Point]) -> None:
    """Raise NonMonotonicTimestampError at the first point that goes back in time."""
    for i, (p0, p1) in enumerate(zip(points, points[1:]), start=1):
        if p1.timestamp_ms < p0.timestamp_ms:
            raise NonMonotonicTimestampError(
                f"point {i} at {p1.timestamp_ms} ms precedes point {i - 1} "
                f"at {p0.timestamp_ms} ms"
            )


def _close_splits(acc: _Accumulator, end_ms: int, segment_m: float, delta_s: float) -> _Accumulator:
    """Emit one Split per kilometer boundary crossed by the segment ending at `end_ms`.

    Boundary crossing times are interpolated linearly inside the segment.
    Every split ends at its boundary's crossing time except the last one in
    the segment, which ends at `end_ms`. The next split starts at the last
    crossing time. A zero-length segment collapses all crossings to `end_ms`.
    """
    km_now = math.floor(acc.moving_distance_m / SPLIT_DISTANCE_M)
    if km_now <= acc.last_split_km:
        return acc

    ms_per_m = delta_s * 1000.0 / segment_m if segment_m > 0 else 0.0

    def crossed_at(km: int) -> float:
        overshoot_m = acc.moving_distance_m - km * SPLIT_DISTANCE_M
        return end_ms - overshoot_m * ms_per_m

    splits = list(acc.splits)
    start_ms = acc.split_start_ms
    for km in range(acc.last_split_km + 1, km_now + 1):
        stop_ms = end_ms if km == km_now else crossed_at(km)
        splits.append(Split(km_index=km, duration_s=(stop_ms - start_ms) / 1000.0))
        start_ms = crossed_at(km)

    return replace(acc, last_split_km=km_now, split_start_ms=start_ms, splits=tuple(splits))


def _fold_segment(
        acc: _Accumulator, end_ms: int, segment_m: float, delta_s: float, *,
        speed_threshold_mps: float, pause_threshold_s: float,
) -> _Accumulator:
    if is_stationary(segment_m, delta_s, speed_threshold_mps, pause_threshold_s):
        return replace(
            acc,
            pause_count=acc.pause_count + 1,
            paused_time_s=acc.paused_time_s + delta_s,
        )

    acc = replace(
        acc,
        moving_distance_m=acc.moving_distance_m + segment_m,
        moving_time_s=acc.moving_time_s + delta_s,
    )
    return _close_splits(acc, end_ms, segment_m, delta_s)


def analyze_points(
        points: Iterable[Point], *,
        speed_threshold_mps: float = DEFAULT_SPEED_THRESHOLD_MPS,
        pause_threshold_s: float = DEFAULT_PAUSE_THRESHOLD_S,
        earth_radius_m: float = EARTH_RADIUS_M,
        strict_timestamps: bool = False,
) -> Summary:
    """
    Fold an ordered track into a Summary.

    Points must be in capture order. Timestamps are expected to be
    non-decreasing; this is only enforced with `strict_timestamps`, otherwise
    a backwards step shows up as a "moving" segment with negative duration.

    Raises:
      InsufficientDataError if fewer than two points are given.
      NonMonotonicTimestampError in strict mode.
      ValueError for coordinates out of range.
    """
    pts = list(points)
    if len(pts) < 2:
        raise InsufficientDataError(f"need at least 2 points to analyze a track, got {len(pts)}")
    if strict_timestamps:
        check_timestamps(pts)

    acc = _Accumulator(split_start_ms=pts[0].timestamp_ms)
    for _, p1, d_m, dt_s in iter_segments(pts, earth_radius_m=earth_radius_m):
        acc = _fold_segment(
            acc, p1.timestamp_ms, d_m, dt_s,
            speed_threshold_mps=speed_threshold_mps,
            pause_threshold_s=pause_threshold_s,
        )

    moving_time_s = acc.moving_time_s
    return Summary(
        total_moving_distance_m=acc.moving_distance_m,
        moving_time_s=moving_time_s,
        total_elapsed_s=(pts[-1].timestamp_ms - pts[0].timestamp_ms) / 1000.0,
        average_speed_mps=(acc.moving_distance_m / moving_time_s) if moving_time_s > 0 else 0.0,
        pause_count=acc.pause_count,
        splits=acc.splits,
        paused_time_s=acc.paused_time_s,
        points=len(pts),
    )


def analyze_track(gpx_path: Path, *, settings: Optional[AnalysisSettings] = None) -> Summary:
    """Read a GPX file and analyze its trackpoints."""
    settings = settings or AnalysisSettings()
    return analyze_points(
        load_points(gpx_path),
        speed_threshold_mps=settings.speed_threshold_mps,
        pause_threshold_s=settings.pause_threshold_s,
        earth_radius_m=settings.earth_radius_m,
        strict_timestamps=settings.strict_timestamps,
    )
