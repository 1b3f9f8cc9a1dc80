# trackstats/models.py
"""
Value types shared by the readers, the analyzer and the CLI.

All types are frozen: a Summary is built once at the end of an analysis
and handed to the caller, who owns it.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class Point:
    """A single location sample.

    Attributes:
        latitude: Latitude in decimal degrees, [-90, 90].
        longitude: Longitude in decimal degrees, [-180, 180].
        timestamp_ms: Unix epoch milliseconds.
    """

    latitude: float
    longitude: float
    timestamp_ms: int

    @property
    def timestamp_s(self) -> float:
        """Unix epoch seconds as float."""
        return self.timestamp_ms / 1000.0


@dataclass(frozen=True, slots=True)
class Split:
    """Time taken to cover one whole kilometer of moving distance."""

    km_index: int
    duration_s: float


@dataclass(frozen=True, slots=True)
class Summary:
    """Statistics for one track. Distances in meters, times in seconds."""

    total_moving_distance_m: float
    moving_time_s: float
    total_elapsed_s: float
    average_speed_mps: float
    pause_count: int
    splits: tuple[Split, ...] = field(default_factory=tuple)
    paused_time_s: float = 0.0
    points: int = 0
