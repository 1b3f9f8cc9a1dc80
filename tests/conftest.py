import math
from pathlib import Path

import pytest

from trackstats.analyze.distance import EARTH_RADIUS_M
from trackstats.models import Point

# Degrees of latitude per meter on the analysis sphere.
DEG_PER_M = 180.0 / (math.pi * EARTH_RADIUS_M)


@pytest.fixture
def sample_gpx_path() -> Path:
    return Path(__file__).parent / "data" / "sample.gpx"


@pytest.fixture
def northbound():
    """Build a track heading north from (0, 0).

    `legs` is a list of (meters, seconds) per segment.
    """
    def build(legs, *, start_ms: int = 1_700_000_000_000) -> list[Point]:
        pts = [Point(latitude=0.0, longitude=0.0, timestamp_ms=start_ms)]
        dist_m = 0.0
        t_ms = start_ms
        for meters, seconds in legs:
            dist_m += meters
            t_ms += int(seconds * 1000)
            pts.append(Point(latitude=dist_m * DEG_PER_M, longitude=0.0, timestamp_ms=t_ms))
        return pts
    return build


@pytest.fixture
def write_gpx(tmp_path: Path):
    """Write a GPX 1.1 document with the given <trkpt> body and return its path."""
    def write(body: str, name: str = "track.gpx") -> Path:
        p = tmp_path / name
        p.write_text(
            '<?xml version="1.0" encoding="UTF-8"?>\n'
            '<gpx version="1.1" creator="test" xmlns="http://www.topografix.com/GPX/1/1">'
            f"<trk><trkseg>{body}</trkseg></trk></gpx>\n",
            encoding="utf-8",
        )
        return p
    return write
