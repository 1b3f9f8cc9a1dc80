# trackstats/formats/gpx.py
"""
GPX helpers for trackstats

This module is intentionally format-focused:
- GPX namespace handling
- safely reading an ElementTree
- turning <trkpt> nodes into Points

Key design principle:
  Keep orchestration (paths, selection, reporting) in the CLI,
  separate from GPX parsing (here).
"""

from __future__ import annotations

import datetime as _dt
from pathlib import Path
from typing import Optional
from xml.etree import ElementTree as ET

from trackstats.errors import InvalidGpxError
from trackstats.models import Point

# GPX 1.1 default namespace; 1.0 files are still common from older loggers.
GPX_NS = {"gpx": "http://www.topografix.com/GPX/1/1"}
GPX10_NS = {"gpx": "http://www.topografix.com/GPX/1/0"}


def _parse_gpx_time(text: str) -> Optional[_dt.datetime]:
    """
    Parse an ISO-8601 timestamp commonly found in GPX <time> nodes.

    Expected examples:
      - "2026-01-02T21:14:44Z"
      - "2026-01-02T21:14:44.123Z"
      - "2026-01-02T21:14:44+00:00"
    """
    if not text:
        return None
    s = text.strip()
    if not s:
        return None

    if s.endswith("Z"):
        s = s[:-1] + "+00:00"

    try:
        dt = _dt.datetime.fromisoformat(s)
    except ValueError:
        return None

    # Naive times are assumed UTC
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=_dt.timezone.utc)

    return dt.astimezone(_dt.timezone.utc)


def _epoch_ms(dt: _dt.datetime) -> int:
    return int(round(dt.timestamp() * 1000))


def _namespaces(root: ET.Element) -> dict[str, str]:
    if root.tag == f"{{{GPX10_NS['gpx']}}}gpx":
        return GPX10_NS
    return GPX_NS


def read_gpx(path: Path) -> ET.ElementTree:
    """
    Read a GPX file into an ElementTree.

    Raises:
      InvalidGpxError, OSError
    """
    try:
        return ET.parse(path)
    except ET.ParseError as e:
        raise InvalidGpxError(f"Failed to parse GPX: {path} ({e})") from e


def extract_points(tree: ET.ElementTree) -> list[Point]:
    """Extract ordered trackpoints from a GPX tree, skipping points without a time."""
    root = tree.getroot()
    ns = _namespaces(root)
    pts: list[Point] = []

    for trkpt in root.findall(".//gpx:trkpt", ns):
        try:
            lat = float(trkpt.get("lat"))
            lon = float(trkpt.get("lon"))
        except (TypeError, ValueError) as e:
            raise InvalidGpxError(
                f"trkpt has missing or invalid lat/lon: {trkpt.attrib!r}"
            ) from e

        time = _parse_gpx_time(trkpt.findtext("gpx:time", default="", namespaces=ns))
        if time is None:
            continue

        pts.append(Point(latitude=lat, longitude=lon, timestamp_ms=_epoch_ms(time)))

    return pts


def load_points(path: Path) -> list[Point]:
    """Read a GPX file and return its trackpoints in document order."""
    return extract_points(read_gpx(path))
