#!/usr/bin/env python3
"""
trackstats: analyze GPX file(s) and report moving distance, moving time,
pauses and per-kilometer splits.

Files come from the command line, or are picked with fzf from the work root
(CLI --work-root > TRACKSTATS_WORK_ROOT > config > ~/GPS/_work).
"""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import asdict, replace
from pathlib import Path
from typing import Optional, Sequence

from trackstats.analyze.track import analyze_track
from trackstats.config import AnalysisSettings, load_config
from trackstats.errors import TrackstatsError
from trackstats.models import Summary
from trackstats.util.fzf import select_gpx_files
from trackstats.util.logging import log, utc_now_iso

TSV_HEADER = (
    "file\tpoints\tdistance_m\tmoving_time_s\telapsed_s\t"
    "paused_time_s\tavg_speed_mps\tpauses\tsplits"
)


def _fmt_hms(seconds: float) -> str:
    s = int(round(seconds))
    sign = "-" if s < 0 else ""
    s = abs(s)
    return f"{sign}{s // 3600:d}:{(s % 3600) // 60:02d}:{s % 60:02d}"


def print_report(path: Path, stats: Summary, *, tsv: bool) -> None:
    if tsv:
        splits = ",".join(f"{s.duration_s:.1f}" for s in stats.splits)
        print(
            f"{path}\t"
            f"{stats.points}\t"
            f"{stats.total_moving_distance_m:.2f}\t"
            f"{stats.moving_time_s:.1f}\t"
            f"{stats.total_elapsed_s:.1f}\t"
            f"{stats.paused_time_s:.1f}\t"
            f"{stats.average_speed_mps:.3f}\t"
            f"{stats.pause_count}\t"
            f"{splits}"
        )
        return

    print(f"\n{path}")
    print(f"  points        : {stats.points}")
    print(f"  distance      : {stats.total_moving_distance_m:.2f} m"
          f" ({stats.total_moving_distance_m / 1000:.2f} km)")
    print(f"  moving time   : {_fmt_hms(stats.moving_time_s)}")
    print(f"  elapsed time  : {_fmt_hms(stats.total_elapsed_s)}")
    print(f"  paused time   : {_fmt_hms(stats.paused_time_s)}")
    print(f"  avg speed     : {stats.average_speed_mps:.3f} m/s"
          f" ({stats.average_speed_mps * 3.6:.2f} km/h)")
    print(f"  auto-pauses   : {stats.pause_count}")
    if not stats.splits:
        print("  splits        : none (less than 1 km moving)")
    for s in stats.splits:
        print(f"  KM {s.km_index:<3d}        : {s.duration_s / 60:.1f} min")


def summary_record(path: Path, stats: Summary) -> dict:
    """JSON-ready view of one analyzed file."""
    rec = {"file": str(path)}
    rec.update(asdict(stats))
    rec["splits"] = [asdict(s) for s in stats.splits]
    return rec


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="trackstats: Analyze GPX file(s).")
    ap.add_argument("gpx", nargs="*", type=Path,
                    help="One or more GPX files. If omitted, use fzf selection under the work root.")
    ap.add_argument("--work-root", default=None,
                    help="Root searched for *.gpx when no files are given "
                         "(default: from trackstats config or ~/GPS/_work)")
    out = ap.add_mutually_exclusive_group()
    out.add_argument("--tsv", action="store_true",
                     help="Print tab-separated output (good for piping).")
    out.add_argument("--json", action="store_true",
                     help="Print a JSON object with a generated_at stamp and a list of track summaries.")
    ap.add_argument("--speed-threshold", type=float, default=None, metavar="MPS",
                    help="Segments slower than this may be pauses (default 0.3 m/s).")
    ap.add_argument("--pause-threshold", type=float, default=None, metavar="SECONDS",
                    help="Minimum segment duration for a pause (default 5 s).")
    ap.add_argument("--earth-radius", type=float, default=None, metavar="METERS",
                    help="Sphere radius for distances (default 6371000 m).")
    ap.add_argument("--strict-timestamps", action="store_true",
                    help="Reject tracks whose timestamps go backwards.")
    return ap


def resolve_settings(args: argparse.Namespace, base: AnalysisSettings) -> AnalysisSettings:
    """Apply CLI overrides on top of configured analysis settings."""
    overrides = {}
    if args.speed_threshold is not None:
        overrides["speed_threshold_mps"] = args.speed_threshold
    if args.pause_threshold is not None:
        overrides["pause_threshold_s"] = args.pause_threshold
    if args.earth_radius is not None:
        overrides["earth_radius_m"] = args.earth_radius
    if args.strict_timestamps:
        overrides["strict_timestamps"] = True
    return replace(base, **overrides).validate()


def select_files(args: argparse.Namespace, work_root: Path) -> list[Path]:
    if args.gpx:
        return [p.expanduser() for p in args.gpx]

    work_root = work_root.expanduser()
    gpx_files = sorted(work_root.rglob("*.gpx"))
    if not gpx_files:
        raise SystemExit(f"No GPX files found under {work_root}")

    return select_gpx_files(gpx_files, work_root=work_root)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        cfg = load_config()
        settings = resolve_settings(args, cfg.analysis)
        work_root = Path(args.work_root) if args.work_root else cfg.paths.work_root
        selected = select_files(args, work_root)
    except TrackstatsError as e:
        log(f"error: {e}", file=sys.stderr)
        return 1

    if args.tsv:
        print(TSV_HEADER)

    records: list[dict] = []
    failed = 0
    for path in selected:
        if not path.is_file():
            log(f"Skipping (not a file): {path}", file=sys.stderr)
            failed += 1
            continue
        try:
            stats = analyze_track(path, settings=settings)
        except (TrackstatsError, ValueError) as e:
            log(f"Skipping {path}: {e}", file=sys.stderr)
            failed += 1
            continue

        if args.json:
            records.append(summary_record(path, stats))
        else:
            print_report(path, stats, tsv=args.tsv)

    if args.json:
        print(json.dumps({"generated_at": utc_now_iso(), "tracks": records}, indent=2))

    return 1 if failed else 0


if __name__ == "__main__":
    raise SystemExit(main())
