# trackstats/util/fzf.py
"""
Pick GPX files interactively with `fzf`.

Each candidate is shown by its path relative to the work root; the
highlighted file is previewed with its trackstats report.
"""

from __future__ import annotations

import subprocess
from pathlib import Path
from shutil import which

from trackstats.errors import FzfNotFoundError, SelectionError

PREVIEW_CMD = "trackstats-analyze {2}"

# fzf exit codes: 1 = no match, 130 = aborted with Esc / Ctrl-C
_FZF_NOTHING_SELECTED = (1, 130)


def _label(path: Path, work_root: Path) -> str:
    try:
        return str(path.relative_to(work_root))
    except ValueError:
        return path.name


def select_gpx_files(
        paths: list[Path], *,
        work_root: Path,
        header: str = "Select GPX file(s) to analyze:",
        multi: bool = True,
        preview: bool = True,
) -> list[Path]:
    """Return the GPX files the user picked, as resolved paths (possibly empty)."""
    if not which("fzf"):
        raise FzfNotFoundError("fzf not found on PATH")

    candidates = "".join(f"{_label(p, work_root)}\t{p}\n" for p in paths)

    cmd = [
        "fzf",
        "--delimiter=\t",
        "--with-nth=1",
        "--height=60%",
        "--layout=reverse",
        "--border",
        "--header", header,
    ]
    if multi:
        cmd.append("--multi")
    if preview:
        cmd += ["--preview", PREVIEW_CMD, "--preview-window", "right:50%:wrap"]

    proc = subprocess.run(cmd, input=candidates, capture_output=True, text=True)

    if proc.returncode in _FZF_NOTHING_SELECTED:
        return []
    if proc.returncode != 0:
        raise SelectionError(f"fzf exited with {proc.returncode}: {proc.stderr.strip()}")

    selected = []
    for line in proc.stdout.splitlines():
        if not line.strip():
            continue
        # "label<TAB>full path"; a bare line is taken as the path itself
        _, _, path_str = line.rpartition("\t")
        selected.append(Path(path_str).expanduser().resolve())
    return selected
