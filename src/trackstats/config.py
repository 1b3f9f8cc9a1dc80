"""
trackstats configuration loader

This module centralizes *all* configuration handling for trackstats.

Design goals:
- CLI flags override everything.
- Provide sensible defaults if no config exists.
- Allow per-machine config without committing personal paths:
    ~/.config/trackstats/config.toml
- Allow repo-local config:
    <repo_root>/config/config.toml
- Allow environment variable overrides for automation.

Precedence (highest to lowest) for any given value:
1) CLI argument (handled by the CLI)
2) Environment variables (TRACKSTATS_*)
3) User config: ~/.config/trackstats/config.toml
4) Repo config: <repo_root>/config/config.toml
5) Hard defaults

Example config.toml:

    [paths]
    work_root = "~/GPS/_work"

    [analysis]
    speed_threshold_mps = 0.3
    pause_threshold_seconds = 5
    earth_radius_meters = 6371000
    strict_timestamps = false

This module uses Python's built-in tomllib on Python 3.11+, or `tomli` if installed.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from trackstats.analyze.distance import EARTH_RADIUS_M
from trackstats.analyze.motion import DEFAULT_PAUSE_THRESHOLD_S, DEFAULT_SPEED_THRESHOLD_MPS
from trackstats.errors import ConfigError


# ---------------------------------------------------------------------------
# TOML loading helpers
# ---------------------------------------------------------------------------
def _load_toml(path: Path) -> dict[str, Any]:
    """
    Parse a TOML file at `path`.

    Behavior:
    - If the file does not exist, return an empty dict (non-fatal).
    - If the file exists but is invalid TOML, raise ConfigError
      with a clear, user-facing message.
    """
    if not path.is_file():
        return {}

    try:
        import tomllib
    except ModuleNotFoundError:
        import tomli as tomllib

    try:
        return tomllib.loads(path.read_text(encoding="utf-8")) or {}
    except (tomllib.TOMLDecodeError, OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Failed to parse TOML config: {path} ({e})") from e


# ---------------------------------------------------------------------------
# Generic coercion helpers
# ---------------------------------------------------------------------------
def _deep_get(d: dict[str, Any], dotted_key: str) -> Any:
    """
    Fetch nested dictionary values using dot-separated keys.

    Example:
        _deep_get(cfg, "analysis.speed_threshold_mps")

    Returns None if any part of the path is missing.
    """
    cur: Any = d
    for part in dotted_key.split("."):
        if not isinstance(cur, dict) or part not in cur:
            return None
        cur = cur[part]
    return cur


def _as_path(v: Any) -> Optional[Path]:
    """
    Coerce a config value into a pathlib.Path if possible.

    Returns None if value cannot be interpreted as a path.
    """
    if v is None:
        return None
    if isinstance(v, Path):
        return v.expanduser()
    if isinstance(v, str):
        return Path(v).expanduser()
    return None


def _as_bool(v: Any, key: str) -> bool:
    """
    Coerce loosely-typed config values into booleans.

    TOML booleans and the usual environment spellings ("1", "yes", "off")
    are accepted; anything else is a ConfigError.
    """
    if isinstance(v, bool):
        return v
    if isinstance(v, (int, float)):
        return bool(v)
    if isinstance(v, str):
        s = v.strip().lower()
        if s in ("true", "yes", "y", "1", "on"):
            return True
        if s in ("false", "no", "n", "0", "off"):
            return False
    raise ConfigError(f"{key}: expected a boolean, got {v!r}")


def _as_float(v: Any, key: str) -> float:
    """Coerce a config value into a float; booleans are rejected."""
    if isinstance(v, bool):
        raise ConfigError(f"{key}: expected a number, got {v!r}")
    try:
        return float(v)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{key}: expected a number, got {v!r}") from e


def _env_path(var: str) -> Optional[Path]:
    """
    Read an environment variable and interpret it as a Path.
    """
    val = os.environ.get(var)
    return Path(val).expanduser() if val else None


# ---------------------------------------------------------------------------
# Repo discovery + defaults
# ---------------------------------------------------------------------------
def find_repo_root(start: Path) -> Optional[Path]:
    """
    Walk upward from `start` looking for the repo root.

    Heuristic:
    - The presence of a `config/` directory marks the repo root
    """
    start = start.resolve()
    for p in [start] + list(start.parents):
        if (p / "config").is_dir():
            return p
    return None


def default_work_root() -> Path:
    """Default directory searched for GPX files when none are given."""
    return Path.home() / "GPS" / "_work"


# ---------------------------------------------------------------------------
# Typed config dataclasses
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class AnalysisSettings:
    """
    Thresholds handed to the track analyzer.

    - speed_threshold_mps: below this average segment speed a segment may be a pause
    - pause_threshold_s: minimum segment duration before pause classification applies
    - earth_radius_m: sphere radius used by the distance formula
    - strict_timestamps: reject tracks whose timestamps go backwards
    """

    speed_threshold_mps: float = DEFAULT_SPEED_THRESHOLD_MPS
    pause_threshold_s: float = DEFAULT_PAUSE_THRESHOLD_S
    earth_radius_m: float = EARTH_RADIUS_M
    strict_timestamps: bool = False

    def validate(self) -> "AnalysisSettings":
        """Return self, or raise ConfigError if a threshold is out of range."""
        if self.speed_threshold_mps < 0:
            raise ConfigError(f"speed_threshold_mps must be >= 0, got {self.speed_threshold_mps}")
        if self.pause_threshold_s < 0:
            raise ConfigError(f"pause_threshold_seconds must be >= 0, got {self.pause_threshold_s}")
        if self.earth_radius_m <= 0:
            raise ConfigError(f"earth_radius_meters must be > 0, got {self.earth_radius_m}")
        return self


@dataclass(frozen=True)
class TrackstatsPaths:
    """
    Canonical resolved filesystem paths used by trackstats.
    """

    work_root: Path


@dataclass(frozen=True)
class TrackstatsConfig:
    """
    Fully merged trackstats configuration.

    Attributes:
    - paths: resolved filesystem layout
    - analysis: analyzer thresholds
    - source: provenance map showing where each value came from
    """

    paths: TrackstatsPaths
    analysis: AnalysisSettings
    source: dict[str, str]


# config key -> (AnalysisSettings field, coercion)
_ANALYSIS_KEYS = {
    "analysis.speed_threshold_mps": ("speed_threshold_mps", _as_float),
    "analysis.pause_threshold_seconds": ("pause_threshold_s", _as_float),
    "analysis.earth_radius_meters": ("earth_radius_m", _as_float),
    "analysis.strict_timestamps": ("strict_timestamps", _as_bool),
}

_ENV_ANALYSIS = {
    "TRACKSTATS_SPEED_THRESHOLD_MPS": "analysis.speed_threshold_mps",
    "TRACKSTATS_PAUSE_THRESHOLD_S": "analysis.pause_threshold_seconds",
    "TRACKSTATS_EARTH_RADIUS_M": "analysis.earth_radius_meters",
    "TRACKSTATS_STRICT_TIMESTAMPS": "analysis.strict_timestamps",
}


# ---------------------------------------------------------------------------
# Main config loader
# ---------------------------------------------------------------------------
def load_config(
    repo_root: Optional[Path] = None,
    repo_config_path: Optional[Path] = None,
    user_config_path: Optional[Path] = None,
) -> TrackstatsConfig:
    """
    Load, merge, and validate all trackstats configuration.

    This function is the single authoritative entry point
    for configuration access.
    """

    # Locate repo and config files
    if repo_root is None:
        repo_root = find_repo_root(Path(__file__).resolve())
    if repo_config_path is None and repo_root is not None:
        repo_config_path = repo_root / "config" / "config.toml"
    if user_config_path is None:
        user_config_path = Path.home() / ".config" / "trackstats" / "config.toml"

    repo_cfg = _load_toml(repo_config_path) if repo_config_path else {}
    user_cfg = _load_toml(user_config_path) if user_config_path else {}

    work_root = default_work_root()
    analysis: dict[str, Any] = {}

    src = {"paths.work_root": "default"}
    src.update({k: "default" for k in _ANALYSIS_KEYS})

    # Repo, then user (user overrides repo)
    for cfg, label, cfg_path in ((repo_cfg, "repo", repo_config_path), (user_cfg, "user", user_config_path)):
        v = _as_path(_deep_get(cfg, "paths.work_root"))
        if v is not None:
            work_root = v
            src["paths.work_root"] = f"{label}:{cfg_path}"

        for key, (field_name, coerce) in _ANALYSIS_KEYS.items():
            raw = _deep_get(cfg, key)
            if raw is None:
                continue
            analysis[field_name] = coerce(raw, key)
            src[key] = f"{label}:{cfg_path}"

    # Environment variable overrides (highest non-CLI precedence)
    env_work = _env_path("TRACKSTATS_WORK_ROOT")
    if env_work is not None:
        work_root = env_work
        src["paths.work_root"] = "env:TRACKSTATS_WORK_ROOT"

    for env, key in _ENV_ANALYSIS.items():
        raw = os.environ.get(env)
        if not raw:
            continue
        field_name, coerce = _ANALYSIS_KEYS[key]
        analysis[field_name] = coerce(raw, env)
        src[key] = f"env:{env}"

    return TrackstatsConfig(
        paths=TrackstatsPaths(work_root=work_root.expanduser()),
        analysis=AnalysisSettings(**analysis).validate(),
        source=src,
    )
