from pathlib import Path

import pytest

from trackstats.config import AnalysisSettings, load_config
from trackstats.errors import ConfigError

ENV_VARS = [
    "TRACKSTATS_WORK_ROOT",
    "TRACKSTATS_SPEED_THRESHOLD_MPS",
    "TRACKSTATS_PAUSE_THRESHOLD_S",
    "TRACKSTATS_EARTH_RADIUS_M",
    "TRACKSTATS_STRICT_TIMESTAMPS",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)


def _load(tmp_path: Path):
    return load_config(
        repo_root=tmp_path,
        repo_config_path=tmp_path / "repo.toml",
        user_config_path=tmp_path / "user.toml",
    )


def test_defaults_without_files(tmp_path):
    cfg = _load(tmp_path)

    assert cfg.analysis == AnalysisSettings()
    assert cfg.analysis.speed_threshold_mps == 0.3
    assert cfg.analysis.pause_threshold_s == 5
    assert cfg.analysis.earth_radius_m == 6_371_000
    assert cfg.analysis.strict_timestamps is False
    assert cfg.paths.work_root == Path.home() / "GPS" / "_work"
    assert cfg.source["analysis.speed_threshold_mps"] == "default"


def test_user_overrides_repo(tmp_path):
    (tmp_path / "repo.toml").write_text(
        "[analysis]\nspeed_threshold_mps = 0.5\npause_threshold_seconds = 10\n",
        encoding="utf-8",
    )
    (tmp_path / "user.toml").write_text(
        "[analysis]\npause_threshold_seconds = 8\n[paths]\nwork_root = \"/data/gpx\"\n",
        encoding="utf-8",
    )

    cfg = _load(tmp_path)

    assert cfg.analysis.speed_threshold_mps == 0.5
    assert cfg.analysis.pause_threshold_s == 8
    assert cfg.paths.work_root == Path("/data/gpx")
    assert cfg.source["analysis.speed_threshold_mps"].startswith("repo:")
    assert cfg.source["analysis.pause_threshold_seconds"].startswith("user:")


def test_env_overrides_files(tmp_path, monkeypatch):
    (tmp_path / "user.toml").write_text(
        "[analysis]\nspeed_threshold_mps = 0.5\nstrict_timestamps = false\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("TRACKSTATS_SPEED_THRESHOLD_MPS", "0.7")
    monkeypatch.setenv("TRACKSTATS_STRICT_TIMESTAMPS", "yes")
    monkeypatch.setenv("TRACKSTATS_WORK_ROOT", str(tmp_path / "work"))

    cfg = _load(tmp_path)

    assert cfg.analysis.speed_threshold_mps == 0.7
    assert cfg.analysis.strict_timestamps is True
    assert cfg.paths.work_root == tmp_path / "work"
    assert cfg.source["analysis.speed_threshold_mps"] == "env:TRACKSTATS_SPEED_THRESHOLD_MPS"


def test_malformed_toml(tmp_path):
    (tmp_path / "user.toml").write_text("[analysis\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="Failed to parse TOML"):
        _load(tmp_path)


@pytest.mark.parametrize(
    "body",
    [
        "[analysis]\nspeed_threshold_mps = \"fast\"\n",
        "[analysis]\npause_threshold_seconds = -1\n",
        "[analysis]\nearth_radius_meters = 0\n",
        "[analysis]\nstrict_timestamps = \"maybe\"\n",
    ],
)
def test_invalid_values(tmp_path, body):
    (tmp_path / "user.toml").write_text(body, encoding="utf-8")

    with pytest.raises(ConfigError):
        _load(tmp_path)
