import sys

from trackstats.util.logging import log, utc_now_iso


def test_log_to_stderr_leaves_stdout_clean(capsys):
    log("Skipping broken.gpx", file=sys.stderr)

    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.rstrip().endswith("  Skipping broken.gpx")


def test_log_defaults_to_stdout(capsys):
    log("hello")

    assert capsys.readouterr().out.rstrip().endswith("  hello")


def test_utc_now_iso_is_utc():
    assert utc_now_iso().endswith("+00:00")
