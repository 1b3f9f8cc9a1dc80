# trackstats/errors

"""
trackstats.errors

Central exception hierarchy for trackstats.

Rationale:
  - Modules raise specific, meaningful errors.
  - Callers can catch TrackstatsError (broad) or specific subclasses (narrow).
"""


class TrackstatsError(RuntimeError):
    """Base class for all trackstats runtime errors."""


# ---- Analysis errors ---------------------------

class AnalysisError(TrackstatsError):
    """Errors raised while folding a track into a summary."""

class InsufficientDataError(AnalysisError):
    """The track has fewer than two points and cannot be analyzed."""

class NonMonotonicTimestampError(AnalysisError):
    """A point is timestamped earlier than its predecessor (strict mode only)."""


# ---- Input format errors -----------------------

class FormatError(TrackstatsError):
    """Errors reading track input files."""

class InvalidGpxError(FormatError):
    """GPX file could not be parsed or did not contain expected data structures."""


# ---- Configuration errors ----------------------

class ConfigError(TrackstatsError):
    """Configuration file is malformed or holds an invalid value."""


# ---- Selection errors --------------------------

class SelectionError(TrackstatsError):
    """Interactive file selection failed."""

class FzfNotFoundError(SelectionError):
    """fzf is required but not available on PATH."""
