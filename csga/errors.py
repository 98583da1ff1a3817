"""
Exception types raised by the CSGA scoring engine.

Project-under-test conditions (missing manifest, unreadable files, odd
formatting) never raise: they lower a score or add a critical issue.
Only engine defects and unusable inputs surface as exceptions.
"""


class CSGAError(Exception):
    """Base class for all CSGA errors."""


class ScoringInvariantError(CSGAError):
    """An internal scoring invariant was violated (weights, ranges, bands)."""


class ProjectNotFoundError(CSGAError):
    """The project root does not exist or is not a directory."""
