"""Exceptions raised by the fingerprint locator.

Both subclass ValueError, so callers that already guard localization with
``except ValueError`` keep working.
"""


class LocalizationError(ValueError):
    """Base class for localization failures. No usable coordinate exists."""


class InvalidInputError(LocalizationError):
    """Empty reference set, missing query, or query without access points."""


class NoComparableNeighborsError(LocalizationError):
    """No reference fingerprint scored above the neighbor threshold."""

    def __init__(self, message: str = "no comparable reference fingerprints"):
        super().__init__(message)
