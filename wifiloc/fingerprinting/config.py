"""Tunable constants for the fingerprint locator.

Author: Navigation Engineer
Date: 2024
"""

from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Mapping


@dataclass(frozen=True)
class LocatorConfig:
    """
    Thresholds used by neighbor selection and the dissimilarity metric.

    Attributes:
        min_rss_to_count: RSS (dBm) an AP must exceed to count as "strong"
                          when comparing AP coverage.
        neighbour_min_score: Reference fingerprints must score strictly
                             above this to be considered neighbors.
        rss_offset: Penalty offset (dB) for an AP heard on only one side;
                    the missing reading is taken as ``rss + rss_offset``.
        min_strong_aps: If fewer strong APs than this are heard, the whole
                        fingerprint is used for coverage comparison.

    Examples:
        >>> config = LocatorConfig(min_rss_to_count=-80)
        >>> config.rss_offset
        100
    """

    min_rss_to_count: int = -75
    neighbour_min_score: int = -1
    rss_offset: int = 100
    min_strong_aps: int = 3

    def __post_init__(self) -> None:
        """Validate parameter types and ranges."""
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(f"{f.name} must be an integer, got {value!r}")

        if self.rss_offset < 0:
            raise ValueError(f"rss_offset must be non-negative, got {self.rss_offset}")
        if self.min_strong_aps < 0:
            raise ValueError(
                f"min_strong_aps must be non-negative, got {self.min_strong_aps}"
            )

    @classmethod
    def from_dict(cls, values: Mapping[str, Any]) -> "LocatorConfig":
        """
        Build a config from a plain mapping, e.g. a parsed JSON section.

        Raises:
            ValueError: If the mapping contains unknown keys.
        """
        known = {f.name for f in fields(cls)}
        unknown = set(values) - known
        if unknown:
            raise ValueError(
                f"Unknown locator parameter(s): {sorted(unknown)}. "
                f"Valid keys: {sorted(known)}"
            )
        return cls(**dict(values))

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


DEFAULT_CONFIG = LocatorConfig()
