"""Type definitions and data structures for WiFi fingerprint localization.

This module defines the Fingerprint value type used throughout the locator:
a read-only mapping of access-point identifiers (MAC addresses) to received
signal strengths, together with the 2D center the fingerprint was recorded at
(ground truth for reference fingerprints, the subject of estimation for queries).

Author: Navigation Engineer
Date: 2024
"""

import math
import numbers
import sys
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Tuple

import numpy as np


# Type aliases for clarity and documentation
Location = np.ndarray  # Shape (2,), estimated or ground-truth (x, y)

# Returned by signal_at() for unknown APs. Compares larger than any real RSS.
SIGNAL_NOT_PRESENT = sys.maxsize


def _as_center(center) -> np.ndarray:
    """Convert a center given as (x, y), {'x':, 'y':} or ndarray to a read-only array."""
    if isinstance(center, Mapping):
        try:
            center = (center["x"], center["y"])
        except KeyError as exc:
            raise ValueError(f"center mapping must have 'x' and 'y' keys, missing {exc}") from None

    arr = np.asarray(center, dtype=float)
    if arr.shape != (2,):
        raise ValueError(f"center must be a 2D coordinate (x, y), got shape {arr.shape}")
    if not np.all(np.isfinite(arr)):
        raise ValueError(f"center contains non-finite values: {arr.tolist()}")

    arr = arr.copy()
    arr.flags.writeable = False
    return arr


def _as_signals(signals: Mapping) -> Mapping[str, int]:
    if not isinstance(signals, Mapping):
        raise TypeError(f"signals must be a mapping of AP id -> RSS, got {type(signals)}")

    checked = {}
    for ap_id, rss in signals.items():
        if not isinstance(ap_id, str) or not ap_id:
            raise ValueError(f"AP identifier must be a non-empty string, got {ap_id!r}")
        if isinstance(rss, bool) or not isinstance(rss, numbers.Integral):
            raise TypeError(f"RSS for AP {ap_id!r} must be an integer, got {rss!r}")
        checked[ap_id] = int(rss)
    return MappingProxyType(checked)


@dataclass(frozen=True, eq=False)
class Fingerprint:
    """
    WiFi fingerprint: observed access-point signal strengths at a location.

    Attributes:
        signals: Read-only mapping from AP identifier (e.g. MAC address) to
                 received signal strength in dBm (negative, larger = stronger).
                 May be empty.
        center: 2D coordinate (x, y) as a read-only float array of shape (2,).
        radius: Display radius from the survey tool. Not used for localization.
        color: Packed display color. Not used for localization.
        color4f: Display color components. Not used for localization.
        is_removed: Survey "removed" flag. Not used for localization.
        class_name: Record class name from the source dataset, if any.

    Examples:
        >>> fp = Fingerprint({"aa:bb": -60, "cc:dd": -72}, center=(10.0, 20.0))
        >>> fp.signal_at("aa:bb")
        -60
        >>> "ee:ff" in fp
        False

    Notes:
        - Instances never change after construction; the locator only reads them.
        - Equality is identity: two surveys with identical readings are still
          distinct reference points.
    """

    signals: Mapping[str, int]
    center: np.ndarray
    radius: float = 0.0
    color: int = 0
    color4f: Tuple[int, ...] = field(default_factory=tuple)
    is_removed: bool = False
    class_name: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate and freeze the signal mapping and center."""
        object.__setattr__(self, "signals", _as_signals(self.signals))
        object.__setattr__(self, "center", _as_center(self.center))
        object.__setattr__(self, "color4f", tuple(int(c) for c in self.color4f))

        if not math.isfinite(float(self.radius)):
            raise ValueError(f"radius must be finite, got {self.radius}")

    @classmethod
    def from_pairs(
        cls, pairs: Iterable[Tuple[str, int]], center, **payload
    ) -> "Fingerprint":
        """
        Build a fingerprint from (AP id, RSS) pairs.

        Raises:
            ValueError: If the same AP id appears more than once.
        """
        signals = {}
        for ap_id, rss in pairs:
            if ap_id in signals:
                raise ValueError(f"Duplicate AP id in fingerprint: {ap_id!r}")
            signals[ap_id] = rss
        return cls(signals=signals, center=center, **payload)

    def access_points(self) -> frozenset:
        """Set of AP identifiers contained in this fingerprint."""
        return frozenset(self.signals)

    def signal_at(self, ap_id: str) -> int:
        """
        Recorded RSS for ``ap_id``.

        Returns SIGNAL_NOT_PRESENT when the AP was not observed. Treat that
        value as "unknown", never as a measurement.
        """
        return self.signals.get(ap_id, SIGNAL_NOT_PRESENT)

    def contains(self, ap_id: str) -> bool:
        """True if ``ap_id`` was observed in this fingerprint."""
        return ap_id in self.signals

    def __contains__(self, ap_id: object) -> bool:
        return ap_id in self.signals

    def __len__(self) -> int:
        return len(self.signals)

    @property
    def x(self) -> float:
        return float(self.center[0])

    @property
    def y(self) -> float:
        return float(self.center[1])

    def __repr__(self) -> str:
        """Readable string representation."""
        return (
            f"Fingerprint(n_aps={len(self.signals)}, "
            f"center=({self.x:.2f}, {self.y:.2f}))"
        )
