"""Dataset utilities for loading and validating WiFi radio maps.

A radio map is stored as a JSON array of survey records:

    [
      {
        "CLASSNAME": "Fingerprint",
        "INSTANCE": {
          "mWiFiFingerprint": {"00:11:22:33:44:55": -61, ...},
          "mCenter": {"x": 12.5, "y": 3.0},
          "mRadius": 1.0,
          "mColor": -16776961,
          "mColor4f": [0, 0, 255, 255],
          "mIsRemoved": false
        }
      },
      ...
    ]

Only ``mWiFiFingerprint`` and ``mCenter`` are required; the display fields
are carried through on the Fingerprint but never used by the locator.

Author: Navigation Engineer
Date: 2024
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Sequence, Union

import numpy as np

from .types import Fingerprint

logger = logging.getLogger(__name__)


def load_radio_map(
    path: Union[str, Path], include_removed: bool = True
) -> List[Fingerprint]:
    """
    Load a radio map from a JSON file.

    Args:
        path: Path to the JSON file.
        include_removed: If False, records flagged ``mIsRemoved`` are skipped.

    Returns:
        Fingerprints in file order.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is not valid JSON or a record is malformed.

    Examples:
        >>> radio_map = load_radio_map('data/radio_map.json')
        >>> print(len(radio_map))
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Radio map not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        try:
            records = json.load(f)
        except json.JSONDecodeError as exc:
            raise ValueError(f"{path} is not valid JSON: {exc}") from exc

    return parse_radio_map(records, include_removed=include_removed)


def parse_radio_map(
    records: Any, include_removed: bool = True
) -> List[Fingerprint]:
    """
    Build fingerprints from already decoded radio-map records.

    Raises:
        ValueError: If ``records`` is not a list or a record is malformed.
            The message names the offending record index.
    """
    if not isinstance(records, list):
        raise ValueError(
            f"Radio map must be a JSON array of records, got {type(records).__name__}"
        )

    fingerprints = []
    for i, record in enumerate(records):
        try:
            fp = _parse_record(record)
        except (KeyError, TypeError, ValueError) as exc:
            raise ValueError(f"Malformed radio map record {i}: {exc}") from exc

        if fp.is_removed and not include_removed:
            logger.debug("Skipping removed record %d", i)
            continue
        fingerprints.append(fp)

    return fingerprints


def _parse_record(record: Dict[str, Any]) -> Fingerprint:
    """Convert one CLASSNAME/INSTANCE record to a Fingerprint."""
    if not isinstance(record, dict):
        raise TypeError(f"record must be an object, got {type(record).__name__}")

    instance = record["INSTANCE"]
    signals = instance["mWiFiFingerprint"]
    center = instance["mCenter"]

    is_removed = instance.get("mIsRemoved", False)
    if not isinstance(is_removed, bool):
        raise TypeError(f"mIsRemoved must be a boolean, got {is_removed!r}")

    return Fingerprint(
        signals=signals,
        center=(float(center["x"]), float(center["y"])),
        radius=float(instance.get("mRadius", 0.0)),
        color=int(instance.get("mColor", 0)),
        color4f=tuple(instance.get("mColor4f", ())),
        is_removed=is_removed,
        class_name=record.get("CLASSNAME"),
    )


def validate_radio_map(fingerprints: Sequence[Fingerprint]) -> dict:
    """
    Perform validation checks on a radio map.

    Validation checks include:
    - Non-empty map
    - Fingerprints without any AP
    - Duplicate centers
    - RSS values outside the usual dBm range

    Args:
        fingerprints: Radio map to validate.

    Returns:
        Dictionary with validation results and warnings:
            {
                'valid': bool,
                'errors': list of error messages,
                'warnings': list of warning messages,
                'stats': dict with radio map statistics
            }

    Examples:
        >>> result = validate_radio_map(radio_map)
        >>> if not result['valid']:
        ...     print("Errors:", result['errors'])
    """
    errors = []
    warnings = []
    stats = {}

    stats["n_fingerprints"] = len(fingerprints)
    if len(fingerprints) == 0:
        errors.append("Radio map contains no fingerprints")
        return {"valid": False, "errors": errors, "warnings": warnings, "stats": stats}

    ap_ids = set()
    for fp in fingerprints:
        ap_ids.update(fp.signals)
    stats["n_access_points"] = len(ap_ids)

    aps_per_fp = np.array([len(fp) for fp in fingerprints])
    stats["aps_per_fingerprint_min"] = int(aps_per_fp.min())
    stats["aps_per_fingerprint_max"] = int(aps_per_fp.max())
    stats["aps_per_fingerprint_mean"] = float(aps_per_fp.mean())

    # Check 1: empty scans
    empty = np.where(aps_per_fp == 0)[0]
    if len(empty) > 0:
        warnings.append(
            f"Fingerprints {empty.tolist()} have no access points "
            f"(never selected as neighbors)"
        )

    # Check 2: duplicate centers
    centers = np.array([fp.center for fp in fingerprints])
    n_duplicates = len(centers) - len(np.unique(centers, axis=0))
    if n_duplicates > 0:
        warnings.append(
            f"Found {n_duplicates} duplicate center(s); "
            f"multiple fingerprints at same coordinates"
        )

    # Check 3: RSS range
    all_rss = np.array(
        [rss for fp in fingerprints for rss in fp.signals.values()], dtype=float
    )
    if all_rss.size > 0:
        stats["rss_min"] = float(all_rss.min())
        stats["rss_max"] = float(all_rss.max())
        if np.any(all_rss > 0):
            warnings.append("Some RSS values are positive (unusual for dBm)")
        if np.any(all_rss < -120):
            warnings.append("Some RSS values below -120 dBm (very weak signal)")

    stats["n_removed"] = sum(1 for fp in fingerprints if fp.is_removed)

    return {
        "valid": len(errors) == 0,
        "errors": errors,
        "warnings": warnings,
        "stats": stats,
    }


def print_radio_map_summary(fingerprints: Sequence[Fingerprint]) -> None:
    """
    Print a human-readable summary of the radio map.

    Examples:
        >>> print_radio_map_summary(radio_map)
        Radio Map Summary
        ==================================================
        Fingerprints:     40
        Access Points:    8
        ...
    """
    result = validate_radio_map(fingerprints)
    stats = result["stats"]

    print("Radio Map Summary")
    print("=" * 50)
    print(f"Fingerprints:     {stats['n_fingerprints']}")
    if stats["n_fingerprints"] == 0:
        return

    print(f"Access Points:    {stats['n_access_points']}")
    print(
        f"APs per scan:     min {stats['aps_per_fingerprint_min']}, "
        f"max {stats['aps_per_fingerprint_max']}, "
        f"mean {stats['aps_per_fingerprint_mean']:.1f}"
    )
    if "rss_min" in stats:
        print(f"RSS range:        [{stats['rss_min']:.0f}, {stats['rss_max']:.0f}] dBm")
    print(f"Removed flagged:  {stats['n_removed']}")
    print()

    centers = np.array([fp.center for fp in fingerprints])
    print("Center Bounds:")
    for dim, name in enumerate(("x", "y")):
        print(f"  {name}: [{centers[:, dim].min():.2f}, {centers[:, dim].max():.2f}]")

    for warning in result["warnings"]:
        print(f"  [!] {warning}")
