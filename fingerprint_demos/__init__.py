"""
WiFi fingerprint localization demos.

Provides examples of:
    - Locating one surveyed fingerprint against the rest of the radio map
    - Shrinking the radio map one reference at a time
    - Leave-one-out accuracy evaluation over a whole radio map

Author: Navigation Engineer
Date: 2024
"""

__version__ = "0.1.0"
__all__ = []
