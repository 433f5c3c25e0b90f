"""WiFi fingerprint indoor positioning.

This package contains:
- fingerprinting: Radio map types, loading and the fingerprint locator
- eval: Position error metrics and plots
"""

__version__ = "0.1.0"
