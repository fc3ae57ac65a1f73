"""Retail stock consistency engine.

Keeps per-SKU stock consistent across self-checkout sales, QR-driven
receiving scans and an operator replenishment worklist.
"""

__version__ = "0.1.0"
