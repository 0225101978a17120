"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Exception types raised by requestmap.
"""

from __future__ import annotations


class RequestMapError(RuntimeError):
    """Base class for requestmap failures."""


class RequestCacheError(RequestMapError):
    """Raised when cache backend registration/resolution fails."""
