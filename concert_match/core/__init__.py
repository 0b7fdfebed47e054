"""
Core domain layer for concert-match.

This package contains the pure matching and alias logic. Nothing here
performs I/O; callers pass candidate lists in and get ranked results back.
"""

from __future__ import annotations

__all__ = []
