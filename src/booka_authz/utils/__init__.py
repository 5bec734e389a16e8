"""Utility helpers for booka-authz."""

from .datetime import Clock, utc_now

__all__ = ["Clock", "utc_now"]
