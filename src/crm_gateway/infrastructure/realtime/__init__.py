"""Realtime connection management"""

from .connection import RealtimeConnectionManager

__all__ = ["RealtimeConnectionManager"]
