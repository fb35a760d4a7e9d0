"""Tracker module."""

from .tracker import IMatchTracker, Tracker

__all__ = ["IMatchTracker", "Tracker"]
