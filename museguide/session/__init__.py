"""Mini README: Session and visit history tracking.

Exports ``SessionTracker`` and the ``HistoryEntry`` record it maintains.
"""

from .tracker import HistoryEntry, SessionTracker

__all__ = ["HistoryEntry", "SessionTracker"]
