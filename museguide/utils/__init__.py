"""Mini README: Utility helpers for the guide.

Currently exports the generic priority fallback chain used by the
recognition cascade.
"""

from .fallback import FallbackChain

__all__ = ["FallbackChain"]
