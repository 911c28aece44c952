"""Mini README: Core package initializer for the museum guide.

The guide recognises an exhibit shown to the camera, resolves it against the
local catalog, and narrates it in the visitor's chosen depth and language.
Only the logging helper is re-exported here so that importing the package
stays cheap; subsystems live in ``catalog``, ``recognition``, ``stability``,
``session`` and ``narration``.
"""

from .logging_utils import get_logger

__all__ = ["get_logger"]
