"""Mini README: Failure taxonomy shared by the guide subsystems.

Structure:
    * GuideError - common base so callers can catch guide failures at once.
    * InitializationFailure - a detector or backend could not be loaded.
    * RecognitionFailure - one cascade invocation errored.
    * BackendFailure - the narration backend errored or timed out.
    * StorageFailure - the catalog database is unreachable or broken.

A missing record is never an error; lookups return ``None`` instead.
"""

from __future__ import annotations


class GuideError(Exception):
    """Base class for all museum guide failures."""


class InitializationFailure(GuideError):
    """Raised when a collaborator fails to load; fatal until restart."""


class RecognitionFailure(GuideError):
    """Raised when a single recognition call fails."""


class BackendFailure(GuideError):
    """Raised when the narration backend returns an error or times out."""


class StorageFailure(GuideError):
    """Raised when the catalog store cannot be read or written."""
