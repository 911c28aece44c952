"""Mini README: Frame sources feeding the detection loop.

Structure:
    * FrameSource - interface returning one encoded still image per call.
    * StaticFrameSource - always returns the same bytes.
    * DirectoryFrameSource - cycles through image files in a directory.

Real camera capture belongs to the host application; these sources cover
the CLI, demos and tests.
"""

from __future__ import annotations

import itertools
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, Iterator, List, Optional

from .logging_utils import get_logger

LOGGER = get_logger(__name__)

IMAGE_SUFFIXES = (".jpg", ".jpeg", ".png", ".webp", ".bmp")


class FrameSource(ABC):
    """Supplies encoded still frames on request."""

    @abstractmethod
    def capture(self) -> bytes:
        """Return one encoded frame."""


class StaticFrameSource(FrameSource):
    def __init__(self, frame: bytes = b"") -> None:
        self.frame = frame

    def capture(self) -> bytes:
        return self.frame


class DirectoryFrameSource(FrameSource):
    """Replay image files from ``directory`` in name order, looping forever."""

    def __init__(self, directory: Path, *, suffixes: Iterable[str] = IMAGE_SUFFIXES) -> None:
        allowed = {suffix.lower() for suffix in suffixes}
        self.paths: List[Path] = sorted(
            path for path in Path(directory).iterdir() if path.suffix.lower() in allowed
        )
        if not self.paths:
            raise ValueError(f"No image frames found in {directory}")
        self._cycle: Iterator[Path] = itertools.cycle(self.paths)
        self._lock = threading.Lock()
        self.current: Optional[Path] = None
        LOGGER.debug("DirectoryFrameSource loaded %s frames from %s", len(self.paths), directory)

    def capture(self) -> bytes:
        with self._lock:
            self.current = next(self._cycle)
        return self.current.read_bytes()
