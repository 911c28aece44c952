"""Mini README: Speech playback collaborator interface.

Structure:
    * SpeechRequest - what the synthesiser is asked to say and how.
    * SpeechPlayer - interface implemented by the host's speech engine.
    * LoggingSpeechPlayer - logs utterances and completes them immediately.

Players report completion through exactly one of the two callbacks; the
narration controller treats both as the end of playback.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, List, Optional

from ..logging_utils import get_logger

LOGGER = get_logger(__name__)

SPEECH_PITCH = 1.0
SPEECH_RATE = 0.9


@dataclass(frozen=True, slots=True)
class SpeechRequest:
    text: str
    language_tag: str
    pitch: float = SPEECH_PITCH
    rate: float = SPEECH_RATE


class SpeechPlayer(ABC):
    """Speaks narration text."""

    @abstractmethod
    def speak(
        self,
        request: SpeechRequest,
        *,
        on_done: Callable[[], None],
        on_error: Callable[[str], None],
    ) -> None:
        """Start speaking; call ``on_done`` or ``on_error`` when finished."""

    @abstractmethod
    def stop(self) -> None:
        """Interrupt any ongoing speech."""


class LoggingSpeechPlayer(SpeechPlayer):
    """Player for headless runs: logs the text and finishes straight away."""

    def __init__(self) -> None:
        self.spoken: List[SpeechRequest] = []
        self.stopped = 0
        self.last_request: Optional[SpeechRequest] = None

    def speak(
        self,
        request: SpeechRequest,
        *,
        on_done: Callable[[], None],
        on_error: Callable[[str], None],
    ) -> None:
        self.spoken.append(request)
        self.last_request = request
        LOGGER.info("[%s] %s", request.language_tag, request.text)
        on_done()

    def stop(self) -> None:
        self.stopped += 1
