"""Mini README: Narration lifecycle for the item currently in view.

Structure:
    * Narration - current narration text, mode and playback position.
    * NarrationController - start, escalate, toggle and stop narration.

Starting narration for the item that is already playing is a no-op. When
several starts overlap, only the most recent one is kept. "Tell me more"
moves to the next deeper story mode and regenerates; at the deepest mode it
does nothing.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Optional

from ..catalog import CatalogStore, Item
from ..configuration import GuideSettings
from ..logging_utils import get_logger
from ..session import SessionTracker
from .generator import NarrationGenerator
from .modes import Language, StoryMode, escalate, estimate_duration_seconds
from .playback import SpeechPlayer, SpeechRequest

LOGGER = get_logger(__name__)


@dataclass(slots=True)
class Narration:
    """Narration of one item."""

    item_id: str
    text: str
    mode: StoryMode
    position_seconds: float = 0.0

    @property
    def duration_seconds(self) -> int:
        return estimate_duration_seconds(self.text)

    def as_dict(self) -> dict:
        return {
            "item_id": self.item_id,
            "text": self.text,
            "mode": self.mode.value,
            "duration_seconds": self.duration_seconds,
            "position_seconds": self.position_seconds,
        }


class NarrationController:
    """Own the active narration and its playback."""

    def __init__(
        self,
        generator: NarrationGenerator,
        player: SpeechPlayer,
        store: CatalogStore,
        tracker: SessionTracker,
        *,
        story_mode: StoryMode = StoryMode.STANDARD,
        language: Language = Language.ENGLISH,
        autoplay: bool = True,
    ) -> None:
        self.generator = generator
        self.player = player
        self.store = store
        self.tracker = tracker
        self.story_mode = story_mode
        self.language = language
        self.autoplay = autoplay
        self.last_error: Optional[str] = None

        self._lock = threading.RLock()
        self._current: Optional[Narration] = None
        self._active_item_id: Optional[str] = None
        self._request_serial = 0
        self._playing = False
        self._loading = False

    @classmethod
    def from_settings(
        cls,
        settings: GuideSettings,
        generator: NarrationGenerator,
        player: SpeechPlayer,
        store: CatalogStore,
        tracker: SessionTracker,
    ) -> "NarrationController":
        return cls(
            generator,
            player,
            store,
            tracker,
            story_mode=StoryMode.from_str(settings.story_mode),
            language=Language.from_str(settings.language),
            autoplay=settings.autoplay,
        )

    @property
    def current(self) -> Optional[Narration]:
        return self._current

    @property
    def is_playing(self) -> bool:
        return self._playing

    @property
    def is_loading(self) -> bool:
        return self._loading

    def start(self, item: Item) -> Optional[Narration]:
        """Narrate ``item`` in the configured mode unless it is already playing."""

        with self._lock:
            if self._active_item_id == item.item_id and self._playing:
                LOGGER.debug("Narration for %s already playing", item.item_id)
                return None
        return self._narrate(item, self.story_mode)

    def request_more(self) -> Optional[Narration]:
        """Regenerate the current narration one level deeper."""

        with self._lock:
            current = self._current
        if current is None:
            return None
        new_mode = escalate(current.mode)
        if new_mode == current.mode:
            LOGGER.debug("Narration for %s already at %s", current.item_id, current.mode.value)
            return None

        item = self.store.get_by_id(current.item_id)
        if item is None:
            LOGGER.warning("Cannot deepen narration; item %s left the catalog", current.item_id)
            return None
        self._halt_playback()
        return self._narrate(item, new_mode)

    def toggle(self) -> bool:
        """Pause or resume playback; returns whether narration is now playing."""

        with self._lock:
            if self._playing:
                self._halt_playback()
                return False
            current = self._current
        if current is not None:
            self._play(current)
        return self._playing

    def stop(self) -> None:
        """Stop playback and forget the current narration."""

        with self._lock:
            self._halt_playback()
            self._current = None
            self._active_item_id = None
            self._loading = False
            self._request_serial += 1

    def _narrate(self, item: Item, mode: StoryMode) -> Optional[Narration]:
        with self._lock:
            self._request_serial += 1
            serial = self._request_serial
            self._active_item_id = item.item_id
            self._loading = True
            self.last_error = None

        generated = self.generator.generate(item, self.tracker.session_context, mode, self.language)
        narration = Narration(item_id=item.item_id, text=generated.text, mode=mode)

        with self._lock:
            if serial != self._request_serial:
                LOGGER.debug("Dropping stale narration for %s", item.item_id)
                return None
            self._loading = False
            if self._playing:
                self._halt_playback()
            self._current = narration
        LOGGER.info(
            "Narration ready for %s (%s, %ss)", item.item_id, mode.value, narration.duration_seconds
        )
        if self.autoplay:
            self._play(narration)
        return narration

    def _play(self, narration: Narration) -> None:
        with self._lock:
            self._playing = True
        request = SpeechRequest(text=narration.text, language_tag=self.language.speech_tag)
        self.player.speak(
            request,
            on_done=lambda: self._finished(narration),
            on_error=lambda message: self._failed(narration, message),
        )

    def _halt_playback(self) -> None:
        with self._lock:
            if self._playing:
                self.player.stop()
            self._playing = False

    def _finished(self, narration: Narration) -> None:
        with self._lock:
            if narration is self._current:
                narration.position_seconds = float(narration.duration_seconds)
                self._playing = False
        self.tracker.update_listened(narration.item_id, narration.duration_seconds)

    def _failed(self, narration: Narration, message: str) -> None:
        LOGGER.error("Speech playback failed for %s: %s", narration.item_id, message)
        with self._lock:
            if narration is self._current:
                self._playing = False
            self.last_error = "Speech synthesis failed"
