"""Mini README: Narration generator.

Structure:
    * GeneratedNarration - narration text with its spoken duration.
    * compose_fallback - deterministic local narration from item facts.
    * NarrationGenerator - prompt the backend, degrade to the fallback.

``NarrationGenerator.generate`` never raises. Any backend failure (or no
backend at all) produces the local composition on the first attempt; the
backend is not retried.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from ..catalog import Item
from ..errors import BackendFailure
from ..logging_utils import get_logger
from .backend import GenerationParams, NarrationBackend
from .modes import MODE_BUDGETS, Language, StoryMode, estimate_duration_seconds
from .prompts import build_prompt

LOGGER = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class GeneratedNarration:
    text: str
    duration_seconds: int
    from_fallback: bool = False


def compose_fallback(item: Item, mode: StoryMode) -> str:
    """Build the template narration used when the backend is unavailable."""

    text = f"This is {item.name}"
    if item.dynasty:
        text += f", from the {item.dynasty}"
    if item.period:
        text += f" during the {item.period}"
    text += ". "
    facts = item.facts[: MODE_BUDGETS[mode].fallback_fact_count]
    return text + " ".join(str(fact) for fact in facts)


class NarrationGenerator:
    """Generate grounded narration for a committed item."""

    def __init__(self, backend: Optional[NarrationBackend] = None) -> None:
        self.backend = backend
        LOGGER.debug(
            "NarrationGenerator using backend %s",
            backend.backend_name if backend is not None else "none (local only)",
        )

    def generate(
        self,
        item: Item,
        session_context: Sequence[str],
        mode: StoryMode,
        language: Language,
    ) -> GeneratedNarration:
        """Return narration for ``item``; falls back locally on any failure."""

        if self.backend is not None:
            params = GenerationParams(max_output_tokens=MODE_BUDGETS[mode].max_output_tokens)
            try:
                prompt = build_prompt(item, session_context, mode, language)
                text = self.backend.complete(prompt, params)
                LOGGER.info("Generated %s narration for %s", mode.value, item.item_id)
                return GeneratedNarration(text=text, duration_seconds=estimate_duration_seconds(text))
            except BackendFailure as error:
                LOGGER.warning("Narration backend failed for %s: %s", item.item_id, error)
            except Exception as error:
                LOGGER.exception("Unexpected narration backend error for %s: %s", item.item_id, error)

        text = compose_fallback(item, mode)
        return GeneratedNarration(
            text=text,
            duration_seconds=estimate_duration_seconds(text),
            from_fallback=True,
        )
