"""Mini README: Story modes, languages and their budgets.

Structure:
    * StoryMode - narration depth selected by the visitor.
    * Language - narration language with prompt instruction and speech tag.
    * ModeBudget - word target, output cap and register for a mode.
    * MODE_BUDGETS - budget table keyed by mode.
    * escalate - next deeper mode for "tell me more".
    * estimate_duration_seconds - spoken duration from word count.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple

WORDS_PER_MINUTE = 150


class StoryMode(str, Enum):
    QUICK = "quick"
    STANDARD = "standard"
    DEEP = "deep"
    KIDS = "kids"

    @classmethod
    def from_str(cls, value: str) -> "StoryMode":
        """Coerce arbitrary casing into a valid story mode."""

        try:
            return cls(value.strip().lower())
        except (ValueError, AttributeError) as error:
            raise ValueError(f"Unsupported story mode: {value}") from error


class Language(str, Enum):
    ENGLISH = "en"
    ARABIC = "ar"

    @classmethod
    def from_str(cls, value: str) -> "Language":
        try:
            return cls(value.strip().lower())
        except (ValueError, AttributeError) as error:
            raise ValueError(f"Unsupported language: {value}") from error

    @property
    def instruction(self) -> str:
        if self is Language.ARABIC:
            return "Respond in Arabic (Egyptian dialect preferred for natural flow)."
        return "Respond in English."

    @property
    def speech_tag(self) -> str:
        """Locale passed to the speech synthesiser."""

        return "ar-EG" if self is Language.ARABIC else "en-US"


@dataclass(frozen=True, slots=True)
class ModeBudget:
    """Length and register constraints for one story mode."""

    word_range: Tuple[int, int]
    max_output_tokens: int
    duration_guide: str
    style: str
    fallback_fact_count: int


MODE_BUDGETS: Dict[StoryMode, ModeBudget] = {
    StoryMode.QUICK: ModeBudget(
        word_range=(50, 75),
        max_output_tokens=150,
        duration_guide="15-30 seconds (~50-75 words)",
        style="Give a punchy, memorable hook followed by one fascinating fact. Make them want to know more.",
        fallback_fact_count=1,
    ),
    StoryMode.STANDARD: ModeBudget(
        word_range=(150, 300),
        max_output_tokens=500,
        duration_guide="1-2 minutes (~150-300 words)",
        style=(
            "Tell the full story: what it is, why it matters, one surprising detail, "
            "and its historical significance."
        ),
        fallback_fact_count=3,
    ),
    StoryMode.DEEP: ModeBudget(
        word_range=(450, 750),
        max_output_tokens=1000,
        duration_guide="3-5 minutes (~450-750 words)",
        style=(
            "Provide comprehensive detail: historical context, creation and discovery, "
            "artistic significance, cultural meaning, and connections to other items."
        ),
        fallback_fact_count=3,
    ),
    StoryMode.KIDS: ModeBudget(
        word_range=(75, 110),
        max_output_tokens=200,
        duration_guide="30-45 seconds (~75-110 words, simple language)",
        style="Use simple words and fun comparisons. Make it exciting and relatable to a child's world.",
        fallback_fact_count=3,
    ),
}

_ESCALATION: Dict[StoryMode, StoryMode] = {
    StoryMode.QUICK: StoryMode.STANDARD,
    StoryMode.STANDARD: StoryMode.DEEP,
    StoryMode.DEEP: StoryMode.DEEP,
    StoryMode.KIDS: StoryMode.STANDARD,
}


def escalate(mode: StoryMode) -> StoryMode:
    """Return the mode used when the visitor asks for more depth."""

    return _ESCALATION[mode]


def word_count(text: str) -> int:
    return len(text.split())


def estimate_duration_seconds(text: str) -> int:
    """Spoken duration at 150 words per minute, rounded up."""

    return math.ceil(word_count(text) / WORDS_PER_MINUTE * 60)
