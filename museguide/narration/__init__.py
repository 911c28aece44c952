"""Mini README: Narration subsystem.

Exports story modes and budgets, prompt construction, generation backends,
the fallback-aware generator, the playback interface, and the controller
that ties them to the item currently in view.
"""

from .backend import GeminiBackend, GenerationParams, NarrationBackend, build_backend
from .controller import Narration, NarrationController
from .generator import GeneratedNarration, NarrationGenerator, compose_fallback
from .modes import (
    MODE_BUDGETS,
    Language,
    ModeBudget,
    StoryMode,
    escalate,
    estimate_duration_seconds,
)
from .playback import LoggingSpeechPlayer, SpeechPlayer, SpeechRequest
from .prompts import build_prompt

__all__ = [
    "GeminiBackend",
    "GeneratedNarration",
    "GenerationParams",
    "Language",
    "LoggingSpeechPlayer",
    "MODE_BUDGETS",
    "ModeBudget",
    "Narration",
    "NarrationBackend",
    "NarrationController",
    "NarrationGenerator",
    "SpeechPlayer",
    "SpeechRequest",
    "StoryMode",
    "build_backend",
    "build_prompt",
    "compose_fallback",
    "escalate",
    "estimate_duration_seconds",
]
