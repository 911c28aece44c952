"""Mini README: Narration generation backends.

Structure:
    * GenerationParams - fixed sampling parameters plus the mode's length cap.
    * NarrationBackend - interface returning generated text for a prompt.
    * GeminiBackend - ``generateContent`` REST client built on httpx.
    * build_backend - backend for the current settings, or ``None`` offline.

Backends raise ``BackendFailure`` for any unsuccessful call (HTTP error,
timeout, transport error, unusable body). They never retry; recovery is the
generator's local fallback.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from ..configuration import GuideSettings
from ..errors import BackendFailure, InitializationFailure
from ..logging_utils import get_logger

LOGGER = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class GenerationParams:
    """Sampling configuration sent with every request."""

    max_output_tokens: int
    temperature: float = 0.7
    top_k: int = 40
    top_p: float = 0.95


class NarrationBackend(ABC):
    """Text generation service used for narration."""

    backend_name: str = "generic"

    @abstractmethod
    def complete(self, prompt: str, params: GenerationParams) -> str:
        """Return generated text or raise ``BackendFailure``."""


class GeminiBackend(NarrationBackend):
    """Client for a Gemini-style ``generateContent`` endpoint."""

    backend_name = "gemini"

    def __init__(
        self,
        *,
        api_key: Optional[str],
        api_url: str,
        timeout_seconds: float = 20.0,
        client: Optional[httpx.Client] = None,
    ) -> None:
        if not api_key:
            raise InitializationFailure("Narration backend requires an API key")
        self.api_url = api_url
        self._api_key = api_key
        self._client = client or httpx.Client(timeout=timeout_seconds)
        LOGGER.debug("GeminiBackend targeting %s", api_url)

    def complete(self, prompt: str, params: GenerationParams) -> str:
        body = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": params.temperature,
                "topK": params.top_k,
                "topP": params.top_p,
                "maxOutputTokens": params.max_output_tokens,
            },
        }
        try:
            response = self._client.post(self.api_url, params={"key": self._api_key}, json=body)
        except httpx.TimeoutException as error:
            raise BackendFailure("Narration backend timed out") from error
        except httpx.HTTPError as error:
            raise BackendFailure(f"Narration backend unreachable: {error}") from error

        if not response.is_success:
            raise BackendFailure(f"Narration backend returned HTTP {response.status_code}")
        try:
            text = _extract_text(response.json())
        except ValueError as error:
            raise BackendFailure(f"Narration backend returned an unusable body: {error}") from error
        return text

    def close(self) -> None:
        self._client.close()


def _extract_text(payload: Dict[str, Any]) -> str:
    try:
        text = payload["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError) as error:
        raise ValueError("missing candidates[0].content.parts[0].text") from error
    if not isinstance(text, str) or not text.strip():
        raise ValueError("empty narration text")
    return text.strip()


def build_backend(settings: GuideSettings) -> Optional[NarrationBackend]:
    """Return the configured backend, or ``None`` when narration stays local."""

    if settings.offline_mode:
        LOGGER.info("Offline mode: narration will be composed locally")
        return None
    if not settings.narration_api_key:
        LOGGER.warning("No narration API key configured; narration will be composed locally")
        return None
    return GeminiBackend(
        api_key=settings.narration_api_key,
        api_url=settings.narration_api_url,
        timeout_seconds=settings.narration_timeout_seconds,
    )
