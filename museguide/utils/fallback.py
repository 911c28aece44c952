"""Mini README: Priority fallback chain.

Structure:
    * FallbackChain - ordered list of named steps; first non-``None`` wins.

Each step is a callable taking the same argument and returning an optional
result. Steps run in order and the chain stops at the first one producing a
value. Exceptions are not caught here; callers decide how a failing step is
reported.
"""

from __future__ import annotations

from typing import Callable, Generic, List, Optional, Sequence, Tuple, TypeVar

from ..logging_utils import get_logger

LOGGER = get_logger(__name__)

InputT = TypeVar("InputT")
ResultT = TypeVar("ResultT")


class FallbackChain(Generic[InputT, ResultT]):
    """Run steps in priority order until one produces a result."""

    def __init__(self, steps: Sequence[Tuple[str, Callable[[InputT], Optional[ResultT]]]]) -> None:
        self._steps: List[Tuple[str, Callable[[InputT], Optional[ResultT]]]] = list(steps)

    @property
    def step_names(self) -> List[str]:
        return [name for name, _ in self._steps]

    def run(self, value: InputT) -> Optional[ResultT]:
        """Return the first non-``None`` step result, or ``None``."""

        for name, step in self._steps:
            result = step(value)
            if result is not None:
                LOGGER.debug("Fallback chain satisfied by step '%s'", name)
                return result
            LOGGER.debug("Fallback chain step '%s' produced nothing", name)
        return None
