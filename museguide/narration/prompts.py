"""Mini README: Grounded prompt construction for narration.

Structure:
    * build_prompt - assemble rules, style, session context and item facts.

Only fields present on the item are written; absent optional fields are
left out entirely rather than rendered as placeholders. Facts are numbered
so the backend can be held to them.
"""

from __future__ import annotations

from typing import List, Sequence

from ..catalog import Item
from .modes import MODE_BUDGETS, Language, StoryMode


def build_prompt(
    item: Item,
    session_context: Sequence[str],
    mode: StoryMode,
    language: Language,
) -> str:
    """Return the full prompt text for ``item``."""

    budget = MODE_BUDGETS[mode]
    lines: List[str] = [
        "You are a master storyteller at the museum. You bring exhibits to life with vivid, "
        "accurate narratives that captivate visitors.",
        "",
        "CRITICAL RULES:",
        "- Use ONLY the facts provided below. Never invent details.",
        "- Speak as if you're standing next to the visitor, sharing something wonderful.",
        "- Be engaging but historically accurate.",
        f"- Keep to {budget.duration_guide}.",
        f"- {language.instruction}",
        "",
        f"STYLE FOR THIS MODE ({mode.value}):",
        budget.style,
    ]

    previous = [item_id for item_id in session_context if item_id != item.item_id]
    if previous:
        lines.append(
            f"The visitor has already seen these items: {', '.join(previous)}. "
            "Make connections if relevant."
        )

    lines.extend(["", "ITEM DATA:", f"Name: {item.name}"])
    if item.name_secondary:
        lines.append(f"Arabic Name: {item.name_secondary}")
    lines.append(f"Category: {item.category.label}")
    if item.dynasty:
        lines.append(f"Dynasty: {item.dynasty}")
    if item.period:
        lines.append(f"Period: {item.period}")
    if item.date_approx:
        lines.append(f"Date: {item.date_approx}")
    if item.materials:
        lines.append(f"Materials: {', '.join(item.materials)}")
    if item.dimensions:
        lines.append(f"Dimensions: {item.dimensions}")
    if item.weight:
        lines.append(f"Weight: {item.weight}")
    if item.discovery is not None:
        lines.append(f"Discovery: {item.discovery.describe()}")

    lines.extend(["", "Key Facts:"])
    lines.extend(f"{index}. {fact}" for index, fact in enumerate(item.facts, start=1))
    lines.extend(["", "Now, create the narration:"])
    return "\n".join(lines)
