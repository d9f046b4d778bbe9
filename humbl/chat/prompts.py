"""Deterministic selection of the prompt suggestions shown each day."""
from __future__ import annotations

from datetime import date

PROMPT_POOL: tuple[str, ...] = (
    "✨ What's a fun fact about space?",
    "💡 Explain quantum physics simply",
    "🎨 Help me write a creative story",
    "🍕 What's the best pizza recipe?",
    "🌍 Tell me about ancient civilizations",
    "🤖 How does AI actually work?",
    "🎵 What makes a song catchy?",
    "📚 Recommend a good book",
    "🏃 What's the science behind exercise?",
    "🧪 Explain photosynthesis simply",
    "🎬 What makes a great movie?",
    "🍀 How does luck actually work?",
    "🌈 Why do we see colors?",
    "🐾 Fun facts about animals",
    "🌊 How do ocean currents work?",
    "🎯 Tips for better focus",
    "🍯 Why do bees make honey?",
    "⚡ How does electricity work?",
    "🎭 What's the history of theater?",
    "🌱 How do plants communicate?",
    "🧠 How does memory work?",
    "🎪 Fun facts about circuses",
    "🏔️ What creates mountains?",
    "🎨 History of art movements",
    "🍰 Best baking tips",
    "🌙 Why do we have seasons?",
    "🎪 What makes music emotional?",
    "🦋 Life cycle of a butterfly",
    "🎯 How to set better goals",
    "🌍 Climate change explained simply",
)
DAILY_PROMPT_COUNT = 5
_STRIDE = 137


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value >= 0x80000000 else value


def day_seed(day: date) -> int:
    """32-bit string hash of ``year-month0-day`` (January is month 0)."""

    seed = 0
    for char in f"{day.year}-{day.month - 1}-{day.day}":
        seed = _to_int32(_to_int32(seed << 5) - seed + ord(char))
    return seed


def daily_prompts(day: date | None = None, *, count: int = DAILY_PROMPT_COUNT) -> list[str]:
    """Pick ``count`` distinct prompts for ``day``; the same day always yields the same list."""

    day = day or date.today()
    seed = day_seed(day)
    pool_size = len(PROMPT_POOL)
    used: set[int] = set()
    selected: list[str] = []
    for offset in range(min(count, pool_size)):
        index = abs(seed + offset * _STRIDE) % pool_size
        while index in used:
            index = (index + 1) % pool_size
        used.add(index)
        selected.append(PROMPT_POOL[index])
    return selected


__all__ = ["PROMPT_POOL", "DAILY_PROMPT_COUNT", "daily_prompts", "day_seed"]
