"""
Deterministic keyword table used when the service runs in mock mode.

No I/O and no randomness: the same phrase always maps to the same list, which
keeps offline development and UI tests independent of live credentials.
"""

from __future__ import annotations

from typing import Dict, Tuple

from suggestion_model import Suggestion, SuggestionList, validate_suggestions

MOCK_PROVIDER_NAME = "mock"

# Scanned in declaration order; the first keyword found in the phrase wins.
KEYWORD_SUGGESTIONS: Dict[str, Tuple[Suggestion, ...]] = {
    "idea": (
        Suggestion("💡", "Represents ideas and inspiration"),
        Suggestion("🧠", "Symbolizes thinking and creativity"),
        Suggestion("✨", "Sparkles for brilliant ideas"),
        Suggestion("🎯", "Targeting the right solution"),
        Suggestion("🚀", "Launching new concepts"),
    ),
    "work": (
        Suggestion("💼", "Professional work context"),
        Suggestion("⚙️", "Working mechanism"),
        Suggestion("🔧", "Tools for the job"),
        Suggestion("📊", "Work analytics"),
        Suggestion("✅", "Completing tasks"),
    ),
    "happy": (
        Suggestion("😊", "Happy and content"),
        Suggestion("🎉", "Celebration"),
        Suggestion("😄", "Joyful expression"),
        Suggestion("🌟", "Bright and positive"),
        Suggestion("💖", "Love and happiness"),
    ),
    "sad": (
        Suggestion("😢", "Expressing sadness"),
        Suggestion("💔", "Heartbreak"),
        Suggestion("😔", "Disappointed"),
        Suggestion("🌧️", "Gloomy mood"),
        Suggestion("😞", "Down feeling"),
    ),
    "success": (
        Suggestion("🏆", "Achievement trophy"),
        Suggestion("🎯", "Hit the target"),
        Suggestion("✨", "Shining success"),
        Suggestion("🌟", "Star performer"),
        Suggestion("👑", "Champion"),
    ),
}

DEFAULT_SUGGESTIONS: Tuple[Suggestion, ...] = (
    Suggestion("💭", "General thought bubble"),
    Suggestion("📝", "Note or message"),
    Suggestion("🎯", "Focus and direction"),
    Suggestion("✨", "Special or important"),
    Suggestion("🔍", "Looking for the right fit"),
)


def match_keyword(phrase: str) -> str | None:
    """Return the first table keyword contained in the phrase, ignoring case."""
    lowered = phrase.lower()
    for keyword in KEYWORD_SUGGESTIONS:
        if keyword in lowered:
            return keyword
    return None


def mock_suggestions(phrase: str) -> SuggestionList:
    keyword = match_keyword(phrase)
    suggestions = KEYWORD_SUGGESTIONS[keyword] if keyword else DEFAULT_SUGGESTIONS
    return validate_suggestions(suggestions, provider=MOCK_PROVIDER_NAME)
