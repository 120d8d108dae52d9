"""Provider clients for emoji suggestion generation."""

from .gemini_client import GeminiSuggestionClient
from .openai_client import OpenAISuggestionClient

__all__ = ["GeminiSuggestionClient", "OpenAISuggestionClient"]
