from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Any, Dict, List

from errors import MalformedResponse, NoValidSuggestions


@dataclass(frozen=True, slots=True)
class Suggestion:
    emoji: str
    reason: str

    def __post_init__(self) -> None:
        if not is_filled(self.emoji) or not is_filled(self.reason):
            raise ValueError("Suggestion requires a non-empty emoji and reason")

    def to_dict(self) -> Dict[str, str]:
        return {"emoji": self.emoji, "reason": self.reason}


@dataclass(frozen=True, slots=True)
class SuggestionList:
    """
    Ordered, non-empty collection of suggestions.

    Use `validate_suggestions` to build one; the constructor only guards the
    invariant so a hand-built empty list fails loudly.
    """

    items: tuple[Suggestion, ...]

    def __post_init__(self) -> None:
        if not self.items:
            raise ValueError("SuggestionList must contain at least one suggestion")

    def __iter__(self) -> Iterator[Suggestion]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __getitem__(self, index: int) -> Suggestion:
        return self.items[index]

    def to_list(self) -> List[Dict[str, str]]:
        return [suggestion.to_dict() for suggestion in self.items]


def validate_suggestions(items: Iterable[Any], *, provider: str | None = None) -> SuggestionList:
    """
    Single validation boundary for every suggestion source (OpenAI, Gemini, mock).

    Raises:
        NoValidSuggestions: when `items` is empty.
        MalformedResponse: when an entry is not a well-formed Suggestion.
    """

    collected = tuple(items)
    if not collected:
        raise NoValidSuggestions("No valid emoji suggestions were returned", provider=provider)

    for entry in collected:
        if not isinstance(entry, Suggestion):
            raise MalformedResponse(
                f"Expected Suggestion entries, received {type(entry).__name__}",
                provider=provider,
            )
    return SuggestionList(items=collected)


def is_filled(value: Any) -> bool:
    return isinstance(value, str) and value.strip() != ""
