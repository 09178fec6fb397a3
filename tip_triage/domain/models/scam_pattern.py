"""Configured scam patterns matched against tip content."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ScamPattern:
    """A keyword/phrase list that identifies a known scam.

    Matching is case-insensitive substring matching. A pattern fires when
    at least min_matches of its terms appear in the content.

    Attributes:
        name: Human-readable pattern name.
        terms: Keywords or phrases to look for.
        min_matches: Terms that must appear for the pattern to fire.
        is_active: Inactive patterns are skipped.
    """

    name: str
    terms: tuple[str, ...]
    min_matches: int = field(default=1)
    is_active: bool = field(default=True)

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("scam pattern name must not be empty")
        if not self.terms:
            raise ValueError("scam pattern requires at least one term")
        if not 1 <= self.min_matches <= len(self.terms):
            raise ValueError(
                f"min_matches must be 1-{len(self.terms)}, got {self.min_matches}"
            )

    def matches(self, content: str) -> bool:
        """True if enough terms appear in content."""
        if not self.is_active:
            return False
        lowered = content.lower()
        hits = sum(1 for term in self.terms if term.lower() in lowered)
        return hits >= self.min_matches
