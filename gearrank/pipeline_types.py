"""Typed containers shared across ranking and recommendation modules."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, List, Optional


def _as_tag_set(tags: Optional[Iterable[str]]) -> Optional[FrozenSet[str]]:
    if tags is None:
        return None
    return frozenset(str(t) for t in tags)


@dataclass(frozen=True)
class ScoringInput:
    """
    Flattened feature record of a catalog item, as seen by the scorer.

    ``lens_tags`` / ``body_tags`` stay ``None`` for domains that do not
    define them, which is different from an empty set: both mean "no
    contribution" to the score.
    """

    tags: FrozenSet[str] = frozenset()
    brand: Optional[str] = None
    price_range: Optional[str] = None
    mention_count: int = 0
    subcategory: Optional[str] = None
    lens_tags: Optional[FrozenSet[str]] = None
    body_tags: Optional[FrozenSet[str]] = None

    def __post_init__(self) -> None:
        # plain lists are accepted; the scorer relies on set operations
        object.__setattr__(self, "tags", _as_tag_set(self.tags) or frozenset())
        object.__setattr__(self, "lens_tags", _as_tag_set(self.lens_tags))
        object.__setattr__(self, "body_tags", _as_tag_set(self.body_tags))

    @classmethod
    def build(
        cls,
        tags: Optional[Iterable[str]] = None,
        brand: Optional[str] = None,
        price_range: Optional[str] = None,
        mention_count: int = 0,
        subcategory: Optional[str] = None,
        lens_tags: Optional[Iterable[str]] = None,
        body_tags: Optional[Iterable[str]] = None,
    ) -> "ScoringInput":
        """Accept any iterables for the tag fields; duplicates collapse."""
        return cls(
            tags=_as_tag_set(tags) or frozenset(),
            brand=brand or None,
            price_range=price_range or None,
            mention_count=int(mention_count or 0),
            subcategory=subcategory or None,
            lens_tags=_as_tag_set(lens_tags),
            body_tags=_as_tag_set(body_tags),
        )


@dataclass(frozen=True)
class ScoringResult:
    score: int
    matched_tag_count: int


@dataclass(frozen=True)
class CategoryRank:
    """Rank of a product inside its category, for the detail page."""

    category_rank: int
    total_in_category: int


@dataclass
class ListingPage:
    items: List[dict] = field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 20

    @property
    def total_pages(self) -> int:
        if self.limit <= 0:
            return 0
        return (self.total + self.limit - 1) // self.limit
