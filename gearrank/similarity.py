from __future__ import annotations

"""
Point-based similarity between two products of the same category.

Used to pick "alternatives" for a product detail page: candidates sharing
style/use-case tags, subcategory, lens/body tags and a nearby price
bracket score higher; the same brand is mildly penalised so that the
block suggests other makers; well-mentioned candidates get a small bonus.
"""

from typing import FrozenSet, Optional, Sequence

from .config import (
    POPULARITY_BONUS,
    POPULARITY_MIN_MENTIONS,
    PRICE_ADJACENT_POINTS,
    PRICE_SAME_POINTS,
    SAME_BRAND_PENALTY,
    SECONDARY_TAG_MATCH_POINTS,
    SUBCATEGORY_MATCH_POINTS,
    TAG_MATCH_POINTS,
)
from .pipeline_types import ScoringInput, ScoringResult


def _overlap(source: Optional[FrozenSet[str]], candidate: Optional[FrozenSet[str]]) -> int:
    """Number of candidate entries also present in the source set."""
    if not source or not candidate:
        return 0
    return len(candidate & source)


def price_proximity_points(
    source_range: Optional[str],
    candidate_range: Optional[str],
    price_range_order: Sequence[str],
) -> int:
    """
    +2 for the same bracket, +1 for neighbours, 0 otherwise.

    Brackets missing from ``price_range_order`` contribute nothing.
    """
    if not source_range or not candidate_range:
        return 0
    order = list(price_range_order)
    if source_range not in order or candidate_range not in order:
        return 0
    distance = abs(order.index(source_range) - order.index(candidate_range))
    if distance == 0:
        return PRICE_SAME_POINTS
    if distance == 1:
        return PRICE_ADJACENT_POINTS
    return 0


def _same_brand(a: Optional[str], b: Optional[str]) -> bool:
    return bool(a) and bool(b) and a.lower() == b.lower()


def calculate_similarity_score(
    source: ScoringInput,
    candidate: ScoringInput,
    price_range_order: Sequence[str],
) -> ScoringResult:
    """
    Score ``candidate`` as an alternative to ``source``.

    Every dimension is evaluated independently:

    ========================  ===========================
    tag overlap               +3 per shared tag
    subcategory               +3 if equal
    lens / body tag overlap   +2 per shared entry
    price bracket             +2 same, +1 adjacent
    same brand                -1 (case-insensitive)
    popularity                +1 if candidate has >= 3 mentions
    ========================  ===========================

    ``matched_tag_count`` counts shared entries of tags, lens tags and body
    tags only.  The popularity bonus looks at the candidate alone, so
    ``score(a, b)`` and ``score(b, a)`` generally differ.
    """
    tag_hits = _overlap(source.tags, candidate.tags)
    lens_hits = _overlap(source.lens_tags, candidate.lens_tags)
    body_hits = _overlap(source.body_tags, candidate.body_tags)

    score = tag_hits * TAG_MATCH_POINTS
    score += (lens_hits + body_hits) * SECONDARY_TAG_MATCH_POINTS

    if source.subcategory and candidate.subcategory and source.subcategory == candidate.subcategory:
        score += SUBCATEGORY_MATCH_POINTS

    score += price_proximity_points(source.price_range, candidate.price_range, price_range_order)

    if _same_brand(source.brand, candidate.brand):
        score -= SAME_BRAND_PENALTY

    if candidate.mention_count >= POPULARITY_MIN_MENTIONS:
        score += POPULARITY_BONUS

    return ScoringResult(score=score, matched_tag_count=tag_hits + lens_hits + body_hits)
