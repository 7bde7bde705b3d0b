from __future__ import annotations

"""
Tie-aware rank assignment for listings sorted by mention count.

Products mentioned in the same number of videos/articles share a rank
("competition" style): counts ``[10, 10, 7]`` on the first page become
ranks ``[1, 1, 3]``.  Ranks are global across pages, so the first item of
page 2 with ``limit=20`` starts at 21.

* assign_ranks(items, page, limit, only_if_sorted) -> list[dict]
    Rank one page of plain records.

* rank_items_frame(df, page, limit, only_if_sorted) -> pd.DataFrame
    Same policy, vectorised over a DataFrame page.

* calculate_category_rank(target_mention_count, all_items) -> int
    Rank of a mention count inside a whole (unpaginated) category.
"""

from typing import Any, Iterable, List, Mapping, Optional, Sequence

import numpy as np
import pandas as pd
from loguru import logger

from .config import DEFAULT_PAGE, DEFAULT_PAGE_LIMIT


def _mention_count(item: Mapping[str, Any]) -> int:
    return int(item.get("mention_count") or 0)


def page_offset(page: int, limit: int) -> int:
    """Number of items on the pages before ``page``."""
    if page < 1 or limit < 1:
        raise ValueError(f"page and limit must be >= 1 (got page={page}, limit={limit})")
    return (int(page) - 1) * int(limit)


def is_sorted_by_mentions(counts: Sequence[int]) -> bool:
    """True if ``counts`` is non-increasing."""
    return all(counts[i - 1] >= counts[i] for i in range(1, len(counts)))


def assign_ranks(
    items: Iterable[Mapping[str, Any]],
    page: int = DEFAULT_PAGE,
    limit: int = DEFAULT_PAGE_LIMIT,
    only_if_sorted: bool = False,
) -> List[dict]:
    """
    Return copies of ``items`` with a ``rank`` key.

    ``items`` is one page of a listing sorted by ``mention_count`` desc.
    A new rank starts whenever the count drops; it equals the global
    1-based position of the first item with the new count.  With
    ``only_if_sorted=True`` an out-of-order page gets ``rank=None`` on
    every item instead of a misleading partial ranking.
    Raises ``ValueError`` when ``page`` or ``limit`` is below 1.
    """
    offset = page_offset(page, limit)
    records = [dict(item) for item in items]
    counts = [_mention_count(r) for r in records]

    if only_if_sorted and len(records) > 1 and not is_sorted_by_mentions(counts):
        logger.debug("Skipping rank assignment: {} items not sorted by mention_count", len(records))
        for r in records:
            r["rank"] = None
        return records

    previous: Optional[int] = None
    group_rank = offset + 1

    for index, (record, count) in enumerate(zip(records, counts)):
        if previous is None or count < previous:
            group_rank = offset + index + 1
        record["rank"] = group_rank
        previous = count

    return records


def rank_items_frame(
    df: pd.DataFrame,
    page: int = DEFAULT_PAGE,
    limit: int = DEFAULT_PAGE_LIMIT,
    only_if_sorted: bool = False,
) -> pd.DataFrame:
    """
    DataFrame flavour of :func:`assign_ranks`.

    Returns a copy with a nullable integer ``rank`` column; the input
    frame is left untouched.
    """
    offset = page_offset(page, limit)
    out = df.copy()
    if "mention_count" not in out.columns:
        out["mention_count"] = 0
    if out.empty:
        out["rank"] = pd.Series(dtype="Int64")
        return out

    counts = out["mention_count"].fillna(0).astype(int).to_numpy()

    if only_if_sorted and len(counts) > 1 and not bool(np.all(counts[:-1] >= counts[1:])):
        logger.debug("Skipping rank assignment: frame with {} rows not sorted", len(out))
        out["rank"] = pd.Series([pd.NA] * len(out), index=out.index, dtype="Int64")
        return out

    starts = np.ones(len(counts), dtype=bool)
    starts[1:] = counts[1:] < counts[:-1]

    # group start ranks are increasing, so a running max forward-fills them
    start_ranks = np.where(starts, offset + np.arange(len(counts)) + 1, 0)
    ranks = np.maximum.accumulate(start_ranks)

    out["rank"] = pd.array(ranks, dtype="Int64")
    return out


def calculate_category_rank(
    target_mention_count: int,
    all_items: Iterable[Mapping[str, Any]],
) -> int:
    """
    Rank of ``target_mention_count`` within a whole category.

    ``all_items`` may come in any order; it is sorted internally.  If no
    item has the target count, the rank of the last tie group visited is
    returned (1 for an empty category).
    """
    counts = sorted((_mention_count(i) for i in all_items), reverse=True)

    rank = 1
    previous: Optional[int] = None
    for index, count in enumerate(counts):
        if previous is not None and count < previous:
            rank = index + 1
        if count == target_mention_count:
            return rank
        previous = count

    return rank
