from __future__ import annotations

"""
Recommendation blocks for product pages and ranked category listings.

Everything here works on in-memory catalog frames (see ``catalog.py``):

* get_similar_products       -- same-category alternatives, scored
* get_brand_popular_products -- most mentioned products of the same brand
* get_co_used_products       -- products featured in the same videos/articles
* get_category_rank          -- tie-aware rank inside the product's category
* build_ranked_listing       -- one sorted, paginated, ranked listing page
"""

from collections import Counter
from typing import Any, Dict, List, Mapping, Optional

import pandas as pd
from loguru import logger

from .catalog import attach_mention_counts, confident_mentions, parse_tag_list, to_scoring_input
from .config import (
    BRAND_POPULAR_LIMIT,
    CO_USED_OVERFETCH_FACTOR,
    CO_USED_PRODUCTS_LIMIT,
    CoUsedProduct,
    DEFAULT_LISTING_SORT,
    DEFAULT_PAGE,
    DEFAULT_PAGE_LIMIT,
    LISTING_SORTS,
    SIMILAR_PRODUCTS_LIMIT,
    SimilarProduct,
)
from .domain import DomainConfig
from .mapping import frame_to_records, to_co_used_product, to_similar_product
from .pipeline_types import CategoryRank, ListingPage
from .ranking import calculate_category_rank, page_offset, rank_items_frame
from .similarity import calculate_similarity_score


def _with_counts(products_df: pd.DataFrame, mentions_df: Optional[pd.DataFrame]) -> pd.DataFrame:
    """
    Products with a ``mention_count`` column.  Counts come from
    ``mentions_df`` when given, otherwise an existing column is trusted.
    """
    if mentions_df is not None:
        return attach_mention_counts(products_df, mentions_df)
    out = products_df.copy()
    if "mention_count" not in out.columns:
        out["mention_count"] = 0
    out["mention_count"] = out["mention_count"].fillna(0).astype(int)
    return out


def _has_slug(df: pd.DataFrame) -> pd.Series:
    if "slug" not in df.columns:
        return pd.Series(False, index=df.index)
    return df["slug"].map(lambda s: isinstance(s, str) and bool(s.strip())).astype(bool)


def get_similar_products(
    domain: DomainConfig,
    product: Mapping[str, Any],
    products_df: pd.DataFrame,
    mentions_df: Optional[pd.DataFrame] = None,
    limit: int = SIMILAR_PRODUCTS_LIMIT,
    min_matched_tags: int = 0,
) -> List[SimilarProduct]:
    """
    Alternatives for ``product`` from its own category.

    Candidates must have a slug (a page to link to).  Only positive scores
    with at least ``min_matched_tags`` shared tags survive; ties on score
    go to the more mentioned product.
    """
    category = product.get("category")
    product_id = str(product.get("id"))

    df = _with_counts(products_df, mentions_df)
    pool = df[(df["category"] == category) & (df["id"].astype(str) != product_id) & _has_slug(df)]
    if pool.empty:
        return []

    # the source's own popularity plays no part in the score
    source = to_scoring_input(product, domain, mention_count=0)

    scored: List[SimilarProduct] = []
    for _, row in pool.iterrows():
        candidate = to_scoring_input(row, domain)
        result = calculate_similarity_score(source, candidate, domain.price_range_order)
        if result.score <= 0 or result.matched_tag_count < min_matched_tags:
            continue
        scored.append(to_similar_product(row, candidate.mention_count, result))

    scored.sort(key=lambda p: (-p.similarity_score, -p.mention_count))
    logger.debug(
        "Similar products for {}: {} of {} candidates kept", product_id, len(scored), len(pool)
    )
    return scored[:limit]


def get_brand_popular_products(
    product: Mapping[str, Any],
    products_df: pd.DataFrame,
    mentions_df: Optional[pd.DataFrame] = None,
    limit: int = BRAND_POPULAR_LIMIT,
) -> List[SimilarProduct]:
    """Most mentioned other products of the same brand (case-insensitive)."""
    brand = product.get("brand")
    if not isinstance(brand, str) or not brand.strip():
        return []
    product_id = str(product.get("id"))

    df = _with_counts(products_df, mentions_df)
    if "brand" not in df.columns:
        return []
    same_brand = df["brand"].map(lambda b: isinstance(b, str) and b.lower() == brand.lower()).astype(bool)
    pool = df[same_brand & (df["id"].astype(str) != product_id) & _has_slug(df) & (df["mention_count"] > 0)]
    pool = pool.sort_values("mention_count", ascending=False, kind="mergesort")

    return [to_similar_product(row, int(row["mention_count"])) for _, row in pool.head(limit).iterrows()]


def get_co_used_products(
    domain: DomainConfig,
    product_id: str,
    products_df: pd.DataFrame,
    mentions_df: pd.DataFrame,
    limit: int = CO_USED_PRODUCTS_LIMIT,
    current_category: Optional[str] = None,
) -> List[CoUsedProduct]:
    """
    Products featured in the same videos/articles as ``product_id``.

    Other products in ``current_category`` are dropped; categories that
    pair well with it come first, then higher co-occurrence counts.
    """
    product_id = str(product_id)
    mentions = confident_mentions(mentions_df)
    if mentions.empty:
        return []

    own = mentions[mentions["product_id"].astype(str) == product_id]
    if own.empty:
        return []
    others = mentions[mentions["product_id"].astype(str) != product_id]

    co_counts: Counter = Counter()
    for col in ("video_id", "article_id"):
        if col not in mentions.columns:
            continue
        sources = set(own[col].dropna())
        if sources:
            hits = others[others[col].isin(sources)]["product_id"].astype(str)
            co_counts.update(hits.tolist())

    if not co_counts:
        return []

    top_ids = [pid for pid, _ in co_counts.most_common(limit * CO_USED_OVERFETCH_FACTOR)]
    by_id: Dict[str, Mapping[str, Any]] = {
        str(row["id"]): row for _, row in products_df[products_df["id"].astype(str).isin(top_ids)].iterrows()
    }

    compatible = set(domain.get_compatible_categories(current_category)) if current_category else set()
    picked: List[CoUsedProduct] = []
    for pid in top_ids:
        row = by_id.get(pid)
        if row is None:
            logger.warning("Co-used product {} missing from products snapshot; skipping", pid)
            continue
        if row.get("category") == current_category:
            continue
        picked.append(to_co_used_product(row, co_counts[pid]))

    picked.sort(key=lambda p: (p.category not in compatible, -p.co_occurrence_count))
    return picked[:limit]


def get_category_rank(
    product_id: str,
    category: str,
    products_df: pd.DataFrame,
    mentions_df: pd.DataFrame,
) -> CategoryRank:
    """
    Rank of a product among the products of its category that have at
    least one confident mention.  ``category_rank`` is 0 when the product
    itself has none.
    """
    in_category = products_df[products_df["category"] == category]
    counted = attach_mention_counts(in_category, mentions_df)
    counted = counted[counted["mention_count"] > 0]
    if counted.empty:
        return CategoryRank(category_rank=0, total_in_category=0)

    total = len(counted)
    target = counted[counted["id"].astype(str) == str(product_id)]
    if target.empty:
        return CategoryRank(category_rank=0, total_in_category=total)

    rank = calculate_category_rank(
        int(target["mention_count"].iloc[0]),
        counted[["mention_count"]].to_dict(orient="records"),
    )
    return CategoryRank(category_rank=rank, total_in_category=total)


def _column(df: pd.DataFrame, name: str) -> pd.Series:
    if name in df.columns:
        return df[name]
    return pd.Series(None, index=df.index, dtype=object)


def _contains_tag(values: pd.Series, tag: str) -> pd.Series:
    return values.map(lambda v: tag in parse_tag_list(v)).astype(bool)


def _filter_listing(
    df: pd.DataFrame,
    domain: Optional[DomainConfig],
    category: Optional[str],
    type_tag: Optional[str],
    lens_tag: Optional[str],
    body_tag: Optional[str],
    brand: Optional[str],
    price_range: Optional[str],
) -> pd.DataFrame:
    mask = pd.Series(True, index=df.index)
    if category is not None:
        mask &= df["category"] == category
    if type_tag:
        if domain is not None and domain.has_subcategory:
            mask &= _column(df, "subcategory") == type_tag
        else:
            mask &= _contains_tag(_column(df, "tags"), type_tag)
    for tag, column, supported in (
        (lens_tag, "lens_tags", domain is not None and domain.has_lens_tags),
        (body_tag, "body_tags", domain is not None and domain.has_body_tags),
    ):
        if not tag:
            continue
        if not supported:
            logger.debug("Ignoring {} filter {!r}: not defined for this domain", column, tag)
            continue
        mask &= _contains_tag(_column(df, column), tag)
    if brand:
        mask &= _column(df, "brand").map(lambda b: isinstance(b, str) and b.lower() == brand.lower()).astype(bool)
    if price_range:
        mask &= _column(df, "price_range") == price_range
    return df[mask.astype(bool)]


def _sort_listing(df: pd.DataFrame, sort: str) -> pd.DataFrame:
    if sort == "mention":
        return df.sort_values("mention_count", ascending=False, kind="mergesort")
    if "amazon_price" not in df.columns:
        logger.warning("Listing sort {!r} requested but snapshot has no amazon_price; keeping input order", sort)
        return df
    prices = pd.to_numeric(df["amazon_price"], errors="coerce")
    ordered = df.assign(_price=prices).sort_values(
        "_price", ascending=(sort == "price_asc"), kind="mergesort", na_position="last"
    )
    return ordered.drop(columns="_price")


def build_ranked_listing(
    products_df: pd.DataFrame,
    mentions_df: Optional[pd.DataFrame] = None,
    category: Optional[str] = None,
    sort: str = DEFAULT_LISTING_SORT,
    page: int = DEFAULT_PAGE,
    limit: int = DEFAULT_PAGE_LIMIT,
    domain: Optional[DomainConfig] = None,
    type_tag: Optional[str] = None,
    lens_tag: Optional[str] = None,
    body_tag: Optional[str] = None,
    brand: Optional[str] = None,
    price_range: Optional[str] = None,
) -> ListingPage:
    """
    One page of a category listing.

    Only products with at least one confident mention are listed.
    ``type_tag`` matches ``subcategory`` on domains that have one and
    ``tags`` elsewhere; ``lens_tag`` / ``body_tag`` apply only to domains
    defining those fields; ``brand`` ignores case.  Price sorts put
    products without a price last.  Ranks are only meaningful for the
    mention-count ordering; other sorts return ``rank=None`` on every item.
    """
    if sort not in LISTING_SORTS:
        raise ValueError(f"Unknown listing sort {sort!r}; expected one of {LISTING_SORTS}")
    start = page_offset(page, limit)

    df = _with_counts(products_df, mentions_df)
    df = df[df["mention_count"] > 0]
    df = _filter_listing(df, domain, category, type_tag, lens_tag, body_tag, brand, price_range)

    ordered = _sort_listing(df, sort)
    window = ordered.iloc[start:start + limit]

    if sort == "mention":
        window = rank_items_frame(window, page=page, limit=limit)
        window["rank"] = window["rank"].astype(object).where(window["rank"].notna(), None)
    else:
        window = window.assign(rank=None)

    return ListingPage(items=frame_to_records(window), total=len(ordered), page=page, limit=limit)
