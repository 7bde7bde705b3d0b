# gearrank/report.py
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from loguru import logger

from . import config
from .catalog import load_mentions, load_products
from .domain import get_all_domains, get_domain_config
from .pipeline_types import ListingPage
from .recommend import build_ranked_listing, get_similar_products

# ---------- formatting ----------

def format_listing(listing: ListingPage) -> List[str]:
    lines = [f"page {listing.page}/{max(listing.total_pages, 1)} ({listing.total} products)"]
    for item in listing.items:
        rank = item.get("rank")
        rank_txt = f"{rank:>4}" if rank is not None else "   -"
        lines.append(f"{rank_txt}  {item.get('mention_count', 0):>4}  {item.get('name', '')}")
    return lines


def format_similar(products) -> List[str]:
    if not products:
        return ["no similar products"]
    return [
        f"{p.similarity_score:>4}  {p.matched_tag_count:>3}  {p.mention_count:>4}  {p.name}"
        for p in products
    ]

# ---------- CLI ----------

def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Ranked listings and similar products from catalog snapshots")
    ap.add_argument("--products", type=Path, default=config.PRODUCTS_SNAPSHOT_PATH,
                    help="Products snapshot (.parquet, .csv or .json)")
    ap.add_argument("--mentions", type=Path, default=config.MENTIONS_SNAPSHOT_PATH,
                    help="Product mentions snapshot (.parquet, .csv or .json)")
    ap.add_argument("--domain", choices=get_all_domains(), default="desktour")

    mode = ap.add_mutually_exclusive_group(required=True)
    mode.add_argument("--category", help="Print one ranked listing page of this category")
    mode.add_argument("--similar-to", dest="similar_to", help="Print alternatives for this product id")

    ap.add_argument("--sort", choices=config.LISTING_SORTS, default=config.DEFAULT_LISTING_SORT)
    ap.add_argument("--page", type=int, default=config.DEFAULT_PAGE)
    ap.add_argument("--limit", type=int, default=None,
                    help="Page size for listings, block size for similar products")
    ap.add_argument("--min-matched-tags", dest="min_matched_tags", type=int, default=0)

    filters = ap.add_argument_group("listing filters")
    filters.add_argument("--type-tag", dest="type_tag", help="Subcategory (camera) or style tag (desktour)")
    filters.add_argument("--lens-tag", dest="lens_tag")
    filters.add_argument("--body-tag", dest="body_tag")
    filters.add_argument("--brand", help="Brand name, case-insensitive")
    filters.add_argument("--price-range", dest="price_range")
    return ap


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logger.remove()
    logger.add(sys.stderr, level=config.LOG_LEVEL)

    domain = get_domain_config(args.domain)
    products = load_products(args.products)
    mentions = load_mentions(args.mentions)

    if args.category is not None:
        listing = build_ranked_listing(
            products,
            mentions,
            category=args.category,
            sort=args.sort,
            page=args.page,
            limit=args.limit or config.DEFAULT_PAGE_LIMIT,
            domain=domain,
            type_tag=args.type_tag,
            lens_tag=args.lens_tag,
            body_tag=args.body_tag,
            brand=args.brand,
            price_range=args.price_range,
        )
        lines = format_listing(listing)
    else:
        match = products[products["id"] == str(args.similar_to)]
        if match.empty:
            logger.error("Product {} not found in {}", args.similar_to, args.products)
            return 1
        similar = get_similar_products(
            domain,
            match.iloc[0],
            products,
            mentions,
            limit=args.limit or config.SIMILAR_PRODUCTS_LIMIT,
            min_matched_tags=args.min_matched_tags,
        )
        lines = format_similar(similar)

    for line in lines:
        print(line)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
