from __future__ import annotations

import os
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field


# ---------------------------
# Paths
# ---------------------------

PROJECT_ROOT = Path(__file__).resolve().parents[1]

DATA_DIR = Path(os.getenv("GEARRANK_DATA_DIR", str(PROJECT_ROOT / "data")))
PRODUCTS_SNAPSHOT_PATH = DATA_DIR / "products.parquet"
MENTIONS_SNAPSHOT_PATH = DATA_DIR / "product_mentions.parquet"

SUPPORTED_SNAPSHOT_SUFFIXES = (".parquet", ".csv", ".json")


# ---------------------------
# Pagination
# ---------------------------

DEFAULT_PAGE = 1
DEFAULT_PAGE_LIMIT = int(os.getenv("GEARRANK_PAGE_LIMIT", "20"))

LISTING_SORTS = ("mention", "price_asc", "price_desc")
DEFAULT_LISTING_SORT = "mention"


# ---------------------------
# Similarity scoring points
# ---------------------------

TAG_MATCH_POINTS = 3
SUBCATEGORY_MATCH_POINTS = 3
SECONDARY_TAG_MATCH_POINTS = 2  # lens_tags / body_tags

PRICE_SAME_POINTS = 2
PRICE_ADJACENT_POINTS = 1

SAME_BRAND_PENALTY = 1       # alternatives should favour other brands
POPULARITY_BONUS = 1
POPULARITY_MIN_MENTIONS = 3  # candidate.mention_count >= 3 -> bonus


# ---------------------------
# Recommendation limits
# ---------------------------

SIMILAR_PRODUCTS_LIMIT = 4
BRAND_POPULAR_LIMIT = 4
CO_USED_PRODUCTS_LIMIT = 10
CO_USED_OVERFETCH_FACTOR = 3  # fetch 3x before category filtering

# mentions extracted with this confidence never count
LOW_CONFIDENCE = "low"


# ---------------------------
# Logging
# ---------------------------

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


# ---------------------------
# Pydantic models shared around the app
# ---------------------------

class ScoringFeatures(BaseModel):
    """
    Wire shape of a catalog item used for similarity scoring.
    """

    tags: List[str] = Field(default_factory=list)
    brand: Optional[str] = None
    price_range: Optional[str] = None
    mention_count: int = Field(default=0, ge=0)
    subcategory: Optional[str] = None
    lens_tags: Optional[List[str]] = None
    body_tags: Optional[List[str]] = None


class CatalogProduct(ScoringFeatures):
    """
    A product row as handed over by the page-data layer.
    """

    id: str
    name: str = ""
    category: str = ""
    slug: Optional[str] = None
    asin: Optional[str] = None
    amazon_image_url: Optional[str] = None
    amazon_price: Optional[float] = None


class RankedItem(BaseModel):
    """
    Any record carrying a mention count; extra fields are passed through.
    """

    model_config = {"extra": "allow"}

    mention_count: int = Field(ge=0)
    rank: Optional[int] = None


class RankRequest(BaseModel):
    items: List[RankedItem] = Field(default_factory=list)
    page: int = Field(default=DEFAULT_PAGE, ge=1)
    limit: int = Field(default=DEFAULT_PAGE_LIMIT, ge=1)
    only_if_sorted: bool = False


class RankResponse(BaseModel):
    items: List[RankedItem]


class CategoryRankRequest(BaseModel):
    target_mention_count: int = Field(ge=0)
    items: List[RankedItem] = Field(default_factory=list)


class CategoryRankResponse(BaseModel):
    rank: int


class SimilarityRequest(BaseModel):
    source: ScoringFeatures
    candidate: ScoringFeatures
    domain: Optional[str] = None
    price_range_order: Optional[List[str]] = None


class SimilarityResponse(BaseModel):
    score: int
    matched_tag_count: int


class SimilarProductsRequest(BaseModel):
    domain: str
    product: CatalogProduct
    candidates: List[CatalogProduct] = Field(default_factory=list)
    limit: int = Field(default=SIMILAR_PRODUCTS_LIMIT, ge=1)
    min_matched_tags: int = Field(default=0, ge=0)


class SimilarProduct(BaseModel):
    """
    One entry of a "similar / alternative products" block.
    """

    id: str
    name: str
    brand: Optional[str] = None
    category: str
    slug: Optional[str] = None
    asin: Optional[str] = None
    amazon_image_url: Optional[str] = None
    amazon_price: Optional[float] = None
    mention_count: int = Field(ge=0)
    similarity_score: int = 0
    matched_tag_count: int = Field(default=0, ge=0)


class SimilarProductsResponse(BaseModel):
    products: List[SimilarProduct]


class CoUsedProduct(BaseModel):
    id: str
    name: str
    brand: Optional[str] = None
    category: str
    slug: Optional[str] = None
    asin: Optional[str] = None
    amazon_image_url: Optional[str] = None
    co_occurrence_count: int = Field(ge=0)


class HealthResponse(BaseModel):
    """
    Response body for GET /health.
    """

    status: str
