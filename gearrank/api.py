from __future__ import annotations

"""
FastAPI application exposing ranking and similarity scoring to the
page-data layer.

- Payloads carry the records to rank / score; the service keeps no state
- Domain ids select price brackets and extension fields (desktour / camera)
- Unknown domains map to 404, malformed payloads to 422
"""

from typing import Sequence

import pandas as pd
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from .config import (
    CategoryRankRequest,
    CategoryRankResponse,
    HealthResponse,
    RankRequest,
    RankResponse,
    ScoringFeatures,
    SimilarityRequest,
    SimilarityResponse,
    SimilarProductsRequest,
    SimilarProductsResponse,
)
from .domain import DomainConfig, UnknownDomainError, get_domain_config
from .pipeline_types import ScoringInput
from .ranking import assign_ranks, calculate_category_rank
from .recommend import get_similar_products
from .similarity import calculate_similarity_score


app = FastAPI(title="gearrank")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


def _domain_or_404(domain: str) -> DomainConfig:
    try:
        return get_domain_config(domain)
    except UnknownDomainError as e:
        logger.warning("Rejected request for {}", e)
        raise HTTPException(status_code=404, detail=str(e))


def _to_scoring_input(features: ScoringFeatures) -> ScoringInput:
    return ScoringInput.build(**features.model_dump())


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(status="healthy")


@app.post("/ranks", response_model=RankResponse)
def ranks(req: RankRequest) -> RankResponse:
    items = [item.model_dump() for item in req.items]
    ranked = assign_ranks(items, page=req.page, limit=req.limit, only_if_sorted=req.only_if_sorted)
    return RankResponse(items=ranked)


@app.post("/category-rank", response_model=CategoryRankResponse)
def category_rank(req: CategoryRankRequest) -> CategoryRankResponse:
    items = [item.model_dump() for item in req.items]
    return CategoryRankResponse(rank=calculate_category_rank(req.target_mention_count, items))


@app.post("/similarity", response_model=SimilarityResponse)
def similarity(req: SimilarityRequest) -> SimilarityResponse:
    order: Sequence[str] = ()
    if req.price_range_order is not None:
        order = req.price_range_order
    elif req.domain is not None:
        order = _domain_or_404(req.domain).price_range_order

    result = calculate_similarity_score(
        _to_scoring_input(req.source),
        _to_scoring_input(req.candidate),
        order,
    )
    return SimilarityResponse(score=result.score, matched_tag_count=result.matched_tag_count)


@app.post("/similar-products", response_model=SimilarProductsResponse)
def similar_products(req: SimilarProductsRequest) -> SimilarProductsResponse:
    domain = _domain_or_404(req.domain)
    if not req.candidates:
        return SimilarProductsResponse(products=[])

    candidates_df = pd.DataFrame([c.model_dump() for c in req.candidates])
    products = get_similar_products(
        domain,
        req.product.model_dump(),
        candidates_df,
        limit=req.limit,
        min_matched_tags=req.min_matched_tags,
    )
    logger.info(
        "similar-products domain={} product={} candidates={} returned={}",
        domain.id, req.product.id, len(req.candidates), len(products),
    )
    return SimilarProductsResponse(products=products)
