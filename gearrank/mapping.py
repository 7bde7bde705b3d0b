from __future__ import annotations
"""
Mapping utilities to convert catalog rows into API responses.

Centralises the conversion from DataFrame rows / plain dicts into the
Pydantic schemas (SimilarProduct / CoUsedProduct) and scrubs numpy and
pandas scalars out of listing records so they serialise cleanly.
"""

from typing import Any, Dict, List, Mapping, Optional

import numpy as np
import pandas as pd
from loguru import logger

from .config import CoUsedProduct, SimilarProduct
from .pipeline_types import ScoringResult


def _plain(value: Any) -> Any:
    """Turn numpy / pandas scalars into builtins, missing values into None."""
    if isinstance(value, np.ndarray):
        return [_plain(v) for v in value.tolist()]
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    if isinstance(value, np.integer):
        return int(value)
    if isinstance(value, np.floating):
        return None if np.isnan(value) else float(value)
    if isinstance(value, np.bool_):
        return bool(value)
    try:
        if value is pd.NA or value is pd.NaT or (isinstance(value, float) and np.isnan(value)):
            return None
    except TypeError:
        pass
    if isinstance(value, pd.Timestamp):
        return value.isoformat()
    return value


def _text(row: Mapping[str, Any], key: str) -> Optional[str]:
    value = _plain(row.get(key))
    if value is None:
        return None
    s = str(value).strip()
    return s or None


def _price(row: Mapping[str, Any]) -> Optional[float]:
    value = _plain(row.get("amazon_price"))
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        logger.warning("Ignoring non-numeric amazon_price {!r} for product {}", value, row.get("id"))
        return None


def to_similar_product(
    row: Mapping[str, Any],
    mention_count: int,
    result: Optional[ScoringResult] = None,
) -> SimilarProduct:
    return SimilarProduct(
        id=str(row.get("id")),
        name=_text(row, "name") or "",
        brand=_text(row, "brand"),
        category=_text(row, "category") or "",
        slug=_text(row, "slug"),
        asin=_text(row, "asin"),
        amazon_image_url=_text(row, "amazon_image_url"),
        amazon_price=_price(row),
        mention_count=int(mention_count),
        similarity_score=result.score if result else 0,
        matched_tag_count=result.matched_tag_count if result else 0,
    )


def to_co_used_product(row: Mapping[str, Any], co_occurrence_count: int) -> CoUsedProduct:
    return CoUsedProduct(
        id=str(row.get("id")),
        name=_text(row, "name") or "",
        brand=_text(row, "brand"),
        category=_text(row, "category") or "",
        slug=_text(row, "slug"),
        asin=_text(row, "asin"),
        amazon_image_url=_text(row, "amazon_image_url"),
        co_occurrence_count=int(co_occurrence_count),
    )


def frame_to_records(df: pd.DataFrame) -> List[Dict[str, Any]]:
    """DataFrame -> list of JSON-friendly dicts."""
    return [
        {str(k): _plain(v) for k, v in record.items()}
        for record in df.to_dict(orient="records")
    ]
