from __future__ import annotations

"""
Catalog snapshots: products and product mentions as pandas DataFrames.

The persistence layer exports two tables per vertical; this module loads
them, normalises the messy list columns and turns rows into the records
the ranking and scoring code works on.

Public helpers:

* load_products(path) / load_mentions(path) -> pd.DataFrame
* normalize_products_df(df) -> pd.DataFrame
* count_mentions(mentions_df, product_ids=None) -> dict[str, int]
* attach_mention_counts(products_df, mentions_df) -> pd.DataFrame
* to_scoring_input(row, domain) -> ScoringInput
"""

import ast
import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional

import numpy as np
import pandas as pd
from loguru import logger

from .config import (
    LOW_CONFIDENCE,
    MENTIONS_SNAPSHOT_PATH,
    PRODUCTS_SNAPSHOT_PATH,
    SUPPORTED_SNAPSHOT_SUFFIXES,
)
from .constants import (
    MENTION_REQUIRED_COLUMNS,
    OPTIONAL_TEXT_COLUMNS,
    PRODUCT_REQUIRED_COLUMNS,
    TAG_COLUMNS,
)
from .domain import DomainConfig
from .pipeline_types import ScoringInput


# ---------------------------
# Coercion helpers
# ---------------------------

def parse_tag_list(value: Any) -> List[str]:
    """
    Normalise a tag column value to ``list[str]``.

    Robust handling of shapes found in exports:
      - NaN / None -> []
      - list/tuple/set/np.ndarray -> list[str]
      - '["a", "b"]' / "['a', 'b']" -> ["a", "b"]
      - "a, b" -> ["a", "b"]
    Order is kept, duplicates and blanks are dropped.
    """
    if value is None:
        return []
    if isinstance(value, (list, tuple, set, frozenset, np.ndarray)):
        raw = list(value)
    else:
        try:
            if pd.isna(value):
                return []
        except (TypeError, ValueError):
            pass
        s = str(value).strip()
        if not s:
            return []
        if s.startswith("[") and s.endswith("]"):
            try:
                raw = json.loads(s)
            except ValueError:
                try:
                    raw = ast.literal_eval(s)
                except (ValueError, SyntaxError):
                    raw = s.strip("[]").split(",")
            if not isinstance(raw, (list, tuple)):
                raw = [raw]
        else:
            raw = s.split(",")

    out: List[str] = []
    seen = set()
    for v in raw:
        t = str(v).strip().strip("'\"").strip()
        if t and t not in seen:
            seen.add(t)
            out.append(t)
    return out


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    try:
        if pd.isna(value):
            return None
    except (TypeError, ValueError):
        pass
    s = str(value).strip()
    return s or None


def _optional_text_column(values: pd.Series) -> pd.Series:
    # built directly so blanks stay None even on string-dtype columns
    return pd.Series([_optional_text(v) for v in values], index=values.index, dtype=object)


def _coerce_count(value: Any) -> int:
    try:
        if value is None:
            return 0
        if isinstance(value, (int, np.integer)):
            return max(0, int(value))
        if isinstance(value, float) and np.isnan(value):
            return 0
        return max(0, int(float(str(value).strip() or 0)))
    except (TypeError, ValueError):
        return 0


# ---------------------------
# Normalisation
# ---------------------------

def _require_columns(df: pd.DataFrame, required: Iterable[str], what: str) -> None:
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise ValueError(f"{what} snapshot is missing required columns: {missing}")


def normalize_products_df(df: pd.DataFrame) -> pd.DataFrame:
    """
    Canonical products frame: string ids, list-valued tag columns and
    ``None`` for blank optional text fields.
    """
    _require_columns(df, PRODUCT_REQUIRED_COLUMNS, "Products")
    out = df.copy()

    out["id"] = out["id"].astype(str)
    out["name"] = out["name"].map(lambda v: _optional_text(v) or "")
    out["category"] = out["category"].map(lambda v: _optional_text(v) or "")

    for col in TAG_COLUMNS:
        if col in out.columns:
            out[col] = out[col].map(parse_tag_list)
        else:
            out[col] = pd.Series([[] for _ in range(len(out))], index=out.index, dtype=object)

    for col in OPTIONAL_TEXT_COLUMNS:
        if col in out.columns:
            out[col] = _optional_text_column(out[col])
        else:
            out[col] = None

    if "mention_count" in out.columns:
        out["mention_count"] = out["mention_count"].map(_coerce_count)

    dupes = int(out["id"].duplicated().sum())
    if dupes:
        logger.warning("Dropping {} duplicate product ids", dupes)
        out = out.drop_duplicates(subset="id", keep="first")

    return out.reset_index(drop=True)


def normalize_mentions_df(df: pd.DataFrame) -> pd.DataFrame:
    _require_columns(df, MENTION_REQUIRED_COLUMNS, "Mentions")
    out = df.copy()
    out["product_id"] = out["product_id"].astype(str)
    for col in ("video_id", "article_id", "confidence"):
        if col in out.columns:
            out[col] = _optional_text_column(out[col])
        else:
            out[col] = None
    return out


# ---------------------------
# IO helpers
# ---------------------------

def _read_snapshot(path: Path) -> pd.DataFrame:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Snapshot not found: {path}")
    ext = path.suffix.lower()
    if ext not in SUPPORTED_SNAPSHOT_SUFFIXES:
        raise ValueError(
            f"Unsupported snapshot format {ext!r}; expected one of {SUPPORTED_SNAPSHOT_SUFFIXES}"
        )
    if ext == ".parquet":
        return pd.read_parquet(path)
    if ext == ".csv":
        return pd.read_csv(path, encoding="utf-8", dtype=str)
    return pd.read_json(path, orient="records", dtype=False)


def load_products(path: Path = PRODUCTS_SNAPSHOT_PATH) -> pd.DataFrame:
    logger.info("Loading products snapshot from {}", path)
    df = normalize_products_df(_read_snapshot(path))
    logger.info("Loaded {} products", len(df))
    return df


def load_mentions(path: Path = MENTIONS_SNAPSHOT_PATH) -> pd.DataFrame:
    logger.info("Loading mentions snapshot from {}", path)
    df = normalize_mentions_df(_read_snapshot(path))
    logger.info("Loaded {} product mentions", len(df))
    return df


# ---------------------------
# Mention counts
# ---------------------------

def confident_mentions(mentions_df: pd.DataFrame) -> pd.DataFrame:
    """Mention rows that count towards popularity (not low confidence)."""
    if mentions_df is None or mentions_df.empty:
        return pd.DataFrame(columns=["product_id", "video_id", "article_id", "confidence"])
    if "confidence" not in mentions_df.columns:
        return mentions_df
    return mentions_df[mentions_df["confidence"] != LOW_CONFIDENCE]


def count_mentions(
    mentions_df: pd.DataFrame,
    product_ids: Optional[Iterable[str]] = None,
) -> Dict[str, int]:
    """
    Number of confident mentions per product id.

    When ``product_ids`` is given, every listed id appears in the result,
    with 0 for products nobody mentioned.
    """
    confident = confident_mentions(mentions_df)
    counts: Dict[str, int] = {}
    if not confident.empty:
        counts = {
            str(pid): int(n)
            for pid, n in confident["product_id"].astype(str).value_counts().items()
        }
    if product_ids is None:
        return counts
    return {str(pid): counts.get(str(pid), 0) for pid in product_ids}


def attach_mention_counts(products_df: pd.DataFrame, mentions_df: pd.DataFrame) -> pd.DataFrame:
    """Copy of ``products_df`` with a ``mention_count`` column from mentions."""
    out = products_df.copy()
    counts = count_mentions(mentions_df)
    out["mention_count"] = out["id"].astype(str).map(counts).fillna(0).astype(int)
    return out


# ---------------------------
# Row -> scorer input
# ---------------------------

def to_scoring_input(
    row: Mapping[str, Any],
    domain: DomainConfig,
    mention_count: Optional[int] = None,
) -> ScoringInput:
    """
    Build a :class:`ScoringInput` from a product row or dict.

    Extension fields the domain does not define are dropped so that a
    stray column never leaks into the desk-setup score.
    """
    count = mention_count if mention_count is not None else _coerce_count(row.get("mention_count", 0))
    return ScoringInput.build(
        tags=parse_tag_list(row.get("tags")),
        brand=_optional_text(row.get("brand")),
        price_range=_optional_text(row.get("price_range")),
        mention_count=count,
        subcategory=_optional_text(row.get("subcategory")) if domain.has_subcategory else None,
        lens_tags=parse_tag_list(row.get("lens_tags")) if domain.has_lens_tags else None,
        body_tags=parse_tag_list(row.get("body_tags")) if domain.has_body_tags else None,
    )
