import numpy as np
import pandas as pd

from gearrank.config import SimilarProduct
from gearrank.mapping import frame_to_records, to_co_used_product, to_similar_product
from gearrank.pipeline_types import ScoringResult


def test_to_similar_product_strict_schema():
    row = pd.Series(
        {
            "id": 42,
            "name": " Arm ",
            "brand": "",
            "category": "モニターアーム",
            "slug": "arm",
            "amazon_price": "12800",
            "amazon_image_url": np.nan,
        }
    )
    item = to_similar_product(row, mention_count=np.int64(3), result=ScoringResult(score=5, matched_tag_count=1))
    assert isinstance(item, SimilarProduct)
    assert item.id == "42"
    assert item.name == "Arm"
    assert item.brand is None
    assert item.amazon_price == 12800.0
    assert item.amazon_image_url is None
    assert item.mention_count == 3
    assert (item.similarity_score, item.matched_tag_count) == (5, 1)


def test_to_similar_product_defaults_and_bad_price():
    item = to_similar_product({"id": "a", "name": "A", "category": "c", "amazon_price": "n/a"}, 0)
    assert item.similarity_score == 0
    assert item.matched_tag_count == 0
    assert item.amazon_price is None


def test_to_co_used_product():
    item = to_co_used_product({"id": "m1", "name": "Mouse", "category": "マウス"}, 2)
    assert item.co_occurrence_count == 2
    assert item.slug is None


def test_frame_to_records_scrubs_numpy_values():
    df = pd.DataFrame(
        {
            "id": ["a", "b"],
            "mention_count": np.array([3, 0], dtype="int64"),
            "amazon_price": [1980.0, np.nan],
            "tags": pd.Series([np.array(["x"]), []], dtype=object),
        }
    )
    records = frame_to_records(df)
    assert records[0] == {"id": "a", "mention_count": 3, "amazon_price": 1980.0, "tags": ["x"]}
    assert records[1]["amazon_price"] is None
    assert isinstance(records[0]["mention_count"], int)
