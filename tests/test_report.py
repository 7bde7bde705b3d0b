import pandas as pd
import pytest

from gearrank.report import main


@pytest.fixture
def snapshots(tmp_path):
    products = pd.DataFrame(
        {
            "id": ["l1", "l2", "l3"],
            "name": ["35mm F1.4", "50mm F1.8", "24-70mm F2.8"],
            "category": ["レンズ"] * 3,
            "tags": ["portrait, street", "portrait", "event"],
            "lens_tags": ["prime", "prime", "zoom"],
            "slug": ["l1", "l2", "l3"],
        }
    )
    mentions = pd.DataFrame(
        {
            "product_id": ["l1", "l1", "l2", "l3", "l3"],
            "video_id": ["v1", "v2", "v1", "v3", "v4"],
            "confidence": ["high", "high", "high", "high", "low"],
        }
    )
    products_path = tmp_path / "products.csv"
    mentions_path = tmp_path / "mentions.csv"
    products.to_csv(products_path, index=False)
    mentions.to_csv(mentions_path, index=False)
    return products_path, mentions_path


def test_report_prints_ranked_listing(snapshots, capsys):
    products_path, mentions_path = snapshots
    code = main([
        "--products", str(products_path),
        "--mentions", str(mentions_path),
        "--domain", "camera",
        "--category", "レンズ",
    ])
    assert code == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "page 1/1 (3 products)"
    assert "35mm F1.4" in lines[1] and lines[1].strip().startswith("1")
    # l2 and l3 both have one confident mention
    assert lines[2].split()[0] == "2"
    assert lines[3].split()[0] == "2"


def test_report_applies_listing_filters(snapshots, capsys):
    products_path, mentions_path = snapshots
    code = main([
        "--products", str(products_path),
        "--mentions", str(mentions_path),
        "--domain", "camera",
        "--category", "レンズ",
        "--lens-tag", "prime",
        "--sort", "price_asc",
    ])
    assert code == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "page 1/1 (2 products)"
    # no price column: input order, no ranks
    assert [line.split()[0] for line in lines[1:]] == ["-", "-"]
    assert "35mm F1.4" in lines[1] and "50mm F1.8" in lines[2]


def test_report_prints_similar_products(snapshots, capsys):
    products_path, mentions_path = snapshots
    code = main([
        "--products", str(products_path),
        "--mentions", str(mentions_path),
        "--domain", "camera",
        "--similar-to", "l1",
    ])
    assert code == 0
    out = capsys.readouterr().out
    assert "50mm F1.8" in out
    assert "24-70mm" not in out


def test_report_unknown_product(snapshots):
    products_path, mentions_path = snapshots
    code = main([
        "--products", str(products_path),
        "--mentions", str(mentions_path),
        "--similar-to", "nope",
    ])
    assert code == 1
