from gearrank.constants import CAMERA_PRICE_RANGE_ORDER
from gearrank.pipeline_types import ScoringInput
from gearrank.similarity import calculate_similarity_score, price_proximity_points


def _si(**kwargs) -> ScoringInput:
    return ScoringInput.build(**kwargs)


def test_tag_overlap_scores_three_per_tag():
    res = calculate_similarity_score(_si(tags=["A", "B"]), _si(tags=["A", "C"], mention_count=0), [])
    assert res.score == 3
    assert res.matched_tag_count == 1


def test_duplicate_candidate_tags_collapse():
    res = calculate_similarity_score(_si(tags=["A"]), _si(tags=["A", "A"]), [])
    assert res.score == 3
    assert res.matched_tag_count == 1


def test_brand_penalty_and_popularity_bonus_cancel_out():
    res = calculate_similarity_score(
        _si(brand="X", tags=[]),
        _si(brand="x", tags=[], mention_count=5),
        [],
    )
    assert res.score == 0
    assert res.matched_tag_count == 0


def test_price_proximity():
    order = ["a", "b", "c"]
    src = _si(price_range="a")
    assert calculate_similarity_score(src, _si(price_range="c"), order).score == 0
    assert calculate_similarity_score(src, _si(price_range="b"), order).score == 1
    assert calculate_similarity_score(src, _si(price_range="a"), order).score == 2


def test_unknown_or_missing_price_bracket_contributes_nothing():
    order = ["a", "b"]
    assert price_proximity_points("a", "zzz", order) == 0
    assert price_proximity_points(None, "a", order) == 0
    assert price_proximity_points("a", "a", []) == 0


def test_camera_extension_fields():
    source = _si(
        tags=["vlog"],
        subcategory="mirrorless",
        lens_tags=["wide", "prime"],
        body_tags=["ibis"],
        price_range="50000_100000",
    )
    candidate = _si(
        tags=["vlog", "studio"],
        subcategory="mirrorless",
        lens_tags=["prime"],
        body_tags=["ibis", "weather-sealed"],
        price_range="100000_300000",
        mention_count=1,
    )
    res = calculate_similarity_score(source, candidate, CAMERA_PRICE_RANGE_ORDER)
    # tag 3 + subcategory 3 + lens 2 + body 2 + adjacent price 1
    assert res.score == 11
    # subcategory does not count as a matched tag
    assert res.matched_tag_count == 3


def test_missing_extension_sets_score_nothing():
    source = _si(tags=["a"], lens_tags=["wide"])
    candidate = _si(tags=["a"])  # lens_tags absent
    res = calculate_similarity_score(source, candidate, [])
    assert res.score == 3
    assert res.matched_tag_count == 1


def test_subcategory_needs_both_sides():
    assert calculate_similarity_score(_si(subcategory="x"), _si(), []).score == 0
    assert calculate_similarity_score(_si(subcategory="x"), _si(subcategory="y"), []).score == 0


def test_popularity_bonus_makes_score_asymmetric():
    a = _si(tags=["t"], mention_count=0)
    b = _si(tags=["t"], mention_count=3)
    assert calculate_similarity_score(a, b, []).score == 4
    assert calculate_similarity_score(b, a, []).score == 3


def test_empty_inputs_score_zero():
    res = calculate_similarity_score(ScoringInput(), ScoringInput(), CAMERA_PRICE_RANGE_ORDER)
    assert res.score == 0
    assert res.matched_tag_count == 0


def test_directly_built_inputs_accept_plain_lists():
    source = ScoringInput(tags=["A", "B"], lens_tags=["wide"])
    candidate = ScoringInput(tags=["A", "C"], lens_tags=["wide", "fast"], body_tags=[])
    assert source.tags == frozenset({"A", "B"})
    res = calculate_similarity_score(source, candidate, [])
    assert res.score == 5
    assert res.matched_tag_count == 2
