import random

import pandas as pd
import pytest

from gearrank.ranking import (
    assign_ranks,
    calculate_category_rank,
    is_sorted_by_mentions,
    rank_items_frame,
)


def _items(counts):
    return [{"id": f"p{i}", "mention_count": c} for i, c in enumerate(counts)]


def test_ties_share_rank_and_next_group_skips():
    ranked = assign_ranks(_items([10, 10, 7]), page=1, limit=20)
    assert [r["rank"] for r in ranked] == [1, 1, 3]


def test_second_page_ranks_are_global():
    counts = list(range(40, 20, -1))  # strictly decreasing, 20 items
    ranked = assign_ranks(_items(counts), page=2, limit=20)
    assert [r["rank"] for r in ranked] == list(range(21, 41))


def test_ranks_monotonic_and_equal_only_for_equal_counts():
    counts = [9, 9, 8, 5, 5, 5, 2, 1, 1, 0]
    ranked = assign_ranks(_items(counts), page=3, limit=10)
    for a, b in zip(ranked, ranked[1:]):
        assert a["rank"] <= b["rank"]
        assert (a["rank"] == b["rank"]) == (a["mention_count"] == b["mention_count"])
    assert ranked[0]["rank"] == 21
    assert ranked[3]["rank"] == 24


def test_unsorted_input_with_guard_returns_no_ranks():
    ranked = assign_ranks([{"mention_count": 5}, {"mention_count": 9}], only_if_sorted=True)
    assert len(ranked) == 2
    assert all(r["rank"] is None for r in ranked)


def test_guard_accepts_sorted_input():
    ranked = assign_ranks(_items([3, 3, 1]), only_if_sorted=True)
    assert [r["rank"] for r in ranked] == [1, 1, 3]


def test_edge_cases():
    assert assign_ranks([]) == []
    assert assign_ranks(_items([4]), page=3, limit=10)[0]["rank"] == 21
    tied = assign_ranks(_items([2, 2, 2, 2]), page=2, limit=5)
    assert {r["rank"] for r in tied} == {6}


def test_inputs_are_not_mutated_and_fields_are_kept():
    items = _items([5, 1])
    ranked = assign_ranks(items)
    assert "rank" not in items[0]
    assert ranked[0]["id"] == "p0"
    assert ranked[0] is not items[0]


def test_is_sorted_by_mentions():
    assert is_sorted_by_mentions([5, 5, 3, 0])
    assert is_sorted_by_mentions([])
    assert not is_sorted_by_mentions([1, 2])


def test_rank_items_frame_matches_list_version():
    counts = [12, 12, 9, 9, 9, 4]
    df = pd.DataFrame(_items(counts)).set_index("id", drop=False)
    out = rank_items_frame(df, page=2, limit=6)

    expected = [r["rank"] for r in assign_ranks(_items(counts), page=2, limit=6)]
    assert out["rank"].tolist() == expected
    assert "rank" not in df.columns


def test_rank_items_frame_unsorted_guard_and_empty():
    df = pd.DataFrame(_items([1, 3]))
    out = rank_items_frame(df, only_if_sorted=True)
    assert out["rank"].isna().all()

    empty = rank_items_frame(pd.DataFrame({"mention_count": []}))
    assert "rank" in empty.columns
    assert empty.empty


def test_rank_items_frame_defaults_missing_counts_to_zero():
    out = rank_items_frame(pd.DataFrame({"id": ["a", "b"]}), page=2, limit=5)
    assert out["rank"].tolist() == [6, 6]
    assert out["mention_count"].tolist() == [0, 0]


def test_page_and_limit_below_one_are_rejected():
    for kwargs in ({"page": 0}, {"page": -1}, {"limit": 0}):
        with pytest.raises(ValueError):
            assign_ranks(_items([3, 1]), **kwargs)
        with pytest.raises(ValueError):
            rank_items_frame(pd.DataFrame(_items([3, 1])), **kwargs)


def test_category_rank_uses_tie_policy():
    items = _items([10, 10, 7, 3])
    assert calculate_category_rank(10, items) == 1
    assert calculate_category_rank(7, items) == 3
    assert calculate_category_rank(3, items) == 4


def test_category_rank_ignores_input_order():
    items = _items([1, 8, 8, 5, 2, 5, 0])
    expected = calculate_category_rank(5, items)
    rng = random.Random(7)
    for _ in range(5):
        shuffled = items[:]
        rng.shuffle(shuffled)
        assert calculate_category_rank(5, shuffled) == expected
    assert expected == 3


def test_category_rank_missing_target_and_empty():
    assert calculate_category_rank(3, []) == 1
    # no item has 6 mentions: rank of the last group visited
    assert calculate_category_rank(6, _items([9, 4, 4])) == 2
