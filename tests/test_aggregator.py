import pytest

from utils.aggregator import Aggregator, RankedResult, format_percent


@pytest.fixture
def aggregator():
    return Aggregator()


def test_rank_orders_by_score_descending(aggregator):
    result = aggregator.rank([0.4, 0.1, 0.3, 0.2], ["A", "B", "C", "D"])

    assert result.names() == ["A", "C", "D", "B"]
    assert [entry.rank for entry in result] == [1, 2, 3, 4]


def test_rank_is_stable_for_ties(aggregator):
    result = aggregator.rank([0.2, 0.5, 0.2, 0.1], ["first", "top", "second", "last"])

    assert result.names() == ["top", "first", "second", "last"]


def test_percent_is_share_of_total(aggregator):
    result = aggregator.rank([0.6, 0.4], ["A", "B"], ids=[10, 20])

    assert [entry.percent for entry in result] == ["60.00%", "40.00%"]
    assert result.score_map() == {10: 0.6, 20: 0.4}


def test_empty_input_gives_empty_ranking(aggregator):
    assert len(aggregator.rank([], [])) == 0
    assert not aggregator.aggregate(["Urgency"], [1.0], {}, names=[])
    assert aggregator.aggregate(["Urgency"], [1.0], {}, names=[]) == RankedResult()


def test_format_percent_with_zero_total():
    assert format_percent(0.0, 0.0) == "0.00%"
    assert format_percent(1.0, 3.0) == "33.33%"


def test_combine_weights_criteria(aggregator):
    scores = aggregator.combine(
        ["x", "y"],
        [0.75, 0.25],
        {"x": [0.2, 0.8], "y": [0.6, 0.4]},
        2
    )

    assert scores == pytest.approx([0.75 * 0.2 + 0.25 * 0.6, 0.75 * 0.8 + 0.25 * 0.4])


def test_combine_ignores_unknown_criteria(aggregator):
    scores = aggregator.combine(["x"], [1.0], {"x": [0.3, 0.7], "z": [1.0, 0.0]}, 2)

    assert scores == pytest.approx([0.3, 0.7])


def test_aggregate_final_scores_sum_to_one(aggregator):
    result = aggregator.aggregate(
        ["x", "y"],
        [0.5, 0.5],
        {"x": [0.1, 0.2, 0.7], "y": [0.3, 0.3, 0.4]},
        names=["A", "B", "C"]
    )

    assert sum(entry.score for entry in result) == pytest.approx(1.0)
    assert result[0].name == "C"


def test_ranking_dataframe(aggregator):
    df = aggregator.rank([0.25, 0.75], ["A", "B"], ids=[1, 2]).to_dataframe()

    assert list(df.columns) == ['rank', 'id', 'name', 'score', 'percent']
    assert df.iloc[0]['name'] == "B"
    assert df.iloc[0]['score'] == "0.750000"
    assert RankedResult().to_dataframe().empty
