import logging
import math

import numpy as np
import pytest

from utils.ahp_config import SAATY_MAX, SAATY_MIN, AHPConfig, Criterion, load_criteria_importance
from utils.ahp_engine import AHPSolver, Comparison, MatrixBuilder


@pytest.fixture
def builder():
    return MatrixBuilder()


@pytest.fixture
def solver():
    return AHPSolver()


def test_reciprocal_matrix_weights_sum_to_one(solver):
    matrix = [
        [1, 3, 5, 7],
        [1 / 3, 1, 2, 4],
        [1 / 5, 1 / 2, 1, 3],
        [1 / 7, 1 / 4, 1 / 3, 1],
    ]
    result = solver.solve(matrix)

    assert math.isclose(sum(result.weights), 1.0, abs_tol=1e-9)
    assert result.weights == sorted(result.weights, reverse=True)
    assert result.size == 4


def test_score_matrix_is_consistent(builder, solver):
    result = solver.solve(builder.build_from_scores([1, 2, 3, 4]))

    assert abs(result.cr) < 1e-9
    assert result.is_consistent
    assert result.weights == pytest.approx([0.1, 0.2, 0.3, 0.4])


def test_identity_matrix_gives_equal_weights(solver):
    result = solver.solve(np.ones((3, 3)))

    assert result.weights == pytest.approx([1 / 3] * 3)
    assert result.cr == pytest.approx(0.0)


def test_inconsistent_matrix_has_positive_cr(builder, solver):
    # A > B, B > C, C > A
    matrix = builder.build_from_comparisons(
        ["A", "B", "C"],
        [("A", "B", 9), ("B", "C", 9), ("C", "A", 9)]
    )
    result = solver.solve(matrix)

    assert result.cr > 0.1
    assert not result.is_consistent


def test_cr_is_zero_beyond_random_index_table(builder, solver):
    result = solver.solve(builder.build_from_scores(range(1, 12)))

    assert result.size == 11
    assert result.cr == 0.0


def test_single_alternative(builder, solver):
    result = solver.solve(builder.build_from_scores([5]))

    assert result.weights == [1.0]
    assert result.cr == 0.0


def test_empty_matrix(solver):
    result = solver.solve([])

    assert result.weights == []
    assert result.matrix == []
    assert result.cr == 0.0


def test_non_square_matrix_is_rejected(solver):
    with pytest.raises(ValueError):
        solver.solve([[1, 2, 3], [0.5, 1, 2]])


def test_zero_column_does_not_raise(solver):
    result = solver.solve([[0, 1], [0, 1]])

    assert all(math.isfinite(w) for w in result.weights)
    assert math.isfinite(result.cr)


def test_clip_saturates_to_saaty_scale(builder):
    assert builder.clip(100) == SAATY_MAX
    assert builder.clip(0.001) == SAATY_MIN
    assert builder.clip(2.5) == 2.5
    assert builder.clip(float('nan')) == 1.0
    assert builder.clip(float('inf')) == 1.0
    assert builder.clip(-3) == 1.0
    assert builder.clip(0) == 1.0


def test_score_ratios_are_clipped(builder):
    matrix = builder.build_from_scores([1, 100])

    assert matrix[1, 0] == SAATY_MAX
    assert matrix[0, 1] == pytest.approx(SAATY_MIN)


def test_zero_scores(builder):
    both_zero = builder.build_from_scores([0, 0])
    assert both_zero.tolist() == [[1.0, 1.0], [1.0, 1.0]]

    one_zero = builder.build_from_scores([3, 0])
    assert one_zero[0, 1] == SAATY_MAX


def test_build_from_comparisons_sets_reciprocal(builder):
    matrix = builder.build_from_comparisons(
        ["A", "B", "C"],
        [Comparison("A", "B", 3), {"item1": "C", "item2": "A", "value": 4}]
    )

    assert matrix[0, 1] == 3
    assert matrix[1, 0] == pytest.approx(1 / 3)
    assert matrix[2, 0] == 4
    assert matrix[0, 2] == pytest.approx(0.25)
    # 未给出的比较保持为 1
    assert matrix[1, 2] == 1
    assert matrix[2, 1] == 1


def test_unmatched_label_is_dropped(builder):
    matrix = builder.build_from_comparisons(
        ["A", "B"],
        [("A", "B", 2), ("A", "Z", 7), ("Y", "B", 5)]
    )

    assert matrix.shape == (2, 2)
    assert np.allclose(np.diag(matrix), 1.0)
    assert np.allclose(matrix * matrix.T, 1.0)
    assert matrix[0, 1] == 2


def test_self_comparison_keeps_unit_diagonal(builder):
    matrix = builder.build_from_comparisons(["A", "B"], [("A", "A", 5)])

    assert np.allclose(matrix, 1.0)


def test_invalid_comparison_value_is_dropped(builder):
    matrix = builder.build_from_comparisons(["A", "B"], [("A", "B", float('nan')), ("B", "A", 0)])

    assert np.allclose(matrix, 1.0)


def test_criterion_parse_is_case_insensitive():
    assert Criterion.parse(" urgency ") is Criterion.URGENCY
    assert Criterion.parse(Criterion.COMPLEXITY) is Criterion.COMPLEXITY
    with pytest.raises(ValueError):
        Criterion.parse("Urgencyy")


def test_criteria_importance_override():
    importance = load_criteria_importance("4, 3, 2, 1")

    assert importance[Criterion.URGENCY] == 4.0
    assert AHPConfig(criteria_importance=importance).importance_vector() == (4.0, 3.0, 2.0, 1.0)


@pytest.mark.parametrize("raw", ["1,2,3", "a,b,c,d", "1,2,0,4"])
def test_criteria_importance_override_rejects_bad_values(raw):
    with pytest.raises(ValueError):
        load_criteria_importance(raw)


def test_invalid_env_override_falls_back_to_defaults(monkeypatch, caplog):
    monkeypatch.setenv("AHP_CRITERIA_IMPORTANCE", "bad")

    with caplog.at_level(logging.ERROR, logger="utils.ahp_config"):
        config = AHPConfig()

    assert config.importance_vector() == (5.0, 3.0, 2.0, 1.0)
    assert any("AHP_CRITERIA_IMPORTANCE" in r.getMessage() for r in caplog.records)


def test_env_override_applies_to_new_config(monkeypatch):
    monkeypatch.setenv("AHP_CRITERIA_IMPORTANCE", "1,1,1,1")

    assert AHPConfig().importance_vector() == (1.0, 1.0, 1.0, 1.0)


def test_solve_scores_matches_explicit_build(builder, solver):
    scores = [4, 2, 1]

    assert solver.solve_scores(scores, builder=builder) == solver.solve(builder.build_from_scores(scores))
    assert solver.solve_scores(scores).weights == pytest.approx([4 / 7, 2 / 7, 1 / 7])


def test_default_criteria_matrix(solver, builder):
    config = AHPConfig(criteria_importance=load_criteria_importance(""))
    result = solver.solve(builder.build_from_scores(config.importance_vector()))

    assert config.criteria == tuple(Criterion)
    assert result.weights == pytest.approx([5 / 11, 3 / 11, 2 / 11, 1 / 11])
    assert abs(result.cr) < 1e-9
