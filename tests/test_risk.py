"""Tests for goldenpath.scoring.risk."""

from __future__ import annotations

import math

import pytest

from conftest import C_ID, REPOSITORY, R_ID, S_ID, SERVICE, X_ID, build_sample_store, make_method, make_path
from goldenpath.analysis_models import ProjectHistory, RiskCalculationContext, RiskCategory
from goldenpath.models import BlockType, RiskLevel
from goldenpath.scoring import RiskWeightCalculator, classify_risk_level, refresh_method_risk_scores
from goldenpath.scoring.risk import (
    blast_radius_score,
    change_complexity_score,
    changed_on_path,
    circular_dependency_ratio,
    consistency_risk,
    cross_layer_violation_ratio,
    single_point_failure_risk,
)


def _m(name, block_type=BlockType.SERVICE, **kw):
    return make_method(SERVICE, name, block_type, **kw)


class TestRiskLevel:
    @pytest.mark.parametrize("score,level", [
        (0.0, RiskLevel.LOW),
        (0.39, RiskLevel.LOW),
        (0.4, RiskLevel.MEDIUM),
        (0.6, RiskLevel.HIGH),
        (0.8, RiskLevel.CRITICAL),
        (1.0, RiskLevel.CRITICAL),
    ])
    def test_bands(self, score, level):
        assert classify_risk_level(score) == level


class TestArchitectural:
    def test_downward_adjacent_calls_are_clean(self):
        methods = [_m("a", BlockType.CONTROLLER), _m("b", BlockType.SERVICE), _m("c", BlockType.REPOSITORY)]
        assert cross_layer_violation_ratio(methods) == 0.0

    def test_layer_skip_counts(self):
        methods = [_m("a", BlockType.CONTROLLER), _m("b", BlockType.REPOSITORY)]
        assert cross_layer_violation_ratio(methods) == 1.0

    def test_upward_skip_capped_at_one(self):
        methods = [_m("a", BlockType.REPOSITORY), _m("b", BlockType.CONTROLLER)]
        assert cross_layer_violation_ratio(methods) == 1.0

    def test_single_method_has_no_transitions(self):
        assert cross_layer_violation_ratio([_m("a")]) == 0.0

    def test_circular_ratio(self):
        a, b = _m("a"), _m("b")
        assert circular_dependency_ratio([a, b, a]) == pytest.approx(1 / 3)
        assert circular_dependency_ratio([]) == 0.0

    def test_single_point_failure(self):
        hub, leaf = _m("hub", in_degree=6), _m("leaf", in_degree=1)
        assert single_point_failure_risk([hub, leaf]) == pytest.approx((0.5 + 6 / 20) / 2)
        assert single_point_failure_risk([leaf]) == 0.0


class TestChangedMethods:
    def test_changed_on_path_distinct_in_order(self):
        a, b = _m("a"), _m("b")
        assert changed_on_path([a, b, a], {a.id, b.id, "other#x()"}) == [a, b]

    def test_empty_changes_score_zero(self):
        assert blast_radius_score([]) == 0.0
        assert change_complexity_score([], 5) == 0.0

    def test_blast_radius(self, store):
        r = store.get_method(R_ID)
        expected = math.log(2) / math.log(10) + 0.5 * min(1.0, (4 / 10 + 0 / 5) / 2)
        assert blast_radius_score([r]) == pytest.approx(expected)

    def test_change_complexity(self, store):
        r = store.get_method(R_ID)
        expected = (4 / 20 + 20 / 100 + 0 / 10 + 3 / 10) / 4
        assert change_complexity_score([r], 3) == pytest.approx(expected)


class TestDataFlow:
    def test_unguarded_data_access(self):
        assert consistency_risk([_m("save", BlockType.REPOSITORY)]) == 0.8

    def test_partially_guarded(self):
        methods = [_m("a", BlockType.REPOSITORY, annotations=["Transactional"]), _m("b", BlockType.REPOSITORY)]
        assert consistency_risk(methods) == 0.5

    def test_fully_guarded(self):
        assert consistency_risk([_m("a", BlockType.REPOSITORY, annotations=["Transactional"])]) == 0.2


class TestPathRisk:
    def test_tested_layered_path_is_low_risk(self, store):
        path = store.build_path("p", [C_ID, S_ID, R_ID])
        result = RiskWeightCalculator(store).calculate_path_risk_weight(path)
        assert result.total_risk <= 0.3
        assert result.architectural_risk_score == pytest.approx(0.25 * ((2 / 3) / 10 + 2 / 3) / 2)
        assert result.data_flow_risk_score == pytest.approx(0.3 * 0.8)
        assert result.risk_level == RiskLevel.LOW

    def test_no_changes_means_zero_change_signals(self, store):
        calc = RiskWeightCalculator(store)
        for ids in ([C_ID, S_ID, R_ID], [X_ID, S_ID], [R_ID]):
            result = calc.calculate_path_risk_weight(store.build_path("p", ids), changed_method_ids=set())
            assert result.blast_radius_score == 0.0
            assert result.change_complexity_score == 0.0

    def test_changed_method_off_path_ignored(self, store):
        path = store.build_path("p", [X_ID, S_ID])
        result = RiskWeightCalculator(store).calculate_path_risk_weight(path, changed_method_ids={R_ID})
        assert result.blast_radius_score == 0.0

    def test_changed_method_raises_risk(self, store):
        path = store.build_path("p", [C_ID, S_ID, R_ID])
        calc = RiskWeightCalculator(store)
        base = calc.calculate_path_risk_weight(path)
        changed = calc.calculate_path_risk_weight(path, changed_method_ids={R_ID})
        assert changed.total_risk > base.total_risk
        assert changed.details.impacted_components == [REPOSITORY]

    def test_details_for_untested_complex_path(self):
        repo = make_method(REPOSITORY, "saveOrder", BlockType.REPOSITORY, cyclomatic_complexity=20)
        result = RiskWeightCalculator().calculate_path_risk_weight(make_path("p", [repo]))
        assert result.details.critical_methods == [repo.id]
        assert "High cyclomatic complexity" in result.details.risk_factors
        assert "Missing test coverage" in result.details.risk_factors
        assert len(result.details.mitigation_suggestions) == 2

    def test_bounds(self):
        methods = [
            _m("a", BlockType.REPOSITORY, in_degree=100, out_degree=100, cyclomatic_complexity=99,
               annotations=["Singleton", "Async"], lines_of_code=5000, param_types=["A"] * 20),
            _m("b", BlockType.CONTROLLER, in_degree=100, out_degree=100, cyclomatic_complexity=99),
        ]
        result = RiskWeightCalculator().calculate_path_risk_weight(
            make_path("p", methods), changed_method_ids={m.id for m in methods},
        )
        for value in (result.total_risk, result.architectural_risk_score, result.blast_radius_score,
                      result.change_complexity_score, result.data_flow_risk_score, result.confidence):
            assert 0.0 <= value <= 1.0


class TestMethodRisk:
    def test_repository_method(self, store):
        result = RiskWeightCalculator(store).calculate_method_risk_weight(store.get_method(R_ID))
        assert result.architectural_risk == pytest.approx(0.3)
        assert result.complexity_risk == pytest.approx(0.1)
        assert result.dependency_risk == pytest.approx(0.05)
        assert result.change_history_risk == 0.5
        assert result.total_risk == pytest.approx(0.2275)
        assert result.risk_category == RiskCategory.DATA_RISK
        assert result.criticality == pytest.approx(0.25)

    def test_history_context(self, store):
        node = store.get_method(S_ID)
        context = RiskCalculationContext(
            project_history=ProjectHistory(hotspot_methods={S_ID}, frequently_changed_files={node.file_path}),
        )
        result = RiskWeightCalculator(store).calculate_method_risk_weight(node, context)
        assert result.change_history_risk == 1.0

    def test_complexity_category(self):
        result = RiskWeightCalculator().calculate_method_risk_weight(_m("a", cyclomatic_complexity=30))
        assert result.risk_category == RiskCategory.COMPLEXITY_RISK

    def test_refresh_writes_scores_back(self):
        store = build_sample_store()
        scores = refresh_method_risk_scores(store)
        assert set(scores) == {C_ID, S_ID, R_ID, X_ID}
        assert store.get_method(R_ID).risk_score == pytest.approx(scores[R_ID])
