"""
Unit tests for PalletScorer.

Tests cover load aggregation, the feasibility gate, utilization-aware
scoring and ranking, complexity classification and composition checks.
"""

import pytest

from models import (
    CompositionConstraints,
    CompositionItem,
    Complexity,
    ScoringPolicy,
    ViolationType,
)
from services.pallet_scorer import PalletScorer, get_pallet_scorer
from exceptions import InvalidRequestError, NoFeasiblePalletError, ProductNotFoundError
from tests.factories import PalletFactory


@pytest.fixture
def load_900kg() -> list:
    """30 x product 1 = 900kg and 1.8 m³."""
    return [CompositionItem(product_id=1, quantity=30)]


# ===================
# LOAD TESTS
# ===================

class TestComputeLoad:
    """Tests for compute_load."""

    def test_weight_and_volume(self, scorer, product_catalog):
        items = [
            CompositionItem(product_id=1, quantity=10),
            CompositionItem(product_id=2, quantity=4),
        ]

        load = scorer.compute_load(items, product_catalog)

        assert load.total_weight_kg == pytest.approx(360)
        assert load.total_volume_m3 == pytest.approx(0.72)
        assert load.max_item_height_cm == 30
        assert load.product_count == 2
        assert load.total_quantity == 14

    def test_unknown_product_raises(self, scorer, product_catalog):
        with pytest.raises(ProductNotFoundError) as exc:
            scorer.compute_load([CompositionItem(product_id=99, quantity=1)], product_catalog)

        assert exc.value.details["id"] == 99

    def test_negative_quantity_raises(self, scorer, product_catalog):
        with pytest.raises(InvalidRequestError):
            scorer.compute_load([CompositionItem(product_id=1, quantity=-1)], product_catalog)

    @pytest.mark.parametrize("quantity", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_quantity_raises(self, scorer, pallet_a, product_catalog, quantity):
        """NaN and infinite quantities are rejected before any pallet is gated."""
        items = [CompositionItem(product_id=1, quantity=quantity)]

        with pytest.raises(InvalidRequestError) as exc:
            scorer.select_pallets(items, [pallet_a], product_catalog)

        assert exc.value.details["product_id"] == 1


# ===================
# SCORING TESTS
# ===================

class TestScoring:
    """Tests for base and adjusted scores."""

    def test_base_score(self, scorer, pallet_a):
        """1000kg/1000*0.3 + 1.2m²*0.3 + 0.6*0.4."""
        assert scorer.base_score(pallet_a) == pytest.approx(0.9)

    def test_missing_history_uses_default_efficiency(self, scorer):
        pallet = PalletFactory.create(max_weight_kg=1000, width_cm=100, length_cm=100, historical_efficiency=None)

        assert scorer.base_score(pallet) == pytest.approx(0.3 + 0.3 + 0.5 * 0.4)

    def test_score_pallet_a(self, scorer, pallet_a, product_catalog, load_900kg):
        """900kg on 1000kg is 90%; 1.8 of 2.4 m³ is 75%."""
        load = scorer.compute_load(load_900kg, product_catalog)

        candidate = scorer.score_pallet(pallet_a, load)

        assert candidate.weight_utilization == pytest.approx(0.9)
        assert candidate.volume_utilization == pytest.approx(0.75)
        assert candidate.adjusted_score == pytest.approx(0.9 * 0.9 * 0.95)

    def test_utilization_clamped(self, scorer, product_catalog):
        """Utilization never exceeds 1 even when the load is larger."""
        pallet = PalletFactory.create(max_weight_kg=100, width_cm=50, length_cm=50)
        load = scorer.compute_load([CompositionItem(product_id=1, quantity=30)], product_catalog)

        candidate = scorer.score_pallet(pallet, load)

        assert candidate.weight_utilization == 1.0
        assert candidate.volume_utilization == 1.0

    def test_policy_changes_score(self, product_catalog, pallet_a, load_900kg):
        """Weights and target come from the policy."""
        policy = ScoringPolicy(capacity_weight=1.0, area_weight=0.0, efficiency_weight=0.0, target_utilization=0.9)
        scorer = PalletScorer(policy)
        load = scorer.compute_load(load_900kg, product_catalog)

        candidate = scorer.score_pallet(pallet_a, load)

        assert candidate.base_score == pytest.approx(1.0)
        assert candidate.adjusted_score == pytest.approx(1.0 * 1.0 * (1 - 0.15))


# ===================
# SELECTION TESTS
# ===================

class TestSelectPallets:
    """Tests for select_pallets."""

    def test_pallet_nearer_target_ranks_first(self, scorer, pallet_a, pallet_b, product_catalog, load_900kg):
        """A sits nearer 80% on both axes and outranks the bigger B."""
        ranked = scorer.select_pallets(load_900kg, [pallet_b, pallet_a], product_catalog)

        assert [c.pallet_id for c in ranked] == [1, 2]
        assert ranked[0].adjusted_score == pytest.approx(0.7695)
        assert ranked[1].adjusted_score == pytest.approx(1.192 * 0.65 * 0.825)

    def test_overweight_pallet_excluded(self, scorer, pallet_a, pallet_b, product_catalog):
        """1500kg exceeds A's capacity, so only B is returned."""
        items = [CompositionItem(product_id=1, quantity=50)]

        ranked = scorer.select_pallets(items, [pallet_a, pallet_b], product_catalog)

        assert [c.pallet_id for c in ranked] == [2]

    def test_exact_capacity_is_feasible(self, scorer, product_catalog):
        pallet = PalletFactory.create(max_weight_kg=900)

        ranked = scorer.select_pallets([CompositionItem(product_id=1, quantity=30)], [pallet], product_catalog)

        assert len(ranked) == 1
        assert ranked[0].weight_utilization == pytest.approx(1.0)

    def test_unavailable_pallet_excluded(self, scorer, pallet_a, product_catalog, load_900kg):
        busy = PalletFactory.create(max_weight_kg=5000, status="in_use")

        ranked = scorer.select_pallets(load_900kg, [busy, pallet_a], product_catalog)

        assert [c.pallet_id for c in ranked] == [pallet_a.id]

    def test_top_five_only(self, scorer, product_catalog, load_900kg):
        pallets = [PalletFactory.create(id=100 + i, max_weight_kg=1000 + 100 * i) for i in range(8)]

        ranked = scorer.select_pallets(load_900kg, pallets, product_catalog)

        assert len(ranked) == 5
        scores = [c.adjusted_score for c in ranked]
        assert scores == sorted(scores, reverse=True)

    def test_ties_broken_by_pallet_id(self, scorer, product_catalog, load_900kg):
        twins = [PalletFactory.create(id=i) for i in (9, 3, 6)]

        ranked = scorer.select_pallets(load_900kg, twins, product_catalog)

        assert [c.pallet_id for c in ranked] == [3, 6, 9]

    def test_empty_items_returns_empty(self, scorer, pallet_a, product_catalog):
        """No items is not an error."""
        assert scorer.select_pallets([], [pallet_a], product_catalog) == []

    def test_items_from_generator(self, scorer, pallet_a, pallet_b, product_catalog):
        """Items may be any iterable, not only a list."""
        items = (CompositionItem(product_id=1, quantity=q) for q in (10, 20))

        ranked = scorer.select_pallets(items, [pallet_b, pallet_a], product_catalog)

        assert [c.pallet_id for c in ranked] == [1, 2]
        assert ranked[0].weight_utilization == pytest.approx(0.9)

    def test_no_feasible_pallet_raises(self, scorer, pallet_a, product_catalog):
        items = [CompositionItem(product_id=1, quantity=100)]

        with pytest.raises(NoFeasiblePalletError) as exc:
            scorer.select_pallets(items, [pallet_a], product_catalog)

        assert exc.value.details["candidate_pallet_ids"] == [pallet_a.id]
        assert exc.value.details["total_weight_kg"] == pytest.approx(3000)

    def test_no_candidates_raises(self, scorer, product_catalog, load_900kg):
        with pytest.raises(NoFeasiblePalletError):
            scorer.select_pallets(load_900kg, [], product_catalog)


# ===================
# COMPLEXITY TESTS
# ===================

class TestComplexity:
    """Tests for classify_complexity and requires_enhanced_algorithm."""

    @pytest.mark.parametrize("products, quantity, constrained, expected", [
        (3, 20, False, Complexity.LOW),
        (5, 50, False, Complexity.LOW),
        (3, 20, True, Complexity.MEDIUM),
        (15, 150, False, Complexity.MEDIUM),
        (20, 200, True, Complexity.MEDIUM),
        (25, 10, False, Complexity.HIGH),
        (5, 250, False, Complexity.HIGH),
    ])
    def test_classify(self, scorer, products, quantity, constrained, expected):
        assert scorer.classify_complexity(products, quantity, constrained) == expected

    @pytest.mark.parametrize("products, quantity, expected", [
        (10, 200, False),
        (11, 10, True),
        (2, 201, True),
    ])
    def test_requires_enhanced_algorithm(self, scorer, products, quantity, expected):
        assert scorer.requires_enhanced_algorithm(products, quantity) is expected


# ===================
# VALIDATION TESTS
# ===================

class TestValidateComposition:
    """Tests for validate_composition."""

    def test_overweight_composition(self, scorer, pallet_a, product_catalog):
        """1050kg on a 1000kg pallet is a weight violation."""
        items = [CompositionItem(product_id=1, quantity=35)]

        result = scorer.validate_composition(items, pallet_a, product_catalog)

        assert result.is_valid is False
        assert [v.type for v in result.violations] == [ViolationType.WEIGHT]
        assert result.violations[0].affected_products == [1]

    def test_valid_composition_with_advice(self, scorer, pallet_a, product_catalog):
        """600kg and 1.2 m³ fits, with a low-efficiency warning."""
        items = [CompositionItem(product_id=1, quantity=20)]

        result = scorer.validate_composition(items, pallet_a, product_catalog)

        assert result.is_valid is True
        assert result.efficiency == pytest.approx(0.5)
        assert any("efficiency" in w for w in result.warnings)
        assert result.recommendations

    def test_constraint_overrides_height(self, scorer, pallet_a, product_catalog):
        items = [CompositionItem(product_id=1, quantity=1)]
        constraints = CompositionConstraints(max_height_cm=20)

        result = scorer.validate_composition(items, pallet_a, product_catalog, constraints)

        assert result.height_limit_cm == 20
        assert ViolationType.HEIGHT in [v.type for v in result.violations]

    def test_unavailable_pallet_warns(self, scorer, product_catalog):
        pallet = PalletFactory.create(status="in_use")

        result = scorer.validate_composition([CompositionItem(product_id=2, quantity=5)], pallet, product_catalog)

        assert any("not available" in w for w in result.warnings)


class TestGetPalletScorer:
    """Tests for the configured singleton."""

    def test_singleton_uses_settings_policy(self):
        scorer = get_pallet_scorer()

        assert scorer is get_pallet_scorer()
        assert scorer.policy.target_utilization == pytest.approx(0.8)
        assert scorer.policy.max_candidates == 5
