"""
Pallet Scorer - selects and ranks pallets for a composition.

Selection:
1. AGGREGATE weight (kg) and volume (m³) of the items from base-unit attributes
2. GATE pallets on status == available AND max_weight >= total weight
3. MEASURE weight and volume utilization, each clamped to [0, 1]
4. SCORE base = capacity*0.3 + area*0.3 + historical efficiency*0.4
5. ADJUST base * (1 - |0.8 - weight util|) * (1 - |0.8 - volume util|)
6. RANK by adjusted score, keep the top 5

The adjustment rewards pallets that would end up near 80% full on both
axes and penalizes over- and under-use symmetrically. Every constant
comes from ScoringPolicy.
"""

import math
from typing import Iterable, Mapping, Optional

import structlog

from config import get_settings
from models.pallet import (
    Complexity,
    CompositionCandidate,
    CompositionConstraints,
    CompositionItem,
    CompositionLoad,
    CompositionValidation,
    Pallet,
    Severity,
    ValidationViolation,
    ViolationType,
)
from models.policy import ScoringPolicy
from models.product import CM3_PER_M3, Product
from exceptions import (
    InvalidRequestError,
    NoFeasiblePalletError,
    ProductNotFoundError,
)

logger = structlog.get_logger(__name__)


class PalletScorer:
    """Feasibility-and-utilization scoring of candidate pallets."""

    def __init__(self, policy: Optional[ScoringPolicy] = None):
        self.policy = policy or get_settings().scoring_policy()

    # ===================
    # LOAD
    # ===================

    def compute_load(
        self,
        items: Iterable[CompositionItem],
        product_catalog: Mapping[int, Product],
    ) -> CompositionLoad:
        """
        Aggregate the physical load of a list of items.

        Raises:
            ProductNotFoundError: Item references an unknown product
            InvalidRequestError: Negative item quantity
        """
        total_weight = 0.0
        total_volume = 0.0
        max_height = 0.0
        total_quantity = 0.0
        product_ids = set()

        for item in items:
            if not math.isfinite(item.quantity) or item.quantity < 0:
                raise InvalidRequestError(
                    "Item quantity must be a finite number >= 0",
                    details={"product_id": item.product_id, "quantity": item.quantity},
                )
            product = product_catalog.get(item.product_id)
            if product is None:
                raise ProductNotFoundError(item.product_id)

            total_weight += product.weight_kg * item.quantity
            total_volume += product.volume_m3 * item.quantity
            total_quantity += item.quantity
            product_ids.add(item.product_id)
            if item.quantity > 0:
                max_height = max(max_height, product.dimensions.height_cm)

        return CompositionLoad(
            total_weight_kg=total_weight,
            total_volume_m3=total_volume,
            max_item_height_cm=max_height,
            product_count=len(product_ids),
            total_quantity=total_quantity,
        )

    # ===================
    # SCORING
    # ===================

    def optimal_volume_m3(self, pallet: Pallet) -> float:
        """Pallet footprint times the standard stacking height."""
        return pallet.width_cm * pallet.length_cm * self.policy.standard_stack_height_cm / CM3_PER_M3

    def base_score(self, pallet: Pallet) -> float:
        policy = self.policy
        efficiency = pallet.historical_efficiency
        if efficiency is None:
            efficiency = policy.default_historical_efficiency
        return (
            (pallet.max_weight_kg / 1000) * policy.capacity_weight
            + pallet.area_m2 * policy.area_weight
            + efficiency * policy.efficiency_weight
        )

    def score_pallet(self, pallet: Pallet, load: CompositionLoad) -> CompositionCandidate:
        """Score one pallet against a load, without the feasibility gate."""
        target = self.policy.target_utilization
        weight_utilization = min(load.total_weight_kg / pallet.max_weight_kg, 1.0)
        volume_utilization = min(load.total_volume_m3 / self.optimal_volume_m3(pallet), 1.0)

        base = self.base_score(pallet)
        adjusted = (
            base
            * (1 - abs(target - weight_utilization))
            * (1 - abs(target - volume_utilization))
        )

        return CompositionCandidate(
            pallet=pallet,
            weight_utilization=weight_utilization,
            volume_utilization=volume_utilization,
            base_score=base,
            adjusted_score=max(adjusted, 0.0),
        )

    def is_feasible(self, pallet: Pallet, load: CompositionLoad) -> bool:
        """Available and strong enough for the load."""
        return (
            pallet.status == self.policy.available_status
            and pallet.max_weight_kg >= load.total_weight_kg
        )

    def select_pallets(
        self,
        items: Iterable[CompositionItem],
        candidate_pallets: Iterable[Pallet],
        product_catalog: Mapping[int, Product],
    ) -> list[CompositionCandidate]:
        """
        Rank the pallets best suited to carry the items.

        Args:
            items: Products and base-unit quantities
            candidate_pallets: Pallets to consider
            product_catalog: Product ID -> Product

        Returns:
            Up to policy.max_candidates candidates, best first. Empty when
            there are no items.

        Raises:
            NoFeasiblePalletError: No pallet is available and strong enough
            ProductNotFoundError: Item references an unknown product
            InvalidRequestError: Negative item quantity
        """
        items = list(items)
        if not items:
            logger.debug("no_items_to_compose")
            return []

        candidate_pallets = list(candidate_pallets)
        load = self.compute_load(items, product_catalog)

        logger.info(
            "selecting_pallets",
            items=len(items),
            candidates=len(candidate_pallets),
            total_weight_kg=round(load.total_weight_kg, 3),
            total_volume_m3=round(load.total_volume_m3, 4),
        )

        feasible = [p for p in candidate_pallets if self.is_feasible(p, load)]
        if not feasible:
            logger.warning(
                "no_feasible_pallet",
                total_weight_kg=round(load.total_weight_kg, 3),
                candidates=len(candidate_pallets),
            )
            raise NoFeasiblePalletError(
                load.total_weight_kg, [p.id for p in candidate_pallets]
            )

        scored = [self.score_pallet(p, load) for p in feasible]
        scored.sort(key=lambda c: (-c.adjusted_score, c.pallet.id))
        ranked = scored[:self.policy.max_candidates]

        logger.info(
            "pallets_selected",
            feasible=len(feasible),
            returned=len(ranked),
            best_pallet_id=ranked[0].pallet.id,
        )
        return ranked

    # ===================
    # COMPLEXITY
    # ===================

    def classify_complexity(
        self,
        product_count: int,
        total_quantity: float,
        has_constraints: bool = False,
    ) -> Complexity:
        """
        Classify a composition by size.

        LOW: few products, small quantity, no caller constraints
        MEDIUM: moderate products and quantity
        HIGH: everything else
        """
        policy = self.policy
        if (
            product_count <= policy.complexity_low_max_products
            and total_quantity <= policy.complexity_low_max_quantity
            and not has_constraints
        ):
            return Complexity.LOW
        if (
            product_count <= policy.complexity_medium_max_products
            and total_quantity <= policy.complexity_medium_max_quantity
        ):
            return Complexity.MEDIUM
        return Complexity.HIGH

    def requires_enhanced_algorithm(self, product_count: int, total_quantity: float) -> bool:
        """Whether callers should switch to the exhaustive composition algorithm."""
        return (
            product_count > self.policy.enhanced_algorithm_min_products
            or total_quantity > self.policy.enhanced_algorithm_min_quantity
        )

    # ===================
    # VALIDATION
    # ===================

    def validate_composition(
        self,
        items: list[CompositionItem],
        pallet: Pallet,
        product_catalog: Mapping[int, Product],
        constraints: Optional[CompositionConstraints] = None,
    ) -> CompositionValidation:
        """
        Check a composition against one pallet's limits.

        Limits default to the pallet (max weight, footprint times standard
        stack height) and may be overridden by constraints.

        Returns:
            CompositionValidation; broken limits are reported, not raised

        Raises:
            ProductNotFoundError: Item references an unknown product
            InvalidRequestError: Negative item quantity
        """
        constraints = constraints or CompositionConstraints()
        load = self.compute_load(items, product_catalog)
        affected = sorted({item.product_id for item in items})

        weight_limit = constraints.max_weight_kg or pallet.max_weight_kg
        volume_limit = constraints.max_volume_m3 or self.optimal_volume_m3(pallet)
        height_limit = constraints.max_height_cm or self.policy.standard_stack_height_cm

        weight_utilization = load.total_weight_kg / weight_limit
        volume_utilization = load.total_volume_m3 / volume_limit
        height_utilization = load.max_item_height_cm / height_limit
        efficiency = min(weight_utilization, volume_utilization, 1.0)

        violations: list[ValidationViolation] = []
        if load.total_weight_kg > weight_limit:
            violations.append(ValidationViolation(
                type=ViolationType.WEIGHT,
                message=(
                    f"Total weight ({load.total_weight_kg:.2f}kg) exceeds "
                    f"pallet limit ({weight_limit:.2f}kg)"
                ),
                affected_products=affected,
            ))
        if load.total_volume_m3 > volume_limit:
            violations.append(ValidationViolation(
                type=ViolationType.VOLUME,
                message=(
                    f"Total volume ({load.total_volume_m3:.3f}m³) exceeds "
                    f"pallet capacity ({volume_limit:.3f}m³)"
                ),
                affected_products=affected,
            ))
        if load.max_item_height_cm > height_limit:
            violations.append(ValidationViolation(
                type=ViolationType.HEIGHT,
                message=(
                    f"Item height ({load.max_item_height_cm:.1f}cm) exceeds "
                    f"height limit ({height_limit:.1f}cm)"
                ),
                affected_products=affected,
            ))

        warnings: list[str] = []
        if pallet.status != self.policy.available_status:
            warnings.append(f"Pallet {pallet.id} is not available (status: {pallet.status})")
        if items and efficiency < self.policy.low_efficiency_threshold:
            warnings.append(f"Low packing efficiency ({efficiency * 100:.1f}%)")
        if height_utilization > self.policy.height_warning_threshold:
            warnings.append("Height close to the limit, check load stability")

        recommendations: list[str] = []
        if items and efficiency < self.policy.reorganize_efficiency_threshold:
            recommendations.append("Reorganize products to make better use of the pallet space")
        if items and weight_utilization < self.policy.low_weight_utilization_threshold:
            recommendations.append("Pallet is under-used by weight, consider adding products")

        validation = CompositionValidation(
            pallet_id=pallet.id,
            is_valid=not any(v.severity == Severity.ERROR for v in violations),
            load=load,
            weight_limit_kg=weight_limit,
            volume_limit_m3=volume_limit,
            height_limit_cm=height_limit,
            weight_utilization=weight_utilization,
            volume_utilization=volume_utilization,
            height_utilization=height_utilization,
            efficiency=max(efficiency, 0.0),
            violations=violations,
            warnings=warnings,
            recommendations=recommendations,
        )

        logger.info(
            "composition_validated",
            pallet_id=pallet.id,
            is_valid=validation.is_valid,
            violations=len(violations),
        )
        return validation


# Singleton instance
_pallet_scorer: Optional[PalletScorer] = None


def get_pallet_scorer() -> PalletScorer:
    """Get or create PalletScorer instance with the configured policy."""
    global _pallet_scorer
    if _pallet_scorer is None:
        _pallet_scorer = PalletScorer()
    return _pallet_scorer
