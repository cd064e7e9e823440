"""
Pick Plan Optimizer - decomposes a base-unit request into handling units.

Algorithm (deterministic greedy, largest unit first):
1. SORT active non-base packaging types by base_unit_quantity desc, id asc
2. For each type TAKE min(whole packages in pool, whole packages needed)
3. FILL what is left from loose base-unit stock, 1:1
4. can_fulfill when nothing remains

Largest-first minimizes the number of handling units an operator
retrieves. It is not globally optimal when package sizes are not
multiples of each other: with boxes of 5 and 3, a request of 6 takes one
box of 5 and leaves 1 even though two boxes of 3 would cover it.
"""

from decimal import Decimal, ROUND_FLOOR
from typing import Iterable, Mapping

import structlog

from models.pick_plan import PickPlanEntry, PickPlanResult
from models.stock import StockRecord
from services.packaging_catalog import Number, PackagingCatalog, largest_first, to_decimal
from services.stock_consolidator import StockConsolidator
from exceptions import InvalidRequestError

logger = structlog.get_logger(__name__)

ZERO = Decimal("0")


def floor_packages(base_units: Decimal, base_unit_quantity: Decimal) -> Decimal:
    """Whole packages contained in a base-unit amount."""
    return (base_units / base_unit_quantity).to_integral_value(rounding=ROUND_FLOOR)


class PickPlanOptimizer:
    """Greedy pick planning over a per-packaging availability pool."""

    def __init__(self, catalog: PackagingCatalog):
        self.catalog = catalog

    def optimize(
        self,
        product_id: int,
        requested_base_units: Number,
        pool: Mapping[int, Number],
    ) -> PickPlanResult:
        """
        Plan which packages to pick for a request.

        Args:
            product_id: Product ID
            requested_base_units: Base units to pick (>= 0)
            pool: Packaging type ID -> base units held in full packages of
                that type. Missing types count as 0. Not modified.

        Returns:
            PickPlanResult; can_fulfill is False when stock runs out

        Raises:
            InvalidRequestError: Negative request or negative pool entry
            PackagingNotFoundError: Pool references a foreign packaging
            NoBaseUnitDefinedError: Product has no single active base unit
        """
        requested = to_decimal(requested_base_units, "requested_base_units")
        if requested < 0:
            raise InvalidRequestError(
                "requested_base_units must be >= 0",
                details={"product_id": product_id, "requested_base_units": str(requested)},
            )

        base_unit = self.catalog.get_base_unit(product_id)
        available = self._copy_pool(product_id, pool)

        logger.info(
            "optimizing_pick_plan",
            product_id=product_id,
            requested_base_units=str(requested),
        )

        entries: list[PickPlanEntry] = []
        remaining = requested

        packagings = sorted(
            (p for p in self.catalog.get_packagings_by_product(product_id) if not p.is_base_unit),
            key=largest_first,
        )
        for packaging in packagings:
            if remaining <= 0:
                break
            quantity = packaging.base_unit_quantity
            available_packages = floor_packages(available.get(packaging.id, ZERO), quantity)
            needed_packages = floor_packages(remaining, quantity)
            take = min(available_packages, needed_packages)

            if take > 0:
                used = take * quantity
                entries.append(PickPlanEntry(
                    packaging_type_id=packaging.id,
                    packaging_name=packaging.name,
                    package_count=take,
                    base_units=used,
                ))
                remaining -= used
                available[packaging.id] = available.get(packaging.id, ZERO) - used

        # Loose base units cover what full packages could not
        loose = min(available.get(base_unit.id, ZERO), remaining)
        if loose > 0:
            entries.append(PickPlanEntry(
                packaging_type_id=base_unit.id,
                packaging_name=base_unit.name,
                package_count=loose,
                base_units=loose,
            ))
            remaining -= loose
            available[base_unit.id] = available.get(base_unit.id, ZERO) - loose

        result = PickPlanResult(
            product_id=product_id,
            requested_base_units=requested,
            entries=entries,
            remaining=remaining,
            total_planned=requested - remaining,
            can_fulfill=remaining == 0,
        )

        logger.info(
            "pick_plan_optimized",
            product_id=product_id,
            entries=len(entries),
            remaining=str(remaining),
            can_fulfill=result.can_fulfill,
        )
        return result

    def optimize_from_stock(
        self,
        product_id: int,
        requested_base_units: Number,
        stock_records: Iterable[StockRecord],
    ) -> PickPlanResult:
        """Plan a pick directly from a stock snapshot."""
        pool = StockConsolidator(self.catalog).availability_pool(product_id, stock_records)
        return self.optimize(product_id, requested_base_units, pool)

    def _copy_pool(self, product_id: int, pool: Mapping[int, Number]) -> dict[int, Decimal]:
        available: dict[int, Decimal] = {}
        for packaging_id, base_units in pool.items():
            self.catalog.get_packaging(packaging_id, product_id)
            value = to_decimal(base_units, "pool")
            if value < 0:
                raise InvalidRequestError(
                    "pool entries must be >= 0",
                    details={
                        "product_id": product_id,
                        "packaging_id": packaging_id,
                        "base_units": str(value),
                    },
                )
            available[packaging_id] = value
        return available
