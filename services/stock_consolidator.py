"""
Stock Consolidator - reconciles per-location, per-packaging stock into base units.

Two outputs:
1. consolidate(): the base-unit total plus a display breakdown per
   packaging type (each projected independently from the same total)
2. availability_pool(): base units held in each packaging type, the
   pool the pick plan optimizer is allowed to consume
"""

from decimal import Decimal, ROUND_FLOOR
from typing import Iterable

import structlog

from models.stock import ConsolidatedStock, PackagingBreakdown, StockRecord
from services.packaging_catalog import PackagingCatalog

logger = structlog.get_logger(__name__)


class StockConsolidator:
    """Base-unit accounting over a stock snapshot."""

    def __init__(self, catalog: PackagingCatalog):
        self.catalog = catalog

    def consolidate(
        self,
        product_id: int,
        stock_records: Iterable[StockRecord],
    ) -> ConsolidatedStock:
        """
        Consolidate a product's stock.

        Records of other products are ignored. A product without stock
        consolidates to zero.

        Args:
            product_id: Product ID
            stock_records: Stock snapshot (any products)

        Returns:
            ConsolidatedStock

        Raises:
            NoBaseUnitDefinedError: Product has no single active base unit
            PackagingNotFoundError: A record references a packaging that
                does not belong to the product
        """
        logger.debug("consolidating_stock", product_id=product_id)

        self.catalog.get_base_unit(product_id)

        total = Decimal("0")
        locations = set()
        items_count = 0

        for record in self._product_records(product_id, stock_records):
            total += self.catalog.to_base_units(
                record.packaging_type_id, record.quantity, product_id
            )
            if record.quantity > 0:
                items_count += 1
                locations.add(record.location_id)

        breakdown = [
            self._project(packaging, total)
            for packaging in self.catalog.get_packagings_by_product(product_id)
        ]

        logger.info(
            "stock_consolidated",
            product_id=product_id,
            total_base_units=str(total),
            locations=len(locations),
            items=items_count,
        )

        return ConsolidatedStock(
            product_id=product_id,
            total_base_units=total,
            per_packaging_breakdown=breakdown,
            locations_count=len(locations),
            items_count=items_count,
        )

    def availability_pool(
        self,
        product_id: int,
        stock_records: Iterable[StockRecord],
    ) -> dict[int, Decimal]:
        """
        Base units held in each active packaging type of a product.

        Every active packaging type is present in the result, with 0 when
        nothing is stocked in it.

        Raises:
            NoBaseUnitDefinedError: Product has no single active base unit
            PackagingNotFoundError: A record references a foreign packaging
        """
        self.catalog.get_base_unit(product_id)

        pool = {
            packaging.id: Decimal("0")
            for packaging in self.catalog.get_packagings_by_product(product_id)
        }
        for record in self._product_records(product_id, stock_records):
            base_units = self.catalog.to_base_units(
                record.packaging_type_id, record.quantity, product_id
            )
            if record.packaging_type_id not in pool:
                # Deactivated packaging: counted in totals, never picked
                logger.warning(
                    "stock_in_inactive_packaging",
                    product_id=product_id,
                    packaging_type_id=record.packaging_type_id,
                    location_id=record.location_id,
                )
                continue
            pool[record.packaging_type_id] += base_units

        logger.debug("availability_pool_built", product_id=product_id, packagings=len(pool))
        return pool

    @staticmethod
    def _product_records(product_id: int, stock_records: Iterable[StockRecord]):
        return (r for r in stock_records if r.product_id == product_id)

    @staticmethod
    def _project(packaging, total: Decimal) -> PackagingBreakdown:
        quantity = packaging.base_unit_quantity
        packages = (total / quantity).to_integral_value(rounding=ROUND_FLOOR)
        return PackagingBreakdown(
            packaging_type_id=packaging.id,
            name=packaging.name,
            barcode=packaging.barcode,
            base_unit_quantity=quantity,
            is_base_unit=packaging.is_base_unit,
            available_packages=int(packages),
            remaining_base_units=total - packages * quantity,
        )
