"""
Stock snapshot and consolidation schemas.
"""

from decimal import Decimal
from typing import Optional

from pydantic import Field

from models.base import BaseSchema, SnapshotSchema


class StockRecord(SnapshotSchema):
    """
    Quantity of one product, in one packaging, at one location.

    quantity is expressed in the packaging's own units (3 boxes, not 36 units).
    """

    product_id: int = Field(..., description="Product ID")
    packaging_type_id: int = Field(..., description="Packaging the quantity is counted in")
    location_id: int = Field(..., description="Storage location (UCP/position) ID")
    quantity: Decimal = Field(..., ge=0, description="Quantity in packaging units")


class PackagingBreakdown(BaseSchema):
    """
    How the consolidated total reads in one packaging type.

    Every breakdown is projected from the same total; breakdowns of
    different packaging types are alternative views, not a partition.
    """

    packaging_type_id: int
    name: str
    barcode: Optional[str] = None
    base_unit_quantity: Decimal
    is_base_unit: bool = False
    available_packages: int = Field(..., ge=0, description="Whole packages the total represents")
    remaining_base_units: Decimal = Field(..., ge=0, description="Base units left after whole packages")


class ConsolidatedStock(BaseSchema):
    """Stock of one product expressed in base units."""

    product_id: int
    total_base_units: Decimal = Field(default=Decimal("0"), ge=0)
    per_packaging_breakdown: list[PackagingBreakdown] = Field(default_factory=list)
    locations_count: int = Field(default=0, ge=0, description="Distinct locations holding stock")
    items_count: int = Field(default=0, ge=0, description="Stock records with non-zero quantity")
