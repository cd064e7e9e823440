"""
Pick plan schemas.

A pick plan tells an operator which physical handling units to
retrieve to fulfil a base-unit request.
"""

from decimal import Decimal

from pydantic import Field

from models.base import BaseSchema


class PickPlanEntry(BaseSchema):
    """Packages of one type to pick."""

    packaging_type_id: int = Field(..., description="Packaging to pick")
    packaging_name: str = Field(default="", description="Packaging display name")
    package_count: Decimal = Field(..., gt=0, description="Number of packages to pick")
    base_units: Decimal = Field(..., gt=0, description="Base units those packages represent")


class PickPlanResult(BaseSchema):
    """Greedy decomposition of a requested quantity."""

    product_id: int
    requested_base_units: Decimal = Field(..., ge=0)
    entries: list[PickPlanEntry] = Field(default_factory=list)
    remaining: Decimal = Field(..., ge=0, description="Base units the plan could not cover")
    total_planned: Decimal = Field(..., ge=0, description="Base units covered by the plan")
    can_fulfill: bool

    @property
    def package_count(self) -> Decimal:
        """Total handling units the operator retrieves."""
        return sum((e.package_count for e in self.entries), Decimal("0"))
