"""
Packaging type schemas.

A product's packaging types form a tree: a box holds units, a pallet
holds boxes. Each type converts to the product's base unit through
base_unit_quantity.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from pydantic import Field, field_validator, model_validator

from models.base import BaseSchema, SnapshotSchema


class PackagingType(SnapshotSchema):
    """
    One packaging definition for a product.

    The base unit is the smallest sellable unit and always equals one
    base unit. Parents reference other packaging types by id.
    """

    id: int = Field(..., description="Packaging type ID")
    product_id: int = Field(..., description="Owning product ID")
    name: str = Field(default="", max_length=100, description="Display name (Unidade, Caixa, Pallet)")
    parent_packaging_id: Optional[int] = Field(
        None,
        description="Packaging this one is physically packed into"
    )
    base_unit_quantity: Decimal = Field(
        ...,
        gt=0,
        description="How many base units one package of this type holds"
    )
    is_base_unit: bool = Field(default=False, description="Whether this is the product's base unit")
    is_stackable: bool = Field(default=True, description="Whether packages can be stacked")
    barcode: Optional[str] = Field(None, max_length=255, description="Package barcode")
    level: Optional[int] = Field(None, ge=1, description="Depth label, 1 = base unit")
    is_active: bool = Field(default=True, description="Whether packaging is active")

    @field_validator("barcode")
    @classmethod
    def blank_barcode_is_none(cls, v: Optional[str]) -> Optional[str]:
        """Empty barcodes are treated as missing."""
        return v or None

    @model_validator(mode="after")
    def base_unit_equals_one(self) -> "PackagingType":
        """A base unit converts 1:1."""
        if self.is_base_unit and self.base_unit_quantity != 1:
            raise ValueError(
                f"Base unit packaging {self.id} must have base_unit_quantity 1, "
                f"got {self.base_unit_quantity}"
            )
        if self.parent_packaging_id == self.id:
            raise ValueError(f"Packaging {self.id} cannot be its own parent")
        return self


class PackagingNode(BaseSchema):
    """
    Node in a product's packaging hierarchy.

    Built fresh on every call; children are ordered largest first.
    """

    packaging: PackagingType
    children: list[PackagingNode] = Field(default_factory=list)

    def walk(self):
        """Yield this node's packaging and every descendant, depth first."""
        yield self.packaging
        for child in self.children:
            yield from child.walk()
