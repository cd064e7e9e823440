"""
Product physical attributes supplied by the product catalog.

Dimensions are in centimetres and weight in kilograms, matching the
product rows the catalog service stores.
"""

from typing import Optional

from pydantic import Field, computed_field

from models.base import SnapshotSchema


CM3_PER_M3 = 1_000_000


class Dimensions(SnapshotSchema):
    """Box dimensions in cm."""

    length_cm: float = Field(default=0, ge=0, description="Length in cm")
    width_cm: float = Field(default=0, ge=0, description="Width in cm")
    height_cm: float = Field(default=0, ge=0, description="Height in cm")


class Product(SnapshotSchema):
    """
    Product with the attributes the scorer needs.

    Weight and dimensions describe one base unit.
    """

    id: int = Field(..., description="Product ID")
    sku: Optional[str] = Field(None, max_length=50, description="Product SKU")
    weight_kg: float = Field(default=0, ge=0, description="Weight of one base unit in kg")
    dimensions: Dimensions = Field(
        default_factory=Dimensions,
        description="Dimensions of one base unit"
    )

    @computed_field
    @property
    def volume_m3(self) -> float:
        d = self.dimensions
        return d.length_cm * d.width_cm * d.height_cm / CM3_PER_M3

    @computed_field
    @property
    def density_kg_per_m3(self) -> float:
        """Weight over volume; 0 for products without dimensions."""
        volume = self.volume_m3
        if volume <= 0:
            return 0.0
        return self.weight_kg / volume
