"""
Pallet and composition schemas.

Pallet sizes are in centimetres, capacities in kilograms, volumes in m³.
"""

from enum import Enum
from typing import Optional

from pydantic import Field

from models.base import BaseSchema, SnapshotSchema


class Complexity(str, Enum):
    """How demanding a composition is to plan."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ViolationType(str, Enum):
    """Physical limit a composition breaks."""
    WEIGHT = "weight"
    VOLUME = "volume"
    HEIGHT = "height"


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


class Pallet(SnapshotSchema):
    """
    Candidate pallet.

    historical_efficiency is pre-aggregated upstream from recent
    compositions; None means the pallet has no history yet.
    """

    id: int = Field(..., description="Pallet ID")
    code: Optional[str] = Field(None, max_length=50, description="Pallet code (PLT0001)")
    max_weight_kg: float = Field(..., gt=0, description="Load capacity in kg")
    width_cm: float = Field(..., gt=0, description="Width in cm")
    length_cm: float = Field(..., gt=0, description="Length in cm")
    height_cm: Optional[float] = Field(None, ge=0, description="Pallet deck height in cm")
    status: str = Field(default="available", description="Pallet status")
    historical_efficiency: Optional[float] = Field(
        None,
        ge=0,
        le=1,
        description="Average realized efficiency over the trailing window"
    )

    @property
    def area_m2(self) -> float:
        return self.width_cm * self.length_cm / 10_000


class CompositionItem(SnapshotSchema):
    """Quantity of one product, in base units, to place on a pallet."""

    product_id: int = Field(..., description="Product ID")
    quantity: float = Field(..., description="Base units")


class CompositionConstraints(SnapshotSchema):
    """Caller overrides for a pallet's physical limits."""

    max_weight_kg: Optional[float] = Field(None, gt=0)
    max_volume_m3: Optional[float] = Field(None, gt=0)
    max_height_cm: Optional[float] = Field(None, gt=0)


class CompositionLoad(BaseSchema):
    """Aggregate physical load of a list of items."""

    total_weight_kg: float = Field(default=0, ge=0)
    total_volume_m3: float = Field(default=0, ge=0)
    max_item_height_cm: float = Field(default=0, ge=0)
    product_count: int = Field(default=0, ge=0, description="Distinct products")
    total_quantity: float = Field(default=0, ge=0)


class CompositionCandidate(BaseSchema):
    """Pallet scored against a load."""

    pallet: Pallet
    weight_utilization: float = Field(..., ge=0, le=1)
    volume_utilization: float = Field(..., ge=0, le=1)
    base_score: float = Field(..., ge=0)
    adjusted_score: float = Field(..., ge=0)

    @property
    def pallet_id(self) -> int:
        return self.pallet.id


class ValidationViolation(BaseSchema):
    """One broken physical limit."""

    type: ViolationType
    severity: Severity = Severity.ERROR
    message: str
    affected_products: list[int] = Field(default_factory=list)


class CompositionValidation(BaseSchema):
    """
    Result of checking a composition against one pallet.

    Violations are a normal outcome; is_valid is False when any
    violation has ERROR severity.
    """

    pallet_id: int
    is_valid: bool
    load: CompositionLoad
    weight_limit_kg: float
    volume_limit_m3: float
    height_limit_cm: float
    weight_utilization: float = Field(..., ge=0)
    volume_utilization: float = Field(..., ge=0)
    height_utilization: float = Field(..., ge=0)
    efficiency: float = Field(..., ge=0, le=1)
    violations: list[ValidationViolation] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
