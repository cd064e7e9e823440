"""
Scoring policy passed explicitly into the pallet scorer.

Defaults mirror config.settings. The 0.3/0.3/0.4 weights and the 0.8
target utilization are empirical and meant to be tuned.
"""

from pydantic import Field, model_validator

from models.base import SnapshotSchema


class ScoringPolicy(SnapshotSchema):
    """Business constants for pallet selection and composition checks."""

    # Base score
    capacity_weight: float = Field(default=0.3, ge=0, description="Weight of max_weight/1000")
    area_weight: float = Field(default=0.3, ge=0, description="Weight of pallet area in m²")
    efficiency_weight: float = Field(default=0.4, ge=0, description="Weight of historical efficiency")

    # Utilization
    target_utilization: float = Field(default=0.8, gt=0, le=1)
    standard_stack_height_cm: float = Field(default=200, gt=0)
    default_historical_efficiency: float = Field(default=0.5, ge=0, le=1)

    # Candidates
    available_status: str = Field(default="available", min_length=1)
    max_candidates: int = Field(default=5, ge=1)

    # Complexity
    complexity_low_max_products: int = Field(default=5, ge=1)
    complexity_low_max_quantity: float = Field(default=50, ge=0)
    complexity_medium_max_products: int = Field(default=20, ge=1)
    complexity_medium_max_quantity: float = Field(default=200, ge=0)
    enhanced_algorithm_min_products: int = Field(default=10, ge=1)
    enhanced_algorithm_min_quantity: float = Field(default=200, ge=0)

    # Validation
    low_efficiency_threshold: float = Field(default=0.6, ge=0, le=1)
    reorganize_efficiency_threshold: float = Field(default=0.7, ge=0, le=1)
    low_weight_utilization_threshold: float = Field(default=0.5, ge=0, le=1)
    height_warning_threshold: float = Field(default=0.9, ge=0, le=1)

    @model_validator(mode="after")
    def complexity_bands_ordered(self) -> "ScoringPolicy":
        """LOW band must sit inside the MEDIUM band."""
        if self.complexity_low_max_products > self.complexity_medium_max_products:
            raise ValueError("complexity_low_max_products exceeds complexity_medium_max_products")
        if self.complexity_low_max_quantity > self.complexity_medium_max_quantity:
            raise ValueError("complexity_low_max_quantity exceeds complexity_medium_max_quantity")
        return self
