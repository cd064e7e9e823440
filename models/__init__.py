"""
Pydantic models for engine inputs and results.
"""

from models.base import BaseSchema, SnapshotSchema
from models.policy import ScoringPolicy
from models.product import Dimensions, Product
from models.packaging import PackagingType, PackagingNode
from models.stock import StockRecord, PackagingBreakdown, ConsolidatedStock
from models.pick_plan import PickPlanEntry, PickPlanResult
from models.pallet import (
    Complexity,
    ViolationType,
    Severity,
    Pallet,
    CompositionItem,
    CompositionConstraints,
    CompositionLoad,
    CompositionCandidate,
    ValidationViolation,
    CompositionValidation,
)

__all__ = [
    # Base
    "BaseSchema",
    "SnapshotSchema",
    "ScoringPolicy",

    # Catalog
    "Dimensions",
    "Product",
    "PackagingType",
    "PackagingNode",

    # Stock
    "StockRecord",
    "PackagingBreakdown",
    "ConsolidatedStock",

    # Pick plan
    "PickPlanEntry",
    "PickPlanResult",

    # Pallets
    "Complexity",
    "ViolationType",
    "Severity",
    "Pallet",
    "CompositionItem",
    "CompositionConstraints",
    "CompositionLoad",
    "CompositionCandidate",
    "ValidationViolation",
    "CompositionValidation",
]
