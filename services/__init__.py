"""
Engine services.

Each service handles one computation over caller-supplied snapshots.
"""

from services.packaging_catalog import PackagingCatalog
from services.stock_consolidator import StockConsolidator
from services.pick_plan_optimizer import PickPlanOptimizer
from services.pallet_scorer import PalletScorer, get_pallet_scorer

__all__ = [
    "PackagingCatalog",
    "StockConsolidator",
    "PickPlanOptimizer",
    "PalletScorer",
    "get_pallet_scorer",
]
