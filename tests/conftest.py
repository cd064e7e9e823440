"""
Shared test fixtures.
"""

import sys
from pathlib import Path

# Add project root to Python path
project_dir = Path(__file__).parent.parent
sys.path.insert(0, str(project_dir))

import pytest

from models import Pallet, Product, Dimensions, ScoringPolicy
from services import PackagingCatalog, StockConsolidator, PickPlanOptimizer, PalletScorer
from tests.factories import PackagingFactory, StockFactory


# ===================
# CONSTANTS
# ===================

PRODUCT_ID = 1
UNIT_ID = 10
BOX_ID = 11
PALLET_ID = 12


# ===================
# CATALOG FIXTURES
# ===================

@pytest.fixture
def unit_box_pallet() -> list:
    """Unidade (1) inside Caixa (12) inside Pallet (144)."""
    return PackagingFactory.hierarchy(
        product_id=PRODUCT_ID,
        levels=[(UNIT_ID, "Unidade", 1), (BOX_ID, "Caixa", 12), (PALLET_ID, "Pallet", 144)],
    )


@pytest.fixture
def catalog(unit_box_pallet) -> PackagingCatalog:
    """Catalog with the Unidade/Caixa/Pallet hierarchy of product 1."""
    return PackagingCatalog(unit_box_pallet)


@pytest.fixture
def consolidator(catalog) -> StockConsolidator:
    return StockConsolidator(catalog)


@pytest.fixture
def optimizer(catalog) -> PickPlanOptimizer:
    return PickPlanOptimizer(catalog)


@pytest.fixture
def sample_stock() -> list:
    """Stock of product 1 across three locations."""
    return [
        StockFactory.create(PRODUCT_ID, PALLET_ID, location_id=100, quantity=2),
        StockFactory.create(PRODUCT_ID, BOX_ID, location_id=101, quantity=2),
        StockFactory.create(PRODUCT_ID, UNIT_ID, location_id=102, quantity=5),
    ]


# ===================
# PALLET FIXTURES
# ===================

@pytest.fixture
def policy() -> ScoringPolicy:
    """Default scoring policy."""
    return ScoringPolicy()


@pytest.fixture
def scorer(policy) -> PalletScorer:
    return PalletScorer(policy)


@pytest.fixture
def product_catalog() -> dict:
    """
    Two products.

    Product 1: 30kg box of 50x40x30cm (0.06 m³)
    Product 2: 15kg box of 50x40x15cm (0.03 m³)
    """
    return {
        1: Product(
            id=1,
            sku="CX-GRANDE",
            weight_kg=30,
            dimensions=Dimensions(length_cm=50, width_cm=40, height_cm=30),
        ),
        2: Product(
            id=2,
            sku="CX-MEDIA",
            weight_kg=15,
            dimensions=Dimensions(length_cm=50, width_cm=40, height_cm=15),
        ),
    }


@pytest.fixture
def pallet_a() -> Pallet:
    """PBR-like pallet: 1000kg, 100x120cm (1.2 m²), efficiency 0.6."""
    return Pallet(
        id=1,
        code="PLT0001",
        max_weight_kg=1000,
        width_cm=100,
        length_cm=120,
        status="available",
        historical_efficiency=0.6,
    )


@pytest.fixture
def pallet_b() -> Pallet:
    """Heavy pallet: 2000kg, 120x120cm (1.44 m²), efficiency 0.4."""
    return Pallet(
        id=2,
        code="PLT0002",
        max_weight_kg=2000,
        width_cm=120,
        length_cm=120,
        status="available",
        historical_efficiency=0.4,
    )
