"""
Custom exceptions module.

Catalog errors (missing packaging, missing base unit, malformed tree) halt
a request. "Cannot fulfill" and "no candidates" are normal results and are
not raised.
"""

from exceptions.errors import (
    # Base exceptions
    AppError,
    NotFoundError,
    ValidationError,
    DataIntegrityError,

    # Catalog
    PackagingNotFoundError,
    ProductNotFoundError,
    NoBaseUnitDefinedError,
    InvalidHierarchyError,

    # Requests
    InvalidRequestError,

    # Pallets
    PalletNotFoundError,
    NoFeasiblePalletError,
)

__all__ = [
    # Base
    "AppError",
    "NotFoundError",
    "ValidationError",
    "DataIntegrityError",

    # Catalog
    "PackagingNotFoundError",
    "ProductNotFoundError",
    "NoBaseUnitDefinedError",
    "InvalidHierarchyError",

    # Requests
    "InvalidRequestError",

    # Pallets
    "PalletNotFoundError",
    "NoFeasiblePalletError",
]
