"""
Custom exception classes for the packaging engine.

Every error carries a stable code, an HTTP-style status code for the
service layer that wraps the engine, and details naming the offending
product, packaging or pallet.
"""

from typing import Optional, Any
from datetime import datetime, timezone


class AppError(Exception):
    """
    Base exception for all engine errors.

    All custom exceptions inherit from this.

    Attributes:
        code: Error code (e.g., "PACKAGING_NOT_FOUND")
        message: Human-readable message
        status_code: HTTP status code
        details: Additional context
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc).isoformat()
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to API response format."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
                "timestamp": self.timestamp
            }
        }


class NotFoundError(AppError):
    """Resource not found (404)."""

    def __init__(
        self,
        resource: str,
        identifier: Any,
        code: Optional[str] = None,
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code or f"{resource.upper()}_NOT_FOUND",
            message=f"{resource} not found",
            status_code=404,
            details={"id": identifier, **(details or {})}
        )


class ValidationError(AppError):
    """Validation failed (422)."""

    def __init__(
        self,
        message: str,
        code: str = "VALIDATION_ERROR",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=422,
            details=details
        )


class DataIntegrityError(AppError):
    """Catalog snapshot violates an invariant (500). Halts the request."""

    def __init__(
        self,
        message: str,
        code: str = "DATA_INTEGRITY_ERROR",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=500,
            details=details
        )


# ===================
# CATALOG ERRORS
# ===================

class PackagingNotFoundError(NotFoundError):
    """Packaging type missing, or not owned by the stated product."""

    def __init__(self, packaging_id: Any, product_id: Optional[int] = None):
        details = {"product_id": product_id} if product_id is not None else None
        super().__init__(
            resource="Packaging",
            identifier=packaging_id,
            code="PACKAGING_NOT_FOUND",
            details=details
        )


class ProductNotFoundError(NotFoundError):
    """Product not found in the supplied catalog."""

    def __init__(self, product_id: int):
        super().__init__(
            resource="Product",
            identifier=product_id,
            code="PRODUCT_NOT_FOUND"
        )


class NoBaseUnitDefinedError(DataIntegrityError):
    """Product has zero or several active base units."""

    def __init__(self, product_id: int, found: int = 0):
        if found == 0:
            message = f"Product {product_id} has no active base unit"
        else:
            message = f"Product {product_id} has {found} active base units, expected exactly one"
        super().__init__(
            code="NO_BASE_UNIT_DEFINED",
            message=message,
            details={"product_id": product_id, "base_units_found": found}
        )


class InvalidHierarchyError(DataIntegrityError):
    """Packaging tree is malformed."""

    def __init__(self, product_id: Optional[int], packaging_id: Any, reason: str):
        super().__init__(
            code="INVALID_PACKAGING_HIERARCHY",
            message=f"Invalid packaging hierarchy: {reason}",
            details={
                "product_id": product_id,
                "packaging_id": packaging_id,
                "reason": reason
            }
        )


# ===================
# REQUEST ERRORS
# ===================

class InvalidRequestError(ValidationError):
    """Negative or malformed quantity in a request."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(
            code="INVALID_REQUEST",
            message=message,
            details=details
        )


# ===================
# PALLET ERRORS
# ===================

class PalletNotFoundError(NotFoundError):
    """Pallet not found among the candidates."""

    def __init__(self, pallet_id: int):
        super().__init__(
            resource="Pallet",
            identifier=pallet_id,
            code="PALLET_NOT_FOUND"
        )


class NoFeasiblePalletError(AppError):
    """No candidate pallet is available and carries the load (409)."""

    def __init__(self, total_weight_kg: float, candidate_ids: list):
        super().__init__(
            code="NO_FEASIBLE_PALLET",
            message=f"No available pallet supports a total weight of {total_weight_kg:.2f}kg",
            status_code=409,
            details={
                "total_weight_kg": round(total_weight_kg, 3),
                "candidate_pallet_ids": candidate_ids
            }
        )
