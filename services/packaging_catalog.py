"""
Packaging Catalog - packaging hierarchy and base-unit conversions.

Holds a snapshot of packaging types as an arena keyed by id. Parent/child
links are resolved once into an index (parent id -> child ids), so trees
handed to callers are plain values rebuilt on every call.

All quantities are Decimal so that to/from base-unit conversions
round-trip exactly.
"""

from collections import defaultdict
from decimal import Decimal
from typing import Iterable, Optional, Union

import structlog

from models.packaging import PackagingNode, PackagingType
from exceptions import (
    PackagingNotFoundError,
    NoBaseUnitDefinedError,
    InvalidHierarchyError,
    InvalidRequestError,
)

logger = structlog.get_logger(__name__)

Number = Union[int, float, Decimal, str]


def to_decimal(value: Number, field: str = "quantity") -> Decimal:
    """Coerce a numeric input to Decimal, rejecting NaN and infinities."""
    if isinstance(value, bool):
        raise InvalidRequestError(f"{field} must be a number", details={field: value})
    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value))
    except (ArithmeticError, ValueError, TypeError):
        raise InvalidRequestError(f"{field} must be a number", details={field: str(value)})
    if not result.is_finite():
        raise InvalidRequestError(f"{field} must be finite", details={field: str(value)})
    return result


def largest_first(packaging: PackagingType) -> tuple:
    """Sort key: base_unit_quantity descending, then id ascending."""
    return (-packaging.base_unit_quantity, packaging.id)


class PackagingCatalog:
    """
    Packaging types of one or more products.

    Built from caller-supplied rows; never mutated afterwards.
    """

    def __init__(self, packagings: Iterable[PackagingType]):
        self._by_id: dict[int, PackagingType] = {}
        self._by_product: dict[int, list[int]] = defaultdict(list)
        self._children: dict[int, list[int]] = defaultdict(list)

        for packaging in packagings:
            if packaging.id in self._by_id:
                raise InvalidHierarchyError(
                    packaging.product_id,
                    packaging.id,
                    f"duplicate packaging id {packaging.id}"
                )
            self._by_id[packaging.id] = packaging
            self._by_product[packaging.product_id].append(packaging.id)

        # One-time child index over active rows of the parent's own product
        for packaging in self._by_id.values():
            parent = self._by_id.get(packaging.parent_packaging_id)
            if packaging.is_active and parent is not None and parent.product_id == packaging.product_id:
                self._children[parent.id].append(packaging.id)

        logger.debug(
            "packaging_catalog_built",
            packagings=len(self._by_id),
            products=len(self._by_product),
        )

    def __len__(self) -> int:
        return len(self._by_id)

    # ===================
    # LOOKUPS
    # ===================

    def get_packaging(self, packaging_id: int, product_id: Optional[int] = None) -> PackagingType:
        """
        Get packaging type by ID.

        Args:
            packaging_id: Packaging type ID
            product_id: When given, the packaging must belong to this product

        Returns:
            PackagingType

        Raises:
            PackagingNotFoundError: If missing or owned by another product
        """
        packaging = self._by_id.get(packaging_id)
        if packaging is None:
            raise PackagingNotFoundError(packaging_id, product_id)
        if product_id is not None and packaging.product_id != product_id:
            raise PackagingNotFoundError(packaging_id, product_id)
        return packaging

    def get_packagings_by_product(self, product_id: int) -> list[PackagingType]:
        """Active packaging types of a product, largest first."""
        packagings = [
            self._by_id[pid] for pid in self._by_product.get(product_id, [])
            if self._by_id[pid].is_active
        ]
        return sorted(packagings, key=largest_first)

    def get_base_unit(self, product_id: int) -> PackagingType:
        """
        Get the product's single active base unit.

        Raises:
            NoBaseUnitDefinedError: If zero or several base units are active
        """
        base_units = [p for p in self.get_packagings_by_product(product_id) if p.is_base_unit]
        if len(base_units) != 1:
            logger.error(
                "base_unit_invalid",
                product_id=product_id,
                found=len(base_units),
            )
            raise NoBaseUnitDefinedError(product_id, found=len(base_units))
        return base_units[0]

    def get_by_barcode(self, barcode: str) -> PackagingType:
        """
        Get active packaging by barcode.

        Raises:
            PackagingNotFoundError: If no active packaging carries the barcode
        """
        barcode = (barcode or "").strip()
        for packaging in self._by_id.values():
            if packaging.is_active and barcode and packaging.barcode == barcode:
                return packaging
        raise PackagingNotFoundError(barcode)

    # ===================
    # HIERARCHY
    # ===================

    def validate_hierarchy(self, product_id: int) -> None:
        """
        Check a product's packaging tree.

        Rules:
            - exactly one active base unit
            - parents exist, are active and belong to the same product
            - a parent holds more base units than each of its children
            - siblings hold distinct quantities
            - every packaging is reachable from a root (no cycles)

        Raises:
            NoBaseUnitDefinedError: Base unit missing or duplicated
            InvalidHierarchyError: Any other broken rule
        """
        packagings = self.get_packagings_by_product(product_id)
        self.get_base_unit(product_id)

        for packaging in packagings:
            parent_id = packaging.parent_packaging_id
            if parent_id is None:
                continue
            parent = self._by_id.get(parent_id)
            if parent is None or parent.product_id != product_id:
                raise InvalidHierarchyError(
                    product_id, packaging.id, f"parent {parent_id} not found for product"
                )
            if not parent.is_active:
                raise InvalidHierarchyError(
                    product_id, packaging.id, f"parent {parent_id} is inactive"
                )
            if parent.base_unit_quantity <= packaging.base_unit_quantity:
                raise InvalidHierarchyError(
                    product_id,
                    packaging.id,
                    f"parent {parent_id} holds {parent.base_unit_quantity} base units, "
                    f"not more than child ({packaging.base_unit_quantity})"
                )

        groups: dict[Optional[int], set] = defaultdict(set)
        for packaging in packagings:
            siblings = groups[packaging.parent_packaging_id]
            if packaging.base_unit_quantity in siblings:
                raise InvalidHierarchyError(
                    product_id,
                    packaging.id,
                    f"sibling quantity {packaging.base_unit_quantity} is not unique"
                )
            siblings.add(packaging.base_unit_quantity)

        # Every active packaging hangs off a root
        reachable = set()
        stack = [p.id for p in packagings if p.parent_packaging_id is None]
        while stack:
            current = stack.pop()
            if current in reachable:
                continue
            reachable.add(current)
            stack.extend(self._children.get(current, []))
        for packaging in packagings:
            if packaging.id not in reachable:
                raise InvalidHierarchyError(
                    product_id, packaging.id, "packaging is not reachable from a root"
                )

    def get_hierarchy(self, product_id: int) -> list[PackagingNode]:
        """
        Build the packaging tree of a product.

        Args:
            product_id: Product ID

        Returns:
            Root nodes ordered largest first; children ordered the same way

        Raises:
            NoBaseUnitDefinedError: Base unit missing or duplicated
            InvalidHierarchyError: Tree is malformed
        """
        self.validate_hierarchy(product_id)

        roots = [
            p for p in self.get_packagings_by_product(product_id)
            if p.parent_packaging_id is None
        ]
        hierarchy = [self._build_node(p) for p in roots]

        logger.debug("hierarchy_built", product_id=product_id, roots=len(hierarchy))
        return hierarchy

    def _build_node(self, packaging: PackagingType) -> PackagingNode:
        children = sorted(
            (self._by_id[cid] for cid in self._children.get(packaging.id, [])),
            key=largest_first,
        )
        return PackagingNode(
            packaging=packaging,
            children=[self._build_node(child) for child in children],
        )

    # ===================
    # CONVERSIONS
    # ===================

    def to_base_units(
        self,
        packaging_id: int,
        quantity: Number,
        product_id: Optional[int] = None,
    ) -> Decimal:
        """
        Convert a quantity of packages to base units.

        Raises:
            PackagingNotFoundError: Unknown packaging or wrong product
            InvalidRequestError: Negative quantity
        """
        packaging = self.get_packaging(packaging_id, product_id)
        quantity = self._non_negative(quantity, "quantity", packaging_id)
        return quantity * packaging.base_unit_quantity

    def from_base_units(
        self,
        packaging_id: int,
        base_units: Number,
        product_id: Optional[int] = None,
    ) -> Decimal:
        """
        Convert base units to (possibly fractional) packages.

        Callers that need whole packages floor the result themselves.
        """
        packaging = self.get_packaging(packaging_id, product_id)
        base_units = self._non_negative(base_units, "base_units", packaging_id)
        return base_units / packaging.base_unit_quantity

    def conversion_factor(self, from_packaging_id: int, to_packaging_id: int) -> Decimal:
        """
        How many `to` packages one `from` package equals.

        Raises:
            PackagingNotFoundError: Either packaging missing, or they
                belong to different products
        """
        source = self.get_packaging(from_packaging_id)
        target = self.get_packaging(to_packaging_id, source.product_id)
        return source.base_unit_quantity / target.base_unit_quantity

    @staticmethod
    def _non_negative(value: Number, field: str, packaging_id: int) -> Decimal:
        result = to_decimal(value, field)
        if result < 0:
            raise InvalidRequestError(
                f"{field} must be >= 0",
                details={field: str(result), "packaging_id": packaging_id},
            )
        return result
