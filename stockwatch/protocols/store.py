"""
Inventory Store Protocol — storage contract for the reconciliation engine.

Stockwatch defines this protocol; the Django ORM adapter implements it for
production and the in-memory adapter for development and tests. Services
only ever see the snapshot dataclasses below, never ORM instances.

All methods are coroutines: every read/compute/write step suspends at the
storage boundary.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Protocol, runtime_checkable


# ══════════════════════════════════════════════════════════════
# ENTITY REFERENCES
# ══════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class ProductScoped:
    """Alert about one product."""

    product_id: int

    def __str__(self) -> str:
        return f"product:{self.product_id}"


@dataclass(frozen=True)
class SystemScoped:
    """Alert about the whole system (daily summary)."""

    def __str__(self) -> str:
        return "system"


SYSTEM = SystemScoped()

EntityRef = ProductScoped | SystemScoped


# ══════════════════════════════════════════════════════════════
# SNAPSHOTS
# ══════════════════════════════════════════════════════════════


@dataclass
class ProductSnapshot:
    """Product fields the engine reads."""

    id: int
    name: str
    min_stock: Decimal = Decimal('0')
    max_stock: Decimal | None = None
    is_active: bool = True


@dataclass
class StockRecordSnapshot:
    """One location-scoped stock row."""

    id: int
    product_id: int
    product_name: str
    location: str
    quantity: Decimal
    available: Decimal
    reserved: Decimal
    status: str
    last_updated: datetime | None = None


@dataclass
class BatchSnapshot:
    id: int
    code: str
    product_id: int
    product_name: str
    quantity: Decimal
    expiry_date: date | None = None
    production_date: date | None = None


@dataclass
class AlertSnapshot:
    id: int
    entity: EntityRef
    type: str
    severity: str
    message: str
    is_active: bool = True
    is_resolved: bool = False
    created_at: datetime | None = None
    resolved_at: datetime | None = None

    @property
    def is_open(self) -> bool:
        return self.is_active and not self.is_resolved


@dataclass
class MovementSnapshot:
    id: int
    product_id: int
    product_name: str
    location: str
    kind: str
    delta: Decimal
    timestamp: datetime
    is_sale: bool = False


# ══════════════════════════════════════════════════════════════
# PROTOCOL
# ══════════════════════════════════════════════════════════════


@runtime_checkable
class InventoryStore(Protocol):
    """
    Protocol for inventory storage.

    Implementations should provide:
    - Product and stock record reads, with aggregate quantity
    - Bulk status write by product
    - Discrepancy and expiry queries
    - Alert lookup, insert and conditional resolution
    - Sales and movement history reads
    """

    async def list_products(self, active_only: bool = True) -> list[ProductSnapshot]:
        """List products (only active ones by default)."""
        ...

    async def get_product(self, product_id: int) -> ProductSnapshot | None:
        ...

    async def total_quantity(self, product_id: int) -> Decimal:
        """Sum of quantity across all stock records of the product (0 if none)."""
        ...

    async def update_stock_status(self, product_id: int, status: str, at: datetime) -> int:
        """
        Write status and last_updated on every stock record of the product.

        Returns:
            Number of records updated
        """
        ...

    async def find_negative_records(self) -> list[StockRecordSnapshot]:
        """Records with quantity < 0 or available < 0."""
        ...

    async def find_over_reserved_records(self) -> list[StockRecordSnapshot]:
        """Records with reserved > available."""
        ...

    async def list_expiring_batches(self, until: date) -> list[BatchSnapshot]:
        """Batches with an expiry date on or before ``until``."""
        ...

    async def find_open_alert(self, entity: EntityRef, alert_type: str) -> AlertSnapshot | None:
        ...

    async def create_alert(
        self,
        entity: EntityRef,
        alert_type: str,
        severity: str,
        message: str,
        created_at: datetime,
    ) -> AlertSnapshot:
        """
        Insert an open alert.

        Raises:
            AlertConflict: An open alert already exists for (entity, type)
        """
        ...

    async def alert_created_since(self, entity: EntityRef, alert_type: str, since: datetime) -> bool:
        """Is there any alert (open or not) for the key created at or after ``since``?"""
        ...

    async def get_alert(self, alert_id: int) -> AlertSnapshot | None:
        ...

    async def resolve_alert(self, alert_id: int, at: datetime) -> bool:
        """
        Resolve one alert if it is not resolved yet.

        Returns:
            True if the alert changed
        """
        ...

    async def resolve_open_alerts(
        self,
        at: datetime,
        created_before: datetime | None = None,
        entity: EntityRef | None = None,
        alert_type: str | None = None,
    ) -> int:
        """
        Resolve open alerts matching every given filter.

        Returns:
            Number of alerts resolved
        """
        ...

    async def units_sold(self, product_id: int, since: datetime) -> Decimal:
        """Units sold (outgoing sale movements) since the given instant."""
        ...

    async def list_movements(self, since: datetime, until: datetime) -> list[MovementSnapshot]:
        """Movements with since <= timestamp < until."""
        ...
