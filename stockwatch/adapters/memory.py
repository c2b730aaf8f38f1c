"""
In-memory Inventory Store — adapter for development and testing.

Implements the InventoryStore protocol over plain dicts, with the same
guarantees as the Django adapter (including the uniqueness of open alerts).
Each call yields to the event loop once, so interleavings between
concurrent tasks show up the same way they would against a database.

Usage in settings.py:
    STOCKWATCH = {
        "STORE_BACKEND": "stockwatch.adapters.memory.InMemoryStore",
    }

WARNING: Do NOT use in production. Nothing is persisted.
"""

from __future__ import annotations

import asyncio
import itertools
from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal

from django.utils import timezone

from stockwatch.exceptions import AlertConflict
from stockwatch.models.enums import MovementKind, StockStatus
from stockwatch.protocols.store import (
    AlertSnapshot,
    BatchSnapshot,
    EntityRef,
    MovementSnapshot,
    ProductSnapshot,
    StockRecordSnapshot,
)


def _dec(value) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


class InMemoryStore:
    """
    Dict-backed inventory store.

    Seed it with the ``add_*`` helpers; read results back through
    ``alerts``, ``records`` and the protocol methods.
    """

    def __init__(self):
        self._ids = itertools.count(1)
        self.products: dict[int, ProductSnapshot] = {}
        self.records: dict[int, StockRecordSnapshot] = {}
        self.batches: dict[int, BatchSnapshot] = {}
        self.movements: dict[int, MovementSnapshot] = {}
        self._alerts: dict[int, AlertSnapshot] = {}

    # ══════════════════════════════════════════════════════════════
    # SEEDING
    # ══════════════════════════════════════════════════════════════

    def add_product(self, name: str, min_stock=0, max_stock=None, is_active: bool = True) -> ProductSnapshot:
        product = ProductSnapshot(
            id=next(self._ids),
            name=name,
            min_stock=_dec(min_stock),
            max_stock=None if max_stock is None else _dec(max_stock),
            is_active=is_active,
        )
        self.products[product.id] = product
        return product

    def add_stock_record(self, product_id: int, quantity, available=None, reserved=0,
                         location: str = 'default', status: str = StockStatus.IN_STOCK) -> StockRecordSnapshot:
        quantity = _dec(quantity)
        reserved = _dec(reserved)
        record = StockRecordSnapshot(
            id=next(self._ids),
            product_id=product_id,
            product_name=self.products[product_id].name,
            location=location,
            quantity=quantity,
            available=quantity - reserved if available is None else _dec(available),
            reserved=reserved,
            status=status,
        )
        self.records[record.id] = record
        return record

    def add_batch(self, product_id: int, expiry_date: date | None, quantity=0,
                  code: str | None = None, production_date: date | None = None) -> BatchSnapshot:
        batch_id = next(self._ids)
        batch = BatchSnapshot(
            id=batch_id,
            code=code or f"LOT-{batch_id}",
            product_id=product_id,
            product_name=self.products[product_id].name,
            quantity=_dec(quantity),
            expiry_date=expiry_date,
            production_date=production_date,
        )
        self.batches[batch.id] = batch
        return batch

    def add_movement(self, product_id: int, kind: str, delta, timestamp: datetime | None = None,
                     is_sale: bool = False, location: str = 'default') -> MovementSnapshot:
        movement = MovementSnapshot(
            id=next(self._ids),
            product_id=product_id,
            product_name=self.products[product_id].name,
            location=location,
            kind=kind,
            delta=_dec(delta),
            timestamp=timestamp or timezone.now(),
            is_sale=is_sale,
        )
        self.movements[movement.id] = movement
        return movement

    def add_alert(self, entity: EntityRef, alert_type: str, severity: str = 'medium', message: str = '',
                  created_at: datetime | None = None) -> AlertSnapshot:
        """Seed an open alert directly, bypassing dedup (e.g. to backdate it)."""
        alert = AlertSnapshot(
            id=next(self._ids),
            entity=entity,
            type=alert_type,
            severity=severity,
            message=message,
            created_at=created_at or timezone.now(),
        )
        self._alerts[alert.id] = alert
        return replace(alert)

    @property
    def alerts(self) -> list[AlertSnapshot]:
        """Copies of every alert, in creation order."""
        return [replace(a) for a in self._alerts.values()]

    def open_alerts(self, entity: EntityRef | None = None, alert_type: str | None = None) -> list[AlertSnapshot]:
        return [
            a for a in self.alerts
            if a.is_open
            and (entity is None or a.entity == entity)
            and (alert_type is None or a.type == alert_type)
        ]

    # ══════════════════════════════════════════════════════════════
    # PROTOCOL
    # ══════════════════════════════════════════════════════════════

    async def list_products(self, active_only: bool = True) -> list[ProductSnapshot]:
        await asyncio.sleep(0)
        return [replace(p) for p in self.products.values() if p.is_active or not active_only]

    async def get_product(self, product_id: int) -> ProductSnapshot | None:
        await asyncio.sleep(0)
        product = self.products.get(product_id)
        return replace(product) if product else None

    async def total_quantity(self, product_id: int) -> Decimal:
        await asyncio.sleep(0)
        return sum(
            (r.quantity for r in self.records.values() if r.product_id == product_id),
            Decimal('0'),
        )

    async def update_stock_status(self, product_id: int, status: str, at: datetime) -> int:
        await asyncio.sleep(0)
        updated = 0
        for record in self.records.values():
            if record.product_id == product_id:
                record.status = status
                record.last_updated = at
                updated += 1
        return updated

    async def find_negative_records(self) -> list[StockRecordSnapshot]:
        await asyncio.sleep(0)
        return [replace(r) for r in self.records.values() if r.quantity < 0 or r.available < 0]

    async def find_over_reserved_records(self) -> list[StockRecordSnapshot]:
        await asyncio.sleep(0)
        return [replace(r) for r in self.records.values() if r.reserved > r.available]

    async def list_expiring_batches(self, until: date) -> list[BatchSnapshot]:
        await asyncio.sleep(0)
        batches = [
            replace(b) for b in self.batches.values()
            if b.expiry_date is not None and b.expiry_date <= until
        ]
        return sorted(batches, key=lambda b: b.expiry_date)

    async def find_open_alert(self, entity: EntityRef, alert_type: str) -> AlertSnapshot | None:
        await asyncio.sleep(0)
        for alert in self._alerts.values():
            if alert.entity == entity and alert.type == alert_type and alert.is_open:
                return replace(alert)
        return None

    async def create_alert(self, entity: EntityRef, alert_type: str, severity: str,
                           message: str, created_at: datetime) -> AlertSnapshot:
        await asyncio.sleep(0)
        if any(a.entity == entity and a.type == alert_type and a.is_open for a in self._alerts.values()):
            raise AlertConflict(str(entity), alert_type)
        alert = AlertSnapshot(
            id=next(self._ids),
            entity=entity,
            type=alert_type,
            severity=severity,
            message=message,
            created_at=created_at,
        )
        self._alerts[alert.id] = alert
        return replace(alert)

    async def alert_created_since(self, entity: EntityRef, alert_type: str, since: datetime) -> bool:
        await asyncio.sleep(0)
        return any(
            a.entity == entity and a.type == alert_type and a.created_at >= since
            for a in self._alerts.values()
        )

    async def get_alert(self, alert_id: int) -> AlertSnapshot | None:
        await asyncio.sleep(0)
        alert = self._alerts.get(alert_id)
        return replace(alert) if alert else None

    async def resolve_alert(self, alert_id: int, at: datetime) -> bool:
        await asyncio.sleep(0)
        alert = self._alerts.get(alert_id)
        if alert is None or alert.is_resolved:
            return False
        self._resolve(alert, at)
        return True

    async def resolve_open_alerts(self, at: datetime, created_before: datetime | None = None,
                                  entity: EntityRef | None = None, alert_type: str | None = None) -> int:
        await asyncio.sleep(0)
        resolved = 0
        for alert in self._alerts.values():
            if not alert.is_open:
                continue
            if created_before is not None and not alert.created_at < created_before:
                continue
            if entity is not None and alert.entity != entity:
                continue
            if alert_type is not None and alert.type != alert_type:
                continue
            self._resolve(alert, at)
            resolved += 1
        return resolved

    async def units_sold(self, product_id: int, since: datetime) -> Decimal:
        await asyncio.sleep(0)
        return sum(
            (abs(m.delta) for m in self.movements.values()
             if m.product_id == product_id and m.kind == MovementKind.OUT
             and m.is_sale and m.timestamp >= since),
            Decimal('0'),
        )

    async def list_movements(self, since: datetime, until: datetime) -> list[MovementSnapshot]:
        await asyncio.sleep(0)
        movements = [replace(m) for m in self.movements.values() if since <= m.timestamp < until]
        return sorted(movements, key=lambda m: m.timestamp)

    @staticmethod
    def _resolve(alert: AlertSnapshot, at: datetime) -> None:
        alert.is_active = False
        alert.is_resolved = True
        alert.resolved_at = at
