"""
Django ORM Inventory Store — production adapter.

Implements the InventoryStore protocol on top of the Stockwatch models and
the host's product model, using Django's async ORM API.

Settings:
    STOCKWATCH = {
        "STORE_BACKEND": "stockwatch.adapters.django_orm.DjangoInventoryStore",
        "PRODUCT_MODEL": "catalog.Product",
    }

The product model must be a regular Django model. Stockwatch reads
``name``, ``min_stock``, ``max_stock`` and ``is_active`` from it; missing
attributes fall back to PRODUCT_DEFAULTS.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal

from asgiref.sync import sync_to_async
from django.apps import apps
from django.contrib.contenttypes.models import ContentType
from django.core.exceptions import ImproperlyConfigured
from django.db import IntegrityError, transaction
from django.db.models import Sum
from django.db.models.functions import Abs, Coalesce

from stockwatch.conf import stockwatch_settings
from stockwatch.exceptions import AlertConflict
from stockwatch.models.alert import Alert
from stockwatch.models.batch import Batch
from stockwatch.models.enums import MovementKind
from stockwatch.models.movement import StockMovement
from stockwatch.models.stock_record import StockRecord
from stockwatch.protocols.store import (
    SYSTEM,
    AlertSnapshot,
    BatchSnapshot,
    EntityRef,
    MovementSnapshot,
    ProductScoped,
    ProductSnapshot,
    StockRecordSnapshot,
)

logger = logging.getLogger(__name__)

# Defaults when the product model doesn't carry a field
PRODUCT_DEFAULTS = {
    'min_stock': Decimal('0'),
    'max_stock': None,
    'is_active': True,
}


def _get_product_attr(product, attr: str):
    """Get product attribute with fallback to default."""
    value = getattr(product, attr, None)
    if value is not None:
        return value
    return PRODUCT_DEFAULTS.get(attr)


def _dec(value) -> Decimal | None:
    if value is None or isinstance(value, Decimal):
        return value
    return Decimal(str(value))


class DjangoInventoryStore:
    """
    Inventory store backed by the Django ORM.

    Open-alert uniqueness is enforced by the conditional unique constraint
    on Alert; a violating insert surfaces as AlertConflict.
    """

    def __init__(self, product_model: str | None = None):
        model_path = product_model or stockwatch_settings.PRODUCT_MODEL
        if not model_path:
            raise ImproperlyConfigured(
                "STOCKWATCH['PRODUCT_MODEL'] must be configured. "
                "Example: 'catalog.Product'"
            )
        try:
            self.product_model = apps.get_model(model_path)
        except (LookupError, ValueError) as e:
            raise ImproperlyConfigured(
                f"STOCKWATCH['PRODUCT_MODEL'] refers to '{model_path}', which is not an installed model"
            ) from e

        field_names = {f.name for f in self.product_model._meta.get_fields()}
        self._filter_active = 'is_active' in field_names
        self._content_type: ContentType | None = None

    # ══════════════════════════════════════════════════════════════
    # HELPERS
    # ══════════════════════════════════════════════════════════════

    async def _product_ct(self) -> ContentType:
        if self._content_type is None:
            self._content_type = await sync_to_async(ContentType.objects.get_for_model)(self.product_model)
        return self._content_type

    async def _entity_key(self, entity: EntityRef) -> str:
        if isinstance(entity, ProductScoped):
            ct = await self._product_ct()
            return f"product:{ct.pk}:{entity.product_id}"
        return "system"

    async def _product_names(self, ids) -> dict[int, str]:
        if not ids:
            return {}
        products = await self.product_model._default_manager.ain_bulk(list(ids))
        return {pk: str(_get_product_attr(p, 'name') or p) for pk, p in products.items()}

    @staticmethod
    def _product_snapshot(product) -> ProductSnapshot:
        return ProductSnapshot(
            id=product.pk,
            name=str(_get_product_attr(product, 'name') or product),
            min_stock=_dec(_get_product_attr(product, 'min_stock')),
            max_stock=_dec(_get_product_attr(product, 'max_stock')),
            is_active=bool(_get_product_attr(product, 'is_active')),
        )

    @staticmethod
    def _alert_snapshot(row: Alert) -> AlertSnapshot:
        entity = SYSTEM if row.product_id is None else ProductScoped(row.product_id)
        return AlertSnapshot(
            id=row.pk,
            entity=entity,
            type=row.type,
            severity=row.severity,
            message=row.message,
            is_active=row.is_active,
            is_resolved=row.is_resolved,
            created_at=row.created_at,
            resolved_at=row.resolved_at,
        )

    async def _record_snapshots(self, qs) -> list[StockRecordSnapshot]:
        ct = await self._product_ct()
        rows = [r async for r in qs.filter(product_type=ct).select_related('position')]
        names = await self._product_names({r.product_id for r in rows})
        return [
            StockRecordSnapshot(
                id=r.pk,
                product_id=r.product_id,
                product_name=names.get(r.product_id, str(r.product_id)),
                location=r.position.name if r.position else '-',
                quantity=r.quantity,
                available=r.available,
                reserved=r.reserved,
                status=r.status,
                last_updated=r.last_updated,
            )
            for r in rows
        ]

    # ══════════════════════════════════════════════════════════════
    # PRODUCTS & STOCK
    # ══════════════════════════════════════════════════════════════

    async def list_products(self, active_only: bool = True) -> list[ProductSnapshot]:
        qs = self.product_model._default_manager.order_by('pk')
        if active_only and self._filter_active:
            qs = qs.filter(is_active=True)
        return [self._product_snapshot(p) async for p in qs]

    async def get_product(self, product_id: int) -> ProductSnapshot | None:
        product = await self.product_model._default_manager.filter(pk=product_id).afirst()
        return self._product_snapshot(product) if product else None

    async def total_quantity(self, product_id: int) -> Decimal:
        ct = await self._product_ct()
        result = await StockRecord.objects.filter(
            product_type=ct, product_id=product_id,
        ).aaggregate(t=Coalesce(Sum('quantity'), Decimal('0')))
        return result['t']

    async def update_stock_status(self, product_id: int, status: str, at: datetime) -> int:
        ct = await self._product_ct()
        return await StockRecord.objects.filter(
            product_type=ct, product_id=product_id,
        ).aupdate(status=status, last_updated=at)

    async def find_negative_records(self) -> list[StockRecordSnapshot]:
        return await self._record_snapshots(StockRecord.objects.negative())

    async def find_over_reserved_records(self) -> list[StockRecordSnapshot]:
        return await self._record_snapshots(StockRecord.objects.over_reserved())

    async def list_expiring_batches(self, until: date) -> list[BatchSnapshot]:
        ct = await self._product_ct()
        rows = [b async for b in Batch.objects.filter(product_type=ct).expiring_before(until)]
        names = await self._product_names({b.product_id for b in rows})
        return [
            BatchSnapshot(
                id=b.pk,
                code=b.code,
                product_id=b.product_id,
                product_name=names.get(b.product_id, str(b.product_id)),
                quantity=b.quantity,
                expiry_date=b.expiry_date,
                production_date=b.production_date,
            )
            for b in rows
        ]

    # ══════════════════════════════════════════════════════════════
    # ALERTS
    # ══════════════════════════════════════════════════════════════

    async def find_open_alert(self, entity: EntityRef, alert_type: str) -> AlertSnapshot | None:
        key = await self._entity_key(entity)
        row = await Alert.objects.open().for_key(key, alert_type).afirst()
        return self._alert_snapshot(row) if row else None

    async def create_alert(self, entity: EntityRef, alert_type: str, severity: str,
                           message: str, created_at: datetime) -> AlertSnapshot:
        fields = {
            'entity_key': await self._entity_key(entity),
            'type': alert_type,
            'severity': severity,
            'message': message,
            'created_at': created_at,
        }
        if isinstance(entity, ProductScoped):
            fields['product_type'] = await self._product_ct()
            fields['product_id'] = entity.product_id

        try:
            row = await sync_to_async(self._insert_alert)(fields)
        except IntegrityError as e:
            raise AlertConflict(fields['entity_key'], alert_type) from e
        return self._alert_snapshot(row)

    @staticmethod
    def _insert_alert(fields: dict) -> Alert:
        # Savepoint: a constraint violation must not poison the caller's transaction
        with transaction.atomic():
            return Alert.objects.create(**fields)

    async def alert_created_since(self, entity: EntityRef, alert_type: str, since: datetime) -> bool:
        key = await self._entity_key(entity)
        return await Alert.objects.for_key(key, alert_type).filter(created_at__gte=since).aexists()

    async def get_alert(self, alert_id: int) -> AlertSnapshot | None:
        row = await Alert.objects.filter(pk=alert_id).afirst()
        return self._alert_snapshot(row) if row else None

    async def resolve_alert(self, alert_id: int, at: datetime) -> bool:
        updated = await Alert.objects.filter(pk=alert_id, is_resolved=False).aupdate(
            is_active=False, is_resolved=True, resolved_at=at,
        )
        return updated > 0

    async def resolve_open_alerts(self, at: datetime, created_before: datetime | None = None,
                                  entity: EntityRef | None = None, alert_type: str | None = None) -> int:
        qs = Alert.objects.open()
        if created_before is not None:
            qs = qs.filter(created_at__lt=created_before)
        if entity is not None:
            qs = qs.filter(entity_key=await self._entity_key(entity))
        if alert_type is not None:
            qs = qs.filter(type=alert_type)
        return await qs.aupdate(is_active=False, is_resolved=True, resolved_at=at)

    # ══════════════════════════════════════════════════════════════
    # HISTORY
    # ══════════════════════════════════════════════════════════════

    async def units_sold(self, product_id: int, since: datetime) -> Decimal:
        ct = await self._product_ct()
        result = await StockMovement.objects.filter(
            product_type=ct,
            product_id=product_id,
            kind=MovementKind.OUT,
            is_sale=True,
            timestamp__gte=since,
        ).aaggregate(t=Coalesce(Sum(Abs('delta')), Decimal('0')))
        return result['t']

    async def list_movements(self, since: datetime, until: datetime) -> list[MovementSnapshot]:
        ct = await self._product_ct()
        rows = [
            m async for m in StockMovement.objects.filter(
                product_type=ct, timestamp__gte=since, timestamp__lt=until,
            ).select_related('position')
        ]
        names = await self._product_names({m.product_id for m in rows})
        logger.debug("Loaded %s movements between %s and %s", len(rows), since, until)
        return [
            MovementSnapshot(
                id=m.pk,
                product_id=m.product_id,
                product_name=names.get(m.product_id, str(m.product_id)),
                location=m.position.name if m.position else '-',
                kind=m.kind,
                delta=m.delta,
                timestamp=m.timestamp,
                is_sale=m.is_sale,
            )
            for m in rows
        ]
