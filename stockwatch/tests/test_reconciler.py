"""
Tests for stock status reconciliation.
"""

import pytest

from stockwatch.exceptions import StockwatchError
from stockwatch.models import AlertType, Severity, StockStatus
from stockwatch.protocols.store import ProductScoped
from stockwatch.services.reconciler import StockStatusReconciler


pytestmark = pytest.mark.asyncio


@pytest.fixture
def reconciler(store, alerts):
    return StockStatusReconciler(store, alerts)


class TestRun:
    """Tests for StockStatusReconciler.run()."""

    async def test_in_stock_no_alert(self, store, reconciler, croissant):
        record = store.add_stock_record(croissant.id, 50)

        result = await reconciler.run()

        assert result.processed == 1
        assert result.alerts_created == 0
        assert store.records[record.id].status == StockStatus.IN_STOCK
        assert store.records[record.id].last_updated is not None
        assert store.alerts == []

    async def test_low_stock_medium_alert(self, store, reconciler, croissant):
        store.add_stock_record(croissant.id, 4, location='Loja Centro')
        store.add_stock_record(croissant.id, 4, location='Depósito')

        await reconciler.run()

        assert all(r.status == StockStatus.LOW_STOCK for r in store.records.values())
        [alert] = store.open_alerts(ProductScoped(croissant.id), AlertType.LOW_STOCK)
        assert alert.severity == Severity.MEDIUM
        assert alert.message == 'Low stock alert: Croissant (8 remaining, min: 10)'

    async def test_out_of_stock_high_alert(self, store, reconciler, croissant):
        store.add_stock_record(croissant.id, 0)

        await reconciler.run()

        [alert] = store.open_alerts(ProductScoped(croissant.id), AlertType.LOW_STOCK)
        assert alert.severity == Severity.HIGH
        assert alert.message == 'Out of stock alert: Croissant is out of stock'

    async def test_status_uses_aggregate_across_locations(self, store, reconciler, croissant):
        """A location at zero does not make the product out of stock."""
        empty = store.add_stock_record(croissant.id, 0, location='Vitrine')
        store.add_stock_record(croissant.id, 30, location='Depósito')

        await reconciler.run()

        assert store.records[empty.id].status == StockStatus.IN_STOCK

    async def test_product_without_records_is_out_of_stock(self, store, reconciler, croissant):
        await reconciler.run()

        assert len(store.open_alerts(ProductScoped(croissant.id), AlertType.LOW_STOCK)) == 1

    async def test_inactive_products_skipped(self, store, reconciler):
        inactive = store.add_product('Antigo', min_stock=10, is_active=False)
        record = store.add_stock_record(inactive.id, 0, status=StockStatus.IN_STOCK)

        result = await reconciler.run()

        assert result.processed == 0
        assert store.records[record.id].status == StockStatus.IN_STOCK
        assert store.alerts == []

    async def test_idempotent(self, store, reconciler, croissant, baguete):
        store.add_stock_record(croissant.id, 3)
        store.add_stock_record(baguete.id, 0)

        first = await reconciler.run()
        statuses = {r.id: r.status for r in store.records.values()}
        second = await reconciler.run()

        assert first.alerts_created == 2
        assert second.alerts_created == 0
        assert {r.id: r.status for r in store.records.values()} == statuses
        assert len(store.alerts) == 2

    async def test_recovery_keeps_open_alert(self, store, reconciler, croissant):
        """Restocking changes status but alerts are only resolved explicitly."""
        record = store.add_stock_record(croissant.id, 2)
        await reconciler.run()

        store.records[record.id].quantity = 80
        await reconciler.run()

        assert store.records[record.id].status == StockStatus.IN_STOCK
        assert len(store.open_alerts(ProductScoped(croissant.id))) == 1

    async def test_failing_product_does_not_stop_sweep(self, store, reconciler, croissant, baguete):
        store.add_stock_record(croissant.id, 2)
        store.add_stock_record(baguete.id, 1)
        original = store.total_quantity

        async def flaky_total(product_id):
            if product_id == croissant.id:
                raise RuntimeError('database unavailable')
            return await original(product_id)

        store.total_quantity = flaky_total

        result = await reconciler.run()

        assert result.failed == [croissant.id]
        assert not result.ok
        assert result.processed == 1
        assert store.open_alerts(ProductScoped(croissant.id)) == []
        assert len(store.open_alerts(ProductScoped(baguete.id))) == 1


class TestReconcileProduct:
    """Tests for StockStatusReconciler.reconcile_product()."""

    async def test_returns_status(self, store, reconciler, croissant):
        store.add_stock_record(croissant.id, 7)

        assert await reconciler.reconcile_product(croissant.id) == StockStatus.LOW_STOCK

    async def test_unknown_product(self, reconciler):
        with pytest.raises(StockwatchError) as exc:
            await reconciler.reconcile_product(404)

        assert exc.value.code == 'PRODUCT_NOT_FOUND'
        assert exc.value.data == {'product_id': 404}
