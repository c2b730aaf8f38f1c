"""
Tests for the Automation facade.
"""

from datetime import timedelta

import pytest
from django.test import override_settings
from django.utils import timezone

from stockwatch.exceptions import StockwatchError
from stockwatch.models import AlertType, MovementKind, StockStatus
from stockwatch.protocols.store import SYSTEM, ProductScoped


pytestmark = pytest.mark.asyncio


class TestRunStockAutomation:
    """Tests for Automation.run_stock_automation()."""

    async def test_comprehensive_sweep(self, store, automation, croissant, today):
        store.add_stock_record(croissant.id, -5, available=0)
        store.add_batch(croissant.id, today + timedelta(days=2))
        store.add_movement(croissant.id, MovementKind.OUT, -5, is_sale=True)

        results = await automation.run_stock_automation()

        assert set(results) == {'stock_status', 'expiry', 'reorder', 'discrepancies', 'daily_report'}
        assert all(result is not None for result in results.values())
        entity = ProductScoped(croissant.id)
        assert {a.type for a in store.open_alerts(entity)} == {
            AlertType.LOW_STOCK, AlertType.EXPIRY, AlertType.REORDER, AlertType.NEGATIVE_STOCK,
        }
        assert len(store.open_alerts(SYSTEM, AlertType.DAILY_SUMMARY)) == 1

    async def test_negative_total_raises_out_of_stock_and_discrepancy(self, store, automation, croissant):
        store.add_stock_record(croissant.id, -5, available=0)

        await automation.run_stock_automation()

        [low] = store.open_alerts(ProductScoped(croissant.id), AlertType.LOW_STOCK)
        assert low.message == 'Out of stock alert: Croissant is out of stock'
        assert len(store.open_alerts(ProductScoped(croissant.id), AlertType.NEGATIVE_STOCK)) == 1

    async def test_failing_step_is_contained(self, store, automation, croissant, tomorrow):
        store.add_stock_record(croissant.id, 3)
        store.add_batch(croissant.id, tomorrow)

        async def broken(*args, **kwargs):
            raise RuntimeError('database unavailable')

        store.find_negative_records = broken

        results = await automation.run_stock_automation()

        assert results['discrepancies'] is None
        assert results['stock_status'] is not None
        assert results['daily_report'] is not None
        assert len(store.open_alerts(ProductScoped(croissant.id), AlertType.EXPIRY)) == 1


class TestSweep:
    """Tests for Automation.sweep()."""

    async def test_returns_results_when_all_steps_succeed(self, store, automation, croissant):
        store.add_stock_record(croissant.id, 80)

        results = await automation.sweep()

        assert results['stock_status'].ok

    async def test_raises_on_failed_step(self, store, automation, croissant):
        async def broken(*args, **kwargs):
            raise RuntimeError('database unavailable')

        store.find_negative_records = broken

        with pytest.raises(StockwatchError) as exc:
            await automation.sweep()

        assert exc.value.code == 'SWEEP_FAILED'
        assert exc.value.data == {'steps': ['discrepancies']}

    async def test_raises_on_partially_processed_step(self, store, automation, croissant, baguete):
        original = store.total_quantity

        async def flaky_total(product_id):
            if product_id == baguete.id:
                raise RuntimeError('database unavailable')
            return await original(product_id)

        store.total_quantity = flaky_total

        with pytest.raises(StockwatchError) as exc:
            await automation.sweep()

        assert 'stock_status' in exc.value.data['steps']


class TestOperations:
    """Tests for the individual Automation operations."""

    async def test_update_all_stock_statuses(self, store, automation, croissant):
        record = store.add_stock_record(croissant.id, 3)

        result = await automation.update_all_stock_statuses()

        assert result.processed == 1
        assert store.records[record.id].status == StockStatus.LOW_STOCK

    async def test_refresh_product(self, store, automation, croissant):
        store.add_stock_record(croissant.id, 0)

        assert await automation.refresh_product(croissant.id) == StockStatus.OUT_OF_STOCK

    async def test_refresh_unknown_product_returns_none(self, automation):
        assert await automation.refresh_product(404) is None

    async def test_check_expiring_batches_uses_configured_horizon(self, store, automation, croissant, today):
        store.add_batch(croissant.id, today + timedelta(days=10))

        with override_settings(STOCKWATCH={'EXPIRY_HORIZON_DAYS': 7}):
            result = await automation.check_expiring_batches()

        assert result.processed == 0

    async def test_check_expiring_batches_explicit_horizon(self, store, automation, croissant, today):
        store.add_batch(croissant.id, today + timedelta(days=10))

        result = await automation.check_expiring_batches(horizon_days=10)

        assert result.alerts_created == 1

    async def test_optimize_stock_levels(self, store, automation, croissant):
        store.add_movement(croissant.id, MovementKind.OUT, -210, is_sale=True)

        [advice] = await automation.optimize_stock_levels()

        assert advice.suggested_min_stock == 49

    async def test_auto_resolve_expired_alerts(self, store, automation):
        store.add_alert(ProductScoped(1), AlertType.LOW_STOCK, created_at=timezone.now() - timedelta(days=31))
        store.add_alert(ProductScoped(2), AlertType.LOW_STOCK)

        assert await automation.auto_resolve_expired_alerts() == 1

    async def test_resolve_alert(self, store, automation):
        alert = store.add_alert(ProductScoped(1), AlertType.EXPIRY)

        assert await automation.resolve_alert(alert.id) is True
        assert await automation.resolve_alert(alert.id) is False

    async def test_generate_daily_report(self, automation):
        summary = await automation.generate_daily_report()

        assert summary.alert_created
