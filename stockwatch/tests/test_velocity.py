"""
Tests for safety-stock advice from sales velocity.
"""

from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from stockwatch.models import AlertType, MovementKind, Severity
from stockwatch.protocols.store import ProductScoped
from stockwatch.services.velocity import SafetyStockAdvisor, outside_tolerance, suggest_min_stock


@pytest.fixture
def advisor(store, alerts):
    return SafetyStockAdvisor(store, alerts, window_days=30, cover_days=7, tolerance=0.2)


class TestSuggestMinStock:
    """Tests for suggest_min_stock() and outside_tolerance()."""

    def test_seven_days_of_cover(self):
        assert suggest_min_stock(Decimal('210'), 30, 7) == 49

    def test_rounds_up(self):
        assert suggest_min_stock(Decimal('10'), 30, 7) == 3

    def test_no_sales(self):
        assert suggest_min_stock(Decimal('0'), 30, 7) == 0

    def test_tolerance_band(self):
        tolerance = Decimal('0.2')
        assert not outside_tolerance(12, Decimal('10'), tolerance)
        assert outside_tolerance(13, Decimal('10'), tolerance)
        assert outside_tolerance(7, Decimal('10'), tolerance)


@pytest.mark.asyncio
class TestSafetyStockAdvisor:
    """Tests for SafetyStockAdvisor.run()."""

    async def test_suggests_new_min(self, store, advisor, croissant):
        store.add_movement(croissant.id, MovementKind.OUT, -210, is_sale=True,
                           timestamp=timezone.now() - timedelta(days=3))

        [advice] = await advisor.run()

        assert advice.suggested_min_stock == 49
        assert advice.units_sold == Decimal('210')
        assert advice.alert_created
        [alert] = store.open_alerts(ProductScoped(croissant.id), AlertType.REORDER)
        assert alert.severity == Severity.LOW
        assert alert.message == (
            'Stock optimization suggestion: Croissant min stock should be adjusted '
            'from 10 to 49 based on 30-day sales velocity'
        )

    async def test_min_stock_is_never_changed(self, store, advisor, croissant):
        store.add_movement(croissant.id, MovementKind.OUT, -210, is_sale=True)

        await advisor.run()

        assert store.products[croissant.id].min_stock == Decimal('10')

    async def test_within_tolerance_no_advice(self, store, advisor, croissant):
        # 45 sold → 1.5/day → ceil(10.5) = 11, within 20% of 10
        store.add_movement(croissant.id, MovementKind.OUT, -45, is_sale=True)

        assert await advisor.run() == []
        assert store.alerts == []

    async def test_only_sales_in_window_count(self, store, advisor, croissant):
        store.add_movement(croissant.id, MovementKind.OUT, -45, is_sale=True)
        store.add_movement(croissant.id, MovementKind.OUT, -500, is_sale=True,
                           timestamp=timezone.now() - timedelta(days=40))
        store.add_movement(croissant.id, MovementKind.OUT, -500, is_sale=False)
        store.add_movement(croissant.id, MovementKind.IN, 500)

        assert await advisor.run() == []

    async def test_existing_reorder_alert_suppresses_advisory(self, store, advisor, croissant):
        store.add_alert(ProductScoped(croissant.id), AlertType.REORDER, Severity.HIGH, 'reposição')
        store.add_movement(croissant.id, MovementKind.OUT, -210, is_sale=True)

        [advice] = await advisor.run()

        assert not advice.alert_created
        assert len(store.alerts) == 1
