"""
Tests for stock discrepancy detection.
"""

import pytest

from stockwatch.models import AlertType, Severity
from stockwatch.protocols.store import ProductScoped
from stockwatch.services.discrepancies import DiscrepancyDetector


pytestmark = pytest.mark.asyncio


@pytest.fixture
def detector(store, alerts):
    return DiscrepancyDetector(store, alerts)


class TestDiscrepancyDetector:
    """Tests for DiscrepancyDetector.run()."""

    async def test_negative_quantity(self, store, detector, croissant):
        record = store.add_stock_record(croissant.id, -5, available=0, location='Vitrine')

        result = await detector.run()

        assert result.alerts_created == 1
        [alert] = store.open_alerts(ProductScoped(croissant.id), AlertType.NEGATIVE_STOCK)
        assert alert.severity == Severity.HIGH
        assert alert.message == 'Negative stock alert: Croissant at Vitrine has negative stock (-5)'
        # Detection only: quantities are untouched
        assert store.records[record.id].quantity == -5

    async def test_negative_available(self, store, detector, croissant):
        store.add_stock_record(croissant.id, 10, available=-2, reserved=0)

        await detector.run()

        [alert] = store.open_alerts(ProductScoped(croissant.id), AlertType.NEGATIVE_STOCK)
        assert 'negative available stock (-2)' in alert.message

    async def test_over_reserved(self, store, detector, croissant):
        record = store.add_stock_record(croissant.id, 25, available=10, reserved=15, location='Depósito')

        await detector.run()

        [alert] = store.open_alerts(ProductScoped(croissant.id), AlertType.OVER_RESERVED)
        assert alert.severity == Severity.HIGH
        assert alert.message == (
            'Over-reserved alert: Croissant at Depósito has more reserved stock (15) than available (10)'
        )
        assert store.records[record.id].reserved == 15

    async def test_both_discrepancies_on_one_record(self, store, detector, croissant):
        store.add_stock_record(croissant.id, -5, available=-5, reserved=3)

        result = await detector.run()

        assert result.alerts_created == 2
        assert {a.type for a in store.open_alerts(ProductScoped(croissant.id))} == {
            AlertType.NEGATIVE_STOCK, AlertType.OVER_RESERVED,
        }

    async def test_healthy_records_ignored(self, store, detector, croissant):
        store.add_stock_record(croissant.id, 20, reserved=5)

        result = await detector.run()

        assert result.processed == 0
        assert store.alerts == []

    async def test_two_bad_locations_one_alert(self, store, detector, croissant):
        store.add_stock_record(croissant.id, -1, available=0, location='Vitrine')
        store.add_stock_record(croissant.id, -2, available=0, location='Depósito')

        result = await detector.run()

        assert result.processed == 2
        assert result.alerts_created == 1
