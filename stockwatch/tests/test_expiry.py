"""
Tests for expiry scanning.
"""

from datetime import timedelta

import pytest

from stockwatch.models import AlertType, Severity
from stockwatch.protocols.store import ProductScoped
from stockwatch.services.expiry import ExpiryScanner, expiry_severity


@pytest.fixture
def scanner(store, alerts):
    return ExpiryScanner(store, alerts)


class TestExpirySeverity:
    """Tests for expiry_severity()."""

    def test_past_is_high(self, today, yesterday):
        assert expiry_severity(yesterday, today) == Severity.HIGH

    def test_today_is_medium(self, today):
        assert expiry_severity(today, today) == Severity.MEDIUM

    def test_future_is_medium(self, today, tomorrow):
        assert expiry_severity(tomorrow, today) == Severity.MEDIUM


@pytest.mark.asyncio
class TestScan:
    """Tests for ExpiryScanner.scan()."""

    async def test_upcoming_batch_medium(self, store, scanner, croissant, today):
        expiry = today + timedelta(days=5)
        store.add_batch(croissant.id, expiry, code='LOT-A')

        result = await scanner.scan(horizon_days=30)

        assert result.alerts_created == 1
        [alert] = store.open_alerts(ProductScoped(croissant.id), AlertType.EXPIRY)
        assert alert.severity == Severity.MEDIUM
        assert alert.message == f'Expiry alert: Croissant batch LOT-A will expire on {expiry.isoformat()}'

    async def test_expired_batch_high(self, store, scanner, croissant, yesterday):
        store.add_batch(croissant.id, yesterday, code='LOT-B')

        await scanner.scan(horizon_days=30)

        [alert] = store.open_alerts(ProductScoped(croissant.id), AlertType.EXPIRY)
        assert alert.severity == Severity.HIGH
        assert alert.message.startswith('Expired batch alert: Croissant batch LOT-B expired on')

    async def test_outside_horizon_ignored(self, store, scanner, croissant, today):
        store.add_batch(croissant.id, today + timedelta(days=31))

        result = await scanner.scan(horizon_days=30)

        assert result.processed == 0
        assert store.alerts == []

    async def test_horizon_is_inclusive(self, store, scanner, croissant, today):
        store.add_batch(croissant.id, today + timedelta(days=30))

        result = await scanner.scan(horizon_days=30)

        assert result.alerts_created == 1

    async def test_batches_without_expiry_ignored(self, store, scanner, croissant):
        store.add_batch(croissant.id, None)

        result = await scanner.scan(horizon_days=30)

        assert result.processed == 0

    async def test_one_alert_per_product(self, store, scanner, croissant, baguete, today, yesterday):
        """Several expiring batches of one product share a single open alert."""
        store.add_batch(croissant.id, today + timedelta(days=3))
        store.add_batch(croissant.id, today + timedelta(days=10))
        store.add_batch(baguete.id, yesterday)

        result = await scanner.scan(horizon_days=30)

        assert result.processed == 3
        assert result.alerts_created == 2
        assert len(store.open_alerts(ProductScoped(croissant.id), AlertType.EXPIRY)) == 1
        assert len(store.open_alerts(ProductScoped(baguete.id), AlertType.EXPIRY)) == 1

    async def test_open_alert_not_escalated(self, store, scanner, croissant, today, yesterday):
        """A later, already-expired batch does not replace the open medium alert."""
        store.add_batch(croissant.id, today + timedelta(days=3))
        await scanner.scan(horizon_days=30)

        store.add_batch(croissant.id, yesterday)
        await scanner.scan(horizon_days=30)

        [alert] = store.open_alerts(ProductScoped(croissant.id), AlertType.EXPIRY)
        assert alert.severity == Severity.MEDIUM

    async def test_rescan_creates_nothing(self, store, scanner, croissant, tomorrow):
        store.add_batch(croissant.id, tomorrow)

        await scanner.scan(horizon_days=30)
        second = await scanner.scan(horizon_days=30)

        assert second.alerts_created == 0
        assert len(store.alerts) == 1
