"""
Alert lifecycle — deduplicated creation and resolution.

Usage:
    from stockwatch.services.alerts import AlertManager

    alerts = AlertManager(store)
    await alerts.ensure_alert(ProductScoped(42), AlertType.LOW_STOCK, Severity.MEDIUM, "…")
    await alerts.resolve(alert_id)
    await alerts.auto_expire(max_age_days=30)

Dedup rule: at most one open alert per (entity, type). The first trigger
wins; later triggers for the same key are dropped while it stays open,
whatever their message or severity.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime, time, timedelta

from django.utils import timezone

from stockwatch.exceptions import AlertConflict
from stockwatch.protocols.store import AlertSnapshot, EntityRef, InventoryStore

logger = logging.getLogger('stockwatch')


class AlertManager:
    """
    Creates and resolves alerts through an InventoryStore.

    Checks for an open alert and inserts under a per-key asyncio.Lock, so
    overlapping sweeps in this process cannot both insert. Across processes,
    the store's uniqueness guard rejects the second insert with
    AlertConflict, which is treated as "already exists".
    """

    def __init__(self, store: InventoryStore):
        self.store = store
        # key → [lock, number of holders and waiters]
        self._locks: dict[tuple, list] = {}

    @asynccontextmanager
    async def _locked(self, entity: EntityRef, alert_type: str):
        key = (entity, str(alert_type))
        entry = self._locks.get(key)
        if entry is None:
            entry = self._locks[key] = [asyncio.Lock(), 0]
        entry[1] += 1
        try:
            async with entry[0]:
                yield
        finally:
            entry[1] -= 1
            if entry[1] == 0:
                del self._locks[key]

    async def ensure_alert(self, entity: EntityRef, alert_type: str, severity: str,
                           message: str) -> AlertSnapshot | None:
        """
        Create an alert unless one is already open for (entity, type).

        Returns:
            The new alert, or None if suppressed
        """
        async with self._locked(entity, alert_type):
            existing = await self.store.find_open_alert(entity, alert_type)
            if existing is not None:
                logger.debug(
                    "stockwatch.alert.suppressed",
                    extra={"entity": str(entity), "type": str(alert_type), "open_alert_id": existing.id},
                )
                return None

            try:
                alert = await self.store.create_alert(
                    entity, alert_type, severity, message, timezone.now(),
                )
            except AlertConflict:
                logger.info(
                    "stockwatch.alert.conflict",
                    extra={"entity": str(entity), "type": str(alert_type)},
                )
                return None

        logger.warning(
            "stockwatch.alert.created",
            extra={
                "alert_id": alert.id,
                "entity": str(entity),
                "type": str(alert_type),
                "severity": str(severity),
            },
        )
        return alert

    async def ensure_daily_alert(self, entity: EntityRef, alert_type: str, severity: str,
                                 message: str) -> AlertSnapshot | None:
        """
        Create at most one alert per (entity, type) per calendar day.

        Open alerts for the key from earlier days are superseded (resolved)
        first, so the newest one is the only open alert.

        Returns:
            The new alert, or None if one was already created today
        """
        now = timezone.now()
        start_of_day = self._start_of_day(now)

        async with self._locked(entity, alert_type):
            if await self.store.alert_created_since(entity, alert_type, start_of_day):
                return None
            superseded = await self.store.resolve_open_alerts(
                now, created_before=start_of_day, entity=entity, alert_type=alert_type,
            )
            try:
                alert = await self.store.create_alert(entity, alert_type, severity, message, now)
            except AlertConflict:
                return None

        logger.info(
            "stockwatch.alert.daily_created",
            extra={"alert_id": alert.id, "entity": str(entity), "type": str(alert_type), "superseded": superseded},
        )
        return alert

    async def resolve(self, alert_id: int) -> bool:
        """
        Resolve an alert. Idempotent: an already-resolved alert is left as is.

        Returns:
            True if the alert changed
        """
        changed = await self.store.resolve_alert(alert_id, timezone.now())
        if changed:
            logger.info("stockwatch.alert.resolved", extra={"alert_id": alert_id})
        return changed

    async def auto_expire(self, max_age_days: int) -> int:
        """
        Resolve every open alert older than ``max_age_days``.

        Returns:
            Number of alerts resolved
        """
        now = timezone.now()
        count = await self.store.resolve_open_alerts(
            now, created_before=now - timedelta(days=max_age_days),
        )
        logger.info(
            "stockwatch.alerts.auto_expired",
            extra={"resolved": count, "max_age_days": max_age_days},
        )
        return count

    @staticmethod
    def _start_of_day(now: datetime) -> datetime:
        if timezone.is_aware(now):
            local = timezone.localtime(now)
            return local.replace(hour=0, minute=0, second=0, microsecond=0)
        return datetime.combine(now.date(), time.min)
