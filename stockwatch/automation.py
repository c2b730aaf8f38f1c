"""
Automation — The single public interface for reconciliation and alerting.

Usage:
    from stockwatch.automation import Automation

    automation = Automation()            # uses the configured store
    await automation.run_stock_automation()
    await automation.update_all_stock_statuses()
    await automation.check_expiring_batches()

Every public method contains its own errors: a failure is logged and the
method returns None instead of raising, so callers on a timer or behind an
HTTP handler never crash because of a storage problem. sweep() is the one
exception: it raises when any step failed, for the scheduler to report.
"""

import logging

from stockwatch.adapters import get_store
from stockwatch.conf import stockwatch_settings
from stockwatch.exceptions import StockwatchError
from stockwatch.protocols.store import InventoryStore
from stockwatch.services.alerts import AlertManager
from stockwatch.services.base import SweepResult
from stockwatch.services.discrepancies import DiscrepancyDetector
from stockwatch.services.expiry import ExpiryScanner
from stockwatch.services.reconciler import StockStatusReconciler
from stockwatch.services.reorder import ReorderDetector
from stockwatch.services.reports import DailyReport
from stockwatch.services.velocity import SafetyStockAdvisor

logger = logging.getLogger('stockwatch')


class Automation:
    """
    Facade over the reconciliation services, sharing one store and one
    AlertManager (and therefore one set of dedup locks).
    """

    def __init__(self, store: InventoryStore | None = None):
        self.store = store if store is not None else get_store()
        self.alerts = AlertManager(self.store)
        self.reconciler = StockStatusReconciler(self.store, self.alerts)
        self.expiry = ExpiryScanner(self.store, self.alerts)
        self.reorder = ReorderDetector(
            self.store, self.alerts, ratio=stockwatch_settings.REORDER_POINT_RATIO,
        )
        self.discrepancies = DiscrepancyDetector(self.store, self.alerts)
        self.advisor = SafetyStockAdvisor(
            self.store,
            self.alerts,
            window_days=stockwatch_settings.VELOCITY_WINDOW_DAYS,
            cover_days=stockwatch_settings.COVER_DAYS,
            tolerance=stockwatch_settings.VELOCITY_TOLERANCE,
        )
        self.report = DailyReport(self.store, self.alerts)

    async def _contained(self, operation: str, func, *args):
        try:
            return await func(*args)
        except Exception:
            logger.exception("stockwatch.%s.failed", operation)
            return None

    # ══════════════════════════════════════════════════════════════
    # SWEEPS
    # ══════════════════════════════════════════════════════════════

    async def run_stock_automation(self) -> dict:
        """
        Comprehensive sweep: statuses, expiry, reorder points,
        discrepancies, daily summary. Each step is isolated.

        Returns:
            Dict of step name → step result (None for a failed step)
        """
        logger.info("Running comprehensive stock automation...")
        results = {
            'stock_status': await self.update_all_stock_statuses(),
            'expiry': await self.check_expiring_batches(),
            'reorder': await self.check_reorder_points(),
            'discrepancies': await self.check_stock_discrepancies(),
            'daily_report': await self.generate_daily_report(),
        }
        failed = [name for name, result in results.items() if result is None]
        if failed:
            logger.warning("stockwatch.automation.partial", extra={"failed_steps": failed})
        else:
            logger.info("Stock automation completed successfully")
        return results

    async def sweep(self) -> dict:
        """
        run_stock_automation() for callers that must see failures
        (the scheduler's task boundary).

        Raises:
            StockwatchError: SWEEP_FAILED if any step failed or left
            entities unprocessed
        """
        results = await self.run_stock_automation()
        failed = [
            name for name, result in results.items()
            if result is None or (isinstance(result, SweepResult) and not result.ok)
        ]
        if failed:
            raise StockwatchError('SWEEP_FAILED', steps=failed)
        return results

    async def update_all_stock_statuses(self):
        return await self._contained('reconcile', self.reconciler.run)

    async def refresh_product(self, product_id: int):
        """Reconcile one product. Returns its new StockStatus, or None on failure."""
        return await self._contained('refresh_product', self.reconciler.reconcile_product, product_id)

    async def check_expiring_batches(self, horizon_days: int | None = None):
        if horizon_days is None:
            horizon_days = stockwatch_settings.EXPIRY_HORIZON_DAYS
        return await self._contained('expiry', self.expiry.scan, horizon_days)

    async def check_reorder_points(self):
        return await self._contained('reorder', self.reorder.run)

    async def check_stock_discrepancies(self):
        return await self._contained('discrepancies', self.discrepancies.run)

    async def optimize_stock_levels(self):
        logger.info("Running stock level optimization...")
        return await self._contained('velocity', self.advisor.run)

    async def generate_daily_report(self):
        return await self._contained('daily_report', self.report.generate)

    # ══════════════════════════════════════════════════════════════
    # ALERT HYGIENE
    # ══════════════════════════════════════════════════════════════

    async def auto_resolve_expired_alerts(self, max_age_days: int | None = None):
        if max_age_days is None:
            max_age_days = stockwatch_settings.ALERT_MAX_AGE_DAYS
        return await self._contained('auto_resolve', self.alerts.auto_expire, max_age_days)

    async def resolve_alert(self, alert_id: int):
        return await self._contained('resolve_alert', self.alerts.resolve, alert_id)
