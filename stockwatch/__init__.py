"""
Django Stockwatch — inventory reconciliation and alerting engine.

Recomputes stock status, raises deduplicated alerts (low stock, reorder
point, expiry, negative stock, over-reservation) and safety-stock advice,
on independently-cadenced periodic tasks.

Uso:
    from stockwatch import Automation, Scheduler

    automation = Automation()
    await automation.run_stock_automation()

    scheduler = Scheduler(automation)
    scheduler.start()
"""


def __getattr__(name):
    """Lazy import to avoid circular imports during app loading."""
    if name == 'Automation':
        from stockwatch.automation import Automation
        return Automation
    elif name == 'Scheduler':
        from stockwatch.scheduler import Scheduler
        return Scheduler
    elif name == 'StockwatchError':
        from stockwatch.exceptions import StockwatchError
        return StockwatchError
    elif name == 'classify':
        from stockwatch.services.classifier import classify
        return classify
    elif name == 'StockStatus':
        from stockwatch.models.enums import StockStatus
        return StockStatus
    elif name == 'AlertType':
        from stockwatch.models.enums import AlertType
        return AlertType
    elif name == 'Severity':
        from stockwatch.models.enums import Severity
        return Severity
    elif name == 'ProductScoped':
        from stockwatch.protocols.store import ProductScoped
        return ProductScoped
    elif name == 'SYSTEM':
        from stockwatch.protocols.store import SYSTEM
        return SYSTEM
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    'Automation',
    'Scheduler',
    'StockwatchError',
    'classify',
    'StockStatus',
    'AlertType',
    'Severity',
    'ProductScoped',
    'SYSTEM',
]

__version__ = '0.1.0'
