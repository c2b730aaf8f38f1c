"""
Stockwatch services — one module per check, all running against an
InventoryStore and sharing an AlertManager:
    from stockwatch.services import StockStatusReconciler, ExpiryScanner, ...
"""

from stockwatch.services.alerts import AlertManager
from stockwatch.services.discrepancies import DiscrepancyDetector
from stockwatch.services.expiry import ExpiryScanner
from stockwatch.services.reconciler import StockStatusReconciler
from stockwatch.services.reorder import ReorderDetector
from stockwatch.services.reports import DailyReport
from stockwatch.services.velocity import SafetyStockAdvisor

__all__ = [
    'AlertManager',
    'StockStatusReconciler',
    'ExpiryScanner',
    'ReorderDetector',
    'DiscrepancyDetector',
    'SafetyStockAdvisor',
    'DailyReport',
]
