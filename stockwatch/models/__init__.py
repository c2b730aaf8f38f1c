"""
Stockwatch Models.

Core models for reconciliation and alerting:
- Position: Where stock records live
- StockRecord: Location-scoped quantity row with derived status
- Batch: Lot tracking with expiry
- Alert: Deduplicated alerts
- StockMovement: Immutable quantity change log
"""

from stockwatch.models.alert import Alert
from stockwatch.models.batch import Batch
from stockwatch.models.enums import AlertType, MovementKind, Severity, StockStatus
from stockwatch.models.movement import StockMovement
from stockwatch.models.position import Position
from stockwatch.models.stock_record import StockRecord

__all__ = [
    'StockStatus',
    'AlertType',
    'Severity',
    'MovementKind',
    'Position',
    'StockRecord',
    'Batch',
    'Alert',
    'StockMovement',
]
