"""
Stockwatch Protocols.

Defines the storage interface the engine runs against.
"""

from stockwatch.protocols.store import (
    SYSTEM,
    AlertSnapshot,
    BatchSnapshot,
    EntityRef,
    InventoryStore,
    MovementSnapshot,
    ProductScoped,
    ProductSnapshot,
    StockRecordSnapshot,
    SystemScoped,
)

__all__ = [
    "SYSTEM",
    "AlertSnapshot",
    "BatchSnapshot",
    "EntityRef",
    "InventoryStore",
    "MovementSnapshot",
    "ProductScoped",
    "ProductSnapshot",
    "StockRecordSnapshot",
    "SystemScoped",
]
