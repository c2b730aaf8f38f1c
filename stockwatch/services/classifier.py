"""
Threshold classification for aggregate stock quantities.

Maps a product's aggregate quantity and minimum stock to a StockStatus.

Examples:
    classify(0, 10)   → OUT_OF_STOCK
    classify(-3, 10)  → OUT_OF_STOCK  (negative stock is flagged separately)
    classify(10, 10)  → LOW_STOCK
    classify(11, 10)  → IN_STOCK
"""

from decimal import Decimal

from stockwatch.models.enums import StockStatus


def classify(quantity: Decimal | int, min_stock: Decimal | int) -> StockStatus:
    """
    Classify an aggregate quantity against the product's minimum.

    Args:
        quantity: Sum of quantity across all stock records
        min_stock: Product minimum stock (>= 0)

    Returns:
        OUT_OF_STOCK if quantity <= 0,
        LOW_STOCK if 0 < quantity <= min_stock,
        IN_STOCK otherwise
    """
    if quantity <= 0:
        return StockStatus.OUT_OF_STOCK
    if quantity <= min_stock:
        return StockStatus.LOW_STOCK
    return StockStatus.IN_STOCK
