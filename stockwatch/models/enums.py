"""
Enums for Stockwatch models.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class StockStatus(models.TextChoices):
    """
    Derived status of a stock record.

    Written only by the reconciler, from the product's aggregate quantity.
    EXPIRED and RESERVED are set by the host application, never computed here.
    """
    IN_STOCK = 'IN_STOCK', _('Em estoque')
    LOW_STOCK = 'LOW_STOCK', _('Estoque baixo')
    OUT_OF_STOCK = 'OUT_OF_STOCK', _('Sem estoque')
    EXPIRED = 'EXPIRED', _('Vencido')
    RESERVED = 'RESERVED', _('Reservado')


class AlertType(models.TextChoices):
    """What an alert is about. Part of the dedup key."""
    LOW_STOCK = 'LOW_STOCK', _('Estoque baixo')
    EXPIRY = 'EXPIRY', _('Validade')
    REORDER = 'REORDER', _('Reposição')
    NEGATIVE_STOCK = 'NEGATIVE_STOCK', _('Estoque negativo')
    OVER_RESERVED = 'OVER_RESERVED', _('Reserva excedente')
    DAILY_SUMMARY = 'DAILY_SUMMARY', _('Resumo diário')


class Severity(models.TextChoices):
    """Alert severity."""
    LOW = 'low', _('Baixa')
    MEDIUM = 'medium', _('Média')
    HIGH = 'high', _('Alta')


class MovementKind(models.TextChoices):
    """Kind of stock movement."""
    IN = 'in', _('Entrada')
    OUT = 'out', _('Saída')
    ADJUSTMENT = 'adjustment', _('Ajuste')
