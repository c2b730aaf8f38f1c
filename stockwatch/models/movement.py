"""
StockMovement model — Immutable log of quantity changes.
"""

from django.contrib.contenttypes.fields import GenericForeignKey
from django.contrib.contenttypes.models import ContentType
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from stockwatch.models.enums import MovementKind


class StockMovement(models.Model):
    """
    Immutable record of a quantity change, written by the host application.

    Rules:
    - NEVER update() or delete()
    - Corrections are new movements with inverse delta

    Stockwatch reads movements for the daily summary and for sales
    velocity (outgoing movements flagged ``is_sale``). It never writes them.
    """

    product_type = models.ForeignKey(
        ContentType,
        on_delete=models.PROTECT,
        related_name='+',
        verbose_name=_('Tipo de Produto'),
    )
    product_id = models.PositiveIntegerField(verbose_name=_('ID do Produto'))
    product = GenericForeignKey('product_type', 'product_id')

    position = models.ForeignKey(
        'stockwatch.Position',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='movements',
        verbose_name=_('Posição'),
    )

    kind = models.CharField(
        max_length=20,
        choices=MovementKind.choices,
        verbose_name=_('Tipo'),
    )
    delta = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        verbose_name=_('Variação'),
        help_text=_('Positivo = entrada, Negativo = saída'),
    )
    is_sale = models.BooleanField(
        default=False,
        verbose_name=_('Venda'),
        help_text=_('Saída por venda (entra no cálculo de giro)'),
    )
    reason = models.CharField(
        max_length=255,
        blank=True,
        default='',
        verbose_name=_('Motivo'),
        help_text=_('Ex: "Venda #123", "Inventário mensal"'),
    )

    timestamp = models.DateTimeField(default=timezone.now, db_index=True, verbose_name=_('Data/Hora'))

    class Meta:
        verbose_name = _('Movimento')
        verbose_name_plural = _('Movimentos')
        ordering = ['timestamp']
        indexes = [
            models.Index(fields=['product_type', 'product_id', 'timestamp'], name='stockwatch_move_product_ts_idx'),
        ]

    def save(self, *args, **kwargs):
        if self.pk:
            raise ValueError(
                "Movimentos são imutáveis. "
                "Para corrigir, crie um novo movimento com delta inverso."
            )
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        """Prevent deletion — movements are immutable."""
        raise ValueError(
            "Movimentos são imutáveis. "
            "Para estornar, crie um novo movimento com delta inverso."
        )

    def __str__(self) -> str:
        signal = '+' if self.delta > 0 else ''
        return f"{signal}{self.delta} | {self.kind} {self.reason}".rstrip()
