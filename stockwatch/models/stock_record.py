"""
StockRecord model — Location-scoped inventory row for one product.
"""

from decimal import Decimal

from django.contrib.contenttypes.fields import GenericForeignKey
from django.contrib.contenttypes.models import ContentType
from django.db import models
from django.db.models import F, Q
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from stockwatch.models.enums import StockStatus


class StockRecordQuerySet(models.QuerySet):
    """Custom QuerySet for StockRecord with discrepancy filters."""

    def negative(self):
        """Records with negative quantity or negative availability."""
        return self.filter(Q(quantity__lt=0) | Q(available__lt=0))

    def over_reserved(self):
        """Records with more reserved than available."""
        return self.filter(reserved__gt=F('available'))


class StockRecord(models.Model):
    """
    Quantity of a product at a position.

    Quantities are owned by the host application's inventory code.
    Stockwatch only reads them and writes ``status``/``last_updated``,
    which always reflect the product's aggregate across all positions.
    """

    # Generic reference to product (agnostic)
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
        related_name='records',
        verbose_name=_('Posição'),
    )
    batch = models.ForeignKey(
        'stockwatch.Batch',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='records',
        verbose_name=_('Lote'),
    )

    quantity = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        default=Decimal('0'),
        verbose_name=_('Quantidade'),
    )
    available = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        default=Decimal('0'),
        verbose_name=_('Disponível'),
    )
    reserved = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        default=Decimal('0'),
        verbose_name=_('Reservado'),
    )

    status = models.CharField(
        max_length=20,
        choices=StockStatus.choices,
        default=StockStatus.IN_STOCK,
        db_index=True,
        verbose_name=_('Status'),
    )
    last_updated = models.DateTimeField(default=timezone.now, verbose_name=_('Atualizado em'))

    objects = StockRecordQuerySet.as_manager()

    class Meta:
        verbose_name = _('Registro de Estoque')
        verbose_name_plural = _('Registros de Estoque')
        indexes = [
            models.Index(fields=['product_type', 'product_id'], name='stockwatch_record_product_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.product_type_id}:{self.product_id} @ {self.position_id}: {self.quantity} ({self.status})"
