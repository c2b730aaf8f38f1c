"""
Batch model — lot tracking for products with expiry.

Usage:
    batch = Batch.objects.create(
        code="LOT-2026-0223-A",
        product_type=ct, product_id=product.pk,
        quantity=50,
        production_date=date.today(),
        expiry_date=date.today() + timedelta(days=3),
    )
"""

from decimal import Decimal

from django.contrib.contenttypes.fields import GenericForeignKey
from django.contrib.contenttypes.models import ContentType
from django.db import models
from django.utils.translation import gettext_lazy as _


class BatchQuerySet(models.QuerySet):
    """Custom QuerySet for Batch with convenience filters."""

    def expiring_before(self, day):
        """Batches expiring on or before the given date."""
        return self.filter(expiry_date__lte=day, expiry_date__isnull=False)


class Batch(models.Model):
    """
    Production lot of a product, optionally with an expiry date.

    The expiry scanner raises one EXPIRY alert per product for batches
    expiring within the configured horizon.
    """

    code = models.CharField(
        max_length=50,
        unique=True,
        verbose_name=_('Código do Lote'),
    )

    # Product reference (generic, any product model)
    product_type = models.ForeignKey(
        ContentType,
        on_delete=models.CASCADE,
        related_name='+',
        verbose_name=_('Tipo de Produto'),
    )
    product_id = models.PositiveIntegerField(verbose_name=_('ID do Produto'))
    product = GenericForeignKey('product_type', 'product_id')

    quantity = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        default=Decimal('0'),
        verbose_name=_('Quantidade'),
    )

    production_date = models.DateField(
        null=True,
        blank=True,
        verbose_name=_('Data de Produção'),
    )
    expiry_date = models.DateField(
        null=True,
        blank=True,
        db_index=True,
        verbose_name=_('Data de Validade'),
        help_text=_('Último dia em que o lote pode ser vendido/utilizado'),
    )

    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_('Criado em'))

    objects = BatchQuerySet.as_manager()

    class Meta:
        verbose_name = _('Lote')
        verbose_name_plural = _('Lotes')
        ordering = ['expiry_date', 'production_date']
        indexes = [
            models.Index(fields=['product_type', 'product_id'], name='stockwatch_batch_product_idx'),
        ]

    def __str__(self) -> str:
        expiry = f" (val:{self.expiry_date})" if self.expiry_date else ""
        return f"Lote {self.code}{expiry}"
