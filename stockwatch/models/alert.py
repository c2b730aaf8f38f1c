"""
Alert model — deduplicated inventory alerts.

At most one open alert (is_active and not is_resolved) exists per
(entity_key, type). The conditional unique constraint enforces it at the
database; the alert manager checks before inserting and treats a constraint
violation as "already exists".

Alerts are never deleted, only resolved.
"""

from django.contrib.contenttypes.fields import GenericForeignKey
from django.contrib.contenttypes.models import ContentType
from django.db import models
from django.db.models import Q
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from stockwatch.models.enums import AlertType, Severity


class AlertQuerySet(models.QuerySet):
    """Custom QuerySet for Alert."""

    def open(self):
        """Alerts still awaiting resolution."""
        return self.filter(is_active=True, is_resolved=False)

    def for_key(self, entity_key: str, alert_type: str):
        return self.filter(entity_key=entity_key, type=alert_type)


class Alert(models.Model):
    """
    Alert about a product, or about the system as a whole.

    ``entity_key`` is derived from the entity reference:
    ``"product:<content_type_id>:<product_id>"`` or ``"system"``.
    System-scoped alerts carry no product reference.
    """

    entity_key = models.CharField(
        max_length=100,
        db_index=True,
        verbose_name=_('Entidade'),
    )

    # Product reference (empty for system alerts)
    product_type = models.ForeignKey(
        ContentType,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Tipo de Produto'),
    )
    product_id = models.PositiveIntegerField(
        null=True,
        blank=True,
        verbose_name=_('ID do Produto'),
    )
    product = GenericForeignKey('product_type', 'product_id')

    type = models.CharField(
        max_length=20,
        choices=AlertType.choices,
        verbose_name=_('Tipo'),
    )
    severity = models.CharField(
        max_length=10,
        choices=Severity.choices,
        default=Severity.MEDIUM,
        verbose_name=_('Severidade'),
    )
    message = models.TextField(verbose_name=_('Mensagem'))

    is_active = models.BooleanField(default=True, verbose_name=_('Ativo'))
    is_resolved = models.BooleanField(default=False, verbose_name=_('Resolvido'))

    created_at = models.DateTimeField(default=timezone.now, db_index=True, verbose_name=_('Criado em'))
    resolved_at = models.DateTimeField(null=True, blank=True, verbose_name=_('Resolvido em'))

    objects = AlertQuerySet.as_manager()

    class Meta:
        verbose_name = _('Alerta')
        verbose_name_plural = _('Alertas')
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(
                fields=['entity_key', 'type'],
                condition=Q(is_active=True, is_resolved=False),
                name='unique_open_alert_per_entity_type',
            ),
        ]
        indexes = [
            models.Index(fields=['entity_key', 'type'], name='stockwatch_alert_key_idx'),
            models.Index(fields=['is_active', 'is_resolved'], name='stockwatch_alert_open_idx'),
        ]

    @property
    def is_open(self) -> bool:
        return self.is_active and not self.is_resolved

    def __str__(self) -> str:
        return f"[{self.severity}] {self.type} {self.entity_key}: {self.message}"
