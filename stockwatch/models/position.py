"""
Position model — Where stock records live.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class Position(models.Model):
    """
    Location holding stock (store, warehouse, shelf).

    Positions are stable entities, created during system setup. Alert
    messages about a stock record name its position.

    Examples:
        Position.objects.create(code='loja-centro', name='Loja Centro')
        Position.objects.create(code='deposito', name='Depósito')
    """

    code = models.SlugField(
        unique=True,
        max_length=50,
        verbose_name=_('Código'),
        help_text=_('Identificador único (ex: loja-centro, deposito)'),
    )
    name = models.CharField(
        max_length=100,
        verbose_name=_('Nome'),
        help_text=_('Nome legível da posição'),
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _('Posição')
        verbose_name_plural = _('Posições')
        ordering = ['code']

    def __str__(self) -> str:
        return self.name
