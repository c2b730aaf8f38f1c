"""
Exceptions for Stockwatch.

All errors are StockwatchError with a structured code for programmatic handling.
"""

from decimal import Decimal
from typing import Any


class StockwatchError(Exception):
    """
    Structured exception for reconciliation and alerting operations.

    Usage:
        try:
            await store.create_alert(...)
        except StockwatchError as e:
            if e.code == 'ALERT_CONFLICT':
                ...

    Attributes:
        code: Error code for programmatic handling
        message: Human-readable message
        data: Additional context data
    """

    _default_messages = {
        'ALERT_CONFLICT': 'Já existe um alerta aberto para esta entidade e tipo',
        'TASK_TIMEOUT': 'Tarefa excedeu o prazo',
        'UNKNOWN_TASK': 'Tarefa desconhecida',
        'SWEEP_FAILED': 'Uma ou mais etapas da automação falharam',
        'PARTIAL_FAILURE': 'Tarefa concluída com itens não processados',
        'PRODUCT_NOT_FOUND': 'Produto não encontrado',
    }

    def __init__(self, code: str, message: str | None = None, **data: Any):
        self.code = code
        self.message = message or self._default_messages.get(code, code)
        self.data = data
        super().__init__(f"[{code}] {self.message}")

    def as_dict(self) -> dict[str, Any]:
        """Serialize to dict (useful for APIs)."""
        return {
            'code': self.code,
            'message': self.message,
            'data': {
                k: str(v) if isinstance(v, Decimal) else v
                for k, v in self.data.items()
            }
        }


class AlertConflict(StockwatchError):
    """
    An open alert already exists for the (entity, type) key.

    Raised by stores when the uniqueness guard on open alerts rejects an
    insert. Callers treat it as "already exists".
    """

    def __init__(self, entity_key: str, alert_type: str):
        super().__init__('ALERT_CONFLICT', entity_key=entity_key, alert_type=alert_type)
