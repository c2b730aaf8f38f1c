"""
Stockwatch Adapters.

Implementations of the InventoryStore protocol, and the loader for the
configured one.

Usage:
    from stockwatch.adapters import get_store

    store = get_store()
    total = await store.total_quantity(product_id)

Settings:
    STOCKWATCH = {
        "STORE_BACKEND": "stockwatch.adapters.django_orm.DjangoInventoryStore",
    }
"""

from __future__ import annotations

import logging
import threading

from django.core.exceptions import ImproperlyConfigured
from django.utils.module_loading import import_string

from stockwatch.conf import stockwatch_settings
from stockwatch.protocols.store import InventoryStore

logger = logging.getLogger(__name__)


# Cached store instance
_lock = threading.Lock()
_store: InventoryStore | None = None


def get_store() -> InventoryStore:
    """
    Return the configured inventory store.

    Returns:
        InventoryStore instance

    Raises:
        ImproperlyConfigured: If STORE_BACKEND is not configured or import fails
    """
    global _store

    if _store is None:
        with _lock:
            if _store is None:  # double-checked
                store_path = stockwatch_settings.STORE_BACKEND

                if not store_path:
                    raise ImproperlyConfigured(
                        "STOCKWATCH['STORE_BACKEND'] must be configured. "
                        "Example: 'stockwatch.adapters.django_orm.DjangoInventoryStore'"
                    )

                try:
                    store_class = import_string(store_path)
                except ImportError as e:
                    raise ImproperlyConfigured(
                        f"Failed to import inventory store '{store_path}': {e}"
                    ) from e

                _store = store_class()
                logger.debug("Loaded inventory store: %s", store_path)

    return _store


def reset_store() -> None:
    """Reset the cached store. Useful for testing."""
    global _store
    _store = None


__all__ = [
    "get_store",
    "reset_store",
]
