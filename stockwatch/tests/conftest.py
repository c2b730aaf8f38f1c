"""
Pytest fixtures for Stockwatch tests.

Engine tests run against InMemoryStore (no database). Tests of the Django
adapter use the ``db`` fixture and the testapp Product model.
"""

from datetime import date, timedelta
from decimal import Decimal

import pytest
from django.contrib.contenttypes.models import ContentType

from stockwatch.adapters import reset_store
from stockwatch.adapters.memory import InMemoryStore
from stockwatch.automation import Automation
from stockwatch.services.alerts import AlertManager
from stockwatch.tests.testapp.models import Product


@pytest.fixture(autouse=True)
def _fresh_store():
    """Never leak the cached store between tests."""
    reset_store()
    yield
    reset_store()


@pytest.fixture
def store():
    """Empty in-memory store."""
    return InMemoryStore()


@pytest.fixture
def alerts(store):
    """AlertManager over the in-memory store."""
    return AlertManager(store)


@pytest.fixture
def automation(store):
    """Automation facade over the in-memory store."""
    return Automation(store)


@pytest.fixture
def croissant(store):
    """Product with min 10, max 100."""
    return store.add_product('Croissant', min_stock=10, max_stock=100)


@pytest.fixture
def baguete(store):
    """Product with min 5, no max."""
    return store.add_product('Baguete', min_stock=5)


@pytest.fixture
def today():
    """Return today's date."""
    return date.today()


@pytest.fixture
def tomorrow():
    """Return tomorrow's date."""
    return date.today() + timedelta(days=1)


@pytest.fixture
def yesterday():
    """Return yesterday's date."""
    return date.today() - timedelta(days=1)


# ══════════════════════════════════════════════════════════════
# DJANGO ORM
# ══════════════════════════════════════════════════════════════


@pytest.fixture
def product(db):
    """Create a test product in the database."""
    return Product.objects.create(
        name='Pão de Forma',
        min_stock=Decimal('10'),
        max_stock=Decimal('100'),
        is_active=True,
    )


@pytest.fixture
def inactive_product(db):
    """Create an inactive product."""
    return Product.objects.create(
        name='Bolo Descontinuado',
        min_stock=Decimal('5'),
        is_active=False,
    )


@pytest.fixture
def product_ct(db):
    """ContentType of the test product model."""
    return ContentType.objects.get_for_model(Product)
