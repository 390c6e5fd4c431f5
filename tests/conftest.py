"""
Pytest configuration and fixtures for invoicing tests.
"""

import uuid

import pytest

from invoicing.config import get_settings
from invoicing.domain.aggregates import Invoice
from invoicing.domain.value_objects import ProductCode, ProductQuantity


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Settings are cached process-wide; every test starts from a clean cache."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def invoice_id():
    return uuid.UUID("6f1c2a9e-3b4d-4c8e-9a57-0d2f1e3b4c5a")


@pytest.fixture
def customer_id():
    return uuid.UUID("a8e4f0b2-71c3-4d9a-b6e5-2f8c0d1a3b79")


@pytest.fixture
def invoice(invoice_id, customer_id):
    """Empty invoice with fixed ids."""
    return Invoice(invoice_id, customer_id)


@pytest.fixture
def two_line_invoice(invoice):
    """Invoice with ABCD123 x 100 and WXYZ999 x 150."""
    invoice.add_line(ProductCode("ABCD123"), ProductQuantity(100))
    invoice.add_line(ProductCode("WXYZ999"), ProductQuantity(150))
    return invoice
