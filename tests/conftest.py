"""Pytest configuration and shared fixtures for JAMB Estimate tests."""

import os
import sys
from typing import Callable
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from tenacity import wait_none


# ============================================================================
# Ensure local imports work (jamb_estimate/, tests/fixtures/)
# ============================================================================
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)


from jamb_estimate.models.pricing import CalculationResult, FinishingMaterialSet, Location  # noqa: E402
from jamb_estimate.services.catalog_index import CatalogIndex  # noqa: E402
from jamb_estimate.services.order_client import CompositeOrderClient  # noqa: E402
from jamb_estimate.services.pricing_gateway import PricingGatewayClient  # noqa: E402
from jamb_estimate.services.session_store import InMemorySessionStore  # noqa: E402
from tests.fixtures.mock_pricing_data import TILE_CALCULATION, TILE_FINISHING_MATERIALS  # noqa: E402


PRICING_BASE_URL = "http://pricing.test"
ORDERS_BASE_URL = "https://orders.test"


# ============================================================================
# Catalog / Session
# ============================================================================

@pytest.fixture
def catalog():
    """Index over the bundled catalog."""
    return CatalogIndex.default()


@pytest.fixture
def memory_store():
    """Empty in-memory session store."""
    return InMemorySessionStore()


@pytest.fixture
def us_location():
    """Priceable New York location."""
    return Location(
        zipcode="10006",
        country="United States",
        state="NY",
        city="New York",
        address="1 Liberty Plaza, New York, NY 10006",
    )


# ============================================================================
# Firebase Mocks
# ============================================================================

@pytest.fixture
def mock_firestore_client():
    """Mock Firestore client holding one session document."""
    client = MagicMock()

    collection_mock = MagicMock()
    document_mock = MagicMock()

    # Set up chain: client.collection().document()
    client.collection.return_value = collection_mock
    collection_mock.document.return_value = document_mock

    document_mock.get.return_value = MagicMock(
        exists=True,
        to_dict=lambda: {"zipcode": "10006", "selection:calculate": {"default": {"4-1-1": 20.0}}},
    )
    return client


# ============================================================================
# Pricing Gateway Mocks
# ============================================================================

@pytest.fixture
def mock_gateway():
    """Gateway double with canned finishing materials and calculation."""
    gateway = MagicMock(spec=PricingGatewayClient)
    gateway.supported_countries = ["United States"]
    gateway.resolve_finishing_materials = AsyncMock(
        return_value=FinishingMaterialSet.model_validate(TILE_FINISHING_MATERIALS)
    )
    gateway.price = AsyncMock(return_value=CalculationResult.from_response(TILE_CALCULATION))
    return gateway


@pytest.fixture
def make_pricing_client() -> Callable[..., PricingGatewayClient]:
    """Build a PricingGatewayClient on top of an httpx.MockTransport handler."""

    def _make(handler, max_attempts: int = 3) -> PricingGatewayClient:
        return PricingGatewayClient(
            base_url=PRICING_BASE_URL,
            timeout=5,
            max_attempts=max_attempts,
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
            supported_countries=["United States"],
            retry_wait=wait_none(),
        )

    return _make


@pytest.fixture
def make_order_client() -> Callable[..., CompositeOrderClient]:
    """Build a CompositeOrderClient on top of an httpx.MockTransport handler."""

    def _make(handler, max_attempts: int = 2) -> CompositeOrderClient:
        return CompositeOrderClient(
            base_url=ORDERS_BASE_URL,
            timeout=5,
            max_attempts=max_attempts,
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
            retry_wait=wait_none(),
        )

    return _make
