import os

# Avant tout import de l'app: pas de Redis ni de clé Stripe en tests
os.environ.setdefault("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS", "1")
os.environ.pop("LOCAL_RATE_LIMIT_FALLBACK", None)
os.environ.setdefault("SUCCESS_URL", "https://example.test/thank-you")
os.environ.setdefault("CANCEL_URL", "https://example.test/cancelled")

import pytest
from typing import Any, Dict, Generator, List
from fastapi.testclient import TestClient

from checkout_router.app_setup.factory import create_app
from checkout_router.catalog import Catalog, CatalogEntry
from checkout_router.checkout.dependencies import get_checkout_service
from checkout_router.checkout.service import CheckoutService
from checkout_router.errors import PaymentProviderError
from checkout_router.payments import LineItemBuilder, PaymentProvider, PaymentSession
from checkout_router.selection import SelectionParser


# Marquage automatique selon le dossier
def pytest_collection_modifyitems(config, items):
    for item in items:
        nodeid = item.nodeid.replace("\\", "/")
        if "/unit/" in nodeid:
            item.add_marker(pytest.mark.unit)
        elif "/integration/" in nodeid:
            item.add_marker(pytest.mark.integration)


class FakePaymentProvider(PaymentProvider):
    """Double de test: enregistre chaque appel, renvoie une session fixe ou échoue sur demande."""

    def __init__(self, url: str = "https://checkout.stripe.test/c/pay/cs_test_123", fail: bool = False):
        self.url = url
        self.fail = fail
        self.calls: List[Dict[str, Any]] = []

    def create_session(self, *, line_items, success_url, cancel_url, metadata, customer_email=None):
        self.calls.append({
            "line_items": line_items,
            "success_url": success_url,
            "cancel_url": cancel_url,
            "metadata": metadata,
            "customer_email": customer_email,
        })
        if self.fail:
            raise PaymentProviderError("card_error: simulated provider outage")
        return PaymentSession(id="cs_test_123", url=self.url)


@pytest.fixture
def catalog() -> Catalog:
    # KDPPREP gratuit pour exercer le chemin sans paiement
    return Catalog([
        CatalogEntry(code="INTFMT", price_ref="price_intfmt", display_name="Interior Formatting"),
        CatalogEntry(code="COVER", price_ref="price_cover", display_name="Cover Design"),
        CatalogEntry(code="KDPPREP", price_ref=None, display_name="KDP Upload Preparation"),
    ])


@pytest.fixture
def provider() -> FakePaymentProvider:
    return FakePaymentProvider()


@pytest.fixture
def parser(catalog) -> SelectionParser:
    return SelectionParser(catalog)


@pytest.fixture
def builder(catalog) -> LineItemBuilder:
    return LineItemBuilder(catalog)


@pytest.fixture
def checkout_service(parser, builder, provider) -> CheckoutService:
    return CheckoutService(
        parser=parser,
        builder=builder,
        provider=provider,
        success_url="https://example.test/thank-you",
        cancel_url="https://example.test/cancelled",
    )


@pytest.fixture
def app(catalog, checkout_service):
    fastapi_app = create_app(catalog)
    fastapi_app.dependency_overrides[get_checkout_service] = lambda: checkout_service
    try:
        yield fastapi_app
    finally:
        fastapi_app.dependency_overrides.clear()


@pytest.fixture
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app, follow_redirects=False) as c:
        yield c
