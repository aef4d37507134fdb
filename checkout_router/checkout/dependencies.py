"""
Câblage FastAPI du service de checkout.
Le catalogue et le service sont construits une seule fois par create_app() (app.state);
les tests remplacent get_checkout_service via app.dependency_overrides.
"""
from fastapi import Request

from checkout_router import config
from checkout_router.catalog import Catalog
from checkout_router.observability import CheckoutObserver
from checkout_router.payments import LineItemBuilder, StripePaymentProvider
from checkout_router.selection import SelectionParser
from .service import CheckoutService


def get_catalog(request: Request) -> Catalog:
    return request.app.state.catalog


def build_checkout_service(catalog: Catalog) -> CheckoutService:
    observer = CheckoutObserver()
    return CheckoutService(
        parser=SelectionParser(
            catalog,
            max_length=config.MAX_SERVICES_LENGTH,
            max_services=config.MAX_SKUS,
            observer=observer,
        ),
        builder=LineItemBuilder(catalog, observer=observer),
        provider=StripePaymentProvider(config.STRIPE_SECRET_KEY, config.STRIPE_API_VERSION),
        success_url=config.SUCCESS_URL,
        cancel_url=config.CANCEL_URL,
        max_submission_id_length=config.MAX_SUBMISSION_ID_LENGTH,
        observer=observer,
    )


def get_checkout_service(request: Request) -> CheckoutService:
    return request.app.state.checkout_service
