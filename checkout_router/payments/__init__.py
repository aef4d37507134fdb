"""
Module 'payments' (feature-first): point d'entrée public.
Réunit la construction des line_items, les métadonnées de session et le client Stripe.
"""

from .line_items import LineItemBuilder, make_metadata
from .stripe_client import PaymentProvider, PaymentSession, StripePaymentProvider

__all__ = [
    # line items
    "LineItemBuilder",
    "make_metadata",
    # stripe
    "PaymentProvider",
    "PaymentSession",
    "StripePaymentProvider",
]
