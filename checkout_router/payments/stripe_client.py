"""
Adaptateur Stripe: centralise l'appel de création de session Checkout.
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import stripe

from checkout_router.errors import PaymentProviderError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PaymentSession:
    id: str
    url: str


class PaymentProvider(ABC):
    @abstractmethod
    def create_session(
        self,
        *,
        line_items: List[Dict[str, Any]],
        success_url: str,
        cancel_url: str,
        metadata: Dict[str, str],
        customer_email: Optional[str] = None,
    ) -> PaymentSession:
        """Crée une session de paiement hébergée. Soulève PaymentProviderError en cas d'échec."""
        raise NotImplementedError


# module checkout_router.payments.stripe_client
class StripePaymentProvider(PaymentProvider):
    """
    Crée des sessions Stripe Checkout (mode "payment").
    - La clé et la version d'API sont passées à chaque requête (pas d'état global).
    - Aucun retry: une erreur Stripe est remontée immédiatement.
    """

    def __init__(self, api_key: str, api_version: Optional[str] = None):
        self.api_key = api_key
        self.api_version = api_version

    def require_stripe(self) -> None:
        if not self.api_key:
            raise PaymentProviderError("STRIPE_SECRET_KEY manquant")

    def create_session(
        self,
        *,
        line_items: List[Dict[str, Any]],
        success_url: str,
        cancel_url: str,
        metadata: Dict[str, str],
        customer_email: Optional[str] = None,
    ) -> PaymentSession:
        """
        Crée une session Stripe Checkout.
        - line_items: lignes Stripe {"price", "quantity"}
        - success_url / cancel_url: URLs de redirection
        - metadata: ex {"project_intake_submission_id": "...", "selected_service_skus": "A,B"}
        - customer_email: pré-remplit l'email si fourni
        Retour: PaymentSession(id, url)
        """
        self.require_stripe()
        params: Dict[str, Any] = {
            "mode": "payment",
            "line_items": line_items,
            "success_url": success_url,
            "cancel_url": cancel_url,
            "metadata": metadata,
        }
        if customer_email:
            params["customer_email"] = customer_email
        try:
            session = stripe.checkout.Session.create(
                api_key=self.api_key,
                stripe_version=self.api_version,
                **params,
            )
        except stripe.StripeError as e:
            logger.error(
                "payments.stripe_client.create_session failed type=%s status=%s code=%s",
                type(e).__name__, getattr(e, "http_status", None), getattr(e, "code", None),
            )
            raise PaymentProviderError(str(e)) from e

        # StripeObject: accès par attribut (n'est plus un dict dans les SDK récents)
        session_id = getattr(session, "id", None)
        url = getattr(session, "url", None)
        if not session_id or not url:
            raise PaymentProviderError("Session Stripe invalide (id/url manquant)")
        return PaymentSession(id=session_id, url=url)
