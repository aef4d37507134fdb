"""
Cas d'usage 'checkout': orchestre parser, builder et fournisseur de paiement.

Une requête = une transition terminale:
- FREE_REDIRECT: tous les services sont gratuits, redirection directe vers la page de succès
- PAYMENT_REDIRECT: création d'une session Stripe puis redirection vers son URL hébergée
Toute la validation a lieu avant l'unique appel externe.
"""
import time
import urllib.parse
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from checkout_router.errors import (
    CheckoutError,
    InvalidSubmissionId,
    NoServicesSelected,
    PaymentProviderError,
    PaymentSessionError,
)
from checkout_router.observability import CheckoutObserver
from checkout_router.payments import LineItemBuilder, PaymentProvider, make_metadata
from checkout_router.selection import SelectionParser

DEFAULT_MAX_SUBMISSION_ID_LENGTH = 200

# Remplacé par Stripe à la redirection de succès
STRIPE_SESSION_PLACEHOLDER = "{CHECKOUT_SESSION_ID}"


class RedirectKind(str, Enum):
    FREE_REDIRECT = "FreeRedirect"
    PAYMENT_REDIRECT = "PaymentRedirect"


@dataclass(frozen=True)
class RedirectDecision:
    kind: RedirectKind
    url: str
    session_id: Optional[str] = None


def with_query(base_url: str, params: Dict[str, str], raw: str = "") -> str:
    """
    Ajoute des paramètres à la query d'une URL (après une query existante, avant un #fragment).
    `raw` est ajouté tel quel (ex: placeholder Stripe qui ne doit pas être encodé).
    """
    query = urllib.parse.urlencode(params, quote_via=urllib.parse.quote, safe="")
    if raw:
        query = f"{query}&{raw}" if query else raw
    parts = urllib.parse.urlsplit(base_url)
    if parts.query:
        query = f"{parts.query}&{query}"
    return urllib.parse.urlunsplit(parts._replace(query=query))


# module checkout_router.checkout.service
class CheckoutService:
    def __init__(
        self,
        *,
        parser: SelectionParser,
        builder: LineItemBuilder,
        provider: PaymentProvider,
        success_url: str,
        cancel_url: str,
        max_submission_id_length: int = DEFAULT_MAX_SUBMISSION_ID_LENGTH,
        observer: Optional[CheckoutObserver] = None,
    ):
        self.parser = parser
        self.builder = builder
        self.provider = provider
        self.success_url = success_url
        self.cancel_url = cancel_url
        self.max_submission_id_length = max_submission_id_length
        self.observer = observer or CheckoutObserver()

    def orchestrate(self, submission_id: str, raw_services: str, email: Optional[str] = None) -> RedirectDecision:
        """
        Transforme une soumission de formulaire en décision de redirection.
        - InvalidSubmissionId: sid vide ou > max_submission_id_length (parser non appelé)
        - NoServicesSelected: aucun service après parsing
        - ValidationError (InputTooLong, UnknownService, TooManyServices): remontées du parser
        - UnknownCode: incohérence parser/catalogue
        - PaymentSessionError: échec Stripe (pas de retry)
        """
        started = time.perf_counter()
        sid = (submission_id or "").strip()
        email = (email or "").strip() or None
        self.observer.request_started(sid, raw_services, email)
        try:
            decision = self._decide(sid, raw_services, email, started)
        except CheckoutError as e:
            self.observer.failed(e, _elapsed_ms(started))
            raise
        return decision

    def _decide(self, sid: str, raw_services: str, email: Optional[str], started: float) -> RedirectDecision:
        self.validate_submission_id(sid)

        codes = self.parser.parse(raw_services)
        if not codes:
            raise NoServicesSelected()

        line_items = self.builder.build(codes)

        if not line_items:
            url = with_query(self.success_url, {"sid": sid, "free": "true"})
            self.observer.free_redirect(sid, codes, url, _elapsed_ms(started))
            return RedirectDecision(kind=RedirectKind.FREE_REDIRECT, url=url)

        try:
            session = self.provider.create_session(
                line_items=line_items,
                success_url=with_query(self.success_url, {"sid": sid}, raw=f"session_id={STRIPE_SESSION_PLACEHOLDER}"),
                cancel_url=with_query(self.cancel_url, {"sid": sid}),
                metadata=make_metadata(sid, codes),
                customer_email=email,
            )
        except PaymentProviderError as e:
            raise PaymentSessionError(f"Payment session creation failed: {e}") from e

        self.observer.payment_redirect(sid, codes, session.id, session.url, _elapsed_ms(started))
        return RedirectDecision(kind=RedirectKind.PAYMENT_REDIRECT, url=session.url, session_id=session.id)

    def validate_submission_id(self, sid: str) -> None:
        if not sid:
            raise InvalidSubmissionId("Missing submission ID (sid parameter)")
        if len(sid) > self.max_submission_id_length:
            raise InvalidSubmissionId("Invalid submission ID")


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000
