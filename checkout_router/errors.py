"""
Taxonomie des erreurs du checkout.

Chaque erreur porte:
- kind: identifiant stable (journalisation, corps JSON)
- status_code: code HTTP associé par le gestionnaire d'exceptions
- public_message: message montré à l'utilisateur

Les erreurs de validation (400) exposent un message précis. Les erreurs
fournisseur/internes (500) exposent un message générique unique: le détail
reste dans les logs.
"""
from typing import Optional

GENERIC_FAILURE_MESSAGE = (
    "Failed to start checkout. Please try again or contact support if the problem persists."
)


class CheckoutError(Exception):
    kind = "CheckoutError"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def public_message(self) -> str:
        if self.status_code >= 500:
            return GENERIC_FAILURE_MESSAGE
        return self.message


class ValidationError(CheckoutError):
    """Paramètre services mal formé (400)."""
    kind = "ValidationError"
    status_code = 400


class InputTooLong(ValidationError):
    kind = "InputTooLong"

    def __init__(self, max_length: int):
        super().__init__(f"Services parameter too long (max {max_length} characters)")
        self.max_length = max_length


class UnknownService(ValidationError):
    kind = "UnknownService"

    def __init__(self, token: str, normalized: Optional[str] = None):
        super().__init__(f"Unknown service: {token}")
        self.token = token
        self.normalized = normalized


class TooManyServices(ValidationError):
    kind = "TooManyServices"

    def __init__(self, max_services: int, count: int):
        super().__init__(f"Too many services (max {max_services} per order)")
        self.max_services = max_services
        self.count = count


class InvalidSubmissionId(CheckoutError):
    kind = "InvalidSubmissionId"
    status_code = 400


class NoServicesSelected(CheckoutError):
    kind = "NoServicesSelected"
    status_code = 400

    def __init__(self, message: str = "No services selected"):
        super().__init__(message)


class UnknownCode(CheckoutError):
    """Code absent du catalogue au moment du build: incohérence parser/catalogue (bug)."""
    kind = "UnknownCode"
    status_code = 500

    def __init__(self, code: str):
        super().__init__(f"Unknown service SKU: {code}")
        self.code = code


class PaymentSessionError(CheckoutError):
    """Échec de création de la session chez le fournisseur de paiement."""
    kind = "PaymentSessionError"
    status_code = 500


class PaymentProviderError(Exception):
    """Levée par les adaptateurs de paiement; convertie en PaymentSessionError par le service."""


class CatalogError(ValueError):
    """Catalogue invalide ou ambigu, détecté au démarrage."""
