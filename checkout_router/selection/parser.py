"""
Parser du paramètre 'services' envoyé par le formulaire.

Accepte des codes (INTFMT) comme du texte affiché (Interior Formatting — $149),
séparés par des virgules. Retourne les codes canoniques, dédoublonnés, dans
l'ordre de première apparition.
"""
from typing import List, Optional, Tuple

from checkout_router.catalog import Catalog
from checkout_router.errors import InputTooLong, TooManyServices, UnknownService
from checkout_router.observability import CheckoutObserver
from checkout_router.utils.text import normalize_service_text
from .rules import build_rules, expected_prefixes

DEFAULT_MAX_LENGTH = 500
DEFAULT_MAX_SERVICES = 20


def split_tokens(raw: str) -> List[str]:
    """Découpe sur ',' puis trim; les jetons vides sont ignorés."""
    return [t.strip() for t in (raw or "").split(",") if t.strip()]


# module checkout_router.selection.parser
class SelectionParser:
    def __init__(
        self,
        catalog: Catalog,
        max_length: int = DEFAULT_MAX_LENGTH,
        max_services: int = DEFAULT_MAX_SERVICES,
        observer: Optional[CheckoutObserver] = None,
    ):
        self.catalog = catalog
        self.max_length = max_length
        self.max_services = max_services
        self.rules = build_rules(catalog)
        self.observer = observer or CheckoutObserver()

    def parse(self, raw: Optional[str]) -> Tuple[str, ...]:
        """
        Transforme la chaîne brute en tuple de codes.
        - InputTooLong si len(raw) > max_length (vérifié avant tout traitement)
        - UnknownService si un jeton ne correspond à aucune règle
        - TooManyServices si le nombre de codes distincts dépasse max_services
        - Entrée vide => tuple vide (l'appelant décide si c'est une erreur)
        """
        if not raw:
            return ()
        if len(raw) > self.max_length:
            raise InputTooLong(self.max_length)

        resolved = [self.resolve(token) for token in split_tokens(raw)]

        unique = tuple(dict.fromkeys(resolved))
        if len(unique) < len(resolved):
            self.observer.duplicates_removed(len(resolved) - len(unique))

        if len(unique) > self.max_services:
            raise TooManyServices(self.max_services, len(unique))
        return unique

    def resolve(self, token: str) -> str:
        """Applique les règles dans l'ordre; la première qui répond gagne."""
        normalized = normalize_service_text(token)
        for rule in self.rules:
            code = rule.match(token, normalized)
            if code is not None:
                self.observer.token_resolved(token, code, rule.name)
                return code
        self.observer.token_rejected(token, normalized, expected_prefixes(self.catalog))
        raise UnknownService(token, normalized)
