"""
Construction des line_items Stripe (pas de Stripe, pas de réseau).
"""
from typing import Any, Dict, List, Optional, Sequence

from checkout_router.catalog import Catalog
from checkout_router.errors import UnknownCode
from checkout_router.observability import CheckoutObserver


# module checkout_router.payments.line_items
class LineItemBuilder:
    def __init__(self, catalog: Catalog, observer: Optional[CheckoutObserver] = None):
        self.catalog = catalog
        self.observer = observer or CheckoutObserver()

    def build(self, codes: Sequence[str]) -> List[Dict[str, Any]]:
        """
        Construit les line_items Stripe à partir des codes résolus.
        - Une ligne {"price": <price_id>, "quantity": 1} par code payant, dans l'ordre reçu.
        - Les codes sans price id (gratuits) sont ignorés, sans erreur.
        - Soulève UnknownCode si un code est absent du catalogue (incohérence interne).
        """
        line_items: List[Dict[str, Any]] = []
        for code in codes:
            entry = self.catalog.get(code)
            if entry is None:
                raise UnknownCode(code)
            if entry.is_free:
                self.observer.free_service_skipped(code)
                continue
            line_items.append({"price": entry.price_ref, "quantity": 1})
            self.observer.line_item_added(code, entry.display_name)
        return line_items


def make_metadata(submission_id: str, codes: Sequence[str]) -> Dict[str, str]:
    """Métadonnées de session: identifiant de soumission et SKUs joints par ','."""
    return {
        "project_intake_submission_id": submission_id,
        "selected_service_skus": ",".join(codes),
    }
