"""
Collaborateur d'observabilité du checkout.

Le parser, le builder et le service appellent ces points de contrôle; aucun
n'influence le flot de contrôle. La sous-classe par défaut journalise via
`logging`, les tests peuvent la remplacer par un enregistreur.
"""
import logging
from typing import Optional, Sequence

logger = logging.getLogger("checkout_router.checkout")


class CheckoutObserver:
    """Points de contrôle: début de requête, résolution par jeton, décision terminale, erreur."""

    def request_started(self, submission_id: str, raw_services: str, email: Optional[str]) -> None:
        logger.info(
            "checkout.request sid=%s services=%r length=%s email=%s",
            submission_id, raw_services, len(raw_services or ""), email or "not provided",
        )

    def token_resolved(self, token: str, code: str, rule: str) -> None:
        logger.debug("checkout.resolve token=%r code=%s rule=%s", token, code, rule)

    def token_rejected(self, token: str, normalized: str, expected_prefixes: Sequence[str]) -> None:
        logger.warning(
            "checkout.unknown_service token=%r normalized=%r expected_prefixes=%s",
            token, normalized, list(expected_prefixes),
        )

    def duplicates_removed(self, count: int) -> None:
        logger.info("checkout.dedup removed=%s", count)

    def line_item_added(self, code: str, display_name: str) -> None:
        logger.debug("checkout.line_item code=%s name=%s", code, display_name)

    def free_service_skipped(self, code: str) -> None:
        logger.info("checkout.free_service code=%s", code)

    def free_redirect(self, submission_id: str, codes: Sequence[str], url: str, duration_ms: float) -> None:
        logger.info(
            "checkout.free_redirect sid=%s skus=%s url=%s duration_ms=%.0f",
            submission_id, ",".join(codes), url, duration_ms,
        )

    def payment_redirect(
        self, submission_id: str, codes: Sequence[str], session_id: str, url: str, duration_ms: float
    ) -> None:
        logger.info(
            "checkout.payment_redirect sid=%s skus=%s session_id=%s url=%s duration_ms=%.0f",
            submission_id, ",".join(codes), session_id, url, duration_ms,
        )

    def failed(self, error: Exception, duration_ms: float) -> None:
        kind = getattr(error, "kind", type(error).__name__)
        status_code = getattr(error, "status_code", 500)
        if status_code >= 500:
            logger.error(
                "checkout.failed kind=%s duration_ms=%.0f error=%s", kind, duration_ms, error,
                exc_info=error,
            )
        else:
            logger.warning("checkout.rejected kind=%s duration_ms=%.0f error=%s", kind, duration_ms, error)
