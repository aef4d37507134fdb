from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import RedirectResponse
from starlette.status import HTTP_303_SEE_OTHER

from checkout_router.config import RATE_LIMIT_SECONDS, RATE_LIMIT_TIMES
from checkout_router.utils.rate_limit import optional_rate_limit
from .dependencies import get_checkout_service
from .service import CheckoutService

router = APIRouter(tags=["Checkout"])


# module checkout_router.checkout.views
@router.get(
    "/checkout",
    dependencies=[Depends(optional_rate_limit(times=RATE_LIMIT_TIMES, seconds=RATE_LIMIT_SECONDS))],
    response_class=RedirectResponse,
    status_code=HTTP_303_SEE_OTHER,
)
def checkout(
    sid: str = Query(default="", description="Identifiant de soumission du formulaire"),
    services: str = Query(default="", description="Services séparés par des virgules (codes ou libellés)"),
    email: Optional[str] = Query(default=None),
    service: CheckoutService = Depends(get_checkout_service),
):
    """
    Reçoit la soumission du formulaire et redirige (303) vers Stripe Checkout.
    - Commande entièrement gratuite: redirection directe vers la page de succès (free=true)
    - Erreurs: CheckoutError, convertie en 400/500 par le gestionnaire d'exceptions
    """
    decision = service.orchestrate(sid.strip(), services.strip(), email)
    return RedirectResponse(url=decision.url, status_code=HTTP_303_SEE_OTHER)
