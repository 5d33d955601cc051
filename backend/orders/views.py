# module backend.orders.views

"""Endpoints Commandes / Paiement (API JSON, préfixe /api).
- /create-order: crée une commande après recalcul serveur du montant (jeton facultatif).
- /request-payment: obtient une authority auprès de la passerelle et renvoie l'URL de paiement.
- /verify-payment: appelé au retour de la passerelle, finalise le statut (PAID / FAILED).
- /orders/{id}: détail d'une commande avec son propriétaire.
Les erreurs applicatives (400/404/409/500) sont levées par le service et rendues
par les gestionnaires de backend.app_setup.exceptions.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from starlette.status import HTTP_201_CREATED, HTTP_400_BAD_REQUEST

from backend.infra.deps import get_order_service, get_user_repository
from backend.orders.models import CreateOrderRequest, RequestPaymentBody, VerifyPaymentBody
from backend.orders.service import OrderService
from backend.users.repository import UserRepository, public_user
from backend.utils.security import Identity, optional_user

router = APIRouter(prefix="/api", tags=["Orders API"])


@router.post("/create-order", status_code=HTTP_201_CREATED)
def create_order(
    body: CreateOrderRequest,
    user: Optional[Identity] = Depends(optional_user),
    service: OrderService = Depends(get_order_service),
):
    """Crée une commande UNPAID.
    - Jeton absent ou invalide: commande anonyme (user_id null).
    - 400 si le panier est incomplet ou si le montant déclaré diffère du montant recalculé.
    """
    order = service.create_order(body, user_id=user.user_id if user else None)
    return {"message": "Commande créée avec succès", "order": order.to_public()}


@router.post("/request-payment")
async def request_payment(
    body: RequestPaymentBody,
    request: Request,
    service: OrderService = Depends(get_order_service),
):
    """Retourne {payment_url}: l'URL StartPay de la passerelle pour l'authority obtenue.
    Sans ZARINPAL_CALLBACK_URL, le retour se fait sur <hôte de la requête>/payment-verify.html.
    """
    outcome = await service.request_payment(body.order_id, str(request.base_url))
    return {"payment_url": outcome.payment_url}


@router.post("/verify-payment")
async def verify_payment(
    body: VerifyPaymentBody,
    service: OrderService = Depends(get_order_service),
):
    outcome = await service.verify_payment(body.authority, body.order_id)
    if outcome.success:
        return {
            "success": True,
            "message": "Votre paiement a été confirmé",
            "order": outcome.order.to_public(),
        }
    return JSONResponse(
        status_code=HTTP_400_BAD_REQUEST,
        content={
            "success": False,
            "message": "Paiement échoué",
            "detail": outcome.detail,
            "order": outcome.order.to_public(),
        },
    )


@router.get("/orders/{order_id}")
def get_order(
    order_id: str,
    service: OrderService = Depends(get_order_service),
    users: UserRepository = Depends(get_user_repository),
):
    """Détail d'une commande (identifiant interne) avec user{id, username, email} ou null."""
    order = service.get_order(order_id)
    data = order.to_public()
    data["user"] = public_user(users.get_by_id(order.user_id)) if order.user_id else None
    return data
