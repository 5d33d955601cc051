"""Couche service des commandes et de leur paiement.
Rôles:
- Créer une commande après recalcul serveur du montant (le montant client n'est qu'un contrôle).
- Demander un paiement à la passerelle avec le montant stocké et mémoriser l'authority.
- Vérifier le paiement auprès de la passerelle et finaliser le statut (PAID / FAILED).
États d'une commande:
  CREATED -> AUTHORITY_ISSUED -> PAID (terminal) | FAILED (nouvelle demande possible)
Une commande PAID n'est jamais rétrogradée: une vérification répétée est sans effet.
"""
from dataclasses import dataclass
from typing import Any, List, Optional
from urllib.parse import urlencode
import logging

from backend.config import Settings
from backend.errors import (
    AmountMismatchError,
    GatewayRejected,
    NotFoundError,
    ValidationError,
)
from backend.orders.models import CreateOrderRequest, Order, PaymentStatus
from backend.orders.pricing import amount_matches, compute_totals
from backend.orders.repository import OrderRepository
from backend.payments.gateway import PaymentGateway

logger = logging.getLogger(__name__)

CALLBACK_PAGE = "/payment-verify.html"


@dataclass
class PaymentRequestOutcome:
    order: Order
    payment_url: str


@dataclass
class VerificationOutcome:
    success: bool
    order: Order
    detail: Any = None
    already_paid: bool = False


def build_callback_url(base_url: str, order_id: str) -> str:
    """Ajoute orderId=<order_id> en paramètre de requête à l'URL de retour."""
    separator = "&" if "?" in base_url else "?"
    return f"{base_url}{separator}{urlencode({'orderId': order_id})}"


class OrderService:
    def __init__(self, *, settings: Settings, orders: OrderRepository, gateway: PaymentGateway) -> None:
        self.settings = settings
        self.orders = orders
        self.gateway = gateway

    def create_order(self, request: CreateOrderRequest, user_id: Optional[str] = None) -> Order:
        """Crée une commande UNPAID sans authority.
        - Recalcule subtotal et montant final (frais de port fixes).
        - Refuse sans rien écrire si |montant final - montant déclaré| > tolérance.
        - user_id None: commande anonyme.
        """
        if not request.products:
            raise ValidationError("Les informations de commande sont incomplètes")

        totals = compute_totals(request.products, self.settings.shipping_cost)
        if not amount_matches(request.amount, totals.final_amount, self.settings.amount_tolerance):
            logger.warning(
                "orders.create amount mismatch declared=%s computed=%s",
                request.amount,
                totals.final_amount,
            )
            raise AmountMismatchError(request.amount, totals.final_amount)

        order = self.orders.create(
            Order(
                user_id=user_id,
                shipping_info=request.shipping_info,
                products=request.products,
                subtotal=totals.subtotal,
                shipping_cost=totals.shipping_cost,
                amount=totals.final_amount,
            )
        )
        logger.info("orders.create order_id=%s amount=%s user_id=%s", order.order_id, order.amount, user_id)
        return order

    async def request_payment(self, order_id: str, fallback_callback_base: str) -> PaymentRequestOutcome:
        """Demande une authority à la passerelle pour la commande.
        - 404 si la commande n'existe pas (aucun appel passerelle).
        - Montant envoyé: toujours order.amount, jamais une valeur client.
        - GatewayError / TransportError remontent, la commande reste inchangée.
        """
        order = self.orders.find_by_external_id(order_id)
        if order is None:
            raise NotFoundError("Commande introuvable")
        if order.is_paid:
            raise ValidationError("Cette commande est déjà payée")

        callback_base = self.settings.zarinpal_callback_url or (
            fallback_callback_base.rstrip("/") + CALLBACK_PAGE
        )
        result = await self.gateway.request_payment(
            self.settings.zarinpal_merchant_id,
            order.amount,
            f"Commande {order.order_id}",
            build_callback_url(callback_base, order.order_id),
        )

        order.payment_authority = result.authority
        # Une commande FAILED redevient payable avec la nouvelle authority
        order.payment_status = PaymentStatus.UNPAID
        self.orders.save(order)
        logger.info("payments.request order_id=%s authority=%s", order.order_id, result.authority)
        return PaymentRequestOutcome(order=order, payment_url=self.gateway.start_pay_url(result.authority))

    async def verify_payment(self, authority: str, order_id: str) -> VerificationOutcome:
        """Vérifie le paiement et finalise le statut de la commande.
        - Recherche par (orderId, authority): 404 si aucune correspondance.
        - Commande déjà PAID: succès sans appel passerelle ni écriture.
        - Succès passerelle: PAID + ref_id. Refus: FAILED. Les deux sont persistés.
        """
        order = self.orders.find_by_external_id_and_authority(order_id, authority)
        if order is None:
            raise NotFoundError("Transaction introuvable")

        if order.is_paid:
            logger.info("payments.verify order_id=%s already paid, ignored", order.order_id)
            return VerificationOutcome(success=True, order=order, already_paid=True)

        try:
            result = await self.gateway.verify_payment(
                self.settings.zarinpal_merchant_id,
                order.amount,
                authority,
            )
        except GatewayRejected as e:
            order.payment_status = PaymentStatus.FAILED
            self.orders.save(order)
            logger.warning("payments.verify order_id=%s rejected detail=%s", order.order_id, e.detail)
            return VerificationOutcome(success=False, order=order, detail=e.detail)

        order.payment_status = PaymentStatus.PAID
        order.payment_ref_id = result.ref_id
        self.orders.save(order)
        logger.info("payments.verify order_id=%s paid ref_id=%s", order.order_id, result.ref_id)
        return VerificationOutcome(success=True, order=order, detail=result.raw)

    def get_order(self, internal_id: str) -> Order:
        order = self.orders.find_by_id(internal_id)
        if order is None:
            raise NotFoundError("Commande introuvable")
        return order

    def list_user_orders(self, user_id: str) -> List[Order]:
        return self.orders.list_by_user(user_id)
