"""
Calcul pur du montant d'une commande (pas de DB, pas de passerelle).
Le montant faisant foi est toujours recalculé côté serveur; le montant envoyé
par le client n'est qu'une valeur de contrôle.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Union

from backend.orders.models import OrderItem

Number = Union[int, float]


@dataclass(frozen=True)
class PricingResult:
    subtotal: Number
    shipping_cost: Number
    final_amount: Number


def _dec(value: Number) -> Decimal:
    # via str: Decimal(0.1) garderait l'erreur binaire du float
    return Decimal(str(value))


def _as_number(value: Decimal) -> Number:
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def compute_totals(items: Iterable[OrderItem], shipping_cost: Number) -> PricingResult:
    """
    subtotal = Σ price × quantity, final_amount = subtotal + shipping_cost.
    - Total sur n'importe quelle séquence (vide => subtotal 0); la validation
      du panier est à la charge de l'appelant.
    """
    subtotal = sum((_dec(item.price) * item.quantity for item in items), Decimal(0))
    shipping = _dec(shipping_cost)
    return PricingResult(
        subtotal=_as_number(subtotal),
        shipping_cost=_as_number(shipping),
        final_amount=_as_number(subtotal + shipping),
    )


def amount_matches(declared: Number, computed: Number, tolerance: Number = 1) -> bool:
    """True si |computed - declared| <= tolerance (la borne est acceptée)."""
    return abs(_dec(computed) - _dec(declared)) <= _dec(tolerance)
