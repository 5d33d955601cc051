"""
Contrat de la passerelle de paiement.
Les adaptateurs (Zarinpal, fake) renvoient ces résultats ou lèvent:
- GatewayError: demande de paiement refusée (code != 100)
- GatewayRejected: vérification refusée, le paiement n'a pas abouti
- TransportError: réseau/timeout, la passerelle n'a pas répondu
Aucun adaptateur ne touche au stockage des commandes.
"""
from dataclasses import dataclass
from typing import Any, Dict, Protocol, Union

Amount = Union[int, float]

SUCCESS_CODE = 100


@dataclass(frozen=True)
class PaymentRequestResult:
    authority: str
    raw: Dict[str, Any]


@dataclass(frozen=True)
class PaymentVerifyResult:
    ref_id: str
    raw: Dict[str, Any]


class PaymentGateway(Protocol):
    name: str

    async def request_payment(
        self,
        merchant_id: str,
        amount: Amount,
        description: str,
        callback_url: str,
    ) -> PaymentRequestResult: ...

    async def verify_payment(self, merchant_id: str, amount: Amount, authority: str) -> PaymentVerifyResult: ...

    def start_pay_url(self, authority: str) -> str: ...

    async def aclose(self) -> None: ...
