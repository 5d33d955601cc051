"""
Passerelle de paiement simulée (dev local, tests).
Aucun appel externe; comportement configurable à chaud:
- succès (code 100) avec authority/ref_id déterministes ou générés
- refus de la demande ou de la vérification (code configurable)
- échec réseau (TransportError)
Chaque appel est enregistré dans `calls` pour les assertions.
"""
from typing import Any, Dict, List, Optional
from uuid import uuid4

from backend.errors import GatewayError, GatewayRejected, TransportError
from .gateway import SUCCESS_CODE, Amount, PaymentRequestResult, PaymentVerifyResult

FAKE_STARTPAY_URL = "https://sandbox.zarinpal.com/pg/StartPay/"


class FakeGateway:
    name = "fake"

    def __init__(self, startpay_url: str = FAKE_STARTPAY_URL) -> None:
        self.startpay_url = startpay_url
        self.calls: List[Dict[str, Any]] = []
        self.configure()

    def configure(
        self,
        *,
        request_code: int = SUCCESS_CODE,
        verify_code: int = SUCCESS_CODE,
        authority: Optional[str] = None,
        ref_id: Optional[str] = None,
        transport_failure: bool = False,
    ) -> None:
        self.request_code = request_code
        self.verify_code = verify_code
        self.authority = authority
        self.ref_id = ref_id
        self.transport_failure = transport_failure

    async def request_payment(
        self,
        merchant_id: str,
        amount: Amount,
        description: str,
        callback_url: str,
    ) -> PaymentRequestResult:
        self.calls.append({
            "method": "request_payment",
            "merchant_id": merchant_id,
            "amount": amount,
            "description": description,
            "callback_url": callback_url,
        })
        if self.transport_failure:
            raise TransportError("Passerelle de paiement injoignable")
        if self.request_code != SUCCESS_CODE:
            body = {"data": [], "errors": {"code": self.request_code, "message": "rejected"}}
            raise GatewayError(detail=body)
        authority = self.authority or f"A{uuid4().hex[:35].upper()}"
        body = {"data": {"code": SUCCESS_CODE, "message": "Success", "authority": authority}, "errors": []}
        return PaymentRequestResult(authority=authority, raw=body)

    async def verify_payment(self, merchant_id: str, amount: Amount, authority: str) -> PaymentVerifyResult:
        self.calls.append({
            "method": "verify_payment",
            "merchant_id": merchant_id,
            "amount": amount,
            "authority": authority,
        })
        if self.transport_failure:
            raise TransportError("Passerelle de paiement injoignable")
        if self.verify_code != SUCCESS_CODE:
            body = {"data": {"code": self.verify_code, "message": "failed"}, "errors": []}
            raise GatewayRejected(detail=body)
        ref_id = self.ref_id or str(uuid4().int)[:10]
        body = {"data": {"code": SUCCESS_CODE, "message": "Verified", "ref_id": ref_id}, "errors": []}
        return PaymentVerifyResult(ref_id=ref_id, raw=body)

    def start_pay_url(self, authority: str) -> str:
        return f"{self.startpay_url}{authority}"

    async def aclose(self) -> None:
        return None
