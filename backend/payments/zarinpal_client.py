"""
Adaptateur Zarinpal (API v4): centralise les appels HTTP à la passerelle.
- request_payment: POST request.json -> authority si data.code == 100
- verify_payment: POST verify.json -> ref_id si data.code == 100
- start_pay_url: URL StartPay + authority, vers laquelle le client est redirigé
Les appels passent par un httpx.AsyncClient avec timeout borné; un timeout, une
erreur réseau ou une réponse 5xx devient TransportError.
"""
from typing import Any, Dict, Optional
import logging

import httpx

from backend.config import Settings
from backend.errors import GatewayError, GatewayRejected, TransportError
from .gateway import SUCCESS_CODE, Amount, PaymentRequestResult, PaymentVerifyResult

logger = logging.getLogger(__name__)


def response_code(body: Dict[str, Any]) -> Optional[int]:
    """
    Extrait le code Zarinpal d'une réponse.
    - Succès/refus: {"data": {"code": 100, ...}, "errors": []}
    - Erreur: {"data": [], "errors": {"code": -9, "message": "..."}}
    """
    data = body.get("data")
    errors = body.get("errors")
    raw = None
    if isinstance(data, dict) and "code" in data:
        raw = data.get("code")
    elif isinstance(errors, dict):
        raw = errors.get("code")
    try:
        return int(raw) if raw is not None else None
    except (TypeError, ValueError):
        return None


class ZarinpalGateway:
    name = "zarinpal"

    def __init__(
        self,
        *,
        request_url: str,
        verify_url: str,
        startpay_url: str,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.request_url = request_url
        self.verify_url = verify_url
        self.startpay_url = startpay_url
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=timeout,
            headers={"Accept": "application/json"},
        )

    @classmethod
    def from_settings(cls, settings: Settings, client: Optional[httpx.AsyncClient] = None) -> "ZarinpalGateway":
        return cls(
            request_url=settings.zarinpal_request_url,
            verify_url=settings.zarinpal_verify_url,
            startpay_url=settings.zarinpal_startpay_url,
            timeout=settings.gateway_timeout_seconds,
            client=client,
        )

    async def _post(self, url: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            resp = await self._client.post(url, json=payload)
        except httpx.TimeoutException as e:
            logger.warning("zarinpal timeout url=%s", url)
            raise TransportError("Délai dépassé vers la passerelle de paiement") from e
        except httpx.HTTPError as e:
            logger.warning("zarinpal transport error url=%s error=%s", url, e)
            raise TransportError("Passerelle de paiement injoignable") from e

        # 5xx: la passerelle n'a pas statué, la commande ne doit pas changer d'état
        if resp.status_code >= 500:
            logger.warning("zarinpal server error url=%s status=%s", url, resp.status_code)
            raise TransportError(f"Passerelle indisponible (status {resp.status_code})")

        try:
            body = resp.json()
        except ValueError:
            return {"status_code": resp.status_code, "text": resp.text}
        if not isinstance(body, dict):
            return {"status_code": resp.status_code, "body": body}
        return body

    async def request_payment(
        self,
        merchant_id: str,
        amount: Amount,
        description: str,
        callback_url: str,
    ) -> PaymentRequestResult:
        body = await self._post(
            self.request_url,
            {
                "merchant_id": merchant_id,
                "amount": amount,
                "description": description,
                "callback_url": callback_url,
            },
        )
        data = body.get("data") if isinstance(body.get("data"), dict) else {}
        authority = data.get("authority")
        if response_code(body) != SUCCESS_CODE or not authority:
            raise GatewayError(detail=body)
        return PaymentRequestResult(authority=str(authority), raw=body)

    async def verify_payment(self, merchant_id: str, amount: Amount, authority: str) -> PaymentVerifyResult:
        body = await self._post(
            self.verify_url,
            {"merchant_id": merchant_id, "amount": amount, "authority": authority},
        )
        if response_code(body) != SUCCESS_CODE:
            raise GatewayRejected(detail=body)
        data = body.get("data") or {}
        ref_id = data.get("ref_id")
        if not ref_id:
            raise GatewayError("Référence de paiement absente de la réponse", detail=body)
        return PaymentVerifyResult(ref_id=str(ref_id), raw=body)

    def start_pay_url(self, authority: str) -> str:
        return f"{self.startpay_url}{authority}"

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
