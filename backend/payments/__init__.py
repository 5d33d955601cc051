"""
Module 'payments' (feature-first): point d'entrée public.
Réunit le contrat de passerelle, l'adaptateur Zarinpal, la passerelle simulée et la factory.
"""

from .gateway import SUCCESS_CODE, PaymentGateway, PaymentRequestResult, PaymentVerifyResult
from .zarinpal_client import ZarinpalGateway, response_code
from .fake_gateway import FakeGateway
from .factory import build_payment_gateway

__all__ = [
    # contrat
    "SUCCESS_CODE",
    "PaymentGateway",
    "PaymentRequestResult",
    "PaymentVerifyResult",
    # adaptateurs
    "ZarinpalGateway",
    "response_code",
    "FakeGateway",
    # factory
    "build_payment_gateway",
]
