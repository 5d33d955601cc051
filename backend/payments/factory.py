from backend.config import Settings
from .gateway import PaymentGateway
from .fake_gateway import FakeGateway
from .zarinpal_client import ZarinpalGateway


def build_payment_gateway(settings: Settings) -> PaymentGateway:
    """Sélectionne l'adaptateur via PAYMENT_GATEWAY (zarinpal | fake)."""
    mode = settings.payment_gateway
    if mode == "zarinpal":
        return ZarinpalGateway.from_settings(settings)
    if mode == "fake":
        return FakeGateway()
    raise ValueError(f"PAYMENT_GATEWAY inconnu: {mode!r} (attendu: zarinpal ou fake)")
