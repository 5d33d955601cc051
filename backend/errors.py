# module backend.errors
"""
Taxonomie des erreurs applicatives.
Chaque erreur porte un message lisible, un code HTTP et un détail optionnel
(ex: réponse brute de la passerelle) rendu par les gestionnaires de app_setup.exceptions.
"""
from typing import Any, Optional


class AppError(Exception):
    """Base des erreurs applicatives."""

    status_code = 500
    default_message = "Erreur interne"

    def __init__(self, message: Optional[str] = None, detail: Any = None) -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        self.detail = detail


class ValidationError(AppError):
    status_code = 400
    default_message = "Données invalides"


class AmountMismatchError(ValidationError):
    default_message = "Le montant final ne correspond pas au panier"

    def __init__(self, declared_amount: Any, computed_amount: Any) -> None:
        super().__init__(
            detail={"declared_amount": declared_amount, "computed_amount": computed_amount}
        )
        self.declared_amount = declared_amount
        self.computed_amount = computed_amount


class NotFoundError(AppError):
    status_code = 404
    default_message = "Ressource introuvable"


class Unauthorized(AppError):
    status_code = 401
    default_message = "Non authentifié"


class ConflictError(AppError):
    status_code = 409
    default_message = "La ressource a été modifiée entre-temps, veuillez réessayer"


class GatewayError(AppError):
    """La passerelle a refusé la demande de paiement (code différent de 100)."""

    status_code = 500
    default_message = "Erreur de connexion à la passerelle de paiement"


class GatewayRejected(AppError):
    """La passerelle a refusé la vérification: paiement non abouti (issue terminale)."""

    status_code = 400
    default_message = "Paiement échoué"


class TransportError(AppError):
    """Échec réseau/timeout vers la passerelle ou le stockage (candidat au retry côté appelant)."""

    status_code = 500
    default_message = "Service externe injoignable"


class PersistenceError(AppError):
    status_code = 500
    default_message = "Erreur d'écriture en base"
