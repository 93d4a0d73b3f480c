from __future__ import annotations


class IssuanceError(Exception):
    """Base error of the issuance service. `status_code` is the HTTP mapping."""
    status_code = 500
    default_message = "Erreur serveur."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(IssuanceError):
    status_code = 400
    default_message = "La durée de validité est requise."


class InternalError(IssuanceError):
    status_code = 500
    default_message = "Erreur serveur."


class ApiKeyError(IssuanceError):
    status_code = 401
    default_message = "Clé API invalide."
