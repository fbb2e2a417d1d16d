"""Typed failures of the meal-analysis pipeline.

Every error carries a human-readable message (``str(exc)``) that the chat
layer can show as-is. Only ProviderError with status 503 is ever retried, and
that happens inside the client; callers see each of these as terminal.
"""
from src.constants import (
    MSG_ERR_ENVELOPE,
    MSG_ERR_IMAGE,
    MSG_ERR_KEY_ENCODING,
    MSG_ERR_MISSING_KEY,
    MSG_ERR_MODEL_NOT_FOUND,
    MSG_ERR_PAYLOAD,
    MSG_ERR_PROVIDER,
)


class MealAnalysisError(Exception):
    pass


class ImageProcessingError(MealAnalysisError):
    def __init__(self, message: str = MSG_ERR_IMAGE) -> None:
        super().__init__(message)


class MissingCredentialError(MealAnalysisError):
    def __init__(self, message: str = MSG_ERR_MISSING_KEY) -> None:
        super().__init__(message)


class CredentialEncodingError(MealAnalysisError):
    def __init__(self, message: str = MSG_ERR_KEY_ENCODING) -> None:
        super().__init__(message)


class InvalidEndpointError(MealAnalysisError):
    pass


class TransportError(MealAnalysisError):
    pass


class ProviderError(MealAnalysisError):

    def __init__(self, status: int, body: str, message: str | None = None) -> None:
        self.status = status
        self.body = body
        super().__init__(message or MSG_ERR_PROVIDER % (status, body))


class ModelNotFoundError(ProviderError):

    def __init__(self, body: str, available: str) -> None:
        self.available = available
        super().__init__(404, body, MSG_ERR_MODEL_NOT_FOUND % available)


class MalformedEnvelopeError(MealAnalysisError):
    def __init__(self, message: str = MSG_ERR_ENVELOPE) -> None:
        super().__init__(message)


class MalformedPayloadError(MealAnalysisError):
    def __init__(self, message: str = MSG_ERR_PAYLOAD) -> None:
        super().__init__(message)
