"""CredentialSource — where the Gemini API key comes from, read once per request."""
import os
from abc import ABC, abstractmethod

from dotenv import load_dotenv

from src.constants import CREDENTIAL_ENV_VAR, CREDENTIAL_PLACEHOLDER


class CredentialSource(ABC):
    @abstractmethod
    def get(self) -> str | None:
        """Return the raw API key, or None when nothing is configured."""
        ...


class EnvCredentialSource(CredentialSource):
    """Reads the key from the environment (and .env) on every call."""

    def __init__(self, var: str = CREDENTIAL_ENV_VAR) -> None:
        self._var = var
        load_dotenv()

    def get(self) -> str | None:
        return os.getenv(self._var)


class StaticCredentialSource(CredentialSource):

    def __init__(self, value: str | None) -> None:
        self._value = value

    def get(self) -> str | None:
        return self._value


def is_configured(credential: str | None) -> bool:
    match (credential or "").strip():
        case "":
            return False
        case key if key == CREDENTIAL_PLACEHOLDER:
            return False
        case _:
            return True
