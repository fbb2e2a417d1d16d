from dataclasses import dataclass
from pathlib import Path
import os
from dotenv import load_dotenv

from src.constants import (
    GEMINI_API_BASE,
    GEMINI_GENERATE_PATH,
    GEMINI_MODEL,
    GEMINI_MODELS_PATH,
    GEMINI_TIMEOUT,
)

DEFAULT_JOURNAL_PATH = ".meal_journal.json"


@dataclass(frozen=True)
class Config:
    telegram_bot_token: str
    allowed_chat_id: str
    log_level: str
    gemini_model: str
    gemini_api_base: str
    gemini_timeout: int
    journal_path: Path

    @classmethod
    def from_env(cls) -> "Config":
        load_dotenv()

        token = os.getenv("TELEGRAM_BOT_TOKEN")
        chat_id = os.getenv("ALLOWED_CHAT_ID")
        log_level = os.getenv("LOG_LEVEL", "INFO")
        model = os.getenv("GEMINI_MODEL") or GEMINI_MODEL
        api_base = os.getenv("GEMINI_API_BASE") or GEMINI_API_BASE
        timeout = os.getenv("GEMINI_TIMEOUT", str(GEMINI_TIMEOUT))
        journal_path = os.getenv("JOURNAL_PATH") or DEFAULT_JOURNAL_PATH

        return cls._validate(
            telegram_bot_token=token,
            allowed_chat_id=chat_id,
            log_level=log_level,
            gemini_model=model.strip(),
            gemini_api_base=api_base.strip().rstrip("/"),
            gemini_timeout=int(timeout),
            journal_path=Path(journal_path),
        )

    @staticmethod
    def _validate(
        telegram_bot_token: str | None,
        allowed_chat_id: str | None,
        log_level: str,
        gemini_model: str,
        gemini_api_base: str,
        gemini_timeout: int,
        journal_path: Path,
    ) -> "Config":
        match telegram_bot_token:
            case None | "":
                raise ValueError("TELEGRAM_BOT_TOKEN must be set in .env")
            case _:
                pass

        match allowed_chat_id:
            case None | "":
                raise ValueError("ALLOWED_CHAT_ID must be set in .env")
            case _:
                pass

        match gemini_timeout:
            case t if t <= 0:
                raise ValueError("GEMINI_TIMEOUT must be a positive number of seconds")
            case _:
                pass

        return Config(
            telegram_bot_token=telegram_bot_token,
            allowed_chat_id=allowed_chat_id,
            log_level=log_level,
            gemini_model=gemini_model,
            gemini_api_base=gemini_api_base,
            gemini_timeout=gemini_timeout,
            journal_path=journal_path,
        )

    @property
    def generate_endpoint(self) -> str:
        return self.gemini_api_base + GEMINI_GENERATE_PATH % self.gemini_model

    @property
    def models_endpoint(self) -> str:
        return self.gemini_api_base + GEMINI_MODELS_PATH
