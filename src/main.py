"""Entry point — wires Config → GeminiVisionClient + MealJournalStore → TelegramClient."""
import logging

from rich.logging import RichHandler

from src.config import Config
from src.constants import MSG_BOT_STARTING
from src.credentials import EnvCredentialSource
from src.journal_store import MealJournalStore
from src.telegram.client import TelegramClient
from src.vision.gemini import GeminiVisionClient


def _setup_logging(level: str) -> None:
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    list(map(root.removeHandler, root.handlers[:]))
    root.addHandler(RichHandler(rich_tracebacks=True))
    # httpx logs every request URL at INFO, and the URL carries the API key
    logging.getLogger("httpx").setLevel(logging.WARNING)


def main() -> None:
    config = Config.from_env()
    _setup_logging(config.log_level)

    logger = logging.getLogger(__name__)
    logger.info(MSG_BOT_STARTING)

    vision = GeminiVisionClient(
        EnvCredentialSource(),
        generate_endpoint=config.generate_endpoint,
        models_endpoint=config.models_endpoint,
        timeout=config.gemini_timeout,
    )
    journal = MealJournalStore(config.journal_path)
    client = TelegramClient(config, vision_client=vision, journal=journal)
    client.run()


if __name__ == "__main__":
    main()
