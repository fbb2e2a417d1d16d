import json
import logging
import uuid
from datetime import date, datetime, timezone, tzinfo
from itertools import groupby
from pathlib import Path

from src.config import DEFAULT_JOURNAL_PATH
from src.constants import MSG_JOURNAL_LOAD_FAILED, MSG_JOURNAL_SAVE_FAILED
from src.meal import JournalEntry, MealAnalysis, MealValidationError

logger = logging.getLogger(__name__)


class MealJournalStore:
    """Saved meals, persisted as a JSON list after every change."""

    def __init__(self, path: Path = Path(DEFAULT_JOURNAL_PATH)) -> None:
        self._path = path
        self._entries: dict[str, JournalEntry] = {}
        self._load()

    def _load(self) -> None:
        match self._path.exists():
            case True:
                try:
                    with open(self._path) as f:
                        raw = json.load(f)
                    entries = map(JournalEntry.from_dict, raw)
                    self._entries = {e.id: e for e in entries}
                except (OSError, ValueError, KeyError, TypeError, MealValidationError) as e:
                    logger.warning(MSG_JOURNAL_LOAD_FAILED, e)
            case False:
                pass

    def _save(self) -> None:
        try:
            with open(self._path, "w") as f:
                json.dump([e.to_dict() for e in self._entries.values()], f, indent=2)
        except OSError as e:
            logger.warning(MSG_JOURNAL_SAVE_FAILED, e)

    def add(self, analysis: MealAnalysis, timestamp: datetime | None = None) -> JournalEntry:
        entry = JournalEntry(
            id=uuid.uuid4().hex,
            timestamp=timestamp or datetime.now(timezone.utc),
            analysis=analysis,
        )
        self._entries[entry.id] = entry
        self._save()
        return entry

    def get(self, entry_id: str) -> JournalEntry | None:
        return self._entries.get(entry_id)

    def entries(self) -> list[JournalEntry]:
        """Newest first."""
        return sorted(self._entries.values(), key=lambda e: e.timestamp, reverse=True)

    def delete(self, entry_id: str) -> bool:
        match self._entries.pop(entry_id, None):
            case None:
                return False
            case _:
                self._save()
                return True

    def grouped_by_day(self, tz: tzinfo | None = None) -> list[tuple[date, list[JournalEntry]]]:
        """Entries bucketed by calendar day in ``tz`` (local time by default), newest day first."""
        return [
            (day, list(group))
            for day, group in groupby(self.entries(), key=lambda e: e.timestamp.astimezone(tz).date())
        ]
