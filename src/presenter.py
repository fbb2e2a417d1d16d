"""Chat-facing text for analyses and the journal — pure functions, no I/O."""
from datetime import date

from src.constants import (
    JOURNAL_DAY_FORMAT,
    MARK_ALCOHOL,
    MARK_WARNING,
    MSG_ALCOHOL,
    MSG_CHOLESTEROL,
    MSG_JOURNAL_EMPTY,
    MSG_JOURNAL_HEADER,
    MSG_JOURNAL_ROW,
    MSG_MACROS,
    MSG_WARNING,
)
from src.meal import JournalEntry, MealAnalysis

DayGroups = list[tuple[date, list[JournalEntry]]]


def format_analysis(analysis: MealAnalysis) -> str:
    lines = [
        analysis.name,
        MSG_MACROS % (analysis.calories, analysis.protein, analysis.carbs, analysis.fat),
        MSG_CHOLESTEROL % analysis.cholesterol.value,
    ]
    if analysis.is_alcoholic:
        lines.append(MSG_ALCOHOL)
    lines += [MSG_WARNING % w for w in analysis.warnings]
    return "\n".join(lines)


def _row(number: int, entry: JournalEntry) -> str:
    a = entry.analysis
    marks = (MARK_ALCOHOL if a.is_alcoholic else "") + (MARK_WARNING if a.warnings else "")
    return MSG_JOURNAL_ROW % (number, a.name, a.calories, a.protein, a.carbs, a.fat, marks)


def format_journal(groups: DayGroups) -> str:
    """Day sections newest first; rows are numbered across the whole list for /delete."""
    match groups:
        case []:
            return MSG_JOURNAL_EMPTY
        case _:
            pass
    lines = [MSG_JOURNAL_HEADER]
    number = 0
    for day, entries in groups:
        lines += ["", day.strftime(JOURNAL_DAY_FORMAT)]
        for entry in entries:
            number += 1
            lines.append(_row(number, entry))
    return "\n".join(lines)


def resolve_entry_number(groups: DayGroups, number: int) -> JournalEntry | None:
    """Map a 1-based row number from format_journal back to its entry."""
    flat = [entry for _, entries in groups for entry in entries]
    match number:
        case n if 1 <= n <= len(flat):
            return flat[n - 1]
        case _:
            return None
