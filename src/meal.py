"""Meal domain types — the validated analysis record and saved journal entries."""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any


class Cholesterol(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class MealValidationError(ValueError):
    """Raised by MealAnalysis.from_dict when a field breaks the schema."""


_MACRO_FIELDS = ("calories", "protein", "carbs", "fat")


def _as_count(key: str, value: Any) -> int:
    # bool is an int subclass, so it has to be rejected before the int case
    match value:
        case bool():
            raise MealValidationError(f"'{key}' must be an integer, got a boolean")
        case int() if value >= 0:
            return value
        case float() if value.is_integer() and value >= 0:
            return int(value)
        case int() | float():
            raise MealValidationError(f"'{key}' must be a non-negative integer, got {value!r}")
        case _:
            raise MealValidationError(f"'{key}' must be an integer, got {type(value).__name__}")


def _as_warnings(value: Any) -> tuple[str, ...]:
    match value:
        case None:
            return ()
        case list() if all(isinstance(w, str) for w in value):
            return tuple(value)
        case _:
            raise MealValidationError("'warnings' must be a list of strings or null")


@dataclass(frozen=True)
class MealAnalysis:
    name: str
    calories: int
    protein: int
    carbs: int
    fat: int
    cholesterol: Cholesterol
    is_alcoholic: bool
    warnings: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Any) -> "MealAnalysis":
        """Validate a decoded JSON object against the analysis schema.

        All-or-nothing: any missing key, wrong type, negative count or
        cholesterol value other than exactly "Low", "Medium" or "High"
        raises MealValidationError and no record is built.
        """
        match data:
            case dict():
                pass
            case _:
                raise MealValidationError(f"expected a JSON object, got {type(data).__name__}")

        missing = [k for k in ("name", *_MACRO_FIELDS, "cholesterol", "isAlcoholic") if k not in data]
        match missing:
            case []:
                pass
            case keys:
                raise MealValidationError(f"missing field(s): {', '.join(keys)}")

        match data["name"]:
            case str() as name:
                pass
            case other:
                raise MealValidationError(f"'name' must be a string, got {type(other).__name__}")

        counts = {key: _as_count(key, data[key]) for key in _MACRO_FIELDS}

        try:
            cholesterol = Cholesterol(data["cholesterol"])
        except ValueError:
            raise MealValidationError(
                f"'cholesterol' must be one of Low, Medium, High, got {data['cholesterol']!r}"
            ) from None

        match data["isAlcoholic"]:
            case bool() as is_alcoholic:
                pass
            case other:
                raise MealValidationError(f"'isAlcoholic' must be a boolean, got {type(other).__name__}")

        return cls(
            name=name,
            cholesterol=cholesterol,
            is_alcoholic=is_alcoholic,
            warnings=_as_warnings(data.get("warnings")),
            **counts,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "calories": self.calories,
            "protein": self.protein,
            "carbs": self.carbs,
            "fat": self.fat,
            "cholesterol": self.cholesterol.value,
            "isAlcoholic": self.is_alcoholic,
            "warnings": list(self.warnings),
        }


@dataclass(frozen=True)
class JournalEntry:
    id: str
    timestamp: datetime
    analysis: MealAnalysis

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "timestamp": self.timestamp.isoformat(), **self.analysis.to_dict()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "JournalEntry":
        timestamp = datetime.fromisoformat(data["timestamp"])
        match timestamp.utcoffset():
            case None:
                raise MealValidationError(f"'timestamp' has no UTC offset: {data['timestamp']!r}")
            case _:
                pass
        return cls(
            id=data["id"],
            timestamp=timestamp,
            analysis=MealAnalysis.from_dict(data),
        )
