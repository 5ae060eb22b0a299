"""Field-level validation for car payloads.

Every rule is evaluated so a client gets the full list of problems in one
response. Optional fields are skipped when absent or null.
"""

import math
import re
from dataclasses import asdict, dataclass
from typing import Any, Callable
from urllib.parse import urlparse

from cars_api.config import settings

MIN_YEAR = 1886
MAX_YEAR = 2030

CAR_FIELDS = (
    "brand",
    "model",
    "year",
    "color",
    "price",
    "mileage",
    "description",
    "favorite",
    "category",
    "image_url",
)

# Range of an SQLite INTEGER column
SQLITE_INT_MIN = -(2**63)
SQLITE_INT_MAX = 2**63 - 1

_INT_RE = re.compile(r"[+-]?\d+")
_NUMBER_RE = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)")
_TRUE_VALUES = {"true", "1"}
_FALSE_VALUES = {"false", "0"}


def _as_sqlite_int(number: int) -> int | None:
    return number if SQLITE_INT_MIN <= number <= SQLITE_INT_MAX else None


def as_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return _as_sqlite_int(value)
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return _as_sqlite_int(int(value))
    if isinstance(value, str) and _INT_RE.fullmatch(value.strip()):
        try:
            return _as_sqlite_int(int(value.strip()))
        except ValueError:
            # Longer than the interpreter's int conversion limit
            return None
    return None


def as_number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = value
    elif isinstance(value, str) and _NUMBER_RE.fullmatch(value.strip()):
        number = value.strip()
    else:
        return None
    try:
        result = float(number)
    except OverflowError:
        return None
    return result if math.isfinite(result) else None


def as_bool(value: Any) -> bool | None:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
    return None


def _non_empty(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _is_string(value: Any) -> bool:
    return isinstance(value, str)


def _year_in_range(value: Any) -> bool:
    year = as_int(value)
    return year is not None and MIN_YEAR <= year <= MAX_YEAR


def _is_number(value: Any) -> bool:
    return as_number(value) is not None


def _non_negative_int(value: Any) -> bool:
    mileage = as_int(value)
    return mileage is not None and mileage >= 0


def _is_bool(value: Any) -> bool:
    return as_bool(value) is not None


def _is_image_reference(value: Any) -> bool:
    """Absolute http(s) URL, or a path under the upload mount."""
    if not isinstance(value, str) or not value or any(c.isspace() for c in value):
        return False
    if value.startswith(settings.upload_url_prefix.rstrip("/") + "/"):
        return True
    parsed = urlparse(value)
    host = parsed.hostname or ""
    return parsed.scheme in ("http", "https") and ("." in host or host == "localhost")


@dataclass(frozen=True)
class Rule:
    field: str
    check: Callable[[Any], bool]
    message: str
    optional: bool = False


@dataclass
class Violation:
    field: str
    message: str
    value: Any

    def as_dict(self) -> dict:
        return asdict(self)


CAR_RULES: tuple[Rule, ...] = (
    Rule("brand", _non_empty, "The brand is required."),
    Rule("model", _non_empty, "The model is required."),
    Rule(
        "year",
        _year_in_range,
        f"The year must be a whole number between {MIN_YEAR} and {MAX_YEAR} (e.g. 1995).",
    ),
    Rule("price", _is_number, "The price must be a number.", optional=True),
    Rule("mileage", _non_negative_int, "The mileage must be a positive whole number.", optional=True),
    Rule("color", _is_string, "The color must be a string.", optional=True),
    Rule("description", _is_string, "The description must be a string.", optional=True),
    Rule("favorite", _is_bool, 'The "favorite" field must be a boolean (true/false or 0/1).', optional=True),
    Rule("category", _is_string, "The category must be a string.", optional=True),
    Rule("image_url", _is_image_reference, "The image URL is not valid.", optional=True),
)


def validate_car(payload: dict, rules: tuple[Rule, ...] = CAR_RULES) -> list[Violation]:
    violations = []
    for rule in rules:
        value = payload.get(rule.field)
        if value is None and rule.optional:
            continue
        if not rule.check(value):
            violations.append(Violation(rule.field, rule.message, value))
    return violations


def normalize_car(payload: dict) -> dict:
    """Map a payload that passed validate_car() onto the stored column values."""
    car = {field: payload.get(field) for field in CAR_FIELDS}
    car["brand"] = car["brand"].strip()
    car["model"] = car["model"].strip()
    car["year"] = as_int(car["year"])
    if car["price"] is not None:
        car["price"] = as_number(car["price"])
    if car["mileage"] is not None:
        car["mileage"] = as_int(car["mileage"])
    car["favorite"] = bool(as_bool(car["favorite"])) if car["favorite"] is not None else False
    return car
