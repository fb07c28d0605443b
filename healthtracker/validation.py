"""Validation of candidate entries before they are persisted."""

import math
from collections.abc import Mapping
from datetime import date
from typing import Any

from .entry import FIELD_NAMES, HealthEntry, parse_calendar_date

CALORIE_FIELDS = ("morningCalories", "lunchCalories", "dinnerCalories")

INVALID_FIELDS_MESSAGE = "Please fill in all fields with valid values"


def _is_number(value: Any) -> bool:
    # bool is an int subclass but never a valid measurement
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # int too large to convert to float
        return False


def validate(candidate: Mapping[str, Any] | HealthEntry) -> bool:
    """Check a candidate entry against the required-field and range rules.

    Args:
        candidate: A camelCase mapping (as built by ``parse_form`` or read
            from storage) or a HealthEntry.

    Returns:
        True if every rule passes, False at the first failing rule.
    """
    if isinstance(candidate, HealthEntry):
        candidate = candidate.to_dict()

    for name in FIELD_NAMES:
        if candidate.get(name) is None:
            return False

    weight = candidate["weight"]
    if not _is_number(weight) or weight <= 0:
        return False

    for name in CALORIE_FIELDS:
        value = candidate[name]
        if not _is_number(value) or value < 0:
            return False

    if parse_calendar_date(candidate["date"]) is None:
        return False

    return True


def _parse_float(text: Any) -> float | None:
    try:
        value = float(str(text).strip())
    except (TypeError, ValueError):
        return None
    return value if math.isfinite(value) else None


def _parse_int(text: Any) -> int | None:
    try:
        return int(str(text).strip())
    except (TypeError, ValueError):
        return None


def parse_form(form: Mapping[str, Any], today: date | None = None) -> dict[str, Any]:
    """Build a candidate entry from raw form input.

    Weight is parsed as a float and meal calories as integers. Values that
    fail to parse become None so that ``validate`` rejects them. A missing
    date defaults to today.

    Args:
        form: Raw input keyed by camelCase field name.
        today: Date to use when the form has no date.

    Returns:
        Candidate dictionary with the five entry fields.
    """
    raw_date = form.get("date")
    if raw_date is None or str(raw_date).strip() == "":
        raw_date = (today or date.today()).isoformat()

    return {
        "date": str(raw_date).strip(),
        "weight": _parse_float(form.get("weight")),
        "morningCalories": _parse_int(form.get("morningCalories")),
        "lunchCalories": _parse_int(form.get("lunchCalories")),
        "dinnerCalories": _parse_int(form.get("dinnerCalories")),
    }
