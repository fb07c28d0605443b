"""Daily health entry model and its wire format."""

from dataclasses import dataclass
from datetime import date, datetime, tzinfo
from typing import Any

# camelCase keys used by the remote endpoint and the local cache
FIELD_NAMES = (
    "date",
    "weight",
    "morningCalories",
    "lunchCalories",
    "dinnerCalories",
)


def parse_calendar_date(value: Any, tz: tzinfo | None = None) -> date | None:
    """Parse a calendar date from an ISO string or date object.

    Full timestamps (as spreadsheet date cells come back over JSON) are
    reduced to their date part. Timestamps carrying an offset are first
    converted to ``tz``, the timezone the sheet records days in; with no
    ``tz`` the local timezone of this machine is used.

    Returns:
        The parsed date, or None if the value is not a valid date.
    """
    if isinstance(value, datetime):
        return _wall_date(value, tz)
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    try:
        return date.fromisoformat(text)
    except ValueError:
        pass

    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return _wall_date(datetime.fromisoformat(text), tz)
    except ValueError:
        return None


def _wall_date(moment: datetime, tz: tzinfo | None) -> date:
    if moment.tzinfo is None:
        return moment.date()
    return moment.astimezone(tz).date()


@dataclass
class HealthEntry:
    """One day's logged weight and meal calories."""

    date: str  # ISO calendar date, unique per logical day
    weight: float  # kg
    morning_calories: int
    lunch_calories: int
    dinner_calories: int

    @property
    def total_calories(self) -> int:
        """Sum of the three meal calorie values."""
        return self.morning_calories + self.lunch_calories + self.dinner_calories

    @property
    def day(self) -> date:
        """The entry date as a date object."""
        return date.fromisoformat(self.date)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the camelCase dictionary used on the wire."""
        return {
            "date": self.date,
            "weight": self.weight,
            "morningCalories": self.morning_calories,
            "lunchCalories": self.lunch_calories,
            "dinnerCalories": self.dinner_calories,
        }

    @classmethod
    def from_dict(
        cls, data: dict[str, Any], tz: tzinfo | None = None
    ) -> "HealthEntry":
        """Create from a camelCase dictionary.

        Any ``totalCalories`` value in the data is ignored; the total is
        always derived from the meal values.

        Args:
            data: camelCase entry fields.
            tz: Timezone used to reduce timestamp dates to a calendar day.

        Raises:
            KeyError: If a required field is missing.
            ValueError: If the date cannot be parsed.
        """
        day = parse_calendar_date(data["date"], tz)
        if day is None:
            raise ValueError(f"Invalid entry date: {data['date']!r}")

        return cls(
            date=day.isoformat(),
            weight=data["weight"],
            morning_calories=data["morningCalories"],
            lunch_calories=data["lunchCalories"],
            dinner_calories=data["dinnerCalories"],
        )
