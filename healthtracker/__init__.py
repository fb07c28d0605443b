"""Daily weight and meal-calorie tracker with a remote sheet and local fallback."""

from .entry import HealthEntry
from .validation import parse_form, validate

__version__ = "0.1.0"

__all__ = ["HealthEntry", "parse_form", "validate"]
