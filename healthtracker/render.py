"""Text rendering of the entry history."""

from enum import Enum

from .entry import HealthEntry

EMPTY_HISTORY_MESSAGE = "No data logged yet. Start by logging your first entry!"

HEADERS = ("Date", "Weight", "Morning", "Lunch", "Dinner", "Total")


class MessageKind(Enum):
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


def format_date(entry: HealthEntry) -> str:
    """Format the entry date like 'Jan 5, 2024'."""
    day = entry.day
    return f"{day:%b} {day.day}, {day.year}"


def format_row(entry: HealthEntry) -> tuple[str, ...]:
    return (
        format_date(entry),
        f"{entry.weight:g} kg",
        f"{entry.morning_calories} cal",
        f"{entry.lunch_calories} cal",
        f"{entry.dinner_calories} cal",
        f"{entry.total_calories} cal",
    )


def render_table(entries: list[HealthEntry]) -> str:
    """Render entries as an aligned text table.

    Entries are shown in the order given; callers sort them for display.
    """
    if not entries:
        return EMPTY_HISTORY_MESSAGE

    rows = [HEADERS, *(format_row(e) for e in entries)]
    widths = [max(len(row[i]) for row in rows) for i in range(len(HEADERS))]

    lines = []
    for index, row in enumerate(rows):
        lines.append("  ".join(cell.ljust(width) for cell, width in zip(row, widths)).rstrip())
        if index == 0:
            lines.append("  ".join("-" * width for width in widths))
    return "\n".join(lines)


def format_message(text: str, kind: MessageKind) -> str:
    prefix = {
        MessageKind.SUCCESS: "OK",
        MessageKind.WARNING: "WARNING",
        MessageKind.ERROR: "ERROR",
    }[kind]
    return f"[{prefix}] {text}"
