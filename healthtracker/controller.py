"""Controller wiring user input to validation, storage and rendering."""

import logging
from collections.abc import Mapping
from datetime import date
from typing import Any, Callable

from .entry import HealthEntry
from .render import MessageKind
from .sync import SubmitResult, SubmitStatus, SyncStore
from .validation import INVALID_FIELDS_MESSAGE, parse_form, validate

logger = logging.getLogger(__name__)

RenderCallback = Callable[[list[HealthEntry]], None]
NotifyCallback = Callable[[str, MessageKind], None]


class HealthTrackerController:
    """Handles submit and refresh events for the tracker.

    Every collaborator is injected: the sync store, a callback that
    renders the history, and a callback that shows user messages.
    Exceptions never escape the event handlers.
    """

    def __init__(
        self,
        store: SyncStore,
        render: RenderCallback,
        notify: NotifyCallback | None = None,
        today: Callable[[], date] = date.today,
    ):
        self.store = store
        self.render = render
        self.notify = notify or (lambda text, kind: None)
        self._today = today

    async def submit(self, form: Mapping[str, Any]) -> SubmitResult:
        """Validate and persist one form submission, then refresh.

        Args:
            form: Raw input keyed by camelCase field name.

        Returns:
            SubmitResult describing where the entry ended up.
        """
        try:
            candidate = parse_form(form, today=self._today())
            if not validate(candidate):
                self.notify(INVALID_FIELDS_MESSAGE, MessageKind.ERROR)
                return SubmitResult(status=SubmitStatus.INVALID, error=INVALID_FIELDS_MESSAGE)

            entry = HealthEntry.from_dict(candidate)
            result = await self.store.submit(entry)
        except Exception as e:
            logger.exception("Error submitting health data")
            self.notify(f"Error: {e}", MessageKind.ERROR)
            return SubmitResult(status=SubmitStatus.FAILED, error=str(e))

        if result.status == SubmitStatus.SAVED_REMOTE:
            self.notify("Health data logged to the remote sheet!", MessageKind.SUCCESS)
        elif result.status == SubmitStatus.SAVED_LOCAL:
            self.notify(
                f"Remote sheet unavailable ({result.error}). Using local storage.",
                MessageKind.WARNING,
            )
            self.notify("Health data saved locally!", MessageKind.SUCCESS)
        else:
            self.notify(f"Error: could not save entry ({result.error})", MessageKind.ERROR)
            return result

        await self.refresh()
        return result

    async def refresh(self) -> list[HealthEntry]:
        """Render cached entries right away, then the reconciled view.

        Returns:
            The entries rendered last.
        """
        try:
            local = self.store.load_local()
            self.render(local)

            merged = await self.store.load_all()
            if merged != local:
                self.render(merged)
            return merged
        except Exception:
            logger.exception("Error loading health data")
            self.notify("Error loading health data", MessageKind.ERROR)
            return []
