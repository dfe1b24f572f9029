"""
Interactive range selection on the special-dates calendar.

Two input styles exist. On wide screens the owner drags across the calendar
(pointer down, move, up). On narrow screens the owner taps a start day, taps
an end day and confirms. Both end in the same commit step: the normalized
range is checked against the store and, if it does not overlap anything, is
stored with the armed edit mode as its tag.

Rejected selections (past start, overlap) change nothing and raise nothing.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Callable, List, Optional

import pendulum
from pendulum import Date

from .models import DateRange, DateRangeRecord, EditMode
from .overlap import is_overlapping
from .special_dates import SpecialDateRangeStore

logger = logging.getLogger(__name__)

DEFAULT_MOBILE_BREAKPOINT = 768

CommitListener = Callable[[DateRangeRecord], None]
ChangeListener = Callable[["RangeSelectionController"], None]
TodayProvider = Callable[[], Date]


def _today() -> Date:
    return pendulum.today().date()


class InputModality(str, Enum):
    """How the owner selects ranges; fixed for the whole editing session."""
    DESKTOP = "desktop"
    MOBILE = "mobile"

    @classmethod
    def for_viewport(cls, width_px: int, breakpoint_px: int = DEFAULT_MOBILE_BREAKPOINT) -> "InputModality":
        return cls.MOBILE if width_px < breakpoint_px else cls.DESKTOP


class MobileStep(str, Enum):
    WAITING_START = "waiting_start"
    WAITING_END = "waiting_end"
    AWAITING_CONFIRM = "awaiting_confirm"


class RangeSelectionController(ABC):
    """
    Common part of both selection styles: edit mode, commit and removal.

    Listeners:
        on_commit: called with each record that was stored
        on_change: called with the controller after every committed mutation
            of the store (commit or removal)
    """

    modality: InputModality

    def __init__(
        self,
        store: SpecialDateRangeStore,
        edit_mode: EditMode = EditMode.REGULAR,
        today: Optional[TodayProvider] = None,
        on_commit: Optional[CommitListener] = None,
        on_change: Optional[ChangeListener] = None,
    ) -> None:
        self._store = store
        self._edit_mode = EditMode(edit_mode)
        self._today = today or _today
        self._commit_listeners: List[CommitListener] = []
        self._change_listeners: List[ChangeListener] = []
        if on_commit:
            self._commit_listeners.append(on_commit)
        if on_change:
            self._change_listeners.append(on_change)

    @property
    def store(self) -> SpecialDateRangeStore:
        return self._store

    @property
    def edit_mode(self) -> EditMode:
        return self._edit_mode

    @edit_mode.setter
    def edit_mode(self, mode: EditMode) -> None:
        self._edit_mode = EditMode(mode)

    def add_commit_listener(self, listener: CommitListener) -> None:
        self._commit_listeners.append(listener)

    def add_change_listener(self, listener: ChangeListener) -> None:
        self._change_listeners.append(listener)

    @abstractmethod
    def preview_range(self) -> Optional[DateRange]:
        """Range currently highlighted, before it is committed."""

    @abstractmethod
    def cancel(self) -> None:
        """Drop any pending selection without committing it."""

    def remove(self, record: DateRangeRecord) -> bool:
        """
        Delete a stored range by its start date.

        Pending selection state is left as it is.

        Returns:
            True if a record was removed
        """
        removed = self._store.remove(record.start_date)
        if removed is None:
            return False

        logger.info("Removed special date range %s", removed)
        self._notify_change()
        return True

    def _is_past(self, date: Date) -> bool:
        return date < self._today()

    def _complete_selection(self, first: Date, second: Date) -> Optional[DateRangeRecord]:
        """
        Normalize, validate and store a finished selection.

        Returns:
            The stored record, or None when the selection was discarded
        """
        candidate = DateRange.normalized(first, second)

        range_type = self._edit_mode.range_type
        if range_type is None:
            logger.debug("Discarding %s, no tag armed (regular mode)", candidate)
            return None

        if is_overlapping(candidate, self._store.list()):
            logger.debug("Discarding %s, overlaps an existing range", candidate)
            return None

        record = DateRangeRecord.from_range(candidate, range_type)
        self._store.put(record)
        logger.info("Committed special date range %s", record)

        for listener in self._commit_listeners:
            listener(record)
        self._notify_change()
        return record

    def _notify_change(self) -> None:
        for listener in self._change_listeners:
            listener(self)


class DesktopRangeSelector(RangeSelectionController):
    """
    Drag selection: Idle -> Dragging -> Idle.

    ``handle_pointer_up`` is also what a pointer leaving the calendar or a
    release anywhere on the page should call, so a drag that ends outside the
    grid still resolves.
    """

    modality = InputModality.DESKTOP

    def __init__(self, store: SpecialDateRangeStore, **kwargs) -> None:
        super().__init__(store, **kwargs)
        self._dragging = False
        self._anchor: Optional[Date] = None
        self._cursor: Optional[Date] = None

    @property
    def dragging(self) -> bool:
        return self._dragging

    @property
    def anchor(self) -> Optional[Date]:
        return self._anchor

    @property
    def cursor(self) -> Optional[Date]:
        return self._cursor

    def handle_pointer_down(self, date: Optional[Date]) -> bool:
        """
        Start a drag on a day.

        Returns:
            True if a drag started; False for empty cells and past days
        """
        if date is None or self._is_past(date):
            return False

        self._dragging = True
        self._anchor = date
        self._cursor = date
        return True

    def handle_pointer_move(self, date: Optional[Date]) -> None:
        if self._dragging and date is not None:
            self._cursor = date

    def handle_pointer_up(self) -> Optional[DateRangeRecord]:
        """Finish the drag and try to commit the dragged range."""
        record = None
        if self._dragging and self._anchor is not None and self._cursor is not None:
            record = self._complete_selection(self._anchor, self._cursor)
        self._reset()
        return record

    # Leaving the calendar container ends the drag the same way.
    handle_pointer_leave = handle_pointer_up

    def preview_range(self) -> Optional[DateRange]:
        if not self._dragging or self._anchor is None or self._cursor is None:
            return None
        return DateRange.normalized(self._anchor, self._cursor)

    def cancel(self) -> None:
        self._reset()

    def _reset(self) -> None:
        self._dragging = False
        self._anchor = None
        self._cursor = None


class MobileRangeSelector(RangeSelectionController):
    """
    Two-tap selection: WaitingStart -> WaitingEnd -> AwaitingConfirm.

    A third tap while awaiting confirmation abandons the pending pair and
    starts over from the tapped day.
    """

    modality = InputModality.MOBILE

    def __init__(self, store: SpecialDateRangeStore, **kwargs) -> None:
        super().__init__(store, **kwargs)
        self._start: Optional[Date] = None
        self._end: Optional[Date] = None
        self._awaiting_confirm = False

    @property
    def start(self) -> Optional[Date]:
        return self._start

    @property
    def end(self) -> Optional[Date]:
        return self._end

    @property
    def awaiting_confirm(self) -> bool:
        return self._awaiting_confirm

    @property
    def step(self) -> MobileStep:
        if self._awaiting_confirm:
            return MobileStep.AWAITING_CONFIRM
        if self._start is not None:
            return MobileStep.WAITING_END
        return MobileStep.WAITING_START

    def handle_tap(self, date: Optional[Date]) -> MobileStep:
        """Feed a tapped day into the selection and return the new step."""
        if date is None or self._is_past(date):
            return self.step

        if self._start is None:
            self._start = date
        elif self._end is None:
            if date < self._start:
                self._start, self._end = date, self._start
            else:
                self._end = date
            self._awaiting_confirm = True
        else:
            logger.debug("Abandoning pending selection %s - %s", self._start, self._end)
            self._start = date
            self._end = None
            self._awaiting_confirm = False

        return self.step

    def confirm(self) -> Optional[DateRangeRecord]:
        """Commit the pending pair, if there is one, and start over."""
        if not self._awaiting_confirm or self._start is None or self._end is None:
            return None

        record = self._complete_selection(self._start, self._end)
        self._reset()
        return record

    def preview_range(self) -> Optional[DateRange]:
        if self._start is None:
            return None
        return DateRange.normalized(self._start, self._end or self._start)

    def cancel(self) -> None:
        self._reset()

    def _reset(self) -> None:
        self._start = None
        self._end = None
        self._awaiting_confirm = False


def create_controller(
    modality: InputModality,
    store: SpecialDateRangeStore,
    **kwargs,
) -> RangeSelectionController:
    """Build the selection controller for the session's input modality."""
    if InputModality(modality) is InputModality.MOBILE:
        return MobileRangeSelector(store, **kwargs)
    return DesktopRangeSelector(store, **kwargs)
