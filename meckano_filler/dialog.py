"""Opening the timesheet dialog and waiting for it to finish rendering."""

from __future__ import annotations

from enum import IntEnum, StrEnum
from typing import Optional

from . import CustomLogger, logger
from .clock import Clock, SystemClock
from .errors import TriggerNotFound
from .host import HostDocument, HostElement, is_shown, is_visible
from .models import FillerConfig, ReadinessReport


class Selector(StrEnum):
	"""CSS selectors for the reports page and its dialog."""

	TRIGGER = 'a.export.free-reporting.popup-container'
	DIALOG_ID = 'freeReporting-dialog'
	ATTENDANCE_VIEW = '.attendance-view'
	HOURS_TABLE = '.hours-report'
	TABLE_ROW = 'tr'
	TIME_INPUTS = 'input.checkIn, input.checkOut'
	CHECKIN = 'input.checkIn'
	CHECKOUT = 'input.checkOut'
	SUBMIT = '.save.button-refresh-data.update-freeReporting'
	DATE_CELL = 'td.date'
	DATE_TEXT = '.dateText'
	SPECIAL_DAY = '.specialDayDescription'
	ABSENCE_SELECT = 'td.missing select.select-box'


class Timing(IntEnum):
	"""Fixed settle delays (milliseconds)"""

	AFTER_TRIGGER = 100
	BETWEEN_FIELDS = 50
	BETWEEN_ROWS = 100
	AFTER_SUBMIT = 500


class Precondition(StrEnum):
	"""Readiness checks, coarse to fine, in the order they are evaluated."""

	DIALOG_PRESENT = 'Dialog not found'
	DIALOG_OPEN = 'Dialog not yet visible'
	ATTENDANCE_VIEW_PRESENT = 'Attendance view not found'
	ATTENDANCE_VIEW_VISIBLE = 'Attendance view not visible'
	TABLE_PRESENT = 'Time table not found'
	TIME_INPUTS_PRESENT = 'No time inputs found'
	SUBMIT_PRESENT = 'Submit button not found'


def find_dialog(document: HostDocument) -> Optional[HostElement]:
	"""Locate the dialog container, whether open or not."""
	return document.get_by_id(Selector.DIALOG_ID)


class DialogController:
	"""Handles the dialog that contains the timesheet form.

	The host renders the dialog asynchronously after the trigger is clicked,
	so readiness can only be established by polling its structure.
	"""

	def __init__(
		self,
		document: HostDocument,
		config: Optional[FillerConfig] = None,
		clock: Optional[Clock] = None,
		log: Optional[CustomLogger] = None,
	) -> None:
		self._document = document
		self._config = config or FillerConfig()
		self._clock = clock or SystemClock()
		self._log = log or logger

	def open(self) -> None:
		"""Click the dialog trigger.

		Returns shortly after the click; the dialog is usually not rendered
		yet. Use `wait_until_ready` afterwards.

		Raises:
			TriggerNotFound: If the page has no trigger element.
		"""
		self._log.debug('Looking for dialog trigger element...')
		trigger = self._document.query(Selector.TRIGGER)
		if trigger is None:
			raise TriggerNotFound()

		trigger.click()
		self._log.debug('Clicked dialog trigger element')
		self._clock.sleep(Timing.AFTER_TRIGGER)

	def wait_until_ready(
		self, max_attempts: Optional[int] = None, interval_ms: Optional[int] = None
	) -> ReadinessReport:
		"""Poll until the dialog is fully rendered or attempts run out.

		Any error raised while inspecting a half-rendered dialog counts as
		"not ready" for that attempt only.

		Args:
			max_attempts: Number of structural checks (default from config).
			interval_ms: Sleep between checks (default from config).

		Returns:
			A ready report on the first fully passing attempt, otherwise a
			not-ready report after the last attempt.
		"""
		if max_attempts is None:
			max_attempts = self._config.dialog_wait.max_attempts
		if interval_ms is None:
			interval_ms = self._config.dialog_wait.interval_ms

		self._log.debug(
			'Waiting for dialog to render (%d attempts, %dms delay)...', max_attempts, interval_ms
		)
		started = self._clock.monotonic()
		missing: Optional[str] = None

		for attempt in range(1, max_attempts + 1):
			try:
				missing, input_count = self._check_structure()
			except Exception as e:
				missing, input_count = f'Error while checking dialog: {e}', 0

			if missing is None:
				self._log.debug(
					'Dialog ready after %d attempts (%d time inputs)', attempt, input_count
				)
				return ReadinessReport(
					ready=True,
					attempts=attempt,
					input_count=input_count,
					elapsed_ms=self._elapsed_ms(started),
				)

			self._log.debug('Attempt %d/%d: %s', attempt, max_attempts, missing)
			if attempt < max_attempts:
				self._clock.sleep(interval_ms)

		self._log.debug('Dialog not ready after %d attempts', max_attempts)
		return ReadinessReport(
			ready=False,
			attempts=max_attempts,
			missing=missing,
			elapsed_ms=self._elapsed_ms(started),
		)

	def is_ready(self) -> bool:
		"""Single check that the dialog exists and is open. Never waits."""
		try:
			dialog = find_dialog(self._document)
			return dialog is not None and is_shown(dialog)
		except Exception as e:
			self._log.debug('Error checking dialog status: %s', e)
			return False

	def _check_structure(self) -> tuple[Optional[str], int]:
		"""Run the readiness checks in order.

		Returns:
			(first failing precondition or None, number of time inputs).
		"""
		dialog = find_dialog(self._document)
		if dialog is None:
			return Precondition.DIALOG_PRESENT, 0
		if not is_shown(dialog):
			return Precondition.DIALOG_OPEN, 0

		view = dialog.query(Selector.ATTENDANCE_VIEW)
		if view is None:
			return Precondition.ATTENDANCE_VIEW_PRESENT, 0
		if not is_visible(view):
			return Precondition.ATTENDANCE_VIEW_VISIBLE, 0

		table = view.query(Selector.HOURS_TABLE)
		if table is None:
			return Precondition.TABLE_PRESENT, 0

		inputs = table.query_all(Selector.TIME_INPUTS)
		if not inputs:
			return Precondition.TIME_INPUTS_PRESENT, 0

		if dialog.query(Selector.SUBMIT) is None:
			return Precondition.SUBMIT_PRESENT, len(inputs)

		return None, len(inputs)

	def _elapsed_ms(self, started: float) -> int:
		return round((self._clock.monotonic() - started) * 1000)
