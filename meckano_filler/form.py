"""Filling the hours table and submitting the timesheet dialog."""

from __future__ import annotations

import re
from datetime import date
from typing import Optional

from . import CustomLogger, logger
from .classifier import RowClassifier
from .clock import Clock, SystemClock
from .dialog import Selector, Timing, find_dialog
from .errors import DialogNotFound, NoTimeData, RowParseFailure, SubmitDisabled, SubmitNotFound
from .host import HostDocument, HostElement, is_shown
from .models import (
	CalendarRowInfo,
	FillCounts,
	FillerConfig,
	FillPassResult,
	RowOutcome,
	RowStatus,
	SubmissionResult,
	format_time,
)
from .time_data import TimeDataSource
from .vocabulary import AbsenceCodes, HebrewWeekdays, SkipReason

# "25/08/2025 ב" - date followed by a single Hebrew weekday letter
DATE_TEXT_PATTERN = re.compile(r'(\d{2})/(\d{2})/(\d{4})\s*([א-ת])')

# Events the host listens to for edits made in its inputs
CHANGE_EVENTS = ('input', 'change')


def parse_row(row: HostElement) -> CalendarRowInfo:
	"""Parse the date cell, special-day text and absence code of a row.

	Raises:
		RowParseFailure: If the row has no recognisable date.
	"""
	date_cell = row.query(Selector.DATE_CELL)
	if date_cell is None:
		raise RowParseFailure('No date cell')

	date_span = date_cell.query(Selector.DATE_TEXT)
	if date_span is None:
		raise RowParseFailure('No date text')

	full_text = date_span.text().strip()
	if not (match := DATE_TEXT_PATTERN.search(full_text)):
		raise RowParseFailure(f"Unexpected date text '{full_text}'")

	day, month, year, weekday = match.groups()
	try:
		row_date = date(int(year), int(month), int(day))
	except ValueError as e:
		raise RowParseFailure(f"Invalid date '{full_text}': {e}") from e

	special_span = date_cell.query(Selector.SPECIAL_DAY)
	special_text = special_span.text().strip() if special_span else ''

	absence_select = row.query(Selector.ABSENCE_SELECT)
	absence_value = absence_select.value().strip() if absence_select else ''
	absence_code = absence_value if absence_value not in ('', AbsenceCodes.NONE) else None

	return CalendarRowInfo(
		date=row_date,
		weekday=weekday,
		special_text=special_text,
		absence_code=absence_code,
		full_text=full_text,
	)


def is_filled(field: Optional[HostElement]) -> bool:
	"""Whether an input exists and holds a non-blank value."""
	return field is not None and field.value().strip() != ''


class FormFiller:
	"""Fills empty time inputs of working days and submits the dialog.

	Rows are processed one at a time in document order. A field that
	already holds a value is never written, so running the filler again on
	the same sheet changes nothing.
	"""

	def __init__(
		self,
		document: HostDocument,
		config: Optional[FillerConfig] = None,
		clock: Optional[Clock] = None,
		classifier: Optional[RowClassifier] = None,
		log: Optional[CustomLogger] = None,
	) -> None:
		self._document = document
		self._config = config or FillerConfig()
		self._clock = clock or SystemClock()
		self._classifier = classifier or RowClassifier(self._config)
		self._log = log or logger

	def fill_all(self, source: TimeDataSource, dry_run: bool = False) -> FillPassResult:
		"""Fill every data row of the hours table.

		Args:
			source: Provides the times for each working day.
			dry_run: If True, decide what to write but leave the page untouched.

		Returns:
			Pass result; `success` is False only if the dialog or table is missing.
		"""
		dialog = find_dialog(self._document)
		if dialog is None:
			return FillPassResult(success=False, error='Dialog not found')

		table = dialog.query(Selector.HOURS_TABLE)
		if table is None:
			return FillPassResult(success=False, error='Time table not found in dialog')

		# First row is the header
		rows = table.query_all(Selector.TABLE_ROW)[1:]
		self._log.debug('Found %d date rows to process', len(rows))
		return self.fill_rows(rows, source, dry_run=dry_run)

	def fill_rows(
		self, rows: list[HostElement], source: TimeDataSource, dry_run: bool = False
	) -> FillPassResult:
		"""Process the given rows in order. A failing row never stops the pass."""
		outcomes: list[RowOutcome] = []

		for index, row in enumerate(rows):
			try:
				outcome = self._fill_row(index, row, source, dry_run)
			except Exception as e:
				self._log.error('Error processing row %d: %s', index, e)
				outcome = RowOutcome(index=index, status=RowStatus.ERROR, detail=str(e))
			outcomes.append(outcome)

			if outcome.written and not dry_run:
				self._clock.sleep(Timing.BETWEEN_ROWS)

		counts = FillCounts.from_outcomes(outcomes)
		self._log.debug(
			'Form filling complete: %d filled, %d skipped, %d errors',
			counts.filled,
			counts.skipped,
			counts.errors,
		)
		return FillPassResult(success=True, counts=counts, outcomes=outcomes)

	def submit_and_confirm(self) -> SubmissionResult:
		"""Click the dialog's submit button and wait for the dialog to close.

		Returns:
			Result with `closed=False` if the host kept the dialog open.

		Raises:
			DialogNotFound: If the dialog is gone before submitting.
			SubmitNotFound: If the dialog has no submit button.
			SubmitDisabled: If the submit button is disabled (it is not clicked).
		"""
		dialog = find_dialog(self._document)
		if dialog is None:
			raise DialogNotFound()

		button = dialog.query(Selector.SUBMIT)
		if button is None:
			raise SubmitNotFound()
		if button.is_disabled():
			raise SubmitDisabled()

		button.click()
		self._log.debug('Clicked submit button')
		self._clock.sleep(Timing.AFTER_SUBMIT)

		return self._wait_for_close()

	def _fill_row(
		self, index: int, row: HostElement, source: TimeDataSource, dry_run: bool
	) -> RowOutcome:
		try:
			info = parse_row(row)
		except RowParseFailure as e:
			self._log.debug('Skipping row %d - %s', index, e)
			return RowOutcome(index=index, status=RowStatus.SKIPPED, detail=SkipReason.UNPARSABLE)

		verdict = self._classifier.classify(info)
		if not verdict.is_work:
			reason = verdict.skip_reason or ''
			if reason == SkipReason.WEEKEND:
				self._log.debug(
					'⏭ %s - Weekend (%s)', info.label, HebrewWeekdays.describe(info.weekday)
				)
			else:
				self._log.debug('⏭ %s - %s', info.label, reason)
			return RowOutcome(index=index, status=RowStatus.SKIPPED, row=info, detail=reason)

		checkin = row.query(Selector.CHECKIN)
		checkout = row.query(Selector.CHECKOUT)
		if is_filled(checkin) and is_filled(checkout):
			self._log.debug('⏭ %s - already complete', info.label)
			return RowOutcome(
				index=index, status=RowStatus.SKIPPED, row=info, detail=SkipReason.ALREADY_COMPLETE
			)

		if checkin is None or checkout is None:
			return RowOutcome(
				index=index,
				status=RowStatus.ERROR,
				row=info,
				detail=f'Missing time inputs for {info.label}',
			)

		window = source.get_time_data(info.date)
		if window is None:
			error = NoTimeData(f'No time data available for {info.label}')
			self._log.warning('%s', error)
			return RowOutcome(index=index, status=RowStatus.ERROR, row=info, detail=str(error))

		written: list[str] = []
		if self._write_if_empty(checkin, format_time(window.checkin), dry_run):
			written.append(f'check-in {format_time(window.checkin)}')
			if not dry_run:
				self._clock.sleep(Timing.BETWEEN_FIELDS)
		if self._write_if_empty(checkout, format_time(window.checkout), dry_run):
			written.append(f'check-out {format_time(window.checkout)}')

		if written:
			self._log.debug(
				'📝 %s: %s%s', info.label, ', '.join(written), ' (dry run)' if dry_run else ''
			)
		return RowOutcome(
			index=index,
			status=RowStatus.FILLED,
			row=info,
			detail=', '.join(written),
			written=tuple(written),
		)

	def _write_if_empty(self, field: HostElement, value: str, dry_run: bool) -> bool:
		"""Write a value unless the field (re-read now) already holds one."""
		if is_filled(field):
			return False
		if not dry_run:
			field.write_value(value, CHANGE_EVENTS)
		return True

	def _wait_for_close(self) -> SubmissionResult:
		settings = self._config.close_wait
		self._log.debug(
			'Waiting for dialog to close (%d attempts, %dms delay)...',
			settings.max_attempts,
			settings.interval_ms,
		)

		for attempt in range(1, settings.max_attempts + 1):
			try:
				dialog = find_dialog(self._document)
				if dialog is None:
					self._log.debug('Dialog removed on attempt %d', attempt)
					return SubmissionResult(closed=True, attempts=attempt)
				if not is_shown(dialog):
					self._log.debug('Dialog hidden on attempt %d', attempt)
					return SubmissionResult(closed=True, attempts=attempt)
				self._log.debug('Attempt %d/%d: dialog still open', attempt, settings.max_attempts)
			except Exception as e:
				self._log.debug('Error checking dialog on attempt %d: %s', attempt, e)

			if attempt < settings.max_attempts:
				self._clock.sleep(settings.interval_ms)

		return SubmissionResult(closed=False, attempts=settings.max_attempts)
