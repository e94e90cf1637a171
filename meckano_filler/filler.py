"""Fill request pipeline: open dialog, wait, fill, submit."""

from __future__ import annotations

import random
import threading
from typing import Any, Callable, Mapping, Optional

from pydantic import ValidationError

from . import CustomLogger, logger
from .classifier import RowClassifier
from .clock import Clock, SystemClock
from .dialog import DialogController
from .errors import FillerError, NotReadyTimeout
from .form import FormFiller
from .host import HostDocument
from .models import FillDetails, FillerConfig, FillRequest, FillResponse
from .time_data import ConstantTimeSource, TimeDataSource

SourceFactory = Callable[[FillRequest], TimeDataSource]


class MeckanoFiller:
	"""Runs one fill request at a time against the reports page.

	Example:
		filler = MeckanoFiller(PageDocument(page), config, clock=PageClock(page))
		response = filler.handle({'startTime': '09:00', 'endTime': '18:00', 'humanize': True})
	"""

	def __init__(
		self,
		document: HostDocument,
		config: Optional[FillerConfig] = None,
		clock: Optional[Clock] = None,
		log: Optional[CustomLogger] = None,
		source_factory: Optional[SourceFactory] = None,
		rng: Optional[random.Random] = None,
	) -> None:
		self._config = config or FillerConfig()
		self._clock = clock or SystemClock()
		self._log = log or logger
		self._rng = rng
		self._source_factory = source_factory or self._constant_source
		self._busy = threading.Lock()

		self.dialog = DialogController(document, self._config, self._clock, self._log)
		self.form = FormFiller(
			document, self._config, self._clock, RowClassifier(self._config), self._log
		)

	@property
	def busy(self) -> bool:
		"""Whether a request is currently in flight."""
		return self._busy.locked()

	def handle(self, payload: Mapping[str, Any]) -> dict:
		"""Validate a raw request and answer it in wire form."""
		try:
			request = FillRequest.model_validate(payload)
		except ValidationError as e:
			self._log.error('Invalid fill request: %s', e)
			return FillResponse.failure(f'Invalid request: {_first_error(e)}').to_payload()
		return self.fill_working_hours(request).to_payload()

	def fill_working_hours(self, request: FillRequest, dry_run: bool = False) -> FillResponse:
		"""Run the whole pipeline for one request.

		A request that arrives while another is running is rejected rather
		than queued. Failures never propagate; they come back as an
		unsuccessful response.
		"""
		if not self._busy.acquire(blocking=False):
			self._log.warning('Fill request rejected - another request is in progress')
			return FillResponse.failure('A fill request is already in progress')

		try:
			return self._run(request, dry_run)
		except FillerError as e:
			self._log.error('%s', e)
			return FillResponse.failure(str(e))
		except Exception as e:
			self._log.error('Unexpected error while filling: %s', e)
			return FillResponse.failure(f'Form filling failed: {e}')
		finally:
			self._busy.release()

	def _run(self, request: FillRequest, dry_run: bool) -> FillResponse:
		source = self._source_factory(request)

		self._log.info('🚪 Opening timesheet dialog...')
		self.dialog.open()

		self._log.info('⏳ Waiting for dialog to load...')
		report = self.dialog.wait_until_ready()
		if not report.ready:
			raise NotReadyTimeout(report.attempts, report.elapsed_ms, report.missing)
		self._log.success('✓ Dialog ready after %d attempts', report.attempts)

		self._log.info('📝 Filling time inputs...')
		result = self.form.fill_all(source, dry_run=dry_run)
		if not result.success:
			return FillResponse(
				success=False, error=result.error or 'Form filling failed', outcomes=result.outcomes
			)
		counts = result.counts
		self._log.success(
			'✓ %d filled, %d skipped, %d errors', counts.filled, counts.skipped, counts.errors
		)
		details = FillDetails(**counts.model_dump())

		if dry_run:
			self._log.warning('DRY RUN - nothing was written or submitted')
			return FillResponse(
				success=True,
				message=f'Dry run: would fill {counts.filled} working days',
				details=details,
				outcomes=result.outcomes,
			)

		self._log.info('📤 Submitting form...')
		submission = self.form.submit_and_confirm()
		details.submitted = True

		if submission.closed:
			self._log.success('✓ Form submitted successfully - dialog closed')
			message = 'Successfully filled and submitted timesheet!'
		else:
			self._log.warning('Submit clicked but dialog still open - check for validation errors')
			message = (
				'Submit button clicked, but dialog remained open '
				f'(check for validation errors): {submission.warning}'
			)

		return FillResponse(success=True, message=message, details=details, outcomes=result.outcomes)

	def _constant_source(self, request: FillRequest) -> TimeDataSource:
		return ConstantTimeSource(
			request.start_time,
			request.end_time,
			humanize=request.humanize,
			rng=self._rng,
			log=self._log,
		)


def _first_error(error: ValidationError) -> str:
	first = error.errors()[0]
	location = '.'.join(str(part) for part in first.get('loc', ()))
	return f'{location}: {first.get("msg", "invalid value")}' if location else first.get('msg', '')
