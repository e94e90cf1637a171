"""Decide which calendar rows are working days."""

from __future__ import annotations

from .models import CalendarRowInfo, Classification, FillerConfig
from .vocabulary import SkipReason


class RowClassifier:
	"""Applies the skip rules to a parsed row.

	Rules are checked in order and the first match wins:
		1. weekend weekday letter -> Weekend
		2. holiday token without the eve token -> Holiday
		3. holiday-eve token -> Holiday Eve
		4. absence code with a configured reason -> that reason
		5. anything else is a working day
	"""

	def __init__(self, config: FillerConfig) -> None:
		self._weekend_days = config.weekend_days
		self._holiday = config.holiday_token
		self._holiday_eve = config.holiday_eve_token
		self._absence_reasons = dict(config.absence_skip_reasons)

	def classify(self, row: CalendarRowInfo) -> Classification:
		if row.weekday in self._weekend_days:
			return Classification.skip(SkipReason.WEEKEND)

		special = row.special_text
		if self._holiday in special and self._holiday_eve not in special:
			return Classification.skip(SkipReason.HOLIDAY)

		if self._holiday_eve in special:
			return Classification.skip(SkipReason.HOLIDAY_EVE)

		if row.absence_code is not None and (reason := self._absence_reasons.get(row.absence_code)):
			return Classification.skip(reason)

		return Classification.work()
