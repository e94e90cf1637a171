"""Time data sources: where each day's check-in/check-out times come from."""

from __future__ import annotations

import random
from abc import ABC, abstractmethod
from datetime import date, time
from typing import Optional

from . import CustomLogger, logger
from .models import TimeWindow

# Humanized times stay within this many minutes of the configured time
JITTER_MINUTES = 20
LAST_MINUTE_OF_DAY = 23 * 60 + 59


def shift_time(value: time, minutes: int) -> time:
	"""Move a time by a number of minutes, clamped to 00:00-23:59."""
	total = value.hour * 60 + value.minute + minutes
	total = max(0, min(LAST_MINUTE_OF_DAY, total))
	return time(total // 60, total % 60)


def humanize_time(
	value: time, rng: random.Random, spread: int = JITTER_MINUTES
) -> time:
	"""Offset a time by a uniform random number of minutes in [-spread, +spread]."""
	return shift_time(value, rng.randint(-spread, spread))


class TimeDataSource(ABC):
	"""Provides the times to enter for a given date."""

	@abstractmethod
	def get_time_data(self, day: date) -> Optional[TimeWindow]:
		"""Get the window for a date, or None to decline it."""


class ConstantTimeSource(TimeDataSource):
	"""Same configured times for every date, optionally humanized.

	With `humanize` each endpoint is jittered independently on every call,
	always starting from the configured time, so the window may shrink, grow
	or even invert.
	"""

	def __init__(
		self,
		checkin: time,
		checkout: time,
		humanize: bool = False,
		rng: Optional[random.Random] = None,
		log: Optional[CustomLogger] = None,
	) -> None:
		self.window = TimeWindow(checkin=checkin, checkout=checkout)
		self.humanize = humanize
		self._rng = rng or random.Random()
		self._log = log or logger
		self._log.debug(
			'Time source: %s times %s', 'humanized' if humanize else 'constant', self.window
		)

	def get_time_data(self, day: date) -> Optional[TimeWindow]:
		if not self.humanize:
			return self.window

		window = TimeWindow(
			checkin=humanize_time(self.window.checkin, self._rng),
			checkout=humanize_time(self.window.checkout, self._rng),
		)
		self._log.debug(
			'Humanized %s: %s (base %s)', day.strftime('%d/%m/%Y'), window, self.window
		)
		return window
