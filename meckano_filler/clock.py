"""Clocks used for every wait in the fill pipeline."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
	from playwright.sync_api import Page


class Clock(Protocol):
	def sleep(self, ms: int) -> None: ...

	def monotonic(self) -> float:
		"""Seconds from an arbitrary fixed point."""
		...


class SystemClock:
	"""Wall-clock sleeps."""

	def sleep(self, ms: int) -> None:
		time.sleep(ms / 1000)

	def monotonic(self) -> float:
		return time.monotonic()


class PageClock(SystemClock):
	"""Sleeps through Playwright so the page keeps processing events meanwhile."""

	def __init__(self, page: Page) -> None:
		self._page = page

	def sleep(self, ms: int) -> None:
		self._page.wait_for_timeout(ms)
