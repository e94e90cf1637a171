"""
Pytest configuration and shared fixtures.
"""

import random
from datetime import time

import pytest

from meckano_filler.models import FillerConfig, PollSettings
from meckano_filler.time_data import ConstantTimeSource

from .fakes import FakeClock, FakeDocument, dialog_html, page_html, row_html


@pytest.fixture
def config():
	"""Default config with fast polling."""
	return FillerConfig(
		dialog_wait=PollSettings(max_attempts=5, interval_ms=10),
		close_wait=PollSettings(max_attempts=3, interval_ms=100),
	)


@pytest.fixture
def clock():
	return FakeClock()


@pytest.fixture
def source():
	"""Constant 09:00-18:00 source."""
	return ConstantTimeSource(time(9, 0), time(18, 0))


@pytest.fixture
def rng():
	return random.Random(1234)


@pytest.fixture
def week_rows():
	"""A week of rows: Sunday-Thursday workdays, Friday and Saturday weekend."""
	return [
		row_html('24/08/2025 א'),
		row_html('25/08/2025 ב', checkin='08:45', checkout='17:30'),
		row_html('26/08/2025 ג', checkin='08:50'),
		row_html('27/08/2025 ד'),
		row_html('28/08/2025 ה'),
		row_html('29/08/2025 ו'),
		row_html('30/08/2025 ש'),
	]


@pytest.fixture
def open_page(week_rows):
	"""Reports page with the dialog already rendered and open."""
	return FakeDocument(page_html(dialog_html(week_rows)))


@pytest.fixture
def lazy_page(week_rows, clock):
	"""Reports page whose dialog renders 300ms after the trigger is clicked."""
	document = FakeDocument(page_html())

	def render():
		clock.at(clock.now_ms + 300, lambda: document.append_html(dialog_html(week_rows)))

	document.on_click('a.export.free-reporting.popup-container', render)
	return document
