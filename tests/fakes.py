"""In-memory stand-ins for the host page and the clock."""

from __future__ import annotations

import re
from typing import Callable, Optional, Sequence

from bs4 import BeautifulSoup, Tag

_DISPLAY = re.compile(r'display\s*:\s*([a-z-]+)')


class FakeElement:
	"""`HostElement` over a BeautifulSoup tag."""

	def __init__(self, tag: Tag, document: FakeDocument) -> None:
		self.tag = tag
		self._document = document

	def __eq__(self, other: object) -> bool:
		return isinstance(other, FakeElement) and other.tag is self.tag

	def __hash__(self) -> int:
		return id(self.tag)

	def query(self, selector: str) -> Optional[FakeElement]:
		self._document.check_failure(selector)
		found = self.tag.select_one(selector)
		return FakeElement(found, self._document) if found is not None else None

	def query_all(self, selector: str) -> list[FakeElement]:
		self._document.check_failure(selector)
		return [FakeElement(tag, self._document) for tag in self.tag.select(selector)]

	def text(self) -> str:
		return self.tag.get_text()

	def value(self) -> str:
		if self.tag.name == 'select':
			option = self.tag.find('option', selected=True) or self.tag.find('option')
			return str(option.get('value', '')) if option else ''
		return str(self.tag.get('value', ''))

	def inline_display(self) -> str:
		match = _DISPLAY.search(str(self.tag.get('style', '')))
		return match.group(1) if match else ''

	def computed_display(self) -> str:
		if self.tag.has_attr('hidden'):
			return 'none'
		return self.inline_display() or 'block'

	def is_disabled(self) -> bool:
		return (
			self.tag.has_attr('disabled')
			or 'disabled' in self.tag.get('class', [])
			or self.tag.get('aria-disabled') == 'true'
		)

	def click(self) -> None:
		self._document.clicks.append(self)
		for selector, handler in self._document.click_handlers:
			if any(tag is self.tag for tag in self._document.soup.select(selector)):
				handler()

	def write_value(self, value: str, events: Sequence[str]) -> None:
		self.tag['value'] = value
		self._document.writes.append((self, value, tuple(events)))


class FakeDocument:
	"""`HostDocument` over parsed HTML that tests can mutate."""

	def __init__(self, html: str) -> None:
		self.soup = BeautifulSoup(html, 'html.parser')
		self.clicks: list[FakeElement] = []
		self.writes: list[tuple[FakeElement, str, tuple[str, ...]]] = []
		self.click_handlers: list[tuple[str, Callable[[], None]]] = []
		self.failing_selectors: set[str] = set()

	def check_failure(self, selector: str) -> None:
		if selector in self.failing_selectors:
			raise RuntimeError(f'Element detached while querying {selector}')

	def query(self, selector: str) -> Optional[FakeElement]:
		self.check_failure(selector)
		found = self.soup.select_one(selector)
		return FakeElement(found, self) if found is not None else None

	def get_by_id(self, element_id: str) -> Optional[FakeElement]:
		found = self.soup.find(id=element_id)
		return FakeElement(found, self) if found is not None else None

	def on_click(self, selector: str, handler: Callable[[], None]) -> None:
		"""Run `handler` whenever an element matching `selector` is clicked."""
		self.click_handlers.append((selector, handler))

	def set_display(self, element_id: str, display: str) -> None:
		tag = self.soup.find(id=element_id)
		assert tag is not None
		tag['style'] = f'display: {display}'

	def remove(self, element_id: str) -> None:
		tag = self.soup.find(id=element_id)
		if tag is not None:
			tag.decompose()

	def append_html(self, html: str) -> None:
		"""Render more markup at the end of the body."""
		fragment = BeautifulSoup(html, 'html.parser')
		target = self.soup.body or self.soup
		for child in list(fragment.contents):
			target.append(child)

	def input_values(self, css_class: str) -> list[str]:
		return [str(tag.get('value', '')) for tag in self.soup.select(f'input.{css_class}')]


class FakeClock:
	"""Virtual clock: sleeping advances time and fires scheduled callbacks."""

	def __init__(self) -> None:
		self.now_ms = 0
		self.sleeps: list[int] = []
		self._scheduled: list[tuple[int, Callable[[], None]]] = []

	def sleep(self, ms: int) -> None:
		self.sleeps.append(int(ms))
		self.now_ms += int(ms)
		due = [item for item in self._scheduled if item[0] <= self.now_ms]
		self._scheduled = [item for item in self._scheduled if item[0] > self.now_ms]
		for _, callback in sorted(due, key=lambda item: item[0]):
			callback()

	def monotonic(self) -> float:
		return self.now_ms / 1000

	def at(self, ms: int, callback: Callable[[], None]) -> None:
		"""Run `callback` once the clock reaches `ms`."""
		self._scheduled.append((ms, callback))


def row_html(
	date_text: str,
	checkin: str = '',
	checkout: str = '',
	special: Optional[str] = None,
	absence: str = '0',
) -> str:
	"""Markup of one hours-table row."""
	special_span = (
		f'<span class="specialDayDescription">{special}</span>' if special is not None else ''
	)
	selected = ' selected' if absence != '0' else ''
	return (
		'<tr>'
		f'<td class="date"><span class="dateText">{date_text}</span>{special_span}</td>'
		'<td class="missing"><select class="select-box">'
		'<option value="0">--</option>'
		f'<option value="{absence}"{selected}>event</option>'
		'</select></td>'
		f'<td><input type="text" class="checkIn" value="{checkin}"></td>'
		f'<td><input type="text" class="checkOut" value="{checkout}"></td>'
		'</tr>'
	)


def dialog_html(
	rows: Sequence[str] = (),
	display: str = 'block',
	submit: bool = True,
	submit_disabled: bool = False,
	view_display: Optional[str] = None,
) -> str:
	"""Markup of the timesheet dialog."""
	view_style = f' style="display: {view_display}"' if view_display else ''
	disabled = ' disabled' if submit_disabled else ''
	button = (
		f'<button class="save button-refresh-data update-freeReporting"{disabled}>שמירה</button>'
		if submit
		else ''
	)
	return (
		f'<div id="freeReporting-dialog" style="display: {display}">'
		f'<div class="attendance-view"{view_style}>'
		'<table class="hours-report">'
		'<tr><th>תאריך</th><th>אירוע</th><th>כניסה</th><th>יציאה</th></tr>'
		f'{"".join(rows)}'
		'</table></div>'
		f'{button}'
		'</div>'
	)


def page_html(dialog: str = '', trigger: bool = True) -> str:
	"""Markup of the reports page, optionally with the dialog already in it."""
	link = (
		'<a href="#" class="export free-reporting popup-container">דיווח חופשי</a>'
		if trigger
		else ''
	)
	return f'<html><body>{link}{dialog}</body></html>'
