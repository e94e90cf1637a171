"""Host document backed by a live Playwright page."""

from __future__ import annotations

from typing import Optional, Sequence

from playwright.sync_api import Locator, Page

# Upper bound for a single element operation; the filler does its own polling
ACTION_TIMEOUT_MS = 2000

_IS_DISABLED_JS = """
	(el) => Boolean(
		el.disabled ||
		el.hasAttribute('disabled') ||
		el.classList.contains('disabled') ||
		el.getAttribute('aria-disabled') === 'true'
	)
"""

_WRITE_VALUE_JS = """
	(el, args) => {
		el.value = args.value;
		for (const name of args.events) {
			el.dispatchEvent(new Event(name, { bubbles: true }));
		}
	}
"""


class PageElement:
	"""`HostElement` over a Playwright locator resolving to one element."""

	def __init__(self, locator: Locator) -> None:
		self._locator = locator

	def query(self, selector: str) -> Optional[PageElement]:
		matches = self._locator.locator(selector)
		if matches.count() == 0:
			return None
		return PageElement(matches.first)

	def query_all(self, selector: str) -> list[PageElement]:
		matches = self._locator.locator(selector)
		return [PageElement(matches.nth(i)) for i in range(matches.count())]

	def text(self) -> str:
		return self._locator.text_content(timeout=ACTION_TIMEOUT_MS) or ''

	def value(self) -> str:
		return self._locator.evaluate(
			"(el) => (el.value ?? '').toString()", timeout=ACTION_TIMEOUT_MS
		)

	def inline_display(self) -> str:
		return self._locator.evaluate('(el) => el.style.display', timeout=ACTION_TIMEOUT_MS)

	def computed_display(self) -> str:
		return self._locator.evaluate(
			'(el) => window.getComputedStyle(el).display', timeout=ACTION_TIMEOUT_MS
		)

	def is_disabled(self) -> bool:
		return self._locator.evaluate(_IS_DISABLED_JS, timeout=ACTION_TIMEOUT_MS)

	def click(self) -> None:
		# DOM click, so hidden anchors with JS handlers still fire
		self._locator.evaluate('(el) => el.click()', timeout=ACTION_TIMEOUT_MS)

	def write_value(self, value: str, events: Sequence[str]) -> None:
		self._locator.evaluate(
			_WRITE_VALUE_JS, {'value': value, 'events': list(events)}, timeout=ACTION_TIMEOUT_MS
		)


class PageDocument:
	"""`HostDocument` over a Playwright page."""

	def __init__(self, page: Page) -> None:
		self._page = page

	@property
	def page(self) -> Page:
		return self._page

	def query(self, selector: str) -> Optional[PageElement]:
		matches = self._page.locator(selector)
		if matches.count() == 0:
			return None
		return PageElement(matches.first)

	def get_by_id(self, element_id: str) -> Optional[PageElement]:
		return self.query(f'[id="{element_id}"]')
