"""Browser session management for the Meckano reports page."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from playwright.sync_api import (
	Browser,
	BrowserContext,
	Page,
	Playwright,
	sync_playwright,
)

from .. import logger

if TYPE_CHECKING:
	from ..models import FillerConfig


class BrowserSession:
	"""Manages the browser lifecycle and the Meckano page.

	Two modes:
		- attach: connect over CDP to a browser the user already logged in
		  with, and use its Meckano tab. The browser is left running on stop.
		- launch: start a fresh Chromium and open the configured URL; the
		  user logs in by hand.
	"""

	def __init__(self, config: FillerConfig, cdp_url: Optional[str] = None) -> None:
		self.config = config
		self.cdp_url = cdp_url
		self._playwright: Optional[Playwright] = None
		self._browser: Optional[Browser] = None
		self._context: Optional[BrowserContext] = None
		self._page: Optional[Page] = None

	@property
	def attached(self) -> bool:
		"""Whether the session uses a browser it did not launch."""
		return self.cdp_url is not None

	def start(self) -> None:
		"""Start the session.

		Raises:
			RuntimeError: If attaching and no open tab is on the Meckano site.
		"""
		self._playwright = sync_playwright().start()
		if self.cdp_url:
			self._browser = self._playwright.chromium.connect_over_cdp(self.cdp_url)
			self._page = self._find_meckano_tab()
			if self._page is None:
				self.stop()
				raise RuntimeError(
					f'No open tab on {self.config.host}. '
					'Please navigate to the Meckano reports page first.'
				)
			self._page.bring_to_front()
			logger.debug('Attached to tab %s', self._page.url)
			return

		self._browser = self._playwright.chromium.launch(
			headless=self.config.headless,
			slow_mo=self.config.slow_mo,
		)
		self._context = self._browser.new_context(
			viewport={'width': 1280, 'height': 800},
			locale='he-IL',
		)
		self._page = self._context.new_page()
		self._page.goto(str(self.config.url))

	def stop(self) -> None:
		"""Release resources. Never closes a browser we only attached to."""
		if not self.attached:
			if self._page:
				self._page.close()
			if self._context:
				self._context.close()
			if self._browser:
				self._browser.close()
		self._page = None
		self._context = None
		self._browser = None
		if self._playwright:
			self._playwright.stop()
			self._playwright = None

	def is_meckano_page(self, page: Page) -> bool:
		"""Check that a page is on the configured Meckano host."""
		return bool(self.config.host) and self.config.host in page.url

	@property
	def page(self) -> Page:
		"""Get the current page.

		Raises:
			RuntimeError: If session hasn't been started.
		"""
		if self._page is None:
			raise RuntimeError('Browser session not started. Call start() first.')
		return self._page

	def _find_meckano_tab(self) -> Optional[Page]:
		assert self._browser is not None
		for context in self._browser.contexts:
			for page in context.pages:
				if self.is_meckano_page(page):
					return page
		return None

	def __enter__(self) -> BrowserSession:
		"""Context manager entry - starts the session."""
		self.start()
		return self

	def __exit__(self, *exc) -> None:
		"""Context manager exit - stops the session."""
		self.stop()
