"""Structural view of the host page.

The filler never talks to Playwright directly; it sees the page through
these two protocols. `browser.document` binds them to a live page.
"""

from __future__ import annotations

from typing import Optional, Protocol, Sequence


class HostElement(Protocol):
	"""One element of the host document."""

	def query(self, selector: str) -> Optional[HostElement]:
		"""First descendant matching a CSS selector, or None."""
		...

	def query_all(self, selector: str) -> list[HostElement]:
		"""All descendants matching a CSS selector, in document order."""
		...

	def text(self) -> str: ...

	def value(self) -> str: ...

	def inline_display(self) -> str:
		"""The element's own `style.display` ('' when unset)."""
		...

	def computed_display(self) -> str: ...

	def is_disabled(self) -> bool: ...

	def click(self) -> None: ...

	def write_value(self, value: str, events: Sequence[str]) -> None:
		"""Set the value and dispatch the given bubbling events."""
		...


class HostDocument(Protocol):
	"""The page the timesheet dialog lives in."""

	def query(self, selector: str) -> Optional[HostElement]: ...

	def get_by_id(self, element_id: str) -> Optional[HostElement]: ...


def is_shown(element: HostElement) -> bool:
	"""Inline display is block, or computed display is not none."""
	return element.inline_display() == 'block' or element.computed_display() != 'none'


def is_visible(element: HostElement) -> bool:
	"""Neither inline nor computed display is none."""
	return element.inline_display() != 'none' and element.computed_display() != 'none'
