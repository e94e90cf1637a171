"""Vocabulary for the Meckano UI - Hebrew markers and English labels.

Centralizes the strings the timesheet dialog renders and the reasons this
package reports back for rows it leaves alone.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Optional


class HebrewWeekdays(StrEnum):
	"""Single-letter weekday markers shown next to each date (Sunday first)."""

	SUNDAY = 'א'
	MONDAY = 'ב'
	TUESDAY = 'ג'
	WEDNESDAY = 'ד'
	THURSDAY = 'ה'
	FRIDAY = 'ו'
	SATURDAY = 'ש'

	@classmethod
	def _members(cls) -> list[HebrewWeekdays]:
		"""Get all members as a list."""
		return list(cls.__members__.values())

	@property
	def english(self) -> str:
		"""English day name (e.g. 'Friday')."""
		return self.name.title()

	@property
	def short(self) -> str:
		"""3-letter abbreviation (Sun, Mon, etc.)."""
		return self.english[:3]

	@classmethod
	def from_letter(cls, letter: str) -> Optional[HebrewWeekdays]:
		"""Get the weekday for a Hebrew letter, or None if it is not one."""
		for day in cls._members():
			if day.value == letter:
				return day
		return None

	@classmethod
	def describe(cls, letter: str) -> str:
		"""English name for a letter, falling back to the letter itself."""
		day = cls.from_letter(letter)
		return day.english if day else letter


class SpecialDays(StrEnum):
	"""Hebrew annotations in the special-day column."""

	HOLIDAY = 'חג'
	HOLIDAY_EVE = 'ערב חג'


class AbsenceCodes(StrEnum):
	"""Values of the absence/leave select box."""

	NONE = '0'
	VACATION = '30148'
	SICKNESS = '30149'


class SkipReason(StrEnum):
	"""Reasons reported for rows that are deliberately left untouched."""

	WEEKEND = 'Weekend'
	HOLIDAY = 'Holiday'
	HOLIDAY_EVE = 'Holiday Eve'
	VACATION = 'Vacation'
	SICKNESS = 'Sickness'
	UNPARSABLE = 'Unparsable row'
	ALREADY_COMPLETE = 'Already complete'
