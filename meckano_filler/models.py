"""Pydantic models and value types for configuration and fill results."""

from __future__ import annotations

import datetime as dt
import re
from dataclasses import dataclass, field
from datetime import time
from enum import Enum
from typing import Optional

from pydantic import (
	BaseModel,
	ConfigDict,
	Field,
	HttpUrl,
	field_serializer,
	field_validator,
)

from .errors import CloseTimeout
from .vocabulary import AbsenceCodes, HebrewWeekdays, SkipReason, SpecialDays


TIME_PATTERN = re.compile(r'([01][0-9]|2[0-3]):([0-5][0-9])')


def format_time(value: time) -> str:
	"""Render a time as zero-padded HH:MM."""
	return value.strftime('%H:%M')


def parse_time(value: str) -> time:
	"""Parse a strict HH:MM string (00:00-23:59).

	Raises:
		ValueError: If the string is not a valid time of day.
	"""
	match = TIME_PATTERN.fullmatch(value.strip())
	if match is None:
		raise ValueError(f"Invalid time '{value}', expected HH:MM")
	return time(int(match.group(1)), int(match.group(2)))


class TimeWindow(BaseModel):
	"""Check-in and check-out times for one day."""

	model_config = ConfigDict(frozen=True)

	checkin: time
	checkout: time

	def __str__(self) -> str:
		return f'{format_time(self.checkin)}-{format_time(self.checkout)}'


@dataclass(frozen=True, slots=True)
class CalendarRowInfo:
	"""Parsed snapshot of one row of the hours table."""

	date: dt.date
	weekday: str
	special_text: str = ''
	absence_code: Optional[str] = None
	full_text: str = ''

	@property
	def label(self) -> str:
		"""Date as shown in logs (DD/MM/YYYY)."""
		return self.date.strftime('%d/%m/%Y')


@dataclass(frozen=True, slots=True)
class Classification:
	"""Outcome of classifying a row: work, or skip with a reason."""

	skip_reason: Optional[str] = None

	@property
	def is_work(self) -> bool:
		return self.skip_reason is None

	@classmethod
	def work(cls) -> Classification:
		return cls()

	@classmethod
	def skip(cls, reason: str) -> Classification:
		return cls(skip_reason=reason)


class RowStatus(str, Enum):
	"""Per-row result of a fill pass."""

	FILLED = 'filled'
	SKIPPED = 'skipped'
	ERROR = 'error'


@dataclass(frozen=True, slots=True)
class RowOutcome:
	"""What happened to a single row during a fill pass."""

	index: int
	status: RowStatus
	row: Optional[CalendarRowInfo] = None
	detail: str = ''
	written: tuple[str, ...] = ()


class FillCounts(BaseModel):
	"""Aggregated per-row results of one pass."""

	filled: int = 0
	skipped: int = 0
	errors: int = 0

	@classmethod
	def from_outcomes(cls, outcomes: list[RowOutcome]) -> FillCounts:
		counts = cls()
		for outcome in outcomes:
			match outcome.status:
				case RowStatus.FILLED:
					counts.filled += 1
				case RowStatus.SKIPPED:
					counts.skipped += 1
				case RowStatus.ERROR:
					counts.errors += 1
		return counts


@dataclass(slots=True)
class FillPassResult:
	"""Result of `FormFiller.fill_all`.

	`success` is False only when the dialog or its table is missing; rows
	that failed individually are counted in `counts.errors`.
	"""

	success: bool
	counts: FillCounts = field(default_factory=FillCounts)
	outcomes: list[RowOutcome] = field(default_factory=list)
	error: Optional[str] = None


@dataclass(frozen=True, slots=True)
class ReadinessReport:
	"""Result of polling the dialog for readiness."""

	ready: bool
	attempts: int
	input_count: int = 0
	missing: Optional[str] = None
	elapsed_ms: int = 0


@dataclass(frozen=True, slots=True)
class SubmissionResult:
	"""Result of a submit click.

	`closed=False` means the host accepted the click but kept the dialog
	open, typically because it is showing validation errors.
	"""

	closed: bool
	attempts: int

	@property
	def warning(self) -> Optional[str]:
		return None if self.closed else str(CloseTimeout(self.attempts))


class PollSettings(BaseModel):
	"""Bounded polling parameters."""

	max_attempts: int = Field(ge=1)
	interval_ms: int = Field(ge=0)

	@property
	def budget_ms(self) -> int:
		"""Longest total sleep the poll can take."""
		return (self.max_attempts - 1) * self.interval_ms


class FillerConfig(BaseModel):
	"""Main configuration."""

	url: HttpUrl = HttpUrl('https://app.meckano.co.il/')
	headless: bool = False
	slow_mo: int = Field(default=0, ge=0)
	weekend_days: frozenset[str] = Field(
		default_factory=lambda: frozenset({HebrewWeekdays.FRIDAY.value, HebrewWeekdays.SATURDAY.value})
	)
	holiday_token: str = Field(default=SpecialDays.HOLIDAY.value, min_length=1)
	holiday_eve_token: str = Field(default=SpecialDays.HOLIDAY_EVE.value, min_length=1)
	absence_skip_reasons: dict[str, str] = Field(
		default_factory=lambda: {
			AbsenceCodes.VACATION.value: SkipReason.VACATION.value,
			AbsenceCodes.SICKNESS.value: SkipReason.SICKNESS.value,
		}
	)
	dialog_wait: PollSettings = Field(
		default_factory=lambda: PollSettings(max_attempts=10, interval_ms=250)
	)
	close_wait: PollSettings = Field(
		default_factory=lambda: PollSettings(max_attempts=15, interval_ms=1000)
	)

	@field_validator('weekend_days')
	@classmethod
	def validate_weekend_days(cls, value: frozenset[str]) -> frozenset[str]:
		"""Each weekend marker must be a single character."""
		if any(len(letter) != 1 for letter in value):
			raise ValueError('weekend_days must contain single letters')
		return value

	@field_serializer('weekend_days')
	def serialize_weekend_days(self, value: frozenset[str]) -> list[str]:
		"""Serialize as a sorted list so the JSON file is stable."""
		return sorted(value)

	@property
	def host(self) -> str:
		"""Hostname used to recognise the Meckano tab."""
		return self.url.host or ''


class FillRequest(BaseModel):
	"""Fill request as sent by the caller."""

	model_config = ConfigDict(populate_by_name=True, frozen=True)

	start_time: time = Field(alias='startTime')
	end_time: time = Field(alias='endTime')
	humanize: bool = False

	@field_validator('start_time', 'end_time', mode='before')
	@classmethod
	def validate_time(cls, value: object) -> object:
		"""Accept only HH:MM strings (or ready-made time values)."""
		if isinstance(value, str):
			return parse_time(value)
		return value


class FillDetails(BaseModel):
	"""Counts reported back to the caller."""

	filled: int = 0
	skipped: int = 0
	errors: int = 0
	submitted: bool = False


class FillResponse(BaseModel):
	"""Response returned for every fill request."""

	success: bool
	message: Optional[str] = None
	error: Optional[str] = None
	details: Optional[FillDetails] = None
	outcomes: list[RowOutcome] = Field(default_factory=list, exclude=True)

	@classmethod
	def failure(cls, error: str) -> FillResponse:
		return cls(success=False, error=error)

	def to_payload(self) -> dict:
		"""Wire form of the response (unset optional keys are omitted)."""
		return self.model_dump(exclude_none=True)
