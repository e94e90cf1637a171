"""Exceptions raised while driving the timesheet dialog."""


class FillerError(Exception):
	"""Base class for every failure this package reports."""


class StructuralNotFound(FillerError):
	"""The page does not have the shape the filler expects."""


class TriggerNotFound(StructuralNotFound):
	def __init__(self) -> None:
		super().__init__(
			"Dialog trigger element not found. Make sure you're on the reports page."
		)


class DialogNotFound(StructuralNotFound):
	def __init__(self) -> None:
		super().__init__('Timesheet dialog not found')


class SubmitNotFound(StructuralNotFound):
	def __init__(self) -> None:
		super().__init__('Submit button not found')


class NotReadyTimeout(FillerError):
	"""The dialog never reached a ready shape within the polling budget."""

	def __init__(self, attempts: int, waited_ms: int, missing: str | None = None) -> None:
		message = f'Dialog not ready after {attempts} attempts ({waited_ms}ms total wait time)'
		if missing:
			message += f': {missing}'
		super().__init__(message)
		self.attempts = attempts
		self.waited_ms = waited_ms
		self.missing = missing


class RowParseFailure(FillerError):
	"""A row's date cell could not be parsed."""


class NoTimeData(FillerError):
	"""The time data source declined a date."""


class SubmitDisabled(FillerError):
	def __init__(self) -> None:
		super().__init__('Submit button is disabled')


class CloseTimeout(FillerError):
	"""The submit was accepted but the dialog stayed open."""

	def __init__(self, attempts: int) -> None:
		super().__init__(f'Dialog did not close after {attempts} checks')
		self.attempts = attempts
