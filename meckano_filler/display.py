"""Display and formatting utilities for fill results."""

from rich.table import Table

from . import console, logger
from .models import FillResponse, RowOutcome, RowStatus
from .vocabulary import HebrewWeekdays, SkipReason


def format_outcome(outcome: RowOutcome) -> str:
	"""Format a row outcome as a rich-markup status string."""
	if outcome.status == RowStatus.FILLED:
		return f'[green]✓ {outcome.detail or "Filled"}[/green]'
	elif outcome.status == RowStatus.ERROR:
		return f'[red]✗ {outcome.detail}[/red]'
	elif outcome.detail == SkipReason.ALREADY_COMPLETE:
		return '[dim]Skip (filled)[/dim]'
	else:
		return f'[dim]Skip ({outcome.detail})[/dim]'


def display_outcomes(outcomes: list[RowOutcome], dry_run: bool = False) -> None:
	"""Display per-row outcomes as a Rich table."""
	if not outcomes:
		logger.warning('No rows processed.')
		return

	table = Table(
		title='📋 Fill Plan' if dry_run else '📅 Timesheet',
		show_header=True,
		header_style='bold cyan',
	)

	table.add_column('Date', style='dim')
	table.add_column('Day', style='dim')
	table.add_column('Result', justify='center')

	for outcome in outcomes:
		if outcome.row is None:
			date_str, day_name = f'row {outcome.index + 1}', '?'
		else:
			date_str = outcome.row.date.strftime('%d/%m')
			day = HebrewWeekdays.from_letter(outcome.row.weekday)
			day_name = day.short if day else outcome.row.weekday

		row_style = 'dim' if outcome.status == RowStatus.SKIPPED else None
		table.add_row(date_str, day_name, format_outcome(outcome), style=row_style)

	console.print(table)


def display_response(response: FillResponse, dry_run: bool = False) -> None:
	"""Print the outcome table and the summary of a fill request."""
	display_outcomes(response.outcomes, dry_run=dry_run)

	if not response.success:
		logger.error('✗ %s', response.error)
		return

	logger.info('=' * 40)
	if response.details:
		logger.success('✓ Filled: %d', response.details.filled)
		logger.info('⏭ Skipped: %d', response.details.skipped)
		if response.details.errors > 0:
			logger.error('✗ Errors: %d', response.details.errors)
	logger.info('=' * 40)
	if response.message:
		logger.info('%s', response.message)
