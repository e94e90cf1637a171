"""Command-line interface for the Meckano filler."""

from __future__ import annotations

import subprocess
from datetime import time
from pathlib import Path
from typing import Optional

import click
from playwright.sync_api import Error as PlaywrightError
from rich.panel import Panel

from . import __version__, console, enable_debug_logging, logger
from .browser import BrowserSession, PageDocument
from .clock import PageClock
from .config import (
	config_exists,
	create_config_interactive,
	get_config_path,
	load_config_or_default,
	save_config,
)
from .dialog import DialogController
from .display import display_response
from .filler import MeckanoFiller
from .models import FillerConfig, FillRequest, format_time, parse_time


class TimeType(click.ParamType):
	"""Custom type that accepts a time of day as HH:MM."""

	name = 'HH:MM'

	def convert(
		self,
		value: str,
		param: Optional[click.Parameter],
		ctx: Optional[click.Context],
	) -> time:
		"""Convert an HH:MM string to a time."""
		if isinstance(value, time):
			return value
		try:
			return parse_time(value)
		except ValueError as e:
			self.fail(str(e), param, ctx)


TIME = TimeType()


def _load(ctx: click.Context) -> Optional[FillerConfig]:
	"""Load the config for a command, logging instead of raising."""
	try:
		return load_config_or_default(ctx.obj.get('config_path'))
	except (FileNotFoundError, ValueError) as e:
		logger.error('%s', e)
		return None


def _wait_for_user(session: BrowserSession) -> None:
	"""In launch mode, let the user log in and open the reports page."""
	if not session.attached:
		input('\nLog in, open the reports page, then press Enter...')


@click.group(invoke_without_command=True, context_settings={'help_option_names': ['-h', '--help']})
@click.option('--version', '-v', is_flag=True, help='Show version and exit.')
@click.option('--config', '-c', type=click.Path(exists=True), help='Config file path.')
@click.option('--verbose', is_flag=True, help='Enable verbose/debug logging.')
@click.pass_context
def main(ctx: click.Context, version: bool, config: Optional[str], verbose: bool) -> None:
	"""🕐 Meckano Timesheet Filler

	Fills the empty check-in/check-out times of working days in the
	Meckano reports dialog and submits it.

	\b
	Quick start:
		1. Start Chrome with --remote-debugging-port=9222 and log in to Meckano
		2. Run 'meckano fill --cdp-url http://localhost:9222'

	\b
	Config file: ~/.config/meckano-filler.json (optional)
	"""
	if verbose:
		enable_debug_logging()
	ctx.ensure_object(dict)
	ctx.obj['config_path'] = Path(config) if config else None

	if version:
		logger.info('meckano-filler version %s', __version__)
		return

	if ctx.invoked_subcommand is None:
		click.echo(ctx.get_help())


@main.command(context_settings={'help_option_names': ['-h', '--help']})
@click.option('--force', '-f', is_flag=True, help='Overwrite existing config.')
def init(force: bool) -> None:
	"""Create a configuration file and install the browser."""
	config_path = get_config_path()

	if config_exists() and not force:
		logger.warning('Configuration already exists at %s', config_path)
		logger.info('Use --force to overwrite.')
		return

	config = create_config_interactive()
	save_config(config)

	logger.info('Installing Playwright browser...')
	try:
		result = subprocess.run(
			['playwright', 'install', 'chromium'], capture_output=True, text=True, check=False
		)
		if result.returncode == 0:
			logger.success('✓ Browser installed!')
		else:
			logger.warning("Browser install failed. Run 'playwright install chromium' manually.")
	except (subprocess.SubprocessError, OSError) as e:
		logger.warning('Could not install browser: %s', e)
		logger.warning("Run 'playwright install chromium' manually.")

	console.print(
		Panel(
			f'[green]✓ Setup complete![/green]\n\n'
			f'Config: [cyan]{config_path}[/cyan]\n\n'
			f"[dim]Run 'meckano fill' on the reports page.[/dim]",
			title='🎉 Ready',
			border_style='green',
		)
	)


@main.command(context_settings={'help_option_names': ['-h', '--help']})
@click.option('--start', '-s', 'start_time', type=TIME, default='09:00', help='Check-in time.')
@click.option('--end', '-e', 'end_time', type=TIME, default='18:00', help='Check-out time.')
@click.option('--humanize', '-H', is_flag=True, help='Jitter each time by up to ±20 minutes.')
@click.option('--cdp-url', help='Attach to a running browser (e.g. http://localhost:9222).')
@click.option('--dry-run', '-d', is_flag=True, help='Preview without writing or submitting.')
@click.pass_context
def fill(
	ctx: click.Context,
	start_time: time,
	end_time: time,
	humanize: bool,
	cdp_url: Optional[str],
	dry_run: bool,
) -> None:
	"""Fill and submit the timesheet dialog.

	\b
	Examples:
		meckano fill --cdp-url http://localhost:9222
		meckano fill -s 08:30 -e 17:30 --humanize
		meckano fill --dry-run
	"""
	cfg = _load(ctx)
	if cfg is None:
		return

	if end_time <= start_time:
		logger.warning(
			'End time %s is not after start time %s', format_time(end_time), format_time(start_time)
		)
	if dry_run:
		logger.warning('DRY RUN MODE - No changes will be made')

	request = FillRequest(start_time=start_time, end_time=end_time, humanize=humanize)

	try:
		with BrowserSession(cfg, cdp_url=cdp_url) as session:
			_wait_for_user(session)
			filler = MeckanoFiller(PageDocument(session.page), cfg, clock=PageClock(session.page))
			response = filler.fill_working_hours(request, dry_run=dry_run)
			display_response(response, dry_run=dry_run)

			if not session.attached and not cfg.headless:
				input('\nPress Enter to close browser...')
	except (RuntimeError, PlaywrightError) as e:
		logger.error('%s', e)
		ctx.exit(1)

	if not response.success:
		ctx.exit(1)


@main.command(context_settings={'help_option_names': ['-h', '--help']})
@click.option('--cdp-url', help='Attach to a running browser (e.g. http://localhost:9222).')
@click.pass_context
def status(ctx: click.Context, cdp_url: Optional[str]) -> None:
	"""Check whether the timesheet dialog is open and ready."""
	cfg = _load(ctx)
	if cfg is None:
		return

	try:
		with BrowserSession(cfg, cdp_url=cdp_url) as session:
			_wait_for_user(session)
			dialog = DialogController(PageDocument(session.page), cfg, PageClock(session.page))

			if dialog.is_ready():
				logger.success('✓ Dialog is open')
			else:
				logger.warning('Dialog is not open')

			report = dialog.wait_until_ready(max_attempts=1)
			if report.ready:
				logger.success('✓ Dialog ready (%d time inputs)', report.input_count)
			else:
				logger.info('Not ready: %s', report.missing)
	except (RuntimeError, PlaywrightError) as e:
		logger.error('%s', e)
		ctx.exit(1)


if __name__ == '__main__':
	main()
