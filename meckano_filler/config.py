"""Configuration management for the Meckano filler CLI."""

from pathlib import Path
from typing import Optional

from pydantic import HttpUrl, ValidationError
from rich.prompt import Confirm, Prompt

from . import logger
from .models import FillerConfig
from .vocabulary import HebrewWeekdays

DEFAULT_CONFIG_PATH = Path.home() / '.config' / 'meckano-filler.json'


def get_config_path() -> Path:
	"""Get the configuration file path."""
	return DEFAULT_CONFIG_PATH


def config_exists(path: Optional[Path] = None) -> bool:
	"""Check if the configuration file exists."""
	return (path or get_config_path()).exists()


def load_config(path: Optional[Path] = None) -> FillerConfig:
	"""Load configuration from JSON file."""
	config_path = path or get_config_path()

	if not config_path.exists():
		raise FileNotFoundError(
			f"Config not found at {config_path}\nRun 'meckano init' to create one."
		)

	try:
		return FillerConfig.model_validate_json(config_path.read_text(encoding='utf-8'))
	except ValidationError as e:
		raise ValueError(f'Invalid config: {e}') from e


def load_config_or_default(path: Optional[Path] = None) -> FillerConfig:
	"""Load the config file if there is one, otherwise use built-in defaults.

	An explicitly given path must exist.
	"""
	if path is None and not config_exists():
		logger.debug('No config file, using defaults')
		return FillerConfig()
	return load_config(path)


def save_config(config: FillerConfig, path: Optional[Path] = None) -> None:
	"""Save configuration to JSON file."""
	config_path = path or get_config_path()
	config_path.parent.mkdir(parents=True, exist_ok=True)

	try:
		config_path.write_text(
			config.model_dump_json(indent=2), encoding='utf-8'
		)
	except OSError as e:
		raise OSError(f'Failed to save config to {config_path}: {e}') from e


def create_config_interactive() -> FillerConfig:
	"""Create a new configuration interactively."""
	defaults = FillerConfig()

	logger.info('🔧 Meckano Filler Setup\n')

	url = Prompt.ask('[yellow]Meckano URL[/yellow]', default=str(defaults.url))

	logger.info('\nWeekend days (Hebrew letters, e.g. ו ש):')
	letters = Prompt.ask(
		'[yellow]Weekend letters[/yellow]', default=' '.join(sorted(defaults.weekend_days))
	)
	weekend_days = frozenset(letters.split())
	unknown = [letter for letter in weekend_days if HebrewWeekdays.from_letter(letter) is None]
	if unknown or not weekend_days:
		logger.warning('Invalid weekend letters %s, using defaults', unknown)
		weekend_days = defaults.weekend_days

	headless = Confirm.ask('\n[yellow]Run browser in headless mode?[/yellow]', default=False)

	return defaults.model_copy(
		update={'url': HttpUrl(url), 'weekend_days': weekend_days, 'headless': headless}
	)
