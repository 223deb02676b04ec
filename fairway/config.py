"""League configuration management.

Handicap settings always reach the calculator fully populated: every
consumer starts from DEFAULT_HANDICAP_SETTINGS and layers overrides on top
through build_handicap_settings(), so no caller ever has to guess at a
missing field.
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping, Optional

from pydantic import ValidationError

from .schemas import HandicapSettings, LeagueConfigFile, LeagueHandicapRecord
from .utils import load_json

logger = logging.getLogger('fairway.config')

DEFAULT_CONFIG_PATH = Path('data') / 'league_config.json'

DEFAULT_HANDICAP_SETTINGS = HandicapSettings()

# Preset overrides are applied on top of DEFAULT_HANDICAP_SETTINGS
HANDICAP_PRESETS: list[dict[str, Any]] = [
    {
        'name': 'simple',
        'label': 'Simple',
        'description': 'Average all scores with the basic formula',
        'settings': {},
    },
    {
        'name': 'usga_style',
        'label': 'Best of Recent',
        'description': 'Best 4 of the last 8 scores, similar to official handicap systems',
        'settings': {
            'score_selection': 'best_of_last',
            'best_of': 4,
            'last_of': 8,
            'multiplier': 0.96,
        },
    },
    {
        'name': 'forgiving',
        'label': 'Forgiving',
        'description': 'Last 5 scores with the worst one dropped',
        'settings': {
            'score_selection': 'last_n',
            'score_count': 5,
            'drop_highest': 1,
        },
    },
    {
        'name': 'competitive',
        'label': 'Competitive',
        'description': 'Recent rounds count more than old ones',
        'settings': {
            'use_weighting': True,
            'weight_recent': 1.3,
            'weight_decay': 0.95,
        },
    },
    {
        'name': 'strict',
        'label': 'Strict',
        'description': 'Exceptional scores capped, improving teams adjusted down',
        'settings': {
            'max_handicap': 18,
            'cap_exceptional': True,
            'exceptional_cap': 50,
            'use_trend': True,
            'trend_weight': 0.15,
        },
    },
    {
        'name': 'custom',
        'label': 'Custom',
        'description': 'Configure every setting yourself',
        'settings': {},
    },
]

_PRESETS_BY_NAME = {preset['name']: preset for preset in HANDICAP_PRESETS}


def build_handicap_settings(
    base: Optional[HandicapSettings] = None,
    **overrides: Any,
) -> HandicapSettings:
    """
    Build a fully-populated HandicapSettings from a base plus overrides.

    Overrides go through validation, so enum strings ('ceil', 'last_n')
    are coerced exactly once, here.

    Args:
        base: Settings to start from (default: DEFAULT_HANDICAP_SETTINGS)
        **overrides: Field values to replace

    Returns:
        New HandicapSettings instance

    Raises:
        ValidationError: If an override has the wrong type or is not a field

    Example:
        settings = build_handicap_settings(rounding='ceil', max_handicap=None)
    """
    if base is None:
        base = DEFAULT_HANDICAP_SETTINGS
    data = base.model_dump()
    data.update(overrides)
    return HandicapSettings.model_validate(data)


def get_preset(name: str) -> Optional[dict[str, Any]]:
    """Look up a handicap preset by name."""
    return _PRESETS_BY_NAME.get(name)


def apply_preset(name: str, current: Optional[HandicapSettings] = None) -> HandicapSettings:
    """
    Apply a named handicap preset.

    Presets are complete configurations: their overrides are merged onto
    the defaults, not onto ``current``. The 'custom' preset and unknown
    names leave ``current`` untouched.

    Args:
        name: Preset name (see HANDICAP_PRESETS)
        current: The league's current settings (default: defaults)

    Returns:
        Resulting settings
    """
    if current is None:
        current = DEFAULT_HANDICAP_SETTINGS

    preset = get_preset(name)
    if preset is None:
        logger.warning(f'Unknown preset name: "{name}"')
        return current

    if name == 'custom':
        return current

    return build_handicap_settings(DEFAULT_HANDICAP_SETTINGS, **preset['settings'])


def league_to_handicap_settings(record: Mapping[str, Any]) -> HandicapSettings:
    """
    Map a stored league record (handicapXxx keys) to HandicapSettings.

    Optional columns that are missing or null take their documented
    defaults. If any required column is missing or malformed the whole
    record is rejected and DEFAULT_HANDICAP_SETTINGS is returned; there is
    no partial fallback.

    Args:
        record: Stored league row, e.g. {'handicapBaseScore': 35, ...}

    Returns:
        HandicapSettings for the league
    """
    try:
        parsed = LeagueHandicapRecord.model_validate(dict(record))
    except ValidationError as e:
        logger.warning(f'Invalid league handicap data, using defaults: {e.error_count()} error(s)')
        for error in e.errors():
            field = '.'.join(str(part) for part in error['loc'])
            logger.debug(f'  {field}: {error["msg"]}')
        return DEFAULT_HANDICAP_SETTINGS

    return HandicapSettings.model_validate(parsed.model_dump())


def load_league_config(path: Path | str) -> LeagueConfigFile:
    """
    Load and validate a league_config.json file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file fails schema validation
    """
    return load_json(path, schema=LeagueConfigFile)


@lru_cache(maxsize=1)
def get_league_config() -> LeagueConfigFile:
    """
    Load league configuration from data/league_config.json.

    Configuration is cached after first load.

    Example:
        from fairway.config import get_league_config
        config = get_league_config()
        print(f"League: {config.name}")
    """
    return load_league_config(DEFAULT_CONFIG_PATH)


def get_handicap_settings() -> HandicapSettings:
    """Handicap settings for the configured league."""
    handicap = get_league_config().handicap
    if not handicap:
        return DEFAULT_HANDICAP_SETTINGS
    return league_to_handicap_settings(handicap)


def clear_config_cache() -> None:
    """
    Clear the configuration cache.

    Use this if the config file is modified during runtime
    and you need to reload it.
    """
    get_league_config.cache_clear()
