"""Tests for settings construction, presets and league config files."""

import json
import logging

import pytest
from pydantic import ValidationError

from fairway.config import (
    DEFAULT_HANDICAP_SETTINGS,
    HANDICAP_PRESETS,
    apply_preset,
    build_handicap_settings,
    league_to_handicap_settings,
    load_league_config,
)
from fairway.constants import ByePointsMode, Rounding, ScoreSelection
from fairway.logging_config import get_logger, setup_logging
from fairway.utils import save_json, validate_json_file
from fairway.schemas import LeagueConfigFile


def valid_record(**overrides):
    record = {
        'handicapBaseScore': 36,
        'handicapMultiplier': 0.8,
        'handicapRounding': 'round',
        'handicapDefault': 2,
        'handicapMax': None,
    }
    record.update(overrides)
    return record


class TestDefaults:
    """Tests for the documented defaults."""

    def test_default_values(self):
        """Test the defaults match the documented league formula."""
        settings = DEFAULT_HANDICAP_SETTINGS
        assert settings.base_score == 35
        assert settings.multiplier == 0.9
        assert settings.rounding == Rounding.FLOOR
        assert settings.max_handicap == 9
        assert settings.min_handicap is None
        assert settings.score_selection == ScoreSelection.ALL
        assert settings.weight_recent == 1.5
        assert settings.weight_decay == 0.9

    def test_settings_are_frozen(self):
        """Test settings cannot be modified in place."""
        with pytest.raises(ValidationError):
            DEFAULT_HANDICAP_SETTINGS.base_score = 40


class TestBuildHandicapSettings:
    """Tests for the settings builder."""

    def test_overrides_coerce_enums(self):
        """Test enum strings are converted once at construction."""
        settings = build_handicap_settings(rounding='ceil', score_selection='last_n', score_count=5)
        assert settings.rounding == Rounding.CEIL
        assert settings.score_selection == ScoreSelection.LAST_N
        assert settings.score_count == 5
        assert settings.base_score == 35

    def test_unknown_field_rejected(self):
        """Test typos in field names are caught."""
        with pytest.raises(ValidationError):
            build_handicap_settings(base_scor=40)

    def test_invalid_enum_rejected(self):
        """Test unknown rounding method is rejected."""
        with pytest.raises(ValidationError):
            build_handicap_settings(rounding='truncate')

    def test_builds_on_base(self):
        """Test overrides layer on top of the given base."""
        base = build_handicap_settings(base_score=36)
        settings = build_handicap_settings(base, multiplier=1.0)
        assert settings.base_score == 36
        assert settings.multiplier == 1.0


class TestPresets:
    """Tests for named handicap presets."""

    def test_six_presets(self):
        """Test every preset is listed with a label."""
        names = [preset['name'] for preset in HANDICAP_PRESETS]
        assert names == ['simple', 'usga_style', 'forgiving', 'competitive', 'strict', 'custom']
        assert all(preset['label'] and preset['description'] for preset in HANDICAP_PRESETS)

    def test_usga_style(self):
        """Test the 'Best of Recent' preset."""
        preset = next(p for p in HANDICAP_PRESETS if p['name'] == 'usga_style')
        assert preset['label'] == 'Best of Recent'
        settings = apply_preset('usga_style')
        assert settings.score_selection == ScoreSelection.BEST_OF_LAST
        assert settings.best_of == 4
        assert settings.last_of == 8
        assert settings.multiplier == 0.96

    def test_strict(self):
        """Test the strict preset."""
        settings = apply_preset('strict')
        assert settings.max_handicap == 18
        assert settings.cap_exceptional is True
        assert settings.exceptional_cap == 50
        assert settings.use_trend is True
        assert settings.trend_weight == 0.15

    def test_preset_ignores_current(self):
        """Test presets merge onto the defaults, not the league's settings."""
        current = build_handicap_settings(base_score=40, max_handicap=None)
        assert apply_preset('simple', current) == DEFAULT_HANDICAP_SETTINGS
        assert apply_preset('forgiving', current).base_score == 35

    def test_custom_keeps_current(self):
        """Test 'custom' leaves the current settings alone."""
        current = build_handicap_settings(base_score=40)
        assert apply_preset('custom', current) is current

    def test_unknown_preset(self, caplog):
        """Test an unknown preset warns and returns current."""
        current = build_handicap_settings(base_score=40)
        with caplog.at_level(logging.WARNING, logger='fairway.config'):
            assert apply_preset('bogus', current) is current
        assert 'Unknown preset name: "bogus"' in caplog.text


class TestLeagueRecord:
    """Tests for mapping stored league records to settings."""

    def test_required_fields_mapped(self):
        """Test stored columns map onto settings."""
        settings = league_to_handicap_settings(valid_record())
        assert settings.base_score == 36
        assert settings.multiplier == 0.8
        assert settings.rounding == Rounding.ROUND
        assert settings.default_handicap == 2
        assert settings.max_handicap is None

    def test_optional_nulls_take_defaults(self):
        """Test null optional columns fall back to their defaults."""
        settings = league_to_handicap_settings(valid_record(
            handicapDropHighest=None,
            handicapWeightRecent=None,
            handicapScoreSelection=None,
            handicapBestOf=3,
        ))
        assert settings.drop_highest == 0
        assert settings.weight_recent == 1.5
        assert settings.score_selection == ScoreSelection.ALL
        assert settings.best_of == 3

    def test_non_numeric_base_score(self, caplog):
        """Test a malformed required field returns the defaults wholesale."""
        with caplog.at_level(logging.WARNING, logger='fairway.config'):
            settings = league_to_handicap_settings(valid_record(handicapBaseScore='abc'))
        assert settings is DEFAULT_HANDICAP_SETTINGS
        assert 'Invalid league handicap data' in caplog.text

    @pytest.mark.parametrize('column', ['handicapBaseScore', 'handicapMultiplier', 'handicapDefault', 'handicapMax'])
    @pytest.mark.parametrize('value', [float('nan'), float('inf')])
    def test_non_finite_required_field(self, column, value):
        """Test NaN or infinity in a required column returns the defaults wholesale."""
        settings = league_to_handicap_settings(valid_record(**{column: value}))
        assert settings is DEFAULT_HANDICAP_SETTINGS

    def test_missing_max_handicap(self):
        """Test handicapMax must be present even though it may be null."""
        record = valid_record()
        del record['handicapMax']
        assert league_to_handicap_settings(record) is DEFAULT_HANDICAP_SETTINGS

    def test_unrelated_columns_ignored(self):
        """Test other league columns in the record are ignored."""
        settings = league_to_handicap_settings(valid_record(name='Tuesday Night League'))
        assert settings.base_score == 36


class TestLeagueConfigFile:
    """Tests for loading league_config.json."""

    def test_load_valid_file(self, tmp_path):
        """Test a full config file loads and validates."""
        path = tmp_path / 'league_config.json'
        path.write_text(json.dumps({
            'name': 'Tuesday Night League',
            'handicap': valid_record(),
            'scoring': {'scoring_type': 'stroke_play', 'point_preset': 'weighted'},
            'schedule': {'bye_points_mode': 'team_average'},
        }))
        config = load_league_config(path)
        assert config.name == 'Tuesday Night League'
        assert config.scoring.point_preset.value == 'weighted'
        assert config.schedule.bye_points_mode == ByePointsMode.TEAM_AVERAGE
        assert league_to_handicap_settings(config.handicap).base_score == 36

    def test_missing_file(self, tmp_path):
        """Test a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_league_config(tmp_path / 'missing.json')

    def test_invalid_file(self, tmp_path):
        """Test schema failures are reported as ValueError."""
        path = tmp_path / 'league_config.json'
        path.write_text(json.dumps({'name': 'League', 'scoring': {'point_scale': [1, 5]}}))
        with pytest.raises(ValueError, match='Schema validation failed'):
            load_league_config(path)

    def test_save_and_validate(self, tmp_path):
        """Test a saved config validates against the schema."""
        path = tmp_path / 'nested' / 'league_config.json'
        save_json(path, LeagueConfigFile(name='Saved League'))
        is_valid, error = validate_json_file(path, LeagueConfigFile)
        assert is_valid
        assert error is None


class TestLogging:
    """Tests for logging setup."""

    def test_get_logger_prefixes_namespace(self):
        """Test bare module names land under the fairway logger."""
        assert get_logger('handicap').name == 'fairway.handicap'
        assert get_logger('fairway.schedule').name == 'fairway.schedule'

    def test_setup_logging_console_only(self):
        """Test default setup attaches a single console handler."""
        logger = setup_logging(level=logging.DEBUG)
        assert logger.name == 'fairway'
        assert len(logger.handlers) == 1
        logger.handlers = []

    def test_setup_logging_to_file(self, tmp_path):
        """Test file logging writes into the log directory."""
        logger = setup_logging(log_dir=tmp_path, log_to_file=True, log_to_console=False)
        logger.info('schedule generated')
        for handler in logger.handlers:
            handler.close()
        logger.handlers = []
        assert list(tmp_path.glob('fairway_*.log'))
