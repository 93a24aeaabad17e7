"""Unit tests for GameConfig validation, layout profiles and loading."""

import json

import pytest

from rising_lion.config import ConfigError, GameConfig, load_config


class TestLayout:
    def test_desktop_profile(self):
        config = GameConfig()
        assert config.target_size == pytest.approx(156.0)
        assert config.target_min_spacing == pytest.approx(234.0)
        assert config.emplacement_size == 117.0
        assert config.airplane_size == pytest.approx((127.5, 148.75))
        assert config.airplane_speed == 5.0
        assert config.airplane_start() == pytest.approx((536.25, 630.0))

    def test_mobile_profile(self):
        config = GameConfig(width=400, height=700, mobile=True)
        assert config.target_size == 80.0
        assert config.emplacement_size == 60.0
        assert config.airplane_size == (100.0, 120.0)
        assert config.airplane_speed == 4.0
        assert config.airplane_start() == (150.0, 600.0)


class TestValidation:
    @pytest.mark.parametrize('overrides', [
        {'width': 0},
        {'height': -10},
        {'width': float('nan')},
        {'width': 100},  # narrower than a reactor
        {'background_speed': -1},
        {'projectile_speed': -0.5},
        {'background_speed': float('nan')},
        {'round_speed': float('inf')},
        {'engagement_range': float('-inf')},
        {'fire_interval_max': float('inf')},
        {'game_over_duration': float('nan')},
        {'ground_target_spawn_interval': 0},
        {'emplacement_spawn_interval': -3},
        {'max_health': 0},
        {'fire_interval_min': 0},
        {'fire_interval_min': 3.0, 'fire_interval_max': 2.0},
        {'game_over_duration': -1},
        {'activation_score': -1},
    ])
    def test_rejects_unplayable_settings(self, overrides):
        with pytest.raises(ConfigError):
            GameConfig(**overrides)

    def test_config_error_is_value_error(self):
        with pytest.raises(ValueError):
            GameConfig(height=0)

    def test_zero_speeds_allowed(self):
        config = GameConfig(background_speed=0)
        assert config.background_speed == 0


class TestFromDict:
    def test_accepts_browser_option_names(self):
        config = GameConfig.from_dict({
            'width': 900,
            'activationScore': 4,
            'maxHealth': 3,
            'groundTargetSpawnInterval': 60,
            'fireIntervalMin': 1.0,
            'fireIntervalMax': 1.25,
            'engagementRange': 450,
        })
        assert config.width == 900
        assert config.activation_score == 4
        assert config.max_health == 3
        assert config.ground_target_spawn_interval == 60
        assert config.fire_interval_max == 1.25
        assert config.engagement_range == 450

    def test_accepts_snake_case(self):
        config = GameConfig.from_dict({'round_speed': 6, 'leaderboard_enabled': False})
        assert config.round_speed == 6
        assert config.leaderboard_enabled is False

    def test_rejects_unknown_option(self):
        with pytest.raises(ConfigError, match='unknown config option'):
            GameConfig.from_dict({'gravity': 9.8})

    def test_round_trips_through_to_dict(self):
        config = GameConfig(mobile=True, width=500, height=900, seed=7)
        assert GameConfig.from_dict(config.to_dict()) == config


class TestLoadConfig:
    def test_reads_json_file(self, tmp_path):
        path = tmp_path / 'config.json'
        path.write_text(json.dumps({'height': 640, 'emplacementsEnabled': False}))
        config = load_config(path)
        assert config.height == 640
        assert config.emplacements_enabled is False

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError):
            load_config(tmp_path / 'nope.json')

    def test_bad_json(self, tmp_path):
        path = tmp_path / 'config.json'
        path.write_text('{width: 3')
        with pytest.raises(ConfigError):
            load_config(path)

    def test_not_an_object(self, tmp_path):
        path = tmp_path / 'config.json'
        path.write_text('[1, 2]')
        with pytest.raises(ConfigError):
            load_config(path)
