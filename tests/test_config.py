"""
Tests for configuration loading.
"""

from datetime import time
from pathlib import Path

import pytest

from shopcalendar.config import AppConfig


class TestAppConfig:
    """Tests for AppConfig."""

    def test_defaults(self):
        config = AppConfig()

        assert config.defaults.slot_duration_minutes == 30
        assert config.mobile_breakpoint_px == 768
        presets = config.get_presets()
        assert presets["full_day"].open == time(9, 0)
        assert presets["full_day"].close == time(18, 0)
        assert set(presets) == {"morning", "afternoon", "evening", "full_day", "late_night"}

    def test_load_from_yaml(self, tmp_path):
        config_path = tmp_path / "config.yaml"
        config_path.write_text(
            "shop_id: downtown\n"
            "data_dir: store\n"
            "defaults:\n"
            "  slot_duration_minutes: 45\n"
            "presets:\n"
            "  brunch: {open: '10:00', close: '14:00'}\n",
            encoding="utf-8"
        )

        config = AppConfig.load_from_yaml(config_path)

        assert config.shop_id == "downtown"
        assert config.defaults.slot_duration_minutes == 45
        assert list(config.get_presets()) == ["brunch"]
        assert config.resolve_data_dir(config_path) == tmp_path / "store"

    def test_missing_file_raises_error(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="Config file not found"):
            AppConfig.load_from_yaml(tmp_path / "missing.yaml")

    def test_invalid_yaml_raises_error(self, tmp_path):
        config_path = tmp_path / "config.yaml"
        config_path.write_text("presets: [unclosed", encoding="utf-8")

        with pytest.raises(ValueError, match="Invalid YAML"):
            AppConfig.load_from_yaml(config_path)

    def test_non_mapping_root_raises_error(self, tmp_path):
        config_path = tmp_path / "config.yaml"
        config_path.write_text("- just\n- a list\n", encoding="utf-8")

        with pytest.raises(ValueError, match="mapping at the root"):
            AppConfig.load_from_yaml(config_path)

    @pytest.mark.parametrize("data", [
        {"defaults": {"slot_duration_minutes": 20}},
        {"defaults": {"standard_open": "18:00", "standard_close": "09:00"}},
        {"presets": {"broken": {"open": "12:00", "close": "08:00"}}},
        {"presets": {"broken": {"open": "noon", "close": "18:00"}}},
        {"presets": {}},
        {"mobile_breakpoint_px": 0},
    ])
    def test_invalid_values_raise_error(self, data):
        with pytest.raises(ValueError):
            AppConfig(**data)

    def test_absolute_data_dir_is_kept(self, tmp_path):
        config = AppConfig(data_dir=tmp_path)

        assert config.resolve_data_dir(Path("/elsewhere/config.yaml")) == tmp_path
