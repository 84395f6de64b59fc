"""Unit tests for configuration schema and loading."""

import json
import os

import pytest
from pydantic import ValidationError

from clipstash.config import Config, HistoryConfig, SelectionConfig, load_config
from clipstash.config.loader import read_config_file
from clipstash.core.errors import ConfigError


class TestConfigSchema:
    """Tests for the pydantic models."""

    def test_defaults(self):
        """Defaults match the documented values."""
        config = Config()
        assert config.history.max_items == 20
        assert config.history.preview_length == 60
        assert config.capture.poll_interval == 0.5
        assert config.capture.capture_text is True
        assert config.capture.capture_images is True
        assert config.selection.prompt == "Clipboard"
        assert config.selection.theme is None
        assert config.selection.paste_keys == "ctrl+v"

    def test_unknown_keys_rejected(self):
        """Typos in config keys are errors, not silently ignored."""
        with pytest.raises(ValidationError):
            Config.model_validate({"history": {"max_itmes": 5}})

    def test_max_items_must_be_positive(self):
        with pytest.raises(ValidationError):
            HistoryConfig(max_items=0)

    def test_poll_interval_must_be_positive(self):
        with pytest.raises(ValidationError):
            Config.model_validate({"capture": {"poll_interval": 0}})

    def test_both_channels_disabled_rejected(self):
        with pytest.raises(ValidationError, match="cannot both be false"):
            Config.model_validate(
                {"capture": {"capture_text": False, "capture_images": False}}
            )

    def test_single_channel_disabled_allowed(self):
        config = Config.model_validate({"capture": {"capture_text": False}})
        assert config.capture.capture_images is True

    def test_theme_expands_user(self):
        selection = SelectionConfig(theme="~/themes/clip.rasi")
        assert selection.theme == os.path.expanduser("~/themes/clip.rasi")

    def test_partial_sections_keep_other_defaults(self):
        config = Config.model_validate({"selection": {"show_icons": False}})
        assert config.selection.show_icons is False
        assert config.selection.case_insensitive is True
        assert config.history.max_items == 20


class TestLoadConfig:
    """Tests for load_config()."""

    def test_no_default_file_gives_defaults(self, clipstash_home):
        assert load_config() == Config()

    def test_default_file_is_used(self, clipstash_home):
        clipstash_home.mkdir(parents=True)
        (clipstash_home / "config.json").write_text(
            json.dumps({"history": {"max_items": 7}})
        )

        assert load_config().history.max_items == 7

    def test_empty_default_file_gives_defaults(self, clipstash_home):
        clipstash_home.mkdir(parents=True)
        (clipstash_home / "config.json").write_text("")

        assert load_config() == Config()

    def test_explicit_path(self, tmp_path):
        path = tmp_path / "custom.json"
        path.write_text(json.dumps({"capture": {"capture_images": False}}))

        assert load_config(path).capture.capture_images is False

    def test_explicit_missing_path_raises(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "nope.json")

    def test_invalid_json_raises_config_error(self, clipstash_home):
        clipstash_home.mkdir(parents=True)
        (clipstash_home / "config.json").write_text("{broken")

        with pytest.raises(ConfigError, match="Invalid JSON"):
            load_config()

    def test_validation_failure_names_source(self, tmp_path):
        path = tmp_path / "custom.json"
        path.write_text(json.dumps({"history": {"max_items": -1}}))

        with pytest.raises(ConfigError) as exc_info:
            load_config(path)
        assert str(path) in exc_info.value.message


class TestReadConfigFile:
    """Tests for read_config_file()."""

    def test_loads_object(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"history": {"max_items": 5}}))

        assert read_config_file(path) == {"history": {"max_items": 5}}

    def test_whitespace_file_is_empty_dict(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("   \n")

        assert read_config_file(path) == {}

    def test_utf8_bom_is_accepted(self, tmp_path):
        """Editors on some platforms save JSON with a BOM."""
        path = tmp_path / "config.json"
        path.write_bytes(b"\xef\xbb\xbf" + b'{"capture": {}}')

        assert read_config_file(path) == {"capture": {}}

    def test_array_is_rejected(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("[1, 2]")

        with pytest.raises(ConfigError, match="must be a JSON object"):
            read_config_file(path)

    def test_directory_is_unreadable(self, tmp_path):
        with pytest.raises(ConfigError, match="Cannot read config"):
            read_config_file(tmp_path)
