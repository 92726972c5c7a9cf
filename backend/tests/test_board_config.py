"""Tests for board/label configuration loading."""

import json

import pytest

from requestdesk.core.board_config import ConfigHolder, load_desk_config, parse_desk_config
from requestdesk.core.exceptions import ConfigError
from requestdesk.models import CaselessName, LabelColor


class TestCaselessName:
    def test_trims_and_ignores_case(self):
        assert CaselessName(" Off Season ") == CaselessName("off season")
        assert CaselessName("Off Season").value == "Off Season"
        assert hash(CaselessName("FTA")) == hash(CaselessName("fta"))

    def test_matches_raw_strings(self):
        name = CaselessName("Incoming")
        assert name.matches("  INCOMING ")
        assert not name.matches("Incoming list")
        assert not name.matches(None)

    def test_blank_is_rejected(self):
        with pytest.raises(ValueError):
            CaselessName("   ")

    def test_parse_returns_none_for_blank(self):
        assert CaselessName.parse("") is None
        assert CaselessName.parse(None) is None
        assert CaselessName.parse(42) is None
        assert CaselessName.parse("x") == CaselessName("X")


class TestParseDeskConfig:
    def test_parses_form_key_names(self, config_data):
        config = parse_desk_config(config_data)
        assert [b.board_id for b in config.boards] == ["offseason1", "champ1"]
        assert config.boards[1].enabled is False
        assert config.default_event == CaselessName("off season")
        assert config.labels[0].color is LabelColor.ORANGE

    def test_accepts_alternative_key_names(self):
        config = parse_desk_config(
            {
                "boards": [{"eventName": "Regional", "boardId": "reg1"}],
                "labels": [{"name": "Software", "color": "blue"}],
            }
        )
        assert config.boards[0].enabled is True
        assert config.find_board("regional").board_id == "reg1"

    def test_privileged_label_is_added(self, desk_config):
        names = [label.name.value for label in desk_config.labels]
        assert names[-1] == "FTA"
        assert desk_config.labels[-1].color is LabelColor.PURPLE

    def test_privileged_label_not_duplicated(self, config_data):
        config_data["trelloBoardLabels"].append({"name": "fta", "color": "black"})
        config = parse_desk_config(config_data)
        fta = [label for label in config.labels if label.name == "FTA"]
        assert len(fta) == 1
        assert fta[0].color is LabelColor.BLACK

    def test_event_names_lists_enabled_boards_only(self, desk_config):
        assert desk_config.event_names == ["Off Season"]
        assert desk_config.find_board("Championship") is None

    def test_duplicate_enabled_event_rejected(self, config_data):
        config_data["trelloBoards"].append(
            {"frontendEventSelection": "OFF SEASON", "trelloId": "other", "enabled": True}
        )
        with pytest.raises(ConfigError, match="more than one enabled board"):
            parse_desk_config(config_data)

    def test_duplicate_disabled_event_allowed(self, config_data):
        config_data["trelloBoards"].append(
            {"frontendEventSelection": "Off Season", "trelloId": "old", "enabled": False}
        )
        config = parse_desk_config(config_data)
        assert config.find_board("Off Season").board_id == "offseason1"

    def test_unknown_default_event_rejected(self, config_data):
        config_data["defaultEvent"] = "Regional"
        with pytest.raises(ConfigError, match="Default event"):
            parse_desk_config(config_data)

    def test_missing_default_event_uses_first_enabled(self, config_data):
        del config_data["defaultEvent"]
        config = parse_desk_config(config_data)
        assert config.default_event == CaselessName("Off Season")

    def test_unknown_color_rejected(self, config_data):
        config_data["trelloBoardLabels"][0]["color"] = "mauve"
        with pytest.raises(ConfigError, match="Invalid board configuration"):
            parse_desk_config(config_data)

    def test_duplicate_label_rejected(self, config_data):
        config_data["trelloBoardLabels"].append({"name": "mechanical", "color": "red"})
        with pytest.raises(ConfigError, match="more than once"):
            parse_desk_config(config_data)

    def test_empty_event_name_rejected(self, config_data):
        config_data["trelloBoards"][0]["frontendEventSelection"] = "  "
        with pytest.raises(ConfigError, match="empty event name"):
            parse_desk_config(config_data)

    def test_missing_boards_rejected(self):
        with pytest.raises(ConfigError):
            parse_desk_config({"trelloBoardLabels": [{"name": "A", "color": "red"}]})

    def test_config_is_immutable(self, desk_config):
        with pytest.raises(AttributeError):
            desk_config.boards = ()


class TestLoadFromFile:
    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_desk_config(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid JSON"):
            load_desk_config(path)

    def test_holder_reload_swaps_config(self, tmp_path, config_data):
        path = tmp_path / "config.json"
        path.write_text(json.dumps(config_data), encoding="utf-8")
        holder = ConfigHolder(path)
        first = holder.config
        assert first.event_names == ["Off Season"]

        config_data["trelloBoards"][1]["enabled"] = True
        path.write_text(json.dumps(config_data), encoding="utf-8")
        second = holder.reload()
        assert second.event_names == ["Off Season", "Championship"]
        assert holder.config is second
        assert first.event_names == ["Off Season"]

    def test_holder_keeps_old_config_on_failed_reload(self, tmp_path, config_data):
        path = tmp_path / "config.json"
        path.write_text(json.dumps(config_data), encoding="utf-8")
        holder = ConfigHolder(path)
        original = holder.config

        path.write_text("[]", encoding="utf-8")
        with pytest.raises(ConfigError):
            holder.reload()
        assert holder.config is original
