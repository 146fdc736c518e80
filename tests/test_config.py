"""Tests for configuration loading."""

from datetime import timezone
from zoneinfo import ZoneInfo

from almanac.config import Config, load_config


class TestLoadConfig:
    def test_missing_file_gives_defaults(self, tmp_path):
        config = load_config(tmp_path / "absent.conf")
        assert config == Config()
        assert config.api_base_url == "http://localhost:8080"
        assert config.default_project_id == 1

    def test_reads_values(self, tmp_path):
        path = tmp_path / "almanac.conf"
        path.write_text(
            "# almanac settings\n"
            "\n"
            "API_BASE_URL=http://todo.local:9000/\n"
            'TIMEZONE="America/Toronto" # home\n'
            "DEFAULT_PROJECT_ID=4\n"
            "UNTITLED_TITLE='No title'\n"
        )

        config = load_config(path)

        assert config.api_base_url == "http://todo.local:9000"
        assert config.timezone == "America/Toronto"
        assert config.default_project_id == 4
        assert config.untitled_title == "No title"

    def test_inline_comment_on_unquoted_value(self, tmp_path):
        path = tmp_path / "almanac.conf"
        path.write_text("TIMEZONE=Europe/Paris # work\n")
        assert load_config(path).timezone == "Europe/Paris"

    def test_bad_project_id_ignored(self, tmp_path, caplog):
        path = tmp_path / "almanac.conf"
        path.write_text("DEFAULT_PROJECT_ID=inbox\n")
        assert load_config(path).default_project_id == 1
        assert "DEFAULT_PROJECT_ID" in caplog.text

    def test_unknown_keys_and_junk_ignored(self, tmp_path):
        path = tmp_path / "almanac.conf"
        path.write_text("NOT_A_SETTING=1\njust some words\n")
        assert load_config(path) == Config()


class TestTzinfo:
    def test_utc_default(self):
        assert Config().tzinfo() is timezone.utc

    def test_named_zone(self):
        assert Config(timezone="America/Toronto").tzinfo() == ZoneInfo("America/Toronto")

    def test_unknown_zone_falls_back(self, caplog):
        assert Config(timezone="Mars/Olympus").tzinfo() is timezone.utc
        assert "Unknown timezone" in caplog.text
