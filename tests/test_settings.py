import json
import pathlib
import sys

import pytest
import yaml

sys.path.insert(0, str(pathlib.Path(__file__).resolve().parents[1] / "beatmeta"))

from modules.config_handler import ConfigurationManager
from settings import BeatmetaSettings, build_lookup_config, parse_flexible_bool


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for name in (
        "OSU_API_URL", "OSU_ACCESS_TOKEN", "OSU_API_VERSION", "BEATMETA_USER_AGENT",
        "REQUEST_TIMEOUT_SECONDS", "FORCE_OFFLINE", "LOG_LEVEL", "LOG_FILE",
    ):
        monkeypatch.delenv(name, raising=False)


def test_settings_defaults():
    config = build_lookup_config(BeatmetaSettings())

    assert config.api_url == "https://osu.ppy.sh/api/v2"
    assert config.access_token is None
    assert config.request_timeout_seconds == 10
    assert config.force_offline is False


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("OSU_API_URL", "http://osu.local/api/v2")
    monkeypatch.setenv("OSU_ACCESS_TOKEN", "token")
    monkeypatch.setenv("OSU_API_VERSION", "20250101")
    monkeypatch.setenv("BEATMETA_USER_AGENT", "tests/0.1")
    monkeypatch.setenv("REQUEST_TIMEOUT_SECONDS", "30")
    monkeypatch.setenv("FORCE_OFFLINE", "yes")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = BeatmetaSettings()
    config = build_lookup_config(settings)

    assert config.api_url == "http://osu.local/api/v2"
    assert config.access_token == "token"
    assert config.api_version == "20250101"
    assert config.user_agent == "tests/0.1"
    assert config.request_timeout_seconds == 30
    assert config.force_offline is True
    assert settings.log_level == "debug"


@pytest.mark.parametrize("value,expected", [
    ("1", True), ("on", True), ("TRUE", True), ("y", True),
    ("0", False), ("off", False), ("No", False), ("", False),
    (True, True), (0, False),
])
def test_parse_flexible_bool(value, expected):
    assert parse_flexible_bool(value) is expected


def test_parse_flexible_bool_rejects_garbage():
    with pytest.raises(ValueError):
        parse_flexible_bool("maybe")


def test_load_yaml_config(tmp_path, monkeypatch):
    monkeypatch.setenv("OSU_ACCESS_TOKEN", "from-env")
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump({
        "access_token": "from-file",
        "request_timeout_seconds": 5,
        "force_offline": "on",
    }))

    settings = ConfigurationManager(path).load_config()

    assert settings.access_token == "from-file"
    assert settings.request_timeout_seconds == 5
    assert settings.force_offline is True


def test_load_json_config(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"api_url": "http://json.local", "log_file": "lookup.log"}))

    settings = ConfigurationManager(path).load_config()

    assert settings.api_url == "http://json.local"
    assert settings.log_file == "lookup.log"


def test_empty_yaml_config_uses_defaults(tmp_path):
    path = tmp_path / "config.yml"
    path.write_text("")

    assert ConfigurationManager(path).load_config().api_url == "https://osu.ppy.sh/api/v2"


def test_missing_config_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        ConfigurationManager(tmp_path / "nope.yaml").load_config()


def test_invalid_config_value(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"request_timeout_seconds": "soon"}))

    with pytest.raises(Exception):
        ConfigurationManager(path).load_config()
