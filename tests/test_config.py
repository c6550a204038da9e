from __future__ import annotations

import json
import logging

import pytest
from pydantic import ValidationError

from core.config import AppSettings, get_user_config_dir
from core.domain.resolution import DependencyResolution
from core.exceptions import InvalidResolutionModeError
from core.logging_config import JSONFormatter, reset_logging, setup_logging


def test_settings_read_prefixed_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("DTMI_RESOLVER_REPOSITORY_LOCATION", str(tmp_path))
    monkeypatch.setenv("DTMI_RESOLVER_DEPENDENCY_RESOLUTION", "tryFromExpanded")
    monkeypatch.setenv("DTMI_RESOLVER_MAX_CONCURRENCY", "4")

    settings = AppSettings()

    assert settings.repository_location == str(tmp_path)
    assert settings.dependency_resolution is DependencyResolution.TRY_FROM_EXPANDED
    assert settings.max_concurrency == 4


def test_settings_validate_bounds():
    with pytest.raises(ValidationError):
        AppSettings(max_concurrency=0)
    with pytest.raises(ValidationError):
        AppSettings(http_timeout_seconds=0)


def test_user_config_dir_honours_xdg(monkeypatch, tmp_path):
    monkeypatch.setattr("sys.platform", "linux")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    assert get_user_config_dir() == tmp_path / "dtmi-resolver"


@pytest.mark.parametrize(
    "value,expected",
    [
        ("disabled", DependencyResolution.DISABLED),
        ("ENABLED", DependencyResolution.ENABLED),
        ("tryfromexpanded", DependencyResolution.TRY_FROM_EXPANDED),
        (DependencyResolution.ENABLED, DependencyResolution.ENABLED),
    ],
)
def test_parse_resolution_mode(value, expected):
    assert DependencyResolution.parse(value) is expected


def test_parse_resolution_mode_rejects_unknown():
    with pytest.raises(InvalidResolutionModeError):
        DependencyResolution.parse("always")


def test_default_resolution_mode():
    assert DependencyResolution.default(custom_repository=True) is DependencyResolution.ENABLED
    assert DependencyResolution.default(custom_repository=False) is DependencyResolution.TRY_FROM_EXPANDED


def test_json_formatter_outputs_one_object():
    record = logging.LogRecord("core.test", logging.INFO, __file__, 10, "hello %s", ("world",), None)
    entry = json.loads(JSONFormatter().format(record))
    assert entry["message"] == "hello world"
    assert entry["level"] == "INFO"
    assert entry["logger"] == "core.test"


def test_setup_logging_installs_single_handler():
    try:
        setup_logging("INFO")
        setup_logging("DEBUG", json_output=True)
        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JSONFormatter)
        assert root.level == logging.DEBUG
    finally:
        reset_logging()
