from pathlib import Path

import pytest

from tmlr.config import DEFAULT_REPORT_PATH, load_settings
from tmlr.exceptions import ConfigError
from tmlr.timeular import BASE_URL


def test_credentials_loaded():
    settings = load_settings({"TMLR_API_KEY": "k", "TMLR_API_SECRET": "s"})

    assert settings.credentials.key == "k"
    assert settings.credentials.secret == "s"
    assert settings.base_url == BASE_URL
    assert settings.report_path == DEFAULT_REPORT_PATH
    assert settings.debug is False


@pytest.mark.parametrize(
    "environ, missing",
    [
        ({"TMLR_API_SECRET": "s"}, "TMLR_API_KEY"),
        ({"TMLR_API_KEY": "k"}, "TMLR_API_SECRET"),
        ({"TMLR_API_KEY": "", "TMLR_API_SECRET": "s"}, "TMLR_API_KEY"),
    ],
)
def test_missing_credentials(environ, missing):
    with pytest.raises(ConfigError, match=missing):
        load_settings(environ)


def test_both_missing_reported_together():
    with pytest.raises(ConfigError, match="TMLR_API_KEY, TMLR_API_SECRET"):
        load_settings({})


def test_overrides():
    settings = load_settings(
        {
            "TMLR_API_KEY": "k",
            "TMLR_API_SECRET": "s",
            "TMLR_BASE_URL": "http://localhost:8080/api/v3",
            "TMLR_DEBUG": "true",
            "TMLR_TIMEOUT": "2.5",
            "TMLR_REPORT_PATH": "out/usage.csv",
            "TMLR_TIMEZONE": "Europe/Vienna",
        }
    )

    assert settings.base_url == "http://localhost:8080/api/v3"
    assert settings.debug is True
    assert settings.timeout == 2.5
    assert settings.report_path == Path("out/usage.csv")
    assert settings.timezone == "Europe/Vienna"


def test_invalid_timeout():
    with pytest.raises(ConfigError, match="TMLR_TIMEOUT"):
        load_settings({"TMLR_API_KEY": "k", "TMLR_API_SECRET": "s", "TMLR_TIMEOUT": "soon"})


@pytest.mark.parametrize("value", ["0", "-1", "nan", "inf"])
def test_timeout_must_be_positive_and_finite(value):
    with pytest.raises(ConfigError, match="positive"):
        load_settings({"TMLR_API_KEY": "k", "TMLR_API_SECRET": "s", "TMLR_TIMEOUT": value})
