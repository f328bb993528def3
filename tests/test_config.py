import pytest

from waiting_interval.errors import ConfigError
from waiting_interval.runtime.config import ServerSettings, parse_delays, parse_targets


def test_parse_targets():
    assert parse_targets("api=http://api:8080/health, db=http://db:5432/") == {
        "api": "http://api:8080/health",
        "db": "http://db:5432/",
    }


@pytest.mark.parametrize("raw", ["api", "=http://x", "api="])
def test_parse_targets_rejects_malformed_entries(raw):
    with pytest.raises(ConfigError):
        parse_targets(raw)


def test_parse_delays():
    assert parse_delays("500, 1000,2000") == (500.0, 1000.0, 2000.0)


@pytest.mark.parametrize("raw", ["", "abc", "100,-5", ","])
def test_parse_delays_rejects_bad_values(raw):
    with pytest.raises(ConfigError):
        parse_delays(raw)


def test_defaults_from_empty_environment():
    settings = ServerSettings.from_env({})
    assert settings.targets == {}
    assert settings.delays_ms == (500, 1000, 2000, 5000)
    assert settings.port == 8000
    assert settings.log_level == "INFO"


def test_from_env():
    settings = ServerSettings.from_env(
        {
            "PROBE_TARGETS": "a=http://a/",
            "PROBE_DELAYS_MS": "10,20",
            "PROBE_TIMEOUT_MS": "750",
            "HOST": "127.0.0.1",
            "PORT": "9000",
            "LOG_LEVEL": "debug",
        }
    )
    assert settings.targets == {"a": "http://a/"}
    assert settings.delays_ms == (10.0, 20.0)
    assert settings.timeout_ms == 750
    assert settings.host == "127.0.0.1"
    assert settings.port == 9000
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize("env", [{"PORT": "eighty"}, {"LOG_LEVEL": "chatty"}])
def test_from_env_rejects_bad_values(env):
    with pytest.raises(ConfigError):
        ServerSettings.from_env(env)
