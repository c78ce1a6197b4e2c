import pytest

from openhab_bridge.config import BridgeConfig, load_bridge_config


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("OPENHAB_REFRESH_INTERVAL_S", "OPENHAB_HTTP_TIMEOUT_S", "OPENHAB_HOST", "OPENHAB_PORT"):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    assert load_bridge_config() == BridgeConfig()
    assert BridgeConfig().refresh_interval_s == 60.0


def test_overrides(monkeypatch):
    monkeypatch.setenv("OPENHAB_REFRESH_INTERVAL_S", "15")
    monkeypatch.setenv("OPENHAB_HTTP_TIMEOUT_S", "2.5")
    monkeypatch.setenv("OPENHAB_HOST", "127.0.0.1")
    monkeypatch.setenv("OPENHAB_PORT", "9000")

    config = load_bridge_config()
    assert config.refresh_interval_s == 15.0
    assert config.http_timeout_s == 2.5
    assert config.host == "127.0.0.1"
    assert config.port == 9000


def test_invalid_values_fall_back(monkeypatch):
    monkeypatch.setenv("OPENHAB_REFRESH_INTERVAL_S", "often")
    monkeypatch.setenv("OPENHAB_PORT", "")

    config = load_bridge_config()
    assert config.refresh_interval_s == 60.0
    assert config.port == 8000


def test_rejects_non_positive_interval(monkeypatch):
    monkeypatch.setenv("OPENHAB_REFRESH_INTERVAL_S", "0")
    with pytest.raises(ValueError, match="OPENHAB_REFRESH_INTERVAL_S"):
        load_bridge_config()
