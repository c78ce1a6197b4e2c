"""
Tests for plugin system foundation.

Tests plugin lifecycle, host wiring and health checks.
"""

import asyncio
from typing import Any, Dict

import pytest

from openhab_bridge.host import Extension
from openhab_bridge.plugins import BridgePlugin


class DummyPlugin(BridgePlugin):
    """Plugin that counts boot events."""

    def __init__(self, name: str, config: Dict[str, Any], *, extension: Extension):
        super().__init__(name, config, extension=extension)
        self.boots = 0
        self.stop_called = False

    async def _on_boot(self) -> None:
        self.boots += 1

    def start(self) -> None:
        if self._started:
            return
        self.extension.on("boot", self._on_boot)
        self._mark_started()

    def stop(self) -> None:
        self.stop_called = True
        self._mark_stopped()

    def health(self) -> Dict[str, Any]:
        return {
            "status": "healthy",
            "message": "Dummy plugin is fine",
            "details": {"boots": self.boots}
        }


class TestPluginBase:
    """Test BridgePlugin base class."""

    def test_plugin_creation(self):
        extension = Extension("OpenHAB")
        plugin = DummyPlugin("test", {"foo": "bar"}, extension=extension)
        assert plugin.name == "test"
        assert plugin.config == {"foo": "bar"}
        assert plugin.extension is extension
        assert not plugin.is_started

    def test_plugin_lifecycle(self):
        plugin = DummyPlugin("test", {}, extension=Extension("OpenHAB"))

        # Start
        plugin.start()
        assert plugin.is_started

        # Stop
        plugin.stop()
        assert plugin.stop_called
        assert not plugin.is_started

    def test_start_is_idempotent(self):
        extension = Extension("OpenHAB")
        plugin = DummyPlugin("test", {}, extension=extension)
        plugin.start()
        plugin.start()

        asyncio.run(extension.boot())
        assert plugin.boots == 1

    def test_plugin_health(self):
        plugin = DummyPlugin("test", {}, extension=Extension("OpenHAB"))
        health = plugin.health()
        assert health["status"] == "healthy"
        assert "message" in health
        assert "details" in health

    def test_base_is_abstract(self):
        with pytest.raises(TypeError):
            BridgePlugin("test", {}, extension=Extension("OpenHAB"))
