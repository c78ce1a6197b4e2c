"""
Base plugin interface for the bridge.

Plugins attach themselves to the host `Extension` on start and detach on stop.
"""

from abc import ABC, abstractmethod
from typing import Dict, Any
import logging

from openhab_bridge.host import Extension

logger = logging.getLogger(__name__)


class BridgePlugin(ABC):
    """
    Base class for bridge plugins.

    Lifecycle:
    - start(): Register hooks/functions on the host
    - stop(): Cancel pending work, release resources
    - health(): Report plugin health status
    """

    def __init__(self, name: str, config: Dict[str, Any], *, extension: Extension):
        """
        Args:
            name: Unique plugin identifier
            config: Plugin-specific configuration dict
            extension: Host the plugin publishes to
        """
        self.name = name
        self.config = config
        self.extension = extension
        self._started = False
        self._logger = logging.getLogger(f"openhab_bridge.plugin.{name}")

    @abstractmethod
    def start(self) -> None:
        """
        Start the plugin. Must be idempotent.

        Raises:
            Exception: If startup fails (will prevent server boot)
        """

    @abstractmethod
    def stop(self) -> None:
        """Stop the plugin. Must be idempotent."""

    @abstractmethod
    def health(self) -> Dict[str, Any]:
        """
        Report plugin health status.

        Returns:
            {"status": "healthy" | "degraded" | "unhealthy", "message": str, "details": dict}
        """

    def _mark_started(self) -> None:
        self._started = True
        self._logger.info(f"Plugin {self.name} started")

    def _mark_stopped(self) -> None:
        self._started = False
        self._logger.info(f"Plugin {self.name} stopped")

    @property
    def is_started(self) -> bool:
        return self._started
