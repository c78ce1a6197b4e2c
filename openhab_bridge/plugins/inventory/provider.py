"""
Inventory Provider - reconciliation loop.

Fetches the openHAB inventory on a fixed interval, classifies and renders it,
and publishes the result to the host as agent instructions and function schemas.
"""

import asyncio
import enum
import logging
import time
from dataclasses import asdict
from typing import Any, Dict, Optional

from openhab_bridge.config import DEFAULT_REFRESH_INTERVAL_S
from openhab_bridge.errors import RemoteFetchError
from openhab_bridge.host import Extension
from openhab_bridge.plugins.base import BridgePlugin
from openhab_bridge.plugins.inventory.models import RenderedMemory, Snapshot
from openhab_bridge.plugins.inventory.normalizer import classify
from openhab_bridge.plugins.inventory.renderer import render
from openhab_bridge.plugins.inventory.scheduler import ScheduledTask
from openhab_bridge.plugins.inventory.sources.base import InventorySource

logger = logging.getLogger(__name__)


class LoopState(str, enum.Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    RENDERING = "rendering"
    PUBLISHED = "published"


class InventoryProvider(BridgePlugin):
    """
    Inventory Provider plugin.

    Owns the published memory and the refresh timer; nothing else writes either.
    A cycle runs on the host's boot/enable events and every
    `refresh_interval_s` after the previous cycle finished, whatever its outcome.
    """

    def __init__(
        self,
        name: str,
        config: Dict[str, Any],
        *,
        extension: Extension,
        source: InventorySource,
    ):
        super().__init__(name, config, extension=extension)

        self.source = source
        self.refresh_interval_s = float(config.get("refresh_interval_s", DEFAULT_REFRESH_INTERVAL_S))
        if self.refresh_interval_s <= 0:
            raise ValueError(f"refresh_interval_s must be positive, got {self.refresh_interval_s!r}")

        self.state = LoopState.IDLE
        self.timer = ScheduledTask(self.update_memory)
        self._cycle_lock = asyncio.Lock()

        self._snapshot: Optional[Snapshot] = None
        self._published: Optional[RenderedMemory] = None
        self._last_refresh: Optional[float] = None
        self._last_error: Optional[str] = None
        self._cycles = 0
        self._failures = 0

    def start(self) -> None:
        """Hook the loop onto the host lifecycle."""
        if self._started:
            return
        self.extension.on("boot", self.update_memory)
        self.extension.on("enable", self.update_memory)
        self._mark_started()

    def stop(self) -> None:
        self.timer.shutdown()
        self.state = LoopState.IDLE
        self._mark_stopped()

    def health(self) -> Dict[str, Any]:
        if self._last_error is None:
            status = "healthy"
        elif self._published is not None:
            status = "degraded"
        else:
            status = "unhealthy"

        if self._snapshot is None:
            message = "No inventory fetched yet"
        else:
            message = (
                f"{len(self._snapshot.switchs)} switchs, {len(self._snapshot.shutters)} shutters, "
                f"{len(self._snapshot.locations)} locations"
            )
        return {
            "status": status,
            "message": message,
            "details": {
                "state": self.state.value,
                "cycles": self._cycles,
                "failures": self._failures,
                "last_refresh": self._last_refresh,
                "last_error": self._last_error,
                "next_refresh_pending": self.timer.pending,
            },
        }

    async def update_memory(self) -> bool:
        """
        Run one reconciliation cycle and re-arm the timer.

        Returns:
            True if a fresh snapshot was published, False if the cycle failed
            (the previously published memory is left untouched)
        """
        self.timer.cancel()
        async with self._cycle_lock:
            # The cycle we waited on may have armed a timer meanwhile.
            self.timer.cancel()
            try:
                await self._run_cycle()
                published = True
            except RemoteFetchError as e:
                self._on_failure(e)
                published = False
            except Exception as e:
                logger.exception("Unexpected error during inventory refresh")
                self._on_failure(e)
                published = False

            # Cancellation (shutdown) propagates above and leaves the timer disarmed.
            self._cycles += 1
            self.state = LoopState.IDLE if self._published is None else LoopState.PUBLISHED
            self.timer.arm(self.refresh_interval_s)
        return published

    async def _run_cycle(self) -> None:
        self.state = LoopState.FETCHING
        items = await self.source.fetch_items()

        self.state = LoopState.RENDERING
        snapshot = classify(items)
        rendered = render(snapshot)

        self._publish(snapshot, rendered)
        self.extension.clear_errors()
        self._last_error = None

        await self._refresh_system_info()

    def _publish(self, snapshot: Snapshot, rendered: RenderedMemory) -> None:
        from openhab_bridge.ext_logging import get_logger
        log = get_logger("OPENHAB.Inventory")

        changed = rendered != self._published
        if changed:
            self.extension.set_instructions(rendered.instructions)
            self.extension.set_function_schemas(list(rendered.function_schemas))

        self._snapshot = snapshot
        self._published = rendered
        self._last_refresh = time.time()
        self.state = LoopState.PUBLISHED

        log.info("OPENHAB.Inventory.Published", extra={"fields": {
            "locations": len(snapshot.locations),
            "switchs": len(snapshot.switchs),
            "shutters": len(snapshot.shutters),
            "functions": rendered.function_names,
            "changed": changed
        }})

    async def _refresh_system_info(self) -> None:
        """Best effort: a failure is reported but keeps the fresh snapshot."""
        try:
            info = await self.source.fetch_system_info()
        except RemoteFetchError as e:
            self._report(e, event="OPENHAB.Inventory.SystemInfoFailed")
            return
        self.extension.set_software_version(info.get("osVersion"))

    def _on_failure(self, error: Exception) -> None:
        self._failures += 1
        self._last_error = str(error)
        self._report(error, event="OPENHAB.Inventory.RefreshFailed")

    def _report(self, error: Exception, *, event: str) -> None:
        # A disabled extension is expected to fail; stay silent.
        if not self.extension.is_enabled():
            return

        from openhab_bridge.ext_logging import get_logger
        log = get_logger("OPENHAB.Inventory")
        log.error(event, extra={"fields": {
            "error": str(error),
            "error_type": type(error).__name__,
            "retry_in_s": self.refresh_interval_s
        }})
        self.extension.clear_errors()
        self.extension.add_error(str(error))

    def get_snapshot(self) -> Dict[str, Any]:
        """JSON-compatible view of the last published snapshot."""
        snapshot = self._snapshot or Snapshot()
        return {
            "locations": [asdict(location) for location in snapshot.locations],
            "switchs": [asdict(switch) for switch in snapshot.switchs],
            "shutters": [asdict(shutter) for shutter in snapshot.shutters],
            "counts": {
                "locations": len(snapshot.locations),
                "switchs": len(snapshot.switchs),
                "shutters": len(snapshot.shutters),
            },
            "functions": self._published.function_names if self._published else [],
            "state": self.state.value,
            "last_refresh": self._last_refresh,
            "last_error": self._last_error,
        }

    @property
    def published(self) -> Optional[RenderedMemory]:
        return self._published
