"""
Actions Provider - command execution plugin.

Sends bulk state-change commands to openHAB items.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from openhab_bridge.errors import RemoteCommandError
from openhab_bridge.host import Extension
from openhab_bridge.plugins.base import BridgePlugin
from openhab_bridge.plugins.inventory.sources.base import InventorySource

logger = logging.getLogger(__name__)

DONE = "Done."
IN_PROGRESS = "In progress."


@dataclass
class ActionResult:
    """Outcome of one bulk dispatch."""

    success: bool
    message: str
    dispatched: List[str] = field(default_factory=list)  # ids that received their command
    error: Optional[Exception] = None

    def as_text(self) -> str:
        """Host-facing rendering: the agent relays this verbatim to the user."""
        if self.success:
            return self.message
        return f"Error: {self.message}"


class ActionsProvider(BridgePlugin):
    """
    Actions Provider plugin.

    Commands are sent one item at a time; the first failure aborts the rest of
    the batch. Commands already applied are not rolled back.
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
        self._commands_sent = 0
        self._last_error: Optional[str] = None

    def start(self) -> None:
        """Register the host-callable functions."""
        self.extension.set_functions([self.update_switchs, self.update_shutters])
        self._mark_started()

    def stop(self) -> None:
        self._mark_stopped()

    def health(self) -> Dict[str, Any]:
        return {
            "status": "healthy" if self._last_error is None else "degraded",
            "message": f"{self._commands_sent} commands sent",
            "details": {
                "commands_sent": self._commands_sent,
                "last_error": self._last_error,
            },
        }

    async def dispatch(self, kind: str, action: str, ids: Sequence[str]) -> ActionResult:
        """
        Send `action.upper()` to every id, sequentially.

        Args:
            kind: "switchs" or "shutters", used for logging and the success message
            action: Verb chosen by the agent (e.g. "on", "down", "stop")
            ids: Target item ids

        Returns:
            ActionResult; the error is kept structured, never raised
        """
        from openhab_bridge.ext_logging import get_logger
        log = get_logger("OPENHAB.Actions")

        command = action.upper()
        dispatched: List[str] = []

        for item_id in ids:
            log.info("OPENHAB.Actions.Sending", extra={"fields": {
                "kind": kind,
                "item_id": item_id,
                "command": command
            }})
            try:
                await self.source.send_command(item_id, command)
            except RemoteCommandError as e:
                self._last_error = e.message
                log.error("OPENHAB.Actions.CommandFailed", extra={"fields": {
                    "kind": kind,
                    "item_id": item_id,
                    "command": command,
                    "error": e.message,
                    "status_code": e.status_code,
                    "dispatched": dispatched
                }})
                return ActionResult(success=False, message=e.message, dispatched=dispatched, error=e)
            except Exception as e:
                message = str(e) or type(e).__name__
                self._last_error = message
                log.exception("OPENHAB.Actions.UnexpectedError", extra={"fields": {
                    "kind": kind,
                    "item_id": item_id,
                    "command": command,
                    "error_type": type(e).__name__,
                    "dispatched": dispatched
                }})
                return ActionResult(success=False, message=message, dispatched=dispatched, error=e)

            dispatched.append(item_id)
            self._commands_sent += 1

        self._last_error = None
        return ActionResult(success=True, message=self._success_message(kind, action), dispatched=dispatched)

    @staticmethod
    def _success_message(kind: str, action: str) -> str:
        # Shutters keep moving after the command returns; only "stop" is immediate.
        if kind == "shutters" and action != "stop":
            return IN_PROGRESS
        return DONE

    async def update_switchs(self, action: str, ids: List[str]) -> str:
        result = await self.dispatch("switchs", action, ids)
        return result.as_text()

    async def update_shutters(self, action: str, ids: List[str]) -> str:
        result = await self.dispatch("shutters", action, ids)
        return result.as_text()
