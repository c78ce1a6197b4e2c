"""
LLM Tool Definitions and Execution

Function schemas for the bulk switch/shutter actions and dispatch of tool calls
coming back from the agent.
"""

import logging
from typing import Any, Dict, List

from openhab_bridge.host import Extension

logger = logging.getLogger(__name__)


# Tool definitions in OpenAI format
UPDATE_SWITCHS_TOOL: Dict[str, Any] = {
    "type": "function",
    "function": {
        "name": "update_switchs",
        "description": "Turn one or more switchs (lights, plugs) on or off. Use the switch ids from the inventory.",
        "parameters": {
            "type": "object",
            "properties": {
                "action": {
                    "type": "string",
                    "enum": ["on", "off"],
                    "description": "The state to apply to every listed switch",
                },
                "ids": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "The switch ids to update",
                },
            },
            "required": ["action", "ids"],
        },
    },
}

UPDATE_SHUTTERS_TOOL: Dict[str, Any] = {
    "type": "function",
    "function": {
        "name": "update_shutters",
        "description": (
            "Move one or more shutters. 'up' opens, 'down' closes and 'stop' halts a moving shutter. "
            "Use the shutter ids from the inventory."
        ),
        "parameters": {
            "type": "object",
            "properties": {
                "action": {
                    "type": "string",
                    "enum": ["up", "down", "stop"],
                    "description": "The movement to apply to every listed shutter",
                },
                "ids": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "The shutter ids to update",
                },
            },
            "required": ["action", "ids"],
        },
    },
}

TOOLS = [UPDATE_SWITCHS_TOOL, UPDATE_SHUTTERS_TOOL]


def _validate_args(tool_args: Dict[str, Any]) -> str | None:
    """Return an error message when the arguments do not match the schemas, else None."""
    action = tool_args.get("action")
    ids = tool_args.get("ids")

    if not isinstance(action, str) or not action.strip():
        return "Missing action parameter"
    if not isinstance(ids, list):
        return "ids must be a list of item ids"
    if not all(isinstance(i, str) and i for i in ids):
        return "ids must only contain non-empty strings"
    return None


async def execute_tool(tool_name: str, tool_args: Dict[str, Any], extension: Extension) -> str:
    """
    Execute a tool call against the functions registered on the host.

    Args:
        tool_name: Name of the function to call
        tool_args: Arguments decoded from the tool call
        extension: Host holding the registered functions

    Returns:
        The function's text result, or an "Error: ..." string

    Raises:
        KeyError: If no function with that name is registered
    """
    from openhab_bridge.ext_logging import get_logger
    log = get_logger("OPENHAB.LLM.Tools")

    function = extension.get_function(tool_name)
    if function is None:
        log.error("OPENHAB.LLM.Tools.UnknownTool", extra={"fields": {"tool_name": tool_name}})
        raise KeyError(tool_name)

    error = _validate_args(tool_args)
    if error:
        log.warning("OPENHAB.LLM.Tools.InvalidArguments", extra={"fields": {
            "tool_name": tool_name,
            "error": error
        }})
        return f"Error: {error}"

    ids: List[str] = tool_args["ids"]
    result = await function(tool_args["action"], ids)

    log.info("OPENHAB.LLM.Tools.Executed", extra={"fields": {
        "tool_name": tool_name,
        "action": tool_args["action"],
        "id_count": len(ids),
        "result": result
    }})
    return result
