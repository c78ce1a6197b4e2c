"""
Actions Provider Plugin

Executes bulk switch/shutter commands on openHAB items.
"""

from openhab_bridge.plugins.actions.provider import ActionResult, ActionsProvider

__all__ = ["ActionResult", "ActionsProvider"]
