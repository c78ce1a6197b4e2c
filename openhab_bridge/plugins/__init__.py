"""
Bridge Plugin System

Inventory (reconciliation loop) and actions (bulk commands) plugins.
"""

from openhab_bridge.plugins.base import BridgePlugin

__all__ = [
    "BridgePlugin",
]
