"""
Inventory Plugin

Polls openHAB and publishes the classified device inventory to the host.
"""

from openhab_bridge.plugins.inventory.provider import InventoryProvider, LoopState

__all__ = ["InventoryProvider", "LoopState"]
