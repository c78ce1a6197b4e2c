from openhab_bridge.plugins.inventory.sources.base import InventorySource
from openhab_bridge.plugins.inventory.sources.openhab_rest import OpenHABRestSource

__all__ = ["InventorySource", "OpenHABRestSource"]
