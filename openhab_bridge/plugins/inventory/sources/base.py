"""
Base interface for inventory sources.

Sources talk to the home-automation server: they fetch the raw item list and
deliver item commands.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List

from openhab_bridge.plugins.inventory.models import RawItem


class InventorySource(ABC):
    """
    Base class for inventory sources.

    Sources are responsible for:
    - Transport and authentication against the remote server
    - Decoding the remote payload into RawItem records
    - Mapping every failure to a RemoteError subclass

    Sources never retry; the reconciliation loop's interval is the retry policy.
    """

    def __init__(self, name: str):
        self.name = name

    @abstractmethod
    async def fetch_items(self) -> List[RawItem]:
        """
        Fetch the complete item list.

        Raises:
            RemoteFetchError: On transport, HTTP status or decode failure
        """

    @abstractmethod
    async def fetch_system_info(self) -> Dict[str, Any]:
        """
        Fetch informational server metadata.

        Raises:
            RemoteFetchError: On transport, HTTP status or decode failure
        """

    @abstractmethod
    async def send_command(self, item_id: str, command: str) -> None:
        """
        Send a raw command to one item.

        Raises:
            RemoteCommandError: If the command could not be delivered
        """

    async def aclose(self) -> None:
        """Release transport resources."""
