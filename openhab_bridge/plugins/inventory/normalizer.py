"""
openHAB → bridge normalization logic.

Turns raw REST items into Location / Switch / Shutter records.
"""

import logging
from typing import Iterable, Optional, Union

from openhab_bridge.plugins.inventory.models import (
    Location,
    RawItem,
    Shutter,
    Snapshot,
    Switch,
)

logger = logging.getLogger(__name__)

Entity = Union[Location, Switch, Shutter]

LOCATION_TAG = "Location"
EQUIPMENT_TAG = "Equipment"

# Rollershutter position: 0 is fully open, anything else counts as closed.
SHUTTER_OPEN_POSITION = "0"


class OpenHABNormalizer:
    """
    Classifies openHAB items.

    Predicates are tried in a fixed order (Location, Switch, Shutter) and the
    first match wins. Items matching none are dropped.
    """

    @staticmethod
    def is_location(item: RawItem) -> bool:
        return item.type == "Group" and LOCATION_TAG in item.tags

    @staticmethod
    def is_switch(item: RawItem) -> bool:
        return item.type == "Switch" and EQUIPMENT_TAG in item.tags

    @staticmethod
    def is_shutter(item: RawItem) -> bool:
        return item.type == "Rollershutter" and EQUIPMENT_TAG in item.tags

    @classmethod
    def normalize_item(cls, item: RawItem) -> Optional[Entity]:
        """
        Normalize a single item.

        Returns:
            The matching record, or None for unsupported items
        """
        if cls.is_location(item):
            return Location(
                id=item.name,
                name=item.label,
                location_id=item.parent_group,
            )
        elif cls.is_switch(item):
            return Switch(
                id=item.name,
                name=item.label,
                state=item.state.lower(),
                location_id=item.parent_group,
            )
        elif cls.is_shutter(item):
            return Shutter(
                id=item.name,
                name=item.label,
                state="opened" if item.state == SHUTTER_OPEN_POSITION else "closed",
                location_id=item.parent_group,
            )
        return None

    @classmethod
    def classify(cls, items: Iterable[RawItem]) -> Snapshot:
        """
        Classify items into a Snapshot, preserving input order.

        Pure: no I/O, same input gives an equal Snapshot.
        """
        snapshot = Snapshot()
        dropped = 0

        for item in items:
            entity = cls.normalize_item(item)
            if isinstance(entity, Location):
                snapshot.locations.append(entity)
            elif isinstance(entity, Switch):
                snapshot.switchs.append(entity)
            elif isinstance(entity, Shutter):
                snapshot.shutters.append(entity)
            else:
                dropped += 1

        logger.debug(
            f"Classified {len(snapshot.locations)} locations, {len(snapshot.switchs)} switchs, "
            f"{len(snapshot.shutters)} shutters ({dropped} dropped)"
        )
        return snapshot


def classify(items: Iterable[RawItem]) -> Snapshot:
    return OpenHABNormalizer.classify(items)
