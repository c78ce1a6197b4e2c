"""
Data models for the inventory plugin.

`RawItem` mirrors one entry of openHAB's `/rest/items` payload; the other
records are the normalized entities published to the agent.
"""

from typing import Any, Dict, List, Optional, Tuple
from dataclasses import dataclass, field


@dataclass(frozen=True)
class RawItem:
    """One openHAB item as returned by the REST API (read-only per fetch)."""

    name: str
    label: str = ""
    type: str = ""
    tags: Tuple[str, ...] = ()
    groupNames: Tuple[str, ...] = ()
    state: str = ""

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "RawItem":
        """Build from a decoded JSON object; absent or null fields get empty defaults."""
        return cls(
            name=str(payload.get("name") or ""),
            label=str(payload.get("label") or ""),
            type=str(payload.get("type") or ""),
            tags=tuple(str(t) for t in payload.get("tags") or ()),
            groupNames=tuple(str(g) for g in payload.get("groupNames") or ()),
            state=str(payload.get("state") or ""),
        )

    @property
    def parent_group(self) -> Optional[str]:
        """First declared group; only that one is treated as the parent location."""
        return self.groupNames[0] if self.groupNames else None


@dataclass
class Location:
    id: str
    name: str
    location_id: Optional[str]  # Parent Location.id, not validated


@dataclass
class Switch:
    id: str
    name: str
    state: str  # "on" / "off" or the lower-cased raw state
    location_id: Optional[str]


@dataclass
class Shutter:
    id: str
    name: str
    state: str  # "opened" / "closed"
    location_id: Optional[str]


@dataclass
class Snapshot:
    """
    Complete classified inventory for one reconciliation cycle.

    Rebuilt from scratch every cycle; ids are openHAB item names.
    """

    locations: List[Location] = field(default_factory=list)
    switchs: List[Switch] = field(default_factory=list)
    shutters: List[Shutter] = field(default_factory=list)

    @property
    def has_devices(self) -> bool:
        return bool(self.switchs or self.shutters)


@dataclass(frozen=True)
class RenderedMemory:
    """What the reconciliation loop publishes to the host."""

    instructions: str
    function_schemas: Tuple[Dict[str, Any], ...] = ()

    @property
    def function_names(self) -> List[str]:
        return [s["function"]["name"] for s in self.function_schemas]
