"""
Snapshot rendering.

Produces the agent's working memory: a fixed preamble followed by a YAML block
holding the model descriptors and the live entities, plus the function schemas
that make sense for what is installed.
"""

from dataclasses import asdict
from typing import Any, Dict, List

import yaml

from openhab_bridge.llm.tools import UPDATE_SHUTTERS_TOOL, UPDATE_SWITCHS_TOOL
from openhab_bridge.plugins.inventory.models import RenderedMemory, Snapshot


BASE_INSTRUCTIONS = """
You are a home automation assistant, focused solely on managing connected devices in the home.
When asked to calculate an average, **round to the nearest whole number** without explaining the calculation.
"""

DEFAULT_INSTRUCTIONS = """
Currently, there is no connected devices.
Your sole task is to ask the user to install one or more connected devices in the home before proceeding.
"""

# Shape documentation for the agent; the live data is not validated against it.
LOCATIONS_MODEL: Dict[str, Any] = {
    "description": "A room, floor or any other area of the home.",
    "fields": {
        "id": "Unique identifier of the location.",
        "name": "Human readable name of the location.",
        "location_id": "Identifier of the parent location, or null.",
    },
}

SWITCHS_MODEL: Dict[str, Any] = {
    "description": "A device that can be turned on or off, such as a light or a plug.",
    "fields": {
        "id": "Unique identifier of the switch.",
        "name": "Human readable name of the switch.",
        "state": "Current state: on or off.",
        "location_id": "Identifier of the location holding the switch, or null.",
    },
}

SHUTTERS_MODEL: Dict[str, Any] = {
    "description": "A rolling shutter or blind that can be opened, closed or stopped.",
    "fields": {
        "id": "Unique identifier of the shutter.",
        "name": "Human readable name of the shutter.",
        "state": "Current state: opened or closed.",
        "location_id": "Identifier of the location holding the shutter, or null.",
    },
}

STATIC_MODELS: Dict[str, Dict[str, Any]] = {
    "locationsModel": LOCATIONS_MODEL,
    "switchsModel": SWITCHS_MODEL,
    "shuttersModel": SHUTTERS_MODEL,
}


def _dump_yaml(document: Dict[str, Any]) -> str:
    # Insertion order is the output order; never sort keys.
    return yaml.safe_dump(document, sort_keys=False, allow_unicode=True, default_flow_style=False)


def render_instructions(snapshot: Snapshot, models: Dict[str, Dict[str, Any]] = STATIC_MODELS) -> str:
    parts = [BASE_INSTRUCTIONS]

    if not snapshot.has_devices:
        parts.append(DEFAULT_INSTRUCTIONS)
        return "\n".join(parts)

    document: Dict[str, Any] = dict(models)
    document["locations"] = [asdict(location) for location in snapshot.locations]
    document["switchs"] = [asdict(switch) for switch in snapshot.switchs]
    document["shutters"] = [asdict(shutter) for shutter in snapshot.shutters]

    parts.append("``` yaml")
    parts.append(_dump_yaml(document))
    parts.append("```")
    return "\n".join(parts)


def active_function_schemas(snapshot: Snapshot) -> List[Dict[str, Any]]:
    """Switch and shutter schemas are activated independently of each other."""
    schemas = []
    if snapshot.switchs:
        schemas.append(UPDATE_SWITCHS_TOOL)
    if snapshot.shutters:
        schemas.append(UPDATE_SHUTTERS_TOOL)
    return schemas


def render(snapshot: Snapshot, models: Dict[str, Dict[str, Any]] = STATIC_MODELS) -> RenderedMemory:
    return RenderedMemory(
        instructions=render_instructions(snapshot, models),
        function_schemas=tuple(active_function_schemas(snapshot)),
    )
