"""
In-process host runtime.

The agent runtime talks to the bridge through a small contract: a parameter
system, an instructions blob, a list of active function schemas, a registry of
callable functions, lifecycle events and an operator-facing error sink.
`Extension` implements that contract so the rest of the bridge (and the tests)
never depend on a concrete agent runtime.
"""

from __future__ import annotations

import logging
import os
from collections import defaultdict
from typing import Any, Awaitable, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

Hook = Callable[[], Awaitable[Any]]

EVENTS = ("boot", "enable", "disable")


class Parameter:
    """
    A host-owned configuration value.

    The initial value comes from the environment variable of the same name;
    the host may replace it at runtime. Consumers keep a reference to the
    parameter (or to `get_value`) and read it on every use.
    """

    def __init__(self, name: str, description: str = "", *, secret: bool = False):
        self.name = name
        self.description = description
        self.secret = secret
        self._value: Optional[str] = os.environ.get(name)

    def get_value(self) -> str:
        return self._value or ""

    def set_value(self, value: Optional[str]) -> None:
        self._value = value
        logger.info(f"Parameter {self.name} updated")

    @property
    def is_set(self) -> bool:
        return bool(self._value)

    def describe(self) -> Dict[str, Any]:
        """Operator-facing view; secret values are masked."""
        if self.secret and self.is_set:
            value = "***"
        else:
            value = self.get_value()
        return {
            "name": self.name,
            "description": self.description,
            "secret": self.secret,
            "is_set": self.is_set,
            "value": value,
        }


class Extension:
    """
    Host-side view of the bridge.

    Holds whatever the bridge last published (instructions, function schemas,
    software version) and dispatches lifecycle events to registered hooks.
    Hooks for one event run sequentially in registration order.
    """

    def __init__(self, name: str, parameters: Optional[List[Parameter]] = None):
        self.name = name
        self.parameters: Dict[str, Parameter] = {p.name: p for p in parameters or []}
        self.software_version: Optional[str] = None

        self._enabled = True
        self._instructions = ""
        self._function_schemas: List[Dict[str, Any]] = []
        self._functions: Dict[str, Callable[..., Awaitable[str]]] = {}
        self._errors: List[str] = []
        self._hooks: Dict[str, List[Hook]] = defaultdict(list)

    # -- published state ---------------------------------------------------

    def set_instructions(self, instructions: str) -> None:
        self._instructions = instructions

    @property
    def instructions(self) -> str:
        return self._instructions

    def set_function_schemas(self, schemas: List[Dict[str, Any]]) -> None:
        self._function_schemas = list(schemas)

    @property
    def function_schemas(self) -> List[Dict[str, Any]]:
        return list(self._function_schemas)

    def set_software_version(self, version: Optional[str]) -> None:
        self.software_version = version

    # -- functions ---------------------------------------------------------

    def set_functions(self, functions: List[Callable[..., Awaitable[str]]]) -> None:
        """Register callables under their `__name__`; replaces earlier ones of the same name."""
        for fn in functions:
            self._functions[fn.__name__] = fn

    def get_function(self, name: str) -> Optional[Callable[..., Awaitable[str]]]:
        return self._functions.get(name)

    @property
    def function_names(self) -> List[str]:
        return list(self._functions.keys())

    # -- lifecycle ---------------------------------------------------------

    def on(self, event: str, hook: Hook) -> "Extension":
        if event not in EVENTS:
            raise ValueError(f"Unknown event '{event}'. Available: {list(EVENTS)}")
        self._hooks[event].append(hook)
        return self

    async def _emit(self, event: str) -> None:
        for hook in list(self._hooks[event]):
            await hook()

    async def boot(self) -> None:
        logger.info(f"Booting extension {self.name}")
        await self._emit("boot")

    async def enable(self) -> None:
        self._enabled = True
        logger.info(f"Extension {self.name} enabled")
        await self._emit("enable")

    async def disable(self) -> None:
        self._enabled = False
        logger.info(f"Extension {self.name} disabled")
        await self._emit("disable")

    def is_enabled(self) -> bool:
        return self._enabled

    # -- error sink --------------------------------------------------------

    def clear_errors(self) -> None:
        self._errors.clear()

    def add_error(self, message: str) -> None:
        self._errors.append(message)

    @property
    def errors(self) -> List[str]:
        return list(self._errors)

    def health(self) -> Dict[str, Any]:
        missing = [p.name for p in self.parameters.values() if not p.is_set]
        if self._errors or missing:
            status = "degraded"
        else:
            status = "healthy"
        return {
            "status": status,
            "name": self.name,
            "enabled": self._enabled,
            "software_version": self.software_version,
            "errors": list(self._errors),
            "missing_parameters": missing,
            "parameters": [p.describe() for p in self.parameters.values()],
            "active_functions": [s["function"]["name"] for s in self._function_schemas if "function" in s],
        }
