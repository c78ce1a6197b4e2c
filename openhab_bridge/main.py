from __future__ import annotations

import asyncio
import contextlib
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException, Request

from openhab_bridge import __version__
from openhab_bridge.config import load_bridge_config
from openhab_bridge.ext_logging import get_logger
from openhab_bridge.host import Extension, Parameter
from openhab_bridge.llm.tools import execute_tool
from openhab_bridge.plugins.actions import ActionsProvider
from openhab_bridge.plugins.inventory import InventoryProvider
from openhab_bridge.plugins.inventory.sources import OpenHABRestSource


log = get_logger("OPENHAB")


def build_extension() -> Extension:
    base_url = Parameter("BASE_URL", "The base URL of your openHAB server.")
    api_token = Parameter("API_TOKEN", "The copied API token.", secret=True)
    return Extension("OpenHAB", parameters=[base_url, api_token])


@asynccontextmanager
async def lifespan(app: FastAPI):
    config = load_bridge_config()
    extension = build_extension()

    source = OpenHABRestSource(
        "openhab",
        base_url=extension.parameters["BASE_URL"].get_value,
        api_token=extension.parameters["API_TOKEN"].get_value,
        timeout_s=config.http_timeout_s,
    )
    inventory = InventoryProvider(
        "inventory",
        {"refresh_interval_s": config.refresh_interval_s},
        extension=extension,
        source=source,
    )
    actions = ActionsProvider("actions", {}, extension=extension, source=source)

    app.state.extension = extension
    app.state.inventory = inventory
    app.state.actions = actions

    inventory.start()
    actions.start()
    log.info("OPENHAB.Bridge.Started", extra={"fields": {
        "version": __version__,
        "refresh_interval_s": config.refresh_interval_s,
        "base_url_set": extension.parameters["BASE_URL"].is_set,
        "api_token_set": extension.parameters["API_TOKEN"].is_set,
    }})

    # Boot in the background so startup does not wait on the remote server.
    app.state.boot_task = asyncio.create_task(extension.boot())

    yield

    boot_task = app.state.boot_task
    if not boot_task.done():
        boot_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await boot_task

    for plugin in (actions, inventory):
        try:
            plugin.stop()
        except Exception as e:
            log.error("OPENHAB.Bridge.StopError", extra={"fields": {"plugin": plugin.name, "error": repr(e)}})

    with contextlib.suppress(Exception):
        await source.aclose()
    log.info("OPENHAB.Bridge.Stopped")


app = FastAPI(title="openHAB bridge", version=__version__, lifespan=lifespan)


def _extension(request: Request) -> Extension:
    extension = getattr(request.app.state, "extension", None)
    if extension is None:
        raise HTTPException(status_code=503, detail="Extension not started")
    return extension


@app.get("/health")
async def health(request: Request) -> dict[str, Any]:
    extension = _extension(request)
    plugins = {}
    for attr in ("inventory", "actions"):
        plugin = getattr(request.app.state, attr, None)
        if plugin is not None:
            plugins[plugin.name] = plugin.health()

    return {
        "ok": True,
        "version": __version__,
        "extension": extension.health(),
        "plugins": plugins,
    }


@app.get("/api/instructions")
async def get_instructions(request: Request) -> dict[str, Any]:
    extension = _extension(request)
    return {
        "instructions": extension.instructions,
        "function_schemas": extension.function_schemas,
    }


@app.get("/api/inventory/snapshot")
async def get_inventory_snapshot(request: Request) -> dict[str, Any]:
    inventory = getattr(request.app.state, "inventory", None)
    if inventory is None:
        raise HTTPException(status_code=503, detail="Inventory not started")
    return inventory.get_snapshot()


@app.post("/api/functions/{name}")
async def call_function(name: str, payload: dict[str, Any], request: Request) -> dict[str, Any]:
    """
    Execute a host-callable function.

    Request body: {"action": "on", "ids": ["Kitchen_Light"]}
    The result is always text, including failures ("Error: ...").
    """
    extension = _extension(request)
    try:
        result = await execute_tool(name, payload, extension)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown function: {name}")
    return {"result": result}


@app.post("/api/enable")
async def enable(request: Request) -> dict[str, Any]:
    extension = _extension(request)
    await extension.enable()
    return {"enabled": extension.is_enabled(), "errors": extension.errors}


@app.post("/api/disable")
async def disable(request: Request) -> dict[str, Any]:
    extension = _extension(request)
    await extension.disable()
    return {"enabled": extension.is_enabled()}
