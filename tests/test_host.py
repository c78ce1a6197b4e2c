import asyncio

import pytest

from openhab_bridge.host import Extension, Parameter


def test_parameter_reads_environment(monkeypatch):
    monkeypatch.setenv("BASE_URL", "http://openhab:8080")
    param = Parameter("BASE_URL", "The base URL of your openHAB server.")

    assert param.get_value() == "http://openhab:8080"
    assert param.is_set


def test_parameter_unset(monkeypatch):
    monkeypatch.delenv("API_TOKEN", raising=False)
    param = Parameter("API_TOKEN", secret=True)

    assert param.get_value() == ""
    assert not param.is_set


def test_parameter_runtime_update(monkeypatch):
    monkeypatch.delenv("BASE_URL", raising=False)
    param = Parameter("BASE_URL")
    read = param.get_value

    param.set_value("http://changed:8080")
    assert read() == "http://changed:8080"


def test_hooks_run_in_order():
    calls = []
    extension = Extension("OpenHAB")

    async def first():
        calls.append("first")

    async def second():
        calls.append("second")

    extension.on("boot", first).on("boot", second)
    asyncio.run(extension.boot())

    assert calls == ["first", "second"]


def test_unknown_event():
    extension = Extension("OpenHAB")

    async def hook():
        pass

    with pytest.raises(ValueError, match="Unknown event"):
        extension.on("reboot", hook)


def test_enable_disable():
    extension = Extension("OpenHAB")
    assert extension.is_enabled()

    asyncio.run(extension.disable())
    assert not extension.is_enabled()

    asyncio.run(extension.enable())
    assert extension.is_enabled()


def test_published_state_is_copied():
    extension = Extension("OpenHAB")
    schemas = [{"type": "function", "function": {"name": "update_switchs"}}]
    extension.set_function_schemas(schemas)
    schemas.clear()

    assert len(extension.function_schemas) == 1
    extension.function_schemas.clear()
    assert len(extension.function_schemas) == 1


def test_error_sink():
    extension = Extension("OpenHAB")
    extension.add_error("Connection refused")
    assert extension.errors == ["Connection refused"]

    extension.clear_errors()
    assert extension.errors == []


def test_functions_registered_by_name():
    extension = Extension("OpenHAB")

    async def update_switchs(action, ids):
        return "Done."

    extension.set_functions([update_switchs])
    assert extension.function_names == ["update_switchs"]
    assert extension.get_function("update_switchs") is update_switchs
    assert extension.get_function("missing") is None


def test_health(monkeypatch):
    monkeypatch.setenv("BASE_URL", "http://openhab:8080")
    monkeypatch.delenv("API_TOKEN", raising=False)
    extension = Extension("OpenHAB", parameters=[Parameter("BASE_URL"), Parameter("API_TOKEN")])
    extension.set_function_schemas([{"type": "function", "function": {"name": "update_shutters"}}])

    health = extension.health()
    assert health["status"] == "degraded"
    assert health["missing_parameters"] == ["API_TOKEN"]
    assert health["active_functions"] == ["update_shutters"]

    extension.parameters["API_TOKEN"].set_value("secret")
    assert extension.health()["status"] == "healthy"


def test_health_masks_secret_parameters(monkeypatch):
    monkeypatch.setenv("BASE_URL", "http://openhab:8080")
    monkeypatch.setenv("API_TOKEN", "oh.token.value")
    extension = Extension("OpenHAB", parameters=[
        Parameter("BASE_URL", "The base URL of your openHAB server."),
        Parameter("API_TOKEN", "The copied API token.", secret=True),
    ])

    parameters = {p["name"]: p for p in extension.health()["parameters"]}
    assert parameters["BASE_URL"]["value"] == "http://openhab:8080"
    assert parameters["BASE_URL"]["description"] == "The base URL of your openHAB server."
    assert parameters["API_TOKEN"]["value"] == "***"
    assert parameters["API_TOKEN"]["secret"] is True
    assert "oh.token.value" not in str(extension.health())
