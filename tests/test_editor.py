import asyncio
import json

import httpx
import pytest

from bridge_admin.client import BridgeAdminClient
from bridge_admin.editor import SAVED, SAVE_FAILED, BridgeSettingsForm, YamlEditorSession, _Session


class FakeAdmin:
    """In-memory stand-in for the settings endpoints."""

    def __init__(self):
        self.files = {"host": ("/site/_config.yml", "title: Blog\n"),
                      "bridge": ("/site/_bridge.json", '{"editorFontSize": 16}')}
        self.fail_saves = False
        self.saved = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        _, _, kind, action = request.url.path.split("/")
        if action == "get":
            name, text = self.files[kind]
            return httpx.Response(200, json={"fileName": name, "config": text})
        if self.fail_saves:
            return httpx.Response(500, json={"error": "disk full"})
        text = json.loads(request.content)["config"]
        self.files[kind] = (self.files[kind][0], text)
        self.saved.append((kind, text))
        return httpx.Response(200, json={"status": "ok"})


@pytest.fixture
def admin():
    return FakeAdmin()


@pytest.fixture
def client(admin):
    return BridgeAdminClient("http://admin.test", transport=httpx.MockTransport(admin))


def test_yaml_session_load_edit_save(admin, client):
    async def run():
        s = YamlEditorSession(client)
        await s.load()
        assert s.file_name == "/site/_config.yml"
        assert not s.can_save
        s.edit("title: New\n")
        assert s.can_save
        assert await s.save()
        return s

    s = asyncio.run(run())
    assert not s.dirty
    assert s.last_message == SAVED
    assert admin.saved == [("host", "title: New\n")]


def test_yaml_session_blocks_invalid_text(admin, client):
    async def run():
        s = YamlEditorSession(client)
        await s.load()
        s.edit("key: : :")
        return s, await s.save()

    s, ok = asyncio.run(run())
    assert not ok
    assert s.diagnostic is not None and s.diagnostic.start == 5
    assert admin.saved == []
    assert s.text == "key: : :"


def test_failed_save_keeps_unsaved_changes(admin, client):
    admin.fail_saves = True

    async def run():
        s = YamlEditorSession(client, kind="bridge")
        await s.load()
        s.edit("editorFontSize: 18")
        return s, await s.save()

    s, ok = asyncio.run(run())
    assert not ok
    assert s.dirty
    assert s.text == "editorFontSize: 18"
    assert s.last_message == SAVE_FAILED


def test_unknown_session_kind(client):
    with pytest.raises(ValueError):
        YamlEditorSession(client, kind="theme")


def test_bridge_form(admin, client):
    async def run():
        form = BridgeSettingsForm(client)
        await form.load()
        assert form.settings.editorFontSize == 16
        assert form.settings.post_list_showTags is True
        form.update(editorDarkMode=True, page_list_itemsPerPage=20)
        return await form.save()

    assert asyncio.run(run())
    kind, text = admin.saved[-1]
    data = json.loads(text)
    assert kind == "bridge"
    assert data["editorDarkMode"] is True
    assert data["page_list_itemsPerPage"] == 20
    assert data["editorFontSize"] == 16


def test_bridge_form_rejects_unknown_fields(client):
    form = BridgeSettingsForm(client)
    with pytest.raises(KeyError):
        form.update(colour="red")
    assert not form.dirty


def test_client_raises_on_error_status(admin, client):
    admin.fail_saves = True
    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(client.save_host_config("x: 1"))


def test_bridge_form_failed_save_keeps_changes(admin, client):
    admin.fail_saves = True

    async def run():
        form = BridgeSettingsForm(client)
        await form.load()
        form.update(editorFontSize=30)
        return form, await form.save()

    form, ok = asyncio.run(run())
    assert not ok
    assert form.dirty
    assert form.settings.editorFontSize == 30
    assert form.last_message == "Unable to save the config."


def test_saved_message(admin, client):
    async def run():
        s = YamlEditorSession(client)
        await s.load()
        s.edit("title: Saved\n")
        await s.save()
        return s

    assert asyncio.run(run()).last_message == "The config has been saved!"


def test_session_base_requires_submit(client):
    with pytest.raises(TypeError):
        _Session(client)
