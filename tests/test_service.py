"""HTTP level tests driving the Quart app with its test client."""

import json
import xml.etree.ElementTree as ET

import pytest

from appstore.service import app
from appstore.main import init_store

pytestmark = pytest.mark.anyio


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def client():
    init_store(reinit=True)
    return app.test_client()


async def create(client, label="label", description="description"):
    response = await client.post(
        "/apps", json={"label": label, "description": description}
    )
    assert response.status_code == 201, await response.get_data(as_text=True)
    return await response.get_json()


# ----------------------------------------------------------------------------


async def test_check_alive(client):
    response = await client.get("/check-alive")
    assert response.status_code == 200
    assert await response.get_json() == "ok"


async def test_api_docs(client):
    response = await client.get("/apidocs.json")
    assert response.status_code == 200
    spec = await response.get_json()
    assert spec["openapi"].startswith("3.")
    assert set(spec["paths"]["/apps/{app-id}"]) >= {"get", "put", "patch", "delete"}


async def test_create_ids_count_creations(client):
    first = await create(client, "a", "first")
    second = await create(client, "b", "second")
    assert first == {"id": "1", "label": "a", "description": "first"}
    assert second == {"id": "2", "label": "b", "description": "second"}


async def test_create_missing_label(client):
    response = await client.post("/apps", json={"description": "d"})
    assert response.status_code == 400
    assert response.mimetype == "text/plain"
    assert "Label" in await response.get_data(as_text=True)


async def test_create_null_description(client):
    response = await client.post("/apps", json={"label": "l", "description": None})
    assert response.status_code == 400
    assert "Description" in await response.get_data(as_text=True)


async def test_create_malformed_body(client):
    response = await client.post(
        "/apps", data="{not json", headers={"Content-Type": "application/json"}
    )
    assert response.status_code == 500
    assert response.mimetype == "text/plain"
    assert "Invalid JSON" in await response.get_data(as_text=True)


async def test_create_without_content_type_is_json(client):
    response = await client.post("/apps", data='{"label": "l", "description": "d"}')
    assert response.status_code == 201
    assert (await response.get_json())["label"] == "l"


async def test_create_unsupported_content_type(client):
    response = await client.post(
        "/apps", data="label=l", headers={"Content-Type": "text/plain"}
    )
    assert response.status_code == 415
    assert init_store(reinit=False).count() == 0


async def test_get_never_created(client):
    response = await client.get("/apps/42")
    assert response.status_code == 404
    assert response.mimetype == "text/plain"
    assert await response.get_data(as_text=True) == "App could not be found."


async def test_get_round_trip(client):
    created = await create(client, "a", "b")
    response = await client.get(f"/apps/{created['id']}")
    assert response.status_code == 200
    assert response.mimetype == "application/json"
    assert await response.get_json() == created


async def test_put_replaces_both(client):
    await create(client, "a", "b")
    response = await client.put("/apps/1", json={"label": "c", "description": "d"})
    assert response.status_code == 200
    assert await response.get_json() == {"id": "1", "label": "c", "description": "d"}


async def test_put_with_field_unset(client):
    await create(client, "a", "b")
    response = await client.put("/apps/1", json={"label": "c"})
    assert response.status_code == 400
    assert "Description" in await response.get_data(as_text=True)
    unchanged = await (await client.get("/apps/1")).get_json()
    assert unchanged["label"] == "a"


async def test_put_not_found(client):
    response = await client.put("/apps/9", json={"label": "c", "description": "d"})
    assert response.status_code == 404


async def test_patch_label_only(client):
    await create(client, "a", "b")
    response = await client.patch("/apps/1", json={"label": "c"})
    assert response.status_code == 200
    assert await response.get_json() == {"id": "1", "label": "c", "description": "b"}


async def test_patch_empty_string_clears(client):
    await create(client, "a", "b")
    response = await client.patch("/apps/1", json={"description": ""})
    assert (await response.get_json())["description"] == ""


async def test_patch_not_found_before_decode(client):
    response = await client.patch(
        "/apps/9", data="{not json", headers={"Content-Type": "application/json"}
    )
    assert response.status_code == 404


async def test_patch_malformed_body(client):
    await create(client)
    response = await client.patch(
        "/apps/1", data='{"label": 3}', headers={"Content-Type": "application/json"}
    )
    assert response.status_code == 500


async def test_delete_then_get(client):
    await create(client)
    response = await client.delete("/apps/1")
    assert response.status_code == 200
    assert await response.get_data(as_text=True) == ""
    response = await client.get("/apps/1")
    assert response.status_code == 404


async def test_delete_never_created(client):
    response = await client.delete("/apps/never")
    assert response.status_code == 200


@pytest.mark.parametrize("padded", ["%201", "1%20", "%201%20"])
async def test_padded_id_is_not_found(client, padded):
    created = await create(client, "a", "b")
    response = await client.get(f"/apps/{padded}")
    assert response.status_code == 404
    response = await client.put(
        f"/apps/{padded}", json={"label": "c", "description": "d"}
    )
    assert response.status_code == 404
    response = await client.patch(f"/apps/{padded}", json={"label": "c"})
    assert response.status_code == 404
    response = await client.delete(f"/apps/{padded}")
    assert response.status_code == 200
    response = await client.get("/apps/1")
    assert response.status_code == 200
    assert await response.get_json() == created


async def test_ids_not_reused_after_delete(client):
    await create(client, "one")
    await create(client, "two")
    await client.delete("/apps/1")
    third = await create(client, "three")
    assert third["id"] == "3"
    second = await (await client.get("/apps/2")).get_json()
    assert second["label"] == "two"


# ----------------------------------------------------------------------------
#                             XML
# ----------------------------------------------------------------------------

XML_HEADERS = {"Content-Type": "application/xml", "Accept": "application/xml"}


def parse_xml_app(text):
    root = ET.fromstring(text.encode("utf-8"))
    assert root.tag == "App"
    return {child.tag: child.text or "" for child in root}


async def test_create_xml(client):
    response = await client.post(
        "/apps",
        data="<AppRequest><Label>l</Label><Description>d</Description></AppRequest>",
        headers=XML_HEADERS,
    )
    assert response.status_code == 201
    assert response.mimetype == "application/xml"
    app = parse_xml_app(await response.get_data(as_text=True))
    assert app == {"Id": "1", "Label": "l", "Description": "d"}


async def test_patch_xml_then_get_json(client):
    await create(client, "a", "b")
    response = await client.patch(
        "/apps/1", data="<App><Description/></App>", headers=XML_HEADERS
    )
    assert response.status_code == 200
    assert parse_xml_app(await response.get_data(as_text=True)) == {
        "Id": "1",
        "Label": "a",
        "Description": "",
    }
    response = await client.get("/apps/1")
    assert json.loads(await response.get_data(as_text=True))["description"] == ""


async def test_put_xml_replaces_both(client):
    await create(client, "a", "b")
    response = await client.put(
        "/apps/1",
        data="<App><Label>c</Label><Description>d</Description></App>",
        headers=XML_HEADERS,
    )
    assert response.status_code == 200
    assert response.mimetype == "application/xml"
    assert parse_xml_app(await response.get_data(as_text=True)) == {
        "Id": "1",
        "Label": "c",
        "Description": "d",
    }


async def test_text_xml_request_and_response(client):
    headers = {"Content-Type": "text/xml", "Accept": "text/xml"}
    response = await client.post(
        "/apps",
        data="<App><Label>l</Label><Description>d</Description></App>",
        headers=headers,
    )
    assert response.status_code == 201
    assert response.mimetype == "text/xml"
    assert parse_xml_app(await response.get_data(as_text=True))["Label"] == "l"
    response = await client.patch(
        "/apps/1", data="<App><Label>m</Label></App>", headers=headers
    )
    assert response.status_code == 200
    assert response.mimetype == "text/xml"
    assert parse_xml_app(await response.get_data(as_text=True)) == {
        "Id": "1",
        "Label": "m",
        "Description": "d",
    }
    response = await client.get("/apps/1", headers={"Accept": "text/xml"})
    assert response.mimetype == "text/xml"


async def test_put_xml_missing_label(client):
    await create(client)
    response = await client.put(
        "/apps/1", data="<App><Description>d</Description></App>", headers=XML_HEADERS
    )
    assert response.status_code == 400
    assert "Label" in await response.get_data(as_text=True)


async def test_malformed_xml(client):
    response = await client.post("/apps", data="<App><Label>", headers=XML_HEADERS)
    assert response.status_code == 500
    assert "Invalid XML" in await response.get_data(as_text=True)


async def test_get_not_acceptable(client):
    await create(client)
    response = await client.get("/apps/1", headers={"Accept": "text/html"})
    assert response.status_code == 406


async def test_create_not_acceptable_stores_nothing(client):
    response = await client.post(
        "/apps",
        json={"label": "l", "description": "d"},
        headers={"Accept": "text/html"},
    )
    assert response.status_code == 406
    assert init_store(reinit=False).count() == 0
