"""Tests for the widget service."""
import xml.etree.ElementTree as ET

import pytest

from xmlmarshal.config.settings import TestingConfig
from xmlmarshal.server import create_app
from xmlmarshal.server.widgets import store


class ServerConfig(TestingConfig):
    SNAKE_CASE_ERRORS = True


@pytest.fixture
def client():
    store.clear()
    app = create_app(ServerConfig)
    yield app.test_client()
    store.clear()


def error_of(response):
    root = ET.fromstring(response.get_data())
    return root.findtext("error"), root.findtext("description")


def create(client, name="gear"):
    body = f"<Widget><name>{name}</name><price>2.5</price><tags>a</tags></Widget>"
    return client.post("/widgets", data=body, content_type="application/xml")


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.headers["Cache-Control"] == "no-store"
    root = ET.fromstring(response.get_data())
    assert root.tag == "health"
    assert root.findtext("status") == "healthy"


def test_widget_lifecycle(client):
    response = create(client)

    assert response.status_code == 201
    widget_id = ET.fromstring(response.get_data()).findtext("id")
    assert response.headers["Location"].endswith(f"/widgets/{widget_id}")

    response = client.get(f"/widgets/{widget_id}")
    assert response.status_code == 200
    assert ET.fromstring(response.get_data()).findtext("name") == "gear"

    response = client.put(
        f"/widgets/{widget_id}",
        data="<Widget><name>sprocket</name></Widget>",
        content_type="application/xml",
    )
    assert response.status_code == 200
    assert ET.fromstring(response.get_data()).findtext("name") == "sprocket"

    response = client.get("/widgets")
    names = [e.findtext("name") for e in ET.fromstring(response.get_data()).findall("widget")]
    assert names == ["sprocket"]

    response = client.delete(f"/widgets/{widget_id}")
    assert response.status_code == 204
    assert response.get_data() == b""
    assert client.get(f"/widgets/{widget_id}").status_code == 404


def test_create_requires_name(client):
    response = create(client, name="")

    assert response.status_code == 400
    assert error_of(response) == ("bad_request", "widget name is required")


def test_missing_widget(client):
    response = client.get("/widgets/nope")

    assert response.status_code == 404
    assert error_of(response) == ("not_found", "widget nope does not exist")


def test_update_missing_widget(client):
    response = client.put("/widgets/nope", data="<Widget/>", content_type="application/xml")

    assert response.status_code == 404


def test_create_with_wrong_content_type(client):
    response = client.post("/widgets", data="name=gear", content_type="text/plain")

    assert response.status_code == 415


def test_unroutable_method(client):
    response = client.patch("/widgets/nope", data="<Widget/>", content_type="application/xml")

    assert response.status_code == 405
    assert response.headers["Content-Type"] == "application/xml"
    assert error_of(response)[0] == "method_not_allowed"


def test_unknown_route(client):
    response = client.get("/gadgets")

    assert response.status_code == 404
    assert error_of(response)[0] == "not_found"


def test_json_is_not_acceptable(client):
    response = client.get("/health", headers={"Accept": "application/json"})

    assert response.status_code == 406
    assert response.get_data(as_text=True) == '"application/json" does not contain "application/xml"'
