import io
import json

import pytest

import api_server
from tests.helpers import FakeResponse


@pytest.fixture
def client():
    api_server.app.config["TESTING"] = True
    with api_server.app.test_client() as client:
        yield client


def upload(client, data: bytes, filename: str = "pic.png", query: str = "", **form):
    form["image"] = (io.BytesIO(data), filename)
    return client.post(f"/api/convert{query}", data=form, content_type="multipart/form-data")


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.get_json()["status"] == "healthy"


def test_convert_upload(client, png_bytes):
    response = upload(client, png_bytes(1000, 500))
    assert response.status_code == 200
    assert response.mimetype == "application/json"
    body = json.loads(response.data)
    assert list(body) == ["Height", "Width", "Pixels"]
    assert (body["Width"], body["Height"]) == (512, 256)
    assert len(body["Pixels"]) == 131072
    assert "Content-Disposition" not in response.headers


def test_convert_download(client, png_bytes):
    response = upload(client, png_bytes(3, 3), query="?download=1")
    assert response.status_code == 200
    assert 'filename="roblox-image-data.json"' in response.headers["Content-Disposition"]


def test_convert_url_json(client, fake_get, png_bytes):
    fake_get(FakeResponse(png_bytes(300, 200)))
    response = client.post("/api/convert", json={"url": "https://example.com/cat.png"})
    assert response.status_code == 200
    body = response.get_json()
    assert (body["Width"], body["Height"]) == (300, 200)


def test_convert_url_form_with_max_dim(client, fake_get, png_bytes):
    fake_get(FakeResponse(png_bytes(300, 200)))
    response = client.post("/api/convert", data={"url": "https://example.com/cat.png", "max_dim": "30"})
    body = response.get_json()
    assert (body["Width"], body["Height"]) == (30, 20)


def test_no_input(client):
    response = client.post("/api/convert", data={})
    assert response.status_code == 400
    assert response.get_json()["error"] == "NoInputProvided"


def test_bad_max_dim(client, png_bytes):
    response = upload(client, png_bytes(3, 3), query="?max_dim=zero")
    assert response.status_code == 400
    response = upload(client, png_bytes(3, 3), max_dim="-4")
    assert response.status_code == 400


def test_decode_failure(client):
    response = upload(client, b"plain text pretending", filename="fake.png")
    assert response.status_code == 422
    assert response.get_json()["error"] == "DecodeFailed"


def test_disallowed_extension(client, png_bytes):
    response = upload(client, png_bytes(3, 3), filename="pic.exe")
    assert response.status_code == 400


def test_fetch_failure(client, unreachable):
    response = client.post("/api/convert", json={"url": "https://unreachable.invalid/x.png"})
    assert response.status_code == 502
    payload = response.get_json()
    assert payload["error"] == "FetchFailed"
    assert payload["message"]


@pytest.mark.parametrize("max_dim", [12.7, True, "12.7", [12], "ten"])
def test_non_integer_max_dim_in_json(client, fake_get, png_bytes, max_dim):
    calls = fake_get(FakeResponse(png_bytes(30, 20)))
    response = client.post("/api/convert", json={"url": "https://example.com/cat.png", "max_dim": max_dim})
    assert response.status_code == 400
    assert response.get_json()["error"] == "BadRequest"
    assert calls == []


def test_integer_max_dim_in_json(client, fake_get, png_bytes):
    fake_get(FakeResponse(png_bytes(30, 20)))
    response = client.post("/api/convert", json={"url": "https://example.com/cat.png", "max_dim": 15})
    body = response.get_json()
    assert (body["Width"], body["Height"]) == (15, 10)
