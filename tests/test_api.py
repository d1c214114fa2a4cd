import pytest

from fracticons.config import Settings
from fracticons.kernel.avatar import generate_fracticon
from fracticons.kernel.hashing import sha256_hex
from fracticons.showtime import create_app


@pytest.fixture
def client():
    app = create_app(Settings(max_size=256, max_resolution=64))
    app.testing = True
    with app.test_client() as client:
        yield client


def test_health_and_version(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json["ok"]

    r = client.get("/version")
    assert r.status_code == 200
    assert r.json["name"] == "Fracticons"


def test_hash_endpoint(client):
    r = client.get("/hash?value=hello")
    assert r.status_code == 200
    assert r.json["hash"] == sha256_hex("hello")


def test_avatar_png(client):
    r = client.get("/avatar/user@example.com")
    assert r.status_code == 200
    assert r.mimetype == "image/png"
    assert r.data == generate_fracticon("user@example.com")


def test_avatar_options(client):
    r = client.get("/avatar/user@example.com?size=64&circular=true&palette=neon&family=tricorn")
    assert r.status_code == 200
    assert r.data == generate_fracticon(
        "user@example.com", size=64, circular=True, palette_style="neon", family="tricorn"
    )


def test_avatar_svg(client):
    r = client.get("/avatar/user@example.com?format=svg&resolution=16")
    assert r.status_code == 200
    assert r.mimetype == "image/svg+xml"
    assert r.data.startswith(b"<svg")


def test_avatar_from_hex(client):
    digest = sha256_hex("user@example.com")
    r = client.get(f"/avatar/hex/{digest}")
    assert r.status_code == 200
    assert r.data == generate_fracticon("user@example.com")


def test_bad_requests(client):
    r = client.get("/avatar/hex/abc")
    assert r.status_code == 400
    assert r.json["ok"] is False

    assert client.get("/avatar/x?size=1024").status_code == 400
    assert client.get("/avatar/x?resolution=128").status_code == 400
    assert client.get("/avatar/x?size=big").status_code == 400
    assert client.get("/avatar/x?family=newton").status_code == 400
    assert client.get("/avatar/x?preset=nope").status_code == 400
    assert client.get("/avatar/x?cx=0.1").status_code == 400
    assert client.get("/avatar/x?size=8&resolution=8&colors=3000000").status_code == 400
    r = client.post("/api/avatar", json={"input": "x", "colors": 65})
    assert r.status_code == 400
    assert "colors" in r.json["error"]


def test_metadata_endpoint(client):
    r = client.post("/api/avatar", json={"input": "sun", "size": 32, "resolution": 16, "circular": True})
    assert r.status_code == 200
    body = r.json
    assert body["ok"] is True
    assert body["hash"] == sha256_hex("sun")
    assert body["descriptor"].startswith("frsig://julia:")
    assert body["data_url"].startswith("data:image/png;base64,")
    assert len(body["palette"]["colors"]) == 5

    r = client.post("/api/avatar", json={"hex": sha256_hex("sun"), "size": 32, "resolution": 16, "circular": True})
    assert r.json["data_url"] == body["data_url"]


def test_metadata_endpoint_requires_input(client):
    r = client.post("/api/avatar", json={"size": 32})
    assert r.status_code == 400
    assert "input" in r.json["error"]
