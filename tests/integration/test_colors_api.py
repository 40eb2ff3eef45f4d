import pytest


@pytest.fixture
def primary(client, admin_headers):
    resp = client.post(
        "/api/colors/",
        json={
            "category": "primary",
            "title": "Primary Colors",
            "colors": [
                {"name": "Red Clay", "hex": "#802A02"},
                {"name": "Black", "hex": "#131313", "pantone": "Black 6 C"},
            ],
        },
        headers=admin_headers,
    )
    assert resp.status_code == 200
    return resp.json()


def test_upsert_palette_derives_rgb(primary):
    assert primary["category"] == "primary"
    assert [c["name"] for c in primary["colors"]] == ["Red Clay", "Black"]
    assert primary["colors"][0]["rgb"] == {"r": 128, "g": 42, "b": 2}
    assert primary["colors"][1]["pantone"] == "Black 6 C"


def test_upsert_replaces_colors(client, admin_headers, primary):
    resp = client.post(
        "/api/colors/",
        json={"category": "primary", "title": "Core", "colors": [{"name": "Sand", "hex": "#EEC8B3"}]},
        headers=admin_headers,
    )
    assert resp.json()["id"] == primary["id"]
    assert resp.json()["title"] == "Core"
    assert [c["name"] for c in resp.json()["colors"]] == ["Sand"]


def test_palettes_are_public(client, primary):
    listed = client.get("/api/colors/")
    assert listed.status_code == 200
    assert [p["category"] for p in listed.json()] == ["primary"]
    assert client.get("/api/colors/primary").json()["id"] == primary["id"]
    assert client.get("/api/colors/secondary").status_code == 404


def test_upsert_validation(client, admin_headers, user_headers):
    bad_category = client.post("/api/colors/", json={"category": "neon", "title": "X"}, headers=admin_headers)
    assert bad_category.status_code == 400
    assert bad_category.json()["detail"] == "Invalid category"

    blank = client.post("/api/colors/", json={"category": "primary", "title": "  "}, headers=admin_headers)
    assert blank.json()["detail"] == "Title is required"

    bad_hex = client.post(
        "/api/colors/",
        json={"category": "primary", "title": "P", "colors": [{"name": "Bad", "hex": "red"}]},
        headers=admin_headers,
    )
    assert bad_hex.status_code == 422

    assert client.post("/api/colors/", json={"category": "primary", "title": "P"}, headers=user_headers).status_code == 403


def test_inactive_palettes_hidden_from_list(client, admin_headers, primary):
    resp = client.put("/api/colors/primary", json={"is_active": False}, headers=admin_headers)
    assert resp.status_code == 200
    assert client.get("/api/colors/").json() == []


def test_color_crud(client, admin_headers, primary):
    created = client.post(
        "/api/colors/primary/color",
        json={"name": "Forest", "hex": "#2B3901", "cmyk": {"c": 25, "m": 0, "y": 98, "k": 78}},
        headers=admin_headers,
    )
    assert created.status_code == 201
    color = created.json()
    assert color["rgb"] == {"r": 43, "g": 57, "b": 1}
    assert color["order_index"] > max(c["order_index"] for c in primary["colors"])

    updated = client.put(
        f"/api/colors/primary/color/{color['id']}", json={"hex": "#FFFFFF"}, headers=admin_headers
    )
    assert updated.json()["rgb"] == {"r": 255, "g": 255, "b": 255}
    assert updated.json()["name"] == "Forest"

    deleted = client.delete(f"/api/colors/primary/color/{color['id']}", headers=admin_headers)
    assert deleted.json() == {"message": "Color deleted successfully"}
    missing = client.delete(f"/api/colors/primary/color/{color['id']}", headers=admin_headers)
    assert missing.status_code == 404
    assert missing.json()["detail"] == "Color not found"


def test_add_color_to_missing_palette(client, admin_headers):
    resp = client.post("/api/colors/tertiary/color", json={"name": "X", "hex": "#000"}, headers=admin_headers)
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Color palette not found"


def test_reorder_colors(client, admin_headers, primary):
    red, black = primary["colors"]
    resp = client.put(
        "/api/colors/primary/reorder",
        json={"items": [{"id": red["id"], "order_index": 5}, {"id": black["id"], "order_index": 1}]},
        headers=admin_headers,
    )
    assert resp.status_code == 200
    assert [c["name"] for c in resp.json()["colors"]] == ["Black", "Red Clay"]


def test_reorder_requires_items(client, admin_headers, primary):
    resp = client.put("/api/colors/primary/reorder", json={"order": []}, headers=admin_headers)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Items array is required"
