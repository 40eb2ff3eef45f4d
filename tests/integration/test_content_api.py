def _upsert(client, headers, **body):
    payload = {"section": "brand-voice", "title": "Brand Voice", "content": "Warm, direct, outdoorsy."}
    payload.update(body)
    return client.post("/api/content/", json=payload, headers=headers)


def test_upsert_and_read_sections(client, admin_headers):
    created = _upsert(client, admin_headers)
    assert created.status_code == 200
    again = _upsert(client, admin_headers, content="Updated copy")
    assert again.json()["id"] == created.json()["id"]

    listed = client.get("/api/content/")
    assert [s["section"] for s in listed.json()] == ["brand-voice"]
    assert client.get("/api/content/brand-voice").json()["content"] == "Updated copy"


def test_only_editable_sections_accepted(client, admin_headers):
    resp = _upsert(client, admin_headers, section="typography")
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Invalid section"

    blank = _upsert(client, admin_headers, title="   ")
    assert blank.json()["detail"] == "Title is required"


def test_update_and_delete_section(client, admin_headers):
    _upsert(client, admin_headers, section="messaging", title="Messaging")

    updated = client.put("/api/content/messaging", json={"is_active": False}, headers=admin_headers)
    assert updated.json()["is_active"] is False
    assert client.get("/api/content/").json() == []

    deleted = client.delete("/api/content/messaging", headers=admin_headers)
    assert deleted.json() == {"message": "Content section deleted successfully"}
    assert client.get("/api/content/messaging").status_code == 404


def test_content_writes_require_admin(client, user_headers):
    assert _upsert(client, user_headers).status_code == 403
    assert client.put("/api/content/brand-voice", json={"title": "x"}).status_code == 401
