def _create(client, headers, files=None, **form):
    data = {"title": "Pitch Deck", "template_type": "google-slides", **form}
    return client.post("/api/templates/", data=data, files=files, headers=headers)


def test_create_link_template(client, admin_headers):
    resp = _create(client, admin_headers, external_link="https://docs.google.com/presentation/d/abc", tags="sales, deck")

    assert resp.status_code == 201
    template = resp.json()
    assert template["external_link"] == "https://docs.google.com/presentation/d/abc"
    assert template["tags"] == ["sales", "deck"]
    assert template["file_url"] is None


def test_create_file_template_with_preview(client, admin_headers):
    resp = _create(
        client,
        admin_headers,
        template_type="pdf",
        files=[
            ("file", ("one-pager.pdf", b"%PDF-1.4 body", "application/pdf")),
            ("preview", ("cover.png", b"\x89PNG fake", "image/png")),
        ],
    )

    assert resp.status_code == 201
    template = resp.json()
    assert template["file_url"].startswith("/uploads/templates/")
    assert template["file_size"] == len(b"%PDF-1.4 body")
    assert template["preview_url"].startswith("/uploads/previews/")


def test_create_validation(client, admin_headers, user_headers):
    assert _create(client, admin_headers, template_type="canva").status_code == 422
    assert _create(client, admin_headers, title=" ").json()["detail"] == "Title is required"
    assert _create(client, user_headers).status_code == 403
    bad_preview = _create(
        client, admin_headers, files=[("preview", ("cover.pdf", b"%PDF", "application/pdf"))]
    )
    assert bad_preview.status_code == 400


def test_list_filters_and_tags(client, admin_headers):
    _create(client, admin_headers, title="Deck", tags="sales")
    _create(client, admin_headers, title="Board", template_type="figma", tags="social, sales")
    _create(client, admin_headers, title="Poster", template_type="pdf", tags="print")

    assert [t["title"] for t in client.get("/api/templates/").json()] == ["Deck", "Board", "Poster"]
    assert [t["title"] for t in client.get("/api/templates/", params={"tag": "sales"}).json()] == ["Deck", "Board"]
    assert [t["title"] for t in client.get("/api/templates/", params={"type": "figma"}).json()] == ["Board"]
    assert client.get("/api/templates/tags").json() == ["print", "sales", "social"]


def test_download_url_without_bucket(client, admin_headers):
    link = _create(client, admin_headers, external_link="https://figma.com/file/x").json()
    resp = client.get(f"/api/templates/{link['id']}/download")
    assert resp.json() == {"url": "https://figma.com/file/x", "expires_in": None}

    uploaded = _create(client, admin_headers, files=[("file", ("a.pdf", b"%PDF", "application/pdf"))]).json()
    assert client.get(f"/api/templates/{uploaded['id']}/download").json()["url"] == uploaded["file_url"]

    empty = _create(client, admin_headers).json()
    resp = client.get(f"/api/templates/{empty['id']}/download")
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Template has no downloadable file"


def test_update_template(client, admin_headers):
    template = _create(client, admin_headers, tags="sales").json()

    resp = client.put(
        f"/api/templates/{template['id']}",
        data={"title": "Sales Deck", "is_active": "false", "tags": "q3"},
        files=[("file", ("deck.pptx", b"PK", "application/vnd.openxmlformats-officedocument.presentationml.presentation"))],
        headers=admin_headers,
    )

    assert resp.status_code == 200
    updated = resp.json()
    assert updated["title"] == "Sales Deck"
    assert updated["is_active"] is False
    assert updated["tags"] == ["q3"]
    assert updated["file_url"].endswith("-deck.pptx")
    assert client.get("/api/templates/").json() == []


def test_delete_and_reorder(client, admin_headers):
    first = _create(client, admin_headers, title="First").json()
    second = _create(client, admin_headers, title="Second").json()

    resp = client.put(
        "/api/templates/reorder",
        json={"items": [{"id": first["id"], "order_index": 10}, {"id": second["id"], "order_index": 1}]},
        headers=admin_headers,
    )
    assert resp.json()["updated"] == 2
    assert [t["title"] for t in client.get("/api/templates/").json()] == ["Second", "First"]

    assert client.delete(f"/api/templates/{first['id']}", headers=admin_headers).json() == {
        "message": "Template deleted successfully"
    }
    assert client.get(f"/api/templates/{first['id']}").status_code == 404
