from brandhub import __version__
from brandhub.api import main
from brandhub.services.storage import StorageConfig, StorageService


def test_root(client):
    r = client.get("/")
    assert r.status_code == 200
    assert r.json() == {"service": "brandhub", "version": __version__}


def test_health_reports_feature_flags(client):
    r = client.get("/health")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "ok"
    assert body["features"]["feature_chat_enabled"] is True
    assert set(body["features"]) == {
        "llm_features_enabled",
        "feature_chat_enabled",
        "feature_guideline_extraction_enabled",
        "feature_pdf_export_enabled",
    }


def test_oversized_request_is_rejected(client, admin_headers, monkeypatch):
    monkeypatch.setattr(main, "MAX_REQUEST_SIZE_BYTES", 16)
    r = client.post("/api/content/", content=b"x" * 64, headers=admin_headers)
    assert r.status_code == 413
    assert r.json()["detail"] == "Request body too large"


def test_local_uploads_are_served(client):
    local = StorageService(StorageConfig(local_dir=str(main._local_upload_dir)))
    stored = local.upload(b"hello", "note.txt", "text/plain", "docs")
    r = client.get(stored.public_url)
    assert r.status_code == 200
    assert r.content == b"hello"
    local.delete(stored.path)
