import base64

from brandhub.services import pdf_service
from brandhub.services.brand_context import BrandColors
from brandhub.services.pdf_service import PdfConfig, generate_pdf, render_document_html
from brandhub.services.storage import StorageService, StoredObject

CONTENT = {
    "title": "Summer <Launch>",
    "subtitle": "New season",
    "sections": [
        {"heading": "One", "body": "First"},
        {"heading": "Two", "body": "Second"},
        {"heading": "Three", "body": "Third"},
    ],
    "cta": "Visit us",
    "contact_info": "hello@example.com",
}


class RecordingStorage(StorageService):
    """Pretends to be bucket-backed and records uploads."""

    def __init__(self):
        self.uploads = []

    def is_configured(self):
        return True

    def upload(self, data, original_name, content_type, folder="assets"):
        self.uploads.append((data, original_name, content_type, folder))
        path = f"{folder}/{original_name}"
        return StoredObject(
            path=path,
            public_url=f"https://storage.googleapis.com/bucket/{path}",
            bucket="bucket",
            size=len(data),
            content_type=content_type,
        )


def test_render_escapes_model_text():
    html = render_document_html("flyer", CONTENT, BrandColors())
    assert "Summer &lt;Launch&gt;" in html
    assert "Summer <Launch>" not in html
    assert "hello@example.com" in html
    assert BrandColors().primary in html


def test_render_includes_logo_when_known():
    html = render_document_html("one-pager", CONTENT, BrandColors(), logo_url="/uploads/logo.png")
    assert 'src="/uploads/logo.png"' in html


def test_brochure_splits_sections_into_columns():
    html = render_document_html("brochure", CONTENT, BrandColors())
    left = html.index('class="column left"')
    right = html.index('class="column right"')
    assert left < html.index("<h3>One</h3>") < html.index("<h3>Two</h3>") < right < html.index("<h3>Three</h3>")


def test_unknown_document_type_uses_one_pager():
    assert render_document_html("poster", CONTENT, BrandColors()) == render_document_html(
        "one-pager", CONTENT, BrandColors()
    )


def test_generate_pdf_returns_base64_without_bucket(db, storage):
    result = generate_pdf(db, "flyer", CONTENT, storage, renderer=lambda html: b"%PDF-1.4 fake")

    assert result == {
        "success": True,
        "base64": base64.b64encode(b"%PDF-1.4 fake").decode("ascii"),
        "type": "flyer",
        "title": "Summer <Launch>",
    }


def test_generate_pdf_uploads_when_bucket_configured(db):
    storage = RecordingStorage()
    rendered = []

    def renderer(html):
        rendered.append(html)
        return b"%PDF"

    result = generate_pdf(db, "brochure", CONTENT, storage, renderer=renderer)

    assert len(rendered) == 1
    data, name, content_type, folder = storage.uploads[0]
    assert data == b"%PDF"
    assert name.startswith("brochure-") and name.endswith(".pdf")
    assert content_type == "application/pdf"
    assert folder == "documents"
    assert result["url"] == f"https://storage.googleapis.com/bucket/documents/{name}"
    assert result["file_name"] == f"documents/{name}"
    assert "base64" not in result


def test_pdf_config_from_env(monkeypatch):
    monkeypatch.setenv("PDF_RENDER_TIMEOUT_MS", "5000")
    assert PdfConfig.from_env().timeout_ms == 5000
    monkeypatch.setenv("PDF_RENDER_TIMEOUT_MS", "soon")
    assert PdfConfig.from_env().timeout_ms == 15000
    assert "--no-sandbox" in PdfConfig().launch_args


def test_document_templates_exist():
    for document_type in pdf_service.DOCUMENT_TEMPLATES:
        assert "<!DOCTYPE html>" in render_document_html(document_type, CONTENT, BrandColors())
