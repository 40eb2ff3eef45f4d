from datetime import datetime, timedelta, timezone

import pytest

from brandhub.services import slides_service
from brandhub.services.brand_context import BrandColors
from brandhub.services.google_oauth import GoogleOAuthConfig
from brandhub.services.slides_service import (
    PRESENTATION_URL,
    GoogleNotConnectedError,
    build_credentials,
    build_slide_requests,
    create_presentation,
    hex_to_rgb,
)


class _Call:
    def __init__(self, result):
        self.result = result

    def execute(self):
        return self.result


class FakePresentations:
    def __init__(self, created):
        self.created = created
        self.create_bodies = []
        self.batches = []

    def create(self, body):
        self.create_bodies.append(body)
        return _Call(self.created)

    def batchUpdate(self, presentationId, body):
        self.batches.append((presentationId, body))
        return _Call({})


class FakeSlidesService:
    def __init__(self, created):
        self._presentations = FakePresentations(created)

    def presentations(self):
        return self._presentations


def _by_kind(requests_, kind):
    return [r[kind] for r in requests_ if kind in r]


def test_hex_to_rgb_scales_to_unit_floats():
    assert hex_to_rgb("#FF0000") == {"red": 1.0, "green": 0.0, "blue": 0.0}
    assert hex_to_rgb("802a02")["green"] == pytest.approx(42 / 255)
    assert hex_to_rgb("#fff") == {"red": 0, "green": 0, "blue": 0}
    assert hex_to_rgb(None) == {"red": 0, "green": 0, "blue": 0}


def test_build_slide_requests_layout():
    colors = BrandColors()
    slides = [
        {"slide_type": "title", "title": "Launch", "bullets": ["Spring 2026"]},
        {"slide_type": "content", "title": "Why", "bullets": ["Fast", "Warm"], "notes": "say hi"},
        {"slide_type": "closing", "title": "Thanks"},
    ]

    requests_ = build_slide_requests(slides, colors)

    created = _by_kind(requests_, "createSlide")
    assert [c["objectId"] for c in created] == ["slide_0", "slide_1", "slide_2"]
    assert all(c["slideLayoutReference"] == {"predefinedLayout": "BLANK"} for c in created)

    backgrounds = _by_kind(requests_, "updatePageProperties")
    fills = [b["pageProperties"]["pageBackgroundFill"]["solidFill"]["color"]["rgbColor"] for b in backgrounds]
    assert fills == [hex_to_rgb(colors.primary), hex_to_rgb(colors.background), hex_to_rgb(colors.primary)]

    texts = {t["objectId"]: t["text"] for t in _by_kind(requests_, "insertText")}
    assert texts == {
        "title_0": "Launch",
        "subtitle_0": "Spring 2026",
        "title_1": "Why",
        "body_1": "• Fast\n• Warm",
        "title_2": "Thanks",
    }

    sizes = {s["objectId"]: s["style"]["fontSize"]["magnitude"] for s in _by_kind(requests_, "updateTextStyle")}
    assert sizes == {"title_0": 36, "subtitle_0": 18, "title_1": 28, "body_1": 16, "title_2": 36}
    paragraph = _by_kind(requests_, "updateParagraphStyle")
    assert [p["objectId"] for p in paragraph] == ["body_1"]
    assert paragraph[0]["style"]["lineSpacing"] == 180


def test_section_slides_have_no_body():
    requests_ = build_slide_requests([{"slide_type": "section", "title": "Part 2", "bullets": ["x"]}], BrandColors())
    assert [t["objectId"] for t in _by_kind(requests_, "insertText")] == ["title_0"]


def test_create_presentation_issues_single_batch(db):
    service = FakeSlidesService({"presentationId": "deck123", "slides": [{"objectId": "p"}]})
    content = {"title": "Q3 Review", "slides": [{"slide_type": "title", "title": "Q3"}]}

    result = create_presentation(db, None, content, service=service)

    assert result == {
        "success": True,
        "presentation_id": "deck123",
        "url": PRESENTATION_URL.format(presentation_id="deck123"),
        "title": "Q3 Review",
        "slide_count": 1,
    }
    presentations = service.presentations()
    assert presentations.create_bodies == [{"title": "Q3 Review"}]
    assert len(presentations.batches) == 1
    presentation_id, body = presentations.batches[0]
    assert presentation_id == "deck123"
    assert body["requests"][-1] == {"deleteObject": {"objectId": "p"}}


def test_create_presentation_defaults_title(db):
    service = FakeSlidesService({"presentationId": "d", "slides": []})
    result = create_presentation(db, None, {"slides": []}, service=service)
    assert result["title"] == "Untitled presentation"
    assert result["slide_count"] == 0
    assert service.presentations().batches == []


def test_build_credentials_requires_refresh_token():
    with pytest.raises(GoogleNotConnectedError):
        build_credentials(None)
    with pytest.raises(GoogleNotConnectedError):
        build_credentials({"access_token": "a", "refresh_token": None})


def test_build_credentials_keeps_valid_token(monkeypatch):
    def fail_refresh(self, request):
        raise AssertionError("should not refresh a valid token")

    monkeypatch.setattr(slides_service.Credentials, "refresh", fail_refresh)
    config = GoogleOAuthConfig(client_id="cid", client_secret="secret", redirect_uri="http://localhost/cb")
    expiry = datetime.now(timezone.utc) + timedelta(hours=1)

    credentials = build_credentials({"access_token": "tok", "refresh_token": "ref", "expiry": expiry}, config)

    assert credentials.token == "tok"
    assert credentials.refresh_token == "ref"
    assert credentials.expiry.tzinfo is None


def test_build_credentials_refreshes_expired_token(monkeypatch):
    refreshed = []
    monkeypatch.setattr(slides_service.Credentials, "refresh", lambda self, request: refreshed.append(request))
    config = GoogleOAuthConfig(client_id="cid", client_secret="secret", redirect_uri="http://localhost/cb")

    build_credentials({"access_token": None, "refresh_token": "ref", "expiry": None}, config)

    assert len(refreshed) == 1
