import os
import tempfile
from types import SimpleNamespace

import pytest

# Must be set before the app module mounts the local upload directory
os.environ.setdefault("LOCAL_UPLOAD_DIR", tempfile.mkdtemp(prefix="brandhub-uploads-"))
for _var in ("DEV_MODE", "ADMIN_EMAILS", "ANTHROPIC_API_KEY", "GCS_PROJECT_ID", "GCS_BUCKET_NAME"):
    os.environ.pop(_var, None)

from fastapi.testclient import TestClient

import brandhub.db.database as db_module
from brandhub.api.auth import issue_session
from brandhub.api.main import app
from brandhub.db import models
from brandhub.db.repositories import users as user_repo
from brandhub.services.llm import LLMClient, LLMConfig, get_llm_client
from brandhub.services.storage import StorageConfig, StorageService, get_storage_service
from brandhub.utils.feature_flags import refresh_feature_flag_cache

_GLOBAL_SESSION = None


@pytest.fixture(autouse=True)
def db_session():
    """One session per test, shared with the app; all rows are removed afterwards."""
    global _GLOBAL_SESSION
    session = db_module.SessionLocal()
    _GLOBAL_SESSION = session
    try:
        yield session
    finally:
        _GLOBAL_SESSION = None
        session.rollback()
        for table in reversed(models.Base.metadata.sorted_tables):
            session.execute(table.delete())
        session.commit()
        session.close()


def _override_get_db():
    if _GLOBAL_SESSION is not None:
        yield _GLOBAL_SESSION
        return
    session = db_module.SessionLocal()
    try:
        yield session
    finally:
        session.close()


app.dependency_overrides[db_module.get_db] = _override_get_db


@pytest.fixture
def db(db_session):
    return db_session


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for var in ("DEV_MODE", "ADMIN_EMAILS", "BRAND_NAME", "FEATURE_CHAT_ENABLED", "LLM_FEATURES_ENABLED"):
        monkeypatch.delenv(var, raising=False)
    refresh_feature_flag_cache()
    yield
    refresh_feature_flag_cache()


@pytest.fixture
def storage(tmp_path):
    service = StorageService(StorageConfig(local_dir=str(tmp_path / "uploads")))
    app.dependency_overrides[get_storage_service] = lambda: service
    yield service
    app.dependency_overrides.pop(get_storage_service, None)


@pytest.fixture
def client(storage):
    return TestClient(app)


@pytest.fixture
def make_user(db_session):
    counter = {"n": 0}

    def _make(role=models.ROLE_USER, **overrides):
        counter["n"] += 1
        n = counter["n"]
        user = user_repo.create_user(
            db_session,
            username=overrides.get("username", f"{role}{n}"),
            email=overrides.get("email", f"{role}{n}@example.com"),
            password=overrides.get("password", "secret123"),
            role=role,
        )
        _, raw = issue_session(db_session, user)
        return user, {"Authorization": f"Bearer {raw}"}

    return _make


@pytest.fixture
def admin(make_user):
    return make_user(models.ROLE_ADMIN)


@pytest.fixture
def admin_headers(admin):
    return admin[1]


@pytest.fixture
def member(make_user):
    return make_user(models.ROLE_USER)


@pytest.fixture
def user_headers(member):
    return member[1]


def text_block(text):
    return SimpleNamespace(type="text", text=text)


def tool_use_block(name, tool_input, block_id="toolu_1"):
    return SimpleNamespace(type="tool_use", id=block_id, name=name, input=tool_input)


def message(*blocks, stop_reason="end_turn"):
    return SimpleNamespace(content=list(blocks), stop_reason=stop_reason)


class FakeMessages:
    """Stands in for ``anthropic.Anthropic().messages``; replays queued replies."""

    def __init__(self, replies):
        self.replies = list(replies)
        self.calls = []

    def create(self, **params):
        self.calls.append(params)
        if not self.replies:
            raise AssertionError("no more fake replies queued")
        return self.replies.pop(0)


@pytest.fixture
def fake_llm():
    """Factory returning an LLMClient backed by queued fake replies."""

    def _make(*replies, max_tool_rounds=8):
        messages = FakeMessages(replies)
        llm = LLMClient(
            config=LLMConfig(api_key="test-key", max_tool_rounds=max_tool_rounds),
            client=SimpleNamespace(messages=messages),
        )
        llm.fake_messages = messages
        return llm

    return _make


@pytest.fixture
def use_llm():
    """Install an LLMClient as the app dependency for the duration of a test."""

    def _install(llm):
        app.dependency_overrides[get_llm_client] = lambda: llm
        return llm

    yield _install
    app.dependency_overrides.pop(get_llm_client, None)


@pytest.fixture
def replies():
    """Builders for fake Messages API responses."""
    return SimpleNamespace(text=text_block, tool_use=tool_use_block, message=message)
