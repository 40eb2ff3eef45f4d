import pytest

from brandhub.utils.feature_flags import (
    FeatureFlagKey,
    chat_feature_enabled,
    get_feature_flags,
    guideline_extraction_enabled,
    is_feature_enabled,
    pdf_export_enabled,
    refresh_feature_flag_cache,
)

_ENV_FLAG_MAPPING = {
    "LLM_FEATURES_ENABLED": "llm_features_enabled",
    "FEATURE_CHAT_ENABLED": "feature_chat_enabled",
    "FEATURE_GUIDELINE_EXTRACTION_ENABLED": "feature_guideline_extraction_enabled",
    "FEATURE_PDF_EXPORT_ENABLED": "feature_pdf_export_enabled",
}


@pytest.fixture(autouse=True)
def reset_flags(monkeypatch):
    """Clear env + cached values for each test to avoid cross-contamination."""
    for env_name in _ENV_FLAG_MAPPING:
        monkeypatch.delenv(env_name, raising=False)
    refresh_feature_flag_cache()
    yield
    refresh_feature_flag_cache()


def test_get_feature_flags_defaults_true():
    assert get_feature_flags() == {
        "llm_features_enabled": True,
        "feature_chat_enabled": True,
        "feature_guideline_extraction_enabled": True,
        "feature_pdf_export_enabled": True,
    }


@pytest.mark.parametrize("env_name,flag_key", list(_ENV_FLAG_MAPPING.items()))
def test_individual_flag_disabled_via_env(monkeypatch, env_name: str, flag_key: FeatureFlagKey):
    monkeypatch.setenv(env_name, "false")
    refresh_feature_flag_cache()

    assert get_feature_flags()[flag_key] is False
    assert is_feature_enabled(flag_key) is False


@pytest.mark.parametrize("raw_value", ["maybe", "2", None])
def test_invalid_value_falls_back_to_default(monkeypatch, raw_value):
    if raw_value is None:
        monkeypatch.delenv("LLM_FEATURES_ENABLED", raising=False)
    else:
        monkeypatch.setenv("LLM_FEATURES_ENABLED", raw_value)
    refresh_feature_flag_cache()

    assert get_feature_flags()["llm_features_enabled"] is True


def test_global_llm_toggle_disables_dependent_features(monkeypatch):
    monkeypatch.setenv("LLM_FEATURES_ENABLED", "off")
    refresh_feature_flag_cache()

    assert chat_feature_enabled() is False
    assert guideline_extraction_enabled() is False
    # PDF export does not call the model
    assert pdf_export_enabled() is True


def test_refresh_feature_flag_cache_forces_reload(monkeypatch):
    monkeypatch.setenv("FEATURE_CHAT_ENABLED", "false")
    refresh_feature_flag_cache()
    assert chat_feature_enabled() is False

    monkeypatch.setenv("FEATURE_CHAT_ENABLED", "true")
    assert chat_feature_enabled() is False

    refresh_feature_flag_cache()
    assert chat_feature_enabled() is True
