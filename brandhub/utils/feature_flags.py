"""Feature flag helpers for runtime configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, Literal, TypedDict, cast


FeatureFlagKey = Literal[
    "llm_features_enabled",
    "feature_chat_enabled",
    "feature_guideline_extraction_enabled",
    "feature_pdf_export_enabled",
]


class FeatureFlagValues(TypedDict):
    llm_features_enabled: bool
    feature_chat_enabled: bool
    feature_guideline_extraction_enabled: bool
    feature_pdf_export_enabled: bool


@dataclass(frozen=True)
class FeatureFlagDefinition:
    env_var: str
    default: bool


_FEATURE_FLAG_DEFINITIONS: Dict[FeatureFlagKey, FeatureFlagDefinition] = {
    "llm_features_enabled": FeatureFlagDefinition("LLM_FEATURES_ENABLED", True),
    "feature_chat_enabled": FeatureFlagDefinition("FEATURE_CHAT_ENABLED", True),
    "feature_guideline_extraction_enabled": FeatureFlagDefinition("FEATURE_GUIDELINE_EXTRACTION_ENABLED", True),
    "feature_pdf_export_enabled": FeatureFlagDefinition("FEATURE_PDF_EXPORT_ENABLED", True),
}


def _normalize_bool(value: str | None, default: bool = True) -> bool:
    """Return normalized boolean from environment-style value."""
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"", "0", "false", "no", "off"}:
        return False
    if normalized in {"1", "true", "yes", "on"}:
        return True
    return default


@lru_cache(maxsize=None)
def get_feature_flags() -> FeatureFlagValues:
    """Return the cached feature flag state sourced from the environment."""
    values: Dict[FeatureFlagKey, bool] = {}
    for key, definition in _FEATURE_FLAG_DEFINITIONS.items():
        values[key] = _normalize_bool(os.getenv(definition.env_var), default=definition.default)
    return cast(FeatureFlagValues, values)


def is_feature_enabled(flag: FeatureFlagKey) -> bool:
    """Return whether the supplied feature flag evaluates to true."""
    return get_feature_flags()[flag]


def llm_features_enabled() -> bool:
    """Global toggle for LLM-powered workflows."""
    return is_feature_enabled("llm_features_enabled")


def chat_feature_enabled() -> bool:
    """Toggle the AI chat assistant. Requires the global LLM toggle."""
    return llm_features_enabled() and is_feature_enabled("feature_chat_enabled")


def guideline_extraction_enabled() -> bool:
    """Toggle brand guideline import. Requires the global LLM toggle."""
    return llm_features_enabled() and is_feature_enabled("feature_guideline_extraction_enabled")


def pdf_export_enabled() -> bool:
    """Toggle headless-browser PDF generation from chat."""
    return is_feature_enabled("feature_pdf_export_enabled")


def refresh_feature_flag_cache() -> None:
    """Invalidate cached feature flag values (useful for tests)."""
    get_feature_flags.cache_clear()
