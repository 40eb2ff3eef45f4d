"""Anthropic Messages API client used by the chat assistant and guideline import.

The SDK client is created lazily so the app starts (and non-AI endpoints work)
without an API key.
"""
from __future__ import annotations

import json
import logging
import os
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import anthropic

logger = logging.getLogger(__name__)

DEFAULT_CHAT_MODEL = "claude-sonnet-4-20250514"
DEFAULT_EXTRACTION_MODEL = "claude-3-5-haiku-20241022"

_FENCED_JSON = re.compile(r"```json\s*([\s\S]*?)\s*```")
_BARE_OBJECT = re.compile(r"\{[\s\S]*\}")


class LLMNotConfiguredError(RuntimeError):
    """Raised when an LLM call is attempted without ANTHROPIC_API_KEY."""


class LLMRequestError(RuntimeError):
    """Raised when the upstream API call fails."""


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r", name, raw)
        return default


@dataclass
class LLMConfig:
    api_key: Optional[str] = None
    chat_model: str = DEFAULT_CHAT_MODEL
    extraction_model: str = DEFAULT_EXTRACTION_MODEL
    max_tokens: int = 4096
    max_tool_rounds: int = 8

    @classmethod
    def from_env(cls) -> "LLMConfig":
        return cls(
            api_key=os.getenv("ANTHROPIC_API_KEY") or None,
            chat_model=os.getenv("CHAT_MODEL") or DEFAULT_CHAT_MODEL,
            extraction_model=os.getenv("EXTRACTION_MODEL") or DEFAULT_EXTRACTION_MODEL,
            max_tokens=_int_env("LLM_MAX_TOKENS", 4096),
            max_tool_rounds=max(1, _int_env("CHAT_MAX_TOOL_ROUNDS", 8)),
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)


class LLMClient:
    def __init__(self, config: Optional[LLMConfig] = None, client: Any = None):
        self.config = config or LLMConfig.from_env()
        self._client = client

    def is_configured(self) -> bool:
        return self._client is not None or self.config.is_configured

    def _get_client(self):
        if self._client is None:
            if not self.config.is_configured:
                raise LLMNotConfiguredError("ANTHROPIC_API_KEY is not configured")
            self._client = anthropic.Anthropic(api_key=self.config.api_key)
        return self._client

    def create_message(
        self,
        *,
        messages: List[Dict[str, Any]],
        model: Optional[str] = None,
        system: Optional[str] = None,
        tools: Optional[List[Dict[str, Any]]] = None,
        max_tokens: Optional[int] = None,
    ):
        """Call ``messages.create`` and return the SDK response object."""
        params: Dict[str, Any] = {
            "model": model or self.config.chat_model,
            "max_tokens": max_tokens or self.config.max_tokens,
            "messages": messages,
        }
        if system:
            params["system"] = system
        if tools:
            params["tools"] = tools
        try:
            return self._get_client().messages.create(**params)
        except anthropic.APIError as exc:
            logger.error("llm_request_failed: model=%s error=%s", params["model"], exc, exc_info=True)
            raise LLMRequestError(str(exc)) from exc


def response_text(response) -> str:
    """Concatenate the text blocks of a Messages API response."""
    return "".join(getattr(block, "text", "") for block in response.content if getattr(block, "type", None) == "text")


def extract_json(text: str) -> Dict[str, Any]:
    """Parse the JSON object from a model reply.

    A fenced ```json block wins; otherwise the span from the first ``{`` to the
    last ``}`` is used. Raises ValueError when nothing parses.
    """
    match = _FENCED_JSON.search(text or "")
    candidate = match.group(1) if match else None
    if candidate is None:
        match = _BARE_OBJECT.search(text or "")
        candidate = match.group(0) if match else None
    if candidate is None:
        raise ValueError("Could not extract JSON from model response")
    data = json.loads(candidate)
    if not isinstance(data, dict):
        raise ValueError("Model response JSON is not an object")
    return data


_llm_client: Optional[LLMClient] = None


def get_llm_client() -> LLMClient:
    global _llm_client
    if _llm_client is None:
        _llm_client = LLMClient()
    return _llm_client
