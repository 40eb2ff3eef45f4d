"""Brand assistant chat: system prompt, tool definitions and the tool-use loop."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from urllib.parse import urlencode

from sqlalchemy.orm import Session

from brandhub.db.repositories import tools as tool_repo
from brandhub.services import pdf_service, slides_service
from brandhub.services.brand_context import assemble_brand_context, brand_name
from brandhub.services.llm import LLMClient, get_llm_client, response_text
from brandhub.services.storage import StorageService, get_storage_service
from brandhub.utils.feature_flags import pdf_export_enabled

logger = logging.getLogger(__name__)

CONTENT_CREATOR_PATH = "/tools/static-content-creator"
DEFAULT_DIMENSIONS = (1080, 1080)
PLATFORM_DIMENSIONS = {
    "instagram": (1080, 1080),
    "linkedin": (1200, 627),
    "twitter": (1200, 675),
    "facebook": (1200, 630),
}
TOOL_ROUND_LIMIT_NOTE = "(Stopped after reaching the maximum number of tool steps for one reply.)"

TOOLS: List[Dict[str, Any]] = [
    {
        "name": "create_presentation",
        "description": (
            "Create a Google Slides presentation. Use this when the user asks for a slide deck, presentation, "
            "or pitch deck. You MUST provide the full slide content - title, bullet points, and speaker notes "
            "for each slide."
        ),
        "input_schema": {
            "type": "object",
            "properties": {
                "title": {"type": "string", "description": "Presentation title"},
                "num_slides": {"type": "number", "description": "Number of slides (including title and closing slides)"},
                "topic": {"type": "string", "description": "Main topic or purpose of the presentation"},
                "audience": {"type": "string", "description": "Target audience"},
                "slides": {
                    "type": "array",
                    "description": "Array of slide objects with content",
                    "items": {
                        "type": "object",
                        "properties": {
                            "slide_type": {
                                "type": "string",
                                "enum": ["title", "content", "section", "closing"],
                                "description": "Type of slide",
                            },
                            "title": {"type": "string", "description": "Slide title/heading"},
                            "bullets": {
                                "type": "array",
                                "items": {"type": "string"},
                                "description": "Bullet points for the slide body",
                            },
                            "notes": {"type": "string", "description": "Speaker notes for this slide"},
                        },
                        "required": ["slide_type", "title"],
                    },
                },
            },
            "required": ["title", "slides"],
        },
    },
    {
        "name": "create_social_content",
        "description": (
            "Create social media post content. Use this when the user asks for a social media post, "
            "LinkedIn post, Instagram caption, tweet, or Facebook post."
        ),
        "input_schema": {
            "type": "object",
            "properties": {
                "platform": {
                    "type": "string",
                    "enum": ["linkedin", "instagram", "twitter", "facebook"],
                    "description": "Social media platform",
                },
                "post_text": {"type": "string", "description": "The full post text/caption"},
                "headline": {
                    "type": "string",
                    "description": "Suggested headline or hook (for image overlay if using Content Creator)",
                },
                "hashtags": {"type": "array", "items": {"type": "string"}, "description": "Relevant hashtags"},
                "suggested_dimensions": {
                    "type": "string",
                    "description": 'Recommended image dimensions (e.g., "1080x1080" for Instagram)',
                },
                "cta": {"type": "string", "description": "Call to action text"},
            },
            "required": ["platform", "post_text"],
        },
    },
    {
        "name": "create_pdf_document",
        "description": (
            "Create a branded PDF document such as a flyer, one-pager, or brochure. Use this when the user "
            "asks for print materials, flyers, handouts, or downloadable documents."
        ),
        "input_schema": {
            "type": "object",
            "properties": {
                "document_type": {
                    "type": "string",
                    "enum": ["flyer", "one-pager", "brochure"],
                    "description": "Type of document",
                },
                "title": {"type": "string", "description": "Document title"},
                "subtitle": {"type": "string", "description": "Document subtitle or tagline"},
                "sections": {
                    "type": "array",
                    "description": "Content sections for the document",
                    "items": {
                        "type": "object",
                        "properties": {
                            "heading": {"type": "string", "description": "Section heading"},
                            "body": {"type": "string", "description": "Section body text"},
                        },
                        "required": ["heading", "body"],
                    },
                },
                "cta": {"type": "string", "description": "Call to action text"},
                "contact_info": {"type": "string", "description": "Contact information to include"},
            },
            "required": ["document_type", "title", "sections"],
        },
    },
    {
        "name": "reference_tool",
        "description": (
            "Reference an existing brand tool in the hub. Use this when the user could benefit from using "
            "one of the interactive brand tools."
        ),
        "input_schema": {
            "type": "object",
            "properties": {
                "tool_slug": {"type": "string", "description": "The slug of the tool to reference"},
                "reason": {"type": "string", "description": "Brief explanation of why this tool is relevant"},
            },
            "required": ["tool_slug", "reason"],
        },
    },
]


@dataclass
class ChatResult:
    content: str
    tool_calls: List[Dict[str, Any]] = field(default_factory=list)


def build_system_prompt(db: Session) -> str:
    return f"""You are a brand assistant for {brand_name()}. You help team members create on-brand marketing materials and answer questions about brand guidelines.

{assemble_brand_context(db)}
## Your Capabilities
- Answer questions about brand colors, voice, messaging, and guidelines directly from the context above.
- Create Google Slides presentations using the create_presentation tool.
- Create social media content using the create_social_content tool.
- Create branded PDF documents (flyers, one-pagers, brochures) using the create_pdf_document tool.
- Reference existing brand tools using the reference_tool tool.

## Guidelines
- Always use the brand colors and voice when creating content.
- For presentations: create complete, detailed slide content. Don't leave placeholders.
- For social posts: match the platform's style and character limits.
- For PDFs: write compelling copy that reflects the brand voice.
- If a user asks for something the brand tools can help with (like creating static content or risograph prints), suggest the relevant tool.
- Be helpful, concise, and on-brand in all responses.
- When creating presentations, ensure the first slide is a title slide and the last is a closing/thank you slide."""


def social_content(tool_input: Dict[str, Any]) -> Dict[str, Any]:
    """Post copy plus a Content Creator link pre-filled with it."""
    platform = tool_input.get("platform")
    hashtags = tool_input.get("hashtags")
    params: Dict[str, str] = {}
    if platform:
        params["platform"] = platform
    if tool_input.get("headline"):
        params["headline"] = tool_input["headline"]
    if tool_input.get("cta"):
        params["ctaText"] = tool_input["cta"]
    if tool_input.get("post_text"):
        params["post_text"] = tool_input["post_text"]
    if isinstance(hashtags, list):
        params["hashtags"] = ",".join(str(tag).removeprefix("#") for tag in hashtags)

    width, height = PLATFORM_DIMENSIONS.get(platform, DEFAULT_DIMENSIONS)
    return {
        "success": True,
        "platform": platform,
        "post_text": tool_input.get("post_text"),
        "headline": tool_input.get("headline"),
        "hashtags": hashtags,
        "suggested_dimensions": tool_input.get("suggested_dimensions") or f"{width}x{height}",
        "cta": tool_input.get("cta"),
        "tool_link": f"{CONTENT_CREATOR_PATH}?{urlencode(params)}",
    }


def execute_tool_call(
    db: Session,
    name: str,
    tool_input: Dict[str, Any],
    google_tokens: Optional[Dict[str, Any]],
    *,
    storage: Optional[StorageService] = None,
) -> Dict[str, Any]:
    if name == "create_presentation":
        if not google_tokens or not google_tokens.get("refresh_token"):
            return {
                "error": "google_not_connected",
                "message": "Google account not connected. Please connect your Google account to create presentations.",
            }
        return slides_service.create_presentation(db, google_tokens, tool_input)

    if name == "create_social_content":
        return social_content(tool_input)

    if name == "create_pdf_document":
        if not pdf_export_enabled():
            return {"error": "pdf_export_disabled", "message": "PDF export is disabled."}
        document_type = tool_input.get("document_type") or pdf_service.DEFAULT_DOCUMENT_TYPE
        return pdf_service.generate_pdf(db, document_type, tool_input, storage or get_storage_service())

    if name == "reference_tool":
        slug = tool_input.get("tool_slug")
        tool = tool_repo.get_by_slug(db, slug) if slug else None
        if tool is None:
            return {"error": "Tool not found", "slug": slug}
        return {
            "success": True,
            "title": tool.title,
            "slug": tool.slug,
            "description": tool.description,
            "link": f"/tools/{tool.slug}",
            "reason": tool_input.get("reason"),
        }

    return {"error": f"Unknown tool: {name}"}


def _block_param(block) -> Dict[str, Any]:
    if block.type == "tool_use":
        return {"type": "tool_use", "id": block.id, "name": block.name, "input": block.input}
    return {"type": "text", "text": getattr(block, "text", "")}


def process_chat(
    db: Session,
    messages: List[Dict[str, Any]],
    google_tokens: Optional[Dict[str, Any]] = None,
    *,
    client: Optional[LLMClient] = None,
    storage: Optional[StorageService] = None,
) -> ChatResult:
    """Run one assistant turn, executing requested tools until the model stops.

    ``messages`` is the conversation history as ``{"role", "content"}`` dicts.
    Every executed tool is recorded in ``ChatResult.tool_calls``; a failing
    tool is reported back to the model as ``{"error": ...}``.
    """
    client = client or get_llm_client()
    system = build_system_prompt(db)
    history: List[Dict[str, Any]] = [{"role": m["role"], "content": m["content"]} for m in messages]
    tool_calls: List[Dict[str, Any]] = []

    response = client.create_message(system=system, tools=TOOLS, messages=history)
    rounds = 0
    truncated = False
    while response.stop_reason == "tool_use":
        if rounds >= client.config.max_tool_rounds:
            truncated = True
            logger.warning("chat_tool_round_limit: rounds=%d", rounds)
            break
        rounds += 1

        result_blocks: List[Dict[str, Any]] = []
        for block in response.content:
            if block.type != "tool_use":
                continue
            try:
                result = execute_tool_call(db, block.name, dict(block.input or {}), google_tokens, storage=storage)
            except Exception as exc:
                logger.error("chat_tool_failed: tool=%s error=%s", block.name, exc, exc_info=True)
                result = {"error": str(exc)}
            tool_calls.append({"tool": block.name, "input": block.input, "result": result})
            result_blocks.append({
                "type": "tool_result",
                "tool_use_id": block.id,
                "content": json.dumps(result, default=str),
            })

        history.append({"role": "assistant", "content": [_block_param(b) for b in response.content]})
        history.append({"role": "user", "content": result_blocks})
        response = client.create_message(system=system, tools=TOOLS, messages=history)

    content = response_text(response)
    if truncated:
        content = f"{content}\n\n{TOOL_ROUND_LIMIT_NOTE}" if content else TOOL_ROUND_LIMIT_NOTE
    logger.info("chat_completed: rounds=%d tool_calls=%d", rounds, len(tool_calls))
    return ChatResult(content=content, tool_calls=tool_calls)
