"""AI text generation for the console.

Calls go through LiteLLM so any hosted model can be configured with
AI_DEFAULT_MODEL. Every helper here absorbs failures: the caller gets an
empty or default result and carries on without the suggestion.
"""

import json
import time
from typing import Any, Optional

from libs.common.config import get_settings
from libs.common.logging import get_logger
from services.merchant_service.services.collections import cap_text

logger = get_logger(__name__)

DEFAULT_CATEGORY_SUGGESTIONS = ["General", "Sale", "New"]
DEFAULT_INSIGHTS = "Could not generate insights at this time."

STRING_LIST_SCHEMA = {"type": "array", "items": {"type": "string"}}


class AIResponse:
    """Generated text plus call metadata."""

    def __init__(self, content: str, model: str, latency_ms: int = 0):
        self.content = content
        self.model = model
        self.latency_ms = latency_ms

    def parse_json(self) -> Any:
        """Parse the content as JSON. Handles markdown code fences."""
        text = self.content.strip()
        if text.startswith("```"):
            lines = [line for line in text.split("\n") if not line.strip().startswith("```")]
            text = "\n".join(lines).strip()
        return json.loads(text)


async def call_llm(
    prompt: str,
    output_schema: Optional[dict] = None,
    model: Optional[str] = None,
) -> AIResponse:
    """
    Send one prompt to the configured model.

    Args:
        prompt: User message.
        output_schema: Optional JSON schema; the model is asked to answer
            with JSON matching it.
        model: LiteLLM model string, defaults to settings.AI_DEFAULT_MODEL.
    """
    import litellm

    settings = get_settings()
    model = model or settings.AI_DEFAULT_MODEL

    kwargs: dict[str, Any] = {
        "model": model,
        "messages": [{"role": "user", "content": prompt}],
        "temperature": settings.AI_TEMPERATURE,
        "max_tokens": settings.AI_MAX_TOKENS,
    }
    if output_schema is not None:
        kwargs["response_format"] = {
            "type": "json_schema",
            "json_schema": {"name": "console_output", "schema": output_schema},
        }

    start = time.monotonic()
    try:
        response = await litellm.acompletion(**kwargs)
    except Exception as e:
        elapsed_ms = int((time.monotonic() - start) * 1000)
        logger.error(
            f"LLM call failed: {e}",
            extra={"extra_fields": {"model": model, "latency_ms": elapsed_ms}},
        )
        raise

    return AIResponse(
        content=response.choices[0].message.content or "",
        model=model,
        latency_ms=int((time.monotonic() - start) * 1000),
    )


async def generate(prompt: str, output_schema: Optional[dict] = None) -> AIResponse:
    """The model's answer to ``prompt``; raises on model failure."""
    if not get_settings().AI_ENABLED:
        raise RuntimeError("AI generation is disabled")
    return await call_llm(prompt, output_schema=output_schema)


async def suggest_categories(store_type: str) -> list[str]:
    """Five category names for a kind of shop, or a generic default list."""
    prompt = f'List 5 common product categories for a "{store_type}" shop.'
    try:
        response = await generate(prompt, output_schema=STRING_LIST_SCHEMA)
        suggestions = response.parse_json() if response.content.strip() else []
        if not isinstance(suggestions, list):
            raise ValueError(f"Expected a JSON array, got {type(suggestions).__name__}")
        return [str(item).strip() for item in suggestions if str(item).strip()]
    except Exception as e:
        logger.warning(f"Category suggestion failed: {e}")
        return list(DEFAULT_CATEGORY_SUGGESTIONS)


async def generate_product_description(product_name: str, category_name: str) -> str:
    """A short product blurb, capped at the description limit; "" on failure."""
    prompt = (
        "Write a short, catchy product description (max 2 sentences) for a product "
        f'named "{product_name}" in the category "{category_name}".'
    )
    try:
        text = (await generate(prompt)).content.strip()
    except Exception as e:
        logger.warning(f"Product description generation failed: {e}")
        return ""
    return cap_text(text, get_settings().DESCRIPTION_MAX_LENGTH) or ""


async def generate_store_insights(store_name: str, store_type: str) -> str:
    """Three sales tips for the store, or a fallback message."""
    prompt = (
        f'I am a merchant owner of a store called "{store_name}" which is a "{store_type}". '
        "Give me 3 brief, bulleted tips on how to increase sales for this specific type "
        "of business. Keep it professional and encouraging."
    )
    try:
        text = (await generate(prompt)).content.strip()
    except Exception as e:
        logger.warning(f"Store insights generation failed: {e}")
        return DEFAULT_INSIGHTS
    return text or "No insights available."
