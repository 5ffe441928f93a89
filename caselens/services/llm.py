# caselens/services/llm.py
import logging
from typing import Any, Dict, List, Optional

from openai import OpenAI

from caselens.core.config import Settings

logger = logging.getLogger(__name__)


class AIProviderNotConfigured(RuntimeError):
    pass


def build_openai_client(settings: Settings) -> Optional[OpenAI]:
    """Returns None when no API key is configured, so callers can degrade instead of crashing."""
    if not settings.OPENAI_API_KEY:
        logger.warning("OPENAI_API_KEY is not set; AI features will be unavailable")
        return None
    return OpenAI(
        api_key=settings.OPENAI_API_KEY,
        base_url=settings.OPENAI_BASE_URL or None,
        timeout=settings.OPENAI_TIMEOUT_SECONDS,
        max_retries=0,
    )


def chat_completion(
    client: Optional[OpenAI],
    model: str,
    messages: List[Dict[str, Any]],
    temperature: float,
) -> str:
    # no max_tokens: let the model answer fully
    if client is None:
        raise AIProviderNotConfigured("AI provider is not configured")
    completion = client.chat.completions.create(model=model, messages=messages, temperature=temperature)
    content = completion.choices[0].message.content
    if content is None:
        raise ValueError("model returned an empty response")
    return content
