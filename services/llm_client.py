from __future__ import annotations
import json
import re
from typing import Any, Dict, Optional, cast

from openai import AsyncOpenAI

from config.settings import settings


class LLMResponseError(Exception):
    """The model answered, but not with a usable JSON object."""


_shared_client: Optional[AsyncOpenAI] = None


def get_async_client() -> Optional[AsyncOpenAI]:
    """Process-wide client, built on first use. None when no API key is configured."""
    global _shared_client
    if not settings.OPENAI_API_KEY:
        return None
    if _shared_client is None:
        # single attempt per call; the timeout belongs to the transport
        _shared_client = AsyncOpenAI(
            api_key=settings.OPENAI_API_KEY,
            timeout=settings.OPENAI_TIMEOUT_SECONDS,
            max_retries=0,
        )
    return _shared_client


async def close_async_client():
    global _shared_client
    if _shared_client is not None:
        await _shared_client.close()
        _shared_client = None


def strip_markdown_fences(text: str) -> str:
    text = text.strip()
    text = re.sub(r"^```(?:json)?\s*", "", text)
    text = re.sub(r"\s*```$", "", text)
    return text.strip()


def parse_json_object(text: Optional[str]) -> Dict[str, Any]:
    if not text or not text.strip():
        raise LLMResponseError("empty model response")

    try:
        data = json.loads(strip_markdown_fences(text))
    except json.JSONDecodeError as e:
        raise LLMResponseError(f"model response is not JSON: {e.msg}") from e

    if not isinstance(data, dict):
        raise LLMResponseError(f"expected a JSON object, got {type(data).__name__}")

    return data


async def request_completion(
    client: Any,
    system_prompt: str,
    user_prompt: str,
    temperature: float = 0.6,
    max_tokens: int = 300,
    model: Optional[str] = None,
) -> Optional[str]:
    messages = [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": user_prompt},
    ]

    response = await client.chat.completions.create(
        model=model or settings.OPENAI_MODEL,
        messages=cast(Any, messages),
        temperature=temperature,
        max_tokens=max_tokens,
    )

    if not response.choices:
        return None

    return response.choices[0].message.content
