"""Structured-data extraction via an OpenAI-compatible chat-completion API.

``StructuredDataExtractor.infer`` embeds the normalised page into a fixed
schema prompt, asks the model for a low-temperature completion and parses
the reply into an :class:`ExtractedToolRecord`.  The reply must be a bare
JSON object: prose wrappers or trailing commas raise
:class:`MalformedResponse` and the call is not retried.

Configure via ``OPENAI_API_KEY``, ``LLM_BASE_URL`` and ``LLM_MODEL``; any
OpenAI-compatible endpoint (e.g. a local Ollama at ``/v1``) works.
"""

from __future__ import annotations

import json
from typing import Any

import httpx
from loguru import logger

from toolshelf.config import settings
from toolshelf.errors import EmptyResponse, MalformedResponse, ModelUnavailable
from toolshelf.scraper.models import ExtractedToolRecord, RawPageContent

_PROMPT_TEMPLATE = """\
You are a product data extraction expert. Extract key information from this website content and return ONLY a valid JSON object.

REQUIRED FORMAT (return exactly this structure):
{{
  "name": "Product name from title/heading",
  "description": "Clear 2-3 sentence description of what this product/service does",
  "features": ["main feature 1", "main feature 2", "main feature 3"],
  "useCases": ["who would use this", "what problem it solves"],
  "pricing": "Free" | "Freemium" | "Paid" | "Contact Us",
  "tags": ["category", "type", "relevant keywords"]
}}

INSTRUCTIONS:
- Extract the actual product name from the title or main heading
- Write a clear description of what the product does
- List 3-5 main features or capabilities
- Identify 2-3 use cases or target audiences
- Determine pricing model from content (look for pricing, subscription, free trial mentions)
- Add 3-5 relevant tags for categorization
- If information is limited, make reasonable inferences based on context

WEBSITE DATA (extracted via {method}):
Title: {title}
Meta Description: {description}
Content: {content}
URL: {url}

Extract real information from the content above. Return ONLY the JSON object, no additional text."""


def build_prompt(page: RawPageContent, source_url: str, method: str) -> str:
    """Render the extraction prompt for *page*."""
    return _PROMPT_TEMPLATE.format(
        method=method,
        title=page.title,
        description=page.meta_description,
        content=page.body_text,
        url=source_url,
    )


def parse_reply(text: str) -> dict[str, Any]:
    """Parse a model reply that must be exactly one JSON object.

    Raises:
        MalformedResponse: If *text* is not valid JSON or not an object.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedResponse(
            f"Failed to parse AI response as JSON: {exc.msg}", raw=text
        ) from exc
    if not isinstance(data, dict):
        raise MalformedResponse(
            f"Expected a JSON object, got {type(data).__name__}", raw=text
        )
    return data


async def chat_completion(
    prompt: str,
    *,
    max_tokens: int,
    api_key: str,
    model: str | None = None,
    temperature: float | None = None,
    base_url: str | None = None,
    client: httpx.AsyncClient | None = None,
) -> str:
    """POST a single-message chat completion and return the stripped reply.

    Returns an empty string when the response carries no message content.

    Raises:
        ModelUnavailable: On missing key, auth failure, non-2xx status or
            transport error.
    """
    if not api_key:
        raise ModelUnavailable(
            "OPENAI_API_KEY environment variable is not set; "
            "automatic extraction is unavailable."
        )

    url = f"{(base_url or settings.llm_base_url).rstrip('/')}/chat/completions"
    payload = {
        "model": model or settings.llm_model,
        "messages": [{"role": "user", "content": prompt}],
        "temperature": settings.llm_temperature if temperature is None else temperature,
        "max_tokens": max_tokens,
    }
    headers = {"Authorization": f"Bearer {api_key}"}

    try:
        if client is not None:
            response = await client.post(url, json=payload, headers=headers)
        else:
            async with httpx.AsyncClient(timeout=settings.request_timeout) as owned:
                response = await owned.post(url, json=payload, headers=headers)
    except httpx.HTTPError as exc:
        raise ModelUnavailable(f"Model request failed: {exc!r}") from exc

    if response.status_code in (401, 403):
        raise ModelUnavailable(
            f"Model API rejected the credentials (HTTP {response.status_code})."
        )
    if not response.is_success:
        raise ModelUnavailable(
            f"Model API error: {response.status_code} {response.reason_phrase}"
        )

    try:
        data = response.json()
        content = data["choices"][0]["message"]["content"]
    except (ValueError, KeyError, IndexError, TypeError):
        return ""
    return content.strip() if isinstance(content, str) else ""


class StructuredDataExtractor:
    """Turns a :class:`RawPageContent` into a validated tool record."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        base_url: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.api_key = settings.openai_api_key if api_key is None else api_key
        self.model = model or settings.llm_model
        self.base_url = base_url or settings.llm_base_url
        self._client = client

    async def infer(
        self,
        page: RawPageContent,
        source_url: str,
        method: str = "Direct Fetch",
    ) -> ExtractedToolRecord:
        """Ask the model for a structured record describing *page*.

        Args:
            page: Normalised page content.
            source_url: The URL the page came from; relative logo paths are
                resolved against it.
            method: Name of the fetch strategy, embedded in the prompt.

        Raises:
            ModelUnavailable: No credential, or the API refused / failed.
            EmptyResponse: The model returned no content.
            MalformedResponse: The reply is not a JSON object.
        """
        prompt = build_prompt(page, source_url, method)
        logger.info(f"[extract] sending {len(page.body_text)} chars to {self.model} ({method})")

        reply = await chat_completion(
            prompt,
            max_tokens=settings.llm_max_tokens,
            api_key=self.api_key,
            model=self.model,
            base_url=self.base_url,
            client=self._client,
        )
        if not reply:
            raise EmptyResponse("No response from the model")

        data = parse_reply(reply)
        record = ExtractedToolRecord.from_model_reply(data, page, source_url)
        logger.debug(f"[extract] parsed record for {record.name!r}")
        return record
