"""
Minimal LLM client for an OpenAI-compatible chat-completion endpoint.

Rationale:
- Keep interface tiny: send(prompt) -> text, or an LLMFailure value describing what went wrong.
- One POST per call, no retries; the timeout belongs to httpx.
- No API key means no network call at all: the caller falls back immediately.
"""

import logging
from typing import Any, Optional, Union

import httpx

from .config import Settings
from .outcomes import EmptyResponse, LLMFailure, NotConfigured, TransportError

logger = logging.getLogger(__name__)


def _extract_content(envelope: Any) -> Union[str, LLMFailure]:
    """Pull choices[0].message.content out of a chat-completion envelope."""
    if not isinstance(envelope, dict):
        return EmptyResponse("envelope is not a JSON object")

    choices = envelope.get("choices")
    if not isinstance(choices, list) or not choices:
        return EmptyResponse("response has no choices")

    message = choices[0].get("message") if isinstance(choices[0], dict) else None
    content = message.get("content") if isinstance(message, dict) else None

    # Some providers return content as a list of text parts
    if isinstance(content, list):
        content = "".join(
            str(part.get("text") or "") if isinstance(part, dict) else str(part)
            for part in content
        )

    if not isinstance(content, str) or not content.strip():
        return EmptyResponse("message content is empty")
    return content


class LLMClient:
    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        self._transport = transport

    async def send(self, prompt: str) -> Union[str, LLMFailure]:
        """
        Send the prompt as a single user message and return the model's text.
        """
        if not self.settings.configured:
            return NotConfigured("OPENAI_API_KEY is not set")

        body = {
            "model": self.settings.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": self.settings.temperature,
        }
        headers = {"Authorization": f"Bearer {self.settings.api_key}"}

        logger.info(f"Sending chart analysis request to LLM (model={self.settings.model})")
        try:
            async with httpx.AsyncClient(timeout=self.settings.timeout, transport=self._transport) as client:
                response = await client.post(self.settings.api_url, json=body, headers=headers)
                response.raise_for_status()
                envelope = response.json()
        except httpx.HTTPStatusError as e:
            return TransportError(f"LLM endpoint returned HTTP {e.response.status_code}")
        except httpx.HTTPError as e:
            return TransportError(f"{type(e).__name__}: {e}")
        except ValueError as e:
            return TransportError(f"LLM endpoint returned invalid JSON: {e}")

        return _extract_content(envelope)
