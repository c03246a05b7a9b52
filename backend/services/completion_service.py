"""
Completion Gateway: forwards a system + user prompt to an OpenAI-compatible
chat completions endpoint and returns the reply text.

Every failure (missing API key, timeout, transport error, non-2xx status,
unexpected response shape) is logged here with detail and surfaced to callers
as a GatewayError carrying only a generic message.

No retries or caching: one request in, one call out.
"""
import logging
from typing import Optional

import httpx

from config import Settings
from domain.errors import GatewayError

logger = logging.getLogger(__name__)


class CompletionGateway:
    """Async client for the external text-completion service."""

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.api_key = settings.openai_api_key
        self.base_url = settings.openai_base_url.rstrip("/")
        self.model = settings.completion_model
        self.max_tokens = settings.completion_max_tokens
        self.temperature = settings.completion_temperature
        self.timeout = settings.completion_timeout_seconds
        # Injected in tests (httpx.MockTransport)
        self._transport = transport

    def _get_headers(self) -> dict:
        if not self.api_key:
            logger.error("Completion API key is not configured (OPENAI_API_KEY)")
            raise GatewayError()
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    async def complete(self, system_prompt: str, user_prompt: str) -> str:
        """
        Run one chat completion.

        Args:
            system_prompt: Instruction for the system role
            user_prompt: Content for the user role

        Returns:
            The assistant's reply text (stripped)

        Raises:
            GatewayError on any upstream failure
        """
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
        }
        headers = self._get_headers()

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(
                    f"{self.base_url}/chat/completions",
                    json=payload,
                    headers=headers,
                )
        except httpx.TimeoutException:
            logger.error(f"Completion request timed out after {self.timeout}s")
            raise GatewayError()
        except httpx.HTTPError as e:
            logger.error(f"Completion request failed: {e}")
            raise GatewayError()

        if response.status_code >= 300:
            logger.error(
                f"Completion API returned {response.status_code}: {response.text[:500]}"
            )
            raise GatewayError()

        try:
            data = response.json()
            reply = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            logger.error(f"Malformed completion response: {e}")
            raise GatewayError()

        if not isinstance(reply, str) or not reply.strip():
            logger.error("Completion response contained no text")
            raise GatewayError()

        return reply.strip()
