"""
OpenAI API service wrapper
"""
import logging
from typing import Any, Dict, Optional, Tuple

import httpx
from openai import AsyncOpenAI, OpenAIError

from menu_backend.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

SOMMELIER_SYSTEM_PROMPT = (
    "Je bent een sommelier en food pairing expert. Schrijf korte, aantrekkelijke "
    "beschrijvingen (max 80 woorden) voor voedsel en drank combinaties."
)


class OpenAIService:
    def __init__(self, api_key: Optional[str] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.api_key = settings.openai_key if api_key is None else api_key
        self.model = settings.OPENAI_MODEL
        self.max_tokens = settings.OPENAI_MAX_TOKENS
        self.temperature = settings.OPENAI_TEMPERATURE
        self.timeout = settings.OPENAI_TIMEOUT_SECONDS
        self._transport = transport
        self._available = bool(self.api_key)
        if self._available:
            self.client = AsyncOpenAI(api_key=self.api_key, timeout=self.timeout)
        else:
            self.client = None

    @property
    def is_available(self) -> bool:
        return self._available

    async def generate(
        self,
        prompt: str,
        lang: str = "nl",
        system_prompt: Optional[str] = None,
        max_tokens: Optional[int] = None,
    ) -> Optional[str]:
        """
        Generate a short text. Returns None when no key is configured or the
        call fails; callers fall back to template text.
        """
        if not self._available or self.client is None:
            logger.debug("OpenAI not configured, skipping generation")
            return None

        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt or SOMMELIER_SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                max_tokens=max_tokens or self.max_tokens,
                temperature=self.temperature,
            )
        except OpenAIError as e:
            logger.warning(f"OpenAI generation failed ({lang}): {e}")
            return None

        if not response.choices:
            return None
        text = (response.choices[0].message.content or "").strip()
        return text or None

    async def forward(self, payload: Dict[str, Any]) -> Tuple[int, Dict[str, Any]]:
        """
        Send a chat-completions body upstream as-is with the server-side key.
        Returns the upstream status and JSON body. Raises RuntimeError when no
        key is configured and httpx.HTTPError when upstream is unreachable.
        """
        if not self._available:
            raise RuntimeError("OpenAI API key is not configured")

        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.post(settings.OPENAI_API_URL, json=payload, headers=headers)
        try:
            data = response.json()
        except ValueError:
            data = {"error": response.text or f"Upstream returned {response.status_code}"}
        return response.status_code, data


# Singleton instance
openai_service = OpenAIService()


def get_openai_service() -> OpenAIService:
    return openai_service
