"""
Fireworks AI client for the advisor dialogue.
Provides a wrapper around the Fireworks chat API with retry logic.
"""

from functools import lru_cache
from typing import Dict, List, Optional
from tenacity import retry, stop_after_attempt, wait_exponential

from fireworks.client import Fireworks

from lifequote.config import get_settings


class FireworksClient:
    """
    Wrapper for Fireworks AI chat completions.
    """

    def __init__(self):
        """Initialize the Fireworks client with API key."""
        settings = get_settings()

        self.client = Fireworks(api_key=settings.fireworks_api_key)
        self.llm_model = settings.fireworks_llm_model
        self.temperature = settings.llm_temperature
        self.max_tokens = settings.llm_max_tokens

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=2, min=2, max=20),
        reraise=True,
    )
    def chat(
        self,
        messages: List[Dict[str, str]],
        system_prompt: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> str:
        """
        Continue a conversation.

        Args:
            messages: Prior turns as {"role", "content"} dicts, oldest first
            system_prompt: Optional system prompt placed before the turns
            temperature: Sampling temperature (defaults to settings)
            max_tokens: Maximum tokens to generate (defaults to settings)

        Returns:
            The assistant reply text (may be empty)
        """
        payload = []
        if system_prompt:
            payload.append({"role": "system", "content": system_prompt})
        payload.extend(
            {"role": m["role"], "content": m["content"]} for m in messages
        )

        response = self.client.chat.completions.create(
            model=self.llm_model,
            messages=payload,
            temperature=self.temperature if temperature is None else temperature,
            max_tokens=max_tokens or self.max_tokens,
        )

        return response.choices[0].message.content or ""


@lru_cache()
def get_fireworks_client() -> FireworksClient:
    """Get cached Fireworks client instance."""
    return FireworksClient()
