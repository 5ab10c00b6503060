"""
Gemini API Client
Thin async wrapper around the google-genai SDK
"""

import asyncio
from typing import Optional

from google import genai
from google.genai import types

from selfcare.utils.config import get_settings
from selfcare.utils.logger import get_logger

from .exceptions import GeminiAPICallError

logger = get_logger(__name__)

QUOTA_INDICATORS = (
    "quota",
    "rate_limit",
    "rate limit",
    "resource_exhausted",
    "429",
    "too many requests",
)


class GeminiClient:
    """
    Single-attempt Gemini client.

    The SDK call is blocking, so it runs in a worker thread. Failures are
    wrapped in GeminiAPICallError; callers decide whether to fall back.
    """

    def __init__(self, api_key: Optional[str] = None, default_model: Optional[str] = None):
        settings = get_settings()
        self.api_key = api_key if api_key is not None else settings.gemini_api_key
        self.default_model = default_model or settings.gemini_model
        self._client: Optional[genai.Client] = None

    def _get_client(self) -> genai.Client:
        if not self.api_key:
            raise GeminiAPICallError("GEMINI_API_KEY is not configured")
        if self._client is None:
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    @staticmethod
    def _is_quota_error(error: Exception) -> bool:
        error_str = str(error).lower()
        return any(indicator in error_str for indicator in QUOTA_INDICATORS)

    async def generate_content(
        self,
        prompt: str,
        model: Optional[str] = None,
        system_instruction: Optional[str] = None,
        temperature: Optional[float] = None,
        max_output_tokens: Optional[int] = None,
    ) -> str:
        """
        Generate text for a prompt.

        Args:
            prompt: User prompt
            model: Model name (defaults to settings.gemini_model)
            system_instruction: Optional system instruction
            temperature: Sampling temperature
            max_output_tokens: Output token cap

        Returns:
            Generated text, stripped

        Raises:
            GeminiAPICallError: If the key is missing, the call fails or the reply is empty
        """
        client = self._get_client()
        model = model or self.default_model

        config_kwargs = {}
        if temperature is not None:
            config_kwargs["temperature"] = temperature
        if max_output_tokens is not None:
            config_kwargs["max_output_tokens"] = max_output_tokens
        if system_instruction:
            config_kwargs["system_instruction"] = system_instruction
        config = types.GenerateContentConfig(**config_kwargs) if config_kwargs else None

        try:
            response = await asyncio.to_thread(
                client.models.generate_content,
                model=model,
                contents=prompt,
                config=config,
            )
        except Exception as error:
            logger.error(f"Gemini API call failed: {type(error).__name__}: {error}")
            raise GeminiAPICallError(
                message="Gemini API call failed",
                original_error=error,
                is_quota_error=self._is_quota_error(error),
            ) from error

        text = (response.text or "").strip()
        if not text:
            raise GeminiAPICallError("Gemini returned an empty response")
        return text
