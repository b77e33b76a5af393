"""OpenAI chat completions client used for delegated plan generation."""

from typing import Any, Dict, List, Optional

import httpx

from sp.config import get_settings


class OpenAIClient:
    """Client for the OpenAI-compatible chat completions API."""

    def __init__(self, api_key: Optional[str] = None):
        self.settings = get_settings()
        self.api_key = api_key or self.settings.openai_api_key
        self.base_url = self.settings.openai_base.rstrip("/")
        self.model = self.settings.openai_model
        self.timeout = httpx.Timeout(self.settings.openai_timeout)

    async def complete_json(self, prompt: str, system: Optional[str] = None) -> str:
        """Run a single chat completion and return the raw message content.

        The model is asked for a JSON object; parsing is left to the caller.
        """
        messages: List[Dict[str, str]] = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        request: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": self.settings.openai_temperature,
            "response_format": {"type": "json_object"},
        }

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.post(
                f"{self.base_url}/chat/completions",
                json=request,
                headers=self._get_headers(),
            )
            response.raise_for_status()
            data = response.json()

        return data["choices"][0]["message"]["content"]

    def _get_headers(self) -> Dict[str, str]:
        """Get headers for API calls."""
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
