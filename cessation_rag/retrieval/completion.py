"""
Text-completion service backed by Google Gemini.

The service is stateless apart from one client per API key; credential
selection belongs to the caller (see CredentialPool).
"""

import logging
from typing import Optional, Protocol

from google import genai
from google.genai import types
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash"


class TextCompletionService(Protocol):
    def complete(self, prompt: str, api_key: str) -> str:
        """Return the completion text for ``prompt`` using ``api_key``."""
        ...


class GeminiCompletionService:
    """Gemini text completion with a fixed model and system instruction."""

    def __init__(self, model_id: str = DEFAULT_MODEL, system_instruction: Optional[str] = None):
        self.model_id = model_id
        self.system_instruction = system_instruction
        self._clients: dict[str, genai.Client] = {}

    def _client(self, api_key: str) -> genai.Client:
        if api_key not in self._clients:
            self._clients[api_key] = genai.Client(api_key=api_key)
        return self._clients[api_key]

    def complete(self, prompt: str, api_key: str) -> str:
        config = None
        if self.system_instruction:
            config = types.GenerateContentConfig(system_instruction=self.system_instruction)

        response = self._client(api_key).models.generate_content(
            model=self.model_id,
            contents=prompt,
            config=config,
        )
        return response.text or ""
