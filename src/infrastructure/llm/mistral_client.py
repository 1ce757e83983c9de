import logging
from typing import List

from src.application.errors import GenerationError
from src.application.ports import GenerationPort
from src.infrastructure.config import Settings


logger = logging.getLogger(__name__)


class MistralLLMAdapter(GenerationPort):
    def __init__(self, settings: Settings | None = None):
        self.settings = settings or Settings()
        self._client = None
        self._model = self.settings.mistral_model
        self._temperature = self.settings.generation_temperature
        self._timeout_ms = int(self.settings.generation_timeout_seconds * 1000)
        self._init_client()

    def _init_client(self):
        api_key = self.settings.mistral_api_key
        if not api_key:
            logger.error("Mistral API key is missing.")
            self._client = None
            return
        try:
            from mistralai import Mistral
            self._client = Mistral(api_key=api_key, timeout_ms=self._timeout_ms)
        except Exception as e:
            logger.exception("Failed to initialize Mistral client: %s", e)
            self._client = None

    @property
    def available(self) -> bool:
        return self._client is not None

    def generate_assessment_json(self, messages: List[dict]) -> str:
        if not self._client:
            raise GenerationError("Mistral client not initialized (missing API key or import error)")
        try:
            response = self._client.chat.complete(
                model=self._model,
                messages=messages,
                temperature=self._temperature,
                response_format={"type": "json_object"},
                timeout_ms=self._timeout_ms,
            )
        except Exception as e:
            logger.exception("Mistral chat call failed: %s", e)
            raise GenerationError(f"Mistral chat call failed: {e}") from e

        if not response or not response.choices:
            raise GenerationError("Mistral returned no choices")
        content = response.choices[0].message.content
        if isinstance(content, list):
            # Chunked content: keep the text parts
            content = "".join(getattr(chunk, "text", "") or "" for chunk in content)
        if not content:
            raise GenerationError("Mistral returned empty content")
        return content
