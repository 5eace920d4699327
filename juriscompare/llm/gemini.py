from __future__ import annotations
import google.generativeai as genai
import logging
from typing import Any, List
from juriscompare.utils.config import AppConfig
from juriscompare.utils.errors import ConfigError

logger = logging.getLogger(__name__)


class GeminiClient:
    """Single-attempt wrapper over google-generativeai.

    Failures propagate unchanged; callers classify them.
    """

    def __init__(self, config: AppConfig):
        if not config.api_key:
            raise ConfigError("GOOGLE_API_KEY not set")
        genai.configure(api_key=config.api_key)
        self.config = config

    def generate_json(self, parts: List[Any], schema: Any) -> str:
        model = genai.GenerativeModel(self.config.analysis_model)
        logger.debug("Structured request to %s with %d parts", self.config.analysis_model, len(parts))
        rsp = model.generate_content(
            parts,
            generation_config={
                "temperature": self.config.temperature,
                "max_output_tokens": self.config.max_tokens,
                "response_mime_type": "application/json",
                "response_schema": schema,
            },
        )
        try:
            return rsp.text
        except ValueError as e:
            # blocked or empty candidate (safety, recitation)
            logger.warning("Model returned no usable content: %s", e)
            return ""

    def start_chat(self, system_instruction: str) -> "GeminiChat":
        model = genai.GenerativeModel(
            self.config.chat_model,
            system_instruction=system_instruction,
            generation_config={"temperature": self.config.temperature},
        )
        return GeminiChat(model.start_chat(history=[]))


class GeminiChat:
    def __init__(self, session):
        self._session = session

    def send(self, message: str) -> str:
        rsp = self._session.send_message(message)
        return rsp.text
