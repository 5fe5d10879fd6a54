"""
Gemini Client
--------------
Single request/response round trip to Google Gemini. The key and model are
read from Settings on every call. Any failure surfaces as one error; there
are no retries and no partial results.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

import google.generativeai as genai

from prd_automation.config import Settings
from prd_automation.exceptions import ConfigurationError, RemoteAnalysisError

logger = logging.getLogger(__name__)

ModelFactory = Callable[[str, str], object]


@dataclass
class RemoteOutcome:
    """Result of one remote attempt: either ``value`` or ``error`` is set."""
    value: Any = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def attempt(call: Callable[..., Any], *args) -> RemoteOutcome:
    """Run a remote-backed call, turning the recoverable errors into an outcome."""
    try:
        return RemoteOutcome(value=call(*args))
    except (ConfigurationError, RemoteAnalysisError) as exc:
        return RemoteOutcome(error=exc)


def gemini_model_factory(model_name: str, system_instruction: str):
    return genai.GenerativeModel(
        model_name=model_name,
        system_instruction=system_instruction,
    )


class GeminiClient:

    def __init__(self, settings: Settings, model_factory: Optional[ModelFactory] = None):
        self._settings = settings
        self._model_factory = model_factory or gemini_model_factory

    def complete(self, system_instruction: str, prompt: str) -> str:
        """Return the model's text reply or raise."""
        api_key = self._settings.api_key
        if not api_key:
            raise ConfigurationError("Gemini API key not configured. Set GEMINI_API_KEY or provide one at runtime.")

        model_name = self._settings.model
        logger.debug("Calling %s (%d prompt chars)", model_name, len(prompt))
        try:
            genai.configure(api_key=api_key)
            model = self._model_factory(model_name, system_instruction)
            return model.generate_content(prompt).text.strip()
        except Exception as exc:
            raise RemoteAnalysisError(f"Gemini request failed: {exc}") from exc
