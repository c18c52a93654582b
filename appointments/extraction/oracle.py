"""Extraction oracles: turn document text into JSON matching a schema."""

from __future__ import annotations

import logging
from typing import Protocol

from django.conf import settings
from django.utils.module_loading import import_string
from google import genai
from google.genai import types

from .directive import compose_prompt
from .errors import OracleError

logger = logging.getLogger(__name__)


class ExtractionOracle(Protocol):
    def extract(self, text: str, schema: dict, instructions: str = "") -> str:
        """Return the JSON text of the fields found in ``text``."""


class GeminiOracle:
    """Structured extraction through the Gemini API."""

    def __init__(self, api_key: str | None = None, model: str | None = None, temperature: float | None = None):
        api_key = api_key or settings.GEMINI_API_KEY
        if not api_key:
            raise OracleError("GEMINI_API_KEY is not configured.")
        self.model = model or settings.GEMINI_MODEL
        self.temperature = settings.GEMINI_TEMPERATURE if temperature is None else temperature
        self._client = genai.Client(api_key=api_key)

    def extract(self, text: str, schema: dict, instructions: str = "") -> str:
        config = types.GenerateContentConfig(
            response_mime_type="application/json",
            response_schema=schema,
            temperature=self.temperature,
        )
        try:
            response = self._client.models.generate_content(
                model=self.model,
                contents=compose_prompt(instructions, text),
                config=config,
            )
        except Exception as exc:
            raise OracleError(f"Gemini request failed: {exc}") from exc

        payload = (response.text or "").strip()
        if not payload:
            raise OracleError("Gemini returned an empty response.")
        logger.debug("Gemini answered with %d characters", len(payload))
        return payload


_default_oracle: ExtractionOracle | None = None


def get_oracle() -> ExtractionOracle:
    """Build (once) the oracle named by the EXTRACTION_ORACLE setting."""
    global _default_oracle
    if _default_oracle is None:
        oracle_class = import_string(settings.EXTRACTION_ORACLE)
        _default_oracle = oracle_class()
    return _default_oracle
