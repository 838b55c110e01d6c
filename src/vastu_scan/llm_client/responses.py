"""Gemini and OpenAI backends for the report and chat pipelines."""

from __future__ import annotations

import logging
from typing import Any, Protocol, Sequence

import google.generativeai as genai
from openai import OpenAI

from vastu_scan.config import AppConfig
from vastu_scan.io.scan_reader import ChatMessage
from vastu_scan.llm_client.schemas import ContentPart, ImagePart, TextPart, safety_settings


class UpstreamError(RuntimeError):
    """A model call failed: transport error, timeout or non-success status."""

    def __init__(
        self,
        detail: str,
        *,
        status_code: int | None = None,
        provider: str = "Google",
        stage: str | None = None,
    ) -> None:
        self.detail = detail
        self.status_code = status_code
        self.provider = provider
        self.stage = stage
        super().__init__(str(self))

    def with_stage(self, stage: str) -> "UpstreamError":
        return UpstreamError(
            self.detail, status_code=self.status_code, provider=self.provider, stage=stage
        )

    def __str__(self) -> str:
        label = f"{self.provider} API Error"
        if self.stage:
            label += f" ({self.stage})"
        status = self.status_code if self.status_code is not None else "no status"
        return f"{label}: {status} - {self.detail}"


class LLMClient(Protocol):
    """Interface for LLM clients."""
    def generate(
        self,
        parts: Sequence[ContentPart],
        *,
        timeout: float,
        system_instruction: str | None = None,
    ) -> str | None: ...

    def converse(
        self,
        history: Sequence[ChatMessage],
        *,
        timeout: float,
        system_instruction: str | None = None,
    ) -> str | None: ...


def _status_code(exc: Exception) -> int | None:
    for attr in ("status_code", "code"):
        value = getattr(exc, attr, None)
        if value is None or callable(value):
            continue
        try:
            return int(value)
        except (TypeError, ValueError):
            continue
    return None


class GeminiBackend:
    """Client for Google's Gemini API."""
    def __init__(self, config: AppConfig) -> None:
        genai.configure(api_key=config.require_api_key())
        self._model_name = config.google_model
        self._logger = logging.getLogger("GeminiBackend")

    def _first_candidate_text(self, response: Any) -> str | None:
        candidates = getattr(response, "candidates", None) or []
        if not candidates:
            return None
        content = getattr(candidates[0], "content", None)
        parts = getattr(content, "parts", None) or []
        if not parts:
            return None
        return getattr(parts[0], "text", None) or None

    def _to_gemini_part(self, part: ContentPart) -> Any:
        if isinstance(part, ImagePart):
            return {"mime_type": part.mime_type, "data": part.data}
        return part.text

    def _call(self, contents: Any, *, timeout: float, system_instruction: str | None) -> str | None:
        model = genai.GenerativeModel(
            self._model_name,
            system_instruction=system_instruction,
            safety_settings=safety_settings(),
        )
        try:
            response = model.generate_content(contents, request_options={"timeout": timeout})
        except Exception as exc:  # noqa: BLE001 - every upstream failure collapses to UpstreamError
            self._logger.error("Gemini call failed: %s", exc)
            raise UpstreamError(str(exc), status_code=_status_code(exc), provider="Google") from exc
        return self._first_candidate_text(response)

    def generate(
        self,
        parts: Sequence[ContentPart],
        *,
        timeout: float,
        system_instruction: str | None = None,
    ) -> str | None:
        contents = [{"role": "user", "parts": [self._to_gemini_part(p) for p in parts]}]
        return self._call(contents, timeout=timeout, system_instruction=system_instruction)

    def converse(
        self,
        history: Sequence[ChatMessage],
        *,
        timeout: float,
        system_instruction: str | None = None,
    ) -> str | None:
        contents = [{"role": message.role, "parts": [message.text]} for message in history]
        return self._call(contents, timeout=timeout, system_instruction=system_instruction)


class OpenAIBackend:
    """Client for OpenAI's Chat Completions API."""
    def __init__(self, config: AppConfig) -> None:
        self._client = OpenAI(api_key=config.require_api_key())
        self._model = config.openai_model
        self._logger = logging.getLogger(self.__class__.__name__)

    def _to_openai_part(self, part: ContentPart) -> dict:
        if isinstance(part, ImagePart):
            return {"type": "image_url", "image_url": {"url": part.to_data_url()}}
        return {"type": "text", "text": part.text}

    def _call(self, messages: list[dict], *, timeout: float, system_instruction: str | None) -> str | None:
        if system_instruction:
            messages = [{"role": "system", "content": system_instruction}, *messages]
        try:
            response = self._client.chat.completions.create(
                model=self._model,
                messages=messages,
                timeout=timeout,
            )
        except Exception as exc:  # noqa: BLE001 - every upstream failure collapses to UpstreamError
            self._logger.error("OpenAI call failed: %s", exc)
            raise UpstreamError(str(exc), status_code=_status_code(exc), provider="OpenAI") from exc

        if not response.choices:
            return None
        return response.choices[0].message.content or None

    def generate(
        self,
        parts: Sequence[ContentPart],
        *,
        timeout: float,
        system_instruction: str | None = None,
    ) -> str | None:
        messages = [{"role": "user", "content": [self._to_openai_part(p) for p in parts]}]
        return self._call(messages, timeout=timeout, system_instruction=system_instruction)

    def converse(
        self,
        history: Sequence[ChatMessage],
        *,
        timeout: float,
        system_instruction: str | None = None,
    ) -> str | None:
        messages = [
            {"role": "assistant" if m.role == "model" else "user", "content": m.text}
            for m in history
        ]
        return self._call(messages, timeout=timeout, system_instruction=system_instruction)


def create_client(config: AppConfig) -> LLMClient:
    """Factory to create the appropriate LLM client."""
    # Raises ConfigurationError before any network use when the key is missing.
    config.require_api_key()

    if config.llm_provider == "openai":
        return OpenAIBackend(config)
    return GeminiBackend(config)
