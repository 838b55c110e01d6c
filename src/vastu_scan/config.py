"""Configuration loading for the Vastu scan service."""

from __future__ import annotations

import os
from dataclasses import dataclass
from dotenv import load_dotenv

REPORT_ASSEMBLY_MODES = ("embedded", "stitched")


class ConfigurationError(RuntimeError):
    """Raised when the service cannot reach the model (e.g. no API key)."""


@dataclass(frozen=True)
class AppConfig:
    llm_provider: str = "google"
    google_api_key: str | None = None
    openai_api_key: str | None = None
    google_model: str = "gemini-2.5-flash"
    openai_model: str = "gpt-4o-mini"
    stage1_timeout_seconds: float = 600.0
    stage2_timeout_seconds: float = 180.0
    chat_timeout_seconds: float = 60.0
    cusp_margin_degrees: float = 10.0
    report_assembly: str = "embedded"
    chat_summary_max_chars: int = 8000
    knowledge_base_path: str | None = None
    port: int = 3000

    @property
    def api_key(self) -> str | None:
        if self.llm_provider == "openai":
            return self.openai_api_key
        return self.google_api_key

    @property
    def model_name(self) -> str:
        if self.llm_provider == "openai":
            return self.openai_model
        return self.google_model

    def require_api_key(self) -> str:
        if not self.api_key:
            raise ConfigurationError("Server API Key is not configured.")
        return self.api_key


def load_config() -> AppConfig:
    # override=True ensures the .env file takes precedence over stale shell variables
    load_dotenv(override=True)

    provider = os.getenv("LLM_PROVIDER", "google").lower()
    if provider not in ("google", "openai"):
        raise ValueError(f"Unsupported LLM_PROVIDER: {provider!r}")

    assembly = os.getenv("REPORT_ASSEMBLY", "embedded").lower()
    if assembly not in REPORT_ASSEMBLY_MODES:
        raise ValueError(f"REPORT_ASSEMBLY must be one of: {', '.join(REPORT_ASSEMBLY_MODES)}")

    # Keys are not validated here; a missing key surfaces as ConfigurationError per request.
    return AppConfig(
        llm_provider=provider,
        google_api_key=os.getenv("GOOGLE_API_KEY") or os.getenv("GEMINI_API_KEY"),
        openai_api_key=os.getenv("OPENAI_API_KEY"),
        google_model=os.getenv("GOOGLE_MODEL", "gemini-2.5-flash"),
        openai_model=os.getenv("OPENAI_MODEL", "gpt-4o-mini"),
        stage1_timeout_seconds=float(os.getenv("STAGE1_TIMEOUT_SECONDS", "600")),
        stage2_timeout_seconds=float(os.getenv("STAGE2_TIMEOUT_SECONDS", "180")),
        chat_timeout_seconds=float(os.getenv("CHAT_TIMEOUT_SECONDS", "60")),
        cusp_margin_degrees=float(os.getenv("CUSP_MARGIN_DEGREES", "10")),
        report_assembly=assembly,
        chat_summary_max_chars=int(os.getenv("CHAT_SUMMARY_MAX_CHARS", "8000")),
        knowledge_base_path=os.getenv("KNOWLEDGE_BASE_PATH") or None,
        port=int(os.getenv("PORT", "3000")),
    )
