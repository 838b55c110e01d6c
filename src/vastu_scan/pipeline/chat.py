"""Follow-up chat about a previously generated report."""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import TYPE_CHECKING, Sequence

from vastu_scan.config import AppConfig, ConfigurationError
from vastu_scan.io.scan_reader import ChatMessage, ScanPayloadError
from vastu_scan.llm_client.prompts import build_chat_system_prompt

if TYPE_CHECKING:
    from vastu_scan.llm_client.responses import LLMClient

logger = logging.getLogger(__name__)

FALLBACK_REPLY = "Sorry, I couldn't process that query."

# Copyright/registered marks, general punctuation through CJK symbol blocks
# (dingbats, arrows, misc symbols) and the U+1F000-U+1FBFF pictograph planes.
_EMOJI_PATTERN = re.compile("[\u00a9\u00ae\u2000-\u3300\U0001F000-\U0001FBFF]")

MAX_KNOWLEDGE_BASE_ENTRIES = 50

# Sample table for local runs; deployments point KNOWLEDGE_BASE_PATH at their own links.
SAMPLE_KNOWLEDGE_BASE: dict[str, str] = {
    "Main entrance": "https://vastu.example.com/guides/main-entrance",
    "Kitchen placement": "https://vastu.example.com/guides/kitchen",
    "Bedroom direction": "https://vastu.example.com/guides/bedroom",
    "Pooja room": "https://vastu.example.com/guides/pooja-room",
    "Toilets and bathrooms": "https://vastu.example.com/guides/toilets",
    "Brahmasthan (centre)": "https://vastu.example.com/guides/brahmasthan",
    "Colour remedies": "https://vastu.example.com/guides/colours",
    "Cusp zones": "https://vastu.example.com/guides/cusp-zones",
    "Book a consultation": "https://vastu.example.com/consultation",
}


def strip_emojis(text: str | None) -> str:
    if not text:
        return ""
    return _EMOJI_PATTERN.sub("", text)


def sanitize_history(history: Sequence[ChatMessage]) -> list[ChatMessage]:
    return [
        ChatMessage(role=m.role, text=strip_emojis(m.text)) if m.role == "user" else m
        for m in history
    ]


def load_knowledge_base(path: str | Path) -> dict[str, str]:
    """Read a JSON object of topic -> link. Anything else is a configuration error."""
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise ConfigurationError(f"Could not read knowledge base {path}: {exc}") from exc

    if not isinstance(data, dict) or not data:
        raise ConfigurationError(f"Knowledge base {path} must be a non-empty JSON object")
    if len(data) > MAX_KNOWLEDGE_BASE_ENTRIES:
        raise ConfigurationError(
            f"Knowledge base {path} has {len(data)} entries (max {MAX_KNOWLEDGE_BASE_ENTRIES})"
        )
    if not all(isinstance(k, str) and isinstance(v, str) and v for k, v in data.items()):
        raise ConfigurationError(f"Knowledge base {path} must map topic names to link strings")
    return data


class ChatHandler:
    def __init__(self, config: AppConfig, client: LLMClient) -> None:
        self._config = config
        self._client = client
        if config.knowledge_base_path:
            self.knowledge_base = load_knowledge_base(config.knowledge_base_path)
        else:
            self.knowledge_base = SAMPLE_KNOWLEDGE_BASE

    def build_system_instruction(self, summary: str | None) -> str:
        bounded = str(summary or "")[: self._config.chat_summary_max_chars]
        return build_chat_system_prompt(bounded, self.knowledge_base)

    def reply(self, history: Sequence[ChatMessage], summary: str | None) -> str:
        if not history:
            raise ScanPayloadError("chatHistory must contain at least one message")

        sanitized = sanitize_history(history)
        logger.info("Answering chat turn (%d messages)", len(sanitized))
        output = self._client.converse(
            sanitized,
            timeout=self._config.chat_timeout_seconds,
            system_instruction=self.build_system_instruction(summary),
        )
        return output or FALLBACK_REPLY
