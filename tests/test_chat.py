# tests/test_chat.py
import json
from dataclasses import replace

import pytest

from vastu_scan.config import ConfigurationError
from vastu_scan.io.scan_reader import ChatMessage, ScanPayloadError
from vastu_scan.llm_client.responses import UpstreamError
from vastu_scan.pipeline.chat import (
    FALLBACK_REPLY,
    SAMPLE_KNOWLEDGE_BASE,
    ChatHandler,
    load_knowledge_base,
    sanitize_history,
    strip_emojis,
)


@pytest.mark.parametrize(
    "text,expected",
    [
        ("Is my kitchen fine? \U0001F642", "Is my kitchen fine? "),
        ("©2024 ® brand", "2024  brand"),
        ("stars ✨ and arrows →", "stars  and arrows "),
        ("rocket \U0001F680 house \U0001F3E0", "rocket  house "),
        ("plain text 45°", "plain text 45°"),
        ("", ""),
        (None, ""),
    ],
)
def test_strip_emojis(text, expected):
    assert strip_emojis(text) == expected


def test_only_user_turns_are_sanitized():
    model_turn = ChatMessage(role="model", text="Great choice \U0001F44D")
    history = [ChatMessage(role="user", text="Thanks \U0001F64F"), model_turn]

    sanitized = sanitize_history(history)

    assert sanitized[0] == ChatMessage(role="user", text="Thanks ")
    assert sanitized[1] is model_turn


def test_reply_forwards_sanitized_history_and_system_prompt(config, fake_client_factory):
    client = fake_client_factory("Place the stove in the SE.")
    handler = ChatHandler(config, client)

    reply = handler.reply([ChatMessage("user", "Where should the stove go? \U0001F525")], "NE kitchen")

    assert reply == "Place the stove in the SE."
    call = client.chat_calls[0]
    assert call["history"] == [ChatMessage("user", "Where should the stove go? ")]
    assert call["timeout"] == config.chat_timeout_seconds
    assert "NE kitchen" in call["system_instruction"]
    for url in SAMPLE_KNOWLEDGE_BASE.values():
        assert url in call["system_instruction"]


def test_summary_is_bounded(config, fake_client_factory):
    handler = ChatHandler(replace(config, chat_summary_max_chars=10), fake_client_factory())
    instruction = handler.build_system_instruction("x" * 50)
    assert "x" * 10 in instruction
    assert "x" * 11 not in instruction


def test_empty_reply_uses_fallback(config, fake_client_factory):
    handler = ChatHandler(config, fake_client_factory(None))
    assert handler.reply([ChatMessage("user", "hi")], "") == FALLBACK_REPLY


def test_empty_history_is_rejected(config, fake_client_factory):
    client = fake_client_factory()
    with pytest.raises(ScanPayloadError):
        ChatHandler(config, client).reply([], "summary")
    assert client.chat_calls == []


def test_upstream_failure_propagates(config, fake_client_factory):
    handler = ChatHandler(config, fake_client_factory(UpstreamError("boom", status_code=500)))
    with pytest.raises(UpstreamError):
        handler.reply([ChatMessage("user", "hi")], "summary")


def test_knowledge_base_file_replaces_sample_links(config, fake_client_factory, tmp_path):
    path = tmp_path / "links.json"
    path.write_text(json.dumps({"Kitchen placement": "https://vastu.test/kitchen"}), encoding="utf-8")
    handler = ChatHandler(replace(config, knowledge_base_path=str(path)), fake_client_factory())

    instruction = handler.build_system_instruction("summary")

    assert "- Kitchen placement: https://vastu.test/kitchen" in instruction
    assert "vastu.example.com" not in instruction


@pytest.mark.parametrize(
    "content",
    ["not json", "[]", "{}", json.dumps({"Topic": 5}), json.dumps({f"t{i}": "u" for i in range(51)})],
)
def test_invalid_knowledge_base_is_configuration_error(tmp_path, content):
    path = tmp_path / "links.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_knowledge_base(path)


def test_missing_knowledge_base_file_is_configuration_error(tmp_path):
    with pytest.raises(ConfigurationError):
        load_knowledge_base(tmp_path / "absent.json")
