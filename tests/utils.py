# tests/utils.py
from __future__ import annotations

from vastu_scan.pipeline.zones import CANONICAL_ZONE_ORDER


class FakeClient:
    """In-memory LLMClient. Each queued item is returned in turn, or raised if it is an exception."""

    def __init__(self, responses=None):
        self.responses = list(responses or [])
        self.calls = []
        self.chat_calls = []

    def _next(self):
        if not self.responses:
            raise AssertionError("FakeClient received an unexpected call")
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def generate(self, parts, *, timeout, system_instruction=None):
        self.calls.append(
            {"parts": list(parts), "timeout": timeout, "system_instruction": system_instruction}
        )
        return self._next()

    def converse(self, history, *, timeout, system_instruction=None):
        self.chat_calls.append(
            {"history": list(history), "timeout": timeout, "system_instruction": system_instruction}
        )
        return self._next()


def numbered_assessment(count: int = len(CANONICAL_ZONE_ORDER)) -> str:
    return "\n".join(
        f"{i}. {zone}: cluttered corner. Defect: blocked {zone} energy."
        for i, zone in enumerate(CANONICAL_ZONE_ORDER[:count], start=1)
    )
