"""Deterministic translation provider for tests."""

import asyncio

import pytest

from app.exceptions import TranslationFailed

KNOWN = {
    ("Hello", "es"): "Hola",
    ("Hello", "fr"): "Bonjour",
    ("Hello", "de"): "Hallo",
    ("Hola", "en"): "Hello",
    ("Bonjour", "en"): "Hello",
}


class FakeTranslationProvider:
    def __init__(self):
        self.calls = []
        self.fail_for = set()
        self.delay_for = {}

    async def translate(self, text, source_language, target_language):
        self.calls.append((text, source_language, target_language))
        if target_language in self.delay_for:
            await asyncio.sleep(self.delay_for[target_language])
        if target_language in self.fail_for:
            raise TranslationFailed(f"provider down for {target_language}")
        return KNOWN.get((text, target_language), f"[{target_language}] {text}")


@pytest.fixture
def fake_provider():
    return FakeTranslationProvider()
