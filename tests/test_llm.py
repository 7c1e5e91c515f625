# tests/test_llm.py

import asyncio
from types import SimpleNamespace

import pytest

from proofing import llm
from proofing.errors import AIUnavailable
from proofing.llm import PROOFREAD_PROMPT, LiteLLMRewriter, build_messages


def _response(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def test_rewriter_sends_proofreading_prompt(monkeypatch):
    calls = []

    async def fake_acompletion(**kwargs):
        calls.append(kwargs)
        return _response("He and I went home.")

    monkeypatch.setattr(llm, "_acompletion", fake_acompletion)
    rewriter = LiteLLMRewriter("openai/gpt-4o-mini", timeout=5)
    result = asyncio.run(rewriter("him and me went home", None))

    assert result == "He and I went home."
    assert calls[0]["model"] == "openai/gpt-4o-mini"
    assert calls[0]["timeout"] == 5
    assert calls[0]["messages"][0] == {"role": "system", "content": PROOFREAD_PROMPT}
    assert calls[0]["messages"][1]["content"].endswith("him and me went home")


def test_rewriter_uses_tone_prompt(monkeypatch):
    calls = []

    async def fake_acompletion(**kwargs):
        calls.append(kwargs)
        return _response("Hey, what's up?")

    monkeypatch.setattr(llm, "_acompletion", fake_acompletion)
    asyncio.run(LiteLLMRewriter("m")("Hello, how are you?", "casual"))
    assert "casual" in calls[0]["messages"][0]["content"]
    assert calls[0]["messages"][1]["content"] == "Hello, how are you?"


def test_rewriter_failure_is_ai_unavailable(monkeypatch):
    async def fake_acompletion(**kwargs):
        raise ConnectionError("no route to host")

    monkeypatch.setattr(llm, "_acompletion", fake_acompletion)
    with pytest.raises(AIUnavailable):
        asyncio.run(LiteLLMRewriter("m")("text", None))


def test_empty_content_is_none(monkeypatch):
    async def fake_acompletion(**kwargs):
        return _response(None)

    monkeypatch.setattr(llm, "_acompletion", fake_acompletion)
    assert asyncio.run(LiteLLMRewriter("m")("text", None)) is None


def test_unknown_tone_rejected():
    with pytest.raises(ValueError):
        build_messages("text", "sarcastic")
