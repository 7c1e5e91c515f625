# tests/test_engine.py

import asyncio
from types import SimpleNamespace

from proofing.engine import LanguageToolEngine, NullEngine, build_engine, run_engine
from proofing.errors import EngineUnavailable
from proofing.models import Category, Source
from proofing.policy import EngineSettings, Settings


def _match(offset, length, category="TYPOS", replacements=("writing",), rule_id="MORFOLOGIK_RULE_EN_US"):
    return SimpleNamespace(
        offset=offset,
        errorLength=length,
        category=category,
        replacements=list(replacements),
        ruleId=rule_id,
        message="Possible spelling mistake found.",
    )


def test_matches_become_engine_lints():
    text = "I like writting code"
    engine = LanguageToolEngine(max_suggestions=2)
    lints = engine.to_lints(text, [_match(7, 8, replacements=("writing", "waiting", "whiting"))])

    assert len(lints) == 1
    lint = lints[0]
    assert lint.problem_text == "writting"
    assert lint.kind == "Spelling"
    assert lint.category is Category.SPELLING
    assert lint.source is Source.ENGINE
    assert lint.rule_id == "MORFOLOGIK_RULE_EN_US"
    assert [s.text for s in lint.suggestions] == ["writing", "waiting"]


def test_category_mapping():
    text = "some text here"
    engine = LanguageToolEngine()
    lints = engine.to_lints(
        text,
        [
            _match(0, 4, category="GRAMMAR"),
            _match(5, 4, category="CONFUSED_WORDS"),
            _match(10, 4, category="SOMETHING_NEW"),
        ],
    )
    assert [l.kind for l in lints] == ["Grammar", "WordChoice", "Miscellaneous"]
    assert [l.category for l in lints] == [Category.GRAMMAR, Category.STYLE, Category.GRAMMAR]


def test_zero_length_and_out_of_range_matches_skipped():
    engine = LanguageToolEngine()
    assert engine.to_lints("abc", [_match(1, 0), _match(2, 5)]) == []


def test_library_failure_becomes_engine_unavailable(monkeypatch):
    engine = LanguageToolEngine()

    def broken(text):
        raise RuntimeError("java not found")

    monkeypatch.setattr(engine, "_check", broken)
    try:
        asyncio.run(engine.lint("text"))
    except EngineUnavailable as exc:
        assert "java not found" in str(exc)
    else:
        raise AssertionError("expected EngineUnavailable")


def test_bad_match_data_becomes_engine_unavailable(monkeypatch):
    engine = LanguageToolEngine()
    monkeypatch.setattr(engine, "_check", lambda text: [SimpleNamespace(offset="not a number", errorLength=2)])
    try:
        asyncio.run(engine.lint("text"))
    except EngineUnavailable:
        pass
    else:
        raise AssertionError("expected EngineUnavailable")


class _FailingEngine:
    async def lint(self, text):
        raise EngineUnavailable("down")


class _CrashingEngine:
    async def lint(self, text):
        raise RuntimeError("backend crashed")


class _SlowEngine:
    async def lint(self, text):
        await asyncio.sleep(5)
        return []


def test_run_engine_degrades_to_empty(caplog):
    assert asyncio.run(run_engine(_FailingEngine(), "text", timeout=1)) == []
    assert "unavailable" in caplog.text


def test_run_engine_contains_unexpected_errors(caplog):
    assert asyncio.run(run_engine(_CrashingEngine(), "text", timeout=1)) == []
    assert "Grammar engine failed" in caplog.text
    assert "backend crashed" in caplog.text


def test_run_engine_times_out():
    assert asyncio.run(run_engine(_SlowEngine(), "text", timeout=0.01)) == []


def test_null_engine():
    assert asyncio.run(NullEngine().lint("anything")) == []


def test_build_engine_from_settings():
    assert isinstance(build_engine(Settings(engine=EngineSettings(backend="none"))), NullEngine)
    engine = build_engine(Settings(engine=EngineSettings(language="en-GB", max_suggestions=3)))
    assert isinstance(engine, LanguageToolEngine)
    assert engine.language == "en-GB"
    assert engine.max_suggestions == 3
