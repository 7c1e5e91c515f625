# proofing/policy.py

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Dict, List

import yaml

ENGINE_BACKENDS = ("languagetool", "none")
MIN_DEBOUNCE_MS = 250


@dataclass
class LintingSettings:
    debounce_ms: int = 300
    cache_capacity: int = 50
    min_text_length: int = 2
    engine_timeout_s: float = 10.0


@dataclass
class EngineSettings:
    backend: str = "languagetool"
    language: str = "en-US"
    max_suggestions: int = 5


@dataclass
class AISettings:
    enabled: bool = False
    model: str | None = None
    timeout_s: float = 30.0


@dataclass
class Settings:
    linting: LintingSettings = field(default_factory=LintingSettings)
    engine: EngineSettings = field(default_factory=EngineSettings)
    ai: AISettings = field(default_factory=AISettings)
    relocate_window: int = 64
    enabled_by_default: bool = True
    disabled_rules: List[str] = field(default_factory=list)
    custom_rules: List[Dict[str, Any]] = field(default_factory=list)
    misspellings_path: str | None = None

    def __post_init__(self):
        if self.linting.debounce_ms < MIN_DEBOUNCE_MS:
            raise ValueError(
                f"linting.debounce_ms must be >= {MIN_DEBOUNCE_MS}, "
                f"got {self.linting.debounce_ms}"
            )
        if self.linting.cache_capacity < 1:
            raise ValueError("linting.cache_capacity must be >= 1")
        if self.relocate_window < 0:
            raise ValueError("fixes.relocate_window must be >= 0")
        if self.engine.backend not in ENGINE_BACKENDS:
            raise ValueError(
                f"engine.backend must be one of {ENGINE_BACKENDS}, "
                f"got {self.engine.backend!r}"
            )

    @classmethod
    def default(cls) -> "Settings":
        return cls()


def load_settings(path: str) -> Settings:
    with open(path, "r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f) or {}

    lint_cfg = cfg.get("linting", {}) or {}
    engine_cfg = cfg.get("engine", {}) or {}
    ai_cfg = cfg.get("ai", {}) or {}
    fixes_cfg = cfg.get("fixes", {}) or {}
    sessions_cfg = cfg.get("sessions", {}) or {}
    rules_cfg = cfg.get("rules", {}) or {}

    misspellings = cfg.get("misspellings")
    if misspellings and not os.path.isabs(misspellings):
        misspellings = os.path.join(os.path.dirname(os.path.abspath(path)), misspellings)

    return Settings(
        linting=LintingSettings(
            debounce_ms=int(lint_cfg.get("debounce_ms", 300)),
            cache_capacity=int(lint_cfg.get("cache_capacity", 50)),
            min_text_length=int(lint_cfg.get("min_text_length", 2)),
            engine_timeout_s=float(lint_cfg.get("engine_timeout_s", 10)),
        ),
        engine=EngineSettings(
            backend=str(engine_cfg.get("backend", "languagetool")),
            language=str(engine_cfg.get("language", "en-US")),
            max_suggestions=int(engine_cfg.get("max_suggestions", 5)),
        ),
        ai=AISettings(
            enabled=bool(ai_cfg.get("enabled", False)),
            model=ai_cfg.get("model"),
            timeout_s=float(ai_cfg.get("timeout_s", 30)),
        ),
        relocate_window=int(fixes_cfg.get("relocate_window", 64)),
        enabled_by_default=bool(sessions_cfg.get("enabled_by_default", True)),
        disabled_rules=list(rules_cfg.get("disabled", []) or []),
        custom_rules=list(rules_cfg.get("custom", []) or []),
        misspellings_path=misspellings,
    )


def load_misspellings(path: str | None) -> Dict[str, str]:
    """Flat `wrong: right` mapping; keys are lower-cased."""
    if not path:
        return {}
    with open(path, "r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f) or {}
    return {str(k).lower(): str(v) for k, v in cfg.items()}
