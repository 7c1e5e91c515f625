# proofing/pipeline.py

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Dict, List, Optional, Sequence, Tuple

from proofing.detect_clauses import ClauseBoundaryDetector
from proofing.detect_rules import RuleEngine
from proofing.engine import GrammarEngine, build_engine, run_engine
from proofing.errors import AIUnavailable, MalformedRule, StaleResult
from proofing.models import Lint
from proofing.policy import MIN_DEBOUNCE_MS, Settings, load_misspellings
from proofing.postprocess import fix_engine_suggestions
from proofing.resolve import LintAggregator, merge_lints, splice_lints
from proofing.reviewer import AIReviewer, RewriteResult, build_reviewer
from proofing.rules import Rule, rule_table
from proofing.session import LintCache, SessionStore
from proofing.spans import SpanSet

logger = logging.getLogger(__name__)


def _log_malformed(exc: MalformedRule) -> None:
    logger.warning("Skipping malformed rule %s: %s", exc.rule_id, exc.cause)


class LintPipeline:
    """
    Two-phase lint computation for one text snapshot.

    The fast pass combines engine output, pattern rules and clause detection.
    The slow pass asks the AI reviewer and splices its lints into a fast-pass
    result without recomputing it.
    """

    def __init__(
        self,
        settings: Settings,
        engine: GrammarEngine,
        reviewer: AIReviewer,
        rules: Optional[Sequence[Rule]] = None,
        misspellings: Optional[Dict[str, str]] = None,
        cache: Optional[LintCache] = None,
    ):
        self.settings = settings
        self.engine = engine
        self.reviewer = reviewer
        self.rule_engine = RuleEngine(rules if rules is not None else rule_table(settings))
        self.clauses = ClauseBoundaryDetector()
        self.misspellings = misspellings or {}
        self.cache = cache if cache is not None else LintCache(settings.linting.cache_capacity)

    @classmethod
    def from_settings(cls, settings: Settings) -> "LintPipeline":
        return cls(
            settings,
            engine=build_engine(settings),
            reviewer=build_reviewer(settings),
            misspellings=load_misspellings(settings.misspellings_path),
        )

    async def lint(self, text: str) -> List[Lint]:
        if len(text.strip()) < self.settings.linting.min_text_length:
            return []

        cached = self.cache.get(text)
        if cached is not None:
            return cached

        engine_lints = await run_engine(
            self.engine, text, self.settings.linting.engine_timeout_s
        )
        engine_lints = fix_engine_suggestions(engine_lints, self.misspellings)

        # one occupied set per pass, seeded with what the engine claimed
        occupied = SpanSet((l.span.start, l.span.end) for l in engine_lints)
        pattern_lints = self.rule_engine.evaluate(text, occupied, on_error=_log_malformed)
        pattern_lints += self.clauses.detect(text, occupied)

        lints = merge_lints(engine_lints, pattern_lints)
        self.cache.put(text, lints)
        return lints

    async def proofread(self, text: str) -> Optional[List[Lint]]:
        """AI lints for `text`, or None when no reviewer is available."""
        try:
            result = await self.reviewer.proofread(text)
        except AIUnavailable as exc:
            logger.debug("AI reviewer unavailable: %s", exc)
            return None
        if not result.available:
            logger.debug("AI reviewer unavailable")
            return None
        return result.lints

    async def review(self, text: str, accepted: List[Lint]) -> Optional[List[Lint]]:
        ai_lints = await self.proofread(text)
        if ai_lints is None:
            return None
        return splice_lints(accepted, ai_lints)

    async def improve(self, text: str, tone: Optional[str] = None) -> RewriteResult:
        try:
            return await self.reviewer.improve(text, tone)
        except AIUnavailable as exc:
            logger.debug("AI rewrite unavailable: %s", exc)
            return RewriteResult(available=False)


class LintService:
    """
    Debounced, per-session front for the pipeline.

    Each session has at most one pending fast pass; a new submission
    replaces it. Fast-pass results are published immediately, and AI
    requests travel over a queue to a single background worker so they
    never hold up the fast pass.
    """

    def __init__(
        self,
        pipeline: LintPipeline,
        store: SessionStore,
        aggregator: LintAggregator,
        debounce_ms: int = 300,
    ):
        if debounce_ms < MIN_DEBOUNCE_MS:
            raise ValueError(f"debounce_ms must be >= {MIN_DEBOUNCE_MS}, got {debounce_ms}")
        self.pipeline = pipeline
        self.store = store
        self.aggregator = aggregator
        self.debounce_ms = debounce_ms
        self._pending: Dict[str, asyncio.Task] = {}
        self._queue: "asyncio.Queue[Tuple[str, str]]" = asyncio.Queue()
        self._worker: Optional[asyncio.Task] = None

    def submit(self, session_id: str, text: str) -> asyncio.Task:
        """Record a new snapshot and restart the session's debounce timer."""
        self.store.update_text(session_id, text)
        previous = self._pending.get(session_id)
        if previous is not None and not previous.done():
            previous.cancel()
        task = asyncio.get_running_loop().create_task(self._debounced(session_id, text))
        self._pending[session_id] = task
        return task

    async def _debounced(self, session_id: str, text: str) -> None:
        await asyncio.sleep(self.debounce_ms / 1000)
        try:
            await self.check(session_id, text)
        finally:
            if self._pending.get(session_id) is asyncio.current_task():
                del self._pending[session_id]

    async def check(self, session_id: str, text: str) -> Optional[List[Lint]]:
        """Run the fast pass, publish it, then queue the AI pass."""
        if not self.store.is_enabled(session_id):
            lints: List[Lint] = []
        else:
            lints = await self.pipeline.lint(text)

        try:
            self.aggregator.publish(session_id, text, lints)
        except StaleResult:
            logger.debug("Dropping stale lints for session %s", session_id)
            return None

        if self._worker is not None and self.store.is_enabled(session_id):
            self._queue.put_nowait((session_id, text))
        return lints

    def start(self) -> None:
        if self._worker is None:
            self._worker = asyncio.get_running_loop().create_task(self._run())

    async def stop(self) -> None:
        tasks = list(self._pending.values())
        if self._worker is not None:
            tasks.append(self._worker)
            self._worker = None
        self._pending.clear()
        for task in tasks:
            task.cancel()
        for task in tasks:
            with contextlib.suppress(asyncio.CancelledError):
                await task

    async def wait_idle(self) -> None:
        """Wait for pending debounced passes and queued AI requests."""
        while self._pending:
            await asyncio.gather(*self._pending.values(), return_exceptions=True)
        if self._worker is not None:
            await self._queue.join()

    async def _run(self) -> None:
        while True:
            session_id, text = await self._queue.get()
            try:
                await self._review(session_id, text)
            except Exception:
                logger.exception("AI review failed for session %s", session_id)
            finally:
                self._queue.task_done()

    async def _review(self, session_id: str, text: str) -> None:
        if self.store.current_text(session_id) != text:
            logger.debug("Skipping AI review of stale snapshot for session %s", session_id)
            return
        ai_lints = await self.pipeline.proofread(text)
        if not ai_lints:
            return
        try:
            self.aggregator.splice_ai(session_id, text, ai_lints)
        except StaleResult:
            logger.debug("Dropping stale AI lints for session %s", session_id)
