# api/main.py

import os
import logging
import logging.config
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import List, Optional

import yaml
from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware

from api.schemas import (
    EnabledRequest,
    FixDocumentRequest,
    FixDocumentResponse,
    FixRequest,
    FixResponse,
    ImproveRequest,
    ImproveResponse,
    LintRequest,
    LintResponse,
    LintSchema,
    NodeSchema,
    SessionLintsResponse,
)
from proofing.models import Lint
from proofing.pipeline import LintPipeline, LintService
from proofing.policy import Settings, load_settings
from proofing.resolve import LintAggregator, LintUpdate
from proofing.session import SessionStore
from proofing.transform import apply_batch, apply_text_fixes
from proofing.tree import Node, flatten

SETTINGS_PATH = os.environ.get("PROOFING_SETTINGS", os.path.join("configs", "settings.yaml"))


def setup_logging():
    cfg_path = os.path.join("configs", "logging.yaml")
    if os.path.exists(cfg_path):
        try:
            with open(cfg_path, "r", encoding="utf-8") as f:
                config = yaml.safe_load(f)
            os.makedirs("logs", exist_ok=True)
            logging.config.dictConfig(config)
        except (OSError, ValueError, yaml.YAMLError) as e:
            print(f"[logging] Failed to load logging.yaml: {e}")
            logging.basicConfig(level=logging.INFO)
    else:
        logging.basicConfig(level=logging.INFO)


setup_logging()
logger = logging.getLogger("api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    service = getattr(app.state, "lint_service", None)
    app.state.lint_service = None
    if service is not None:
        await service.stop()


app = FastAPI(
    title="Proofing Service",
    version="0.1.0",
    description="Grammar, spelling and style linting with structure-preserving fixes.",
    lifespan=lifespan,
)

origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    if os.path.exists(SETTINGS_PATH):
        return load_settings(SETTINGS_PATH)
    logger.info("No settings file at %s, using defaults", SETTINGS_PATH)
    return Settings.default()


@lru_cache(maxsize=1)
def get_pipeline() -> LintPipeline:
    return LintPipeline.from_settings(get_settings())


@lru_cache(maxsize=1)
def get_store() -> SessionStore:
    return SessionStore(enabled_by_default=get_settings().enabled_by_default)


def get_aggregator(store: SessionStore = Depends(get_store)) -> LintAggregator:
    return LintAggregator(store)


def _log_update(update: LintUpdate) -> None:
    logger.debug(
        "Session %s updated (%s, %d lints)", update.session_id, update.event, len(update.lints)
    )


async def get_service(
    request: Request,
    pipeline: LintPipeline = Depends(get_pipeline),
    store: SessionStore = Depends(get_store),
    aggregator: LintAggregator = Depends(get_aggregator),
) -> LintService:
    """One service per running app; its AI worker lives on the server loop."""
    service = getattr(request.app.state, "lint_service", None)
    if service is None:
        service = LintService(
            pipeline, store, aggregator, debounce_ms=pipeline.settings.linting.debounce_ms
        )
        aggregator.subscribe(_log_update)
        service.start()
        request.app.state.lint_service = service
    return service


def _to_lints(schemas: List[LintSchema]) -> List[Lint]:
    try:
        return [s.to_lint() for s in schemas]
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


async def _lints_for(text: str, given: Optional[List[LintSchema]], pipeline: LintPipeline) -> List[Lint]:
    if given is not None:
        return _to_lints(given)
    return await pipeline.lint(text)


@app.post("/lint", response_model=LintResponse)
async def lint(
    req: LintRequest,
    pipeline: LintPipeline = Depends(get_pipeline),
    store: SessionStore = Depends(get_store),
    service: LintService = Depends(get_service),
) -> LintResponse:
    logger.info("Received /lint request (%d chars)", len(req.text))
    if req.session_id is None:
        lints = await pipeline.lint(req.text)
    else:
        # publishes the fast pass and queues the AI pass; None when superseded
        store.update_text(req.session_id, req.text)
        lints = await service.check(req.session_id, req.text) or []
    return LintResponse(lints=[LintSchema.from_lint(l) for l in lints])


@app.post("/fix", response_model=FixResponse)
async def fix(req: FixRequest, pipeline: LintPipeline = Depends(get_pipeline)) -> FixResponse:
    logger.info("Received /fix request")
    lints = await _lints_for(req.text, req.lints, pipeline)
    fixed, result = apply_text_fixes(req.text, lints, window=pipeline.settings.relocate_window)
    return FixResponse(
        text=fixed,
        applied=result.applied,
        failed=result.failed,
        skipped=result.skipped,
    )


@app.post("/fix-document", response_model=FixDocumentResponse)
async def fix_document(
    req: FixDocumentRequest,
    pipeline: LintPipeline = Depends(get_pipeline),
) -> FixDocumentResponse:
    logger.info("Received /fix-document request")
    root = Node.from_dict(req.document.model_dump())
    lints = await _lints_for(flatten(root).text, req.lints, pipeline)
    result = apply_batch(root, lints, window=pipeline.settings.relocate_window)
    return FixDocumentResponse(
        document=NodeSchema.model_validate(root.to_dict()),
        text=flatten(root).text,
        applied=result.applied,
        failed=result.failed,
        skipped=result.skipped,
    )


@app.post("/improve", response_model=ImproveResponse)
async def improve(req: ImproveRequest, pipeline: LintPipeline = Depends(get_pipeline)) -> ImproveResponse:
    logger.info("Received /improve request (tone=%s)", req.tone)
    try:
        result = await pipeline.improve(req.text, req.tone)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return ImproveResponse(available=result.available, text=result.text)


@app.put("/sessions/{session_id}/enabled", response_model=SessionLintsResponse)
def set_enabled(
    session_id: str,
    req: EnabledRequest,
    store: SessionStore = Depends(get_store),
) -> SessionLintsResponse:
    store.set_enabled(session_id, req.enabled)
    return _session_view(session_id, store)


@app.get("/sessions/{session_id}/lints", response_model=SessionLintsResponse)
def session_lints(session_id: str, store: SessionStore = Depends(get_store)) -> SessionLintsResponse:
    return _session_view(session_id, store)


def _session_view(session_id: str, store: SessionStore) -> SessionLintsResponse:
    return SessionLintsResponse(
        session_id=session_id,
        enabled=store.is_enabled(session_id),
        lints=[LintSchema.from_lint(l) for l in store.get_lints(session_id)],
    )
