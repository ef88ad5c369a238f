"""
Culture Snapshot API Server
===========================

Thin HTTP glue around the core engine and the completion adapter.

Endpoints:
- GET  /api/ping               -> configuration probe (no upstream call)
- GET  /api/selftest           -> one "Reply with OK." completion
- POST /api/analyze            -> snapshot -> narrative
- POST /api/analyze/aggregate  -> stored records -> aggregate -> narrative
- POST /api/prompt             -> snapshot -> PromptPayload (no upstream call)

Usage:
    uvicorn culture_engine.api.server:app --reload
"""
import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Header, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from adapter.generator import GenerationResult, ReportGenerator
from adapter.providers.base import ProviderErrorCode
from adapter.providers.openai import OpenAIChatProvider

from ..config import ServiceConfig
from ..contracts.base import (
    EmptyResult,
    Forbidden,
    InvalidInput,
    SnapshotError,
    StoreUnavailable,
    Unauthorized,
)
from ..core.aggregation import aggregate
from ..core.normalization import normalize_many
from ..core.prompts import build
from ..storage.rest import RestAssessmentStore
from ..storage.store import AssessmentStore
from .auth import AuthVerifier, HostedAuthVerifier, bearer_token, require_role
from .mapper import (
    analysis_body,
    prompt_config_from_body,
    record_filter_from_body,
    snapshot_from_body,
)
from .schemas import AggregateRequest, AnalyzeRequest


logger = logging.getLogger(__name__)

ERROR_STATUS = (
    (InvalidInput, 400),
    (Unauthorized, 401),
    (Forbidden, 403),
    (EmptyResult, 404),
    (StoreUnavailable, 503),
)


# =============================================================================
# APP FACTORY
# =============================================================================

def create_app(
    config: Optional[ServiceConfig] = None,
    generator: Optional[ReportGenerator] = None,
    store: Optional[AssessmentStore] = None,
    auth: Optional[AuthVerifier] = None,
) -> FastAPI:
    """
    Wire the service. Collaborators default to the hosted implementations
    named by `config`; the store and auth verifier stay None when no hosted
    store is configured.
    """
    config = config or ServiceConfig.from_env()

    if generator is None:
        generator = ReportGenerator(
            OpenAIChatProvider(
                api_key=config.openai_api_key,
                model=config.openai_model,
                base_url=config.openai_base_url,
            ),
            timeout_seconds=config.openai_timeout_seconds,
        )
    if store is None and config.has_store:
        store = RestAssessmentStore(config.store_url, config.store_key, table=config.records_table)
    if auth is None and config.has_store:
        auth = HostedAuthVerifier(config.store_url, config.store_key)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "culture snapshot service ready model=%s key=%s store=%s",
            config.openai_model, config.has_api_key, store is not None,
        )
        yield

    app = FastAPI(
        title="Culture Snapshot API",
        version="0.1.0",
        description="Culture snapshot aggregation and narrative generation",
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.generator = generator
    app.state.store = store
    app.state.auth = auth

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(config.allowed_origins),
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    _register_error_handlers(app)
    _register_routes(app)
    return app


def _register_error_handlers(app: FastAPI):

    @app.exception_handler(SnapshotError)
    async def snapshot_error_handler(request: Request, exc: SnapshotError):
        status = next((code for cls, code in ERROR_STATUS if isinstance(exc, cls)), 500)
        logger.warning("%s %s -> %s: %s", request.method, request.url.path, status, exc.message)
        return JSONResponse(status_code=status, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.warning("%s %s -> 400: invalid body", request.method, request.url.path)
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid request body", "detail": str(exc)},
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.exception("%s %s failed", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "server", "detail": str(exc)})


# =============================================================================
# ENDPOINTS
# =============================================================================

def _register_routes(app: FastAPI):
    config: ServiceConfig = app.state.config
    generator: ReportGenerator = app.state.generator

    @app.get("/api/ping")
    def ping():
        """Configuration probe. Never calls upstream."""
        return JSONResponse(
            content={
                "ok": True,
                "now": int(time.time() * 1000),
                "model": config.openai_model,
                "hasKey": config.has_api_key,
                "keyLength": len(config.openai_api_key),
            },
            headers={"Cache-Control": "no-store"},
        )

    @app.get("/api/selftest")
    def selftest():
        result = generator.health_check()
        if not result.success:
            return _generation_error(result, status=result.status_code)
        return {"ok": True, "model": result.model, "body": result.text}

    @app.post("/api/prompt")
    def prompt(body: AnalyzeRequest):
        """Render the PromptPayload without calling upstream."""
        snapshot = snapshot_from_body(body.snapshot)
        payload = build(snapshot, prompt_config_from_body(body, config.default_brand))
        return payload.as_dict()

    @app.post("/api/analyze")
    def analyze(body: AnalyzeRequest):
        snapshot = snapshot_from_body(body.snapshot)
        payload = build(snapshot, prompt_config_from_body(body, config.default_brand))

        result = generator.generate(payload)
        if not result.success:
            return _generation_error(result)
        return analysis_body(result)

    @app.post("/api/analyze/aggregate")
    def analyze_aggregate(
        body: AggregateRequest,
        authorization: Optional[str] = Header(default=None),
    ):
        store: Optional[AssessmentStore] = app.state.store
        auth: Optional[AuthVerifier] = app.state.auth
        if store is None or auth is None:
            raise StoreUnavailable("Assessment store not configured")

        principal = auth.verify(bearer_token(authorization))
        require_role(principal, config.allowed_roles)

        record_filter = record_filter_from_body(body.filter, config.record_limit)
        records = store.fetch_records(record_filter)
        snapshots = normalize_many(record.payload for record in records)
        if not snapshots:
            raise EmptyResult("No records found for filter")

        summary = aggregate(snapshots)
        payload = build(summary, prompt_config_from_body(body, config.default_brand))
        logger.info(
            "aggregate report user=%s records=%d usable=%d",
            principal.user_id, len(records), len(snapshots),
        )

        result = generator.generate(payload)
        if not result.success:
            return _generation_error(result)
        return analysis_body(result, summary)


def _generation_error(result: GenerationResult, status: Optional[int] = None) -> JSONResponse:
    """Map an upstream failure to the HTTP envelope (502 unless `status` is given)."""
    if result.error_code is ProviderErrorCode.TIMEOUT:
        return JSONResponse(status_code=504, content={"error": "Upstream timeout"})
    if result.error_code is ProviderErrorCode.NOT_CONFIGURED:
        return JSONResponse(status_code=500, content={"error": "Missing OPENAI_API_KEY"})

    content = {"error": "OpenAI error"}
    detail = result.detail or result.error_message
    if detail:
        content["detail"] = detail
    return JSONResponse(status_code=status or 502, content=content)


app = create_app()
