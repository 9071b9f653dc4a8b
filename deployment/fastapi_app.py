"""
FastAPI backend for the editor assistant sidebar.

Provides:
- Context file selection and usage stats
- Chat, completion and refactoring requests
- Chat transcript
- Provider configuration, health and metrics
"""

import logging
import time
import uuid
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from context import (
    AddFailure,
    ContextBudget,
    ContextErrorKind,
    ContextManager,
    ContextStats,
    FileReader,
    fixed_project_root,
)
from deployment.circuit_breaker import CircuitOpenError
from llm import (
    AssistantService,
    ChatResult,
    Conversation,
    LLMClient,
    LLMConfigurationError,
    LLMRequestError,
    get_providers,
)
from shared.config import Settings, get_settings
from shared.schemas import (
    AddFileError,
    AddFileRequest,
    AddFileResponse,
    ChatHistoryResponse,
    ChatMessageModel,
    ChatRequest,
    ChatResponse,
    CompleteRequest,
    ConfigResponse,
    ContextStatsResponse,
    ContextTextResponse,
    CurrentFileRequest,
    FileListResponse,
    HealthResponse,
    ProviderInfo,
    RefactorRequest,
    RemoveFileResponse,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

__version__ = "1.0.0"

_ADD_FAILURE_STATUS = {
    ContextErrorKind.DUPLICATE_ENTRY: 409,
    ContextErrorKind.READ_ERROR: 422,
    ContextErrorKind.NO_ACTIVE_FILE: 400,
}


def build_context_manager(settings: Settings) -> ContextManager:
    """Context manager sized and rooted from settings."""
    return ContextManager(
        budget=ContextBudget(
            max_tokens=settings.context.max_tokens,
            chars_per_token=settings.context.chars_per_token,
        ),
        reader=FileReader(max_file_size_mb=settings.context.max_file_size_mb),
        project_root=fixed_project_root(settings.context.project_root),
    )


def _stats_response(stats: ContextStats) -> ContextStatsResponse:
    return ContextStatsResponse(**stats.to_dict())


def _chat_response(result: ChatResult) -> ChatResponse:
    return ChatResponse(
        answer=result.answer,
        model=result.model,
        context=_stats_response(result.context_stats),
        prompt_tokens=result.prompt_tokens,
        usage=result.usage,
    )


def _add_failure_response(failure: AddFailure) -> JSONResponse:
    return JSONResponse(
        status_code=_ADD_FAILURE_STATUS[failure.kind],
        content=AddFileError(**failure.to_dict()).model_dump(),
    )


def _log_context_change(stats: ContextStats) -> None:
    logger.info(
        f"Context changed: {stats.file_count} files, "
        f"{stats.estimated_tokens}/{stats.max_tokens} tokens ({stats.percentage}%)"
    )


def create_app(
    settings: Optional[Settings] = None,
    context_manager: Optional[ContextManager] = None,
    llm_client: Optional[LLMClient] = None,
    conversation: Optional[Conversation] = None,
) -> FastAPI:
    """
    Build the API around explicitly owned state.

    The context manager, LLM client and transcript live on app.state for
    the lifetime of the app and are reset on shutdown.
    """
    settings = settings or get_settings()
    manager = context_manager or build_context_manager(settings)
    client = llm_client or LLMClient.from_settings(settings)
    assistant = AssistantService(manager, client, conversation=conversation)

    manager.on_change(_log_context_change)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            f"Starting editor assistant v{__version__} "
            f"(provider={client.provider}, context budget={manager.budget.max_tokens} tokens)"
        )
        yield
        logger.info("Shutting down editor assistant")
        manager.reset()

    app = FastAPI(
        title="Editor Context Assistant",
        description="Context-aware AI assistant backend for the editor sidebar",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.context_manager = manager
    app.state.assistant = assistant

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def add_request_id(request: Request, call_next):
        """Add request ID for tracing."""
        request_id = str(uuid.uuid4())[:8]
        request.state.request_id = request_id

        start_time = time.time()
        response = await call_next(request)

        duration_ms = (time.time() - start_time) * 1000
        logger.info(
            f"[{request_id}] {request.method} {request.url.path} "
            f"- {response.status_code} - {duration_ms:.1f}ms"
        )

        response.headers["X-Request-ID"] = request_id
        return response

    @app.exception_handler(CircuitOpenError)
    async def circuit_open_handler(request: Request, exc: CircuitOpenError):
        retry_after = max(1, int(round(exc.retry_after)))
        return JSONResponse(
            status_code=503,
            content={
                "error": "Provider temporarily unavailable",
                "detail": str(exc),
                "retry_after": retry_after,
            },
            headers={"Retry-After": str(retry_after)},
        )

    @app.exception_handler(LLMConfigurationError)
    async def llm_configuration_handler(request: Request, exc: LLMConfigurationError):
        return JSONResponse(
            status_code=400,
            content={"error": "Assistant not configured", "detail": str(exc)},
        )

    @app.exception_handler(LLMRequestError)
    async def llm_request_handler(request: Request, exc: LLMRequestError):
        return JSONResponse(
            status_code=502,
            content={"error": "Provider request failed", "detail": str(exc)},
        )

    @app.get("/health", response_model=HealthResponse)
    async def health_check():
        config = client.get_public_config()
        return HealthResponse(
            status="healthy" if config["has_api_key"] else "degraded",
            version=__version__,
            provider=config["provider"],
            has_api_key=config["has_api_key"],
            context_files=len(manager.get_files()),
        )

    @app.get("/context/files", response_model=FileListResponse)
    async def list_files():
        return FileListResponse(files=manager.get_files())

    @app.post("/context/files", response_model=AddFileResponse)
    async def add_file(body: AddFileRequest):
        result = await manager.add_file_async(
            body.path, timeout=settings.context.read_timeout
        )
        if not result.success:
            return _add_failure_response(result)
        return AddFileResponse(path=result.path, char_count=result.char_count)

    @app.post("/context/current", response_model=AddFileResponse)
    def add_current_file(body: CurrentFileRequest):
        result = manager.add_current_file(body.path)
        if not result.success:
            return _add_failure_response(result)
        return AddFileResponse(path=result.path, char_count=result.char_count)

    @app.delete("/context/files", response_model=RemoveFileResponse)
    async def remove_file(path: str):
        return RemoveFileResponse(removed=manager.remove_file(path))

    @app.post("/context/clear", response_model=ContextStatsResponse)
    async def clear_context():
        manager.clear_all()
        return _stats_response(manager.get_stats())

    @app.get("/context/stats", response_model=ContextStatsResponse)
    async def context_stats():
        return _stats_response(manager.get_stats())

    @app.get("/context/text", response_model=ContextTextResponse)
    async def context_text():
        text, stats = manager.snapshot()
        return ContextTextResponse(text=text, stats=_stats_response(stats))

    # Provider calls block, so these run in the threadpool
    @app.post("/chat", response_model=ChatResponse)
    def chat_endpoint(body: ChatRequest, request: Request):
        request_id = getattr(request.state, "request_id", "unknown")
        logger.info(f"[{request_id}] Chat request ({len(body.message)} chars)")
        result = assistant.chat(
            body.message,
            selected_text=body.selected_text,
            language=body.language,
            include_files=body.include_files,
        )
        return _chat_response(result)

    @app.post("/complete", response_model=ChatResponse)
    def complete_endpoint(body: CompleteRequest):
        return _chat_response(assistant.complete(body.code, language=body.language))

    @app.post("/refactor", response_model=ChatResponse)
    def refactor_endpoint(body: RefactorRequest):
        try:
            result = assistant.refactor(body.selected_text, language=body.language)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return _chat_response(result)

    @app.get("/chat/history", response_model=ChatHistoryResponse)
    async def chat_history():
        return ChatHistoryResponse(
            messages=[
                ChatMessageModel(**m.to_dict()) for m in assistant.conversation.messages()
            ]
        )

    @app.delete("/chat/history", response_model=ChatHistoryResponse)
    async def clear_chat_history():
        assistant.conversation.clear()
        return ChatHistoryResponse(messages=[])

    @app.get("/providers")
    async def providers():
        return {key: ProviderInfo(**value) for key, value in get_providers().items()}

    @app.get("/config", response_model=ConfigResponse)
    async def config():
        return ConfigResponse(**client.get_public_config())

    @app.get("/metrics")
    async def metrics_endpoint():
        summary = assistant.metrics.get_summary()
        summary["circuit_breaker"] = client.breaker.get_stats()
        return summary

    @app.post("/metrics/reset")
    async def reset_metrics():
        assistant.metrics.reset()
        return {"status": "reset"}

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(create_app(), host="127.0.0.1", port=8000)
