"""FastAPI application factory."""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import get_settings
from app.exceptions import ChatServiceError, RateLimited
from app.infra.logging_config import LoggingConfig, get_logger
from app.routers.guest_router import guest_router
from app.routers.maintenance_router import maintenance_router
from app.routers.messages_router import messages_router
from app.routers.profiles_router import profiles_router
from app.routers.realtime_router import realtime_router
from app.routers.system import router as system_router

logger = get_logger("api")


def _error_body(error: str, message: str) -> dict:
    return {"error": error, "message": message}


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ChatServiceError)
    async def chat_service_error_handler(request: Request, exc: ChatServiceError):
        body = _error_body(exc.error, exc.message)
        headers = None
        if isinstance(exc, RateLimited):
            body["retryAfter"] = exc.retry_after
            headers = {"Retry-After": str(exc.retry_after)}
        if exc.status_code >= 500:
            logger.error(
                "%s %s failed: %s", request.method, request.url.path, exc.message
            )
        return JSONResponse(status_code=exc.status_code, content=body, headers=headers)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        first = exc.errors()[0] if exc.errors() else {}
        field = ".".join(str(p) for p in first.get("loc", ())[1:]) or "body"
        message = f"{field}: {first.get('msg', 'invalid value')}"
        return JSONResponse(status_code=400, content=_error_body("invalid_input", message))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500, content=_error_body("server_error", "Internal error")
        )


def create_app(testing: bool = False) -> FastAPI:
    settings = get_settings()
    LoggingConfig()
    app = FastAPI(title=settings.app_name)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    app.include_router(system_router)
    app.include_router(guest_router)
    app.include_router(profiles_router)
    app.include_router(messages_router)
    app.include_router(maintenance_router)
    app.include_router(realtime_router)

    if not testing:
        logger.info("%s started (environment=%s)", settings.app_name, settings.environment)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(app, host="0.0.0.0", port=settings.port, log_level=settings.log_level.lower())
