# tasks_api/main.py
import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tasks_api.core.clock import utc_now
from tasks_api.core.config import Settings, get_settings
from tasks_api.core.errors import AppError
from tasks_api.core.logging_config import setup_logging
from tasks_api.repositories.task_repository import TaskRepository
from tasks_api.routers import task
from tasks_api.services.task_service import TaskService

logger = logging.getLogger(__name__)


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": {"message": message, "statusCode": status_code}},
    )


def _install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        logger.info("%s %s -> %s %s", request.method, request.url.path, exc.status_code, exc.message)
        return _error_response(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        if errors:
            first = errors[0]
            loc = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
            message = f"{loc}: {first.get('msg')}" if loc else str(first.get("msg"))
        else:
            message = "Invalid request"
        logger.warning("%s %s -> 400 %s", request.method, request.url.path, message)
        return _error_response(status.HTTP_400_BAD_REQUEST, message)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error")


def create_app(
    settings: Optional[Settings] = None,
    service: Optional[TaskService] = None,
) -> FastAPI:
    """
    Build the app with one store + one service, registered on app.state.
    Tests pass their own settings/service.
    """
    settings = settings or get_settings()
    setup_logging(settings.log_level_value)

    if service is None:
        service = TaskService(
            TaskRepository(),
            default_page_size=settings.default_page_size,
            max_page_size=settings.max_page_size,
        )

    app = FastAPI(
        title="Task Query Service",
        version=settings.app_version,
    )
    app.state.task_service = service

    # CORS
    origins = settings.cors_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _install_error_handlers(app)

    # 라우터 등록
    app.include_router(task.router)

    @app.get("/health")
    def health_app():
        return {"status": "ok", "timestamp": utc_now().isoformat()}

    logger.info("app ready env=%s version=%s", settings.app_env, settings.app_version)
    return app
