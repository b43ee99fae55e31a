import logging
import traceback

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from foodapi.config import Config
from foodapi.errors import ErrorType, ERROR_STATUS_MAP

logger = logging.getLogger(__name__)


class AppException(Exception):
    """Custom exception that services, repositories and routers can raise."""

    def __init__(self, error_type: ErrorType, message: str, detail: str | None = None):
        self.error_type = error_type
        self.message = message
        self.detail = detail
        super().__init__(message)

    @property
    def status_code(self) -> int:
        return ERROR_STATUS_MAP.get(self.error_type, 500)


def server_error(exc: Exception) -> AppException:
    """Wrap an unexpected failure so it renders as a generic 500."""
    return AppException(ErrorType.INTERNAL_ERROR, "Server error", detail=str(exc))


def _debug_fields(exc: BaseException) -> dict:
    """Raw error detail, only exposed in development mode."""
    if not Config.is_development():
        return {}
    return {
        "error": str(exc),
        "stack": "".join(traceback.format_exception(exc)),
    }


async def app_exception_handler(_request: Request, exc: AppException) -> JSONResponse:
    """Global handler for AppException - converts to the JSON envelope."""
    status_code = exc.status_code
    content = {"success": False, "message": exc.message}

    if status_code < 500:
        if exc.detail:
            content["error"] = exc.detail
    else:
        cause = exc.__cause__ or exc
        content.update(_debug_fields(cause))

    return JSONResponse(status_code=status_code, content=content)


async def validation_exception_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
    """Path and query parameter validation failures."""
    errors = "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
        for err in exc.errors()
    )
    return JSONResponse(
        status_code=422,
        content={"success": False, "message": "Invalid request", "error": errors}
    )


async def generic_exception_handler(_request: Request, exc: Exception) -> JSONResponse:
    """Global handler for unhandled exceptions - returns 500."""
    logger.error(f"Unhandled exception: {exc}", exc_info=exc)
    content = {"success": False, "message": "Server error"}
    content.update(_debug_fields(exc))
    return JSONResponse(status_code=500, content=content)
