"""
API error handler module
"""
from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from caseflow.utils.exceptions import (
    NotFoundError,
    InvalidStateError,
    ConflictError,
    AccessDeniedError,
    ValidationFailedError,
    DatabaseError
)
from caseflow.utils.response import error_response
from caseflow.utils.logger import get_logger

logger = get_logger(__name__)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Request schema validation error handler"""
    errors = exc.errors()
    error_details = {
        "field": errors[0].get("loc")[-1] if errors else None,
        "message": errors[0].get("msg") if errors else "validation error"
    }

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=error_response(
            code="VALIDATION_ERROR",
            message="Request validation failed",
            details=error_details
        )
    )


async def not_found_handler(request: Request, exc: NotFoundError):
    """Missing record handler"""
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content=error_response(
            code="NOT_FOUND",
            message=str(exc),
            details={"resource": exc.resource, "id": exc.resource_id}
        )
    )


async def invalid_state_handler(request: Request, exc: InvalidStateError):
    """Illegal transition handler"""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_response(
            code="INVALID_STATE",
            message=str(exc),
            details={"current_status": exc.current_status} if exc.current_status else None
        )
    )


async def conflict_handler(request: Request, exc: ConflictError):
    """Duplicate record handler"""
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content=error_response(
            code="CONFLICT",
            message=str(exc)
        )
    )


async def access_denied_handler(request: Request, exc: AccessDeniedError):
    """Access denied handler"""
    logger.warning(f"Access denied: {request.method} {request.url.path} - {str(exc)}")
    return JSONResponse(
        status_code=status.HTTP_403_FORBIDDEN,
        content=error_response(
            code="ACCESS_DENIED",
            message=str(exc)
        )
    )


async def validation_failed_handler(request: Request, exc: ValidationFailedError):
    """Case data validation handler"""
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=error_response(
            code="VALIDATION_FAILED",
            message=str(exc),
            details={"field": exc.field} if exc.field else None
        )
    )


async def database_error_handler(request: Request, exc: DatabaseError):
    """Database error handler"""
    logger.error(f"Database error: {str(exc)}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response(
            code="DATABASE_ERROR",
            message="A database error occurred."
        )
    )


async def general_exception_handler(request: Request, exc: Exception):
    """Fallback handler"""
    logger.error(f"Unexpected error: {str(exc)}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response(
            code="INTERNAL_SERVER_ERROR",
            message="Internal server error."
        )
    )


def register_error_handlers(app) -> None:
    """Attach every handler to the application"""
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(InvalidStateError, invalid_state_handler)
    app.add_exception_handler(ConflictError, conflict_handler)
    app.add_exception_handler(AccessDeniedError, access_denied_handler)
    app.add_exception_handler(ValidationFailedError, validation_failed_handler)
    app.add_exception_handler(DatabaseError, database_error_handler)
    app.add_exception_handler(Exception, general_exception_handler)
