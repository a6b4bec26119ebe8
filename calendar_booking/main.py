# calendar_booking/main.py
import logging
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from calendar_booking.api.dependencies.calendar import get_credential_store
from calendar_booking.api.routes import auth, calendar, health
from calendar_booking.core.config import get_settings
from calendar_booking.core.errors import ApiError
from calendar_booking.core.logging_config import configure_logging

logger = logging.getLogger(__name__)


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(
        status_code=int(exc.status_code),
        content={"success": False, "message": exc.message},
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = "; ".join(err.get("msg", "") for err in exc.errors() if err.get("msg"))
    message = f"Invalid request: {details}" if details else "Invalid request"
    return JSONResponse(
        status_code=HTTPStatus.BAD_REQUEST,
        content={"success": False, "message": message},
    )


def create_app() -> FastAPI:
    """
    Application factory for the Calendar Booking API.
    """
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title=settings.APP_NAME,
        description=(
            "Backend service exposing calendar availability and appointment booking\n"
            "on a Google Calendar using delegated OAuth2 credentials."
        ),
        version="0.1.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    # Routers
    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(calendar.router)

    @app.on_event("startup")
    async def on_startup() -> None:  # pragma: no cover
        get_credential_store().load()
        logger.info("To authenticate, visit /auth")

    return app


app = create_app()


def main() -> None:  # pragma: no cover
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "calendar_booking.main:app",
        host="0.0.0.0",
        port=settings.PORT,
    )


if __name__ == "__main__":  # pragma: no cover
    main()
