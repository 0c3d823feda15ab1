import logging
from contextlib import contextmanager

import stripe
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from stripe_relay.core.config import ConfigError
from stripe_relay.services.stripe_verify import WebhookError

logger = logging.getLogger(__name__)


class RelayError(Exception):
    def __init__(self, message: str, status_code: int = 400, **extra):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.extra = extra


def require(condition, message: str) -> None:
    """Raise a 400 RelayError with ``message`` unless ``condition`` holds."""
    if not condition:
        raise RelayError(message)


@contextmanager
def empty_list_on_error(key: str):
    """Turn a Stripe error into a 400 that also carries ``key: []``."""
    try:
        yield
    except stripe.StripeError as exc:
        message = exc.user_message or str(exc)
        logger.error(f"Stripe error while listing {key}: {message}")
        raise RelayError(message, **{key: []})


def error_response(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message, **extra},
    )


async def relay_error_handler(request: Request, exc: RelayError):
    return error_response(exc.status_code, exc.message, **exc.extra)


async def stripe_error_handler(request: Request, exc: stripe.StripeError):
    message = exc.user_message or str(exc)
    logger.error(f"Stripe error on {request.method} {request.url.path}: {message}")
    return error_response(400, message)


async def webhook_error_handler(request: Request, exc: WebhookError):
    logger.error(f"Webhook signature verification failed: {exc}")
    return error_response(400, f"Webhook Error: {exc}")


async def config_error_handler(request: Request, exc: ConfigError):
    logger.error(f"Refusing {request.url.path}: {exc}")
    return error_response(500, "Service is not configured")


async def validation_error_handler(request: Request, exc: RequestValidationError):
    first = exc.errors()[0] if exc.errors() else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = first.get("msg", "Invalid request")
    return error_response(400, f"{field}: {message}" if field else message)


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404 and exc.detail == "Not Found":
        return error_response(404, "Endpoint not found")
    return error_response(exc.status_code, str(exc.detail))


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return error_response(500, "Internal server error")


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RelayError, relay_error_handler)
    app.add_exception_handler(stripe.StripeError, stripe_error_handler)
    app.add_exception_handler(WebhookError, webhook_error_handler)
    app.add_exception_handler(ConfigError, config_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
