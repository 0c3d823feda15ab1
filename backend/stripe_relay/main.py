import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from stripe_relay.api.errors import register_error_handlers
from stripe_relay.api.routes import (
    customers,
    health,
    invoices,
    payment_methods,
    subscriptions,
    utility,
    webhook,
)
from stripe_relay.core.config import get_settings
from stripe_relay.middleware.body_size import BodySizeLimitMiddleware
from stripe_relay.middleware.security_headers import SecurityHeadersMiddleware

# Any localhost port is allowed outside production
LOCAL_ORIGIN_REGEX = r"https?://(localhost|127\.0\.0\.1)(:\d+)?"

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Warn about missing secrets; the affected routes fail closed on their own."""
    if settings.stripe_secret_key is None:
        logger.warning("STRIPE_SECRET_KEY is missing, Stripe API routes will fail")
    if settings.stripe_webhook_secret is None:
        logger.warning("STRIPE_WEBHOOK_SECRET is missing, webhooks will be refused")
    logger.info(f"Stripe relay starting in {settings.env} mode")
    yield


app = FastAPI(
    title="Stripe Relay",
    description="REST relay for Stripe customers, billing and webhooks",
    version="1.0.0",
    lifespan=lifespan,
)

# Add body size middleware
app.add_middleware(BodySizeLimitMiddleware, max_size=settings.max_body_size)

# Add security headers middleware
app.add_middleware(SecurityHeadersMiddleware)

# Add CORS middleware using settings.allowed_origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.origins,
    allow_origin_regex=None if settings.is_production else LOCAL_ORIGIN_REGEX,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    allow_credentials=True,
)

register_error_handlers(app)

app.include_router(health.router)
for module in (customers, payment_methods, subscriptions, invoices, utility, webhook):
    app.include_router(module.router, prefix="/api/stripe")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("stripe_relay.main:app", host="0.0.0.0", port=settings.port)
