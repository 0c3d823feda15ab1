from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp


class BodySizeLimitMiddleware(BaseHTTPMiddleware):
    """Reject requests whose declared body is larger than ``max_size`` bytes."""

    def __init__(self, app: ASGIApp, max_size: int = 1_048_576):  # 1 MiB
        super().__init__(app)
        self.max_size = max_size

    async def dispatch(self, request: Request, call_next) -> Response:
        content_length = request.headers.get("content-length")
        if content_length and content_length.isdigit():
            if int(content_length) > self.max_size:
                return JSONResponse(
                    status_code=413,
                    content={"success": False, "error": "Payload too large"},
                )
        return await call_next(request)
