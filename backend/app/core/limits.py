# app/core/limits.py
"""
Request body ceiling.

Counts the bytes actually received, so chunked bodies without a
Content-Length are held to the same MAX_BODY_BYTES limit as declared ones.
"""
import logging

from fastapi import status
from fastapi.responses import JSONResponse
from fastapi.datastructures import Headers

from app.config import settings

logger = logging.getLogger("uvicorn.error")


class BodyTooLarge(Exception):
    pass


def _too_large_response() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
        content={"success": False, "error": {"code": "PAYLOAD_TOO_LARGE", "message": "Request body too large"}},
    )


class BodySizeLimitMiddleware:
    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        limit = settings.max_body_bytes
        length = Headers(scope=scope).get("content-length")
        if length and length.isdigit() and int(length) > limit:
            await _too_large_response()(scope, receive, send)
            return

        received = 0
        exceeded = False
        response_started = False

        async def limited_receive():
            nonlocal received, exceeded
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > limit:
                    exceeded = True
                    raise BodyTooLarge()
            return message

        async def guarded_send(message):
            nonlocal response_started
            # Whatever the app renders for the aborted body read is replaced by the 413
            if exceeded:
                return
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, limited_receive, guarded_send)
        except BodyTooLarge:
            pass

        if exceeded and not response_started:
            logger.warning("[http] body over %s bytes on %s %s", limit, scope.get("method"), scope.get("path"))
            await _too_large_response()(scope, receive, send)
