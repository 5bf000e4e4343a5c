from fastapi import HTTPException, status
from fastapi.responses import JSONResponse
from loguru import logger

from app.core.config import settings

TOO_LARGE_DETAIL = "Request body is too large"


class RequestSizeLimitMiddleware:
    """
    Ограничение размера тела запроса (settings.max_request_size).

    Заявленный Content-Length проверяется до чтения тела. Тело без
    Content-Length (chunked) считается по мере чтения: как только лимит
    превышен, чтение прерывается ответом 413.
    """

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        limit = settings.max_request_size
        headers = dict(scope.get("headers") or [])
        content_length = headers.get(b"content-length", b"").decode("latin-1")
        if content_length.isdigit() and int(content_length) > limit:
            logger.warning(f"Rejected {scope['method']} {scope['path']}: body of {content_length} bytes")
            response = JSONResponse(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                content={"detail": TOO_LARGE_DETAIL},
            )
            await response(scope, receive, send)
            return

        received = 0

        async def limited_receive():
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > limit:
                    logger.warning(f"Rejected {scope['method']} {scope['path']}: streamed body over {limit} bytes")
                    # FastAPI пробрасывает HTTPException из разбора тела как есть
                    raise HTTPException(
                        status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                        detail=TOO_LARGE_DETAIL,
                    )
            return message

        await self.app(scope, limited_receive, send)
