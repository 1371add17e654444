"""Access logging in Combined Log Format.

One line per request, matched route or not:

    127.0.0.1 - - [19/Oct/2026:10:00:00 +0000] "POST /upload HTTP/1.1" 200 7 "-" "curl/8.5.0"
"""

import logging
from datetime import datetime
from typing import Optional

from starlette.responses import PlainTextResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from mediadrop.core.logging import ACCESS_LOGGER


def _header(scope: Scope, name: bytes) -> str:
    for key, value in scope.get("headers") or []:
        if key.lower() == name:
            return value.decode("latin-1")
    return "-"


def format_combined(scope: Scope, status: int, size: int, when: Optional[datetime] = None) -> str:
    when = when or datetime.now().astimezone()
    client = scope.get("client")
    host = client[0] if client else "-"
    target = scope.get("raw_path") or scope.get("path", "").encode("utf-8")
    if isinstance(target, bytes):
        target = target.decode("latin-1")
    query = scope.get("query_string") or b""
    if query:
        target = f"{target}?{query.decode('latin-1')}"
    request_line = f"{scope.get('method', '-')} {target} HTTP/{scope.get('http_version', '1.1')}"
    return '{} - - [{}] "{}" {} {} "{}" "{}"'.format(
        host,
        when.strftime("%d/%b/%Y:%H:%M:%S %z"),
        request_line,
        status,
        size,
        _header(scope, b"referer"),
        _header(scope, b"user-agent"),
    )


class CombinedLogMiddleware:
    def __init__(self, app: ASGIApp, logger_name: str = ACCESS_LOGGER) -> None:
        self.app = app
        self.logger = logging.getLogger(logger_name)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        status = 500
        size = 0
        started = False

        async def send_wrapper(message: Message) -> None:
            nonlocal status, size, started
            if message["type"] == "http.response.start":
                status = message["status"]
                started = True
            elif message["type"] == "http.response.body":
                size += len(message.get("body", b""))
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        except Exception:
            # ServerErrorMiddleware sends nothing once a response has started.
            if not started:
                await PlainTextResponse("Internal Server Error", status_code=500)(scope, receive, send_wrapper)
            raise
        finally:
            self.logger.info(format_combined(scope, status, size))
