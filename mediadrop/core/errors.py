"""Upload failures and the handler boundary that turns them into responses."""

import logging
from enum import Enum
from typing import Optional

from fastapi import Request
from starlette.responses import PlainTextResponse


logger = logging.getLogger(__name__)


class ErrorKind(str, Enum):
    OVERSIZE = "oversize"
    MALFORMED = "malformed"
    UNSUPPORTED = "unsupported"
    INTERNAL = "internal"


TYPED_STATUS = {
    ErrorKind.OVERSIZE: 413,
    ErrorKind.MALFORMED: 400,
    ErrorKind.UNSUPPORTED: 415,
    ErrorKind.INTERNAL: 500,
}


class UploadError(Exception):
    """A rejected or failed upload.

    `message` is what the client sees; `cause` is the underlying exception,
    kept for the log line only.
    """

    def __init__(self, kind: ErrorKind, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.cause = cause

    def status_code(self, typed: bool = False) -> int:
        return TYPED_STATUS[self.kind] if typed else 500


async def upload_error_handler(request: Request, exc: UploadError) -> PlainTextResponse:
    settings = getattr(request.app.state, "settings", None)
    code = exc.status_code(typed=bool(settings and settings.typed_status_codes))
    logger.error(
        "Handler error : status code : %d, message :%s, underlying err : %r",
        code,
        exc.message,
        exc.cause,
    )
    return PlainTextResponse(exc.message, status_code=code)
