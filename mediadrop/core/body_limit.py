"""Hard cap on the number of request body bytes a handler may consume."""

from starlette.requests import Request
from starlette.types import Message


class BodyTooLarge(Exception):
    def __init__(self, limit: int) -> None:
        super().__init__(f"request body too large (limit {limit} bytes)")
        self.limit = limit


def limit_body(request: Request, max_bytes: int) -> Request:
    """Return a view of `request` whose body stream fails past `max_bytes`.

    A declared Content-Length above the limit fails on the first read,
    before any body bytes are pulled from the client.
    """
    declared = request.headers.get("content-length")
    received = 0

    async def receive() -> Message:
        nonlocal received
        if declared is not None and declared.isdigit() and int(declared) > max_bytes:
            raise BodyTooLarge(max_bytes)
        message = await request.receive()
        if message["type"] == "http.request":
            received += len(message.get("body", b""))
            if received > max_bytes:
                raise BodyTooLarge(max_bytes)
        return message

    return Request(request.scope, receive)
