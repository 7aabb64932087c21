import typing
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

from .types import (
    ACCEPT_ENCODING,
    CONTENT_ENCODING,
    CONTENT_LENGTH,
    ASGIApp,
    Headers,
    Message,
    Receive,
    Scope,
    Send,
)


class ContentEncoding(str, Enum):
    GZIP = "gzip"
    DEFLATE = "deflate"


class ConfigurationError(ValueError):
    """Raised when a compression filter is configured with invalid values."""


BODYLESS_STATUS_CODES = (204, 304)


async def unattached_send(message: Message) -> typing.NoReturn:
    raise RuntimeError("send awaitable not set")  # pragma: no cover


class CompressionResponder(ABC):
    """Base class for all compression responders.

    A responder lives for exactly one request. It stands in for the ``send``
    callable of the wrapped application and closes its compressor once the
    application returns, whether it returned normally or raised.
    """

    content_encoding: ContentEncoding

    def __init__(self, app: ASGIApp) -> None:
        self.app = app
        self._send: Send = unattached_send
        self._initial_message: Message = {}
        self._started = False
        self._passthrough = False

    async def __call__(
        self,
        scope: Scope,
        receive: Receive,
        send: Send,
    ) -> None:
        self._send = send
        try:
            await self.app(scope, receive, self.send_with_compression)
        finally:
            self.close()

    async def send_with_compression(self, message: Message) -> None:
        message_type = message["type"]
        if message_type == "http.response.start":
            # Don't send the initial message until we've determined how to
            # modify the outgoing headers correctly.
            self._initial_message = message
            headers = Headers(raw=self._initial_message.get("headers", []))
            status = self._initial_message.get("status", 200)
            # Already encoded by the application, never encode twice.
            # Responses that carry no body must not get a compressed one.
            self._passthrough = (
                CONTENT_ENCODING in headers
                or status < 200
                or status in BODYLESS_STATUS_CODES
            )

        elif message_type == "http.response.body" and self._passthrough:
            if not self._started:
                self._started = True
                await self._send(self._initial_message)
            await self._send(message)

        elif message_type == "http.response.body" and not self._started:
            self._started = True
            body = message.get("body", b"")
            more_body = message.get("more_body", False)

            message["body"] = self.apply_compression(body, more_body=more_body)

            headers = Headers(raw=self._initial_message.get("headers", []))
            headers.add_vary_header(ACCEPT_ENCODING)
            headers[CONTENT_ENCODING] = self.content_encoding.value
            if more_body:
                # Streaming response, the final size is unknown.
                if CONTENT_LENGTH in headers:
                    del headers[CONTENT_LENGTH]
            else:
                headers[CONTENT_LENGTH] = str(len(message["body"]))

            self._initial_message["headers"] = headers.encode()
            await self._send(self._initial_message)
            await self._send(message)

        elif message_type == "http.response.body":
            # Remaining body in streaming response.
            body = message.get("body", b"")
            more_body = message.get("more_body", False)

            message["body"] = self.apply_compression(body, more_body=more_body)
            await self._send(message)

        else:
            # Extensions such as trailers or pathsend pass through unchanged.
            if not self._started and self._initial_message:
                self._started = True
                await self._send(self._initial_message)
            await self._send(message)

    @abstractmethod
    def apply_compression(self, body: bytes, *, more_body: bool) -> bytes:
        """Apply compression on the response body.

        If more_body is False, the compressed stream is finished and the
        returned bytes include its trailer.
        """
        raise NotImplementedError

    @property
    @abstractmethod
    def closed(self) -> bool:
        raise NotImplementedError

    @abstractmethod
    def close(self) -> None:
        """Release the compressor. Must be safe to call more than once."""
        raise NotImplementedError


@dataclass
class CompressionAlgorithm(ABC):
    """Base class for compression algorithms."""

    type: ContentEncoding

    def create_responder(self, app: ASGIApp) -> "CompressionResponder":
        """Create a responder for this compression algorithm."""
        raise NotImplementedError
