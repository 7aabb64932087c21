import logging
from typing import Optional, Union

from .accept import AcceptEncoding
from .base import CompressionAlgorithm, ConfigurationError, ContentEncoding
from .deflate import DeflateAlgorithm
from .gzip import GzipAlgorithm
from .types import (
    ACCEPT_ENCODING,
    CONTENT_LENGTH,
    ASGIApp,
    Headers,
    Message,
    Receive,
    Scope,
    Send,
)

logger = logging.getLogger(__name__)


def get_algorithm(
    encoding: Union[str, ContentEncoding],
    level: Optional[int] = None,
) -> CompressionAlgorithm:
    """Build the algorithm for a content-coding name.

    ``level`` is the compression level of that coding, the algorithm's
    default is used when it is omitted.
    """
    if isinstance(encoding, ContentEncoding):
        content_encoding = encoding
    else:
        try:
            content_encoding = ContentEncoding(str(encoding).strip().lower())
        except ValueError:
            raise ConfigurationError(
                f"unsupported content encoding: {encoding!r}"
            ) from None

    if content_encoding is ContentEncoding.GZIP:
        if level is None:
            return GzipAlgorithm()
        return GzipAlgorithm(compresslevel=level)

    if level is None:
        return DeflateAlgorithm()
    return DeflateAlgorithm(level=level)


class CompressionMiddleware:
    """
    ASGI middleware compressing responses with a single content-coding.

    Each request is checked against the client's Accept-Encoding header.
    When the coding is acceptable the response body is compressed on the
    fly; when it is not, the request is either rejected with
    406 Not Acceptable (strict) or handed to the application unchanged.
    """

    def __init__(
        self,
        app: ASGIApp,
        algorithm: CompressionAlgorithm,
        strict: bool = False,
    ) -> None:
        """
        Initialize the compression middleware.

        Args:
            app: The ASGI application.
            algorithm: The compression algorithm responses are encoded with.
            strict: Reject requests that do not accept the algorithm's
                encoding with 406 instead of serving them uncompressed.
        """
        if not isinstance(algorithm, CompressionAlgorithm):
            raise ConfigurationError(
                f"expected a CompressionAlgorithm, got {algorithm!r}"
            )

        self.app = app
        self.algorithm = algorithm
        self.strict = strict

    @property
    def encoding(self) -> str:
        return self.algorithm.type.value

    async def __call__(
        self, scope: Scope, receive: Receive, send: Send
    ) -> None:
        """ASGI application interface."""
        if scope["type"] != "http":  # pragma: no cover
            await self.app(scope, receive, send)
            return

        headers = Headers(scope=scope)
        accept_encoding = AcceptEncoding(headers.get_joined(ACCEPT_ENCODING))

        if accept_encoding.accepts(self.encoding):
            logger.debug(
                "Compressing response with %s, Accept-Encoding: %r",
                self.encoding,
                accept_encoding.value,
            )
            responder = self.algorithm.create_responder(self.app)
            await responder(scope, receive, send)
        elif self.strict:
            logger.debug(
                "Rejecting request, %s not acceptable, Accept-Encoding: %r",
                self.encoding,
                accept_encoding.value,
            )
            await self.send_not_acceptable(send)
        else:
            logger.debug(
                "Serving uncompressed response, %s not acceptable, "
                "Accept-Encoding: %r",
                self.encoding,
                accept_encoding.value,
            )
            await self.app(scope, receive, self.vary_send(send))

    def vary_send(self, send: Send) -> Send:
        """Wrap ``send`` so the response start carries ``Vary: Accept-Encoding``."""

        async def send_with_vary(message: Message) -> None:
            if message["type"] == "http.response.start":
                headers = Headers(raw=message.get("headers", []))
                headers.add_vary_header(ACCEPT_ENCODING)
                message["headers"] = headers.encode()
            await send(message)

        return send_with_vary

    async def send_not_acceptable(self, send: Send) -> None:
        headers = Headers({CONTENT_LENGTH: "0"})
        headers.add_vary_header(ACCEPT_ENCODING)

        await send(
            {
                "type": "http.response.start",
                "status": 406,
                "headers": headers.encode(),
            }
        )
        await send({"type": "http.response.body", "body": b""})
