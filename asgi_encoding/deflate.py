import zlib
from dataclasses import dataclass

from .base import (
    CompressionAlgorithm,
    CompressionResponder,
    ConfigurationError,
    ContentEncoding,
)
from .types import ASGIApp


class DeflateResponder(CompressionResponder):
    """Responder that applies raw deflate compression (RFC 1951)."""

    content_encoding = ContentEncoding.DEFLATE

    def __init__(
        self,
        app: ASGIApp,
        level: int = zlib.Z_DEFAULT_COMPRESSION,
    ) -> None:
        super().__init__(app)

        # negative wbits: raw deflate stream, no zlib header or checksum
        self.compressor = zlib.compressobj(
            level, zlib.DEFLATED, -zlib.MAX_WBITS
        )
        self._closed = False

    def apply_compression(self, body: bytes, *, more_body: bool) -> bytes:
        compressed = self.compressor.compress(body)
        if not more_body:
            compressed += self.compressor.flush(zlib.Z_FINISH)
            self._closed = True
        return compressed

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        if not self._closed:
            # finish the stream so zlib releases its state
            self.compressor.flush(zlib.Z_FINISH)
            self._closed = True


@dataclass
class DeflateAlgorithm(CompressionAlgorithm):
    """Deflate compression algorithm."""

    type: ContentEncoding = ContentEncoding.DEFLATE
    level: int = zlib.Z_DEFAULT_COMPRESSION

    def __post_init__(self) -> None:
        if not isinstance(self.level, int) or not -1 <= self.level <= 9:
            raise ConfigurationError(
                f"deflate level must be between -1 and 9, got {self.level!r}"
            )

    def create_responder(self, app: ASGIApp) -> DeflateResponder:
        return DeflateResponder(app=app, level=self.level)
