import gzip
import io
from dataclasses import dataclass

from .base import (
    CompressionAlgorithm,
    CompressionResponder,
    ConfigurationError,
    ContentEncoding,
)
from .types import ASGIApp


class GzipResponder(CompressionResponder):
    """Responder that applies gzip compression."""

    content_encoding = ContentEncoding.GZIP

    def __init__(self, app: ASGIApp, compresslevel: int = 9) -> None:
        super().__init__(app)

        self.gzip_buffer = io.BytesIO()
        self.gzip_file = gzip.GzipFile(
            mode="wb",
            fileobj=self.gzip_buffer,
            compresslevel=compresslevel,
        )

    def apply_compression(self, body: bytes, *, more_body: bool) -> bytes:
        self.gzip_file.write(body)
        if not more_body:
            self.gzip_file.close()

        body = self.gzip_buffer.getvalue()
        self.gzip_buffer.seek(0)
        self.gzip_buffer.truncate()
        return body

    @property
    def closed(self) -> bool:
        return self.gzip_file.closed and self.gzip_buffer.closed

    def close(self) -> None:
        self.gzip_file.close()
        self.gzip_buffer.close()


@dataclass
class GzipAlgorithm(CompressionAlgorithm):
    """Gzip compression algorithm."""

    type: ContentEncoding = ContentEncoding.GZIP
    compresslevel: int = 9

    def __post_init__(self) -> None:
        if (
            not isinstance(self.compresslevel, int)
            or not 0 <= self.compresslevel <= 9
        ):
            raise ConfigurationError(
                f"gzip compresslevel must be between 0 and 9, "
                f"got {self.compresslevel!r}"
            )

    def create_responder(self, app: ASGIApp) -> GzipResponder:
        return GzipResponder(app=app, compresslevel=self.compresslevel)
