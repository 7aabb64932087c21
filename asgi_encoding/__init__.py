from .accept import AcceptEncoding, Preference, parse_accept_encoding
from .base import CompressionAlgorithm, ConfigurationError, ContentEncoding
from .deflate import DeflateAlgorithm
from .gzip import GzipAlgorithm
from .middleware import CompressionMiddleware, get_algorithm

__all__ = [
    "CompressionMiddleware",
    "CompressionAlgorithm",
    "ConfigurationError",
    "ContentEncoding",
    "GzipAlgorithm",
    "DeflateAlgorithm",
    "AcceptEncoding",
    "Preference",
    "parse_accept_encoding",
    "get_algorithm",
]
