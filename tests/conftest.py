import sys
import types
from typing import AsyncGenerator, get_args

import django
import pytest_asyncio
from django.conf import settings
from django.core.asgi import get_asgi_application
from django.http import HttpResponse, StreamingHttpResponse
from django.urls import path
from httpx import AsyncClient
from litestar import Litestar, MediaType, get
from litestar.response import Stream
from pytest import FixtureRequest
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import (
    PlainTextResponse,
    Response,
    StreamingResponse,
)
from starlette.routing import Route
from typing_extensions import assert_never

from asgi_encoding.base import CompressionAlgorithm
from asgi_encoding.deflate import DeflateAlgorithm
from asgi_encoding.gzip import GzipAlgorithm
from asgi_encoding.middleware import CompressionMiddleware
from asgi_encoding.types import ASGIApp

from .types import Encoding, Framework
from .utils import get_test_client


async def stream_chunks(chunk: bytes, count: int) -> AsyncGenerator[bytes, None]:
    for _ in range(count):
        yield chunk


def get_django_app() -> ASGIApp:
    if not settings.configured:
        settings.configure(
            ROOT_URLCONF="test_urls",
            ALLOWED_HOSTS=["*"],
            INSTALLED_APPS=[],
        )
        django.setup()

    urls_module = types.ModuleType("test_urls")
    sys.modules["test_urls"] = urls_module

    def homepage(_):
        return HttpResponse(b"x" * 4000, content_type="text/plain")

    def small_response(_):
        return HttpResponse(b"Hello world!", content_type="text/plain")

    def empty_response(_):
        return HttpResponse(b"", content_type="text/plain")

    def streaming_response(_):
        return StreamingHttpResponse(stream_chunks(b"x" * 400, 10))

    def streaming_response_with_content_encoding(_):
        return StreamingHttpResponse(
            stream_chunks(b"x" * 400, 10),
            headers={"Content-Encoding": "text"},
        )

    setattr(
        urls_module,
        "urlpatterns",
        [
            path("", homepage),
            path("small_response", small_response),
            path("empty_response", empty_response),
            path("streaming_response", streaming_response),
            path(
                "streaming_response_with_content_encoding",
                streaming_response_with_content_encoding,
            ),
        ],
    )

    return get_asgi_application()


def get_starlette_app() -> ASGIApp:
    def homepage(_: Request) -> PlainTextResponse:
        return PlainTextResponse("x" * 4000)

    def small_response(_: Request) -> PlainTextResponse:
        return PlainTextResponse("Hello world!")

    def empty_response(_: Request) -> Response:
        return Response(b"", media_type="text/plain")

    def streaming_response(_: Request) -> StreamingResponse:
        return StreamingResponse(
            stream_chunks(b"x" * 400, 10), status_code=200
        )

    def streaming_response_with_content_encoding(
        _: Request,
    ) -> StreamingResponse:
        return StreamingResponse(
            stream_chunks(b"x" * 400, 10),
            status_code=200,
            headers={"Content-Encoding": "text"},
        )

    return Starlette(
        routes=[
            Route("/", endpoint=homepage),
            Route("/small_response", endpoint=small_response),
            Route("/empty_response", endpoint=empty_response),
            Route("/streaming_response", endpoint=streaming_response),
            Route(
                "/streaming_response_with_content_encoding",
                endpoint=streaming_response_with_content_encoding,
            ),
        ]
    )


def get_litestar_app() -> ASGIApp:
    @get("/", media_type=MediaType.TEXT)
    async def homepage() -> str:
        return "x" * 4000

    @get("/small_response", media_type=MediaType.TEXT)
    async def small_response() -> str:
        return "Hello world!"

    @get("/empty_response", media_type=MediaType.TEXT)
    async def empty_response() -> str:
        return ""

    @get("/streaming_response")
    async def streaming_response() -> Stream:
        return Stream(stream_chunks(b"x" * 400, 10))

    @get("/streaming_response_with_content_encoding")
    async def streaming_response_with_content_encoding() -> Stream:
        return Stream(
            stream_chunks(b"x" * 400, 10),
            headers={"Content-Encoding": "text"},
        )

    return Litestar(
        route_handlers=[
            homepage,
            small_response,
            empty_response,
            streaming_response,
            streaming_response_with_content_encoding,
        ],
        logging_config=None,
    )  # type: ignore


def get_algorithm_for(encoding_name: str) -> CompressionAlgorithm:
    if encoding_name == "gzip":
        return GzipAlgorithm()
    elif encoding_name == "deflate":
        return DeflateAlgorithm()
    else:
        assert_never(encoding_name)  # type: ignore[arg-type]


@pytest_asyncio.fixture(
    params=[
        f"{framework}-{encoding}"
        for framework in get_args(Framework)
        for encoding in get_args(Encoding)
    ],
)
async def client(request: FixtureRequest) -> AsyncGenerator[AsyncClient, None]:
    framework_name, encoding_name = request.param.split("-")

    if framework_name == "django":
        app = get_django_app()
    elif framework_name == "starlette":
        app = get_starlette_app()
    elif framework_name == "litestar":
        app = get_litestar_app()
    else:
        assert_never(framework_name)  # type: ignore[arg-type]

    middleware = CompressionMiddleware(
        app=app,
        algorithm=get_algorithm_for(encoding_name),
        strict=True,
    )

    async with get_test_client(middleware) as client:
        yield client
