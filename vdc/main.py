# vdc/main.py

import logging
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import Depends, FastAPI, Request, status
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

from vdc.config import Settings, parse_args
from vdc.dal import DalAdapter, DalClient, DalConnectionError, connect_dal, mock_payload
from vdc.emitter import Emitter
from vdc.logs import configure_logging

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, OPTIONS, HEAD",
    "Access-Control-Allow-Headers": "Accept, Content-Type, Content-Length, Accept-Encoding, Authorization, X-DITAS-CALLBACK",
}
NOT_FOUND_PAYLOAD = {"msg": "content not found"}


def request_uri(request: Request) -> str:
    """The request target as the client sent it, still percent-encoded"""
    raw_path = request.scope.get("raw_path")
    if raw_path:
        path = raw_path.split(b"?", 1)[0].decode("latin-1")
    else:
        path = request.url.path
    query = request.scope.get("query_string", b"").decode("latin-1")
    return f"{path}?{query}" if query else path


async def read_body(request: Request) -> str:
    body = await request.body()
    return body.decode("utf-8", errors="replace")


def create_app(settings: Settings, channel=None) -> FastAPI:
    """
    Builds the vdc app. channel is the already connected dal channel,
    None means the service answers with mock data only.
    """
    emitter = Emitter.from_settings(settings)
    adapter = DalAdapter(DalClient(channel), emitter) if channel is not None else None

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        if channel is not None:
            channel.close()
            logger.info("Closed dal connection.")

    # no docs routes, every path except /ask is unknown
    app = FastAPI(title="Mock VDC", lifespan=lifespan, docs_url=None, redoc_url=None, openapi_url=None)

    @app.get("/ask")
    def ask(request: Request, body: str = Depends(read_body)):
        """Answers with the dal's message, or the mock message if there is none"""
        emitter.log(f"[{request.method}] {request_uri(request)}")
        emitter.trace(request.headers, "vdc-request")

        emitter.log(f"- {body} ")

        if adapter is not None:
            payload = adapter.ask(request.headers)
        else:
            payload = mock_payload()

        response = JSONResponse(content=payload, status_code=status.HTTP_200_OK, headers=CORS_HEADERS)

        emitter.trace_close(request.headers, "vdc-request")
        return response

    @app.exception_handler(StarletteHTTPException)
    async def not_found(request: Request, exc: StarletteHTTPException):
        # a known path with the wrong method counts as unknown too
        if exc.status_code not in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
            return await http_exception_handler(request, exc)

        await run_in_threadpool(emitter.log, f"[{request.method}] {request_uri(request)}")

        status_code = status.HTTP_404_NOT_FOUND
        if settings.legacy_not_found_status:
            # the old service wrote the body before the status, so clients saw 200
            status_code = status.HTTP_200_OK
        return JSONResponse(content=NOT_FOUND_PAYLOAD, status_code=status_code)

    return app


def main(argv=None):
    settings = parse_args(argv)
    configure_logging(settings.log_level)

    channel = None
    if settings.dal_enabled:
        try:
            channel = connect_dal(settings.dal_endpoint, settings.dal_connect_timeout)
        except DalConnectionError as e:
            logger.error(f"could not connect to dal {e}")
            sys.exit(1)

    app = create_app(settings, channel)
    logger.info(f"started mock-vdc running at {settings.port}", extra={
        "dal": settings.dal_endpoint or None,
        "log": settings.log_endpoint or None,
        "trace": settings.trace_enabled,
    })
    uvicorn.run(app, host=settings.host, port=settings.port,
                timeout_keep_alive=60, log_config=None)


if __name__ == "__main__":
    main()
