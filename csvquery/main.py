from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import FormData
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.formparsers import MultiPartException

from .config import Settings, load_settings
from .dispatch import OperationDispatcher, OperationRequest
from .errors import BadRequest, DatasetError, InvalidArgument
from .logctx import bind_request_id, setup_logging
from .models import HealthResponse, OperationError, OperationResponse, UploadRequest
from .rules import CORS_HEADERS, READ_OPERATION, UPLOAD_OPERATION

logger = logging.getLogger(__name__)


async def _inline_argument(request: Request) -> Any:
    try:
        body = await request.json()
    except ValueError as e:
        raise BadRequest(f"Request body must be JSON: {e}") from e
    if not isinstance(body, dict):
        raise InvalidArgument("Request body must be a JSON object")
    return UploadRequest.model_validate(body).file_content


def _require_multipart(request: Request) -> None:
    content_type = request.headers.get("content-type", "")
    if not content_type.lower().startswith("multipart/form-data"):
        raise BadRequest(f"Content-Type must be multipart/form-data, got {content_type or 'none'}")


async def _read_form(request: Request) -> FormData:
    _require_multipart(request)
    try:
        return await request.form()
    except MultiPartException as e:
        raise BadRequest(f"Invalid multipart body: {e.message}") from e
    except StarletteHTTPException as e:
        raise BadRequest(f"Invalid multipart body: {e.detail}") from e


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the HTTP app around one dispatcher.

    Settings are loaded from the environment only when not passed in. Serve with
    ``csv-query-api`` or ``uvicorn --factory csvquery.main:create_app``.
    """
    settings = settings or load_settings()

    app = FastAPI(
        title="csv-query-api",
        description="Read and preview a CSV dataset as delimiter-normalized text",
        version="0.1.0",
    )
    app.state.settings = settings
    app.state.dispatcher = OperationDispatcher(settings)

    app.middleware("http")(bind_request_id)

    @app.middleware("http")
    async def add_cors_headers(request: Request, call_next):
        # Preflight never reaches the dispatcher
        if request.method == "OPTIONS":
            resp = Response(status_code=200)
        else:
            resp = await call_next(request)
        resp.headers.update(CORS_HEADERS)
        return resp

    @app.exception_handler(DatasetError)
    async def dataset_error_handler(request: Request, exc: DatasetError):
        logger.warning("%s %s failed: %s: %s", request.method, request.url.path, exc.kind, exc.message)
        body = OperationResponse(errors=[OperationError(**exc.as_dict())])
        return JSONResponse(status_code=exc.status_code, content=body.model_dump())

    @app.get("/health", response_model=HealthResponse)
    def health():
        return {"ok": True}

    @app.get("/read", response_model=OperationResponse)
    def read_dataset(request: Request):
        dispatcher: OperationDispatcher = request.app.state.dispatcher
        text = dispatcher.dispatch(OperationRequest(READ_OPERATION))
        return {"data": {READ_OPERATION: text}, "errors": []}

    @app.post("/uploadCSV", response_model=OperationResponse)
    async def upload_csv(request: Request):
        dispatcher: OperationDispatcher = request.app.state.dispatcher

        if settings.upload_mode == "multipart":
            form = await _read_form(request)
            try:
                if settings.upload_field not in form:
                    raise BadRequest(f"Missing file part {settings.upload_field!r}")
                op = OperationRequest(UPLOAD_OPERATION, form[settings.upload_field])
                text = await run_in_threadpool(dispatcher.dispatch, op)
            finally:
                await form.close()
        else:
            op = OperationRequest(UPLOAD_OPERATION, await _inline_argument(request))
            text = await run_in_threadpool(dispatcher.dispatch, op)

        return {"data": {UPLOAD_OPERATION: text}, "errors": []}

    logger.info(
        "app ready: read_source=%s upload_mode=%s",
        settings.read_source,
        settings.upload_mode,
    )
    return app


def run() -> None:
    import uvicorn

    settings = load_settings()
    setup_logging(settings.log_level)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)
