"""FastAPI application entrypoint for the petition endpoint.

A single catch-all route receives the petition form. The controller is
intentionally thin: the gatekeeper validates and normalizes the
request, the service stores the row and renders the document, and the
route turns the outcome into an HTTP response.

Responses:
- OPTIONS -> 204, CORS headers, empty body
- non-POST -> 405
- wrong X-API-Key (when API_KEY is set) -> 401
- storage failure -> 500 "Supabase insert error: <detail>"
- any other failure -> 500 with the traceback text
- success -> 200 application/pdf attachment
"""

import json
import logging
import os
import time
import traceback
import uuid

from fastapi import Depends, FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import PlainTextResponse, Response

from . import gatekeeper
from .config import Settings, get_settings
from .errors import RequestRejected, StorageInsertError
from .repositories import get_repository_factory
from .services import PetitionService
from .utils.filenames import content_disposition

app = FastAPI(title="Petition Submission API")
logger = logging.getLogger("petition.api")
if not logger.handlers:
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO"))

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def cors_headers(max_age: int) -> dict:
    return {
        "Access-Control-Allow-Origin": "*",
        "Access-Control-Allow-Methods": "POST, OPTIONS",
        "Access-Control-Allow-Headers": f"Content-Type, {gatekeeper.API_KEY_HEADER}",
        "Access-Control-Max-Age": str(max_age),
    }


def _current_settings() -> Settings:
    return app.dependency_overrides.get(get_settings, get_settings)()


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    req_id = request.headers.get("X-Request-ID", uuid.uuid4().hex)
    request.state.request_id = req_id
    started = time.perf_counter()
    response: Response
    try:
        response = await call_next(request)
    except Exception:
        elapsed_ms = round((time.perf_counter() - started) * 1000.0, 2)
        logger.exception(
            "request_failed %s",
            json.dumps(
                {
                    "request_id": req_id,
                    "path": request.url.path,
                    "method": request.method,
                    "duration_ms": elapsed_ms,
                    "client": request.client.host if request.client else "unknown",
                },
                ensure_ascii=True,
            ),
        )
        raise
    settings = getattr(request.state, "settings", None) or _current_settings()
    response.headers.update(cors_headers(settings.CORS_MAX_AGE))
    response.headers["X-Request-ID"] = req_id
    elapsed_ms = round((time.perf_counter() - started) * 1000.0, 2)
    logger.info(
        "request_done %s",
        json.dumps(
            {
                "request_id": req_id,
                "path": request.url.path,
                "method": request.method,
                "status_code": response.status_code,
                "duration_ms": elapsed_ms,
                "client": request.client.host if request.client else "unknown",
            },
            ensure_ascii=True,
        ),
    )
    return response


def _pdf_response(filename: str, content: bytes) -> Response:
    # header values go out as latin-1; carry the UTF-8 bytes of the name through unchanged
    disposition = content_disposition(filename).encode("utf-8").decode("latin-1")
    return Response(
        content=content,
        status_code=200,
        media_type="application/pdf",
        headers={"Content-Disposition": disposition},
    )


@app.api_route("/{path:path}", methods=ALL_METHODS)
async def submit_petition(
    request: Request,
    path: str,
    settings: Settings = Depends(get_settings),
    open_repository=Depends(get_repository_factory),
):
    """Store a petition and return it as a PDF download.

    The JSON body carries `ad`, `soyad`, `ogrno`, `mail`, `telefon`,
    `bolum`, `aciklama` and a `dersler` list of course conflicts. Every
    field is optional.
    """
    request.state.settings = settings
    if request.method == "OPTIONS":
        return Response(status_code=204)

    try:
        gatekeeper.ensure_method(request.method)
        gatekeeper.check_api_key(request.headers.get(gatekeeper.API_KEY_HEADER), settings.API_KEY)
        repository = open_repository(settings)
        submission = gatekeeper.parse_submission(await request.body())

        service = PetitionService(repository, settings)
        await run_in_threadpool(service.store, submission)
        document = await run_in_threadpool(service.render, submission)
    except RequestRejected as exc:
        headers = {"Allow": "POST, OPTIONS"} if exc.status_code == 405 else None
        return PlainTextResponse(exc.detail, status_code=exc.status_code, headers=headers)
    except StorageInsertError as exc:
        return PlainTextResponse(f"Supabase insert error: {exc.message}", status_code=500)
    except Exception:
        logger.exception("petition_failed %s", json.dumps({"path": request.url.path}, ensure_ascii=True))
        return PlainTextResponse(traceback.format_exc(), status_code=500)

    logger.info(
        "petition_rendered %s",
        json.dumps({"filename": document.filename, "bytes": len(document.content)}, ensure_ascii=True),
    )
    return _pdf_response(document.filename, document.content)
